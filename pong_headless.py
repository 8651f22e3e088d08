"""
Run rounds without a window.

ArrayRenderer paints each frame into a numpy RGB image, ScriptedInput replays
a fixed list of held keys. Together they drive RoundSimulator.update() the same
way the pygame front end does.
"""
import logging
from typing import List, Optional, Sequence

import numpy as np

from pong_config import ACCENT, BALL_SIZE, BG, PADDLE_SIZE, WHITE
from pong_sim import Bounds, Frame, HeldKeys, RoundSimulator

logger = logging.getLogger(__name__)


class ScriptedInput:
    def __init__(self, script: Sequence[HeldKeys] = (), screen_size=(400, 300)):
        self.script = list(script)
        self.size = screen_size
        self.t = 0

    def held_keys(self) -> HeldKeys:
        # nothing held once the script runs out
        keys = self.script[self.t] if self.t < len(self.script) else HeldKeys()
        self.t += 1
        return keys

    def screen_size(self):
        return self.size


class ArrayRenderer:
    def __init__(self, screen_size=(400, 300), background=BG, scale=1):
        self.W, self.H = int(screen_size[0]), int(screen_size[1])
        self.background = background
        self.scale = scale
        self.image: Optional[np.ndarray] = None
        self.announcement: Optional[str] = None
        self.frames = 0

    def _fill(self, img, bounds: Bounds, colour):
        # clip to the image, entities may sit partly or wholly off screen
        x0, x1 = max(0, int(bounds.left)), min(self.W, int(bounds.right))
        y0, y1 = max(0, int(bounds.top)), min(self.H, int(bounds.bottom))
        if x0 < x1 and y0 < y1:
            img[y0:y1, x0:x1] = colour

    def render_rgb(self, frame: Frame) -> np.ndarray:
        img = np.zeros((self.H, self.W, 3), dtype=np.uint8)
        img[:] = self.background
        self._fill(img, frame.paddle1, WHITE)
        self._fill(img, frame.paddle2, WHITE)
        self._fill(img, frame.ball, ACCENT)
        if self.scale != 1:
            img = np.repeat(np.repeat(img, self.scale, axis=0), self.scale, axis=1)
        return img

    def present(self, frame: Frame) -> None:
        self.image = self.render_rgb(frame)
        self.announcement = frame.announcement
        self.frames += 1


def run_headless(frames: int, script: Sequence[HeldKeys] = (), screen_size=(400, 300),
                 paddle_size=PADDLE_SIZE, ball_size=BALL_SIZE, paddle2_size=None,
                 renderer=None) -> RoundSimulator:
    sim = RoundSimulator.from_sizes(paddle_size, paddle2_size or paddle_size, ball_size, screen_size)
    provider = ScriptedInput(script, screen_size)
    renderer = renderer or ArrayRenderer(screen_size)
    winners: List[str] = []

    for _ in range(frames):
        events = sim.update(provider, renderer)
        if events.paddle_hit is not None:
            logger.debug("%s returned the ball, velocity now %s",
                         events.paddle_hit.value, tuple(sim.state.ball.velocity))
        if events.winner is not None:
            winners.append(events.winner.value)
            logger.info("%s wins after %d frames", events.winner.value, provider.t)
        if events.restarted:
            logger.info("round restarted")

    logger.info("headless run finished: %d frames, winners %s", frames, winners or "none")
    return sim
