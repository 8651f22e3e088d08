import logging
import os
import sys

import pygame

from pong_config import ACCENT, BALL_SIZE, PADDLE_SIZE, WHITE, GameConfig, parse_config
from pong_headless import run_headless
from pong_sim import Frame, HeldKeys, RoundSimulator

logger = logging.getLogger(__name__)

FONT_NAME = "arial"
SPRITE_FILES = ("player1.png", "player2.png", "ball.png")

# W/S moves the left paddle, Up/Down the right one
KEYMAP = {
    "p1_up": (pygame.K_w,),
    "p1_down": (pygame.K_s,),
    "p2_up": (pygame.K_UP,),
    "p2_down": (pygame.K_DOWN,),
    "restart": (pygame.K_RETURN, pygame.K_KP_ENTER),
}


class InitializationError(Exception):
    """The window or display could not be set up."""


class AssetLoadError(InitializationError):
    """A sprite or font file could not be loaded."""


def load_sprite(path):
    try:
        surface = pygame.image.load(path)
    except (pygame.error, OSError) as exc:
        raise AssetLoadError(f"could not load sprite {path!r}: {exc}") from exc
    if pygame.display.get_surface() is not None:
        surface = surface.convert_alpha()
    return surface


def solid_sprite(size, colour):
    surface = pygame.Surface((int(size[0]), int(size[1])))
    surface.fill(colour)
    return surface


def load_sprites(cfg: GameConfig):
    """Return (player1, player2, ball) surfaces, from cfg.asset_dir if set."""
    if cfg.asset_dir is None:
        return (
            solid_sprite(PADDLE_SIZE, WHITE),
            solid_sprite(PADDLE_SIZE, WHITE),
            solid_sprite(BALL_SIZE, ACCENT),
        )
    return tuple(load_sprite(os.path.join(cfg.asset_dir, name)) for name in SPRITE_FILES)


def load_font(path, size):
    if not pygame.font.get_init():
        pygame.font.init()
    try:
        if path is None:
            return pygame.font.SysFont(FONT_NAME, size)
        return pygame.font.Font(path, size)
    except (pygame.error, OSError) as exc:
        raise AssetLoadError(f"could not load font {path!r}: {exc}") from exc


def held_keys_from_pressed(pressed, keymap=KEYMAP) -> HeldKeys:
    return HeldKeys(**{
        action: any(pressed[key] for key in keys)
        for action, keys in keymap.items()
    })


class PygameInput:
    def __init__(self, keymap=KEYMAP):
        self.keymap = keymap

    def held_keys(self) -> HeldKeys:
        return held_keys_from_pressed(pygame.key.get_pressed(), self.keymap)

    def screen_size(self):
        return pygame.display.get_surface().get_size()


class PygameRenderer:
    def __init__(self, screen, sprites, font, background):
        self.screen = screen
        self.player1, self.player2, self.ball = sprites
        self.font = font
        self.background = background

    def present(self, frame: Frame) -> None:
        self.screen.fill(self.background)
        self.screen.blit(self.player1, (frame.paddle1.x, frame.paddle1.y))
        self.screen.blit(self.player2, (frame.paddle2.x, frame.paddle2.y))
        self.screen.blit(self.ball, (frame.ball.x, frame.ball.y))

        if frame.announcement is not None:
            # font.render() doesn't do newlines
            x, y = frame.text_position
            for line in frame.announcement.split("\n"):
                text = self.font.render(line, True, WHITE)
                self.screen.blit(text, (x, y))
                y += self.font.get_linesize()


class Game:
    def __init__(self, cfg: GameConfig):
        self.cfg = cfg
        self.screen = None
        self.clock = None
        self.sim = None
        self.input = None
        self.renderer = None

    def setup(self):
        pygame.init()
        flags = pygame.SCALED
        if self.cfg.fullscreen:
            flags |= pygame.FULLSCREEN
        try:
            self.screen = pygame.display.set_mode(self.cfg.screen_size, flags)
        except pygame.error as exc:
            raise InitializationError(f"could not open a {self.cfg.width}x{self.cfg.height} window: {exc}") from exc
        pygame.display.set_caption(self.cfg.title)

        sprites = load_sprites(self.cfg)
        font = load_font(self.cfg.font_path, self.cfg.font_size)

        self.sim = RoundSimulator.from_sprites(sprites, self.screen.get_size())
        self.input = PygameInput()
        self.renderer = PygameRenderer(self.screen, sprites, font, self.cfg.background)
        self.clock = pygame.time.Clock()
        logger.info("window %dx%d ready, %d fps", *self.screen.get_size(), self.cfg.fps)

    def handle_events(self):
        """Return False once the player asks to quit."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                return False
            if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                return False
        return True

    def run(self):
        self.setup()
        try:
            while self.handle_events():
                events = self.sim.update(self.input, self.renderer)
                if events.paddle_hit is not None:
                    logger.debug("%s hit, ball velocity %s", events.paddle_hit.value,
                                 tuple(self.sim.state.ball.velocity))
                if events.winner is not None:
                    logger.info("%s wins", events.winner.value)
                if events.restarted:
                    logger.info("round restarted")

                pygame.display.flip()
                self.clock.tick(self.cfg.fps)
        finally:
            pygame.quit()
        logger.info("bye")


def main(argv=None):
    cfg = parse_config(argv)
    logging.basicConfig(level=logging.DEBUG if cfg.verbose else logging.INFO)

    if cfg.headless_frames:
        try:
            player1, player2, ball = load_sprites(cfg)
        except InitializationError as exc:
            logger.error("%s", exc)
            return 1
        run_headless(
            cfg.headless_frames,
            screen_size=cfg.screen_size,
            paddle_size=player1.get_size(),
            paddle2_size=player2.get_size(),
            ball_size=ball.get_size(),
        )
        return 0

    try:
        Game(cfg).run()
    except InitializationError as exc:
        logger.error("%s", exc)
        pygame.quit()
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
