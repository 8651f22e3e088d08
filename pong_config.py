import argparse
from dataclasses import dataclass
from typing import Optional, Tuple

WINDOW_WIDTH, WINDOW_HEIGHT = 1920, 1080
FPS = 60

# Fallback sprite sizes when no image directory is given
PADDLE_SIZE = (16, 128)
BALL_SIZE = (16, 16)

BG = (100, 149, 237)
WHITE = (240, 240, 240)
ACCENT = (120, 200, 255)


@dataclass
class GameConfig:
    title: str = "Pong"
    width: int = WINDOW_WIDTH
    height: int = WINDOW_HEIGHT
    fps: int = FPS
    fullscreen: bool = True
    asset_dir: Optional[str] = None  # holds player1.png, player2.png, ball.png
    font_path: Optional[str] = None
    font_size: int = 32
    background: Tuple[int, int, int] = BG
    headless_frames: int = 0
    verbose: bool = False

    @property
    def screen_size(self) -> Tuple[int, int]:
        return self.width, self.height


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="pong", description="Two-player pong.")
    parser.add_argument("--width", type=int, default=WINDOW_WIDTH)
    parser.add_argument("--height", type=int, default=WINDOW_HEIGHT)
    parser.add_argument("--fps", type=int, default=FPS)
    parser.add_argument("--windowed", action="store_true", help="don't go fullscreen")
    parser.add_argument("--assets", metavar="DIR", help="directory with player1.png, player2.png and ball.png")
    parser.add_argument("--font", metavar="PATH", help="font file for the winner text")
    parser.add_argument("--headless", metavar="FRAMES", type=int, default=0,
                        help="simulate FRAMES frames without opening a window")
    parser.add_argument("--verbose", action="store_true")
    return parser


def parse_config(argv=None) -> GameConfig:
    args = build_parser().parse_args(argv)
    return GameConfig(
        width=args.width,
        height=args.height,
        fps=args.fps,
        fullscreen=not args.windowed,
        asset_dir=args.assets,
        font_path=args.font,
        headless_frames=args.headless,
        verbose=args.verbose,
    )
