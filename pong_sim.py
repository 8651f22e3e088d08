"""
Round simulation for two-paddle pong.

Pure per-frame arithmetic over positions, velocities and bounding boxes.
Nothing here touches the display, the event queue or the keyboard: input and
drawing arrive through the InputProvider / Renderer collaborators.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Protocol, Tuple

from pygame.math import Vector2

PADDLE_SPEED = 8.0
BALL_SPEED = 10.0
PADDLE_SPIN = 4.0
BALL_ACC = 0.5
PADDLE_MARGIN = 16.0

RESTART_HINT = "Press Enter to Restart or Esc to quit game"
TEXT_OFFSET = (-400.0, -100.0)  # from screen centre


class Player(Enum):
    ONE = "Player 1"
    TWO = "Player 2"


class Phase(Enum):
    PLAYING = "playing"
    ROUND_OVER = "round_over"


def sign(value: float) -> float:
    if value > 0:
        return 1.0
    if value < 0:
        return -1.0
    return 0.0


def announcement(winner: Player) -> str:
    return f"{winner.value} wins!\n{RESTART_HINT}"


@dataclass(frozen=True)
class Bounds:
    x: float
    y: float
    width: float
    height: float

    @property
    def left(self):
        return self.x

    @property
    def right(self):
        return self.x + self.width

    @property
    def top(self):
        return self.y

    @property
    def bottom(self):
        return self.y + self.height

    def centre(self) -> Vector2:
        return Vector2(self.x + self.width / 2.0, self.y + self.height / 2.0)

    def intersects(self, other: "Bounds") -> bool:
        # touching edges count as overlap
        return (
            self.left <= other.right
            and other.left <= self.right
            and self.top <= other.bottom
            and other.top <= self.bottom
        )


@dataclass
class Entity:
    """
    A fixed-size rectangle that moves around the playfield.

    ``size`` comes from the sprite the entity is drawn with and never changes;
    ``bounds()`` and ``centre()`` are always derived from the live position.
    """
    size: Tuple[float, float]
    position: Vector2
    velocity: Vector2 = field(default_factory=Vector2)

    def __post_init__(self):
        self.size = (float(self.size[0]), float(self.size[1]))
        self.position = Vector2(self.position)
        self.velocity = Vector2(self.velocity)

    @property
    def width(self) -> float:
        return self.size[0]

    @property
    def height(self) -> float:
        return self.size[1]

    def bounds(self) -> Bounds:
        return Bounds(self.position.x, self.position.y, self.width, self.height)

    def centre(self) -> Vector2:
        return self.bounds().centre()


@dataclass(frozen=True)
class HeldKeys:
    p1_up: bool = False
    p1_down: bool = False
    p2_up: bool = False
    p2_down: bool = False
    restart: bool = False


@dataclass
class StepEvents:
    paddle_hit: Optional[Player] = None
    wall_bounce: bool = False
    winner: Optional[Player] = None  # set only on the step that ends the round
    restarted: bool = False


@dataclass(frozen=True)
class Frame:
    """Everything a renderer needs for one frame, read after the step."""
    paddle1: Bounds
    paddle2: Bounds
    ball: Bounds
    announcement: Optional[str] = None
    text_position: Optional[Tuple[float, float]] = None


class InputProvider(Protocol):
    def held_keys(self) -> HeldKeys: ...

    def screen_size(self) -> Tuple[float, float]: ...


class Renderer(Protocol):
    def present(self, frame: Frame) -> None: ...


def ball_start(ball_size, screen_size) -> Vector2:
    w, h = screen_size
    return Vector2(w / 2.0 - ball_size[0] / 2.0, h / 2.0 - ball_size[1] / 2.0)


@dataclass
class RoundState:
    paddle1: Entity
    paddle2: Entity
    ball: Entity
    winner: Optional[Player] = None

    @classmethod
    def new(cls, paddle1_size, paddle2_size, ball_size, screen_size):
        w, h = screen_size
        paddle1 = Entity(
            paddle1_size, Vector2(PADDLE_MARGIN, (h - paddle1_size[1]) / 2.0)
        )
        paddle2 = Entity(
            paddle2_size,
            Vector2(w - paddle2_size[0] - PADDLE_MARGIN, (h - paddle2_size[1]) / 2.0),
        )
        ball = Entity(
            ball_size, ball_start(ball_size, screen_size), Vector2(-BALL_SPEED, 0.0)
        )
        return cls(paddle1=paddle1, paddle2=paddle2, ball=ball)

    @property
    def phase(self) -> Phase:
        return Phase.PLAYING if self.winner is None else Phase.ROUND_OVER


class RoundSimulator:
    """
    Advances a RoundState by one fixed step per frame.

    While the round is over only the paddles keep moving; the ball stays where
    it left the playfield until restart, so the recorded winner cannot change.
    """

    def __init__(self, state: RoundState):
        self.state = state

    @classmethod
    def from_sizes(cls, paddle1_size, paddle2_size, ball_size, screen_size):
        return cls(RoundState.new(paddle1_size, paddle2_size, ball_size, screen_size))

    @classmethod
    def from_sprites(cls, sprites, screen_size):
        # only the pixel dimensions are kept, never the surfaces themselves
        player1, player2, ball = sprites
        return cls.from_sizes(player1.get_size(), player2.get_size(), ball.get_size(), screen_size)

    @property
    def phase(self) -> Phase:
        return self.state.phase

    def step(self, keys: HeldKeys, screen_size) -> StepEvents:
        events = StepEvents()
        self._move_paddles(keys)

        if self.state.winner is None:
            self._move_ball()
            events.paddle_hit = self._collide_paddles()
            events.wall_bounce = self._bounce_walls(screen_size[1])
            events.winner = self._detect_winner(screen_size[0])

        if self.state.winner is not None and keys.restart:
            self.restart(screen_size)
            events.restarted = True
        return events

    def update(self, input_provider: InputProvider, renderer: Renderer) -> StepEvents:
        keys = input_provider.held_keys()
        screen_size = input_provider.screen_size()
        events = self.step(keys, screen_size)
        renderer.present(self.frame(screen_size))
        return events

    def restart(self, screen_size):
        ball = self.state.ball
        ball.position = ball_start(ball.size, screen_size)
        ball.velocity = Vector2(-BALL_SPEED, 0.0)
        self.state.winner = None

    def frame(self, screen_size) -> Frame:
        text = None
        text_position = None
        if self.state.winner is not None:
            w, h = screen_size
            text = announcement(self.state.winner)
            text_position = (w / 2.0 + TEXT_OFFSET[0], h / 2.0 + TEXT_OFFSET[1])
        return Frame(
            paddle1=self.state.paddle1.bounds(),
            paddle2=self.state.paddle2.bounds(),
            ball=self.state.ball.bounds(),
            announcement=text,
            text_position=text_position,
        )

    def _move_paddles(self, keys: HeldKeys):
        # up and down held together cancel out
        if keys.p1_up:
            self.state.paddle1.position.y -= PADDLE_SPEED
        if keys.p1_down:
            self.state.paddle1.position.y += PADDLE_SPEED
        if keys.p2_up:
            self.state.paddle2.position.y -= PADDLE_SPEED
        if keys.p2_down:
            self.state.paddle2.position.y += PADDLE_SPEED

    def _move_ball(self):
        self.state.ball.position += self.state.ball.velocity

    def _collide_paddles(self) -> Optional[Player]:
        ball = self.state.ball
        ball_bounds = ball.bounds()

        if ball_bounds.intersects(self.state.paddle1.bounds()):
            hit, paddle = Player.ONE, self.state.paddle1
        elif ball_bounds.intersects(self.state.paddle2.bounds()):
            hit, paddle = Player.TWO, self.state.paddle2
        else:
            return None

        vx = ball.velocity.x
        ball.velocity.x = -(vx + BALL_ACC * sign(vx))

        offset = (paddle.centre().y - ball.centre().y) / paddle.height
        ball.velocity.y += PADDLE_SPIN * -offset
        return hit

    def _bounce_walls(self, screen_height) -> bool:
        ball = self.state.ball
        if ball.position.y <= 0.0 or ball.position.y + ball.height >= screen_height:
            ball.velocity.y = -ball.velocity.y
            return True
        return False

    def _detect_winner(self, screen_width) -> Optional[Player]:
        x = self.state.ball.position.x
        if x > screen_width:
            self.state.winner = Player.ONE
        elif x < 0.0:
            self.state.winner = Player.TWO
        return self.state.winner
