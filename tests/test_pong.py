from collections import defaultdict

import pygame
import pytest

import pong
from pong_config import ACCENT, BALL_SIZE, PADDLE_SIZE, WHITE, GameConfig, parse_config
from pong_sim import HeldKeys, Player, RoundSimulator


def test_parse_config_defaults():
    cfg = parse_config([])
    assert cfg.screen_size == (1920, 1080)
    assert cfg.fullscreen
    assert cfg.asset_dir is None
    assert cfg.headless_frames == 0


def test_parse_config_flags():
    cfg = parse_config(["--windowed", "--width", "640", "--height", "480",
                        "--assets", "img", "--headless", "5", "--verbose"])
    assert not cfg.fullscreen
    assert cfg.screen_size == (640, 480)
    assert cfg.asset_dir == "img"
    assert cfg.headless_frames == 5
    assert cfg.verbose


def test_held_keys_from_pressed():
    pressed = defaultdict(bool, {pygame.K_w: True, pygame.K_DOWN: True, pygame.K_KP_ENTER: True})
    assert pong.held_keys_from_pressed(pressed) == HeldKeys(p1_up=True, p2_down=True, restart=True)
    assert pong.held_keys_from_pressed(defaultdict(bool)) == HeldKeys()


def test_missing_sprite_raises(tmp_path):
    with pytest.raises(pong.AssetLoadError):
        pong.load_sprite(str(tmp_path / "player1.png"))


def test_asset_error_is_initialization_error():
    assert issubclass(pong.AssetLoadError, pong.InitializationError)


def test_load_sprite_from_file(tmp_path):
    path = str(tmp_path / "ball.png")
    pygame.image.save(pong.solid_sprite((4, 6), ACCENT), path)
    assert pong.load_sprite(path).get_size() == (4, 6)


def test_load_sprites_falls_back_to_solid():
    player1, player2, ball = pong.load_sprites(GameConfig())
    assert player1.get_size() == PADDLE_SIZE
    assert player2.get_size() == PADDLE_SIZE
    assert ball.get_size() == BALL_SIZE


def test_load_sprites_from_empty_dir_raises(tmp_path):
    with pytest.raises(pong.AssetLoadError):
        pong.load_sprites(GameConfig(asset_dir=str(tmp_path)))


def test_missing_font_raises(tmp_path):
    with pytest.raises(pong.AssetLoadError):
        pong.load_font(str(tmp_path / "wheaton.otf"), 32)


def test_renderer_draws_sprites_and_text():
    pygame.font.init()
    screen = pygame.Surface((400, 300))
    sprites = pong.load_sprites(GameConfig())
    renderer = pong.PygameRenderer(screen, sprites, pygame.font.Font(None, 32), (0, 0, 0))

    sim = RoundSimulator.from_sizes(PADDLE_SIZE, PADDLE_SIZE, BALL_SIZE, (400, 300))
    renderer.present(sim.frame((400, 300)))
    assert tuple(screen.get_at((200, 150)))[:3] == ACCENT
    assert tuple(screen.get_at((20, 150)))[:3] == WHITE
    assert tuple(screen.get_at((100, 20)))[:3] == (0, 0, 0)

    sim.state.winner = Player.ONE
    frame = sim.frame((800, 600))
    renderer.present(frame)
    assert frame.announcement.count("wins!") == 1


def test_main_headless():
    assert pong.main(["--headless", "10", "--width", "320", "--height", "240"]) == 0


def test_main_reports_missing_assets(tmp_path):
    argv = ["--windowed", "--width", "320", "--height", "240", "--assets", str(tmp_path)]
    assert pong.main(argv) == 1


def test_main_headless_uses_sprite_sizes(tmp_path, monkeypatch):
    for name, size in [("player1.png", (40, 300)), ("player2.png", (24, 200)), ("ball.png", (50, 50))]:
        pygame.image.save(pong.solid_sprite(size, WHITE), str(tmp_path / name))

    sims = []
    real_run_headless = pong.run_headless

    def recording_run_headless(*args, **kwargs):
        sims.append(real_run_headless(*args, **kwargs))
        return sims[-1]

    monkeypatch.setattr(pong, "run_headless", recording_run_headless)
    argv = ["--headless", "2", "--width", "640", "--height", "480", "--assets", str(tmp_path)]
    assert pong.main(argv) == 0

    state = sims[0].state
    assert state.paddle1.size == (40.0, 300.0)
    assert state.paddle2.size == (24.0, 200.0)
    assert state.ball.size == (50.0, 50.0)


def test_main_headless_reports_missing_assets(tmp_path):
    assert pong.main(["--headless", "2", "--assets", str(tmp_path)]) == 1


def test_escape_and_close_quit():
    pygame.display.init()
    pygame.display.set_mode((64, 64))
    game = pong.Game(GameConfig(fullscreen=False, width=64, height=64))
    try:
        pygame.event.clear()
        assert game.handle_events()

        pygame.event.post(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_ESCAPE))
        assert not game.handle_events()

        pygame.event.post(pygame.event.Event(pygame.QUIT))
        assert not game.handle_events()
    finally:
        pygame.quit()


def test_game_runs_until_quit(monkeypatch):
    game = pong.Game(GameConfig(fullscreen=False, width=320, height=240, fps=0))
    real_handle_events = game.handle_events
    calls = []

    def handle_events():
        calls.append(1)
        if len(calls) == 3:
            pygame.event.post(pygame.event.Event(pygame.QUIT))
        return real_handle_events()

    monkeypatch.setattr(game, "handle_events", handle_events)
    game.run()

    assert len(calls) == 3
    # two frames played before the quit was seen
    assert tuple(game.sim.state.ball.position) == (132.0, 112.0)
    assert not pygame.get_init()
