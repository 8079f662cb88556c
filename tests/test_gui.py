import pytest

tk = pytest.importorskip("tkinter")

from countdown import presentation
from countdown.controller import CountdownController
from countdown.gui import FRAME_MS, TimerApp, TimerScreen


class Clock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return Clock()


@pytest.fixture
def frames():
    return []


@pytest.fixture
def screen(root, controller, clock, frames):
    return TimerScreen(root, controller, frames.append, clock=clock)


def test_initial_render(screen, frames):
    assert frames == [screen]
    assert screen.fill_value == 0.0
    assert screen.font_size == presentation.IDLE_FONT_SIZE


def test_start_fills_in_500ms(screen, controller, clock):
    controller.start()
    assert screen.fill_anim == presentation.FillAnimation(1.0, 500, presentation.EASE_OUT)

    clock.now = 0.5
    assert screen.fill_value == pytest.approx(1.0)


def test_drain_follows_remaining_time(screen, controller, scheduler, clock):
    controller.start()
    clock.now = 1.0
    scheduler.advance(1000)

    assert screen.fill_anim.easing == presentation.LINEAR
    assert screen.fill.start == pytest.approx(29 / 30)
    started_at = screen.fill.started_at

    # weitere Ticks starten die Animation nicht neu
    clock.now = 2.0
    scheduler.advance(1000)
    assert screen.fill.started_at == started_at
    assert screen.fill_value == pytest.approx(28 / 30)


def test_cancel_drops_fill_in_250ms(screen, controller, scheduler, clock):
    controller.start()
    clock.now = 1.0
    scheduler.advance(1000)
    clock.now = 3.0
    scheduler.advance(2000)
    before = screen.fill_value

    controller.cancel()
    assert screen.fill_anim == presentation.FillAnimation(0.0, 250, presentation.EASE_OUT)
    assert screen.fill.start == pytest.approx(before)
    assert screen.fill.started_at == 3.0

    clock.now = 3.25
    assert screen.fill_value == 0.0


def test_font_size_is_eased(screen, controller, clock):
    controller.start()
    assert screen.font.target == presentation.ACTIVE_FONT_SIZE
    assert screen.font_size == presentation.IDLE_FONT_SIZE

    clock.now = 0.15
    assert presentation.IDLE_FONT_SIZE < screen.font_size < presentation.ACTIVE_FONT_SIZE

    clock.now = 0.3
    assert screen.font_size == presentation.ACTIVE_FONT_SIZE


def test_frames_stop_when_animations_finish(screen, root, clock, frames):
    assert list(root.jobs) == ["after#1"]
    assert root.delays == [FRAME_MS]

    clock.now = 1.0
    root.fire_next()
    assert root.jobs == {}
    assert len(frames) == 2


def test_close_releases_everything(screen, controller, scheduler, root, frames):
    controller.start()
    assert scheduler.tasks
    assert root.jobs

    screen.close()
    assert scheduler.tasks == []
    assert root.jobs == {}
    assert controller.running is False

    rendered = len(frames)
    controller.start()
    assert scheduler.scheduled == 1
    assert len(frames) == rendered


def test_close_twice_is_harmless(screen, root):
    screen.close()
    screen.close()
    assert root.cancelled == ["after#1"]


def test_window_close_stops_countdown(scheduler):
    try:
        app = TimerApp(scheduler=scheduler)
    except tk.TclError as exc:  # pragma: no cover - depends on CI environment
        pytest.skip(f"Tk not available: {exc}")
    app.root.withdraw()

    app.controller.start()
    assert len(scheduler.tasks) == 1

    app.on_close()
    assert scheduler.tasks == []
    assert app.screen.closed
    assert app.controller.running is False


def test_screen_tracks_controller_state(root, scheduler, clock):
    controller = CountdownController(scheduler, initial_seconds=5)
    screen = TimerScreen(root, controller, lambda s: None, clock=clock)
    controller.increase(5)
    assert screen.state == controller.state
    assert presentation.displayed_value(screen.state) == "10"
