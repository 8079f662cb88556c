from dataclasses import dataclass
from typing import Dict, Optional

from countdown.controller import CountdownController, TimerState

IDLE_FONT_SIZE = 120
ACTIVE_FONT_SIZE = 180
# letzte Sekunden: Ziffer wächst
FINAL_FONT_SIZES: Dict[int, int] = {3: 200, 2: 220, 1: 240, 0: 260}

START_FILL_MS = 500
RESET_FILL_MS = 250
FONT_ANIM_MS = 300

EASE_OUT = "ease_out"
LINEAR = "linear"


@dataclass(frozen=True)
class FillAnimation:
    target: float
    duration_ms: int
    easing: str


def fill_fraction(state: TimerState) -> float:
    """Anteil des gefüllten Hintergrunds (0.0 im Leerlauf)."""
    if not state.running:
        return 0.0
    return max(state.remaining_seconds, 0) / state.configured_seconds


def displayed_value(state: TimerState) -> str:
    if state.running:
        return str(max(state.remaining_seconds, 0))
    return str(state.configured_seconds)


def value_font_size(state: TimerState) -> int:
    if not state.running:
        return IDLE_FONT_SIZE
    return FINAL_FONT_SIZES.get(state.remaining_seconds, ACTIVE_FONT_SIZE)


def increase_visible(state: TimerState) -> bool:
    return not state.running


def decrease_visible(state: TimerState) -> bool:
    return (not state.running
            and state.configured_seconds > CountdownController.MIN_VALUE)


def bottom_bar(state: TimerState) -> Optional[str]:
    """Knopf der unteren Leiste: start, cancel oder None (ausgeblendet)."""
    if not state.running:
        return "start"
    if state.remaining_seconds > 0:
        return "cancel"
    return None


def fill_animation(state: TimerState) -> FillAnimation:
    """
    Ziel und Timing der Füll-Animation:
    beim Start in 500 ms auf voll, danach linear bis 0 über die restliche
    Laufzeit, bei Abbruch/Ende in 250 ms auf 0.
    """
    just_started = (state.running
                    and state.remaining_seconds == state.configured_seconds)
    if just_started:
        return FillAnimation(1.0, START_FILL_MS, EASE_OUT)
    if not state.running:
        return FillAnimation(0.0, RESET_FILL_MS, EASE_OUT)
    return FillAnimation(0.0, (state.configured_seconds - 1) * 1000, LINEAR)


def ease(easing: str, t: float) -> float:
    t = min(max(t, 0.0), 1.0)
    if easing == EASE_OUT:
        return 1 - (1 - t) ** 3
    return t


class Tween:
    """Wert, der über duration_ms von start nach target läuft."""

    def __init__(self, value: float):
        self.start = value
        self.target = value
        self.duration_ms = 0
        self.easing = LINEAR
        self.started_at = 0.0

    def retarget(self, target: float, duration_ms: int, easing: str,
                 now: float, origin: Optional[float] = None):
        # ohne origin setzt die neue Animation am aktuellen Wert an
        self.start = self.value(now) if origin is None else origin
        self.target = target
        self.duration_ms = duration_ms
        self.easing = easing
        self.started_at = now

    def progress(self, now: float) -> float:
        if self.duration_ms <= 0:
            return 1.0
        return min((now - self.started_at) * 1000 / self.duration_ms, 1.0)

    def value(self, now: float) -> float:
        t = ease(self.easing, self.progress(now))
        return self.start + (self.target - self.start) * t

    def done(self, now: float) -> bool:
        return self.progress(now) >= 1.0
