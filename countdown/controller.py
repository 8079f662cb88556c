# countdown/controller.py

import logging
import threading
from dataclasses import dataclass
from typing import Callable, List

logger = logging.getLogger("countdown.controller")


@dataclass(frozen=True)
class TimerState:
    """Momentaufnahme des Controllers für die Darstellung."""
    configured_seconds: int
    remaining_seconds: int
    running: bool


Listener = Callable[[TimerState], None]


class CountdownController:
    """
    Zustandsautomat des Countdowns mit den Zuständen Idle und Active.

    Der Controller ist der einzige, der seinen Zustand verändert. Die
    Oberfläche liest ihn über `state` oder lässt sich per `subscribe()`
    benachrichtigen und leitet Klicks an increase/decrease/start/cancel weiter.

    Der Scheduler muss `schedule_repeating(interval_ms, callback) -> handle`
    und `cancel(handle)` anbieten (siehe countdown.timer.TkScheduler).
    """

    MIN_VALUE = 5
    CONTROL_STEP = 5
    TICK_INTERVAL_MS = 1000
    INITIAL_SECONDS = 30

    def __init__(self, scheduler, initial_seconds: int = INITIAL_SECONDS):
        _check_int("initial_seconds", initial_seconds)
        if initial_seconds < self.MIN_VALUE:
            raise ValueError(
                f"initial_seconds must be at least {self.MIN_VALUE}, "
                f"got {initial_seconds}"
            )
        self.scheduler = scheduler
        self._configured = initial_seconds
        self._remaining = -1
        self._running = False
        self._handle = None
        self._closed = False
        self._listeners: List[Listener] = []
        self._lock = threading.RLock()
        self._dirty = False
        self._notifying = False

    # Zustand
    @property
    def configured_seconds(self) -> int:
        return self._configured

    @property
    def remaining_seconds(self) -> int:
        return self._remaining

    @property
    def running(self) -> bool:
        return self._running

    @property
    def state(self) -> TimerState:
        with self._lock:
            return self._snapshot()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Registriert listener und gibt eine Funktion zum Abmelden zurück."""
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe():
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)
        return unsubscribe

    # Intents
    def increase(self, delta: int = CONTROL_STEP):
        _check_delta(delta)
        with self._lock:
            self._configured += delta
            configured = self._configured
        logger.debug("Dauer erhöht auf %d s", configured)
        self._notify()

    def decrease(self, delta: int = CONTROL_STEP):
        _check_delta(delta)
        with self._lock:
            before = self._configured
            self._configured = max(self._configured - delta, self.MIN_VALUE)
            if self._configured == before:
                logger.debug("Dauer bereits am Minimum (%d s)", before)
                return
            configured = self._configured
        logger.debug("Dauer verringert auf %d s", configured)
        self._notify()

    def start(self):
        with self._lock:
            if self._closed:
                logger.debug("start() nach close() ignoriert")
                return
            if self._handle is not None:
                # läuft schon, nicht doppelt planen
                logger.debug("start() ignoriert, Countdown läuft bereits")
                return
            # erst planen: schlägt das fehl, bleibt der Controller Idle
            self._handle = self.scheduler.schedule_repeating(
                self.TICK_INTERVAL_MS, self._tick
            )
            self._running = True
            self._remaining = self._configured
            remaining = self._remaining
        logger.info("Countdown gestartet: %d s", remaining)
        self._notify()

    def cancel(self):
        with self._lock:
            changed = self._reset()
        if not changed:
            logger.debug("cancel() ohne laufenden Countdown")
            return
        logger.info("Countdown abgebrochen")
        self._notify()

    def close(self):
        """Gibt den geplanten Callback frei; danach startet nichts mehr."""
        with self._lock:
            self._closed = True
            changed = self._reset()
        if changed:
            logger.info("Countdown beim Schließen beendet")
            self._notify()
        with self._lock:
            self._listeners.clear()

    # intern
    def _tick(self):
        with self._lock:
            if not self._running:
                return
            self._remaining -= 1
            finished = self._remaining == -1
            if finished:
                self._reset()
            remaining = self._remaining
        if finished:
            logger.info("Countdown abgelaufen")
        else:
            logger.debug("Tick: %d s", remaining)
        self._notify()

    def _reset(self) -> bool:
        changed = self._running or self._handle is not None
        self._remaining = -1
        self._running = False
        handle, self._handle = self._handle, None
        self.scheduler.cancel(handle)
        return changed

    def _snapshot(self) -> TimerState:
        return TimerState(self._configured, self._remaining, self._running)

    def _notify(self):
        """
        Meldet den aktuellen Zustand an alle Listener.

        Ändert ein Listener den Controller (oder ein anderer Thread), wird
        nur markiert; der äußerste Aufruf liefert danach erneut den dann
        aktuellen Zustand aus. Die letzte Meldung entspricht so immer `state`.
        """
        with self._lock:
            self._dirty = True
            if self._notifying:
                return
            self._notifying = True
        try:
            while self._deliver_pending():
                pass
        except BaseException:
            with self._lock:
                self._notifying = False
            raise

    def _deliver_pending(self) -> bool:
        with self._lock:
            if not self._dirty:
                self._notifying = False
                return False
            self._dirty = False
            state = self._snapshot()
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(state)
            except Exception:
                logger.exception("Listener %r fehlgeschlagen", listener)
        return True


def _check_int(name: str, value):
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an int, got {type(value).__name__}")


def _check_delta(delta):
    _check_int("delta", delta)
    if delta <= 0:
        raise ValueError(f"delta must be positive, got {delta}")
