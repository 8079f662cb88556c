import time
from typing import Callable, Optional


class RepeatingTask:
    """
    Wiederkehrender after()-Job: ruft callback() alle interval_ms auf.
    Der erste Aufruf erfolgt erst nach einem vollen Intervall.
    """

    def __init__(self, root, interval_ms: int, callback: Callable[[], None]):
        self.root = root
        self.interval_ms = int(interval_ms)
        self.callback = callback
        self.cancelled = False
        self._job = None
        self._next_due = 0.0

    def start(self):
        self._next_due = time.monotonic() + self.interval_ms / 1000.0
        self._job = self.root.after(self.interval_ms, self._schedule_tick)

    def _schedule_tick(self):
        self._job = None
        if self.cancelled:
            return
        self.callback()
        # callback() darf den Task selbst stoppen
        if self.cancelled:
            return
        # feste Rate: Verspätungen der Event-Loop nicht aufsummieren
        self._next_due += self.interval_ms / 1000.0
        delay = max(0, round((self._next_due - time.monotonic()) * 1000))
        self._job = self.root.after(delay, self._schedule_tick)

    def stop(self):
        self.cancelled = True
        if self._job is not None:
            self.root.after_cancel(self._job)
            self._job = None


class TkScheduler:
    """Plant wiederkehrende Callbacks auf der Tk-Event-Loop."""

    def __init__(self, root):
        self.root = root

    def schedule_repeating(self, interval_ms: int,
                           callback: Callable[[], None]) -> RepeatingTask:
        task = RepeatingTask(self.root, interval_ms, callback)
        task.start()
        return task

    def cancel(self, handle: Optional[RepeatingTask]):
        if handle is not None:
            handle.stop()
