import pytest

from countdown.controller import CountdownController


class FakeTask:
    def __init__(self, interval_ms, callback, due):
        self.interval_ms = interval_ms
        self.callback = callback
        self.due = due
        self.cancelled = False


class FakeScheduler:
    """Scheduler mit virtueller Zeit in Millisekunden."""

    def __init__(self):
        self.now = 0
        self.tasks = []
        self.scheduled = 0

    def schedule_repeating(self, interval_ms, callback):
        task = FakeTask(interval_ms, callback, self.now + interval_ms)
        self.tasks.append(task)
        self.scheduled += 1
        return task

    def cancel(self, handle):
        if handle is None:
            return
        handle.cancelled = True
        if handle in self.tasks:
            self.tasks.remove(handle)

    def advance(self, ms):
        end = self.now + ms
        while True:
            due = [t for t in self.tasks if t.due <= end]
            if not due:
                break
            task = min(due, key=lambda t: t.due)
            self.now = task.due
            task.due += task.interval_ms
            task.callback()
        self.now = end


class StubRoot:
    """Zeichnet after()/after_cancel() auf, statt Tk zu starten."""

    def __init__(self):
        self.jobs = {}
        self.delays = []
        self.cancelled = []
        self._counter = 0

    def after(self, ms, func):
        self._counter += 1
        job = f"after#{self._counter}"
        self.jobs[job] = func
        self.delays.append(ms)
        return job

    def after_cancel(self, job):
        self.cancelled.append(job)
        self.jobs.pop(job, None)

    def fire_next(self):
        job = next(iter(self.jobs))
        func = self.jobs.pop(job)
        func()


@pytest.fixture
def scheduler():
    return FakeScheduler()


@pytest.fixture
def controller(scheduler):
    return CountdownController(scheduler)


@pytest.fixture
def root():
    return StubRoot()
