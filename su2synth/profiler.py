"""Named wall-clock timers with a summary report."""

from __future__ import annotations

import atexit
import sys
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Callable, Iterator, TextIO


@dataclass
class Timer:
    """An accumulating stopwatch; elapsed time is in seconds."""

    clock: Callable[[], float] = time.perf_counter
    _accumulated: float = field(default=0.0, init=False, repr=False)
    _started_at: float = field(default=0.0, init=False, repr=False)
    _running: bool = field(default=False, init=False, repr=False)

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> None:
        if not self._running:
            self._started_at = self.clock()
            self._running = True

    def stop(self) -> None:
        if self._running:
            self._accumulated += self.clock() - self._started_at
            self._running = False

    def reset(self) -> None:
        self._accumulated = 0.0
        self._running = False

    def elapsed(self) -> float:
        if self._running:
            return self._accumulated + (self.clock() - self._started_at)
        return self._accumulated


class Profiler:
    """A table of named timers."""

    _instance: Profiler | None = None
    _instance_lock = threading.Lock()

    def __init__(self, clock: Callable[[], float] = time.perf_counter) -> None:
        self._clock = clock
        self._timers: dict[str, Timer] = {}
        self._lock = threading.Lock()
        self._auto_report = True
        self._created_at = clock()

    @classmethod
    def instance(cls) -> Profiler:
        """Return the process-wide profiler, which reports at exit."""
        with cls._instance_lock:
            if cls._instance is None:
                cls._instance = cls()
                atexit.register(cls._instance._report_at_exit)
            return cls._instance

    def timer(self, name: str) -> Timer:
        with self._lock:
            found = self._timers.get(name)
            if found is None:
                found = Timer(self._clock)
                self._timers[name] = found
            return found

    def start(self, name: str) -> None:
        self.timer(name).start()

    def stop(self, name: str) -> None:
        self.timer(name).stop()

    @contextmanager
    def section(self, name: str) -> Iterator[Timer]:
        timer = self.timer(name)
        timer.start()
        try:
            yield timer
        finally:
            timer.stop()

    def report(self, stream: TextIO | None = None) -> None:
        """Write a timing summary; nothing is written if no timer exists."""
        if stream is None:
            stream = sys.stderr
        with self._lock:
            timers = list(self._timers.items())
        if not timers:
            return
        total = self._clock() - self._created_at
        stream.write("\n──── timing summary ─────────────────────────────\n")
        for name, timer in timers:
            seconds = timer.elapsed()
            share = seconds / total * 100.0 if total else 0.0
            stream.write(f"{name:>24} : {seconds * 1000.0:10.3f} ms  ({share:.2f}%)\n")

    def set_auto_report(self, value: bool) -> None:
        self._auto_report = bool(value)

    def _report_at_exit(self) -> None:
        if self._auto_report:
            self.report()