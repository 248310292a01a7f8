"""
Cancellable periodic task for driving a simulation on a fixed cadence.

The engine only knows how to compute one generation. Running, pausing and
changing speed belong here.
"""

import logging
import threading
import time
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class PeriodicStepper:
    """
    Calls a function every ``interval`` seconds on a background thread.

    Attributes:
        callback: Function called once per tick
    """

    def __init__(self, callback: Callable[[], None], interval: float):
        """
        Initialize stepper.

        Args:
            callback: Function to call on every tick
            interval: Seconds between ticks
        """
        if interval <= 0:
            raise ValueError(f"interval must be > 0, got {interval}")

        self.callback = callback
        self._interval = interval
        self._stop_event = threading.Event()
        self._wake_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._error: Optional[BaseException] = None
        self._lock = threading.Lock()
        self.ticks = 0

    @property
    def interval(self) -> float:
        return self._interval

    @interval.setter
    def interval(self, value: float) -> None:
        if value <= 0:
            raise ValueError(f"interval must be > 0, got {value}")
        self._interval = value
        # Cut the current wait short so the new cadence applies right away
        self._wake_event.set()

    @property
    def is_running(self) -> bool:
        thread = self._thread
        return thread is not None and thread.is_alive() and not self._stop_event.is_set()

    def start(self) -> None:
        """Start ticking. Does nothing if already running."""
        with self._lock:
            if self.is_running:
                return
            self._stop_event.clear()
            self._wake_event.clear()
            self._error = None
            self._thread = threading.Thread(target=self._worker, name="life3d-stepper", daemon=True)
            self._thread.start()
        logger.debug("Stepper started (interval=%.3fs)", self._interval)

    def stop(self, timeout: Optional[float] = None) -> None:
        """
        Stop ticking and wait for the worker to exit.

        Re-raises an exception the callback raised while running.
        """
        with self._lock:
            self._stop_event.set()
            self._wake_event.set()
            thread = self._thread
            self._thread = None

        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)
            logger.debug("Stepper stopped after %d tick(s)", self.ticks)

        error, self._error = self._error, None
        if error is not None:
            raise error

    def _worker(self) -> None:
        """Background loop: wait one interval, tick, repeat."""
        next_tick = time.monotonic() + self._interval
        while not self._stop_event.is_set():
            remaining = next_tick - time.monotonic()
            if remaining > 0:
                self._wake_event.wait(remaining)
                if self._wake_event.is_set():
                    self._wake_event.clear()
                    # Interval changed or stop requested: reschedule from now
                    next_tick = time.monotonic() + self._interval
                    continue

            if self._stop_event.is_set():
                break

            try:
                self.callback()
            except Exception as e:
                logger.exception("Stepper callback failed, stopping")
                self._error = e
                self._stop_event.set()
                break

            self.ticks += 1
            next_tick += self._interval
            # Don't try to catch up after a slow tick
            if next_tick < time.monotonic():
                next_tick = time.monotonic() + self._interval

    def __enter__(self) -> "PeriodicStepper":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()
