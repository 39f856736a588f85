"""Main-context work queue with background execution for blocking calls."""
import logging
import queue
import threading
import time
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class MainDispatcher:
    """
    Serializes work onto one logical main context.

    Everything that touches a widget surface goes through post() and runs
    inside run_pending(), which the main loop calls. Blocking network work
    goes through run_in_background(); its completion is posted back here.
    """

    def __init__(self, executor: Optional[Executor] = None, max_workers: int = 4):
        self.executor = executor or ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="camera-fetch"
        )
        self._queue: "queue.Queue" = queue.Queue()
        self._in_flight = set()
        self._lock = threading.Lock()

    def post(self, fn: Callable, *args) -> None:
        """Queue fn(*args) to run on the main context."""
        self._queue.put((fn, args))

    def run_in_background(self, fn: Callable, *args,
                          on_success: Callable = None,
                          on_failure: Callable = None) -> Future:
        """
        Run fn(*args) on the executor.

        Args:
            fn: Blocking callable
            on_success: Posted to the main context with the result
            on_failure: Posted to the main context with the exception

        Returns:
            The executor future
        """
        def _done(done: Future):
            error = done.exception()
            if error is not None:
                if on_failure is not None:
                    self.post(on_failure, error)
                else:
                    logger.error("Background task %s failed: %s", getattr(fn, '__name__', fn), error)
            elif on_success is not None:
                self.post(on_success, done.result())

            with self._lock:
                self._in_flight.discard(done)

        future = self.executor.submit(fn, *args)
        with self._lock:
            if not future.done():
                self._in_flight.add(future)
        future.add_done_callback(_done)
        return future

    def run_pending(self, timeout: Optional[float] = None) -> int:
        """
        Run queued work in FIFO order on the calling thread.

        Work queued while draining runs in the same call.

        Args:
            timeout: Wait up to this many seconds for the first item

        Returns:
            Number of items run
        """
        count = 0
        block = timeout is not None
        while True:
            try:
                fn, args = self._queue.get(block=block, timeout=timeout)
            except queue.Empty:
                return count
            block = False

            try:
                fn(*args)
            except Exception:
                logger.exception("Error running %s on main context", getattr(fn, '__name__', fn))
            count += 1

    def pending(self) -> int:
        """Number of queued items."""
        return self._queue.qsize()

    def in_flight(self) -> int:
        """Number of background tasks still running."""
        with self._lock:
            return len(self._in_flight)

    def run_until_idle(self, timeout: float = 30, poll: float = 0.1) -> bool:
        """
        Keep draining until no work is queued or running.

        Returns:
            False if timeout ran out first
        """
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            self.run_pending(timeout=poll)
            if self.in_flight() == 0 and self.pending() == 0:
                return True
        return False

    def shutdown(self, wait: bool = False):
        """Stop accepting background work. Running fetches are not cancelled."""
        self.executor.shutdown(wait=wait)
