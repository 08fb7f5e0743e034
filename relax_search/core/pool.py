"""Bounded worker pool shared by every search request."""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import asdict, dataclass
from typing import Any, Callable, Dict, Optional

from relax_search.core.config import Settings

logger = logging.getLogger(__name__)


class PoolExhaustionError(RuntimeError):
    """Raised when no worker slot frees up within the acquire timeout."""


@dataclass(frozen=True)
class PoolMetrics:
    max_workers: int
    capacity: int
    active: int
    queued: int
    submitted: int
    completed: int
    cancelled: int
    rejected: int
    largest_in_flight: int

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


class WorkerPool:
    """ThreadPoolExecutor with a hard cap on in-flight tasks.

    At most ``max_workers`` tasks run and ``max_queue`` more wait; a submit
    beyond that blocks for ``acquire_timeout`` seconds, then raises
    ``PoolExhaustionError``.
    """

    def __init__(self, max_workers: int = 8, max_queue: int = 32, acquire_timeout: float = 1.0) -> None:
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        if max_queue < 0:
            raise ValueError("max_queue must not be negative")
        self.max_workers = max_workers
        self.capacity = max_workers + max_queue
        self.acquire_timeout = acquire_timeout
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="relax-search")
        self._slots = threading.BoundedSemaphore(self.capacity)
        self._lock = threading.Lock()
        self._in_flight = 0
        self._active = 0
        self._submitted = 0
        self._completed = 0
        self._cancelled = 0
        self._rejected = 0
        self._largest_in_flight = 0

    @classmethod
    def from_settings(cls, settings: Settings) -> "WorkerPool":
        return cls(
            max_workers=settings.pool_size,
            max_queue=settings.pool_queue_size,
            acquire_timeout=settings.pool_acquire_timeout,
        )

    def submit(
        self,
        fn: Callable[..., Any],
        *args: Any,
        acquire_timeout: Optional[float] = None,
        **kwargs: Any,
    ) -> Future:
        """Schedule ``fn(*args, **kwargs)``.

        ``acquire_timeout`` overrides the pool default for this call.
        """
        timeout = self.acquire_timeout if acquire_timeout is None else max(acquire_timeout, 0.0)
        if not self._slots.acquire(timeout=timeout):
            with self._lock:
                self._rejected += 1
            logger.warning("Worker pool exhausted: capacity=%d", self.capacity)
            raise PoolExhaustionError(f"no worker available within {timeout}s")

        with self._lock:
            self._in_flight += 1
            self._largest_in_flight = max(self._largest_in_flight, self._in_flight)

        try:
            future = self._executor.submit(self._run, fn, args, kwargs)
        except RuntimeError:
            with self._lock:
                self._in_flight -= 1
            self._slots.release()
            raise

        with self._lock:
            self._submitted += 1
        future.add_done_callback(self._release)
        return future

    def _run(self, fn: Callable[..., Any], args: Any, kwargs: Any) -> Any:
        with self._lock:
            self._active += 1
        try:
            return fn(*args, **kwargs)
        finally:
            with self._lock:
                self._active -= 1
                self._in_flight -= 1
                self._completed += 1

    def _release(self, future: Future) -> None:
        if future.cancelled():
            # never reached _run
            with self._lock:
                self._in_flight -= 1
                self._cancelled += 1
        self._slots.release()

    def metrics(self) -> PoolMetrics:
        with self._lock:
            return PoolMetrics(
                max_workers=self.max_workers,
                capacity=self.capacity,
                active=self._active,
                queued=self._in_flight - self._active,
                submitted=self._submitted,
                completed=self._completed,
                cancelled=self._cancelled,
                rejected=self._rejected,
                largest_in_flight=self._largest_in_flight,
            )

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait, cancel_futures=not wait)

    def __enter__(self) -> "WorkerPool":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown()
