"""
Worker Pool Module
==================
A bounded task queue fed by one producer and drained by a fixed number of
worker threads. Each worker opens its own browser session on start, keeps
it for every task it pulls, and closes it when it sees the stop sentinel.

Both crawl phases use this pool; they differ only in the handler and in
whether a worker that cannot start its session aborts the whole run.
"""

import threading
from dataclasses import dataclass
from queue import Queue, Full as QueueFull
from typing import Any, Callable, Iterable, Optional

from config import Config
from utils import logger
from .page import RenderedPage, SessionStartError


_STOP = None
_PUT_POLL_SECONDS = 0.5


@dataclass
class PoolStats:
    submitted: int = 0
    processed: int = 0
    failed: int = 0
    dropped: int = 0
    workers_started: int = 0


class WorkerPool:
    """
    Fixed-size pool of session-owning worker threads.

    handler(page, task) is called exactly once per delivered task. An
    exception from the handler is logged and counted; it never stops the
    worker. With session_failure_fatal, one worker failing to start its
    session aborts the pool and run() raises SessionStartError.
    """

    def __init__(
        self,
        name: str,
        session_factory: Callable[[], RenderedPage],
        handler: Callable[[RenderedPage, Any], None],
        num_workers: int = Config.NUM_WORKERS,
        queue_size: int = Config.TASK_QUEUE_SIZE,
        session_failure_fatal: bool = False,
        log: Optional[Any] = None
    ):
        if num_workers < 1:
            raise ValueError("num_workers must be at least 1")

        self.name = name
        self.session_factory = session_factory
        self.handler = handler
        self.num_workers = num_workers
        self.session_failure_fatal = session_failure_fatal
        self.log = log or logger

        self.tasks = Queue(maxsize=queue_size)
        self.stats = PoolStats()
        self._stats_lock = threading.Lock()
        self._abort = threading.Event()
        self._fatal_error: Optional[Exception] = None
        self._threads = []

    # =========================================================================
    # WORKER SIDE
    # =========================================================================

    def _count(self, field_name: str):
        with self._stats_lock:
            setattr(self.stats, field_name, getattr(self.stats, field_name) + 1)

    def _worker(self):
        try:
            page = self.session_factory()
        except Exception as e:
            if self.session_failure_fatal:
                self.log.error(f"[{self.name}] Session start failed, aborting pool: {e}")
                self._fatal_error = e
                self._abort.set()
            else:
                self.log.error(f"[{self.name}] Session start failed, worker exiting: {e}")
            return

        self._count('workers_started')
        try:
            while not self._abort.is_set():
                task = self.tasks.get()
                if task is _STOP:
                    break

                try:
                    self.handler(page, task)
                    self._count('processed')
                except Exception as e:
                    self._count('failed')
                    self.log.error(f"[{self.name}] Task failed {task}: {type(e).__name__}: {e}")
        finally:
            page.close()

    def _unsubmit(self):
        # A queued task nobody took moves from submitted to dropped.
        with self._stats_lock:
            self.stats.submitted -= 1
            self.stats.dropped += 1

    def _alive_workers(self) -> int:
        return sum(1 for thread in self._threads if thread.is_alive())

    # =========================================================================
    # PRODUCER SIDE
    # =========================================================================

    def start(self):
        """Start the worker threads."""
        for index in range(self.num_workers):
            thread = threading.Thread(
                target=self._worker,
                name=f"{self.name}-{index + 1}",
                daemon=True
            )
            thread.start()
            self._threads.append(thread)

        self.log.info(f"[{self.name}] Started {self.num_workers} workers")

    def _put(self, item: Any) -> bool:
        """Blocking put that gives up once the pool is aborted or every worker is gone."""
        while True:
            if self._abort.is_set():
                return False
            try:
                self.tasks.put(item, timeout=_PUT_POLL_SECONDS)
                return True
            except QueueFull:
                if self._alive_workers() == 0:
                    return False

    def submit(self, task: Any) -> bool:
        """Queue one task. Returns False when it had to be dropped."""
        if task is _STOP:
            raise ValueError("None cannot be submitted as a task")

        if self._put(task):
            self._count('submitted')
            return True

        self._count('dropped')
        return False

    def close(self) -> PoolStats:
        """Send one stop sentinel per worker and wait for all of them to exit."""
        for _ in self._threads:
            if not self._put(_STOP):
                break

        for thread in self._threads:
            if self._abort.is_set():
                # Workers blocked on an empty queue still need waking up.
                self._wake_blocked_workers()
            thread.join()

        # Anything left in the queue was never handed to a worker.
        while not self.tasks.empty():
            if self.tasks.get_nowait() is not _STOP:
                self._unsubmit()

        if self._fatal_error is not None:
            raise SessionStartError(f"[{self.name}] {self._fatal_error}") from self._fatal_error

        self.log.info(
            f"[{self.name}] Finished: {self.stats.processed} processed, "
            f"{self.stats.failed} failed, {self.stats.dropped} dropped"
        )
        return self.stats

    def _wake_blocked_workers(self):
        for _ in range(self._alive_workers()):
            try:
                self.tasks.put_nowait(_STOP)
            except QueueFull:
                break

    def run(self, tasks: Iterable[Any]) -> PoolStats:
        """Start the workers, feed every task, then wait for the pool to drain."""
        self.start()
        try:
            for task in tasks:
                if not self.submit(task):
                    if self._abort.is_set():
                        break
                    self.log.warning(f"[{self.name}] No live workers, dropping task {task}")
        finally:
            stats = self.close()
        return stats
