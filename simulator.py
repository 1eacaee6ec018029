import os
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import structlog

from capabilities import Status

logger = structlog.get_logger(__name__)

DEFAULT_SHUTDOWN_TIMEOUT = 60.0
DEFAULT_TIME_SCALE = 0.001  # one execution-time unit = 1 ms


class EngineShutdownError(RuntimeError):
    """Raised when work is submitted to an engine that has been shut down."""


@dataclass
class RunningTask:
    task: Any
    future: Future
    cancel_event: threading.Event


class ExecutionEngine:
    """Runs each submitted task's simulated work on a fixed-size thread pool.

    ``submit`` never blocks. While a task's work is in flight its id is held in a
    lock-guarded table; the worker removes it again on completion, failure or
    cancellation. When two in-flight tasks share an id the later submission owns
    the table entry, and the earlier one finishing does not evict it.

    Cancellation is cooperative: every unit of work waits on its own event, and
    setting that event ends the wait early and fails the task.
    """

    def __init__(self, max_workers: Optional[int] = None,
                 shutdown_timeout: float = DEFAULT_SHUTDOWN_TIMEOUT,
                 time_scale: float = DEFAULT_TIME_SCALE):
        self.max_workers = max_workers or os.cpu_count() or 1
        self.shutdown_timeout = shutdown_timeout
        self.time_scale = time_scale

        self._pool = ThreadPoolExecutor(max_workers=self.max_workers,
                                        thread_name_prefix="npu-worker")
        self._running: Dict[Any, RunningTask] = {}
        # every unit of work still in flight, including ones whose id was re-used
        self._work: Dict[threading.Event, RunningTask] = {}
        self._lock = threading.Lock()
        self._accepting = True
        self._stopped = False

        logger.info("Execution engine started", max_workers=self.max_workers)

    @classmethod
    def from_settings(cls, settings) -> "ExecutionEngine":
        return cls(max_workers=settings.max_workers,
                   shutdown_timeout=settings.shutdown_timeout,
                   time_scale=settings.time_scale)

    @property
    def accepting(self) -> bool:
        return self._accepting

    def submit(self, task) -> Future:
        cancel_event = threading.Event()
        with self._lock:
            if not self._accepting:
                raise EngineShutdownError("Execution engine is shut down")
            task.status = Status.RUNNING
            # registered under the lock, so the worker can't release it before it exists
            future = self._pool.submit(self._run, task, cancel_event)
            entry = RunningTask(task, future, cancel_event)
            previous = self._running.get(task.task_id)
            self._running[task.task_id] = entry
            self._work[cancel_event] = entry

        if previous is not None:
            logger.warning("Task id already in flight, tracking newest submission",
                           task_id=task.task_id)
        future.add_done_callback(lambda f: self._on_done(f, task, cancel_event))

        logger.info("Task submitted", task_id=task.task_id,
                    kind=type(task).__name__, execution_time=task.execution_time)
        return future

    def _run(self, task, cancel_event: threading.Event):
        try:
            interrupted = cancel_event.wait(task.execution_time * self.time_scale)
            if interrupted:
                task.status = Status.FAILED
                logger.info("Task interrupted", task_id=task.task_id)
            else:
                task.status = Status.COMPLETED
                logger.info("Task completed", task_id=task.task_id)
        except Exception:
            task.status = Status.FAILED
            logger.exception("Task failed", task_id=task.task_id)
        finally:
            self._release(task.task_id, cancel_event)

    def _on_done(self, future: Future, task, cancel_event: threading.Event):
        # work cancelled while still queued never reaches _run
        if future.cancelled():
            task.status = Status.FAILED
            self._release(task.task_id, cancel_event)
            logger.info("Task cancelled before start", task_id=task.task_id)

    def _release(self, task_id, cancel_event: threading.Event):
        with self._lock:
            self._work.pop(cancel_event, None)
            entry = self._running.get(task_id)
            if entry is not None and entry.cancel_event is cancel_event:
                del self._running[task_id]

    def is_running(self, task_id) -> bool:
        with self._lock:
            entry = self._running.get(task_id)
        return entry is not None and not entry.future.done()

    def running_ids(self) -> List[Any]:
        with self._lock:
            return list(self._running)

    def cancel(self, task_id) -> bool:
        """Ask the in-flight work for ``task_id`` to stop. Unknown ids are ignored."""
        with self._lock:
            entry = self._running.get(task_id)
        if entry is None:
            return False

        entry.cancel_event.set()
        entry.future.cancel()
        logger.info("Task cancellation requested", task_id=task_id)
        return True

    def shutdown(self, timeout: Optional[float] = None):
        """Stop accepting work, wait up to ``timeout`` seconds, then interrupt the rest.

        Blocks until every worker has exited.
        """
        if timeout is None:
            timeout = self.shutdown_timeout

        with self._lock:
            if self._stopped:
                return
            self._accepting = False
            in_flight = [entry.future for entry in self._work.values()]

        logger.info("Shutting down execution engine", in_flight=len(in_flight), timeout=timeout)
        _, not_done = wait(in_flight, timeout=timeout)

        if not_done:
            logger.warning("Shutdown timeout elapsed, interrupting remaining tasks",
                           remaining=len(not_done))
            with self._lock:
                remaining = list(self._work.values())
            for entry in remaining:
                entry.cancel_event.set()

        self._pool.shutdown(wait=True, cancel_futures=True)

        with self._lock:
            self._stopped = True
        logger.info("Execution engine stopped")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.shutdown()
        return False
