"""Bounded-concurrency executor for per-package operations."""

from __future__ import annotations

import logging
import queue
import threading
from enum import Enum
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from vimpack.errors import EngineStateError

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)

T = TypeVar("T")


class EngineState(Enum):
    """Lifecycle of a :class:`TaskEngine`."""

    CREATED = "created"
    ACCEPTING = "accepting"
    RUNNING = "running"
    COMPLETED = "completed"


def _default_name(item: Any) -> str:
    return item.name


def _log_failure(name: str, exc: BaseException) -> None:
    logger.error(f"{name}: {exc}")


class TaskEngine(Generic[T]):
    """Run one operation over a batch of items with at most N in flight.

    Workers pull from a single shared queue, so a slow item only holds
    its own worker. An exception raised by the operation marks that
    item as failed; the rest of the batch carries on.

    Usage::

        engine = TaskEngine(4)
        for package in batch:
            engine.add(package)
        failed = engine.run(update_plugin)
    """

    def __init__(
        self,
        max_workers: int,
        on_failure: Callable[[str, BaseException], None] | None = None,
        name_of: Callable[[T], str] = _default_name,
    ) -> None:
        """Initialize the engine.

        Args:
            max_workers: Upper bound on concurrently running operations
            on_failure: Called with ``(name, exception)`` from the worker
                thread for every failed item; logs an error by default
            name_of: Extracts the identifier recorded in the failure set
        """
        if isinstance(max_workers, bool) or not isinstance(max_workers, int) or max_workers < 1:
            raise ValueError(f"max_workers must be a positive integer, got {max_workers!r}")

        self.max_workers = max_workers
        self.on_failure = on_failure or _log_failure
        self.name_of = name_of
        self.errors: dict[str, BaseException] = {}

        self._pending: queue.Queue[T] = queue.Queue()
        self._failed: set[str] = set()
        self._lock = threading.Lock()
        self._state = EngineState.CREATED

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def pending(self) -> int:
        """Number of items not yet picked up by a worker."""
        return self._pending.qsize()

    def add(self, item: T) -> None:
        """Enqueue one item. Only allowed before :meth:`run`."""
        if self._state not in (EngineState.CREATED, EngineState.ACCEPTING):
            raise EngineStateError(f"Cannot add items to a {self._state.value} engine")
        self._pending.put(item)
        self._state = EngineState.ACCEPTING

    def run(self, operation: Callable[[T], Any]) -> set[str]:
        """Apply ``operation`` to every queued item and wait for all of them.

        Returns:
            Names of the items whose operation raised
        """
        if self._state in (EngineState.RUNNING, EngineState.COMPLETED):
            raise EngineStateError(f"Engine is already {self._state.value}")
        self._state = EngineState.RUNNING

        count = min(self.max_workers, self._pending.qsize())
        logger.debug(f"Running {self._pending.qsize()} tasks on {count} workers")

        workers = [
            threading.Thread(
                target=self._work,
                args=(operation,),
                name=f"vimpack-worker-{i}",
                daemon=True,
            )
            for i in range(count)
        ]
        for worker in workers:
            worker.start()
        for worker in workers:
            worker.join()

        self._state = EngineState.COMPLETED
        with self._lock:
            return set(self._failed)

    def _work(self, operation: Callable[[T], Any]) -> None:
        """Worker loop: drain the shared queue until it is empty."""
        while True:
            try:
                item = self._pending.get_nowait()
            except queue.Empty:
                return

            try:
                self._process(item, operation)
            finally:
                self._pending.task_done()

    def _process(self, item: T, operation: Callable[[T], Any]) -> None:
        """Run one item; every failure ends up in the failure set."""
        try:
            name = self.name_of(item)
        except Exception:
            logger.exception(f"Cannot name task item {item!r}")
            name = repr(item)

        try:
            operation(item)
        except Exception as e:
            with self._lock:
                self._failed.add(name)
                self.errors[name] = e
            try:
                self.on_failure(name, e)
            except Exception:
                logger.exception(f"{name}: failure handler raised")
        else:
            logger.debug(f"{name}: done")
