# src/procsim/core/registry.py

from __future__ import annotations

import itertools
import logging
import threading
import time
from collections.abc import Callable
from dataclasses import replace
from typing import Any

from .errors import CapacityExceededError, InvalidIndexError, ResourceExhaustedError
from .ledger import ResourceLedger
from .models import MAX_TASKS, ResourceQuote, Task, clip_name

logger = logging.getLogger(__name__)

Terminator = Callable[[Any], None]


class TaskRegistry:
    """
    Fixed-capacity, ordered table of live tasks.

    Order matters: position 0 is the head the scheduler looks at first.
    Removal compacts the table (later entries shift left by one).

    Thread-safety:
    - one RLock guards the table; the scheduler takes the same lock for a tick
    - create() runs capacity check + ledger.try_allocate + append under that lock
    """

    def __init__(
        self,
        ledger: ResourceLedger,
        *,
        capacity: int = MAX_TASKS,
        terminate: Terminator | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self._ledger = ledger
        self._capacity = int(capacity)
        self._terminate = terminate
        self._clock = clock
        self._tasks: list[Task] = []
        self._ids = itertools.count(1)
        self.lock = threading.RLock()

    def __len__(self) -> int:
        with self.lock:
            return len(self._tasks)

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def ledger(self) -> ResourceLedger:
        return self._ledger

    def is_full(self) -> bool:
        with self.lock:
            return len(self._tasks) >= self._capacity

    # ---- low-level helpers (caller holds self.lock) ----

    def _check_index(self, index: int) -> Task:
        if not isinstance(index, int) or index < 0 or index >= len(self._tasks):
            raise InvalidIndexError(f"Invalid task index: {index}")
        task = self._tasks[index]
        if not task.running:
            raise InvalidIndexError(f"Task at index {index} is not running")
        return task

    def _stop_worker(self, task: Task) -> None:
        """Terminate the backing worker; a worker that is already gone is fine."""
        if self._terminate is None or task.handle is None:
            return
        try:
            self._terminate(task.handle)
        except Exception:
            logger.exception("terminate failed task_id=%s handle=%s", task.id, task.handle)

    def _evict_at(self, index: int) -> Task:
        task = self._tasks[index]
        self._stop_worker(task)
        self._ledger.release_quote(task.quote)
        task.running = False
        del self._tasks[index]
        return task

    # ---- scheduler hooks (the scheduler holds self.lock across a whole tick) ----

    def rotate_head(self) -> Task | None:
        """
        Move the head to the tail and return it (the live entry, not a copy).

        With a single task the order is unchanged. Returns None on an empty table.
        """
        with self.lock:
            if not self._tasks:
                return None
            head = self._tasks.pop(0)
            self._tasks.append(head)
            return head

    def evict_tail(self) -> Task:
        """Stop, release and remove the last task."""
        with self.lock:
            if not self._tasks:
                raise InvalidIndexError("Task table is empty")
            return self._evict_at(len(self._tasks) - 1)

    def reorder(self, key: Callable[[Task], Any], *, reverse: bool = False) -> bool:
        """Stable sort of the table; True when the order actually changed."""
        with self.lock:
            ordered = sorted(self._tasks, key=key, reverse=reverse)
            changed = any(a is not b for a, b in zip(ordered, self._tasks))
            self._tasks[:] = ordered
            return changed

    # ---- public API ----

    def create(
        self,
        name: str,
        ram: int,
        disk: int,
        cores: int,
        priority: int,
        remaining_time: int,
        handle: Any = None,
    ) -> int:
        """
        Register a task and charge its quote to the ledger.

        Raises:
        - CapacityExceededError: table full (nothing allocated)
        - ResourceExhaustedError: ledger cannot cover the quote (ledger unchanged)
        """
        quote = ResourceQuote(ram=ram, disk=disk, cores=cores)

        with self.lock:
            if len(self._tasks) >= self._capacity:
                raise CapacityExceededError(
                    f"Maximum number of tasks reached ({self._capacity})"
                )

            if not self._ledger.try_allocate(quote):
                raise ResourceExhaustedError("Not enough resources to start this task")

            task = Task(
                id=next(self._ids),
                name=clip_name(name),
                quote=quote,
                priority=int(priority),
                remaining_time=int(remaining_time),
                started_at=self._clock(),
                handle=handle,
            )
            self._tasks.append(task)

        logger.info(
            "Task %s created name=%r ram=%s disk=%s cores=%s priority=%s remaining=%s",
            task.id,
            task.name,
            ram,
            disk,
            cores,
            task.priority,
            task.remaining_time,
        )
        return task.id

    def close(self, index: int) -> Task:
        with self.lock:
            self._check_index(index)
            task = self._evict_at(index)
        logger.info("Task %s closed name=%r", task.id, task.name)
        return task

    def minimize(self, index: int) -> Task:
        with self.lock:
            task = self._check_index(index)
            task.minimized = True
        logger.info("Task %s minimized", task.id)
        return replace(task)

    def restore(self, index: int) -> Task:
        with self.lock:
            task = self._check_index(index)
            task.minimized = False
        logger.info("Task %s restored", task.id)
        return replace(task)

    def list(self) -> tuple[Task, ...]:
        with self.lock:
            return tuple(replace(t) for t in self._tasks)

    def close_all(self) -> int:
        """Force-close every task (shutdown). Individual termination failures are ignored."""
        closed = 0
        with self.lock:
            while self._tasks:
                try:
                    task = self._evict_at(len(self._tasks) - 1)
                except Exception:
                    task = self._tasks.pop()
                    task.running = False
                    logger.exception("Force-close of task %s failed; dropping it", task.id)
                closed += 1
                logger.debug("Task %s force-closed", task.id)
        if closed:
            logger.info("Force-closed %d task(s)", closed)
        return closed
