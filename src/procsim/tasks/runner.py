# src/procsim/tasks/runner.py

from __future__ import annotations

import itertools
import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..core.errors import SpawnError
from .apps import run_routine
from .catalog import TaskKind, lookup_kind

if TYPE_CHECKING:
    from ..core.state import SimState

logger = logging.getLogger(__name__)

FIRST_PID = 1000

# Seconds between heartbeats of a background worker, per routine.
_HEARTBEAT_SECONDS = {
    "time": 1.0,
    "calendar": 60.0,
}
_DEFAULT_HEARTBEAT_SECONDS = 5.0


@dataclass(frozen=True, slots=True)
class WorkerHandle:
    """Opaque handle of a background worker; pid is simulated, not an OS pid."""

    pid: int
    name: str

    def __str__(self) -> str:
        return f"{self.name}(pid={self.pid})"


class _Worker:
    def __init__(self, handle: WorkerHandle, interval: float) -> None:
        self.handle = handle
        self.interval = interval
        self.stop_event = threading.Event()
        self.beats = 0
        self.thread = threading.Thread(
            target=self._run,
            name=f"procsim-{handle.name}-{handle.pid}",
            daemon=True,
        )

    def _run(self) -> None:
        logger.debug("Worker %s started.", self.handle)
        # Background tasks idle until terminated; each heartbeat is one unit of "work".
        while not self.stop_event.wait(self.interval):
            self.beats += 1
        logger.debug("Worker %s stopped after %d heartbeat(s).", self.handle, self.beats)


class ThreadTaskRunner:
    """
    TaskRunner backed by daemon threads.

    Design goals:
    - spawn() never leaves a half-started worker behind: if the thread fails to start,
      SpawnError is raised and nothing is tracked.
    - terminate() is idempotent and safe on handles it has never seen.
    - terminate_all() is the shutdown hook.
    """

    def __init__(
        self,
        *,
        max_workers: int = 64,
        join_timeout: float = 2.0,
        routine: Callable[[TaskKind, SimState], str | None] = run_routine,
    ) -> None:
        self._max_workers = int(max_workers)
        self._join_timeout = float(join_timeout)
        self._routine = routine
        self._pids = itertools.count(FIRST_PID)
        self._workers: dict[int, _Worker] = {}
        self._lock = threading.Lock()

    def spawn(self, kind: str) -> WorkerHandle:
        task_kind = lookup_kind(kind)

        with self._lock:
            if len(self._workers) >= self._max_workers:
                raise SpawnError(f"Cannot start {task_kind.name}: worker limit reached")
            handle = WorkerHandle(pid=next(self._pids), name=task_kind.name)
            interval = _HEARTBEAT_SECONDS.get(task_kind.routine, _DEFAULT_HEARTBEAT_SECONDS)
            worker = _Worker(handle, interval)
            try:
                worker.thread.start()
            except RuntimeError as e:
                raise SpawnError(f"Cannot start {task_kind.name}: {e}") from e
            self._workers[handle.pid] = worker

        logger.info("Spawned worker %s", handle)
        return handle

    def terminate(self, handle: WorkerHandle) -> None:
        pid = getattr(handle, "pid", None)
        with self._lock:
            worker = self._workers.pop(pid, None) if pid is not None else None

        if worker is None:
            logger.debug("terminate: worker %s already stopped", handle)
            return

        worker.stop_event.set()
        if worker.thread is not threading.current_thread():
            worker.thread.join(timeout=self._join_timeout)
        if worker.thread.is_alive():
            logger.warning("Worker %s did not stop within %.1fs", handle, self._join_timeout)
        else:
            logger.info("Terminated worker %s", handle)

    def alive(self, handle: WorkerHandle) -> bool:
        with self._lock:
            worker = self._workers.get(handle.pid)
        return worker is not None and worker.thread.is_alive()

    def live_count(self) -> int:
        with self._lock:
            return len(self._workers)

    def terminate_all(self) -> int:
        with self._lock:
            handles = [w.handle for w in self._workers.values()]
        for handle in handles:
            self.terminate(handle)
        return len(handles)

    def run_foreground(self, kind: str, state: SimState) -> str | None:
        task_kind = lookup_kind(kind)
        logger.info("Running %s in foreground", task_kind.name)
        return self._routine(task_kind, state)
