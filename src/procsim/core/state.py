# src/procsim/core/state.py

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field

from .errors import PermissionDeniedError
from .ledger import ResourceLedger
from .models import ExecutionMode
from .ports import TaskRunner
from .registry import TaskRegistry
from .scheduler import Scheduler

logger = logging.getLogger(__name__)


@dataclass
class SimState:
    """
    One simulator session.

    Owns the ledger, the task registry and the scheduler. Created once at startup
    (see cli.bootstrap) and torn down by shutdown(); nothing here is a process-wide global.
    """

    # Store Settings on the state for easy access in other modules later.
    settings: object

    ledger: ResourceLedger
    registry: TaskRegistry
    scheduler: Scheduler
    runner: TaskRunner

    mode: ExecutionMode = ExecutionMode.USER
    rng: random.Random = field(default_factory=random.Random)
    shut_down: bool = False

    def toggle_mode(self) -> ExecutionMode:
        self.mode = ExecutionMode.USER if self.mode == ExecutionMode.KERNEL else ExecutionMode.KERNEL
        logger.info("Switched to %s mode", self.mode.value)
        return self.mode

    def require_kernel(self, action: str) -> None:
        if self.mode != ExecutionMode.KERNEL:
            raise PermissionDeniedError(f"'{action}' is only available in kernel mode (use /mode)")

    def shutdown(self) -> int:
        """
        Force-close every task, then stop any worker the registry does not know about.

        Safe to call more than once.
        """
        if self.shut_down:
            return 0

        closed = self.registry.close_all()
        try:
            stray = self.runner.terminate_all()
        except Exception:
            logger.exception("terminate_all failed during shutdown")
            stray = 0
        if stray:
            logger.warning("Stopped %d worker(s) that were not registered as tasks", stray)

        self.shut_down = True
        logger.info("Session shut down (%d task(s) closed)", closed)
        return closed
