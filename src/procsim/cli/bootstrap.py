# src/procsim/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- builds the ledger, registry and scheduler for one session,
- wires the thread-backed task runner into SimState,
- starts the boot task.
"""

from __future__ import annotations

import logging
import random

from ..config import get_settings
from ..core.errors import SimulatorError
from ..core.ledger import ResourceLedger
from ..core.models import ExecutionMode, SchedulingPolicy
from ..core.ports import TaskRunner
from ..core.registry import TaskRegistry
from ..core.scheduler import Scheduler
from ..core.state import SimState
from ..tasks.launcher import LaunchResult, launch_task
from ..tasks.runner import ThreadTaskRunner

logger = logging.getLogger(__name__)


def _initial_policy(raw: str) -> SchedulingPolicy:
    try:
        return SchedulingPolicy.parse(raw)
    except ValueError:
        logger.warning("Unknown scheduling policy %r in settings; using FCFS", raw)
        return SchedulingPolicy.FCFS


def create_initial_state(*, settings=None, runner: TaskRunner | None = None) -> SimState:
    """
    Create SimState from the provided settings.

    Keeping settings and runner injectable makes the session easy to test.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()
    if runner is None:
        runner = ThreadTaskRunner(max_workers=max(int(settings.max_tasks) + 1, 1))

    ledger = ResourceLedger(
        ram=int(settings.total_ram),
        disk=int(settings.total_disk),
        cores=int(settings.total_cores),
    )
    registry = TaskRegistry(ledger, capacity=int(settings.max_tasks), terminate=runner.terminate)
    scheduler = Scheduler(
        registry,
        policy=_initial_policy(getattr(settings, "policy", "fcfs")),
        quantum=int(settings.time_quantum),
    )

    seed = getattr(settings, "seed", None)
    state = SimState(
        settings=settings,
        ledger=ledger,
        registry=registry,
        scheduler=scheduler,
        runner=runner,
        mode=ExecutionMode.KERNEL if getattr(settings, "kernel_mode", False) else ExecutionMode.USER,
        rng=random.Random(seed),
    )
    logger.info(
        "Session ready ram=%s disk=%s cores=%s max_tasks=%s policy=%s",
        ledger.total.ram,
        ledger.total.disk,
        ledger.total.cores,
        registry.capacity,
        scheduler.policy.value,
    )
    return state


def boot(state: SimState) -> LaunchResult | None:
    """Start the configured boot task in the background (best-effort)."""
    kind = (getattr(state.settings, "boot_task", "") or "").strip()
    if not kind:
        return None
    try:
        result = launch_task(state, kind, background=True)
    except SimulatorError as e:
        logger.warning("Boot task %s not started: %s", kind, e.message)
        return None
    logger.info("Boot task %s started (task_id=%s)", result.kind, result.task_id)
    return result
