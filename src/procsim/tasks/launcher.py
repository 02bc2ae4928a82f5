# src/procsim/tasks/launcher.py

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..core.errors import ResourceExhaustedError, SpawnError
from ..core.state import SimState
from .catalog import lookup_kind

logger = logging.getLogger(__name__)

PRIORITY_RANGE = (1, 5)
REMAINING_TIME_RANGE = (1, 10)


@dataclass(slots=True, frozen=True)
class LaunchResult:
    kind: str
    background: bool
    task_id: int | None = None
    output: str | None = None


def launch_task(
    state: SimState,
    kind: str,
    *,
    background: bool,
    priority: int | None = None,
    remaining_time: int | None = None,
) -> LaunchResult:
    """
    Run a task kind in the foreground or start it as a background task.

    Foreground runs call the routine directly: no registry slot, no resource accounting.
    Background runs spawn a worker first and then register it; if registration fails
    (capacity or resources) the worker is terminated before the error propagates,
    and a worker that refuses to stop is logged at ERROR. The registration error is
    what propagates either way.

    Raises UnknownTaskKindError, ResourceExhaustedError, CapacityExceededError, SpawnError.
    """
    task_kind = lookup_kind(kind)
    quote = task_kind.quote

    if not state.ledger.available_quote(quote):
        raise ResourceExhaustedError(f"Not enough resources to start {task_kind.name}!")

    if not background:
        output = state.runner.run_foreground(task_kind.name, state)
        return LaunchResult(kind=task_kind.name, background=False, output=output)

    if priority is None:
        priority = state.rng.randint(*PRIORITY_RANGE)
    if remaining_time is None:
        remaining_time = state.rng.randint(*REMAINING_TIME_RANGE)

    try:
        handle = state.runner.spawn(task_kind.name)
    except SpawnError:
        raise
    except Exception as e:
        logger.exception("spawn failed kind=%s", task_kind.name)
        raise SpawnError(f"Could not start {task_kind.name}") from e

    try:
        task_id = state.registry.create(
            task_kind.name,
            quote.ram,
            quote.disk,
            quote.cores,
            priority,
            remaining_time,
            handle,
        )
    except Exception:
        logger.warning("Registration of %s failed; terminating worker %s", task_kind.name, handle)
        try:
            state.runner.terminate(handle)
        except Exception:
            logger.exception("terminate failed after registration error handle=%s", handle)
        raise

    return LaunchResult(kind=task_kind.name, background=True, task_id=task_id)
