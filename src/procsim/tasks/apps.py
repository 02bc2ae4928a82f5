# src/procsim/tasks/apps.py

from __future__ import annotations

"""
Foreground routines.

Only the routines that report on the simulator itself are implemented (time, calendar,
system monitor, process manager, memory viewer, help). The interactive toy apps are
outside the simulator core; their kinds still exist and run a placeholder routine.
"""

import calendar
import logging
from collections.abc import Callable
from datetime import datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..core.state import SimState
    from .catalog import TaskKind

logger = logging.getLogger(__name__)

Routine = Callable[["SimState"], str]


def _now() -> datetime:
    return datetime.now().astimezone()


def show_time(state: SimState) -> str:
    now = _now()
    return f"Current time: {now.strftime('%H:%M:%S')}\nDate: {now.strftime('%Y-%m-%d (%A)')}"


def show_calendar(state: SimState) -> str:
    now = _now()
    return calendar.TextCalendar(firstweekday=calendar.SUNDAY).formatmonth(now.year, now.month)


def system_monitor(state: SimState) -> str:
    snap = state.ledger.snapshot()
    used, total = snap.used, snap.total
    return (
        "=== System Monitor ===\n"
        f"RAM: {used.ram}/{total.ram} MB ({snap.usage_percent('ram'):.1f}% used)\n"
        f"HDD: {used.disk}/{total.disk} MB ({snap.usage_percent('disk'):.1f}% used)\n"
        f"CPU Cores: {used.cores}/{total.cores} in use"
    )


def process_manager(state: SimState) -> str:
    tasks = state.registry.list()
    if not tasks:
        return "=== Process Manager ===\nNo processes running."
    lines = [
        "=== Process Manager ===",
        f"{'ID':<5} {'Name':<20} {'RAM(MB)':<10} {'HDD(MB)':<10} {'CPU':<10} {'Status':<10}",
    ]
    for i, t in enumerate(tasks):
        lines.append(
            f"{i:<5} {t.name:<20} {t.quote.ram:<10} {t.quote.disk:<10} {t.quote.cores:<10} {t.status:<10}"
        )
    return "\n".join(lines)


def memory_viewer(state: SimState) -> str:
    snap = state.ledger.snapshot()
    lines = [
        "=== Memory Viewer ===",
        f"Total RAM: {snap.total.ram} MB",
        f"Used RAM: {snap.used.ram} MB",
        f"Free RAM: {snap.available.ram} MB",
        "",
        "Process Memory Usage:",
    ]
    for t in state.registry.list():
        lines.append(f"{t.name:<20}: {t.quote.ram:4d} MB")
    return "\n".join(lines)


def help_system(state: SimState) -> str:
    return (
        "=== Help System ===\n"
        "Start apps with /run <kind> [bg|fg]; background apps hold RAM, disk and CPU cores\n"
        "until they are closed or, under Round Robin, run out of time slices.\n"
        "/tasks shows running tasks, /kill <i> ends one immediately.\n"
        "/mode switches between user and kernel mode; kernel mode allows\n"
        "/close, /minimize and /restore.\n"
        "/policy switches the CPU scheduling algorithm (fcfs, rr, priority);\n"
        "/sched shows the scheduling queue.\n"
        "/shutdown stops every task and exits."
    )


ROUTINES: dict[str, Routine] = {
    "time": show_time,
    "calendar": show_calendar,
    "system_monitor": system_monitor,
    "process_manager": process_manager,
    "memory_viewer": memory_viewer,
    "help": help_system,
}


def run_routine(kind: TaskKind, state: SimState) -> str | None:
    routine = ROUTINES.get(kind.routine)
    if routine is None:
        logger.debug("No interactive routine for %s; running placeholder", kind.name)
        return f"{kind.name} finished."
    return routine(state)
