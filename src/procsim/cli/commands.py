# src/procsim/cli/commands.py

from __future__ import annotations

import contextlib
import inspect
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import cast

from ..core.errors import InvalidIndexError, SimulatorError
from ..core.models import ExecutionMode, SchedulingPolicy
from ..core.scheduler import TickReport
from ..core.state import SimState
from ..tasks.catalog import TASK_KINDS
from ..tasks.launcher import launch_task

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[SimState, list[str]], str]
CommandHandler3 = Callable[[SimState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class _Command:
    handler: CommandHandler
    ticks: bool


class CommandRegistry:
    """
    Slash-command registry used by the console (/help, /run, /tasks, ...).

    Each command declares whether a scheduler tick follows it. A tick runs even when the
    command itself failed, the same way a menu action is followed by scheduling.
    """

    def __init__(self) -> None:
        self._commands: dict[str, _Command] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
        *,
        ticks: bool = True,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        cmd = _Command(handler=handler, ticks=ticks)
        self._commands[key] = cmd
        self._help[key] = help_text
        for alias in aliases:
            self._commands[alias.lower()] = cmd

    def handle(
        self,
        state: SimState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        cmd = self._commands.get(name)
        if not cmd:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            reply = self._call(cmd.handler, state, args, emit)
        except SimulatorError as e:
            logger.info("/%s failed: %s (%s)", name, e.message, e.kind.value)
            reply = f"[ERROR] {e.message}"

        if cmd.ticks and not state.shut_down:
            note = render_tick(state.scheduler.tick())
            if note:
                reply = f"{reply}\n{note}"
        return reply

    @staticmethod
    def _call(
        handler: CommandHandler,
        state: SimState,
        args: list[str],
        emit: CommandEmitter | None,
    ) -> str:
        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def render_tick(report: TickReport) -> str:
    """Only evictions are worth telling the operator about."""
    return "\n".join(
        f"[SCHED] {t.name} finished its time slices and was removed." for t in report.evicted
    )


def _parse_index(args: list[str], usage: str) -> int:
    if not args:
        raise InvalidIndexError(f"Missing task index. Usage: {usage}")
    try:
        return int(args[0])
    except ValueError:
        raise InvalidIndexError(f"Invalid task index: {args[0]!r}") from None


def _fmt_elapsed(seconds: float) -> str:
    return f"{seconds:.0f} seconds"


def cmd_help(state: SimState, args: list[str]) -> str:
    return registry.build_help()


def cmd_apps(state: SimState, args: list[str]) -> str:
    lines = ["Task kinds:", f"  {'Name':<16} {'RAM(MB)':>8} {'HDD(MB)':>8} {'CPU':>4}"]
    for k in TASK_KINDS:
        lines.append(f"  {k.name:<16} {k.quote.ram:>8} {k.quote.disk:>8} {k.quote.cores:>4}")
    return "\n".join(lines)


def cmd_run(state: SimState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /run <kind> [bg|fg] [priority=N] [time=N]

    Foreground is the default; "bg" starts the task in the background.
    """
    background = False
    priority: int | None = None
    remaining: int | None = None
    words: list[str] = []

    for arg in args:
        low = arg.lower()
        if low in ("bg", "background", "&"):
            background = True
        elif low in ("fg", "foreground"):
            background = False
        elif "=" in low:
            key, _, value = low.partition("=")
            try:
                number = int(value)
            except ValueError:
                return f"Invalid value for {key}: {value!r}"
            if key in ("priority", "prio", "p"):
                priority = number
            elif key in ("time", "remaining", "t"):
                remaining = number
            else:
                return f"Unknown option: {key}"
        else:
            words.append(arg)

    if not words:
        return "Usage: /run <kind> [bg|fg] [priority=N] [time=N]. Use /apps to list kinds."

    kind = " ".join(words)
    if emit and background:
        with contextlib.suppress(Exception):
            emit(f"Starting {kind} in background...")

    result = launch_task(state, kind, background=background, priority=priority, remaining_time=remaining)
    if result.background:
        return f"[OK] Task started in background! ({result.kind}, task_id={result.task_id})"
    return result.output or f"{result.kind} finished."


def cmd_tasks(state: SimState, args: list[str]) -> str:
    tasks = state.registry.list()
    if not tasks:
        return "No tasks are currently running."

    now = time.time()
    lines = [
        "=== Running Tasks ===",
        f"{'ID':<5} {'Name':<20} {'RAM(MB)':<10} {'HDD(MB)':<10} {'CPU':<10} {'Status':<10} {'Running Time':<15}",
    ]
    for i, t in enumerate(tasks):
        if not t.running:
            continue
        lines.append(
            f"{i:<5} {t.name:<20} {t.quote.ram:<10} {t.quote.disk:<10} {t.quote.cores:<10} "
            f"{t.status:<10} {_fmt_elapsed(t.elapsed(now))}"
        )
    if state.mode == ExecutionMode.KERNEL:
        lines.append("")
        lines.append("Kernel mode: /close <i>, /minimize <i>, /restore <i>, /sched")
    return "\n".join(lines)


def cmd_close(state: SimState, args: list[str]) -> str:
    state.require_kernel("close")
    task = state.registry.close(_parse_index(args, "/close <i>"))
    return f"[OK] Task closed successfully! ({task.name})"


def cmd_minimize(state: SimState, args: list[str]) -> str:
    state.require_kernel("minimize")
    task = state.registry.minimize(_parse_index(args, "/minimize <i>"))
    return f"[OK] Task minimized successfully! ({task.name})"


def cmd_restore(state: SimState, args: list[str]) -> str:
    state.require_kernel("restore")
    task = state.registry.restore(_parse_index(args, "/restore <i>"))
    return f"[OK] Task restored successfully! ({task.name})"


def cmd_kill(state: SimState, args: list[str]) -> str:
    """End task immediately: works in any mode, -1 cancels."""
    index = _parse_index(args, "/kill <i>")
    if index == -1:
        return "Cancelled."
    task = state.registry.close(index)
    return f"[OK] Task closed successfully! ({task.name})"


def cmd_mode(state: SimState, args: list[str]) -> str:
    mode = state.toggle_mode()
    return f"[OK] Switched to {mode.value.capitalize()} Mode"


def cmd_policy(state: SimState, args: list[str]) -> str:
    """
    /policy             -> show current algorithm
    /policy fcfs|rr|priority
    """
    if not args:
        return (
            f"Current algorithm: {state.scheduler.policy.label}\n"
            "Use /policy fcfs | /policy rr | /policy priority."
        )
    try:
        policy = SchedulingPolicy.parse(" ".join(args))
    except ValueError:
        return "Usage: /policy fcfs | rr | priority."
    state.scheduler.set_policy(policy)
    return f"[OK] Scheduling algorithm changed! ({policy.label})"


def cmd_sched(state: SimState, args: list[str]) -> str:
    return state.scheduler.describe()


def cmd_status(state: SimState, args: list[str]) -> str:
    snap = state.ledger.snapshot()
    used, total = snap.used, snap.total
    return (
        "Status:\n"
        f"  Mode: {state.mode.value.capitalize()}\n"
        f"  Scheduler: {state.scheduler.policy.label}\n"
        f"  Tasks: {len(state.registry)}/{state.registry.capacity}\n"
        f"  RAM: {used.ram}/{total.ram} MB ({snap.usage_percent('ram'):.1f}% used)\n"
        f"  HDD: {used.disk}/{total.disk} MB ({snap.usage_percent('disk'):.1f}% used)\n"
        f"  CPU Cores: {used.cores}/{total.cores} in use"
    )


def cmd_tick(state: SimState, args: list[str]) -> str:
    report = state.scheduler.tick()
    return render_tick(report) or f"[SCHED] Tick done ({report.policy.label})."


def cmd_shutdown(state: SimState, args: list[str]) -> str:
    closed = state.shutdown()
    return f"Shutting down... {closed} task(s) stopped."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("apps", cmd_apps, help_text="List task kinds and their resource needs.")
registry.register(
    "run", cmd_run, help_text="Run a task: /run <kind> [bg|fg] [priority=N] [time=N].", aliases=["start"]
)
registry.register("tasks", cmd_tasks, help_text="Show running tasks.", aliases=["ps"], ticks=False)
registry.register("close", cmd_close, help_text="Close task <i> (kernel mode).", ticks=False)
registry.register("minimize", cmd_minimize, help_text="Minimize task <i> (kernel mode).", ticks=False)
registry.register("restore", cmd_restore, help_text="Restore task <i> (kernel mode).", ticks=False)
registry.register("kill", cmd_kill, help_text="End task <i> immediately.", aliases=["end"], ticks=False)
registry.register("mode", cmd_mode, help_text="Switch user/kernel mode.", ticks=False)
registry.register(
    "policy", cmd_policy, help_text="Show/set CPU scheduling: /policy fcfs | rr | priority.", ticks=False
)
registry.register("sched", cmd_sched, help_text="Show scheduling information.", ticks=False)
registry.register("status", cmd_status, help_text="Show resource usage, mode and scheduler.")
registry.register("tick", cmd_tick, help_text="Run one scheduler tick now.", ticks=False)
registry.register(
    "shutdown", cmd_shutdown, help_text="Stop all tasks and exit.", aliases=["exit", "quit"], ticks=False
)
