# tests/test_commands.py

from __future__ import annotations

from procsim.cli.commands import CommandRegistry, registry
from procsim.core.models import ExecutionMode, SchedulingPolicy
from procsim.core.state import SimState

from .fakes import FakeTaskRunner


def test_command_registry_routes_2_and_3_params(state: SimState) -> None:
    reg = CommandRegistry()
    called = {"h2": 0, "h3": 0}

    def h2(state, args):
        called["h2"] += 1
        return "h2"

    def h3(state, args, emit):
        called["h3"] += 1
        if emit is not None:
            emit("note")
        return "h3"

    reg.register("a", h2, "a", ticks=False)
    reg.register("b", h3, "b", ticks=False)

    notes: list[str] = []
    assert reg.handle(state, "/a x") == "h2"
    assert reg.handle(state, "/b y", emit=notes.append) == "h3"
    assert called == {"h2": 1, "h3": 1}
    assert notes == ["note"]


def test_command_registry_unknown_and_non_command(state: SimState) -> None:
    reg = CommandRegistry()
    assert reg.handle(state, "hello") is None
    assert "Unknown command" in (reg.handle(state, "/nope") or "")
    assert "Empty command" in (reg.handle(state, "/") or "")


def test_ticking_commands_tick_and_others_do_not(state: SimState) -> None:
    ticks: list[int] = []
    original_tick = state.scheduler.tick

    def counting_tick():
        ticks.append(1)
        return original_tick()

    state.scheduler.tick = counting_tick  # type: ignore[method-assign]

    registry.handle(state, "/help")
    registry.handle(state, "/run calculator")
    assert len(ticks) == 2

    for line in ("/tasks", "/mode", "/policy rr", "/sched", "/kill 0", "/mode"):
        registry.handle(state, line)
    assert len(ticks) == 2


def test_run_background_and_list(state: SimState, runner: FakeTaskRunner) -> None:
    reply = registry.handle(state, "/run music player bg priority=3 time=9") or ""
    assert "[OK] Task started in background!" in reply

    table = registry.handle(state, "/tasks") or ""
    assert "Music Player" in table
    assert "Running" in table
    assert len(runner.spawned) == 1


def test_run_reports_errors_without_raising(state: SimState) -> None:
    assert "[ERROR]" in (registry.handle(state, "/run tetris bg") or "")
    assert "Usage" in (registry.handle(state, "/run") or "")
    assert "Invalid value" in (registry.handle(state, "/run notepad priority=high") or "")


def test_close_requires_kernel_mode(state: SimState) -> None:
    registry.handle(state, "/run notepad bg")
    assert state.mode == ExecutionMode.USER

    reply = registry.handle(state, "/close 0") or ""
    assert "[ERROR]" in reply and "kernel mode" in reply
    assert len(state.registry) == 1

    registry.handle(state, "/mode")
    assert state.mode == ExecutionMode.KERNEL
    assert "minimized" in (registry.handle(state, "/minimize 0") or "")
    assert state.registry.list()[0].minimized
    assert "restored" in (registry.handle(state, "/restore 0") or "")
    assert "closed" in (registry.handle(state, "/close 0") or "")
    assert len(state.registry) == 0


def test_kill_works_in_user_mode_and_validates_index(state: SimState) -> None:
    registry.handle(state, "/run notepad bg")

    assert "[ERROR]" in (registry.handle(state, "/kill 1") or "")
    assert "[ERROR]" in (registry.handle(state, "/kill abc") or "")
    assert registry.handle(state, "/kill -1") == "Cancelled."
    assert "closed" in (registry.handle(state, "/kill 0") or "")
    assert state.ledger.snapshot().available == state.ledger.total


def test_policy_switch_and_round_robin_eviction_note(state: SimState) -> None:
    assert "First-Come-First-Serve" in (registry.handle(state, "/policy") or "")
    registry.handle(state, "/policy rr")
    assert state.scheduler.policy == SchedulingPolicy.ROUND_ROBIN

    # The /run itself is followed by a tick: the only task is served and runs out.
    reply = registry.handle(state, "/run notepad bg time=1") or ""
    assert "finished its time slices" in reply
    assert len(state.registry) == 0

    assert "Usage" in (registry.handle(state, "/policy lottery") or "")


def test_status_and_shutdown(state: SimState, runner: FakeTaskRunner) -> None:
    registry.handle(state, "/run notepad bg")
    assert "RAM: 50/200 MB" in (registry.handle(state, "/status") or "")

    reply = registry.handle(state, "/shutdown") or ""
    assert "1 task(s) stopped" in reply
    assert state.shut_down
    assert not runner.live
    assert state.ledger.snapshot().available == state.ledger.total
