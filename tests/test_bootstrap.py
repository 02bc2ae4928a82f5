# tests/test_bootstrap.py

from __future__ import annotations

from types import SimpleNamespace

import pytest

from procsim.cli.bootstrap import boot, create_initial_state
from procsim.config import Settings
from procsim.core.models import ExecutionMode, SchedulingPolicy
from procsim.core.state import SimState

from .fakes import FakeTaskRunner


def test_create_initial_state_wires_settings(settings: SimpleNamespace, runner: FakeTaskRunner) -> None:
    settings.policy = "rr"
    settings.kernel_mode = True
    state = create_initial_state(settings=settings, runner=runner)

    assert state.ledger.total.ram == 200
    assert state.registry.capacity == 5
    assert state.scheduler.policy == SchedulingPolicy.ROUND_ROBIN
    assert state.scheduler.quantum == 2
    assert state.mode == ExecutionMode.KERNEL


def test_unknown_policy_falls_back_to_fcfs(settings: SimpleNamespace, runner: FakeTaskRunner) -> None:
    settings.policy = "lottery"
    state = create_initial_state(settings=settings, runner=runner)
    assert state.scheduler.policy == SchedulingPolicy.FCFS


def test_boot_starts_calendar_in_background(state: SimState, runner: FakeTaskRunner) -> None:
    result = boot(state)

    assert result is not None and result.background
    assert [t.name for t in state.registry.list()] == ["Calendar"]
    assert [h.name for h in runner.spawned] == ["Calendar"]


def test_boot_is_skipped_or_survives_failures(settings: SimpleNamespace, runner: FakeTaskRunner) -> None:
    settings.boot_task = ""
    assert boot(create_initial_state(settings=settings, runner=runner)) is None

    settings.boot_task = "Calendar"
    settings.total_ram = 0
    state = create_initial_state(settings=settings, runner=runner)
    assert boot(state) is None
    assert len(state.registry) == 0


def test_shutdown_is_idempotent(state: SimState, runner: FakeTaskRunner) -> None:
    boot(state)
    assert state.shutdown() == 1
    assert state.shutdown() == 0
    assert not runner.live


def test_settings_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PROCSIM_TOTAL_RAM", "4096")
    monkeypatch.setenv("PROCSIM_TOTAL_CORES", "not-a-number")
    monkeypatch.setenv("PROCSIM_POLICY", "priority")
    monkeypatch.setenv("PROCSIM_SEED", "42")
    monkeypatch.setenv("PROCSIM_KERNEL_MODE", "yes")
    monkeypatch.delenv("PROCSIM_MAX_TASKS", raising=False)

    s = Settings.from_env()

    assert s.total_ram == 4096
    assert s.total_cores == 8
    assert s.policy == "priority"
    assert s.seed == 42
    assert s.kernel_mode is True
    assert s.max_tasks == 50
