# tests/test_launcher.py

from __future__ import annotations

import logging

import pytest

from procsim.core.errors import (
    CapacityExceededError,
    ResourceExhaustedError,
    SpawnError,
    UnknownTaskKindError,
)
from procsim.core.state import SimState
from procsim.tasks.catalog import lookup_kind
from procsim.tasks.launcher import launch_task

from .fakes import FakeTaskRunner


def test_lookup_kind_is_forgiving() -> None:
    assert lookup_kind("snake game").name == "Snake Game"
    assert lookup_kind("SNAKE_GAME").name == "Snake Game"
    assert lookup_kind("SnakeGame").quote.cores == 2
    with pytest.raises(UnknownTaskKindError):
        lookup_kind("solitaire")


def test_background_launch_registers_and_allocates(state: SimState, runner: FakeTaskRunner) -> None:
    result = launch_task(state, "notepad", background=True, priority=4, remaining_time=6)

    assert result.background
    assert result.task_id is not None
    (task,) = state.registry.list()
    assert task.name == "Notepad"
    assert (task.priority, task.remaining_time) == (4, 6)
    assert task.handle == runner.spawned[0]
    assert state.ledger.snapshot().used.ram == 50


def test_background_launch_draws_random_priority_and_time(state: SimState) -> None:
    launch_task(state, "calculator", background=True)
    (task,) = state.registry.list()
    assert 1 <= task.priority <= 5
    assert 1 <= task.remaining_time <= 10


def test_foreground_launch_does_no_accounting(state: SimState, runner: FakeTaskRunner) -> None:
    result = launch_task(state, "calculator", background=False)

    assert not result.background
    assert result.task_id is None
    assert result.output == "Calculator ran in foreground"
    assert runner.foreground == ["Calculator"]
    assert runner.spawned == []
    assert len(state.registry) == 0
    assert state.ledger.snapshot().available == state.ledger.total


def test_launch_rejected_when_resources_short(state: SimState, runner: FakeTaskRunner) -> None:
    # settings: 200 MB RAM total; Minesweeper needs 60, so the fourth one does not fit.
    for _ in range(3):
        launch_task(state, "minesweeper", background=True)
    before = state.ledger.snapshot()

    with pytest.raises(ResourceExhaustedError):
        launch_task(state, "minesweeper", background=True)
    with pytest.raises(ResourceExhaustedError):
        launch_task(state, "minesweeper", background=False)

    assert state.ledger.snapshot() == before
    assert len(runner.spawned) == 3


def test_capacity_failure_terminates_spawned_worker(state: SimState, runner: FakeTaskRunner) -> None:
    for _ in range(state.registry.capacity):
        launch_task(state, "time", background=True)
    before = state.ledger.snapshot()

    with pytest.raises(CapacityExceededError):
        launch_task(state, "time", background=True)

    leaked = runner.spawned[-1]
    assert leaked in runner.terminated
    assert leaked.pid not in runner.live
    assert state.ledger.snapshot() == before


def test_failed_terminate_after_registration_error_is_logged(
    state: SimState, runner: FakeTaskRunner, caplog: pytest.LogCaptureFixture
) -> None:
    for _ in range(state.registry.capacity):
        launch_task(state, "time", background=True)
    runner.fail_terminate = True

    with caplog.at_level(logging.WARNING, logger="procsim.tasks.launcher"):
        with pytest.raises(CapacityExceededError):
            launch_task(state, "time", background=True)

    errors = [r for r in caplog.records if r.levelno >= logging.ERROR]
    assert errors, "terminate failure must be reported"
    leaked = runner.spawned[-1]
    assert str(leaked) in errors[0].getMessage()
    assert errors[0].exc_info is not None
    assert len(state.registry) == state.registry.capacity


def test_resource_race_after_precheck_terminates_worker(state: SimState, runner: FakeTaskRunner) -> None:
    # Someone else grabs the RAM between the pre-check and registration.
    original_spawn = runner.spawn

    def spawn_and_steal(kind: str):
        handle = original_spawn(kind)
        state.ledger.allocate(state.ledger.snapshot().available.ram, 0, 0)
        return handle

    runner.spawn = spawn_and_steal  # type: ignore[method-assign]

    with pytest.raises(ResourceExhaustedError):
        launch_task(state, "notepad", background=True)

    assert runner.terminated == runner.spawned
    assert len(state.registry) == 0


def test_spawn_failure_registers_nothing(state: SimState, runner: FakeTaskRunner) -> None:
    runner.fail_spawn = True

    with pytest.raises(SpawnError):
        launch_task(state, "notepad", background=True)

    assert len(state.registry) == 0
    assert state.ledger.snapshot().available == state.ledger.total


def test_unknown_kind(state: SimState) -> None:
    with pytest.raises(UnknownTaskKindError):
        launch_task(state, "tetris", background=True)
