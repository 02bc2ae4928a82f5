# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from procsim.cli.bootstrap import create_initial_state
from procsim.core.ledger import ResourceLedger
from procsim.core.registry import TaskRegistry
from procsim.core.state import SimState

from .fakes import FakeTaskRunner


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with the bootstrap and core modules.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the environment and deterministic.
    """
    return SimpleNamespace(
        app_name="procsim-test",
        log_level="DEBUG",
        data_dir=tmp_path,
        total_ram=200,
        total_disk=100,
        total_cores=8,
        max_tasks=5,
        time_quantum=2,
        policy="fcfs",
        seed=1234,
        boot_task="Calendar",
        kernel_mode=False,
    )


@pytest.fixture()
def runner() -> FakeTaskRunner:
    return FakeTaskRunner()


@pytest.fixture()
def state(settings: SimpleNamespace, runner: FakeTaskRunner) -> SimState:
    """SimState wired with the fake runner (no threads)."""
    return create_initial_state(settings=settings, runner=runner)


@pytest.fixture()
def ledger() -> ResourceLedger:
    return ResourceLedger(ram=100, disk=50, cores=4)


@pytest.fixture()
def registry(ledger: ResourceLedger, runner: FakeTaskRunner) -> TaskRegistry:
    return TaskRegistry(ledger, capacity=4, terminate=runner.terminate, clock=lambda: 1000.0)
