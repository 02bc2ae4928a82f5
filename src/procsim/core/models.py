# src/procsim/core/models.py

from __future__ import annotations

import time
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

MAX_NAME_LENGTH = 50
MAX_TASKS = 50
TIME_QUANTUM = 2


class SchedulingPolicy(StrEnum):
    FCFS = "fcfs"
    ROUND_ROBIN = "round_robin"
    PRIORITY = "priority"

    @property
    def label(self) -> str:
        return _POLICY_LABELS[self]

    @classmethod
    def parse(cls, raw: str | None) -> SchedulingPolicy:
        """Accept menu numbers and common abbreviations ("rr", "prio", "2", ...)."""
        key = (raw or "").strip().lower().replace("-", "_").replace(" ", "_")
        try:
            return _POLICY_ALIASES[key]
        except KeyError:
            raise ValueError(f"unknown scheduling policy: {raw!r}") from None


_POLICY_LABELS = {
    SchedulingPolicy.FCFS: "First-Come-First-Serve",
    SchedulingPolicy.ROUND_ROBIN: "Round Robin",
    SchedulingPolicy.PRIORITY: "Priority",
}

_POLICY_ALIASES = {
    "fcfs": SchedulingPolicy.FCFS,
    "fifo": SchedulingPolicy.FCFS,
    "1": SchedulingPolicy.FCFS,
    "rr": SchedulingPolicy.ROUND_ROBIN,
    "round_robin": SchedulingPolicy.ROUND_ROBIN,
    "roundrobin": SchedulingPolicy.ROUND_ROBIN,
    "2": SchedulingPolicy.ROUND_ROBIN,
    "priority": SchedulingPolicy.PRIORITY,
    "prio": SchedulingPolicy.PRIORITY,
    "3": SchedulingPolicy.PRIORITY,
}


class ExecutionMode(StrEnum):
    USER = "user"
    KERNEL = "kernel"


@dataclass(frozen=True, slots=True)
class ResourceQuote:
    """Amount of RAM (MB), disk (MB) and CPU cores held by one task."""

    ram: int = 0
    disk: int = 0
    cores: int = 0

    def __post_init__(self) -> None:
        for field_name in ("ram", "disk", "cores"):
            value = getattr(self, field_name)
            if not isinstance(value, int) or value < 0:
                raise ValueError(f"{field_name} must be a non-negative integer, got {value!r}")

    def __add__(self, other: ResourceQuote) -> ResourceQuote:
        return ResourceQuote(self.ram + other.ram, self.disk + other.disk, self.cores + other.cores)


@dataclass(slots=True)
class Task:
    id: int
    name: str
    quote: ResourceQuote
    priority: int
    remaining_time: int
    started_at: float
    handle: Any = None

    running: bool = True
    minimized: bool = False

    @property
    def status(self) -> str:
        return "Minimized" if self.minimized else "Running"

    def elapsed(self, now: float | None = None) -> float:
        now_ts = time.time() if now is None else now
        return max(0.0, now_ts - self.started_at)


@dataclass(frozen=True, slots=True)
class LedgerSnapshot:
    total: ResourceQuote
    available: ResourceQuote

    @property
    def used(self) -> ResourceQuote:
        return ResourceQuote(
            ram=self.total.ram - self.available.ram,
            disk=self.total.disk - self.available.disk,
            cores=self.total.cores - self.available.cores,
        )

    def usage_percent(self, dimension: str) -> float:
        total = getattr(self.total, dimension)
        if total <= 0:
            return 0.0
        return getattr(self.used, dimension) / total * 100.0


def clip_name(name: str) -> str:
    return (name or "").strip()[:MAX_NAME_LENGTH]
