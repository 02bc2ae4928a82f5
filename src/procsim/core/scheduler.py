# src/procsim/core/scheduler.py

from __future__ import annotations

"""
CPU scheduler.

One tick reorders the task registry according to the active policy:
- FCFS: arrival order is kept as-is
- ROUND_ROBIN: the head is served (moved to the tail, remaining_time -= quantum) and
  evicted once its remaining time runs out
- PRIORITY: stable sort, highest priority first

Switching policy never reorders anything by itself; the new policy applies on the next tick.
A tick never raises because of a worker that fails to terminate: that is logged and the
tick carries on.
"""

import logging
from dataclasses import dataclass

from .models import TIME_QUANTUM, SchedulingPolicy, Task
from .registry import TaskRegistry

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class TickReport:
    """What a single tick did (for the console and for tests)."""

    policy: SchedulingPolicy
    served_id: int | None = None
    rotated: bool = False
    reordered: bool = False
    evicted: tuple[Task, ...] = ()


class Scheduler:
    def __init__(
        self,
        registry: TaskRegistry,
        *,
        policy: SchedulingPolicy = SchedulingPolicy.FCFS,
        quantum: int = TIME_QUANTUM,
    ) -> None:
        if quantum <= 0:
            raise ValueError("quantum must be positive")
        self._registry = registry
        self._policy = SchedulingPolicy(policy)
        self._quantum = int(quantum)

    @property
    def policy(self) -> SchedulingPolicy:
        return self._policy

    @property
    def quantum(self) -> int:
        return self._quantum

    def set_policy(self, policy: SchedulingPolicy | str) -> SchedulingPolicy:
        new_policy = policy if isinstance(policy, SchedulingPolicy) else SchedulingPolicy.parse(policy)
        if new_policy != self._policy:
            logger.info("Scheduling policy %s -> %s", self._policy.value, new_policy.value)
        self._policy = new_policy
        return new_policy

    def tick(self) -> TickReport:
        with self._registry.lock:
            if self._policy == SchedulingPolicy.ROUND_ROBIN:
                report = self._tick_round_robin()
            elif self._policy == SchedulingPolicy.PRIORITY:
                report = self._tick_priority()
            else:
                report = TickReport(policy=self._policy)

        logger.debug(
            "tick policy=%s served=%s evicted=%s",
            report.policy.value,
            report.served_id,
            [t.id for t in report.evicted],
        )
        return report

    def _tick_round_robin(self) -> TickReport:
        # The served task is the old head, now sitting at the tail.
        served = self._registry.rotate_head()
        if served is None:
            return TickReport(policy=self._policy)
        rotated = len(self._registry) > 1

        served.remaining_time -= self._quantum
        if served.remaining_time > 0:
            return TickReport(policy=self._policy, served_id=served.id, rotated=rotated)

        try:
            evicted = self._registry.evict_tail()
        except Exception:
            logger.exception("Round Robin eviction failed task_id=%s", served.id)
            return TickReport(policy=self._policy, served_id=served.id, rotated=rotated)

        logger.info("Task %s finished its time slices (Round Robin), removed", evicted.id)
        return TickReport(
            policy=self._policy,
            served_id=served.id,
            rotated=rotated,
            evicted=(evicted,),
        )

    def _tick_priority(self) -> TickReport:
        # sorted() is stable and reverse=True keeps equal priorities in arrival order.
        reordered = self._registry.reorder(key=lambda t: t.priority, reverse=True)
        return TickReport(policy=self._policy, reordered=reordered)

    def describe(self) -> str:
        lines = [
            "=== CPU Scheduling Information ===",
            f"Current algorithm: {self._policy.label}",
        ]
        if self._policy == SchedulingPolicy.ROUND_ROBIN:
            lines.append(f"Time Quantum: {self._quantum}")

        tasks = self._registry.list()
        lines.append("")
        lines.append("Task Queue:")
        if not tasks:
            lines.append("  (empty)")
            return "\n".join(lines)

        lines.append(f"{'ID':<5} {'Name':<20} {'Priority':<10} {'Rem Time':<10} {'Status':<10}")
        for i, t in enumerate(tasks):
            lines.append(f"{i:<5} {t.name:<20} {t.priority:<10} {t.remaining_time:<10} {t.status:<10}")
        return "\n".join(lines)
