# src/procsim/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core never starts or stops work on its own; it calls a TaskRunner.
Keeping it a Protocol lets the console use real worker threads while tests use a fake.
"""

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from .state import SimState


class TaskRunner(Protocol):
    """Starts and stops the opaque unit of work behind a background task."""

    def spawn(self, kind: str) -> Any: ...

    def terminate(self, handle: Any) -> None:
        """Stop the worker. Must be idempotent: an already-stopped handle is not an error."""
        ...

    def run_foreground(self, kind: str, state: SimState) -> str | None: ...

    def terminate_all(self) -> int: ...
