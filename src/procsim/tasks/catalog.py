# src/procsim/tasks/catalog.py

from __future__ import annotations

import re
from dataclasses import dataclass

from ..core.errors import UnknownTaskKindError
from ..core.models import ResourceQuote


@dataclass(frozen=True, slots=True)
class TaskKind:
    name: str
    quote: ResourceQuote
    routine: str


def _kind(name: str, ram: int, disk: int, cores: int, routine: str = "placeholder") -> TaskKind:
    return TaskKind(name=name, quote=ResourceQuote(ram=ram, disk=disk, cores=cores), routine=routine)


# Static quote table: RAM (MB), disk (MB), CPU cores per task kind.
TASK_KINDS: tuple[TaskKind, ...] = (
    _kind("Notepad", 50, 5, 1),
    _kind("Calculator", 20, 1, 1),
    _kind("Time", 10, 1, 1, routine="time"),
    _kind("Calendar", 15, 2, 1, routine="calendar"),
    _kind("Create File", 30, 10, 1),
    _kind("Move File", 40, 10, 1),
    _kind("Copy File", 40, 10, 1),
    _kind("Delete File", 30, 1, 1),
    _kind("File Info", 25, 1, 1),
    _kind("Minesweeper", 60, 10, 2),
    _kind("Music Player", 40, 20, 1),
    _kind("System Monitor", 50, 5, 2, routine="system_monitor"),
    _kind("Process Manager", 45, 5, 2, routine="process_manager"),
    _kind("Memory Viewer", 35, 5, 1, routine="memory_viewer"),
    _kind("Snake Game", 55, 10, 2),
    _kind("Help System", 30, 5, 1, routine="help"),
)


def _normalize(name: str) -> str:
    return re.sub(r"[\s_\-]+", "", (name or "").lower())


_BY_KEY = {_normalize(k.name): k for k in TASK_KINDS}


def lookup_kind(name: str) -> TaskKind:
    """Resolve "snake game", "snake_game" or "SnakeGame" to the same kind."""
    kind = _BY_KEY.get(_normalize(name))
    if kind is None:
        raise UnknownTaskKindError(f"Unknown task kind: {name!r}. Use /apps to list kinds.")
    return kind
