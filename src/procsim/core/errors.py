# src/procsim/core/errors.py

from __future__ import annotations

from enum import StrEnum


class ErrorKind(StrEnum):
    RESOURCE_EXHAUSTED = "resource_exhausted"
    CAPACITY_EXCEEDED = "capacity_exceeded"
    INVALID_INDEX = "invalid_index"
    UNKNOWN_KIND = "unknown_kind"
    SPAWN_FAILED = "spawn_failed"
    PERMISSION_DENIED = "permission_denied"
    LEDGER_CORRUPTED = "ledger_corrupted"


class SimulatorError(Exception):
    """
    Base class for recoverable simulator errors.

    None of these are fatal: callers catch them and show the message to the operator.
    """

    kind: ErrorKind = ErrorKind.INVALID_INDEX

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ResourceExhaustedError(SimulatorError):
    kind = ErrorKind.RESOURCE_EXHAUSTED


class CapacityExceededError(SimulatorError):
    kind = ErrorKind.CAPACITY_EXCEEDED


class InvalidIndexError(SimulatorError):
    kind = ErrorKind.INVALID_INDEX


class UnknownTaskKindError(SimulatorError):
    kind = ErrorKind.UNKNOWN_KIND


class SpawnError(SimulatorError):
    kind = ErrorKind.SPAWN_FAILED


class PermissionDeniedError(SimulatorError):
    kind = ErrorKind.PERMISSION_DENIED


class LedgerError(SimulatorError):
    """Raised when a release would push available above total (double release)."""

    kind = ErrorKind.LEDGER_CORRUPTED
