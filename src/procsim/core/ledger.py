# src/procsim/core/ledger.py

from __future__ import annotations

"""
Resource ledger.

Tracks total vs. available RAM, disk and CPU cores for one simulator session.

Thread-safety:
- every read and mutation runs inside one short critical section (threading.Lock)
- try_allocate() checks and allocates in the same section, so two callers can never
  both see the same free capacity
"""

import logging
import threading

from .errors import LedgerError, ResourceExhaustedError
from .models import LedgerSnapshot, ResourceQuote

logger = logging.getLogger(__name__)


class ResourceLedger:
    def __init__(self, ram: int, disk: int, cores: int) -> None:
        # ResourceQuote validates non-negative ints for us.
        self._total = ResourceQuote(ram=ram, disk=disk, cores=cores)
        self._ram = ram
        self._disk = disk
        self._cores = cores
        self._lock = threading.Lock()
        logger.debug("ResourceLedger ready total=%s", self._total)

    @property
    def total(self) -> ResourceQuote:
        return self._total

    # ---- low-level helpers (caller holds self._lock) ----

    def _covers(self, ram: int, disk: int, cores: int) -> bool:
        return ram <= self._ram and disk <= self._disk and cores <= self._cores

    def _apply(self, ram: int, disk: int, cores: int) -> None:
        self._ram += ram
        self._disk += disk
        self._cores += cores

    # ---- public API ----

    def available(self, ram: int, disk: int, cores: int) -> bool:
        with self._lock:
            return self._covers(ram, disk, cores)

    def allocate(self, ram: int, disk: int, cores: int) -> None:
        """
        Take capacity out of the pool.

        The caller is expected to have checked availability first; the ledger still refuses
        to go negative so accounting bugs surface instead of corrupting the counters.
        """
        with self._lock:
            if not self._covers(ram, disk, cores):
                raise ResourceExhaustedError(
                    f"Not enough resources (need ram={ram} disk={disk} cores={cores}, "
                    f"have ram={self._ram} disk={self._disk} cores={self._cores})"
                )
            self._apply(-ram, -disk, -cores)

    def release(self, ram: int, disk: int, cores: int) -> None:
        with self._lock:
            if (
                self._ram + ram > self._total.ram
                or self._disk + disk > self._total.disk
                or self._cores + cores > self._total.cores
            ):
                raise LedgerError(
                    f"Release of ram={ram} disk={disk} cores={cores} exceeds ledger totals"
                )
            self._apply(ram, disk, cores)

    def try_allocate(self, quote: ResourceQuote) -> bool:
        with self._lock:
            if not self._covers(quote.ram, quote.disk, quote.cores):
                return False
            self._apply(-quote.ram, -quote.disk, -quote.cores)
            return True

    def available_quote(self, quote: ResourceQuote) -> bool:
        return self.available(quote.ram, quote.disk, quote.cores)

    def release_quote(self, quote: ResourceQuote) -> None:
        self.release(quote.ram, quote.disk, quote.cores)

    def snapshot(self) -> LedgerSnapshot:
        with self._lock:
            available = ResourceQuote(ram=self._ram, disk=self._disk, cores=self._cores)
        return LedgerSnapshot(total=self._total, available=available)
