"""procsim: a process/resource manager and CPU-scheduling simulator."""

__version__ = "0.1.0"
