"""
Simulator core.

Components:
- models.py: data structures (Task, ResourceQuote, SchedulingPolicy, snapshots)
- ledger.py: RAM/disk/core accounting
- registry.py: fixed-capacity ordered task table
- scheduler.py: FCFS / Round Robin / Priority ticks
- state.py: one simulator session wiring the pieces together
"""
