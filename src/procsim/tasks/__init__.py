"""
Task subsystem.

Components:
- catalog.py: static quote table (task kind -> RAM/disk/cores)
- runner.py: thread-backed TaskRunner (background workers + foreground routines)
- apps.py: foreground routines
- launcher.py: creation front-door tying runner, registry and ledger together
"""
