# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "PROCSIM_APP_NAME": "App display name (default: procsim).",
    "PROCSIM_LOG_LEVEL": "Console logging level (default: INFO). The log file always gets DEBUG.",
    "PROCSIM_DATA_DIR": "Directory for procsim.log (default: .local/procsim).",
    # Machine resources
    "PROCSIM_TOTAL_RAM": "Total simulated RAM in MB (default: 1024).",
    "PROCSIM_TOTAL_DISK": "Total simulated disk in MB (default: 2048).",
    "PROCSIM_TOTAL_CORES": "Number of simulated CPU cores (default: 8).",
    # Scheduling
    "PROCSIM_MAX_TASKS": "Task table capacity (default: 50).",
    "PROCSIM_TIME_QUANTUM": "Round Robin quantum in ticks (default: 2).",
    "PROCSIM_POLICY": "Initial policy: fcfs | rr | priority (default: fcfs).",
    "PROCSIM_SEED": "Seed for random task priority / burst time (default: unset).",
    # Session
    "PROCSIM_BOOT_TASK": "Task kind started in background at boot (default: Calendar, empty = none).",
    "PROCSIM_KERNEL_MODE": "Start in kernel mode (true/false, default: false).",
}
