# src/procsim/connectors/console_connector.py

from __future__ import annotations

import logging
import threading
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..core.state import SimState

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}")


def _prompt(state: SimState) -> str:
    return f"{state.mode.value}@{state.scheduler.policy.value}> "


def run_console_loop(state: SimState, stop: threading.Event | None = None) -> None:
    logger.info("Console connector started (mode=%s).", state.mode.value)
    app_name = str(getattr(getattr(state, "settings", None), "app_name", "procsim"))
    _print_ts(f"[{app_name}] Operating System Simulator. Use /help for commands, /shutdown to quit.\n")

    def emit(text: str) -> None:
        # Immediate user-visible feedback before a long operation finishes.
        print(f"[{_ts_local()}] {text}", flush=True)

    while not state.shut_down and not (stop is not None and stop.is_set()):
        try:
            user_input = input(_prompt(state)).strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        # Plain words are accepted too: "tasks" == "/tasks".
        line = user_input if user_input.startswith("/") else f"/{user_input}"

        try:
            response = command_registry.handle(state, line, emit=emit)
        except Exception:
            logger.exception("Command handler crashed.")
            response = "Internal error while handling a command."

        if response:
            _print_ts(response)

    logger.info("Console connector finished.")
