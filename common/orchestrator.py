# common/orchestrator.py
# -*- coding: utf-8 -*-
"""
Centralized orchestrator for managing and executing sequences of tasks.
"""

import logging
import sys
from typing import Any, Callable, Dict, List, Optional


class StopOrchestration(Exception):
    """
    Raised by a task to end the run early without an error.

    The remaining tasks are skipped and `Orchestrator.run` returns False
    instead of exiting the process.
    """


class Orchestrator:
    """A centralized orchestrator to run a series of defined tasks."""

    def __init__(
        self,
        app_settings: Any,
        orchestrator_logger: Optional[logging.Logger] = None,
        context: Any = None,
    ):
        """
        Initializes the Orchestrator.

        Args:
            app_settings: The application settings object.
            orchestrator_logger: An optional logger instance.
            context: Shared state handed to every task. Defaults to a dict.
        """
        self.app_settings = app_settings
        self.logger = orchestrator_logger or logging.getLogger(__name__)
        self.tasks: List[Dict[str, Any]] = []
        self.context: Any = context if context is not None else {}
        self.stopped_early = False

    def add_task(
        self,
        name: str,
        func: Callable,
        args: Optional[List[Any]] = None,
        kwargs: Optional[Dict[str, Any]] = None,
        fatal: bool = True,
    ):
        """
        Adds a task to the execution list.

        Args:
            name: A human-readable name for the task.
            func: The function to execute for this task. It receives the
                  keyword arguments `context` and `app_settings`.
            args: A list of positional arguments to pass to the function.
            kwargs: A dictionary of keyword arguments to pass to the function.
            fatal: If True, a failure in this task will halt the entire orchestration.
        """
        self.tasks.append({
            "name": name,
            "func": func,
            "args": args or [],
            "kwargs": kwargs or {},
            "fatal": fatal,
        })
        self.logger.debug(f"Task '{name}' added to the queue.")

    def run(self) -> bool:
        """
        Executes all added tasks in sequence.

        A failing fatal task exits the process with status 1. A failing
        non-fatal task is logged as a warning and the run continues.

        Returns:
            True if every task ran, False if a task stopped the run early.
        """
        self.logger.info("Orchestration started.")
        total = len(self.tasks)
        for i, task in enumerate(self.tasks):
            task_name = task["name"]
            self.logger.info(
                f"--- [{i + 1}/{total}] {task_name} ---"
            )

            try:
                task["kwargs"]["context"] = self.context
                task["kwargs"]["app_settings"] = self.app_settings

                task["func"](*task["args"], **task["kwargs"])

                self.logger.info(
                    f"✅ Task '{task_name}' completed successfully."
                )

            except StopOrchestration as stop:
                self.logger.info(
                    f"Task '{task_name}' ended the run early: {stop}"
                )
                self.stopped_early = True
                return False

            except Exception as e:
                if task.get("fatal", True):
                    self.logger.critical(
                        f"🔥 Task '{task_name}' failed: {e}", exc_info=True
                    )
                    self.logger.error(
                        "A fatal error occurred. Halting orchestration and exiting application."
                    )
                    sys.exit(1)
                self.logger.warning(
                    f"Task '{task_name}' failed: {e}. Task is non-fatal, continuing orchestration."
                )

        self.logger.info("✨ Orchestration finished successfully.")
        return True
