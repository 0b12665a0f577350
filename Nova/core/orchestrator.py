"""
Orchestrator Module — Caller-Facing Command Pipeline
======================================================
Central coordinator that the shell (CLI, GUI, IPC) calls into:

  get_system_info()  →  fresh SystemSnapshot
  process_command()  →  snapshot → prompt → model → actions → execution

Model failures (unreachable endpoint, unusable reply) come back as a
failed CommandOutcome with no OS calls issued; individual action
failures come back as success=False entries in the results list.
"""

import logging
from typing import Optional

from Nova.core.brain import CommandInterpreter
from Nova.core.errors import NovaError
from Nova.core.system import (
    ActionRouter, AppRegistry, SnapshotProvider, get_backend,
)
from Nova.core.system.actions import AppInfo, CommandOutcome, SystemSnapshot
from Nova.core.system.backend import SystemBackend

logger = logging.getLogger("nova.orchestrator")


class Orchestrator:
    """
    Owns the backend, snapshot provider, interpreter and router.
    Holds no per-command state between calls.
    """

    def __init__(
        self,
        backend: Optional[SystemBackend] = None,
        interpreter: Optional[CommandInterpreter] = None,
    ):
        self._backend = backend or get_backend()
        self.snapshots = SnapshotProvider(self._backend)
        self.interpreter = interpreter or CommandInterpreter()
        self.action_router = ActionRouter(self._backend, AppRegistry(self._backend))

        logger.info("Orchestrator initialized | platform=%s", self._backend.platform_name)

    # ── Main Entry Points ───────────────────────────────────────────────────

    def get_system_info(self) -> SystemSnapshot:
        return self.snapshots.snapshot()

    def process_command(
        self,
        command_text: str,
        workspace: Optional[str] = None,
    ) -> CommandOutcome:
        """
        Run one free-text command end to end.

        Args:
            command_text: Raw user input.
            workspace:    Optional active workspace name for the prompt.
        """
        command_text = (command_text or "").strip()
        if not command_text:
            return CommandOutcome(success=False, error="Command is empty.")

        logger.info("Processing command: %s", command_text[:80])

        snapshot = self.snapshots.snapshot()
        try:
            actions = self.interpreter.interpret(
                command_text,
                snapshot.to_context(),
                snapshot.app_names(),
                workspace,
            )
        except NovaError as e:
            logger.error("Command processing failed: %s", e)
            return CommandOutcome(success=False, error=str(e))

        results = self.action_router.execute_all(actions)
        return CommandOutcome(success=True, actions=actions, results=results)

    # ── Model & App Management ──────────────────────────────────────────────

    def list_applications(self) -> list[AppInfo]:
        return self.snapshots.list_applications()

    def test_connection(self) -> bool:
        return self.interpreter.client.health_check()

    def list_models(self) -> list[str]:
        return self.interpreter.client.list_models()

    def set_model(self, model_name: str) -> tuple[bool, str]:
        model_name = (model_name or "").strip()
        if not model_name:
            return False, "Model name cannot be empty."
        self.interpreter.client.set_model(model_name)
        logger.info("Model switched to %s", model_name)
        return True, f"Model set to '{model_name}'."
