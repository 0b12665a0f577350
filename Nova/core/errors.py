"""
Errors — Failure Taxonomy for the Command Pipeline
=====================================================
Only ModelUnavailable and MalformedModelOutput ever reach the caller of
Orchestrator.process_command. ActionExecutionFailure is raised and caught
inside the ActionRouter so one bad action never aborts a batch.
"""

from typing import Optional


class NovaError(Exception):
    """Base class for all pipeline errors."""


class ModelUnavailable(NovaError):
    """The language-model endpoint could not be reached or answered non-2xx."""


class MalformedModelOutput(NovaError):
    """No well-formed action list could be extracted from the model reply."""

    def __init__(self, message: str, index: Optional[int] = None):
        super().__init__(message)
        self.index = index  # offending element, when the array itself parsed


class ActionExecutionFailure(NovaError):
    """An OS-level call for a single action reported failure."""

    def __init__(self, message: str, action_type: str = "", target: str = ""):
        super().__init__(message)
        self.action_type = action_type
        self.target = target
