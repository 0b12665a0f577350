"""
Brain Module — Command Interpreter over a Local Ollama Model
=============================================================
Turns a free-text command into a validated list of Actions:

  1. Build a grounded prompt from the system context and app list
  2. Send it once to Ollama's /api/generate (non-streaming)
  3. Extract and validate the JSON action array from the reply

Generation options are fixed for low-variance structured output; there is
no retry on malformed output; the caller decides whether to resubmit.
"""

import logging
import time
from dataclasses import dataclass, asdict
from typing import Optional

import requests

from Nova.config import OLLAMA_BASE_URL, OLLAMA_MODEL, OLLAMA_TIMEOUT
from Nova.core.errors import ModelUnavailable
from Nova.core.system.actions import Action, ActionType
from Nova.core.system.action_router import extract_actions

logger = logging.getLogger("nova.brain")


# ─────────────────────────── Constants ──────────────────────────────────────

@dataclass(frozen=True)
class GenerationOptions:
    """Sampling knobs sent with every request. Not configurable per call."""
    temperature: float = 0.7
    top_p: float = 0.9
    top_k: int = 40
    repeat_penalty: float = 1.1


GENERATION_OPTIONS = GenerationOptions()

ACTION_DESCRIPTIONS = {
    ActionType.LAUNCH:      "Launch an application",
    ActionType.OPEN:        "Open a file or URL in an app",
    ActionType.CLOSE:       "Close an application",
    ActionType.ARRANGE:     "Arrange windows in a specific layout",
    ActionType.FOCUS:       "Focus on a specific application",
    ActionType.SET_DND:     "Enable/disable Do Not Disturb",
    ActionType.BROWSER_TAB: "Open/close browser tabs",
}

RESPONSE_EXAMPLE = (
    "[\n"
    '  {"type": "launch", "target": "Chrome", "params": {"urls": ["https://example.com"]}},\n'
    '  {"type": "launch", "target": "VS Code", "params": {"folder": "/path/to/project"}},\n'
    '  {"type": "set_dnd", "target": "system", "params": {"enabled": true}}\n'
    "]"
)


def build_prompt(
    command: str,
    system_context: str,
    available_apps: list[str],
    workspace: Optional[str] = None,
) -> str:
    """Assemble the full prompt. Same inputs always give the same text."""
    action_lines = "\n".join(
        f'   - "{t.value}": {desc}' for t, desc in ACTION_DESCRIPTIONS.items()
    )
    workspace_line = f"CURRENT WORKSPACE: {workspace}" if workspace else ""

    system_prompt = (
        "You are Nova, an AI assistant that helps users manage their workspace by "
        "automating applications, browser tabs, and system settings.\n\n"
        f"CONTEXT:\n{system_context}\n\n"
        f"AVAILABLE APPLICATIONS:\n{', '.join(available_apps)}\n\n"
        f"{workspace_line}\n\n"
        "INSTRUCTIONS:\n"
        "1. Parse the user's command and understand their intent\n"
        "2. Generate a JSON array of actions to execute\n"
        "3. Each action should have: type, target, and optional params\n"
        "4. Supported action types:\n"
        f"{action_lines}\n\n"
        "RESPONSE FORMAT:\n"
        "Return ONLY a valid JSON array of actions. Example:\n"
        f"{RESPONSE_EXAMPLE}\n\n"
        "Be precise and only include necessary actions."
    )
    return f"{system_prompt}\n\nUser Command: {command}"


# ──────────────────────── Ollama Client ─────────────────────────────────────

class OllamaClient:
    """Ollama local LLM via REST API."""

    def __init__(
        self,
        base_url: str = OLLAMA_BASE_URL,
        model: str = OLLAMA_MODEL,
        timeout: int = OLLAMA_TIMEOUT,
    ):
        self._base_url = base_url.rstrip("/")
        self.model = model
        self.timeout = timeout

    @property
    def base_url(self) -> str:
        return self._base_url

    def generate(self, prompt: str) -> str:
        """
        Send one non-streaming generate request and return the reply text.

        Raises:
            ModelUnavailable: unreachable, timed out, non-2xx, non-JSON body
                              or a non-text `response` field.
        """
        payload = {
            "model": self.model,
            "prompt": prompt,
            "stream": False,
            "options": asdict(GENERATION_OPTIONS),
        }

        try:
            resp = requests.post(
                f"{self._base_url}/api/generate", json=payload, timeout=self.timeout,
            )
            resp.raise_for_status()
            data = resp.json()
        except requests.exceptions.ConnectionError as e:
            raise ModelUnavailable(
                f"Could not connect to Ollama at {self._base_url}. Is it running?"
            ) from e
        except requests.exceptions.Timeout as e:
            raise ModelUnavailable(f"Ollama timed out after {self.timeout}s.") from e
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else "unknown"
            raise ModelUnavailable(f"Ollama returned HTTP {status}.") from e
        except (requests.exceptions.RequestException, ValueError) as e:
            raise ModelUnavailable(f"Ollama request failed: {e}") from e

        if not isinstance(data, dict):
            raise ModelUnavailable("Ollama returned an unexpected body.")
        reply = data.get("response")
        if reply is None:
            return ""
        if not isinstance(reply, str):
            raise ModelUnavailable(
                f"Ollama returned an unexpected body: response is {type(reply).__name__}, not text."
            )
        return reply

    def health_check(self) -> bool:
        try:
            r = requests.get(f"{self._base_url}/api/tags", timeout=5)
            return r.status_code == 200
        except requests.exceptions.RequestException as e:
            logger.warning("Ollama connection test failed: %s", e)
            return False

    def list_models(self) -> list[str]:
        try:
            r = requests.get(f"{self._base_url}/api/tags", timeout=5)
            r.raise_for_status()
            models = r.json().get("models", [])
            return [m.get("name") for m in models if m.get("name")]
        except (requests.exceptions.RequestException, ValueError, AttributeError) as e:
            logger.warning("Could not fetch local models: %s", e)
            return []

    def set_model(self, model: str) -> None:
        self.model = model

    def set_base_url(self, base_url: str) -> None:
        self._base_url = base_url.rstrip("/")


# ──────────────────────── Interpreter ───────────────────────────────────────

class CommandInterpreter:
    """Prompt → model → validated action list. One model call per command."""

    def __init__(self, client: Optional[OllamaClient] = None):
        self.client = client or OllamaClient()
        logger.info(
            "CommandInterpreter initialized | url=%s | model=%s",
            self.client.base_url, self.client.model,
        )

    def interpret(
        self,
        command: str,
        system_context: str,
        available_apps: list[str],
        workspace: Optional[str] = None,
    ) -> list[Action]:
        """
        Raises:
            ModelUnavailable:     endpoint failure.
            MalformedModelOutput: no valid action array in the reply.
        """
        prompt = build_prompt(command, system_context, available_apps, workspace)

        t0 = time.time()
        reply = self.client.generate(prompt)
        logger.info(
            "LLM response | model=%s | time=%.2fs | len=%d",
            self.client.model, time.time() - t0, len(reply),
        )

        try:
            actions = extract_actions(reply)
        except Exception:
            logger.error("Failed to parse actions. Raw content: %s", reply[:500])
            raise

        logger.info("Interpreted %d action(s): %s",
                    len(actions), ", ".join(f"{a.type}:{a.target}" for a in actions))
        return actions
