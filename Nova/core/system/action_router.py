"""
Action Router — Reply Extraction & Action Dispatch
====================================================
Two halves of the pipeline meet here:

  1. Extraction: locate the JSON action array inside a free-text model
     reply, then parse and validate it into Action objects.
  2. Dispatch:   run each Action against the SystemBackend, resolving
     app names through the AppRegistry.

Dispatch never raises: a failed action is logged and reported as False,
and the rest of the batch still runs.
"""

import json
import logging
import math
import time
from typing import Optional

from Nova.config import MAX_ACTION_DELAY
from Nova.core.errors import ActionExecutionFailure, MalformedModelOutput
from Nova.core.system.actions import (
    Action, ActionResult, ActionType, ApplicationIdentity, ShellResult,
)
from Nova.core.system.app_registry import AppRegistry
from Nova.core.system.backend import SystemBackend

logger = logging.getLogger("nova.action_router")

# Left half of a 1920x1080 screen
SIDE_BY_SIDE_BOUNDS = (0, 0, 960, 1080)


# ─────────────────────── Reply Extraction ───────────────────────────────────

def locate_action_array(text: str) -> Optional[str]:
    """
    Return the first balanced top-level [...] span in `text`, or None.

    Brackets inside JSON string literals are ignored so that a target
    like "folder [old]" does not end the span early.
    """
    start = text.find("[")
    if start == -1:
        return None

    depth = 0
    in_string = False
    escaped = False

    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue

        if ch == '"':
            in_string = True
        elif ch == "[":
            depth += 1
        elif ch == "]":
            depth -= 1
            if depth == 0:
                return text[start:i + 1]

    return None


def parse_actions(span: str) -> list[Action]:
    """
    Strictly parse a located JSON span into Actions.

    Every element must be an object with a non-empty string `type` and
    `target`. `params` and `delay` are passed through untouched. Raises
    MalformedModelOutput rather than returning a partial list.
    """
    try:
        data = json.loads(span)
    except json.JSONDecodeError as e:
        raise MalformedModelOutput(f"Action array is not valid JSON: {e}") from e

    if not isinstance(data, list):
        raise MalformedModelOutput("Response is not an array")

    actions = []
    for index, item in enumerate(data):
        if not isinstance(item, dict):
            raise MalformedModelOutput(
                f"Invalid action at index {index}: not an object", index=index,
            )
        if not _non_empty_str(item.get("type")) or not _non_empty_str(item.get("target")):
            raise MalformedModelOutput(
                f"Invalid action at index {index}: missing type or target", index=index,
            )
        actions.append(Action.from_dict(item))

    return actions


def extract_actions(reply: str) -> list[Action]:
    """Locate then parse. The composition used by the interpreter."""
    span = locate_action_array(reply or "")
    if span is None:
        raise MalformedModelOutput("No JSON array found in response")
    return parse_actions(span)


def _non_empty_str(value) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _params(action: Action) -> dict:
    """Action params as a dict; anything else the model sent is ignored."""
    return action.params if isinstance(action.params, dict) else {}


# ─────────────────────── Action Router ──────────────────────────────────────

class ActionRouter:
    """
    Routes parsed actions to the appropriate SystemBackend method.
    Runs batches strictly in order, one action at a time.
    """

    def __init__(
        self,
        backend: SystemBackend,
        registry: Optional[AppRegistry] = None,
    ):
        self.backend = backend
        self.registry = registry or AppRegistry(backend)
        self._handlers = {
            ActionType.LAUNCH.value:      self._handle_launch,
            ActionType.OPEN.value:        self._handle_open,
            ActionType.CLOSE.value:       self._handle_close,
            ActionType.ARRANGE.value:     self._handle_arrange,
            ActionType.FOCUS.value:       self._handle_focus,
            ActionType.SET_DND.value:     self._handle_set_dnd,
            ActionType.BROWSER_TAB.value: self._handle_browser_tab,
        }
        logger.info("ActionRouter initialized | platform=%s", backend.platform_name)

    # ── High-Level Dispatch ─────────────────────────────────────────────

    def execute(self, action: Action) -> bool:
        """
        Execute one action. Returns the success flag; never raises.
        """
        logger.info("Executing action: %s on %s", action.type, action.target)

        try:
            key = action.type.value if isinstance(action.type, ActionType) else action.type
            handler = self._handlers.get(key)
            if handler is None:
                logger.warning("Unknown action type: %s", action.type)
                return False
            return handler(action)

        except ActionExecutionFailure as e:
            logger.error("Action %s on %s failed: %s", action.type, action.target, e)
            return False
        except Exception as e:
            logger.error("Action %s on %s raised: %s",
                         action.type, action.target, e, exc_info=True)
            return False

    def execute_all(self, actions: list[Action]) -> list[ActionResult]:
        """
        Execute every action in order and report one result per action.
        A failure never stops the batch.
        """
        results = []
        for action in actions:
            try:
                self._wait(action)
            except (OverflowError, ValueError, OSError) as e:
                logger.error("Delay before %s on %s failed: %s", action.type, action.target, e)
                results.append(ActionResult(action=action, success=False))
                continue
            results.append(ActionResult(action=action, success=self.execute(action)))

        failed = sum(1 for r in results if not r.success)
        logger.info("Batch complete | actions=%d | failed=%d", len(results), failed)
        return results

    # ── Action Handlers ─────────────────────────────────────────────────

    def _handle_launch(self, action: Action) -> bool:
        params = _params(action)
        app = self._resolve(action)

        urls = params.get("urls")
        if isinstance(urls, list) and urls:
            for url in urls:
                self._check(action, self.backend.open_app(
                    name=app.canonical_name, bundle_id=app.bundle_id, document=str(url),
                ))
            return True

        document = params.get("folder") or params.get("file")
        self._check(action, self.backend.open_app(
            name=app.canonical_name,
            bundle_id=app.bundle_id,
            document=str(document) if document else None,
        ))
        return True

    def _handle_open(self, action: Action) -> bool:
        params = _params(action)
        document = params.get("url") or params.get("file")
        if not document:
            logger.warning("open on %s needs params.url or params.file", action.target)
            return False

        app = self._resolve(action)
        self._check(action, self.backend.open_app(
            name=app.canonical_name, bundle_id=app.bundle_id, document=str(document),
        ))
        return True

    def _handle_close(self, action: Action) -> bool:
        app = self._resolve(action)
        self._check(action, self.backend.quit_app(
            name=app.canonical_name, bundle_id=app.bundle_id,
        ))
        return True

    def _handle_arrange(self, action: Action) -> bool:
        layout = _params(action).get("layout")
        if layout == "side-by-side":
            self._check(action, self.backend.resize_front_window(SIDE_BY_SIDE_BOUNDS))
        else:
            logger.warning("Layout %r is not implemented; windows left as-is", layout)
        return True

    def _handle_focus(self, action: Action) -> bool:
        app = self._resolve(action)
        self._check(action, self.backend.activate_app(
            name=app.canonical_name, bundle_id=app.bundle_id,
        ))
        return True

    def _handle_set_dnd(self, action: Action) -> bool:
        enabled = bool(_params(action).get("enabled"))
        self._check(action, self.backend.set_do_not_disturb(enabled))
        return True

    def _handle_browser_tab(self, action: Action) -> bool:
        url = _params(action).get("url")
        if not url:
            logger.warning("browser_tab %s has no params.url", action.target)
            return False
        self._check(action, self.backend.open_document(str(url)))
        return True

    # ── Utilities ───────────────────────────────────────────────────────

    def _resolve(self, action: Action) -> ApplicationIdentity:
        return self.registry.resolve(action.target)

    @staticmethod
    def _check(action: Action, result: ShellResult) -> None:
        if not result.success:
            raise ActionExecutionFailure(
                f"`{result.command}` failed: {result}",
                action_type=action.type,
                target=action.target,
            )

    @staticmethod
    def _wait(action: Action) -> None:
        delay = action.delay
        if delay is None:
            return
        if isinstance(delay, bool) or not isinstance(delay, (int, float)) \
                or not math.isfinite(delay) or delay < 0:
            logger.warning("Ignoring invalid delay %r on %s", delay, action.type)
            return
        if delay > MAX_ACTION_DELAY:
            logger.warning("Delay %r on %s capped at %ss", delay, action.type, MAX_ACTION_DELAY)
            delay = MAX_ACTION_DELAY
        time.sleep(delay)
