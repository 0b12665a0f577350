"""
App Registry — Application Identity Resolution
================================================
Maps human- or model-supplied app names to the names and bundle
identifiers the OS automation layer accepts.

AppleScript and `open -a` are picky about exact naming ("Chrome" vs
"Google Chrome"), so resolution walks an ordered list of strategies and
falls back to the requested name verbatim rather than failing.
"""

import logging
from types import MappingProxyType
from typing import Callable, Optional

from Nova.core.system.actions import ApplicationIdentity
from Nova.core.system.backend import SystemBackend

logger = logging.getLogger("nova.app_registry")


# ─────────────────────── Alias Table ────────────────────────────────────────

# Exact-match, case-sensitive. Several names may map to one identifier.
BUNDLE_IDS = MappingProxyType({
    "Google Chrome":      "com.google.Chrome",
    "Chrome":             "com.google.Chrome",
    "Safari":             "com.apple.Safari",
    "Firefox":            "org.mozilla.firefox",
    "VS Code":            "com.microsoft.VSCode",
    "Visual Studio Code": "com.microsoft.VSCode",
    "Terminal":           "com.apple.Terminal",
    "Finder":             "com.apple.finder",
    "Slack":              "com.tinyspeck.slackmacgap",
    "Discord":            "com.hnc.Discord",
    "Spotify":            "com.spotify.client",
    "iTerm":              "com.googlecode.iterm2",
    "iTerm2":             "com.googlecode.iterm2",
    "Cursor":             "com.todesktop.230313mzl4w4u92",
    "IntelliJ IDEA CE":   "com.jetbrains.intellij.ce",
    "Figma":              "com.figma.Desktop",
    "Docker":             "com.docker.docker",
    "Obsidian":           "md.obsidian",
})

APP_SUFFIX = ".app"


def name_variations(name: str) -> list[str]:
    """Candidate spellings to probe, in order, without duplicates."""
    stripped = name[: -len(APP_SUFFIX)] if name.endswith(APP_SUFFIX) else name
    candidates = [name, f"Google {name}", f"{name}{APP_SUFFIX}", stripped]

    unique = []
    for candidate in candidates:
        if candidate and candidate not in unique:
            unique.append(candidate)
    return unique


# ─────────────────────── Registry ───────────────────────────────────────────

class AppRegistry:
    """
    Resolves application names against the alias table and the live OS.

    Stateless apart from the shared read-only BUNDLE_IDS table; every
    resolve() call probes the OS afresh.
    """

    def __init__(self, backend: SystemBackend, bundle_ids=BUNDLE_IDS):
        self.backend = backend
        self._bundle_ids = bundle_ids
        self._strategies: tuple[Callable[[str], Optional[ApplicationIdentity]], ...] = (
            self._from_alias_table,
            self._from_name_variations,
        )

    # ── Lookup ──────────────────────────────────────────────────────────

    def bundle_id_of(self, name: str) -> Optional[str]:
        """Bundle identifier for an exact alias-table name, if any."""
        return self._bundle_ids.get(name)

    def resolve(self, requested_name: str) -> ApplicationIdentity:
        """
        Resolve a requested app name to an ApplicationIdentity.

        Tries the alias table first, then name variations; if the OS
        accepts none of them the requested name is returned unchanged
        with fallback=True. Never raises.
        """
        for strategy in self._strategies:
            try:
                identity = strategy(requested_name)
            except Exception as e:
                logger.warning("Resolution strategy %s failed for '%s': %s",
                               strategy.__name__, requested_name, e)
                continue
            if identity is not None:
                if identity.canonical_name != requested_name:
                    logger.info("Resolved '%s' → '%s'", requested_name, identity.canonical_name)
                return identity

        logger.warning("Could not verify app name '%s'; using it as-is", requested_name)
        return ApplicationIdentity(
            requested_name=requested_name,
            canonical_name=requested_name,
            bundle_id=None,
            fallback=True,
        )

    # ── Strategies ──────────────────────────────────────────────────────

    def _from_alias_table(self, requested_name: str) -> Optional[ApplicationIdentity]:
        bundle_id = self.bundle_id_of(requested_name)
        if not bundle_id:
            return None

        result = self.backend.query_app_name(bundle_id=bundle_id)
        canonical = result.stdout.strip().replace('"', "") if result.success else ""
        if not canonical:
            logger.debug("Bundle id %s for '%s' not answered by OS", bundle_id, requested_name)
            return None

        return ApplicationIdentity(
            requested_name=requested_name,
            canonical_name=canonical,
            bundle_id=bundle_id,
        )

    def _from_name_variations(self, requested_name: str) -> Optional[ApplicationIdentity]:
        for variation in name_variations(requested_name):
            if self._probe(variation):
                return ApplicationIdentity(
                    requested_name=requested_name,
                    canonical_name=variation,
                )
        return None

    def _probe(self, name: str) -> bool:
        try:
            return self.backend.query_app_name(name=name).success
        except Exception as e:
            logger.debug("Probe for '%s' raised: %s", name, e)
            return False
