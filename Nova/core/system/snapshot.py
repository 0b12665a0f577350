"""
Snapshot Provider — Live System State for Prompt Grounding
============================================================
Gathers installed apps, running apps and browser tabs into one
SystemSnapshot. Pure read: nothing here mutates the host.

The three sub-queries are independent, so they run concurrently; any one
that errors contributes an empty list instead of failing the snapshot.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable

from Nova.core.system.actions import AppInfo, BrowserTab, SystemSnapshot
from Nova.core.system.backend import SystemBackend

logger = logging.getLogger("nova.snapshot")


class SnapshotProvider:
    """Builds a fresh SystemSnapshot on every call. No caching."""

    def __init__(self, backend: SystemBackend):
        self.backend = backend

    def snapshot(self) -> SystemSnapshot:
        with ThreadPoolExecutor(max_workers=3, thread_name_prefix="nova-snapshot") as pool:
            available = pool.submit(self._fail_soft, "available apps", self.available_apps)
            running = pool.submit(self._fail_soft, "running apps", self.running_apps)
            tabs = pool.submit(self._fail_soft, "browser tabs", self.browser_tabs)

            snap = SystemSnapshot(
                platform=self.backend.platform_name,
                architecture=self.backend.architecture,
                available_apps=available.result(),
                running_apps=running.result(),
                browser_tabs=tabs.result(),
            )

        logger.info(
            "Snapshot | available=%d | running=%d | tabs=%d",
            len(snap.available_apps), len(snap.running_apps), len(snap.browser_tabs),
        )
        return snap

    # ── Sub-queries ─────────────────────────────────────────────────────

    def available_apps(self) -> list[AppInfo]:
        return self.backend.list_installed_apps()

    def running_apps(self) -> list[AppInfo]:
        return self.backend.list_running_apps()

    def browser_tabs(self) -> list[BrowserTab]:
        # TODO: enumerate tabs over the Chrome DevTools protocol
        logger.debug("Browser tab enumeration not implemented; returning []")
        return []

    def list_applications(self) -> list[AppInfo]:
        """
        Every installed app together with the bundle identifier the OS
        reports for it (None when the query fails). Sequential and slow:
        one osascript call per app.
        """
        apps = self._fail_soft("installed apps", self.available_apps)
        for app in apps:
            try:
                result = self.backend.query_bundle_id(app.name)
            except Exception as e:
                logger.debug("Bundle id query for '%s' raised: %s", app.name, e)
                continue
            if result.success and result.stdout:
                app.bundle_id = result.stdout.strip()
        return apps

    # ── Helpers ─────────────────────────────────────────────────────────

    @staticmethod
    def _fail_soft(label: str, query: Callable[[], list]) -> list:
        try:
            return list(query())
        except Exception as e:
            logger.warning("Failed to get %s: %s", label, e)
            return []
