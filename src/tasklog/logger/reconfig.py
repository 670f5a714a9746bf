"""
Runtime reconfiguration of a TaskLogger, without a restart.

Usage:
    reconfig = LoggerReconfig(log)
    reconfig.set_level("WARNING")
    reconfig.set_flush_every_write(True)
    status = reconfig.status()
"""

from __future__ import annotations

from typing import Any

from tasklog.logger.core import TaskLogger
from tasklog.logger.records import level_name


class LoggerReconfig:
    """Runtime control surface for one TaskLogger."""

    def __init__(self, logger: TaskLogger):
        self._log = logger

    # ── Level management ──────────────────────────────────────

    def set_level(self, level: str | int) -> None:
        """Set the threshold. DEVEL switches to developer-only output."""
        self._log.threshold = level

    def get_level(self) -> int:
        return self._log.threshold

    # ── Flags ─────────────────────────────────────────────────

    def set_flush_every_write(self, enabled: bool) -> None:
        self._log.flush_every_write = bool(enabled)

    def set_mirror_all_to_console(self, enabled: bool) -> None:
        self._log.mirror_all_to_console = bool(enabled)

    # ── Status ────────────────────────────────────────────────

    def list_destinations(self) -> list[str]:
        """Channel keys opened so far, in creation order."""
        return self._log.registry.keys()

    def status(self) -> dict[str, Any]:
        """
        Returns:
            {
                "level": int,
                "level_name": str,
                "flush_every_write": bool,
                "mirror_all_to_console": bool,
                "destinations": [{"key": ..., "path": ..., "open": ...}],
            }
        """
        destinations = [
            {
                "key": dest.key,
                "path": str(dest.path) if dest.path else None,
                "open": dest.is_open,
            }
            for dest in self._log.registry
        ]
        return {
            "level": self._log.threshold,
            "level_name": level_name(self._log.threshold),
            "flush_every_write": self._log.flush_every_write,
            "mirror_all_to_console": self._log.mirror_all_to_console,
            "destinations": destinations,
        }
