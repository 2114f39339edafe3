# -*- coding: utf-8 -*-
"""
Reboot request, picked by desktop session.

KDE and GNOME get their own session-manager reboot so open applications can save state.
Anything else falls back to a plain `reboot` through pkexec. A failing mechanism is
reported as is; there is no cascading to the fallback.
"""

from __future__ import annotations

import logging
from typing import Callable, List

from .errors import RebootRequestError
from .system import CommandPaths, ProcessLauncher, current_desktop

logger = logging.getLogger(__name__)

DESKTOP_KDE = "KDE"
DESKTOP_GNOME = "GNOME"


class RebootOrchestrator:
    def __init__(
        self,
        paths: CommandPaths,
        launcher: ProcessLauncher,
        desktop: Callable[[], str] = current_desktop,
    ) -> None:
        self.paths = paths
        self.launcher = launcher
        self.desktop = desktop

    def choose_command(self) -> List[str]:
        session = self.desktop()
        if session == DESKTOP_KDE:
            return [self.paths.qdbus, "org.kde.ksmserver", "/KSMServer", "logout", "1", "1", "3"]
        if session == DESKTOP_GNOME:
            return [self.paths.gnome_session_quit, "--reboot"]
        return [self.paths.pkexec, self.paths.reboot]

    def request_reboot(self) -> None:
        cmd = self.choose_command()
        logger.info("Requesting reboot: %s", " ".join(cmd))
        try:
            code = self.launcher.run(cmd)
        except OSError as e:
            raise RebootRequestError(f"Cannot run {cmd[0]}: {e}") from e
        if code != 0:
            raise RebootRequestError(f"{cmd[0]} exited with status {code}")
