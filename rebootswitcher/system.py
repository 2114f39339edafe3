# -*- coding: utf-8 -*-
"""
Thin wrappers around the operating system: launching processes, resolving trusted
executables and reading the desktop session identifier.
"""

from __future__ import annotations

import getpass
import logging
import os
import shutil
import subprocess
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from .errors import StartupError

logger = logging.getLogger(__name__)

# asahi-bless rewrites NVRAM, so it is only looked up in system locations.
ALLOWED_BLESS_DIRS: Sequence[str] = ("/usr/local/bin", "/usr/bin")


class ProcessLauncher:
    """Runs external executables. Both methods raise OSError when launching fails."""

    def run(self, cmd: List[str]) -> int:
        """Run with inherited stdout/stderr and return the exit status."""
        logger.debug("run: %s", cmd)
        cp = subprocess.run(cmd)
        return cp.returncode

    def capture(self, cmd: List[str]) -> subprocess.CompletedProcess:
        logger.debug("capture: %s", cmd)
        return subprocess.run(cmd, capture_output=True, text=True)


def resolve_command(name: str, allowed_dirs: Optional[Sequence[str]] = None) -> Optional[str]:
    """
    Find `name` either on PATH or, when `allowed_dirs` is given, only inside those directories.
    """
    if allowed_dirs is None:
        return shutil.which(name)
    return shutil.which(name, path=os.pathsep.join(allowed_dirs))


@dataclass(frozen=True)
class CommandPaths:
    """Executables resolved once at startup and handed to the components that launch them."""

    asahi_bless: str
    pkexec: str = "pkexec"
    qdbus: str = "qdbus"
    gnome_session_quit: str = "gnome-session-quit"
    reboot: str = "reboot"

    @classmethod
    def resolve(cls) -> "CommandPaths":
        bless = resolve_command("asahi-bless", ALLOWED_BLESS_DIRS)
        if bless is None:
            # Keep the bare name: every call then fails with a clear "not found" report.
            logger.warning("asahi-bless not found in %s", ", ".join(ALLOWED_BLESS_DIRS))
            bless = "asahi-bless"
        pkexec = resolve_command("pkexec")
        if pkexec is None:
            logger.warning("pkexec not found on PATH; privileged actions will fail")
            pkexec = "pkexec"
        return cls(
            asahi_bless=bless,
            pkexec=pkexec,
            qdbus=resolve_command("qdbus") or "qdbus",
            gnome_session_quit=resolve_command("gnome-session-quit") or "gnome-session-quit",
            reboot=resolve_command("reboot") or "reboot",
        )


def current_desktop(environ: Optional[Dict[str, str]] = None) -> str:
    env = os.environ if environ is None else environ
    return (env.get("XDG_CURRENT_DESKTOP") or "").strip()


@dataclass(frozen=True)
class UserIdentity:
    name: str
    uid: int
    home: str


def current_user() -> UserIdentity:
    try:
        name = getpass.getuser()
        uid = os.getuid()
    except (KeyError, OSError) as e:
        raise StartupError(f"Cannot determine the current user: {e}") from e
    return UserIdentity(name=name, uid=uid, home=os.path.expanduser("~"))


def is_root(identity: UserIdentity) -> bool:
    return identity.uid == 0
