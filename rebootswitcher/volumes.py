# -*- coding: utf-8 -*-
"""
Boot volume directory backed by `asahi-bless`.

`asahi-bless --list-volumes` prints one line per bootable volume group:

     1) Macintosh HD
    *2) Asahi Linux

The leading `*` marks the volume the machine booted from. Listing needs no privileges;
changing the boot default or the boot-next override goes through pkexec.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import List

from .errors import DirectoryQueryError, DirectoryWriteError
from .system import CommandPaths, ProcessLauncher

logger = logging.getLogger(__name__)

_VOLUME_LINE_RE = re.compile(r"^\s*(?P<active>\*)?\s*(?P<idx>\d+)\)\s*(?P<name>.+?)\s*$")


@dataclass(frozen=True)
class Volume:
    index: int  # 1-based, as listed by asahi-bless
    name: str
    active: bool = False

    @property
    def short_name(self) -> str:
        # A group lists all of its APFS volumes; the first one names it.
        head = self.name.split(",", 1)[0].strip()
        return head or self.name.strip()


def parse_volume_list(text: str) -> List[Volume]:
    volumes: List[Volume] = []
    for line in (text or "").splitlines():
        m = _VOLUME_LINE_RE.match(line)
        if not m:
            continue
        volumes.append(Volume(index=int(m.group("idx")), name=m.group("name"), active=bool(m.group("active"))))

    if not volumes:
        raise DirectoryQueryError("asahi-bless did not list any volumes")
    active = [v for v in volumes if v.active]
    if len(active) > 1:
        raise DirectoryQueryError(
            "asahi-bless reported more than one active volume: " + ", ".join(v.short_name for v in active)
        )
    return volumes


class AsahiBlessDirectory:
    def __init__(self, paths: CommandPaths, launcher: ProcessLauncher) -> None:
        self.paths = paths
        self.launcher = launcher

    def list_volumes(self) -> List[Volume]:
        cmd = [self.paths.asahi_bless, "--list-volumes"]
        try:
            cp = self.launcher.capture(cmd)
        except OSError as e:
            raise DirectoryQueryError(f"Cannot run {self.paths.asahi_bless}: {e}") from e
        if cp.returncode != 0:
            detail = (cp.stderr or cp.stdout or "").strip()
            raise DirectoryQueryError(f"asahi-bless --list-volumes exited with {cp.returncode}: {detail}")
        return parse_volume_list(cp.stdout)

    def set_boot_default(self, volume_index: int) -> None:
        if volume_index < 1:
            raise ValueError(f"volume index is 1-based, got {volume_index}")
        self._run_privileged(["--set-boot", str(volume_index), "--yes"], what=f"set boot volume {volume_index}")

    def set_boot_next_macos(self, flag: bool) -> None:
        args = ["--set-boot-macos"]
        if flag:
            args.append("--next")
        args.append("--yes")
        self._run_privileged(args, what="set macOS boot override")

    def _run_privileged(self, args: List[str], what: str) -> None:
        cmd = [self.paths.pkexec, self.paths.asahi_bless, *args]
        logger.info("Running %s", " ".join(cmd))
        try:
            code = self.launcher.run(cmd)
        except OSError as e:
            raise DirectoryWriteError(f"Failed to {what}: {e}") from e
        if code != 0:
            # pkexec uses 126 when the authorization dialog is dismissed.
            raise DirectoryWriteError(f"Failed to {what}: exit status {code}")
