from __future__ import annotations

import subprocess
from typing import List, Optional

import pytest

from rebootswitcher.errors import DirectoryQueryError, DirectoryWriteError, RebootRequestError
from rebootswitcher.i18n import LANG_EN, t
from rebootswitcher.session import TraySession
from rebootswitcher.volumes import Volume


class FakeDirectory:
    def __init__(self, names: List[str], active: Optional[int] = 0):
        self.names = list(names)
        self.active = active
        self.calls: List[tuple] = []
        self.fail_list = False
        self.fail_write = False
        self.fail_boot_next = False

    def list_volumes(self) -> List[Volume]:
        self.calls.append(("list",))
        if self.fail_list:
            raise DirectoryQueryError("asahi-bless not available")
        return [Volume(index=i + 1, name=n, active=(i == self.active)) for i, n in enumerate(self.names)]

    def set_boot_default(self, volume_index: int) -> None:
        self.calls.append(("set_boot_default", volume_index))
        if self.fail_write:
            raise DirectoryWriteError("pkexec: authorization dismissed")
        self.active = volume_index - 1

    def set_boot_next_macos(self, flag: bool) -> None:
        self.calls.append(("set_boot_next_macos", flag))
        if self.fail_boot_next:
            raise DirectoryWriteError("pkexec: authorization dismissed")

    def writes(self) -> List[tuple]:
        return [c for c in self.calls if c[0] != "list"]


class FakeGate:
    def __init__(self, answer: bool = True):
        self.answer = answer
        self.calls: List[tuple] = []

    def ask(self, template, *args, title, confirm_label=None) -> bool:
        self.calls.append((template % args if args else template, title, confirm_label))
        return self.answer


class FakeOrchestrator:
    def __init__(self, fail: bool = False, log: Optional[list] = None):
        self.fail = fail
        self.calls = 0
        self.log = log

    def request_reboot(self) -> None:
        self.calls += 1
        if self.log is not None:
            self.log.append("reboot")
        if self.fail:
            raise RebootRequestError("qdbus exited with status 1")


class Reports:
    def __init__(self):
        self.items: List[tuple] = []

    def __call__(self, key: str, **kwargs) -> None:
        self.items.append((key, kwargs))

    def keys(self) -> List[str]:
        return [k for k, _ in self.items]


class FakeLauncher:
    def __init__(self, returncode: int = 0, stdout: str = "", stderr: str = "", raises: Optional[OSError] = None):
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        self.raises = raises
        self.commands: List[List[str]] = []

    def run(self, cmd: List[str]) -> int:
        self.commands.append(list(cmd))
        if self.raises is not None:
            raise self.raises
        return self.returncode

    def capture(self, cmd: List[str]) -> subprocess.CompletedProcess:
        self.commands.append(list(cmd))
        if self.raises is not None:
            raise self.raises
        return subprocess.CompletedProcess(cmd, self.returncode, stdout=self.stdout, stderr=self.stderr)


MAC = "Macintosh HD, Macintosh HD - Data"
LINUX = "Asahi Linux"


@pytest.fixture
def reports():
    return Reports()


@pytest.fixture
def make_session(reports):
    def _make(directory, gate=None, orchestrator=None, marker="Macintosh"):
        return TraySession(
            directory=directory,
            gate=gate or FakeGate(),
            orchestrator=orchestrator or FakeOrchestrator(),
            tr=lambda key, **kw: t(LANG_EN, key, **kw),
            report=reports,
            macos_marker=marker,
        )

    return _make
