from __future__ import annotations

import pytest

from conftest import FakeLauncher

from rebootswitcher.errors import DirectoryQueryError, DirectoryWriteError
from rebootswitcher.system import CommandPaths
from rebootswitcher.volumes import AsahiBlessDirectory, Volume, parse_volume_list

LISTING = """\
 1) Macintosh HD, Macintosh HD - Data
*2) Asahi Linux
 3) macOS Recovery
"""

PATHS = CommandPaths(asahi_bless="/usr/bin/asahi-bless", pkexec="/usr/bin/pkexec")


def test_parse_volume_list():
    volumes = parse_volume_list(LISTING)
    assert volumes == [
        Volume(index=1, name="Macintosh HD, Macintosh HD - Data", active=False),
        Volume(index=2, name="Asahi Linux", active=True),
        Volume(index=3, name="macOS Recovery", active=False),
    ]
    assert volumes[0].short_name == "Macintosh HD"


def test_parse_ignores_header_and_blank_lines():
    text = "Volumes:\n\n  * 1) Macintosh HD\n   2) Asahi Linux\n"
    volumes = parse_volume_list(text)
    assert [(v.index, v.active) for v in volumes] == [(1, True), (2, False)]


def test_parse_rejects_empty_output():
    with pytest.raises(DirectoryQueryError):
        parse_volume_list("no volumes here\n")


def test_parse_rejects_two_active_volumes():
    with pytest.raises(DirectoryQueryError):
        parse_volume_list("*1) Macintosh HD\n*2) Asahi Linux\n")


def test_list_volumes_runs_bless():
    launcher = FakeLauncher(stdout=LISTING)
    directory = AsahiBlessDirectory(PATHS, launcher)

    volumes = directory.list_volumes()

    assert launcher.commands == [["/usr/bin/asahi-bless", "--list-volumes"]]
    assert [v.active for v in volumes] == [False, True, False]


def test_list_volumes_non_zero_exit():
    directory = AsahiBlessDirectory(PATHS, FakeLauncher(returncode=1, stderr="permission denied"))
    with pytest.raises(DirectoryQueryError, match="permission denied"):
        directory.list_volumes()


def test_list_volumes_missing_executable():
    directory = AsahiBlessDirectory(PATHS, FakeLauncher(raises=FileNotFoundError("asahi-bless")))
    with pytest.raises(DirectoryQueryError):
        directory.list_volumes()


def test_set_boot_default_goes_through_pkexec():
    launcher = FakeLauncher()
    AsahiBlessDirectory(PATHS, launcher).set_boot_default(2)
    assert launcher.commands == [["/usr/bin/pkexec", "/usr/bin/asahi-bless", "--set-boot", "2", "--yes"]]


def test_set_boot_default_rejects_zero():
    with pytest.raises(ValueError):
        AsahiBlessDirectory(PATHS, FakeLauncher()).set_boot_default(0)


def test_set_boot_default_dismissed_authorization():
    directory = AsahiBlessDirectory(PATHS, FakeLauncher(returncode=126))
    with pytest.raises(DirectoryWriteError, match="126"):
        directory.set_boot_default(1)


def test_set_boot_next_macos():
    launcher = FakeLauncher()
    directory = AsahiBlessDirectory(PATHS, launcher)

    directory.set_boot_next_macos(True)
    directory.set_boot_next_macos(False)

    assert launcher.commands == [
        ["/usr/bin/pkexec", "/usr/bin/asahi-bless", "--set-boot-macos", "--next", "--yes"],
        ["/usr/bin/pkexec", "/usr/bin/asahi-bless", "--set-boot-macos", "--yes"],
    ]


def test_set_boot_next_macos_launch_failure():
    directory = AsahiBlessDirectory(PATHS, FakeLauncher(raises=PermissionError("pkexec")))
    with pytest.raises(DirectoryWriteError):
        directory.set_boot_next_macos(True)
