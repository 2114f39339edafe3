from __future__ import annotations

import json
from pathlib import Path

from rebootswitcher.config import AppConfig, ConfigManager, default_config_path
from rebootswitcher.i18n import LANG_EN, LANG_ZH, t


def test_missing_file_gives_defaults(tmp_path):
    cfg = ConfigManager(tmp_path / "config.json").load()
    assert cfg == AppConfig()
    assert cfg.macos_marker == "Macintosh"


def test_corrupt_file_gives_defaults(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{not json", encoding="utf-8")
    assert ConfigManager(path).load() == AppConfig()


def test_values_are_normalized(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(
        json.dumps({"language": "zh_CN", "notifications_enabled": "off", "macos_marker": "  ", "log_level": "loud"}),
        encoding="utf-8",
    )
    cfg = ConfigManager(path).load()
    assert cfg.language == LANG_ZH
    assert cfg.notifications_enabled is False
    assert cfg.macos_marker == "Macintosh"
    assert cfg.log_level == "INFO"


def test_save_creates_directory(tmp_path):
    path = tmp_path / "asahi-reboot-switcher" / "config.json"
    mgr = ConfigManager(path)
    mgr.save(AppConfig(language=LANG_ZH, macos_marker="macOS", log_level="DEBUG"))
    assert mgr.load() == AppConfig(language=LANG_ZH, macos_marker="macOS", log_level="DEBUG")


def test_default_config_path_honours_xdg():
    assert default_config_path({"XDG_CONFIG_HOME": "/tmp/cfg"}) == Path("/tmp/cfg/asahi-reboot-switcher/config.json")


def test_translation_fallbacks():
    assert t(LANG_ZH, "menu_quit") == "退出"
    assert t("fr", "menu_quit") == "Quit"
    assert t(LANG_EN, "no_such_key") == "no_such_key"
    assert t(LANG_EN, "ntf_reboot_failed", msg="boom") == "Failed to reboot to macOS: boom"
    assert t(LANG_EN, "dlg_change_disk") % "Macintosh HD" == "Change default startup disk to Macintosh HD?"
