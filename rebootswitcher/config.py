# -*- coding: utf-8 -*-
"""
Config persistence in a human-readable JSON file.

Location: $XDG_CONFIG_HOME/asahi-reboot-switcher/config.json (default ~/.config/...).

Fields:
- language: "en" | "zh"
- notifications_enabled: bool
- macos_marker: str   (substring identifying the macOS volume)
- log_level: str      (logging level name)
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from .i18n import LANG_EN, normalize_lang

logger = logging.getLogger(__name__)

APP_DIR_NAME = "asahi-reboot-switcher"
DEFAULT_CONFIG_FILENAME = "config.json"
DEFAULT_MACOS_MARKER = "Macintosh"
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def default_config_path(environ: Optional[Mapping[str, str]] = None) -> Path:
    env = os.environ if environ is None else environ
    base = (env.get("XDG_CONFIG_HOME") or "").strip()
    root = Path(base) if base else Path(os.path.expanduser("~")) / ".config"
    return root / APP_DIR_NAME / DEFAULT_CONFIG_FILENAME


def _to_bool(value, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    if isinstance(value, str):
        s = value.strip().lower()
        if s in ("1", "true", "yes", "on"):
            return True
        if s in ("0", "false", "no", "off"):
            return False
    return default


@dataclass
class AppConfig:
    language: str = LANG_EN
    notifications_enabled: bool = True
    macos_marker: str = DEFAULT_MACOS_MARKER
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, data: dict) -> "AppConfig":
        marker = data.get("macos_marker", DEFAULT_MACOS_MARKER)
        if not isinstance(marker, str) or not marker.strip():
            marker = DEFAULT_MACOS_MARKER
        level = str(data.get("log_level", "INFO") or "").strip().upper()
        if level not in _LOG_LEVELS:
            level = "INFO"
        return cls(
            language=normalize_lang(str(data.get("language", LANG_EN))),
            notifications_enabled=_to_bool(data.get("notifications_enabled", True), True),
            macos_marker=marker.strip(),
            log_level=level,
        )

    def to_dict(self) -> dict:
        return {
            "language": self.language,
            "notifications_enabled": self.notifications_enabled,
            "macos_marker": self.macos_marker,
            "log_level": self.log_level,
        }


class ConfigManager:
    def __init__(self, config_path: Path):
        self.config_path = config_path

    def load(self) -> AppConfig:
        if not self.config_path.exists():
            return AppConfig()
        try:
            data = json.loads(self.config_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            # A corrupted config must not keep the tray icon from starting.
            logger.warning("Ignoring unreadable config %s: %s", self.config_path, e)
            return AppConfig()
        if not isinstance(data, dict):
            return AppConfig()
        return AppConfig.from_dict(data)

    def save(self, config: AppConfig) -> None:
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            payload = json.dumps(config.to_dict(), ensure_ascii=False, indent=2)
            self.config_path.write_text(payload, encoding="utf-8")
        except OSError as e:
            logger.warning("Could not save config %s: %s", self.config_path, e)
