# -*- coding: utf-8 -*-
"""
Message tables for the tray menu, confirmation dialogs and notifications.

A single translation dict + a `t()` function. Dialog prompts keep a `%s`
placeholder, which the confirmation gate fills in.
"""

from __future__ import annotations

from typing import Any, Dict


LANG_EN = "en"
LANG_ZH = "zh"

_TRANSLATIONS: Dict[str, Dict[str, str]] = {
    LANG_EN: {
        # App / tray
        "app_name": "Restart in macOS",
        "tray_tooltip": "Restart in macOS (tray icon)",
        "menu_reboot": "Restart in macOS...",
        "menu_default_disk": "Default startup disk:",
        "menu_no_volumes": "(no startup disks found)",
        "menu_quit": "Quit",

        # Dialogs
        "btn_cancel": "Cancel",
        "btn_ok": "OK",
        "btn_change": "Change",
        "btn_quit": "Quit",
        "dlg_change_disk_title": "Confirm startup disk change",
        "dlg_change_disk": "Change default startup disk to %s?",
        "dlg_quit_title": "Confirm quitting",
        "dlg_quit": "Quit Restart in macOS tray icon?",

        # Notifications
        "ntf_title": "Restart in macOS",
        "ntf_list_failed": "Could not read startup disks: {msg}",
        "ntf_set_boot_failed": "Failed to set boot volume: {msg}",
        "ntf_boot_next_failed": "Failed to set macOS for the next boot: {msg}",
        "ntf_reboot_failed": "Failed to reboot to macOS: {msg}",
        "ntf_unexpected": "Unexpected error: {msg}",

        # Console
        "err_running_as_root": "Should not run as root, exiting...",
    },
    LANG_ZH: {
        # App / tray
        "app_name": "重启到 macOS",
        "tray_tooltip": "重启到 macOS（托盘图标）",
        "menu_reboot": "重启到 macOS…",
        "menu_default_disk": "默认启动磁盘：",
        "menu_no_volumes": "（未找到启动磁盘）",
        "menu_quit": "退出",

        # Dialogs
        "btn_cancel": "取消",
        "btn_ok": "确定",
        "btn_change": "更改",
        "btn_quit": "退出",
        "dlg_change_disk_title": "确认更改启动磁盘",
        "dlg_change_disk": "将默认启动磁盘更改为 %s？",
        "dlg_quit_title": "确认退出",
        "dlg_quit": "退出“重启到 macOS”托盘图标？",

        # Notifications
        "ntf_title": "重启到 macOS",
        "ntf_list_failed": "无法读取启动磁盘：{msg}",
        "ntf_set_boot_failed": "设置启动磁盘失败：{msg}",
        "ntf_boot_next_failed": "设置下次从 macOS 启动失败：{msg}",
        "ntf_reboot_failed": "重启到 macOS 失败：{msg}",
        "ntf_unexpected": "意外错误：{msg}",

        # Console
        "err_running_as_root": "不应以 root 身份运行，正在退出…",
    },
}


def normalize_lang(lang: str) -> str:
    lang = (lang or "").strip().lower()
    if lang.startswith("zh"):
        return LANG_ZH
    return LANG_EN


def t(lang: str, key: str, **kwargs: Any) -> str:
    """
    Translate `key` under `lang`, formatting with kwargs.
    Falls back to English, then to key itself.
    """
    lang_map = _TRANSLATIONS.get(lang) or _TRANSLATIONS[LANG_EN]
    template = lang_map.get(key) or _TRANSLATIONS[LANG_EN].get(key) or key
    if not kwargs:
        return template
    try:
        return template.format(**kwargs)
    except (KeyError, IndexError, ValueError):
        return template
