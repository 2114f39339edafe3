# -*- coding: utf-8 -*-
"""
System tray integration via pystray.

The menu is rebuilt from the session's volume list after every refresh; the
radio check marks read the session's selected index, so they always show
what the session holds. Menu callbacks only enqueue events.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

import pystray
from pystray import Menu as TrayMenu
from pystray import MenuItem as TrayMenuItem

from .volumes import Volume

logger = logging.getLogger(__name__)


@dataclass
class TrayActions:
    reboot: Callable[[], None]
    quit: Callable[[], None]
    select_volume: Callable[[int], None]
    get_volumes: Callable[[], Sequence[Volume]]
    get_selected: Callable[[], int]


class TrayController:
    def __init__(
        self,
        image,
        tr: Callable[[str], str],
        actions: TrayActions,
    ):
        """
        tr: callable that maps i18n keys -> localized strings
        """
        self.image = image
        self.tr = tr
        self.actions = actions
        self.icon = pystray.Icon("asahi-reboot-switcher", self.image, self.tr("tray_tooltip"), self._build_menu())
        self._thread: Optional[threading.Thread] = None

    def _volume_item(self, position: int, volume: Volume) -> TrayMenuItem:
        return TrayMenuItem(
            volume.short_name,
            lambda _icon, _item: self.actions.select_volume(position),
            checked=lambda _item: self.actions.get_selected() == position,
            radio=True,
        )

    def _build_menu(self) -> TrayMenu:
        volumes = list(self.actions.get_volumes())
        if volumes:
            volume_items = [self._volume_item(pos, v) for pos, v in enumerate(volumes)]
        else:
            volume_items = [TrayMenuItem(self.tr("menu_no_volumes"), None, enabled=False)]

        return TrayMenu(
            TrayMenuItem(self.tr("menu_reboot"), lambda _icon, _item: self.actions.reboot()),
            TrayMenu.SEPARATOR,
            TrayMenuItem(self.tr("menu_default_disk"), None, enabled=False),
            *volume_items,
            TrayMenu.SEPARATOR,
            TrayMenuItem(self.tr("menu_quit"), lambda _icon, _item: self.actions.quit()),
        )

    def update_menu(self) -> None:
        self.icon.menu = self._build_menu()
        try:
            self.icon.update_menu()
        except NotImplementedError:
            # Some backends rebuild the menu on their own when it is opened.
            pass

    def run_detached(self) -> None:
        # pystray's own run_detached leaves the gtk/appindicator loop to the caller;
        # here the backend loop gets a thread of its own.
        self._thread = threading.Thread(target=self.icon.run, name="TrayIcon", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        try:
            self.icon.stop()
        except Exception as e:
            logger.debug("Tray icon stop failed: %s", e)
