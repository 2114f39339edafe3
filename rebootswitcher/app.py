# -*- coding: utf-8 -*-
"""
Core application orchestration.

- Loads/saves config.json
- Resolves trusted executables once and hands them to the directory and the orchestrator
- Runs the tray icon (pystray) on its own thread
- Runs the volume selection listener thread
- Runs the reboot/quit command loop thread
- Runs the tkinter loop on the main thread; confirmation dialogs are built there
- Uses plyer for failure notifications
"""

from __future__ import annotations

import logging
import sys
import threading
from pathlib import Path
from typing import List, Optional

from .config import AppConfig, ConfigManager, default_config_path
from .errors import StartupError
from .i18n import t as i18n_t
from .icon import default_icon_path, ensure_icon_file, make_restart_icon
from .notify import notify
from .reboot import RebootOrchestrator
from .session import TraySession
from .system import CommandPaths, ProcessLauncher, current_user, is_root
from .tray import TrayActions, TrayController
from .ui import DialogGate, DialogHost
from .volumes import AsahiBlessDirectory

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def passthrough_to_bless(args: List[str], paths: CommandPaths, launcher: ProcessLauncher) -> int:
    """Forward command-line arguments untouched to asahi-bless."""
    try:
        code = launcher.run([paths.asahi_bless, *args])
    except OSError as e:
        print(f"Failed to set boot volume: {e}", file=sys.stderr)
        return 1
    if code != 0:
        print(f"Failed to set boot volume: exit status {code}", file=sys.stderr)
    return code


class RebootSwitcherApp:
    def __init__(
        self,
        config_path: Optional[Path] = None,
        paths: Optional[CommandPaths] = None,
        icon_path: Optional[Path] = None,
    ):
        self.config_path = config_path or default_config_path()
        self.cfg_mgr = ConfigManager(self.config_path)
        self.config: AppConfig = self.cfg_mgr.load()

        # Resolved on first use, after logging is configured.
        self._paths = paths
        self.launcher = ProcessLauncher()
        self.icon_path = icon_path or default_icon_path()
        self._icon_file: Optional[str] = None

        self.session: Optional[TraySession] = None
        self.tray: Optional[TrayController] = None
        self.dialogs: Optional[DialogHost] = None
        self.command_thread: Optional[threading.Thread] = None

    @property
    def paths(self) -> CommandPaths:
        if self._paths is None:
            self._paths = CommandPaths.resolve()
        return self._paths

    # --------- i18n / reporting ---------
    def tr(self, key: str, **kwargs) -> str:
        return i18n_t(self.config.language, key, **kwargs)

    def report(self, msg_key: str, **kwargs) -> None:
        msg = self.tr(msg_key, **kwargs)
        logger.warning("%s", msg)
        if not self.config.notifications_enabled:
            return
        if self._icon_file is None:
            self._icon_file = ensure_icon_file(self.icon_path)
        title = self.tr("ntf_title")
        notify(title=title, message=msg, timeout=5, app_name=title, app_icon=self._icon_file)

    # --------- wiring ---------
    def build_session(self, dialogs: DialogHost) -> TraySession:
        directory = AsahiBlessDirectory(self.paths, self.launcher)
        orchestrator = RebootOrchestrator(self.paths, self.launcher)
        gate = DialogGate(tr=self.tr, show=dialogs.ask_confirm)
        return TraySession(
            directory=directory,
            gate=gate,
            orchestrator=orchestrator,
            tr=self.tr,
            report=self.report,
            macos_marker=self.config.macos_marker,
        )

    def check_identity(self) -> None:
        identity = current_user()
        if is_root(identity):
            raise StartupError(self.tr("err_running_as_root"))
        logger.debug("Running as %s (uid %d)", identity.name, identity.uid)

    def _on_terminate(self) -> None:
        if self.tray is not None:
            self.tray.stop()
        if self.dialogs is not None:
            self.dialogs.stop()

    # --------- lifecycle ---------
    def run(self) -> None:
        self.check_identity()

        self.dialogs = DialogHost()
        session = self.build_session(self.dialogs)
        self.session = session
        session.on_terminate = self._on_terminate
        session.start()

        actions = TrayActions(
            reboot=session.request_reboot,
            quit=session.request_quit,
            select_volume=session.select,
            get_volumes=lambda: session.volumes,
            get_selected=lambda: session.selected_index,
        )
        self.tray = TrayController(image=make_restart_icon(64), tr=lambda key: self.tr(key), actions=actions)
        session.on_change = self.tray.update_menu

        self.command_thread = threading.Thread(target=session.run_commands, name="CommandLoop", daemon=True)
        self.command_thread.start()
        self.tray.run_detached()

        # Run tkinter loop on the main thread (keeps the process alive)
        try:
            self.dialogs.run()
        except KeyboardInterrupt:
            logger.info("Interrupted, shutting down...")
        finally:
            session.terminate()
            if self.command_thread.is_alive():
                self.command_thread.join(timeout=1.5)
            self.cfg_mgr.save(self.config)


def main(argv: Optional[List[str]] = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    app = RebootSwitcherApp()
    configure_logging(app.config.log_level)

    try:
        current_user()
        if args:
            return passthrough_to_bless(args, app.paths, app.launcher)
        app.run()
    except StartupError as e:
        print(e, file=sys.stderr)
        return 1
    return 0
