# -*- coding: utf-8 -*-
"""
Tray session state machine.

Owns the volume list and the selected startup disk, and reacts to two event sources:

- volume selections from the tray's radio group, consumed in order by a background
  listener thread (`selection_loop`);
- "reboot" / "quit" commands, consumed by the foreground loop (`run_commands`).

The volume directory is the source of truth. Every selection ends with a refresh
that re-derives the selected index from the active volume, so an optimistic
selection whose write failed corrects itself. Until that refresh lands the
selection is marked pending.
"""

from __future__ import annotations

import enum
import logging
import queue
import threading
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

from .errors import DirectoryQueryError, DirectoryWriteError, RebootRequestError
from .volumes import Volume

logger = logging.getLogger(__name__)

CMD_REBOOT = "reboot"
CMD_QUIT = "quit"
CMD_STOP = "stop"

# Sentinel that stops the selection listener.
_STOP = None


class SessionPhase(enum.Enum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"
    SELECTING = "selecting"
    REBOOTING = "rebooting"
    TERMINATED = "terminated"


@dataclass
class SessionState:
    volumes: Tuple[Volume, ...] = ()
    selected_index: int = 0
    pending_index: Optional[int] = None
    last_selection_confirmed: Optional[bool] = None
    lock: threading.RLock = field(default_factory=threading.RLock)

    @property
    def is_pending(self) -> bool:
        with self.lock:
            return self.pending_index is not None

    def snapshot(self) -> Tuple[Tuple[Volume, ...], int]:
        with self.lock:
            return self.volumes, self.selected_index

    def apply_refresh(self, volumes: List[Volume]) -> None:
        with self.lock:
            self.volumes = tuple(volumes)
            self.selected_index = active_position(self.volumes)
            if self.pending_index is not None:
                self.last_selection_confirmed = self.pending_index == self.selected_index
                self.pending_index = None

    def apply_selection(self, position: int) -> None:
        with self.lock:
            self.selected_index = position
            self.pending_index = position
            self.last_selection_confirmed = None


def active_position(volumes) -> int:
    for pos, v in enumerate(volumes):
        if v.active:
            return pos
    return 0


class TraySession:
    def __init__(
        self,
        directory,
        gate,
        orchestrator,
        tr: Callable[..., str],
        report: Callable[..., None],
        macos_marker: str = "Macintosh",
    ):
        """
        directory: list_volumes() / set_boot_default(n) / set_boot_next_macos(flag)
        gate: ask(template, *args, title=..., confirm_label=...) -> bool
        orchestrator: request_reboot()
        report: called as report(message_key, msg=...) for user-visible failures
        """
        self.directory = directory
        self.gate = gate
        self.orchestrator = orchestrator
        self.tr = tr
        self.report = report
        self.macos_marker = macos_marker

        self.state = SessionState()
        self.phase = SessionPhase.UNINITIALIZED
        self.selection_events: "queue.Queue[Optional[int]]" = queue.Queue()
        self.command_events: "queue.Queue[str]" = queue.Queue()
        self.stop_event = threading.Event()
        self.listener: Optional[threading.Thread] = None

        # UI hooks
        self.on_change: Optional[Callable[[], None]] = None
        self.on_terminate: Optional[Callable[[], None]] = None

    # --------- read side ---------
    @property
    def volumes(self) -> Tuple[Volume, ...]:
        return self.state.snapshot()[0]

    @property
    def selected_index(self) -> int:
        return self.state.snapshot()[1]

    @property
    def terminated(self) -> bool:
        return self.phase is SessionPhase.TERMINATED

    def is_macos_active(self) -> bool:
        for v in self.volumes:
            if v.active and self.macos_marker in v.short_name:
                return True
        return False

    # --------- event sources (called from the tray thread) ---------
    def select(self, position: int) -> None:
        self.selection_events.put(position)

    def request_reboot(self) -> None:
        self.command_events.put(CMD_REBOOT)

    def request_quit(self) -> None:
        self.command_events.put(CMD_QUIT)

    # --------- transitions ---------
    def initialize(self) -> None:
        self.refresh()
        self._set_phase(SessionPhase.READY)

    def refresh(self) -> bool:
        try:
            volumes = self.directory.list_volumes()
        except DirectoryQueryError as e:
            logger.warning("Volume list refresh failed: %s", e)
            self.report("ntf_list_failed", msg=str(e))
            return False
        self.state.apply_refresh(volumes)
        logger.debug("Volumes: %s", volumes)
        self._fire(self.on_change)
        return True

    def handle_selection(self, position: int) -> None:
        self._set_phase(SessionPhase.SELECTING)
        try:
            volumes, selected = self.state.snapshot()
            if not 0 <= position < len(volumes):
                logger.warning("Ignoring selection %d outside of %d volume(s)", position, len(volumes))
            elif position != selected:
                self._confirm_and_set_default(volumes[position], position)
            self.refresh()
        finally:
            self._set_phase(SessionPhase.READY)

    def _confirm_and_set_default(self, volume: Volume, position: int) -> None:
        confirmed = self.gate.ask(
            self.tr("dlg_change_disk"),
            volume.short_name,
            title=self.tr("dlg_change_disk_title"),
            confirm_label=self.tr("btn_change"),
        )
        if not confirmed:
            return
        try:
            self.directory.set_boot_default(position + 1)
        except DirectoryWriteError as e:
            logger.error("%s", e)
            self.report("ntf_set_boot_failed", msg=str(e))
        # The UI follows the user's intent; the refresh that follows reconciles it.
        self.state.apply_selection(position)

    def handle_reboot(self) -> bool:
        self._set_phase(SessionPhase.REBOOTING)
        try:
            return self._reboot_to_macos()
        finally:
            self._set_phase(SessionPhase.READY)

    def _reboot_to_macos(self) -> bool:
        # TODO: skip the override when macOS is already queued as the next boot volume.
        if not self.is_macos_active():
            logger.info("macOS is not active, setting next boot override...")
            try:
                self.directory.set_boot_next_macos(True)
            except DirectoryWriteError as e:
                logger.error("%s", e)
                self.report("ntf_boot_next_failed", msg=str(e))
                return False
        else:
            logger.info("macOS is already active, rebooting...")

        try:
            self.orchestrator.request_reboot()
        except RebootRequestError as e:
            logger.error("Failed to reboot to macOS: %s", e)
            self.report("ntf_reboot_failed", msg=str(e))
            return False
        return True

    def handle_quit(self) -> bool:
        confirmed = self.gate.ask(
            self.tr("dlg_quit"),
            title=self.tr("dlg_quit_title"),
            confirm_label=self.tr("btn_quit"),
        )
        if not confirmed:
            return False
        logger.info("Quit")
        self.terminate()
        return True

    def terminate(self) -> None:
        with self.state.lock:
            if self.terminated:
                return
            self.phase = SessionPhase.TERMINATED
        self.stop_event.set()
        self.selection_events.put(_STOP)
        self.command_events.put(CMD_STOP)
        self._fire(self.on_terminate)

    # --------- loops ---------
    def start(self) -> None:
        self.initialize()
        self.listener = threading.Thread(target=self.selection_loop, name="VolumeSelectionListener", daemon=True)
        self.listener.start()

    def selection_loop(self) -> None:
        while not self.stop_event.is_set():
            position = self.selection_events.get()
            if position is _STOP:
                break
            try:
                self.handle_selection(position)
            except Exception as e:
                logger.exception("Selection handling failed")
                self.report("ntf_unexpected", msg=str(e))

    def run_commands(self) -> None:
        """Process reboot and quit commands until the session terminates."""
        while not self.terminated:
            cmd = self.command_events.get()
            if cmd == CMD_STOP or self.terminated:
                break
            try:
                self.dispatch_command(cmd)
            except Exception as e:
                logger.exception("Command %r failed", cmd)
                self.report("ntf_unexpected", msg=str(e))

    def dispatch_command(self, cmd: str) -> None:
        if cmd == CMD_REBOOT:
            self.handle_reboot()
        elif cmd == CMD_QUIT:
            self.handle_quit()
        else:
            logger.warning("Unknown command %r", cmd)

    def _set_phase(self, phase: SessionPhase) -> None:
        # TERMINATED is final, whichever thread gets here last.
        with self.state.lock:
            if self.phase is not SessionPhase.TERMINATED:
                self.phase = phase

    def _fire(self, hook: Optional[Callable[[], None]]) -> None:
        if hook is None:
            return
        try:
            hook()
        except Exception:
            logger.exception("UI hook failed")
