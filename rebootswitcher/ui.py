# -*- coding: utf-8 -*-
"""
tkinter confirmation dialogs.

The tray app has no main window: a single hidden Tk root lives on the main thread
and every dialog is a Toplevel built there. Worker threads never touch tkinter;
they put a build task on `gui_queue` and block on their own request until the
user answers. Two threads asking at once get two dialogs, neither waits for the
other.
"""

from __future__ import annotations

import logging
import queue
import threading
from typing import Callable, List, Optional

import tkinter as tk
from tkinter import ttk

from .errors import ConfirmationCancelled

logger = logging.getLogger(__name__)

Deliver = Callable[[Optional[bool]], None]


def build_confirm_dialog(
    root: tk.Tk,
    title: str,
    message: str,
    ok_label: str,
    cancel_label: str,
    deliver: Deliver,
) -> tk.Toplevel:
    """
    Build a non-blocking question window. `deliver` gets True / False for the
    buttons and None when the window is closed or Escape is pressed.
    """
    top = tk.Toplevel(root)
    top.title(title)
    top.resizable(False, False)
    try:
        top.attributes("-topmost", True)
    except tk.TclError:
        pass

    def finish(value: Optional[bool]) -> None:
        deliver(value)
        try:
            top.destroy()
        except tk.TclError:
            pass

    top.protocol("WM_DELETE_WINDOW", lambda: finish(None))
    top.bind("<Escape>", lambda _e: finish(None))
    top.bind("<Return>", lambda _e: finish(True))

    outer = ttk.Frame(top, padding=16)
    outer.pack(fill=tk.BOTH, expand=True)
    ttk.Label(outer, text=message, wraplength=360, justify=tk.LEFT).pack(anchor=tk.W)

    footer = ttk.Frame(outer)
    footer.pack(fill=tk.X, pady=(14, 0))
    btn_ok = ttk.Button(footer, text=ok_label, command=lambda: finish(True))
    btn_ok.pack(side=tk.RIGHT)
    ttk.Button(footer, text=cancel_label, command=lambda: finish(False)).pack(side=tk.RIGHT, padx=(0, 8))

    # Center on screen
    top.update_idletasks()
    w, h = top.winfo_reqwidth(), top.winfo_reqheight()
    x = (top.winfo_screenwidth() - w) // 2
    y = (top.winfo_screenheight() - h) // 3
    top.geometry(f"+{x}+{y}")
    top.deiconify()
    btn_ok.focus_force()
    return top


class _Request:
    def __init__(self) -> None:
        self.done = threading.Event()
        self.value: Optional[bool] = None

    def deliver(self, value: Optional[bool]) -> None:
        if self.done.is_set():
            return
        self.value = value
        self.done.set()


class DialogHost:
    """
    Owns the Tk root. `run()` must be called on the main thread; `ask_confirm()`
    may be called from any other thread.
    """

    POLL_MS = 120

    def __init__(self, build: Callable[..., object] = build_confirm_dialog):
        self.build = build
        self.root: Optional[tk.Tk] = None
        self.gui_queue: "queue.Queue[Callable[[], None]]" = queue.Queue()
        self._pending: List[_Request] = []
        self._lock = threading.Lock()
        self._stopped = threading.Event()

    # --------- queue / tkinter thread bridge ---------
    def enqueue_ui(self, func: Callable[[], None]) -> None:
        self.gui_queue.put(func)

    def process_pending(self) -> None:
        while True:
            try:
                task = self.gui_queue.get_nowait()
            except queue.Empty:
                return
            try:
                task()
            except Exception:
                logger.exception("Dialog task failed")

    def _process_gui_queue(self) -> None:
        if self.root is None:
            return
        self.process_pending()
        if self._stopped.is_set():
            self.root.quit()
            return
        self.root.after(self.POLL_MS, self._process_gui_queue)

    # --------- worker side ---------
    def ask_confirm(self, title: str, message: str, ok_label: str, cancel_label: str) -> bool:
        """
        Block the calling thread until the user answers.
        Raises ConfirmationCancelled when the window is closed or the host shuts down.
        """
        req = _Request()
        with self._lock:
            if self._stopped.is_set():
                raise ConfirmationCancelled(title)
            self._pending.append(req)

        def show() -> None:
            if req.done.is_set():
                return
            try:
                self.build(self.root, title, message, ok_label, cancel_label, req.deliver)
            except Exception:
                req.deliver(None)
                raise

        self.enqueue_ui(show)
        req.done.wait()
        with self._lock:
            if req in self._pending:
                self._pending.remove(req)

        if req.value is None:
            raise ConfirmationCancelled(title)
        return req.value

    # --------- lifecycle ---------
    def run(self) -> None:
        if self._stopped.is_set():
            return
        self.root = tk.Tk()
        self.root.withdraw()
        self.root.after(self.POLL_MS, self._process_gui_queue)
        self.root.mainloop()
        self.stop()
        try:
            self.root.destroy()
        except tk.TclError:
            pass

    def stop(self) -> None:
        """Answer every open question with a cancellation and leave the Tk loop."""
        with self._lock:
            self._stopped.set()
            pending = list(self._pending)
        for req in pending:
            req.deliver(None)


class DialogGate:
    """
    Blocking yes/no prompt used before any boot configuration change or quitting.
    """

    def __init__(self, tr: Callable[[str], str], show: Callable[[str, str, str, str], bool]):
        self.tr = tr
        self.show = show

    def ask(self, template: str, *args, title: str, confirm_label: Optional[str] = None) -> bool:
        message = template % args if args else template
        ok_label = confirm_label or self.tr("btn_ok")
        try:
            return bool(self.show(title, message, ok_label, self.tr("btn_cancel")))
        except ConfirmationCancelled:
            logger.debug("Dialog dismissed: %s", title)
            return False
