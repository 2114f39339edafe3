# -*- coding: utf-8 -*-
"""
Error types shared by the volume directory, the reboot orchestrator and the tray session.
"""

from __future__ import annotations


class SwitcherError(Exception):
    """Base class for every error the tray session knows how to report."""


class DirectoryQueryError(SwitcherError):
    """Listing boot volumes failed (tool missing, non-zero exit or unparseable output)."""


class DirectoryWriteError(SwitcherError):
    """Changing the boot default or the boot-next override failed."""


class RebootRequestError(SwitcherError):
    """The chosen reboot mechanism could not be launched or exited non-zero."""


class StartupError(SwitcherError):
    """Fatal condition detected before the tray session starts."""


class ConfirmationCancelled(Exception):
    """
    The user dismissed a confirmation dialog.

    Not a failure: the confirmation gate turns it into a plain ``False``.
    """
