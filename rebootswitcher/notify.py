# -*- coding: utf-8 -*-
"""
Notification wrapper.

plyer talks to the freedesktop notification service. If that fails (no
notification daemon, missing D-Bus bindings) the message is only logged.
"""

from __future__ import annotations

import logging
from typing import Optional

logger = logging.getLogger(__name__)


def notify(
    title: str,
    message: str,
    timeout: int = 5,
    app_name: Optional[str] = None,
    app_icon: Optional[str] = None,
) -> None:
    try:
        from plyer import notification  # type: ignore

        notification.notify(
            title=title,
            message=message,
            app_name=app_name or title,
            app_icon=app_icon or "",
            timeout=timeout,
        )
    except Exception as e:
        logger.debug("Desktop notification unavailable: %s", e)
