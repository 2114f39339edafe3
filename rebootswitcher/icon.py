# -*- coding: utf-8 -*-
"""
Generate the tray icon (a circular "restart" arrow) using Pillow,
and a PNG copy of it for desktop notifications.

No external asset files needed.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Mapping, Optional

from PIL import Image, ImageDraw

logger = logging.getLogger(__name__)


def make_restart_icon(size: int = 64) -> Image.Image:
    img = Image.new("RGBA", (size, size), (0, 0, 0, 0))
    d = ImageDraw.Draw(img)

    # Light glyph, readable on both dark and light panels thanks to the outline
    fg = (235, 235, 235, 255)
    outline = (40, 40, 40, 255)

    pad = int(size * 0.14)
    width = max(2, int(size * 0.11))
    box = [pad, pad, size - pad, size - pad]

    # Open circle, gap at the top right where the arrow head sits
    d.arc(box, start=-50, end=250, fill=outline, width=width + 2)
    d.arc(box, start=-50, end=250, fill=fg, width=width)

    # Arrow head pointing clockwise at the start of the gap
    cx = int(size * 0.70)
    cy = int(size * 0.16)
    head = int(size * 0.17)
    tri = [(cx - head, cy - head // 2), (cx + head // 2, cy + head // 3), (cx - head, cy + head + head // 3)]
    d.polygon(tri, fill=fg, outline=outline)

    return img


def default_icon_path(environ: Optional[Mapping[str, str]] = None) -> Path:
    env = os.environ if environ is None else environ
    base = (env.get("XDG_CACHE_HOME") or "").strip()
    root = Path(base) if base else Path(os.path.expanduser("~")) / ".cache"
    return root / "asahi-reboot-switcher" / "icon.png"


def ensure_icon_file(path: Path, size: int = 64) -> Optional[str]:
    """
    Write the tray icon as PNG for the notification daemon, which only takes file paths.
    Returns the path, or None when it cannot be written.
    """
    if path.exists():
        return str(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        make_restart_icon(size).save(path, format="PNG")
    except OSError as e:
        logger.debug("Cannot write notification icon %s: %s", path, e)
        return None
    return str(path)
