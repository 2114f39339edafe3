# -*- coding: utf-8 -*-
from __future__ import annotations

import sys

if not sys.platform.startswith("linux"):
    print("Asahi Reboot Switcher is Linux-only.")
    sys.exit(1)

from rebootswitcher.app import main


if __name__ == "__main__":
    sys.exit(main())
