# -*- coding: utf-8 -*-
"""Tray utility for picking the default startup disk and restarting into macOS on Asahi Linux."""
