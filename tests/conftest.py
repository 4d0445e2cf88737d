"""Shared pytest configuration for pingchart tests."""

import os

# Render Qt widgets without a display
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
