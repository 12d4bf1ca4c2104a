# -*- coding: utf-8 -*-
"""Shared Qt stylesheet and setup helpers."""

from __future__ import annotations

from PySide6.QtWidgets import QApplication


APP_STYLE = """
QMainWindow {
    background-color: #000000;
}
QStatusBar {
    background-color: #1e1e1e;
    color: #dddddd;
    font-size: 12px;
}
QLabel#FooterLabel {
    font-family: monospace;
    font-size: 12px;
    color: #dddddd;
}
"""


def apply_style(app: QApplication) -> None:
    """Apply a consistent style across the UI."""
    app.setStyle("Fusion")
    app.setStyleSheet(APP_STYLE)
