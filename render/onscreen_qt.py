# -*- coding: utf-8 -*-
"""
render/onscreen_qt.py

用途：
- 在 PySide6 窗口中实时绘制 DrawList（QPainter 2D 绘制）；
- 把鼠标输入转换成 IK 的输入：指针位置 = 目标点，右键 = 重新锚定原点。

ChainCanvas 本身不做任何 IK 计算，只负责：
- 保存最近一帧的 DrawList 并在 paintEvent 中绘制；
- 通过 Signal 把输入事件交给上层（ui/app.py 中的帧循环）。
"""

from __future__ import annotations

from typing import Optional

import numpy as np
from PySide6.QtCore import QPointF, Qt, Signal
from PySide6.QtGui import QBrush, QColor, QPainter, QPen
from PySide6.QtWidgets import QWidget

from render.draw_list import DrawList, DrawStyle, RGBA


def _qcolor(rgba: RGBA) -> QColor:
    r, g, b, a = rgba
    return QColor.fromRgbF(float(r), float(g), float(b), float(a))


class ChainCanvas(QWidget):
    """绘制骨骼链的 2D 画布."""

    target_moved = Signal(float, float)
    reanchor_requested = Signal(float, float)
    reset_requested = Signal()

    def __init__(self, style: Optional[DrawStyle] = None, parent=None) -> None:
        super().__init__(parent)
        self.style = style or DrawStyle()
        self.draw_list: DrawList = DrawList()

        self.setMouseTracking(True)  # 不按键也接收 mouseMoveEvent
        self.setFocusPolicy(Qt.StrongFocus)
        self.setMinimumSize(320, 240)

    # ------------------------------------------------------------------
    # 对外接口
    # ------------------------------------------------------------------
    def set_draw_list(self, draw_list: DrawList) -> None:
        self.draw_list = draw_list
        self.update()

    def center(self) -> np.ndarray:
        return np.array([self.width() / 2.0, self.height() / 2.0], dtype=np.float64)

    # ------------------------------------------------------------------
    # 输入事件
    # ------------------------------------------------------------------
    def mouseMoveEvent(self, event) -> None:
        pos = event.position()
        self.target_moved.emit(float(pos.x()), float(pos.y()))

    def mousePressEvent(self, event) -> None:
        if event.button() == Qt.RightButton:
            pos = event.position()
            self.reanchor_requested.emit(float(pos.x()), float(pos.y()))
            return
        super().mousePressEvent(event)

    def keyPressEvent(self, event) -> None:
        if event.key() == Qt.Key_R:
            self.reset_requested.emit()
            return
        super().keyPressEvent(event)

    # ------------------------------------------------------------------
    # 绘制
    # ------------------------------------------------------------------
    def paintEvent(self, event) -> None:
        _ = event
        style = self.style
        painter = QPainter(self)
        try:
            painter.setRenderHint(QPainter.Antialiasing, True)
            painter.fillRect(self.rect(), _qcolor(style.background))

            pen = QPen(_qcolor(style.bone_color))
            pen.setWidthF(style.bone_width)
            pen.setCapStyle(Qt.RoundCap)
            painter.setPen(pen)
            for seg in self.draw_list.segments:
                painter.drawLine(
                    QPointF(float(seg.start[0]), float(seg.start[1])),
                    QPointF(float(seg.end[0]), float(seg.end[1])),
                )

            painter.setPen(Qt.NoPen)
            for m in self.draw_list.markers:
                r = style.marker_radii[m.kind]
                painter.setBrush(QBrush(_qcolor(style.marker_colors[m.kind])))
                painter.drawEllipse(QPointF(float(m.position[0]), float(m.position[1])), r, r)
        finally:
            painter.end()
