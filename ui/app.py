# -*- coding: utf-8 -*-
"""Interactive two-bone IK viewer.

Per frame (QTimer tick): pointer -> Chain.update -> propagate -> DrawList ->
ChainCanvas. Right click re-anchors the origin, R resets it to the centre.
"""

from __future__ import annotations

import argparse
import math
import sys
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np
from PySide6.QtCore import QTimer
from PySide6.QtWidgets import QApplication, QLabel, QMainWindow

from render.draw_list import build_draw_list
from render.onscreen_qt import ChainCanvas
from rigging.solver import IKSolution
from scene.asset import ArmConfig
from ui.style import apply_style


@dataclass
class ViewerConfig:
    width: int = 800
    height: int = 600
    fps: int = 60
    lengths: tuple = (100.0, 80.0)
    angles: tuple = (0.5, 1.0)
    show_target: bool = True


def format_status(sol: IKSolution) -> str:
    """状态栏文本: 各骨骼角度(度) + 求解状态."""
    degs = ", ".join(f"{math.degrees(a):7.2f}" for a in sol.angles)
    if len(sol.angles) == 1:
        # 单骨骼只负责指向目标, 不存在 "够不到" 的说法
        state = "target on origin" if sol.degenerate else "pointing"
    else:
        state = "reached" if sol.reached else "clamped"
    return f"angles (deg): [{degs}] | {state}"


class MainWindow(QMainWindow):
    """主窗口：骨骼链画布 + 状态栏."""

    def __init__(self, config: Optional[ViewerConfig] = None):
        super().__init__()
        self.config = config or ViewerConfig()
        self.setWindowTitle("Two-Bone IK")
        self.resize(self.config.width, self.config.height)

        self.canvas = ChainCanvas(parent=self)
        self.setCentralWidget(self.canvas)

        self.status_label = QLabel("Move the pointer | right click: re-anchor | R: reset")
        self.status_label.setObjectName("FooterLabel")
        self.statusBar().addWidget(self.status_label, 1)

        center = (self.config.width / 2.0, self.config.height / 2.0)
        arm = ArmConfig(
            lengths=tuple(self.config.lengths),
            angles=tuple(self.config.angles),
            origin=center,
        )
        self.chain = arm.build_chain()
        self.target = np.array(center, dtype=np.float64)
        self._pending_origin: Optional[np.ndarray] = None

        self.canvas.target_moved.connect(self._on_target_moved)
        self.canvas.reanchor_requested.connect(self._on_reanchor)
        self.canvas.reset_requested.connect(self._on_reset)

        # 帧循环: 每个 tick 依次 输入 -> 求解 -> 传播 -> 绘制
        self.frame_timer = QTimer(self)
        self.frame_timer.setInterval(max(1, int(1000 / max(1, self.config.fps))))
        self.frame_timer.timeout.connect(self.step)
        self.frame_timer.start()

    # ----------------------------------------------------------------- Input

    def _on_target_moved(self, x: float, y: float) -> None:
        self.target = np.array([x, y], dtype=np.float64)

    def _on_reanchor(self, x: float, y: float) -> None:
        self._pending_origin = np.array([x, y], dtype=np.float64)

    def _on_reset(self) -> None:
        self._pending_origin = self.canvas.center()

    # ----------------------------------------------------------------- Frame

    def step(self) -> None:
        if self._pending_origin is not None:
            self.chain.set_origin(self._pending_origin)
            print(f"[INFO] Origin moved to {self._pending_origin.round(1).tolist()}")
            self._pending_origin = None

        sol = self.chain.update(self.target)

        target = self.target if self.config.show_target else None
        self.canvas.set_draw_list(build_draw_list(self.chain, target=target))

        if sol is not None:
            self.status_label.setText(format_status(sol))


def parse_args(argv: Optional[Sequence[str]] = None) -> ViewerConfig:
    parser = argparse.ArgumentParser(description="Interactive two-bone IK viewer")
    parser.add_argument("--width", type=int, default=800)
    parser.add_argument("--height", type=int, default=600)
    parser.add_argument("--fps", type=int, default=60)
    parser.add_argument(
        "--lengths",
        type=float,
        nargs="+",
        default=[100.0, 80.0],
        help="bone lengths (1 or 2 values)",
    )
    parser.add_argument("--hide-target", action="store_true")
    args = parser.parse_args(argv)

    lengths = tuple(args.lengths)
    if len(lengths) > 2:
        print(f"[WARN] only 2 bones supported, ignoring {list(lengths[2:])}")
        lengths = lengths[:2]
    angles = (0.5, 1.0)[: len(lengths)]
    return ViewerConfig(
        width=args.width,
        height=args.height,
        fps=args.fps,
        lengths=lengths,
        angles=angles,
        show_target=not args.hide_target,
    )


def run(argv: Optional[Sequence[str]] = None):
    config = parse_args(sys.argv[1:] if argv is None else argv)
    app = QApplication(sys.argv)
    apply_style(app)
    win = MainWindow(config)
    win.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    run()
