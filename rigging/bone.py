# -*- coding: utf-8 -*-
# 平面骨骼: 起点 + 长度 + 绝对角度
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

import numpy as np


def as_point(p: Sequence[float]) -> np.ndarray:
    """Convert any (x, y) pair into a float64 (2,) array (copy)."""
    arr = np.array(p, dtype=np.float64).reshape(-1)
    if arr.shape != (2,):
        raise ValueError(f"point must have 2 components, got shape {np.shape(p)}")
    return arr


def _origin_point() -> np.ndarray:
    return np.zeros(2, dtype=np.float64)


@dataclass(eq=False)
class Bone:
    """A rigid planar link.

    `angle` is the absolute orientation in radians (not relative to the parent
    bone). Length is not validated; a zero or negative length collapses the
    bone to a point / flips it.
    """
    start: np.ndarray = field(default_factory=_origin_point)
    length: float = 0.0
    angle: float = 0.0

    def __post_init__(self):
        self.start = as_point(self.start)
        self.length = float(self.length)
        self.angle = float(self.angle)

    def end(self) -> np.ndarray:
        return self.start + self.length * np.array(
            [np.cos(self.angle), np.sin(self.angle)], dtype=np.float64
        )

    def set_start(self, start: Sequence[float]) -> None:
        self.start = as_point(start)

    def set_length(self, length: float) -> None:
        self.length = float(length)

    def set_angle(self, angle: float) -> None:
        self.angle = float(angle)

    def segment(self) -> tuple[np.ndarray, np.ndarray]:
        return self.start.copy(), self.end()
