# -*- coding: utf-8 -*-
"""
render/draw_list.py

把 Chain 的几何转换成与具体绘图后端无关的"绘制列表":
- 每根骨骼: 一条线段 (start, end) + 起点/终点两个关节标记;
- 骨骼之间的关节: 一个 joint 标记;
- 整条链: 原点处一个 origin 标记;
- 可选: 目标点 target 标记。

OffscreenRenderer (moderngl) 和 ChainCanvas (Qt) 都只消费 DrawList。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from rigging.bone import as_point
from rigging.chain import Chain

RGBA = Tuple[float, float, float, float]

MARKER_KINDS = ("start", "end", "joint", "origin", "target")


@dataclass
class Segment:
    start: np.ndarray
    end: np.ndarray
    bone_index: int


@dataclass
class Marker:
    position: np.ndarray
    kind: str  # one of MARKER_KINDS

    def __post_init__(self):
        if self.kind not in MARKER_KINDS:
            raise ValueError(f"unknown marker kind {self.kind!r}")


@dataclass
class DrawStyle:
    """颜色 / 线宽 / 标记半径 (像素)."""

    background: RGBA = (0.0, 0.0, 0.0, 1.0)
    bone_color: RGBA = (1.0, 1.0, 1.0, 1.0)
    bone_width: float = 4.0
    marker_colors: Dict[str, RGBA] = field(default_factory=lambda: {
        "start": (1.0, 1.0, 0.0, 1.0),
        "end": (0.0, 1.0, 0.0, 1.0),
        "joint": (0.0, 0.6, 1.0, 1.0),
        "origin": (1.0, 0.0, 0.0, 1.0),
        "target": (1.0, 0.0, 1.0, 1.0),
    })
    marker_radii: Dict[str, float] = field(default_factory=lambda: {
        "start": 2.0,
        "end": 2.0,
        "joint": 3.0,
        "origin": 3.0,
        "target": 4.0,
    })


@dataclass
class DrawList:
    segments: List[Segment] = field(default_factory=list)
    markers: List[Marker] = field(default_factory=list)

    def markers_of(self, kind: str) -> List[Marker]:
        return [m for m in self.markers if m.kind == kind]

    def bounds(self) -> Optional[Tuple[np.ndarray, np.ndarray]]:
        """(min_xy, max_xy) over every drawn point, None if empty."""
        pts = [s.start for s in self.segments] + [s.end for s in self.segments]
        pts += [m.position for m in self.markers]
        if not pts:
            return None
        arr = np.stack(pts, axis=0)
        return arr.min(axis=0), arr.max(axis=0)


def build_draw_list(
    chain: Chain,
    target: Optional[Sequence[float]] = None,
    show_joints: bool = True,
) -> DrawList:
    """Snapshot the chain's current geometry for a renderer."""
    out = DrawList()
    for i, bone in enumerate(chain.bones):
        start, end = bone.segment()
        out.segments.append(Segment(start=start, end=end, bone_index=i))
        out.markers.append(Marker(start.copy(), "start"))
        out.markers.append(Marker(end.copy(), "end"))

    if show_joints:
        for joint in chain.joints():
            out.markers.append(Marker(joint.position(chain), "joint"))

    out.markers.append(Marker(chain.origin, "origin"))
    if target is not None:
        out.markers.append(Marker(as_point(target), "target"))
    return out
