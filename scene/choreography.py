# -*- coding: utf-8 -*-
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple

import numpy as np

from render.draw_list import DrawList
from .asset import ChainAsset
from .timeline import Timeline


@dataclass
class RigFrame:
    """某一时间点下, 单条骨骼链在场景中的状态."""

    asset: ChainAsset
    target: np.ndarray
    angles: Tuple[float, ...]
    draw_list: DrawList


@dataclass
class Scene:
    """简单的多骨骼链场景/编排容器.

    当前实现:
    - 每个 ChainAsset 绑定一条 Timeline (脚本化输入)
    - simulate(t) 时, 按顺序对每个 asset:
      采样 Timeline -> 重新锚定 -> IK 求解 -> 位置传播 -> DrawList
    """

    fps: int = 30
    assets: List[ChainAsset] = field(default_factory=list)
    timelines: List[Timeline] = field(default_factory=list)

    def add_asset(self, asset: ChainAsset, timeline: Timeline) -> None:
        """一个 asset 绑定一条 timeline. 两个列表保持同长度 & 索引对齐。"""
        if timeline is None:
            raise ValueError("Scene.add_asset() 需要传入有效的 Timeline.")
        if asset.chain.bone_count == 0:
            print(f"[WARN] Scene.add_asset(): '{asset.name}' has no bones; it will only draw its origin.")

        self.assets.append(asset)
        self.timelines.append(timeline)

    @property
    def duration(self) -> float:
        if not self.timelines:
            return 0.0
        return max(t.duration for t in self.timelines)

    def simulate(self, t: float) -> List[RigFrame]:
        """返回时刻 t 的所有骨骼链姿态(供渲染)."""
        frames: List[RigFrame] = []

        for asset, timeline in zip(self.assets, self.timelines):
            frame_input = timeline.sample(t)
            if frame_input is None:
                continue

            draw_list = asset.bake_frame(frame_input)
            frames.append(
                RigFrame(
                    asset=asset,
                    target=frame_input.target,
                    angles=tuple(asset.chain.angles()),
                    draw_list=draw_list,
                )
            )

        return frames

    @staticmethod
    def merged_draw_list(frames: List[RigFrame]) -> DrawList:
        """把多条链的 DrawList 合并为一个(渲染一张图)."""
        out = DrawList()
        for frame in frames:
            out.segments.extend(frame.draw_list.segments)
            out.markers.extend(frame.draw_list.markers)
        return out
