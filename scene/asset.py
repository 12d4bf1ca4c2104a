# -*- coding: utf-8 -*-
from dataclasses import dataclass, field

import numpy as np
from typing import Optional, Sequence, Tuple

from rigging.chain import Chain
from render.draw_list import DrawList, build_draw_list
from scene.timeline import FrameInput


@dataclass
class ArmConfig:
    """一条机械臂/肢体的配置: 骨骼长度、初始角度(弧度)与原点."""
    lengths: Tuple[float, ...] = (100.0, 80.0)
    angles: Tuple[float, ...] = (0.5, 1.0)
    origin: Tuple[float, float] = (0.0, 0.0)

    def build_chain(self, origin: Optional[Sequence[float]] = None) -> Chain:
        if len(self.angles) != len(self.lengths):
            raise ValueError(
                f"ArmConfig: {len(self.lengths)} lengths but {len(self.angles)} angles"
            )
        chain = Chain(self.origin if origin is None else origin)
        for length, angle in zip(self.lengths, self.angles):
            if not chain.add_bone(length, angle):
                print(f"[WARN] ArmConfig: bone (length={length}) rejected by chain.")
        return chain


@dataclass
class ChainAsset:
    """场景中一条带名字的骨骼链."""
    name: str
    chain: Chain
    show_joints: bool = True
    # 构建时的原点; 没有生效的重新锚定事件时回到这里
    home_origin: np.ndarray = field(init=False, repr=False)

    def __post_init__(self):
        self.home_origin = self.chain.origin

    def bake_frame(self, frame_input: FrameInput) -> DrawList:
        """执行一帧: 重新锚定 -> IK 求解 -> 位置传播, 返回绘制列表.

        原点只由本帧输入决定 (reanchor 或 home_origin), 与之前求解过哪些帧无关。
        """
        origin = frame_input.reanchor if frame_input.reanchor is not None else self.home_origin
        self.chain.set_origin(origin)
        self.chain.update(frame_input.target)
        return build_draw_list(
            self.chain, target=frame_input.target, show_joints=self.show_joints
        )
