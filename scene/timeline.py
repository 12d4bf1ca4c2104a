# -*- coding: utf-8 -*-
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

import numpy as np

from rigging.bone import as_point


@dataclass
class FrameInput:
    """一帧的输入: 目标点 + 可选的重新锚定命令(新的原点)."""
    target: np.ndarray
    reanchor: Optional[np.ndarray] = None


@dataclass
class TargetKey:
    """单个目标点关键帧 (time 单位: 秒)."""
    time: float
    position: np.ndarray

    def __post_init__(self):
        self.time = float(self.time)
        self.position = as_point(self.position)


@dataclass
class TargetTrack:
    """目标点轨道.

    loop=True 时时间在 [0, 末帧时间) 上取模, 否则 clamp 到首末帧。
    """
    keyframes: List[TargetKey] = field(default_factory=list)
    loop: bool = False

    @property
    def duration(self) -> float:
        return self.keyframes[-1].time if self.keyframes else 0.0

    def add_keyframe(self, time: float, position: Sequence[float]) -> None:
        self.keyframes.append(TargetKey(time=time, position=position))
        # 保证时间有序, 便于后续插值
        self.keyframes.sort(key=lambda k: k.time)

    def sample(self, t: float) -> Optional[np.ndarray]:
        """在时间 t 处线性插值目标点; 没有关键帧时返回 None."""
        if not self.keyframes:
            return None

        kfs = self.keyframes
        t = float(t)
        if self.loop and self.duration > 0.0:
            t = t % self.duration

        if t <= kfs[0].time:
            return kfs[0].position.copy()
        if t >= kfs[-1].time:
            return kfs[-1].position.copy()

        for k0, k1 in zip(kfs[:-1], kfs[1:]):
            if k0.time <= t <= k1.time:
                if np.isclose(k0.time, k1.time):
                    return k0.position.copy()
                alpha = (t - k0.time) / (k1.time - k0.time)
                return (1.0 - alpha) * k0.position + alpha * k1.position
        return kfs[-1].position.copy()


def circle_track(
    center: Sequence[float],
    radius: float,
    period: float,
    samples: int = 32,
) -> TargetTrack:
    """目标点沿圆周匀速运动一圈(循环)."""
    if samples < 2:
        raise ValueError("circle_track needs at least 2 samples")
    c = as_point(center)
    track = TargetTrack(loop=True)
    for i in range(samples + 1):
        a = 2.0 * math.pi * i / samples
        track.add_keyframe(
            period * i / samples,
            c + radius * np.array([math.cos(a), math.sin(a)]),
        )
    return track


@dataclass
class ReanchorEvent:
    time: float
    origin: np.ndarray

    def __post_init__(self):
        self.time = float(self.time)
        self.origin = as_point(self.origin)


@dataclass
class Timeline:
    """脚本化输入: 一条目标点轨道 + 若干重新锚定事件."""
    track: TargetTrack
    reanchors: List[ReanchorEvent] = field(default_factory=list)
    duration: float = 0.0

    def __post_init__(self):
        if self.duration <= 0.0:
            self.duration = self.track.duration

    def add_reanchor(self, time: float, origin: Sequence[float]) -> None:
        self.reanchors.append(ReanchorEvent(time=time, origin=origin))
        self.reanchors.sort(key=lambda e: e.time)
        if time > self.duration:
            self.duration = float(time)

    def origin_at(self, t: float) -> Optional[np.ndarray]:
        """时间 t 时应生效的原点(最近一次 <= t 的事件), 没有则 None."""
        active = None
        for ev in self.reanchors:
            if ev.time > t:
                break
            active = ev.origin
        return None if active is None else active.copy()

    def sample(self, t: float) -> Optional[FrameInput]:
        target = self.track.sample(t)
        if target is None:
            return None
        return FrameInput(target=target, reanchor=self.origin_at(t))
