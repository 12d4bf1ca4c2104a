# -*- coding: utf-8 -*-
"""Closed-form planar IK for one- and two-bone chains.

All functions here are pure: they read lengths / origin / target and return an
`IKSolution`. Writing the angles back and re-propagating bone starts is done
by `rigging.chain.Chain`.

Every branch is total over floats:
  - unreachable targets are clamped onto the reachable annulus,
  - a target at the origin falls back to a fixed pose,
  - acos arguments are clamped to [-1, 1],
  - zero-length bones use the straight-limb value instead of dividing by 0.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence, Tuple

import numpy as np

from rigging.bone import as_point

EPS = 1e-3


@dataclass
class IKSolution:
    angles: Tuple[float, ...]
    # distance from origin actually solved for (after clamping)
    distance: float
    # True when the requested target already lay inside the reachable band
    reached: bool
    degenerate: bool = False


def clamp(v: float, lo: float, hi: float) -> float:
    """Keep v within [lo, hi]. If lo > hi, lo wins."""
    return max(lo, min(v, hi))


def _cos_ratio(num: float, den: float, fallback: float) -> float:
    if den == 0.0:
        return fallback
    return clamp(num / den, -1.0, 1.0)


def reach_band(l1: float, l2: float) -> Tuple[float, float]:
    """Reachable annulus [|l1 - l2|, l1 + l2] of a two-bone chain."""
    return abs(l1 - l2), l1 + l2


def solve_one_bone(
    origin: Sequence[float],
    target: Sequence[float],
    length: float,
    current_angle: float,
) -> IKSolution:
    """Point a single bone straight at the target.

    The direction is undefined when the target sits on the origin, in which
    case the current angle is kept.
    """
    o = as_point(origin)
    t = as_point(target)
    dx = float(t[0] - o[0])
    dy = float(t[1] - o[1])
    dist = math.hypot(dx, dy)

    if dist > EPS:
        return IKSolution(
            angles=(math.atan2(dy, dx),),
            distance=abs(length),
            reached=math.isclose(dist, abs(length), abs_tol=EPS),
        )
    return IKSolution(
        angles=(float(current_angle),),
        distance=abs(length),
        reached=abs(length) <= EPS,
        degenerate=True,
    )


def solve_two_bone(
    origin: Sequence[float],
    target: Sequence[float],
    l1: float,
    l2: float,
) -> IKSolution:
    """Analytic two-bone IK (law of cosines).

    Returns absolute angles (angle1, angle2) for bone 1 and bone 2. The elbow
    bends so that bone 1 sits clockwise of the target direction
    (angle1 = beta - phi).
    """
    o = as_point(origin)
    t = as_point(target)
    l1 = float(l1)
    l2 = float(l2)

    v = t - o
    dist = float(np.hypot(v[0], v[1]))
    direction = v / dist if dist > 0.0 else np.zeros(2, dtype=np.float64)

    lo, hi = reach_band(l1, l2)
    clamped = clamp(dist, lo, hi)
    reached = lo - EPS <= dist <= hi + EPS

    # 实际求解的目标点(投影到可达环上)
    actual = o + direction * clamped
    va = actual - o
    d = float(np.hypot(va[0], va[1]))

    if d < EPS:
        # folded back on itself; direction undefined at the origin
        return IKSolution(
            angles=(0.0, math.pi),
            distance=d,
            reached=reached,
            degenerate=True,
        )

    cos_theta2 = _cos_ratio(l1 * l1 + l2 * l2 - d * d, 2.0 * l1 * l2, -1.0)
    theta2 = math.acos(cos_theta2)

    cos_phi = _cos_ratio(l1 * l1 + d * d - l2 * l2, 2.0 * l1 * d, 1.0)
    phi = math.acos(cos_phi)

    beta = math.atan2(float(va[1]), float(va[0]))
    angle1 = beta - phi
    angle2 = angle1 + math.pi - theta2

    return IKSolution(angles=(angle1, angle2), distance=d, reached=reached)


def forward_positions(
    origin: Sequence[float],
    lengths: Sequence[float],
    angles: Sequence[float],
) -> np.ndarray:
    """Joint positions (N+1, 2) for absolute angles, starting at origin."""
    n = len(lengths)
    if len(angles) != n:
        raise ValueError("lengths and angles must have the same length")
    pos = np.zeros((n + 1, 2), dtype=np.float64)
    pos[0] = as_point(origin)
    for i in range(n):
        pos[i + 1] = pos[i] + float(lengths[i]) * np.array(
            [np.cos(angles[i]), np.sin(angles[i])], dtype=np.float64
        )
    return pos
