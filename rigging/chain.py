# -*- coding: utf-8 -*-
# 以原点为锚点的平面骨骼链(最多两根骨骼)
from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

import numpy as np

from rigging.bone import Bone, as_point
from rigging.joint import Joint
from rigging.solver import IKSolution, solve_one_bone, solve_two_bone

MAX_BONES = 2


class Chain:
    """
    Origin-anchored chain of 0, 1 or 2 bones with a closed-form IK update.

    Invariant (re-established after every angle or origin change):
      bones[0].start == origin
      bones[i].start == bones[i-1].end()   for i > 0

    Misuse is soft: a rejected `add_bone` or an `update` on an empty chain
    changes nothing and raises nothing.
    """

    def __init__(self, origin: Optional[Sequence[float]] = None):
        self._origin: np.ndarray = as_point(origin) if origin is not None else np.zeros(2)
        self._bones: List[Bone] = []

    # -------- read accessors --------
    @property
    def origin(self) -> np.ndarray:
        return self._origin.copy()

    @property
    def bone_count(self) -> int:
        return len(self._bones)

    @property
    def bones(self) -> Tuple[Bone, ...]:
        return tuple(self._bones)

    def lengths(self) -> List[float]:
        return [b.length for b in self._bones]

    def angles(self) -> List[float]:
        return [b.angle for b in self._bones]

    def end_effector(self) -> np.ndarray:
        if not self._bones:
            return self._origin.copy()
        return self._bones[-1].end()

    def max_reach(self) -> float:
        return float(sum(b.length for b in self._bones))

    def min_reach(self) -> float:
        """Inner radius of the reachable annulus."""
        n = len(self._bones)
        if n == 0:
            return 0.0
        if n == 1:
            return self._bones[0].length
        return abs(self._bones[0].length - self._bones[1].length)

    def can_reach(self, point: Sequence[float], tol: float = 1e-3) -> bool:
        if not self._bones:
            return False
        d = float(np.linalg.norm(as_point(point) - self._origin))
        return self.min_reach() - tol <= d <= self.max_reach() + tol

    def joints(self) -> List[Joint]:
        return [Joint(parent=i - 1, child=i) for i in range(1, len(self._bones))]

    # -------- building / editing --------
    def add_bone(self, length: float, angle: float = 0.0) -> bool:
        """Append a bone at the current end effector.

        Returns False (and leaves the chain untouched) when the chain is full
        or `length <= 0`.
        """
        if len(self._bones) >= MAX_BONES or not length > 0:
            return False
        self._bones.append(Bone(self.end_effector(), length, angle))
        return True

    def set_origin(self, point: Sequence[float]) -> None:
        """Move the anchor; angles and lengths are kept."""
        self._origin = as_point(point)
        self._propagate()

    def set_angles(self, angles: Sequence[float]) -> None:
        if len(angles) != len(self._bones):
            raise ValueError(
                f"expected {len(self._bones)} angles, got {len(angles)}"
            )
        for bone, a in zip(self._bones, angles):
            bone.set_angle(a)
        self._propagate()

    # -------- IK --------
    def update(self, target: Sequence[float]) -> Optional[IKSolution]:
        """Solve toward `target` and re-propagate bone starts.

        Returns the solver report, or None for an empty chain.
        """
        n = len(self._bones)
        if n == 0:
            return None

        if n == 1:
            bone = self._bones[0]
            sol = solve_one_bone(self._origin, target, bone.length, bone.angle)
        else:
            l1 = self._bones[0].length
            l2 = self._bones[1].length
            sol = solve_two_bone(self._origin, target, l1, l2)

        for bone, a in zip(self._bones, sol.angles):
            bone.set_angle(a)
        self._propagate()
        return sol

    def _propagate(self) -> None:
        start = self._origin
        for bone in self._bones:
            bone.set_start(start)
            start = bone.end()

    def __repr__(self) -> str:
        parts = ", ".join(f"(len={b.length:g}, angle={b.angle:.4f})" for b in self._bones)
        return f"Chain(origin={self._origin.tolist()}, bones=[{parts}])"
