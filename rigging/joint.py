# -*- coding: utf-8 -*-
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Tuple

import numpy as np

if TYPE_CHECKING:
    from rigging.bone import Bone
    from rigging.chain import Chain


@dataclass(frozen=True)
class Joint:
    """Connection between two consecutive bones of a chain.

    Only indices are stored; the bones stay owned by the chain and are looked
    up on demand.
    """
    parent: int
    child: int

    def resolve(self, chain: "Chain") -> Tuple["Bone", "Bone"]:
        bones = chain.bones
        return bones[self.parent], bones[self.child]

    def position(self, chain: "Chain") -> np.ndarray:
        """World position of the joint (parent bone's end)."""
        parent, _ = self.resolve(chain)
        return parent.end()

    def relative_angle(self, chain: "Chain") -> float:
        """Child angle measured from the parent direction, radians."""
        parent, child = self.resolve(chain)
        return child.angle - parent.angle
