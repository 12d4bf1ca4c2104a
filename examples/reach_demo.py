# -*- coding: utf-8 -*-
"""Two arms chasing a circling target, for bake_frames."""

from __future__ import annotations

from rigging.chain import Chain
from scene.asset import ArmConfig, ChainAsset
from scene.choreography import Scene
from scene.timeline import Timeline, circle_track

WIDTH, HEIGHT = 800, 600


def build_scene() -> tuple[Scene, float]:
    center = (WIDTH / 2.0, HEIGHT / 2.0)

    # 两根骨骼: 目标圆半径超出 l1 + l2, 一部分时间不可达(会被 clamp)
    arm_cfg = ArmConfig(lengths=(100.0, 80.0), angles=(0.5, 1.0), origin=center)
    arm = ChainAsset(name="arm", chain=arm_cfg.build_chain())
    arm_tl = Timeline(track=circle_track((center[0] + 60.0, center[1]), 150.0, period=4.0))
    arm_tl.add_reanchor(2.0, (center[0] - 40.0, center[1] + 20.0))

    # 单根骨骼: 始终指向目标
    pointer_chain = Chain((120.0, 120.0))
    pointer_chain.add_bone(60.0, 0.0)
    pointer = ChainAsset(name="pointer", chain=pointer_chain, show_joints=False)
    pointer_tl = Timeline(track=circle_track((120.0, 120.0), 90.0, period=4.0))

    scene = Scene(fps=30)
    scene.add_asset(arm, arm_tl)
    scene.add_asset(pointer, pointer_tl)
    return scene, scene.duration


if __name__ == "__main__":
    scene, duration = build_scene()
    print(f"Scene ready. Duration={duration:.2f}s, assets={len(scene.assets)}")
    for frame in scene.simulate(0.5):
        print(f"  {frame.asset.name}: angles={[round(a, 4) for a in frame.angles]}")
