# -*- coding: utf-8 -*-
"""
tools/bake_frames.py

用途：
- 将一个 Scene（骨骼链 + 脚本化目标轨迹）在给定时间段内逐帧求解 IK，
  并离屏渲染为一系列 PNG 帧；
- 依赖 render.offscreen_mgl.OffscreenRenderer 和 scene.choreography.Scene。

典型用法（Python 内部调用）::

    from examples.reach_demo import build_scene
    from tools.bake_frames import bake_scene_frames

    scene, duration = build_scene()
    bake_scene_frames(scene, out_dir="out/frames/reach", duration=duration, fps=30)

命令行用法::

    python -m tools.bake_frames --scene examples.reach_demo:build_scene \\
        --out out/frames/reach --duration 4.0 --fps 30 --save-pose out/reach_pose.npz
"""

from __future__ import annotations

import argparse
import importlib
import math
import os
from typing import Callable, Optional, Tuple

import numpy as np

from render.offscreen_mgl import OffscreenRenderer
from rigging.chain_io import save_chain_npz
from scene.choreography import Scene

DEFAULT_SCENE = "examples.reach_demo:build_scene"


def _ensure_dir(path: str) -> None:
    os.makedirs(path, exist_ok=True)


def bake_scene_frames(
    scene: Scene,
    out_dir: str,
    duration: float,
    fps: int = 30,
    width: int = 800,
    height: int = 600,
    renderer: Optional[OffscreenRenderer] = None,
) -> int:
    """对 Scene 逐帧采样 + 求解 + 离屏渲染, 返回写出的帧数.

    Parameters
    ----------
    scene:
        已构建好的 Scene 对象（包含 ChainAsset + Timeline）。
    out_dir:
        帧输出目录，会自动创建。文件名为 frame_0000.png, frame_0001.png, ...
    duration:
        动画时长（秒）。
    fps:
        采样帧率。
    width, height:
        输出图像的分辨率（像素坐标与场景坐标一致）。
    """
    _ensure_dir(out_dir)

    total_frames = max(1, int(math.ceil(duration * fps)))
    times = np.arange(total_frames, dtype=np.float64) / float(fps)

    # 只释放本函数自己创建的 renderer
    owns_renderer = renderer is None
    if owns_renderer:
        renderer = OffscreenRenderer(width=width, height=height)

    print(f"[INFO] Baking {total_frames} frames, duration {duration:.3f}s, fps={fps}")
    print(f"    out dir: {out_dir}")
    written = 0
    try:
        for idx, t in enumerate(times):
            frames = scene.simulate(float(t))
            if not frames:
                print(f"[WARN] t={t:.3f}: nothing to render, skipped.")
                continue

            draw_list = scene.merged_draw_list(frames)
            out_path = os.path.join(out_dir, f"frame_{idx:04d}.png")
            renderer.render_draw_list(draw_list, out_path)
            written += 1
            if idx % 10 == 0 or idx == total_frames - 1:
                angles = ", ".join(
                    f"{f.asset.name}={[round(a, 3) for a in f.angles]}" for f in frames
                )
                print(f"  [{idx + 1}/{total_frames}] t={t:.3f}s {angles} -> {out_path}")
    finally:
        if owns_renderer:
            renderer.release()

    print("[INFO] Bake done.")
    return written


def _load_scene_from_entrypoint(entry: str) -> Tuple[Scene, float]:
    """从 "module:function" 入口构建 Scene.

    约定：
    - 函数签名为 `def build_scene() -> Scene | (Scene, float)`；
    - 若只返回 Scene，则 duration 由 Scene.duration 推断。
    """
    module_name, _, func_name = entry.partition(":")
    func_name = func_name or "build_scene"
    module = importlib.import_module(module_name)
    func: Callable[..., object] = getattr(module, func_name)

    result = func()
    if isinstance(result, Scene):
        scene = result
        duration = scene.duration or 1.0
    else:
        scene, duration = result  # type: ignore[misc]

    if not isinstance(scene, Scene):
        raise TypeError(
            f"入口函数 {module_name}.{func_name} 返回值类型错误: {type(scene)!r}"
        )

    return scene, float(duration)


def main(argv: Optional[list[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="逐帧求解 IK 并离屏渲染, 输出 PNG 帧序列")
    parser.add_argument(
        "--scene",
        type=str,
        default=DEFAULT_SCENE,
        help=f"构建 Scene 的入口 module:function，默认 {DEFAULT_SCENE}",
    )
    parser.add_argument(
        "--out",
        type=str,
        required=True,
        help="帧输出目录，例如 out/frames/reach",
    )
    parser.add_argument(
        "--duration",
        type=float,
        default=None,
        help="动画时长（秒）。若不指定则从 Scene 的 timelines 推断。",
    )
    parser.add_argument("--fps", type=int, default=30, help="采样帧率，默认 30 FPS")
    parser.add_argument("--width", type=int, default=800, help="输出图像宽度，默认 800")
    parser.add_argument("--height", type=int, default=600, help="输出图像高度，默认 600")
    parser.add_argument(
        "--save-pose",
        type=str,
        default=None,
        help="可选：把第一条骨骼链的最终姿态保存为 .npz",
    )

    args = parser.parse_args(argv)

    scene, inferred_duration = _load_scene_from_entrypoint(args.scene)
    duration = float(args.duration) if args.duration is not None else inferred_duration

    bake_scene_frames(
        scene=scene,
        out_dir=args.out,
        duration=duration,
        fps=int(args.fps),
        width=int(args.width),
        height=int(args.height),
    )

    if args.save_pose:
        if not scene.assets:
            print("[WARN] --save-pose: scene has no assets, nothing saved.")
        else:
            save_chain_npz(args.save_pose, scene.assets[0].chain)
            print(f"[INFO] Final pose of '{scene.assets[0].name}' saved to {args.save_pose}")


if __name__ == "__main__":
    main()
