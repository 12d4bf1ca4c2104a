# -*- coding: utf-8 -*-
"""
render/offscreen_mgl.py

用途：
- 使用 moderngl 进行离屏渲染，将 DrawList（骨骼线段 + 关节标记）保存为 PNG。
- 对外只暴露 `OffscreenRenderer.render_draw_list(...)`。

坐标约定：
- 屏幕像素坐标，原点在左上角，y 轴向下（与 Qt 视口一致）。
- 线段在 CPU 上展开为带宽度的四边形，标记展开为圆形三角扇，
  全部以三角形提交，避免依赖 core profile 下不可用的宽线。
"""

from __future__ import annotations

import os
from typing import Optional

import numpy as np

try:
    import moderngl  # type: ignore
except Exception:  # noqa: BLE001
    moderngl = None

from PIL import Image

from render.draw_list import DrawList, DrawStyle

CIRCLE_SEGMENTS = 16


class OffscreenRenderer:
    """使用 moderngl 进行 2D 离屏渲染的简单封装."""

    def __init__(
        self,
        width: int = 800,
        height: int = 600,
        style: Optional[DrawStyle] = None,
    ) -> None:
        if moderngl is None:
            raise ImportError(
                "OffscreenRenderer 需要 moderngl，请先安装：`pip install moderngl`"
            )

        self.width = int(width)
        self.height = int(height)
        self.style = style or DrawStyle()

        # 创建离屏上下文 + FBO
        self.ctx = moderngl.create_standalone_context()
        self.fbo = self.ctx.simple_framebuffer((self.width, self.height))
        self.fbo.use()
        self.fbo.clear(*self.style.background)

        self._prog = self._create_flat_program()

    # ------------------------------------------------------------------
    # 初始化/辅助
    # ------------------------------------------------------------------
    def _create_flat_program(self):
        """逐顶点颜色的平面着色 shader."""
        vertex_shader = """
        #version 330

        uniform mat4 u_proj;

        in vec2 in_position;
        in vec4 in_color;

        out vec4 v_color;

        void main() {
            gl_Position = u_proj * vec4(in_position, 0.0, 1.0);
            v_color = in_color;
        }
        """

        fragment_shader = """
        #version 330

        in vec4 v_color;
        out vec4 f_color;

        void main() {
            f_color = v_color;
        }
        """

        return self.ctx.program(
            vertex_shader=vertex_shader,
            fragment_shader=fragment_shader,
        )

    # ------------------------------------------------------------------
    # 数学相关
    # ------------------------------------------------------------------
    @staticmethod
    def _ortho(width: float, height: float) -> np.ndarray:
        """像素坐标 (左上原点, y 向下) -> NDC 的正交投影 (4x4)."""
        proj = np.eye(4, dtype=np.float32)
        proj[0, 0] = 2.0 / width
        proj[1, 1] = -2.0 / height
        proj[0, 3] = -1.0
        proj[1, 3] = 1.0
        return proj

    @staticmethod
    def _segment_quad(p0: np.ndarray, p1: np.ndarray, width: float) -> np.ndarray:
        """线段 -> 两个三角形 (6, 2)."""
        d = np.asarray(p1, dtype=np.float32) - np.asarray(p0, dtype=np.float32)
        n = float(np.linalg.norm(d))
        if n < 1e-8:
            return np.zeros((0, 2), dtype=np.float32)
        normal = np.array([-d[1], d[0]], dtype=np.float32) / n * (0.5 * width)
        a = p0 + normal
        b = p0 - normal
        c = p1 - normal
        e = p1 + normal
        return np.array([a, b, c, a, c, e], dtype=np.float32)

    @staticmethod
    def _disc(center: np.ndarray, radius: float, segments: int = CIRCLE_SEGMENTS) -> np.ndarray:
        """圆形标记 -> 三角扇展开的三角形列表 (3*segments, 2)."""
        t = np.linspace(0.0, 2.0 * np.pi, segments + 1, dtype=np.float32)
        ring = np.stack([np.cos(t), np.sin(t)], axis=1) * radius + np.asarray(center, dtype=np.float32)
        c = np.repeat(np.asarray(center, dtype=np.float32)[None, :], segments, axis=0)
        tris = np.stack([c, ring[:-1], ring[1:]], axis=1)  # (S,3,2)
        return tris.reshape(-1, 2)

    def _triangles(self, draw_list: DrawList) -> np.ndarray:
        """组装 (V, 6) 顶点数组: xy + rgba."""
        chunks = []
        style = self.style
        for seg in draw_list.segments:
            xy = self._segment_quad(seg.start, seg.end, style.bone_width)
            if len(xy):
                rgba = np.tile(np.asarray(style.bone_color, dtype=np.float32), (len(xy), 1))
                chunks.append(np.hstack([xy, rgba]))

        # 标记画在骨骼上层
        for m in draw_list.markers:
            xy = self._disc(m.position, style.marker_radii[m.kind])
            rgba = np.tile(np.asarray(style.marker_colors[m.kind], dtype=np.float32), (len(xy), 1))
            chunks.append(np.hstack([xy, rgba]))

        if not chunks:
            return np.zeros((0, 6), dtype=np.float32)
        return np.vstack(chunks).astype(np.float32)

    # ------------------------------------------------------------------
    # 对外 API
    # ------------------------------------------------------------------
    def render_draw_list(self, draw_list: DrawList, out_path: str) -> None:
        """渲染一帧 DrawList 并保存为 PNG."""
        self.fbo.use()
        self.fbo.clear(*self.style.background)

        verts = self._triangles(draw_list)
        if len(verts):
            vbo = self.ctx.buffer(verts.tobytes())
            vao = self.ctx.vertex_array(
                self._prog, [(vbo, "2f 4f", "in_position", "in_color")]
            )
            self._prog["u_proj"].write(
                self._ortho(self.width, self.height).T.copy().tobytes()
            )
            vao.render(moderngl.TRIANGLES)
            vao.release()
            vbo.release()

        data = self.fbo.read(components=4, dtype="f1")
        img = Image.frombytes("RGBA", (self.width, self.height), data)
        # moderngl 的原点在左下，需要翻转
        img = img.transpose(Image.Transpose.FLIP_TOP_BOTTOM)

        out_dir = os.path.dirname(out_path)
        if out_dir:
            os.makedirs(out_dir, exist_ok=True)
        img.save(out_path)

    def release(self) -> None:
        self.fbo.release()
        self.ctx.release()
