# -*- coding: utf-8 -*-
"""
render 包：负责所有"如何把骨骼链画出来"的逻辑。

当前提供：
- DrawList / build_draw_list: 与后端无关的绘制列表（线段 + 关节标记）。
- OffscreenRenderer: 使用 moderngl 做离屏渲染，输出 PNG。
- ChainCanvas: 与 PySide6 UI 配合的实时画布（在 onscreen_qt 中）。

上层只需要关心：
- 离屏批量渲染时，用 OffscreenRenderer(render.offscreen_mgl)；
- UI 实时预览时，用 ChainCanvas(render.onscreen_qt)。
"""

from .draw_list import DrawList, DrawStyle, Marker, Segment, build_draw_list  # noqa: F401
from .offscreen_mgl import OffscreenRenderer  # noqa: F401
