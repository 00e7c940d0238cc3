"""Pane 几何索引

在一组保存的 pane 中查找某个矩形的右侧 / 下方相邻 pane。
相邻 pane 之间有 1 格分隔线，所以右邻居的 left 是 ``left + width + 1``。

tab 内 pane 数量很小（几十个），线性扫描即可，不建索引。
"""

from collections.abc import Sequence
from typing import Protocol

from .models import PaneRecord, TabRecord


class HasRect(Protocol):
    top: int
    left: int
    width: int
    height: int


def find_right_neighbor(
    rect: HasRect, panes: Sequence[PaneRecord]
) -> tuple[PaneRecord | None, int | None]:
    """查找右侧相邻 pane

    多个匹配时取迭代顺序中最后一个。

    Returns:
        (pane, index)，没有匹配时 (None, None)
    """
    found: PaneRecord | None = None
    found_idx: int | None = None
    for idx, pane in enumerate(panes):
        if pane.top == rect.top and pane.left == rect.left + rect.width + 1:
            found, found_idx = pane, idx
    return found, found_idx


def find_bottom_neighbor(
    rect: HasRect, panes: Sequence[PaneRecord]
) -> tuple[PaneRecord | None, int | None]:
    """查找下方相邻 pane

    多个匹配时取迭代顺序中最后一个。

    Returns:
        (pane, index)，没有匹配时 (None, None)
    """
    found: PaneRecord | None = None
    found_idx: int | None = None
    for idx, pane in enumerate(panes):
        if pane.left == rect.left and pane.top == rect.top + rect.height + 1:
            found, found_idx = pane, idx
    return found, found_idx


def tab_extent(tab: TabRecord) -> tuple[int, int]:
    """tab 尺寸（单位：格，不含分隔线）

    宽度为 top == 0 的 pane 宽度之和，高度为 left == 0 的 pane 高度之和。
    """
    width = sum(pane.width for pane in tab.panes if pane.top == 0)
    height = sum(pane.height for pane in tab.panes if pane.left == 0)
    return width, height


def check_tiling(panes: Sequence[PaneRecord]) -> list[str]:
    """检查 pane 是否恰好铺满外接矩形

    每个 pane 连同其右侧 / 下方的分隔线（未贴边时）一起计算面积，
    这些扩展矩形必须两两不重叠且面积之和等于外接矩形面积。

    Returns:
        发现的问题列表，空列表表示铺满
    """
    if not panes:
        return ["no panes"]

    total_width = max(pane.left + pane.width for pane in panes)
    total_height = max(pane.top + pane.height for pane in panes)

    cells = []
    for pane in panes:
        right = pane.left + pane.width
        bottom = pane.top + pane.height
        if right < total_width:
            right += 1
        if bottom < total_height:
            bottom += 1
        cells.append((pane, pane.left, pane.top, right, bottom))

    problems = []
    for i, (a, ax0, ay0, ax1, ay1) in enumerate(cells):
        for b, bx0, by0, bx1, by1 in cells[i + 1 :]:
            if ax0 < bx1 and bx0 < ax1 and ay0 < by1 and by0 < ay1:
                problems.append(f"pane {a.id} overlaps pane {b.id}")

    area = sum((x1 - x0) * (y1 - y0) for _, x0, y0, x1, y1 in cells)
    if not problems and area != total_width * total_height:
        problems.append(
            f"covered area {area} != bounding area {total_width * total_height}"
        )
    return problems
