"""保存布局的字符预览

把 tab 的 pane 矩形画到字符网格上：每个 pane 用自己的序号字符和背景色填充，
分隔线留空。可直接打印到终端，也可导出 SVG。
"""

import io
import string

from rich.console import Console
from rich.style import Style
from rich.text import Text

from .layout.models import TabRecord

_LABELS = string.digits + string.ascii_letters
_PALETTE = ["#3b4252", "#434c5e", "#4c566a", "#5e81ac", "#81a1c1", "#88c0d0", "#8fbcbb", "#a3be8c"]


def render_tab(tab: TabRecord) -> Text:
    """按保存的几何画出 tab

    重叠区域由后出现的 pane 覆盖，未覆盖的格子显示为 ``·``。
    """
    if not tab.panes:
        return Text()

    width = max(pane.rectangle.right for pane in tab.panes)
    height = max(pane.rectangle.bottom for pane in tab.panes)
    grid: list[list[int | None]] = [[None] * width for _ in range(height)]

    for idx, pane in enumerate(tab.panes):
        for row in range(pane.top, pane.rectangle.bottom):
            for col in range(pane.left, pane.rectangle.right):
                grid[row][col] = idx

    text = Text()
    for row in grid:
        for idx in row:
            if idx is None:
                text.append("·", style=Style(color="grey50"))
            else:
                label = _LABELS[idx % len(_LABELS)]
                text.append(label, style=Style(color="white", bgcolor=_PALETTE[idx % len(_PALETTE)]))
        text.append("\n")
    return text


def render_svg(tab: TabRecord, title: str = "") -> str:
    """将 tab 预览渲染为 SVG"""
    preview = render_tab(tab)
    width = max((pane.rectangle.right for pane in tab.panes), default=1)
    console = Console(
        record=True,
        width=width,
        file=io.StringIO(),
        force_terminal=True,
        color_system="truecolor",
    )
    console.print(preview, end="")
    return console.export_svg(title=title)
