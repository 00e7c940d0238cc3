"""Split 规划

从 tab 的扁平 pane 列表推导出重建布局所需的 split 序列。

算法：
1. 只有 panes[0] 一开始存在，放入 worklist
2. 依次处理 worklist 中的每个条目，查找其右侧 / 下方相邻 pane
3. 两者都存在时，保存顺序（saved index）较小的先 split
4. split 产生的新 pane 追加到 worklist 末尾，之后同样处理

worklist 同时记录 "已认领的保存矩形" 和 "对应的 live pane"，两者按下标一一对应。
"""

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Generic, TypeVar

from ..telemetry import get_logger
from .geometry import find_bottom_neighbor, find_right_neighbor, tab_extent
from .models import PaneRecord, TabRecord

logger = get_logger(__name__)

P = TypeVar("P")


class SplitDirection(Enum):
    """split 方向（新 pane 所在的一侧）"""

    RIGHT = "right"
    BOTTOM = "bottom"


@dataclass(frozen=True)
class SplitInstruction:
    """一次 split 操作

    Attributes:
        direction: 新 pane 在父 pane 的哪一侧
        parent_index: 父 pane 在 worklist 中的下标
        target_index: 目标矩形在 tab.panes 中的下标
        target: 要创建的 pane 的保存数据
        size_ratio: 新 pane 占剩余空间的比例
    """

    direction: SplitDirection
    parent_index: int
    target_index: int
    target: PaneRecord
    size_ratio: float


def compute_size_ratio(
    direction: SplitDirection,
    parent: PaneRecord,
    target: PaneRecord,
    tab_width: int,
    tab_height: int,
) -> float:
    """计算新 pane 的尺寸比例

    以父 pane 起点到 tab 边缘的剩余空间为基准，新 pane 占 1 - offset / available。

    Raises:
        ValueError: 剩余空间不为正，或比例不在 (0, 1] 内（数据损坏）
    """
    if direction is SplitDirection.RIGHT:
        available = tab_width - parent.left
        offset = target.left - parent.left
    else:
        available = tab_height - parent.top
        offset = target.top - parent.top

    if available <= 0:
        raise ValueError(
            f"no space left for {direction.value} split of pane {parent.id} (available={available})"
        )
    ratio = 1 - (offset / available)
    if not 0 < ratio <= 1:
        raise ValueError(
            f"{direction.value} split of pane {parent.id} to pane {target.id} "
            f"gives ratio {ratio:.3f} outside (0, 1]"
        )
    return ratio


def next_splits(
    claimed: PaneRecord,
    parent_index: int,
    tab: TabRecord,
    extent: tuple[int, int],
    taken: set[int],
) -> list[SplitInstruction]:
    """计算以某个已存在 pane 为父的 split（0~2 个，按执行顺序）

    Args:
        claimed: 父 pane 的保存数据
        parent_index: 父 pane 在 worklist 中的下标
        tab: 完整的 tab 数据
        extent: (tab_width, tab_height)
        taken: 已被认领的 saved index，这些矩形不会再次作为目标
    """
    tab_width, tab_height = extent

    hpane, hj = find_right_neighbor(claimed, tab.panes)
    vpane, vj = find_bottom_neighbor(claimed, tab.panes)
    if hj in taken:
        hpane, hj = None, None
    if vj in taken:
        vpane, vj = None, None

    candidates: list[tuple[int, SplitDirection, PaneRecord]] = []
    if hpane is not None:
        candidates.append((hj, SplitDirection.RIGHT, hpane))
    if vpane is not None:
        candidates.append((vj, SplitDirection.BOTTOM, vpane))
    # 保存顺序靠前的 split 先执行
    candidates.sort(key=lambda c: c[0])

    splits = []
    for target_index, direction, target in candidates:
        try:
            ratio = compute_size_ratio(direction, claimed, target, tab_width, tab_height)
        except ValueError as e:
            logger.warning(f"[Planner] Skip {direction.value} split: {e}")
            continue
        splits.append(
            SplitInstruction(
                direction=direction,
                parent_index=parent_index,
                target_index=target_index,
                target=target,
                size_ratio=ratio,
            )
        )
    return splits


@dataclass
class Worklist(Generic[P]):
    """按下标处理、尾部追加的 worklist

    records[i] 描述 panes[i]；taken 为已认领矩形的 saved index。
    """

    records: list[PaneRecord] = field(default_factory=list)
    panes: list[P | None] = field(default_factory=list)
    taken: set[int] = field(default_factory=set)

    @classmethod
    def start(cls, first: PaneRecord, pane: P | None = None) -> "Worklist[P]":
        worklist: Worklist[P] = cls()
        worklist.push(first, 0, pane)
        return worklist

    def push(self, record: PaneRecord, saved_index: int, pane: P | None = None) -> int:
        """追加条目，返回新下标"""
        self.records.append(record)
        self.panes.append(pane)
        self.taken.add(saved_index)
        return len(self.records) - 1

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[tuple[int, PaneRecord, P | None]]:
        idx = 0
        # 处理过程中会追加新条目
        while idx < len(self.records):
            yield idx, self.records[idx], self.panes[idx]
            idx += 1


def plan_splits(tab: TabRecord) -> list[SplitInstruction]:
    """生成完整的 split 序列（假设每次 split 都成功）

    Returns:
        按执行顺序排列的 split 指令；单 pane 的 tab 返回空列表
    """
    if not tab.panes:
        return []

    extent = tab_extent(tab)
    worklist: Worklist[None] = Worklist.start(tab.panes[0])
    plan: list[SplitInstruction] = []

    for idx, claimed, _ in worklist:
        for instruction in next_splits(claimed, idx, tab, extent, worklist.taken):
            worklist.push(instruction.target, instruction.target_index)
            plan.append(instruction)

    return plan
