"""Layout 模块

保存的布局数据模型、几何索引和 split 规划。
"""

from .geometry import check_tiling, find_bottom_neighbor, find_right_neighbor, tab_extent
from .models import (
    PaneRecord,
    ProcessInfo,
    Rectangle,
    TabRecord,
    WindowRecord,
    WorkspaceRecord,
)
from .planner import (
    SplitDirection,
    SplitInstruction,
    Worklist,
    compute_size_ratio,
    next_splits,
    plan_splits,
)

__all__ = [
    # Models
    "Rectangle",
    "ProcessInfo",
    "PaneRecord",
    "TabRecord",
    "WindowRecord",
    "WorkspaceRecord",
    # Geometry
    "find_right_neighbor",
    "find_bottom_neighbor",
    "tab_extent",
    "check_tiling",
    # Planner
    "SplitDirection",
    "SplitInstruction",
    "Worklist",
    "compute_size_ratio",
    "next_splits",
    "plan_splits",
]
