"""Terminal host 模块

提供终端后端接口和数据结构：
- PaneHost: 后端接口
- create_host: 后端工厂函数
- LayoutData, WindowInfo, TabInfo, PaneInfo: live 布局数据结构
"""

from .base import (
    JobMetadata,
    LayoutData,
    PaneHost,
    PaneInfo,
    SpawnResult,
    TabInfo,
    WindowInfo,
)
from .factory import create_host, detect_terminal_type

__all__ = [
    # Interface
    "PaneHost",
    "SpawnResult",
    "JobMetadata",
    # Factory
    "create_host",
    "detect_terminal_type",
    # Layout models
    "LayoutData",
    "WindowInfo",
    "TabInfo",
    "PaneInfo",
]
