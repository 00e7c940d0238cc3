"""Restore 模块

把保存的布局重放到 live 终端：
- ActivationGuard: split 前激活并确认父 pane
- SplitExecutor: 执行单个 split
- TabRestorer / WindowRestorer / WorkspaceRestorer: 逐层编排
"""

from .activation import ActivationGuard, ActivationState, ActivePaneContext
from .executor import SplitExecutor
from .pane import PaneRestorer
from .tab import RestoreReport, SkippedSplit, TabRestorer
from .window import WindowRestorer
from .workspace import WorkspaceRestorer, save_workspace

__all__ = [
    "ActivationGuard",
    "ActivationState",
    "ActivePaneContext",
    "SplitExecutor",
    "PaneRestorer",
    "RestoreReport",
    "SkippedSplit",
    "TabRestorer",
    "WindowRestorer",
    "WorkspaceRestorer",
    "save_workspace",
]
