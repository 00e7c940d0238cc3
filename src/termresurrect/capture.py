"""布局 capture

把后端返回的 live LayoutData 转换为保存用的 Workspace/Window/Tab/Pane 记录。
每个 tab 中位于 (0, 0) 的 pane 放在第一位，作为恢复起点；其余保持后端顺序。
"""

import shlex

from .adapters.base import JobMetadata, LayoutData, PaneInfo, TabInfo, WindowInfo
from .core.paths import path_to_uri
from .layout.models import (
    PaneRecord,
    ProcessInfo,
    Rectangle,
    TabRecord,
    WindowRecord,
    WorkspaceRecord,
)
from .telemetry import get_logger

logger = get_logger(__name__)

DEFAULT_WORKSPACE = "default"


def _capture_process(job: JobMetadata | None) -> ProcessInfo | None:
    if job is None or not job.job_name:
        return None
    try:
        argv = tuple(shlex.split(job.command_line))
    except ValueError:
        argv = (job.command_line,) if job.command_line else ()
    return ProcessInfo(
        name=job.job_name,
        executable=argv[0] if argv else job.job_name,
        argv=argv,
        cwd=job.path,
        pid=job.job_pid,
    )


def capture_pane(info: PaneInfo) -> PaneRecord:
    """Raises ValueError for panes with empty geometry."""
    return PaneRecord(
        id=info.pane_id,
        rectangle=Rectangle(top=info.top, left=info.left, width=info.width, height=info.height),
        working_directory=path_to_uri(info.cwd),
        title=info.name or None,
        process=_capture_process(info.job),
    )


def capture_tab(info: TabInfo) -> TabRecord:
    panes = []
    for pane in info.panes:
        try:
            panes.append(capture_pane(pane))
        except ValueError as e:
            logger.warning(f"[Capture] Skip pane {pane.pane_id} in tab {info.tab_id}: {e}")

    # 左上角 pane 作为恢复起点
    anchor = next((i for i, p in enumerate(panes) if p.top == 0 and p.left == 0), None)
    if anchor:
        panes.insert(0, panes.pop(anchor))

    return TabRecord(id=info.tab_id, title=info.name or None, panes=tuple(panes))


def capture_window(info: WindowInfo, workspace: str) -> WindowRecord:
    tabs = tuple(capture_tab(tab) for tab in info.tabs)
    return WindowRecord(
        workspace=workspace,
        title=info.name or None,
        tabs=tuple(tab for tab in tabs if tab.panes),
    )


def default_workspace_name(layout: LayoutData) -> str:
    """活动 pane 所在的 workspace，没有时返回 "default" """
    for window in layout.windows:
        for tab in window.tabs:
            if any(pane.pane_id == layout.active_pane_id for pane in tab.panes):
                return window.workspace or DEFAULT_WORKSPACE
    return DEFAULT_WORKSPACE


def capture_workspace(layout: LayoutData, name: str) -> WorkspaceRecord:
    """capture 属于 workspace 的所有窗口

    后端没有 workspace 概念时（workspace 为空）所有窗口都属于该 workspace。
    """
    windows = [
        capture_window(window, name)
        for window in layout.windows
        if not window.workspace or window.workspace == name
    ]
    record = WorkspaceRecord(name=name, windows=tuple(w for w in windows if w.tabs))
    logger.info(
        f"[Capture] Workspace {name!r}: {len(record.windows)} windows, {record.pane_count()} panes"
    )
    return record
