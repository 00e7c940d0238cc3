"""iTerm2 布局遍历

把 iTerm2 的 splitter 树展开为扁平的 pane 列表，坐标换算为字符格，
相邻 pane 之间按 1 格分隔线计算，与 tmux 的坐标体系一致。
"""

import iterm2

from termresurrect.adapters.base import JobMetadata, LayoutData, PaneInfo, TabInfo, WindowInfo
from termresurrect.adapters.iterm2.naming import get_name


async def _get_job(session: iterm2.Session) -> tuple[str, JobMetadata]:
    """读取 session 的工作目录和前台进程"""
    try:
        path = await session.async_get_variable("path") or ""
        job_name = await session.async_get_variable("jobName") or ""
        job_pid = await session.async_get_variable("jobPid")
        command_line = await session.async_get_variable("commandLine") or ""
    except Exception:
        return "", JobMetadata()

    pid: int | None = None
    if isinstance(job_pid, (int, float)) or isinstance(job_pid, str) and job_pid.isdigit():
        pid = int(job_pid)
    return path, JobMetadata(job_name=job_name, job_pid=pid, command_line=command_line, path=path)


async def _session_pane(session: iterm2.Session, top: int, left: int) -> PaneInfo:
    cwd, job = await _get_job(session)
    return PaneInfo(
        pane_id=session.session_id,
        name=await get_name(session),
        index=0,
        top=top,
        left=left,
        width=session.grid_size.width,
        height=session.grid_size.height,
        cwd=cwd,
        job=job,
    )


async def traverse_node(
    node: iterm2.Session | iterm2.Splitter, top: int, left: int
) -> tuple[list[PaneInfo], int, int]:
    """展开 splitter 子树

    Returns:
        (panes, 子树宽度, 子树高度)
    """
    if isinstance(node, iterm2.Session):
        size = node.grid_size
        return [await _session_pane(node, top, left)], size.width, size.height

    if not isinstance(node, iterm2.Splitter):
        return [], 0, 0

    # vertical splitter 的子节点左右排列，子节点之间隔 1 格分隔线
    panes: list[PaneInfo] = []
    extents: list[tuple[int, int]] = []
    offset = 0
    for child in node.children:
        if node.vertical:
            child_panes, w, h = await traverse_node(child, top, left + offset)
            offset += w + 1
        else:
            child_panes, w, h = await traverse_node(child, top + offset, left)
            offset += h + 1
        panes.extend(child_panes)
        extents.append((w, h))

    if not extents:
        return panes, 0, 0
    widths = [w for w, _ in extents]
    heights = [h for _, h in extents]
    if node.vertical:
        return panes, sum(widths) + len(widths) - 1, max(heights)
    return panes, max(widths), sum(heights) + len(heights) - 1


async def _tab_info(tab: iterm2.Tab) -> TabInfo:
    tab_info = TabInfo(tab_id=tab.tab_id, name=await get_name(tab))
    if not tab.root:
        return tab_info

    active_id = tab.current_session.session_id if tab.current_session else None
    panes, _, _ = await traverse_node(tab.root, 0, 0)
    for index, pane in enumerate(panes):
        pane.index = index
        pane.active = pane.pane_id == active_id
    tab_info.panes = panes
    return tab_info


async def get_layout(app: iterm2.App) -> LayoutData:
    """获取 iTerm2 当前全部窗口的布局，pane index 在 tab 内从 0 编号"""
    layout = LayoutData()

    focused = app.current_terminal_window
    if focused and focused.current_tab and focused.current_tab.current_session:
        layout.active_pane_id = focused.current_tab.current_session.session_id

    for window in app.windows:
        window_info = WindowInfo(window_id=window.window_id, name=await get_name(window))
        window_info.tabs = [await _tab_info(tab) for tab in window.tabs]
        layout.windows.append(window_info)
    return layout
