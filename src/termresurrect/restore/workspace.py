"""Workspace 保存与恢复

- save_workspace: capture 当前布局并写入状态文件
- WorkspaceRestorer.restore_workspace: 读取状态文件，为每个保存的窗口新建窗口并恢复

恢复只在最外层通知用户一次（成功 / 失败），单个 split 的跳过只写日志。
"""

from pathlib import Path

from .. import persistence
from ..adapters.base import PaneHost
from ..capture import capture_workspace
from ..core.paths import extract_path_from_uri
from ..core.result import Error, ErrorKind, Result
from ..layout.models import WorkspaceRecord
from ..telemetry import get_logger, metrics
from .tab import TabRestorer
from .window import WindowRestorer

logger = get_logger(__name__)


async def save_workspace(
    host: PaneHost, name: str, state_dir: Path | None = None
) -> Result[WorkspaceRecord]:
    """capture 并保存 workspace"""
    layout = await host.get_layout()
    if layout is None:
        await host.notify(f"Could not read layout for workspace: {name}")
        return Result.err(ErrorKind.MISSING_DEPENDENCY, f"{host.name} returned no layout")

    record = capture_workspace(layout, name)
    if not record.windows:
        await host.notify(f"Nothing to save for workspace: {name}")
        return Result.err(ErrorKind.MISSING_DEPENDENCY, f"workspace {name} has no panes")

    if not persistence.save(record, persistence.state_file_path(name, state_dir)):
        await host.notify(f"Workspace state saving failed for workspace: {name}")
        return Result.err(ErrorKind.MISSING_DEPENDENCY, f"could not write state for {name}")

    await host.notify(f"Workspace state saved for workspace: {name}")
    return Result.ok(record)


class WorkspaceRestorer:
    """按保存数据重建 workspace"""

    def __init__(
        self,
        host: PaneHost,
        state_dir: Path | None = None,
        tab_restorer: TabRestorer | None = None,
    ):
        self.host = host
        self.state_dir = state_dir
        self.tab_restorer = tab_restorer or TabRestorer(host)
        self.window_restorer = WindowRestorer(self.tab_restorer)

    async def recreate_workspace(
        self, record: WorkspaceRecord, name: str | None = None
    ) -> list[Error]:
        """为每个保存的窗口新建窗口并恢复

        Returns:
            失败列表，空列表表示全部 tab 已恢复
        """
        name = name or record.name
        if not record.windows:
            logger.info("[WorkspaceRestore] Invalid or empty workspace data provided")
            return [Error(ErrorKind.MISSING_DEPENDENCY, f"workspace {name} has no windows")]

        errors: list[Error] = []
        for window in record.windows:
            if not window.tabs or not window.tabs[0].panes:
                errors.append(Error(ErrorKind.MISSING_DEPENDENCY, "window without pane data"))
                continue

            cwd = extract_path_from_uri(window.tabs[0].panes[0].working_directory)
            try:
                spawned = await self.host.spawn_window(name, cwd)
            except Exception as e:
                logger.error(f"[WorkspaceRestore] Failed to create window: {e}")
                spawned = None

            if spawned is None:
                errors.append(Error(ErrorKind.TAB_CREATION_FAILURE, "could not create window"))
                continue

            results = await self.window_restorer.restore_window(spawned, window)
            errors.extend(result.error for result in results if result.is_err())

        logger.info(
            f"[WorkspaceRestore] Workspace {name!r} recreated with {len(errors)} error(s)"
        )
        return errors

    async def restore_workspace(self, name: str) -> Result[WorkspaceRecord]:
        """加载并恢复 workspace，不抛异常"""
        logger.info(f"[WorkspaceRestore] Restoring state for workspace: {name}")
        path = persistence.state_file_path(name, self.state_dir)

        record = persistence.load(path)
        if record is None:
            await self.host.notify(f"Workspace state file not found for workspace: {name}")
            return Result.err(ErrorKind.MISSING_DEPENDENCY, f"no state file at {path}")

        try:
            with metrics.timed("workspace.restore"):
                errors = await self.recreate_workspace(record, name)
        except Exception as e:
            logger.error(f"[WorkspaceRestore] Restore of {name} failed: {e}")
            errors = [Error(ErrorKind.TAB_CREATION_FAILURE, str(e), original_exception=e)]

        if errors:
            await self.host.notify(f"Workspace state loading failed for workspace: {name}")
            first = errors[0]
            return Result.err(first.kind, first.message, exc=first.original_exception)

        await self.host.notify(f"Workspace state loaded for workspace: {name}")
        return Result.ok(record)
