"""ITerm2Host - iTerm2 终端后端

实现 PaneHost 接口，封装 iTerm2 Python API 调用。

iTerm2 没有 workspace 概念，整个 App 视为一个 workspace。
"""

import logging

import iterm2

from termresurrect.adapters.base import LayoutData, PaneHost, SpawnResult
from termresurrect.adapters.iterm2.layout import get_layout as iterm_get_layout
from termresurrect.adapters.iterm2.naming import set_session_name, set_tab_name
from termresurrect.layout.planner import SplitDirection

logger = logging.getLogger(__name__)


def _directory_profile(cwd: str | None) -> "iterm2.LocalWriteOnlyProfile | None":
    """构造指定初始目录的 profile 定制"""
    if not cwd:
        return None
    profile = iterm2.LocalWriteOnlyProfile()
    profile.set_initial_directory_mode(iterm2.InitialWorkingDirectory.INITIAL_WORKING_DIRECTORY_CUSTOM)
    profile.set_custom_directory(cwd)
    return profile


class ITerm2Host(PaneHost):
    """iTerm2 终端后端

    使用示例:
        async def main(connection):
            host = ITerm2Host(connection)
            layout = await host.get_layout()

        iterm2.run_until_complete(main)
    """

    def __init__(self, connection: iterm2.Connection):
        self._connection = connection

    @property
    def name(self) -> str:
        return "iterm2"

    async def _get_app(self) -> iterm2.App | None:
        return await iterm2.async_get_app(self._connection)

    async def _get_session(self, pane_id: str) -> iterm2.Session | None:
        app = await self._get_app()
        if app is None:
            return None
        return app.get_session_by_id(pane_id)

    async def get_layout(self) -> LayoutData | None:
        """获取完整布局"""
        try:
            app = await self._get_app()
            if app is None:
                return None
            return await iterm_get_layout(app)
        except Exception as e:
            logger.error(f"[ITerm2Host] Failed to get layout: {e}")
            return None

    async def split_pane(
        self,
        pane_id: str,
        direction: SplitDirection,
        cwd: str | None,
        size_ratio: float,
    ) -> str | None:
        """split session，然后按比例调整两侧 preferred_size"""
        try:
            session = await self._get_session(pane_id)
            if session is None:
                logger.warning(f"[ITerm2Host] Session not found: {pane_id}")
                return None

            size = session.grid_size
            vertical = direction is SplitDirection.RIGHT
            new_session = await session.async_split_pane(
                vertical=vertical,
                profile_customizations=_directory_profile(cwd),
            )
            if new_session is None:
                return None

            # 减去 1 格分隔线
            if vertical:
                total = size.width - 1
                new_width = max(1, round(total * size_ratio))
                session.preferred_size = iterm2.util.Size(total - new_width, size.height)
                new_session.preferred_size = iterm2.util.Size(new_width, size.height)
            else:
                total = size.height - 1
                new_height = max(1, round(total * size_ratio))
                session.preferred_size = iterm2.util.Size(size.width, total - new_height)
                new_session.preferred_size = iterm2.util.Size(size.width, new_height)

            app = await self._get_app()
            tab, _ = app.get_tab_and_window_for_session(new_session) if app else (None, None)
            if tab is not None:
                await tab.async_update_layout()

            return new_session.session_id
        except Exception as e:
            logger.warning(f"[ITerm2Host] Split of {pane_id} failed: {e}")
            return None

    async def activate_pane(self, pane_id: str) -> bool:
        """激活指定的 session"""
        try:
            session = await self._get_session(pane_id)
            if session is None:
                return False
            await session.async_activate()
            return True
        except Exception as e:
            logger.warning(f"[ITerm2Host] Activate {pane_id} failed: {e}")
            return False

    async def pane_exists(self, pane_id: str) -> bool:
        return await self._get_session(pane_id) is not None

    async def spawn_window(self, workspace: str, cwd: str | None) -> SpawnResult | None:
        """新建窗口"""
        try:
            window = await iterm2.Window.async_create(
                self._connection, profile_customizations=_directory_profile(cwd)
            )
            if window is None or window.current_tab is None:
                return None
            tab = window.current_tab
            return SpawnResult(
                window_id=window.window_id,
                tab_id=tab.tab_id,
                pane_id=tab.current_session.session_id,
            )
        except Exception as e:
            logger.warning(f"[ITerm2Host] Create window failed: {e}")
            return None

    async def spawn_tab(self, window_id: str, cwd: str | None) -> SpawnResult | None:
        """在指定 Window 中创建新 Tab"""
        try:
            app = await self._get_app()
            window = app.get_window_by_id(window_id) if app else None
            if window is None:
                logger.warning(f"[ITerm2Host] Window not found: {window_id}")
                return None
            tab = await window.async_create_tab(profile_customizations=_directory_profile(cwd))
            if tab is None:
                return None
            return SpawnResult(
                window_id=window_id,
                tab_id=tab.tab_id,
                pane_id=tab.current_session.session_id,
            )
        except Exception as e:
            logger.warning(f"[ITerm2Host] Create tab failed: {e}")
            return None

    async def activate_tab(self, tab_id: str) -> bool:
        try:
            app = await self._get_app()
            tab = app.get_tab_by_id(tab_id) if app else None
            if tab is None:
                return False
            await tab.async_activate()
            return True
        except Exception as e:
            logger.warning(f"[ITerm2Host] Activate tab {tab_id} failed: {e}")
            return False

    async def set_tab_title(self, tab_id: str, title: str) -> bool:
        app = await self._get_app()
        tab = app.get_tab_by_id(tab_id) if app else None
        if tab is None:
            return False
        return await set_tab_name(tab, title)

    async def set_pane_title(self, pane_id: str, title: str) -> bool:
        session = await self._get_session(pane_id)
        if session is None:
            return False
        return await set_session_name(session, title)

    async def send_text(self, pane_id: str, text: str) -> bool:
        try:
            session = await self._get_session(pane_id)
            if session is None:
                return False
            await session.async_send_text(f"{text}\n")
            return True
        except Exception as e:
            logger.warning(f"[ITerm2Host] Send text to {pane_id} failed: {e}")
            return False
