"""Tmux host implementing the PaneHost interface."""

import logging

from termresurrect.adapters.base import LayoutData, PaneHost, SpawnResult
from termresurrect.layout.planner import SplitDirection

from .client import TmuxClient, ratio_to_percent, session_name_for
from .layout import TmuxLayoutBuilder

logger = logging.getLogger(__name__)


class TmuxHost(PaneHost):
    """Tmux host.

    Wraps TmuxClient to provide the standard host interface. Workspaces map to
    tmux sessions, so a window ID is a session name and a tab ID is a tmux
    window ID (e.g. "@3").
    """

    def __init__(self, socket_path: str | None = None):
        """Initialize TmuxHost.

        Args:
            socket_path: Optional tmux socket path.
        """
        self._client = TmuxClient(socket_path=socket_path)
        self._layout_builder = TmuxLayoutBuilder()

    @property
    def name(self) -> str:
        return "tmux"

    @property
    def client(self) -> TmuxClient:
        """Access underlying TmuxClient."""
        return self._client

    async def get_layout(self) -> LayoutData | None:
        """Get current layout from tmux.

        Returns:
            LayoutData with windows/tabs/panes, or None on error.
        """
        try:
            windows = await self._client.list_windows()
            panes = await self._client.list_panes()
            return self._layout_builder.build(windows=windows, panes=panes)
        except Exception as e:
            logger.error(f"Failed to get tmux layout: {e}")
            return None

    async def split_pane(
        self,
        pane_id: str,
        direction: SplitDirection,
        cwd: str | None,
        size_ratio: float,
    ) -> str | None:
        """Split a pane, the new pane takes ``size_ratio`` of it."""
        return await self._client.split_window(
            pane_id,
            horizontal=direction is SplitDirection.RIGHT,
            percent=ratio_to_percent(size_ratio),
            cwd=cwd,
        )

    async def activate_pane(self, pane_id: str) -> bool:
        """Activate/focus a pane."""
        return await self._client.select_pane(pane_id)

    async def is_pane_active(self, pane_id: str) -> bool | None:
        """Whether the pane is the active pane of its window."""
        value = await self._client.get_pane_field(pane_id, "#{pane_active}")
        if value is None:
            return False
        return value == "1"

    async def pane_exists(self, pane_id: str) -> bool:
        """Check the pane is still alive."""
        value = await self._client.get_pane_field(pane_id, "#{pane_id}")
        return value == pane_id

    async def spawn_window(self, workspace: str, cwd: str | None) -> SpawnResult | None:
        """Create the session for a workspace, or a new window in it if it exists.

        ``window_id`` of the result is the session name as tmux reports it.
        """
        session = session_name_for(workspace)
        if await self._client.has_session(session):
            created = await self._client.new_window(session, cwd)
        else:
            created = await self._client.new_session(session, cwd)
        if created is None:
            return None
        session, tab_id, pane_id = created
        return SpawnResult(window_id=session, tab_id=tab_id, pane_id=pane_id)

    async def spawn_tab(self, window_id: str, cwd: str | None) -> SpawnResult | None:
        """Create a tmux window in the session ``window_id``."""
        created = await self._client.new_window(window_id, cwd)
        if created is None:
            return None
        session, tab_id, pane_id = created
        return SpawnResult(window_id=session, tab_id=tab_id, pane_id=pane_id)

    async def activate_tab(self, tab_id: str) -> bool:
        return await self._client.select_window(tab_id)

    async def set_tab_title(self, tab_id: str, title: str) -> bool:
        return await self._client.rename_window(tab_id, title)

    async def set_pane_title(self, pane_id: str, title: str) -> bool:
        return await self._client.rename_pane(pane_id, title)

    async def send_text(self, pane_id: str, text: str) -> bool:
        return await self._client.send_keys(pane_id, text)

    async def notify(self, message: str) -> None:
        logger.info(f"[tmux] {message}")
        await self._client.display_message(message)
