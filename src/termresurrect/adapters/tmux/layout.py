"""Map tmux listings onto LayoutData.

    tmux session -> WindowInfo (id, name and workspace are the session name)
    tmux window  -> TabInfo
    tmux pane    -> PaneInfo

tmux already reports pane geometry in cells with 1-cell borders, so no
conversion is needed.
"""

import logging
from itertools import groupby

from termresurrect.adapters.base import JobMetadata, LayoutData, PaneInfo, TabInfo, WindowInfo

logger = logging.getLogger(__name__)


def _pane_info(row: dict, index: int) -> PaneInfo:
    """Raises KeyError/ValueError/TypeError for incomplete rows."""
    path = row.get("path", "")
    command = row.get("current_command", "")
    return PaneInfo(
        pane_id=row["pane_id"],
        name=row.get("pane_name", ""),
        index=index,
        top=int(row["top"]),
        left=int(row["left"]),
        width=int(row["width"]),
        height=int(row["height"]),
        cwd=path,
        active=bool(row.get("active")),
        job=JobMetadata(
            job_name=command,
            job_pid=row.get("pane_pid"),
            command_line=command,
            path=path,
        ),
    )


def _session_name(win: dict) -> str:
    return win.get("session_name") or win["session_id"]


class TmuxLayoutBuilder:
    """Builds LayoutData from ``TmuxClient.list_windows()``/``list_panes()`` rows."""

    def _tab_panes(self, rows: list[dict]) -> list[PaneInfo]:
        panes = []
        for row in sorted(rows, key=lambda r: r.get("pane_index", 0)):
            try:
                panes.append(_pane_info(row, len(panes)))
            except (KeyError, ValueError, TypeError) as e:
                logger.warning(f"Skipping malformed tmux pane {row.get('pane_id')}: {e!r}")
        return panes

    def build(self, windows: list[dict], panes: list[dict]) -> LayoutData:
        """Windows without any pane are dropped."""
        by_window: dict[tuple[str, str], list[dict]] = {}
        for row in panes:
            by_window.setdefault((row["session_id"], row["window_id"]), []).append(row)

        layout = LayoutData()

        # tmux lists windows grouped by session already
        for session, session_windows in groupby(windows, key=_session_name):
            tabs = []
            for win in session_windows:
                rows = by_window.get((win["session_id"], win["window_id"]), [])
                tab_panes = self._tab_panes(rows)
                if not tab_panes:
                    continue
                if win.get("active"):
                    active = next((p for p in tab_panes if p.active), None)
                    if active:
                        layout.active_pane_id = active.pane_id
                tabs.append(
                    TabInfo(tab_id=win["window_id"], name=win.get("window_name", ""), panes=tab_panes)
                )

            if tabs:
                existing = next((w for w in layout.windows if w.window_id == session), None)
                if existing:
                    existing.tabs.extend(tabs)
                else:
                    layout.windows.append(
                        WindowInfo(window_id=session, name=session, workspace=session, tabs=tabs)
                    )
        return layout
