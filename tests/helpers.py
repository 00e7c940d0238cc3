"""测试辅助：内存中的终端后端和 tab 构造函数"""

from termresurrect.adapters.base import LayoutData, PaneHost, PaneInfo, SpawnResult, TabInfo, WindowInfo
from termresurrect.layout.models import PaneRecord, Rectangle, TabRecord
from termresurrect.layout.planner import SplitDirection


def pane(pane_id: str, top: int, left: int, width: int, height: int, cwd: str = "") -> PaneRecord:
    """构造保存的 pane"""
    return PaneRecord(
        id=pane_id,
        rectangle=Rectangle(top=top, left=left, width=width, height=height),
        working_directory=cwd,
    )


def tab(*panes: PaneRecord, tab_id: str = "t0", title: str | None = None) -> TabRecord:
    return TabRecord(id=tab_id, title=title, panes=tuple(panes))


class FakeHost(PaneHost):
    """模拟 split 几何的内存后端

    Attributes:
        rects: live pane -> [top, left, width, height]
        split_calls: (parent, direction, cwd, ratio)
        fail_activation: 激活总是失败的 pane
        fail_split: split 总是失败的 pane
        focus_signal: False 时 is_pane_active 返回 None
    """

    def __init__(
        self,
        width: int = 80,
        height: int = 24,
        focus_signal: bool = True,
        fail_activation: set[str] | None = None,
        fail_split: set[str] | None = None,
    ):
        self.width = width
        self.height = height
        self.focus_signal = focus_signal
        self.fail_activation = fail_activation or set()
        self.fail_split = fail_split or set()

        self.rects: dict[str, list[int]] = {}
        self.tabs: dict[str, list[str]] = {}
        self.windows: dict[str, list[str]] = {}
        self.active: str | None = None
        self.split_calls: list[tuple[str, SplitDirection, str | None, float]] = []
        self.activations: list[str] = []
        self.tab_titles: dict[str, str] = {}
        self.pane_titles: dict[str, str] = {}
        self.sent: list[tuple[str, str]] = []
        self.notifications: list[str] = []
        self.cwds: dict[str, str | None] = {}
        self._counter = 0

    @property
    def name(self) -> str:
        return "fake"

    def _next_id(self, prefix: str) -> str:
        new_id = f"{prefix}{self._counter}"
        self._counter += 1
        return new_id

    def _new_tab(self, window_id: str, cwd: str | None) -> SpawnResult:
        tab_id = self._next_id("t")
        pane_id = self._next_id("p")
        self.rects[pane_id] = [0, 0, self.width, self.height]
        self.cwds[pane_id] = cwd
        self.tabs[tab_id] = [pane_id]
        self.windows[window_id].append(tab_id)
        self.active = pane_id
        return SpawnResult(window_id=window_id, tab_id=tab_id, pane_id=pane_id)

    async def get_layout(self) -> LayoutData:
        layout = LayoutData(active_pane_id=self.active)
        for window_id, tab_ids in self.windows.items():
            window = WindowInfo(window_id=window_id, name=window_id, workspace=window_id)
            for tab_id in tab_ids:
                info = TabInfo(tab_id=tab_id, name=self.tab_titles.get(tab_id, ""))
                for idx, pane_id in enumerate(self.tabs[tab_id]):
                    top, left, width, height = self.rects[pane_id]
                    info.panes.append(
                        PaneInfo(
                            pane_id=pane_id,
                            name=self.pane_titles.get(pane_id, ""),
                            index=idx,
                            top=top,
                            left=left,
                            width=width,
                            height=height,
                            cwd=self.cwds.get(pane_id) or "",
                            active=pane_id == self.active,
                        )
                    )
                window.tabs.append(info)
            layout.windows.append(window)
        return layout

    async def split_pane(self, pane_id, direction, cwd, size_ratio):
        self.split_calls.append((pane_id, direction, cwd, size_ratio))
        if pane_id in self.fail_split or pane_id not in self.rects:
            return None

        top, left, width, height = self.rects[pane_id]
        new_id = self._next_id("p")
        if direction is SplitDirection.RIGHT:
            total = width - 1
            new_width = max(1, round(total * size_ratio))
            self.rects[pane_id] = [top, left, total - new_width, height]
            self.rects[new_id] = [top, left + total - new_width + 1, new_width, height]
        else:
            total = height - 1
            new_height = max(1, round(total * size_ratio))
            self.rects[pane_id] = [top, left, width, total - new_height]
            self.rects[new_id] = [top + total - new_height + 1, left, width, new_height]

        self.cwds[new_id] = cwd
        for panes in self.tabs.values():
            if pane_id in panes:
                panes.append(new_id)
        self.active = new_id
        return new_id

    async def activate_pane(self, pane_id: str) -> bool:
        self.activations.append(pane_id)
        if pane_id in self.fail_activation or pane_id not in self.rects:
            return False
        self.active = pane_id
        return True

    async def is_pane_active(self, pane_id: str) -> bool | None:
        if not self.focus_signal:
            return None
        return self.active == pane_id

    async def pane_exists(self, pane_id: str) -> bool:
        return pane_id in self.rects

    async def spawn_window(self, workspace: str, cwd: str | None) -> SpawnResult:
        self.windows.setdefault(workspace, [])
        return self._new_tab(workspace, cwd)

    async def spawn_tab(self, window_id: str, cwd: str | None) -> SpawnResult | None:
        if window_id not in self.windows:
            return None
        return self._new_tab(window_id, cwd)

    async def set_tab_title(self, tab_id: str, title: str) -> bool:
        self.tab_titles[tab_id] = title
        return True

    async def set_pane_title(self, pane_id: str, title: str) -> bool:
        self.pane_titles[pane_id] = title
        return True

    async def send_text(self, pane_id: str, text: str) -> bool:
        self.sent.append((pane_id, text))
        return True

    async def notify(self, message: str) -> None:
        self.notifications.append(message)
