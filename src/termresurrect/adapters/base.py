"""终端后端接口

capture 读取 live 布局（LayoutData，坐标单位为字符格），恢复通过 PaneHost
split / 激活 / 新建 pane。后端错误在适配器内记录日志，返回 None / False，
不向上抛异常。实现：adapters.tmux.TmuxHost, adapters.iterm2.ITerm2Host
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from termresurrect import config
from termresurrect.layout.planner import SplitDirection
from termresurrect.telemetry import get_logger

logger = get_logger(__name__)


@dataclass
class JobMetadata:
    """前台进程元数据"""

    job_name: str = ""
    job_pid: int | None = None
    command_line: str = ""
    path: str = ""  # 进程工作目录


@dataclass
class PaneInfo:
    """Pane 信息（live 快照）

    Attributes:
        pane_id: 后端内部 ID
        name: 显示名称
        index: 在 tab 内的索引
        top, left: 位置（字符格）
        width, height: 尺寸（字符格）
        cwd: 当前工作目录（路径）
        active: 是否为所在 tab 的活动 pane
        job: 前台进程
    """

    pane_id: str
    name: str
    index: int
    top: int
    left: int
    width: int
    height: int
    cwd: str = ""
    active: bool = False
    job: JobMetadata | None = None


@dataclass
class TabInfo:
    """Tab 信息"""

    tab_id: str
    name: str
    panes: list[PaneInfo] = field(default_factory=list)


@dataclass
class WindowInfo:
    """Window 信息"""

    window_id: str
    name: str
    workspace: str = ""
    tabs: list[TabInfo] = field(default_factory=list)


@dataclass
class LayoutData:
    """完整布局数据

    Attributes:
        windows: 所有窗口
        active_pane_id: 当前焦点 pane
    """

    windows: list[WindowInfo] = field(default_factory=list)
    active_pane_id: str | None = None


@dataclass
class SpawnResult:
    """新建 window / tab 的结果"""

    window_id: str
    tab_id: str
    pane_id: str


class PaneHost(ABC):
    """终端后端抽象接口

    所有终端后端（tmux, iTerm2 等）必须实现此接口。

    使用示例:
        host = TmuxHost()
        layout = await host.get_layout()
        new_pane = await host.split_pane("%0", SplitDirection.RIGHT, "/tmp", 0.5)
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """后端名称（如 "tmux", "iterm2"）"""

    @abstractmethod
    async def get_layout(self) -> LayoutData | None:
        """获取完整布局

        Returns:
            包含所有 window/tab/pane 的布局数据，失败返回 None
        """

    @abstractmethod
    async def split_pane(
        self,
        pane_id: str,
        direction: SplitDirection,
        cwd: str | None,
        size_ratio: float,
    ) -> str | None:
        """split 指定 pane

        Args:
            pane_id: 被 split 的 pane
            direction: 新 pane 所在一侧
            cwd: 新 pane 工作目录
            size_ratio: 新 pane 占原 pane 的比例 (0, 1]

        Returns:
            新 pane ID，失败返回 None
        """

    @abstractmethod
    async def activate_pane(self, pane_id: str) -> bool:
        """激活指定 pane（切换焦点）"""

    @abstractmethod
    async def pane_exists(self, pane_id: str) -> bool:
        """pane 是否仍然存在"""

    @abstractmethod
    async def spawn_window(self, workspace: str, cwd: str | None) -> SpawnResult | None:
        """在 workspace 中新建窗口（含一个 tab 和一个 pane）"""

    @abstractmethod
    async def spawn_tab(self, window_id: str, cwd: str | None) -> SpawnResult | None:
        """在窗口中新建 tab（含一个 pane）"""

    # 可选方法（有默认实现）

    async def is_pane_active(self, pane_id: str) -> bool | None:
        """pane 是否为活动 pane

        Returns:
            True/False；后端无法提供焦点信息时返回 None
        """
        return None

    async def get_domain_name(self, pane_id: str) -> str:
        """pane 所在 domain"""
        return config.DEFAULT_DOMAIN

    async def activate_tab(self, tab_id: str) -> bool:
        """激活 tab"""
        return True

    async def set_tab_title(self, tab_id: str, title: str) -> bool:
        """设置 tab 标题"""
        return False

    async def set_pane_title(self, pane_id: str, title: str) -> bool:
        """设置 pane 标题"""
        return False

    async def send_text(self, pane_id: str, text: str) -> bool:
        """向 pane 输入文本"""
        return False

    async def notify(self, message: str) -> None:
        """通知用户"""
        logger.info(f"[{self.name}] {message}")
