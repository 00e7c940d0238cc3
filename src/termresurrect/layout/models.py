"""保存的布局数据模型

Workspace > Window > Tab > Pane 的快照记录。记录只在 capture 时创建一次，
恢复过程中不修改（planner 另建索引）。

持久化格式中 pane 的矩形字段与 id/cwd 平铺在同一层：
    {"id": "3", "top": 0, "left": 41, "width": 39, "height": 24,
     "cwd": "file:///home/user", "title": "zsh", "process": {...}}
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Rectangle:
    """Pane 矩形（单位：字符格）"""

    top: int
    left: int
    width: int
    height: int

    def __post_init__(self):
        if self.top < 0 or self.left < 0:
            raise ValueError(f"negative position: top={self.top} left={self.left}")
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"empty size: width={self.width} height={self.height}")

    @property
    def right(self) -> int:
        """右边界（不含）"""
        return self.left + self.width

    @property
    def bottom(self) -> int:
        """下边界（不含）"""
        return self.top + self.height


@dataclass(frozen=True)
class ProcessInfo:
    """前台进程元数据"""

    name: str = ""
    executable: str = ""
    argv: tuple[str, ...] = ()
    cwd: str = ""
    pid: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "executable": self.executable,
            "argv": list(self.argv),
            "cwd": self.cwd,
            "pid": self.pid,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ProcessInfo":
        return cls(
            name=data.get("name", ""),
            executable=data.get("executable", ""),
            argv=tuple(data.get("argv") or ()),
            cwd=data.get("cwd", ""),
            pid=data.get("pid"),
        )


@dataclass(frozen=True)
class PaneRecord:
    """Pane 快照

    Attributes:
        id: capture 时的 pane id（仅在一次 capture 内有意义）
        rectangle: 位置与尺寸
        working_directory: 工作目录 URI
        title: pane 标题
        process: 前台进程
    """

    id: str
    rectangle: Rectangle
    working_directory: str = ""
    title: str | None = None
    process: ProcessInfo | None = None

    # 便捷访问，让 geometry 直接按 pane 比较
    @property
    def top(self) -> int:
        return self.rectangle.top

    @property
    def left(self) -> int:
        return self.rectangle.left

    @property
    def width(self) -> int:
        return self.rectangle.width

    @property
    def height(self) -> int:
        return self.rectangle.height

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "top": self.top,
            "left": self.left,
            "width": self.width,
            "height": self.height,
            "cwd": self.working_directory,
            "title": self.title,
            "process": self.process.to_dict() if self.process else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PaneRecord":
        process = data.get("process")
        return cls(
            id=str(data["id"]),
            rectangle=Rectangle(
                top=int(data["top"]),
                left=int(data["left"]),
                width=int(data["width"]),
                height=int(data["height"]),
            ),
            working_directory=data.get("cwd") or "",
            title=data.get("title"),
            process=ProcessInfo.from_dict(process) if process else None,
        )


@dataclass(frozen=True)
class TabRecord:
    """Tab 快照，panes[0] 是恢复起点（左上角 pane）"""

    id: str
    title: str | None = None
    panes: tuple[PaneRecord, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "tab_id": self.id,
            "title": self.title,
            "panes": [pane.to_dict() for pane in self.panes],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TabRecord":
        return cls(
            id=str(data.get("tab_id", "")),
            title=data.get("title"),
            panes=tuple(PaneRecord.from_dict(p) for p in data.get("panes", [])),
        )


@dataclass(frozen=True)
class WindowRecord:
    """Window 快照"""

    workspace: str
    tabs: tuple[TabRecord, ...] = ()
    title: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "workspace": self.workspace,
            "title": self.title,
            "tabs": [tab.to_dict() for tab in self.tabs],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "WindowRecord":
        return cls(
            workspace=data.get("workspace", ""),
            title=data.get("title"),
            tabs=tuple(TabRecord.from_dict(t) for t in data.get("tabs", [])),
        )


@dataclass(frozen=True)
class WorkspaceRecord:
    """Workspace 快照（保存/恢复的顶层单位）"""

    name: str
    windows: tuple[WindowRecord, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "windows": [window.to_dict() for window in self.windows],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "WorkspaceRecord":
        return cls(
            name=data.get("name", ""),
            windows=tuple(WindowRecord.from_dict(w) for w in data.get("windows", [])),
        )

    def pane_count(self) -> int:
        return sum(len(tab.panes) for window in self.windows for tab in window.tabs)
