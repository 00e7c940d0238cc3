"""日志与恢复指标

- get_logger / setup_logging: 标准 logging，CLI 入口统一配置格式
- format_pane_log: pane 相关日志统一带 ``[组件:pane]`` 前缀
- metrics: 进程内计数器和耗时记录，测试里直接读取

计数器: split.ok / split.fail, activation.ok / activation.fail, tab.restore, persist.error
耗时: workspace.restore, tab.restore
"""

import logging
import time
from collections.abc import Iterator
from contextlib import contextmanager

_LOG_FORMAT = "[%(name)s] %(message)s"


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def setup_logging(level: str | int = "INFO") -> None:
    """配置根 logger，未知级别名按 INFO 处理"""
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(level=level, format=_LOG_FORMAT)


def format_pane_log(component: str, pane_id: str | None, msg: str) -> str:
    """``[component:pane_id[:8]] msg``，pane 为空时显示 unknown"""
    pane_short = pane_id[:8] if pane_id else "unknown"
    return f"[{component}:{pane_short}] {msg}"


def _key(name: str, labels: dict[str, str] | None) -> str:
    if not labels:
        return name
    return name + "{" + ",".join(f"{k}={v}" for k, v in sorted(labels.items())) + "}"


class Metrics:
    """恢复过程的计数器与耗时

    key 形如 ``split.fail{direction=right}``，标签按名称排序。
    """

    def __init__(self):
        self._counters: dict[str, int] = {}
        self._durations: dict[str, list[float]] = {}

    def inc(self, name: str, labels: dict[str, str] | None = None, value: int = 1) -> None:
        key = _key(name, labels)
        self._counters[key] = self._counters.get(key, 0) + value

    def observe(self, name: str, seconds: float, labels: dict[str, str] | None = None) -> None:
        self._durations.setdefault(_key(name, labels), []).append(seconds)

    @contextmanager
    def timed(self, name: str, labels: dict[str, str] | None = None) -> Iterator[None]:
        """记录 with 块耗时（异常时同样记录）"""
        start = time.monotonic()
        try:
            yield
        finally:
            self.observe(name, time.monotonic() - start, labels)

    def get_counter(self, name: str, labels: dict[str, str] | None = None) -> int:
        return self._counters.get(_key(name, labels), 0)

    def get_durations(self, name: str, labels: dict[str, str] | None = None) -> list[float]:
        return list(self._durations.get(_key(name, labels), []))

    def snapshot(self) -> dict[str, dict]:
        """当前全部指标的拷贝"""
        return {
            "counters": dict(self._counters),
            "durations": {k: list(v) for k, v in self._durations.items()},
        }

    def reset(self) -> None:
        self._counters.clear()
        self._durations.clear()


metrics = Metrics()
