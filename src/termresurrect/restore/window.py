"""Window 恢复

第一个 tab 复用窗口创建时自带的 tab，其余 tab 逐个新建。
"""

from ..adapters.base import SpawnResult
from ..core.result import Result
from ..layout.models import WindowRecord
from ..telemetry import get_logger
from .tab import RestoreReport, TabRestorer

logger = get_logger(__name__)


class WindowRestorer:
    def __init__(self, tab_restorer: TabRestorer):
        self.tab_restorer = tab_restorer

    async def restore_window(
        self, spawned: SpawnResult, record: WindowRecord
    ) -> list[Result[RestoreReport]]:
        """在新窗口中恢复全部 tab

        Args:
            spawned: 新窗口及其初始 tab / pane
            record: 保存的窗口数据

        Returns:
            每个 tab 的恢复结果
        """
        results = []
        for i, tab in enumerate(record.tabs):
            if i == 0:
                result = await self.tab_restorer.restore_into(spawned.tab_id, spawned.pane_id, tab)
            else:
                result = await self.tab_restorer.restore_tab(spawned.window_id, tab)

            if result.is_err():
                logger.error(f"[WindowRestore] Tab {tab.id} not restored: {result.error}")
            results.append(result)
        return results
