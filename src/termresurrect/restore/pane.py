"""Pane 状态恢复

split 只负责几何；标题和前台进程等非几何状态由 PaneRestorer 补上。
失败只记日志，不影响布局恢复。
"""

import shlex

from .. import config
from ..adapters.base import PaneHost
from ..layout.models import PaneRecord
from ..telemetry import format_pane_log, get_logger

logger = get_logger(__name__)


class PaneRestorer:
    """把保存的 pane 状态应用到 live pane"""

    def __init__(
        self,
        host: PaneHost,
        restore_processes: bool = config.RESTORE_PROCESSES,
        restorable_processes: set[str] | None = None,
    ):
        self.host = host
        self.restore_processes = restore_processes
        self.restorable_processes = (
            config.RESTORABLE_PROCESSES if restorable_processes is None else restorable_processes
        )

    async def restore(self, pane_id: str, record: PaneRecord) -> None:
        try:
            if record.title:
                await self.host.set_pane_title(pane_id, record.title)

            process = record.process
            if not (self.restore_processes and process and process.argv):
                return
            if process.name not in self.restorable_processes:
                logger.debug(
                    format_pane_log("PaneRestore", pane_id, f"Skip process {process.name}")
                )
                return

            await self.host.send_text(pane_id, shlex.join(process.argv))
        except Exception as e:
            logger.warning(format_pane_log("PaneRestore", pane_id, f"Failed: {e}"))
