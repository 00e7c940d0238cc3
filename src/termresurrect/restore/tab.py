"""Tab 恢复

在一个只有单个 pane 的 tab 上重放保存的布局：

1. 第一个 pane 对应 panes[0]，恢复其状态
2. 按 worklist 顺序处理每个已存在的 pane，计算以它为父的 split（0~2 个）
3. 每次 split 前激活父 pane；第一次激活失败跳过该 pane 的全部 split，
   第二次激活失败只跳过第二个 split
4. split 失败只跳过这一个 split，其子区域不会被创建

失败不会中断整个 tab，结果记录在 RestoreReport 中。
"""

import asyncio
from dataclasses import dataclass, field

from .. import config
from ..adapters.base import PaneHost
from ..core.paths import extract_path_from_uri
from ..core.result import Error, ErrorKind, Result
from ..layout.geometry import tab_extent
from ..layout.models import TabRecord
from ..layout.planner import SplitInstruction, Worklist, next_splits
from ..telemetry import get_logger, metrics
from .activation import ActivationGuard
from .executor import SplitExecutor
from .pane import PaneRestorer

logger = get_logger(__name__)


@dataclass
class SkippedSplit:
    """未执行的 split 及原因"""

    instruction: SplitInstruction
    error: Error


@dataclass
class RestoreReport:
    """一个 tab 的恢复结果

    Attributes:
        tab_id: live tab ID
        executed: 按执行顺序排列的成功 split
        skipped: 跳过的 split
        panes: worklist 中的 live pane（下标与 split 指令的 parent_index 对应）
    """

    tab_id: str | None = None
    executed: list[SplitInstruction] = field(default_factory=list)
    skipped: list[SkippedSplit] = field(default_factory=list)
    panes: list[str] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return not self.skipped


class TabRestorer:
    """按保存数据重建 tab"""

    def __init__(
        self,
        host: PaneHost,
        guard: ActivationGuard | None = None,
        pane_restorer: PaneRestorer | None = None,
        tab_settle_seconds: float = config.TAB_SETTLE_SECONDS,
    ):
        self.host = host
        self.guard = guard or ActivationGuard(host)
        self.pane_restorer = pane_restorer or PaneRestorer(host)
        self.executor = SplitExecutor(host, self.guard.context, self.pane_restorer)
        self.tab_settle_seconds = tab_settle_seconds

    async def restore_tab(
        self, window_id: str, tab: TabRecord, domain: str | None = None
    ) -> Result[RestoreReport]:
        """在窗口中新建 tab 并恢复布局"""
        if not tab.panes:
            logger.warning(f"[TabRestore] Tab {tab.id} has no pane data")
            return Result.err(ErrorKind.MISSING_DEPENDENCY, f"tab {tab.id} has no panes")

        cwd = extract_path_from_uri(tab.panes[0].working_directory, domain)
        try:
            spawned = await self.host.spawn_tab(window_id, cwd)
        except Exception as e:
            logger.error(f"[TabRestore] Failed to create a new tab: {e}")
            spawned = None

        if spawned is None:
            metrics.inc("tab.restore", {"result": "spawn_failed"})
            return Result.err(
                ErrorKind.TAB_CREATION_FAILURE, f"could not create tab in window {window_id}"
            )

        return await self.restore_into(spawned.tab_id, spawned.pane_id, tab)

    async def restore_into(
        self, tab_id: str, initial_pane: str, tab: TabRecord
    ) -> Result[RestoreReport]:
        """在已有的单 pane tab 中恢复布局"""
        if not tab.panes:
            return Result.err(ErrorKind.MISSING_DEPENDENCY, f"tab {tab.id} has no panes")

        try:
            if tab.title:
                await self.host.set_tab_title(tab_id, tab.title)

            # 创建 pane 之前先激活 tab
            if not await self.host.activate_tab(tab_id):
                logger.error(f"[TabRestore] Failed to activate new tab {tab_id}")
                metrics.inc("tab.restore", {"result": "activate_failed"})
                return Result.err(
                    ErrorKind.ACTIVATION_FAILURE, f"could not activate tab {tab_id}"
                )
        except Exception as e:
            logger.error(f"[TabRestore] Failed to prepare tab {tab_id}: {e}")
            metrics.inc("tab.restore", {"result": "activate_failed"})
            return Result.err(ErrorKind.ACTIVATION_FAILURE, f"tab {tab_id}: {e}", exc=e)

        await asyncio.sleep(self.tab_settle_seconds)

        with metrics.timed("tab.restore"):
            report = await self.restore_panes(initial_pane, tab, tab_id=tab_id)
        metrics.inc("tab.restore", {"result": "ok" if report.complete else "partial"})
        return Result.ok(report)

    async def restore_panes(
        self, initial_pane: str, tab: TabRecord, tab_id: str | None = None
    ) -> RestoreReport:
        """从单个 pane 开始重放全部 split"""
        report = RestoreReport(tab_id=tab_id)
        if not tab.panes:
            return report

        worklist: Worklist[str] = Worklist.start(tab.panes[0], initial_pane)
        try:
            await self.pane_restorer.restore(initial_pane, tab.panes[0])
            extent = tab_extent(tab)

            for idx, claimed, live_pane in worklist:
                splits = next_splits(claimed, idx, tab, extent, worklist.taken)
                if not splits:
                    continue

                for n, instruction in enumerate(splits):
                    # split 会改变焦点，每次 split 前都重新激活父 pane
                    activation = await self.guard.activate(live_pane)
                    if activation.is_err():
                        logger.error(
                            f"[TabRestore] Failed to activate pane {live_pane}, "
                            f"skipping {len(splits) - n} split(s)"
                        )
                        report.skipped.extend(SkippedSplit(s, activation.error) for s in splits[n:])
                        break

                    result = await self.executor.split(live_pane, instruction)
                    if result.is_err():
                        logger.warning(f"[TabRestore] Split skipped: {result.error}")
                        report.skipped.append(SkippedSplit(instruction, result.error))
                        continue

                    worklist.push(instruction.target, instruction.target_index, result.value)
                    report.executed.append(instruction)
        except Exception as e:
            logger.error(f"[TabRestore] Failed to restore panes in tab {tab_id}: {e}")

        report.panes = [pane for pane in worklist.panes if pane is not None]
        logger.info(
            f"[TabRestore] Finished tab {tab_id}: "
            f"{len(report.executed)} split(s), {len(report.skipped)} skipped"
        )
        return report
