"""Split 执行器

对活动 pane 执行一条 SplitInstruction，成功后新 pane 成为活动 pane，
并交给 PaneRestorer 恢复标题 / 进程。
"""

from ..adapters.base import PaneHost
from ..core.paths import extract_path_from_uri
from ..core.result import ErrorKind, Result
from ..layout.planner import SplitInstruction
from ..telemetry import format_pane_log, get_logger, metrics
from .activation import ActivePaneContext
from .pane import PaneRestorer

logger = get_logger(__name__)


class SplitExecutor:
    """执行 split，不抛异常"""

    def __init__(
        self,
        host: PaneHost,
        context: ActivePaneContext,
        pane_restorer: PaneRestorer | None = None,
    ):
        self.host = host
        self.context = context
        self.pane_restorer = pane_restorer

    async def split(self, parent_pane: str, instruction: SplitInstruction) -> Result[str]:
        """split 父 pane

        Args:
            parent_pane: 父 pane，必须是当前活动 pane
            instruction: split 指令

        Returns:
            Ok(新 pane ID) 或 Err
        """
        direction = instruction.direction.value
        target = instruction.target

        if self.context.pane_id != parent_pane:
            return Result.err(
                ErrorKind.ACTIVATION_FAILURE,
                f"pane {parent_pane} is not the active pane ({self.context.pane_id})",
                pane_id=parent_pane,
            )

        if not 0 < instruction.size_ratio <= 1:
            metrics.inc("split.fail", {"direction": direction})
            return Result.err(
                ErrorKind.SPLIT_FAILURE,
                f"size ratio {instruction.size_ratio:.3f} out of range for pane {target.id}",
                pane_id=parent_pane,
            )

        logger.info(
            format_pane_log(
                "Split",
                parent_pane,
                f"{direction} -> saved pane {target.id} "
                f"(top={target.top} left={target.left} ratio={instruction.size_ratio:.3f})",
            )
        )

        try:
            domain = await self.host.get_domain_name(parent_pane)
            cwd = extract_path_from_uri(target.working_directory, domain)
            new_pane = await self.host.split_pane(
                parent_pane, instruction.direction, cwd, instruction.size_ratio
            )
        except Exception as e:
            logger.error(format_pane_log("Split", parent_pane, f"Host raised: {e}"))
            metrics.inc("split.fail", {"direction": direction})
            return Result.err(ErrorKind.SPLIT_FAILURE, f"split raised: {e}", exc=e, pane_id=parent_pane)

        if new_pane is None:
            logger.error(format_pane_log("Split", parent_pane, f"Host refused {direction} split"))
            metrics.inc("split.fail", {"direction": direction})
            return Result.err(
                ErrorKind.SPLIT_FAILURE, f"host refused {direction} split", pane_id=parent_pane
            )

        # split 后焦点落在新 pane 上
        self.context.set(new_pane)
        metrics.inc("split.ok", {"direction": direction})

        if self.pane_restorer is not None:
            await self.pane_restorer.restore(new_pane, target)

        return Result.ok(new_pane)
