"""Pane 激活守卫

后端的 split 作用于 "当前活动 pane"，因此每次 split 之前必须先把父 pane
激活并确认焦点已经切换过去。

确认流程（状态机）：
    REQUESTED -> CONFIRMED   后端报告该 pane 已是活动 pane
    REQUESTED -> TIMED_OUT   超时仍未确认

后端不提供焦点信息时（is_pane_active 返回 None），退化为激活前后各等待
固定时长。
"""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum

from .. import config
from ..adapters.base import PaneHost
from ..core.result import ErrorKind, Result
from ..telemetry import format_pane_log, get_logger, metrics

logger = get_logger(__name__)


class ActivationState(Enum):
    """激活确认状态"""

    REQUESTED = "requested"
    CONFIRMED = "confirmed"
    TIMED_OUT = "timed_out"


@dataclass
class ActivePaneContext:
    """当前活动 pane（单写者）

    只由激活成功和 split 成功更新。
    """

    pane_id: str | None = None

    def set(self, pane_id: str) -> None:
        self.pane_id = pane_id


class ActivationGuard:
    """在 split 之前激活并确认父 pane"""

    def __init__(
        self,
        host: PaneHost,
        context: ActivePaneContext | None = None,
        settle_seconds: float = config.ACTIVATION_SETTLE_SECONDS,
        timeout: float = config.ACTIVATION_TIMEOUT_SECONDS,
        poll_interval: float = config.ACTIVATION_POLL_INTERVAL,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.host = host
        self.context = context or ActivePaneContext()
        self.settle_seconds = settle_seconds
        self.timeout = timeout
        self.poll_interval = poll_interval
        self._sleep = sleep

    async def activate(self, pane_id: str | None) -> Result[str]:
        """激活 pane，不抛异常

        Returns:
            Ok(pane_id) 或 Err(ACTIVATION_FAILURE)
        """
        if not pane_id:
            logger.warning("[Activation] Pane is absent")
            metrics.inc("activation.fail", {"reason": "absent"})
            return Result.err(ErrorKind.ACTIVATION_FAILURE, "pane is absent")

        try:
            if not await self.host.pane_exists(pane_id):
                logger.warning(
                    format_pane_log("Activation", pane_id, "Pane not found in host, skipping")
                )
                metrics.inc("activation.fail", {"reason": "gone"})
                return Result.err(
                    ErrorKind.ACTIVATION_FAILURE, f"pane {pane_id} not found", pane_id=pane_id
                )

            state = await self._request(pane_id)
        except Exception as e:
            logger.warning(format_pane_log("Activation", pane_id, f"Failed to activate: {e}"))
            metrics.inc("activation.fail", {"reason": "error"})
            return Result.err(
                ErrorKind.ACTIVATION_FAILURE, f"activation raised: {e}", exc=e, pane_id=pane_id
            )

        if state is not ActivationState.CONFIRMED:
            logger.warning(format_pane_log("Activation", pane_id, f"Activation {state.value}"))
            metrics.inc("activation.fail", {"reason": state.value})
            return Result.err(
                ErrorKind.ACTIVATION_FAILURE,
                f"activation of {pane_id} {state.value}",
                pane_id=pane_id,
            )

        self.context.set(pane_id)
        metrics.inc("activation.ok")
        return Result.ok(pane_id)

    async def _request(self, pane_id: str) -> ActivationState:
        """发出激活请求并等待确认"""
        if await self.host.is_pane_active(pane_id) is None:
            return await self._request_blind(pane_id)

        if not await self.host.activate_pane(pane_id):
            return ActivationState.TIMED_OUT

        return await self._confirm(pane_id)

    async def _request_blind(self, pane_id: str) -> ActivationState:
        """无焦点信息时：前后固定等待"""
        await self._sleep(self.settle_seconds)
        activated = await self.host.activate_pane(pane_id)
        await self._sleep(self.settle_seconds)
        return ActivationState.CONFIRMED if activated else ActivationState.TIMED_OUT

    async def _confirm(self, pane_id: str) -> ActivationState:
        """轮询直到确认或超时"""
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.timeout
        state = ActivationState.REQUESTED

        while state is ActivationState.REQUESTED:
            if await self.host.is_pane_active(pane_id):
                state = ActivationState.CONFIRMED
            elif loop.time() >= deadline:
                state = ActivationState.TIMED_OUT
            else:
                await self._sleep(self.poll_interval)

        return state
