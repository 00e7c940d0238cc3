"""Tab 恢复测试（内存后端端到端）"""

import pytest

from helpers import FakeHost, pane, tab

from termresurrect.core.result import ErrorKind
from termresurrect.layout.models import PaneRecord, Rectangle
from termresurrect.layout.planner import SplitDirection
from termresurrect.restore.activation import ActivationGuard
from termresurrect.restore.tab import TabRestorer
from termresurrect.telemetry import metrics


def make_restorer(host: FakeHost) -> TabRestorer:
    guard = ActivationGuard(host, settle_seconds=0, timeout=0.05, poll_interval=0.01)
    return TabRestorer(host, guard=guard, tab_settle_seconds=0)


async def spawned(host: FakeHost):
    return await host.spawn_window("dev", None)


SIDE_BY_SIDE_OVER_WIDE = tab(
    pane("0", 0, 0, 40, 24, cwd="file:///home/user"),
    pane("1", 0, 41, 39, 24, cwd="file:///home/user/src"),
    pane("2", 25, 0, 80, 23, cwd="file:///var/log"),
    title="work",
)

GRID = tab(
    pane("0", 0, 0, 40, 12),
    pane("1", 0, 41, 39, 12),
    pane("2", 13, 0, 40, 12),
    pane("3", 13, 41, 39, 12),
)


class TestRestorePanes:
    @pytest.mark.asyncio
    async def test_replays_split_sequence(self):
        host = FakeHost()
        first = (await spawned(host)).pane_id

        report = await make_restorer(host).restore_panes(first, SIDE_BY_SIDE_OVER_WIDE)

        assert report.complete
        assert [(s.direction, s.target_index) for s in report.executed] == [
            (SplitDirection.RIGHT, 1),
            (SplitDirection.BOTTOM, 2),
        ]
        # 两次 split 都以第一个 pane 为父
        assert [call[0] for call in host.split_calls] == [first, first]
        assert [call[2] for call in host.split_calls] == ["/home/user/src", "/var/log"]
        assert len(report.panes) == 3
        assert set(report.panes) == set(host.rects)

    @pytest.mark.asyncio
    async def test_reactivates_parent_before_each_split(self):
        host = FakeHost()
        first = (await spawned(host)).pane_id

        await make_restorer(host).restore_panes(first, SIDE_BY_SIDE_OVER_WIDE)

        assert host.activations == [first, first]

    @pytest.mark.asyncio
    async def test_single_pane_tab(self):
        host = FakeHost()
        first = (await spawned(host)).pane_id

        report = await make_restorer(host).restore_panes(first, tab(pane("0", 0, 0, 80, 24)))

        assert report.complete
        assert report.executed == []
        assert report.panes == [first]
        assert host.split_calls == []

    @pytest.mark.asyncio
    async def test_first_activation_failure_skips_all_splits_of_parent(self):
        host = FakeHost()
        first = (await spawned(host)).pane_id
        host.fail_activation.add(first)

        report = await make_restorer(host).restore_panes(first, SIDE_BY_SIDE_OVER_WIDE)

        assert host.split_calls == []
        assert len(report.skipped) == 2
        assert all(s.error.kind is ErrorKind.ACTIVATION_FAILURE for s in report.skipped)
        assert report.panes == [first]

    @pytest.mark.asyncio
    async def test_activation_failure_is_contained_to_one_pane(self):
        host = FakeHost()
        first = (await spawned(host)).pane_id
        # 第一次 split 产生的 pane 无法激活
        host.fail_activation.add("p2")

        report = await make_restorer(host).restore_panes(first, GRID)

        assert not report.complete
        assert len(report.skipped) == 1
        assert report.skipped[0].instruction.target_index == 3
        # 右下角由左下角 pane 向右 split 补上
        assert sorted(s.target_index for s in report.executed) == [1, 2, 3]
        assert len(report.panes) == 4

    @pytest.mark.asyncio
    async def test_split_failure_skips_descendants(self):
        host = FakeHost()
        first = (await spawned(host)).pane_id
        host.fail_split.add(first)
        l_shape = tab(
            pane("0", 0, 0, 40, 25),
            pane("1", 0, 41, 39, 12),
            pane("2", 13, 41, 39, 12),
        )

        report = await make_restorer(host).restore_panes(first, l_shape)

        assert len(host.split_calls) == 1
        assert report.executed == []
        assert [s.error.kind for s in report.skipped] == [ErrorKind.SPLIT_FAILURE]
        assert report.panes == [first]

    @pytest.mark.asyncio
    async def test_blind_activation(self):
        host = FakeHost(focus_signal=False)
        first = (await spawned(host)).pane_id

        report = await make_restorer(host).restore_panes(first, GRID)

        assert report.complete
        assert len(report.executed) == 3

    @pytest.mark.asyncio
    async def test_restores_first_pane_title(self):
        host = FakeHost()
        first = (await spawned(host)).pane_id
        titled = PaneRecord(
            id="0", rectangle=Rectangle(top=0, left=0, width=80, height=24), title="shell"
        )

        await make_restorer(host).restore_panes(first, tab(titled))

        assert host.pane_titles[first] == "shell"


class TestRestoreTab:
    @pytest.mark.asyncio
    async def test_new_tab_in_window(self):
        host = FakeHost()
        window = await spawned(host)

        result = await make_restorer(host).restore_tab(window.window_id, SIDE_BY_SIDE_OVER_WIDE)

        assert result.is_ok()
        report = result.value
        assert report.tab_id in host.windows[window.window_id]
        assert report.tab_id != window.tab_id
        assert host.tab_titles[report.tab_id] == "work"
        assert host.cwds[report.panes[0]] == "/home/user"
        assert metrics.get_counter("tab.restore", {"result": "ok"}) == 1

    @pytest.mark.asyncio
    async def test_unknown_window(self):
        host = FakeHost()

        result = await make_restorer(host).restore_tab("nowhere", GRID)

        assert result.is_err()
        assert result.error.kind is ErrorKind.TAB_CREATION_FAILURE

    @pytest.mark.asyncio
    async def test_empty_tab(self):
        host = FakeHost()
        window = await spawned(host)

        result = await make_restorer(host).restore_tab(window.window_id, tab())

        assert result.is_err()
        assert result.error.kind is ErrorKind.MISSING_DEPENDENCY

    @pytest.mark.asyncio
    async def test_partial_restore_counted(self):
        host = FakeHost()
        window = await spawned(host)
        host.fail_split.add(window.pane_id)

        result = await make_restorer(host).restore_into(window.tab_id, window.pane_id, GRID)

        assert result.is_ok()
        assert not result.value.complete
        assert metrics.get_counter("tab.restore", {"result": "partial"}) == 1
