"""termresurrect 命令行入口

    termresurrect save [NAME]      保存 workspace（默认：活动 pane 所在 workspace）
    termresurrect restore NAME     恢复 workspace
    termresurrect list             列出已保存的 workspace
    termresurrect plan NAME        打印每个 tab 的 split 计划（不连接终端）
    termresurrect delete NAME      删除保存的 workspace
"""

import argparse
import asyncio
import sys
from collections.abc import Awaitable, Callable
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from . import config, persistence
from .adapters.base import PaneHost
from .adapters.factory import create_host, detect_terminal_type
from .capture import DEFAULT_WORKSPACE, default_workspace_name
from .layout.geometry import check_tiling
from .layout.planner import plan_splits
from .preview import render_svg, render_tab
from .restore.workspace import WorkspaceRestorer, save_workspace
from .telemetry import get_logger, setup_logging

logger = get_logger(__name__)

console = Console(highlight=False)
err_console = Console(stderr=True, highlight=False)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="termresurrect", description="Save and restore terminal pane layouts"
    )
    parser.add_argument(
        "--host",
        choices=["auto", "tmux", "iterm2"],
        default=config.TERMINAL_HOST,
        help="terminal backend",
    )
    parser.add_argument("--socket", "-S", help="tmux socket path")
    parser.add_argument("--state-dir", type=Path, default=None, help="state file directory")
    parser.add_argument("--log-level", default=config.LOG_LEVEL)

    sub = parser.add_subparsers(dest="command", required=True)
    save = sub.add_parser("save", help="save a workspace")
    save.add_argument("name", nargs="?")
    restore = sub.add_parser("restore", help="restore a saved workspace")
    restore.add_argument("name")
    sub.add_parser("list", help="list saved workspaces")
    plan = sub.add_parser("plan", help="print the split plan of a saved workspace")
    plan.add_argument("name")
    plan.add_argument("--preview", action="store_true", help="draw the saved layout of each tab")
    plan.add_argument("--svg", type=Path, help="write one layout preview SVG per tab into DIR")
    delete = sub.add_parser("delete", help="delete a saved workspace")
    delete.add_argument("name")
    return parser


async def _save(host: PaneHost, args: argparse.Namespace) -> int:
    name = args.name
    if not name:
        layout = await host.get_layout()
        name = default_workspace_name(layout) if layout else DEFAULT_WORKSPACE
    result = await save_workspace(host, name, args.state_dir)
    if result.is_err():
        err_console.print(f"[red]save failed:[/red] {escape(str(result.error))}")
        return 1
    console.print(f"saved {escape(name)} ({result.value.pane_count()} panes)")
    return 0


async def _restore(host: PaneHost, args: argparse.Namespace) -> int:
    restorer = WorkspaceRestorer(host, state_dir=args.state_dir)
    result = await restorer.restore_workspace(args.name)
    if result.is_err():
        err_console.print(f"[red]restore failed:[/red] {escape(str(result.error))}")
        return 1
    return 0


def _run_with_host(args: argparse.Namespace, action: Callable[..., Awaitable[int]]) -> int:
    host_type = detect_terminal_type() if args.host == "auto" else args.host

    if host_type == "iterm2":
        import iterm2

        status = {"code": 1}

        async def main(connection: iterm2.Connection):
            host = create_host("iterm2", connection=connection)
            status["code"] = await action(host, args)

        iterm2.run_until_complete(main)
        return status["code"]

    host = create_host(host_type, socket_path=args.socket)
    return asyncio.run(action(host, args))


def _list(args: argparse.Namespace) -> int:
    table = Table("workspace", "file", box=None)
    for file_name, label in persistence.list_workspaces(args.state_dir):
        table.add_row(escape(label), file_name)
    console.print(table)
    return 0


def _plan(args: argparse.Namespace) -> int:
    record = persistence.load(persistence.state_file_path(args.name, args.state_dir))
    if record is None:
        err_console.print(f"no saved workspace named {escape(repr(args.name))}")
        return 1

    if args.svg:
        args.svg.mkdir(parents=True, exist_ok=True)

    for w, window in enumerate(record.windows):
        for t, tab in enumerate(window.tabs):
            heading = f"window {w} tab {tab.id} {tab.title or ''}".rstrip()
            console.print(escape(heading), style="bold")
            for problem in check_tiling(tab.panes):
                console.print(f"  [yellow]! {escape(problem)}[/yellow]")

            table = Table("parent", "direction", "pane", "ratio", box=None, padding=(0, 2))
            for step in plan_splits(tab):
                table.add_row(
                    str(step.parent_index),
                    step.direction.value,
                    escape(step.target.id),
                    f"{step.size_ratio:.3f}",
                )
            if table.row_count:
                console.print(table)

            if args.preview:
                console.print(render_tab(tab))
            if args.svg:
                path = args.svg / f"{persistence.escape_file_name(record.name)}_{w}_{t}.svg"
                path.write_text(render_svg(tab, title=heading), encoding="utf-8")
                logger.info(f"[Plan] Wrote preview {path}")
    return 0


def _delete(args: argparse.Namespace) -> int:
    path = persistence.state_file_path(args.name, args.state_dir)
    return 0 if persistence.delete(path) else 1


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)

    if args.command == "list":
        return _list(args)
    if args.command == "plan":
        return _plan(args)
    if args.command == "delete":
        return _delete(args)
    if args.command == "save":
        return _run_with_host(args, _save)
    return _run_with_host(args, _restore)


if __name__ == "__main__":
    sys.exit(main())
