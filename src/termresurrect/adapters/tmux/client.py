"""Async wrapper around the tmux command line.

Every call shells out to ``tmux`` and returns ``None``/``False`` on failure
instead of raising; callers decide what a missing answer means.
"""

import asyncio
import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)

# Paths and titles may contain colons, never tabs
_FIELD_SEP = "\t"

# tmux accepts 1%..99% for split sizes
_MIN_SPLIT_PERCENT = 1
_MAX_SPLIT_PERCENT = 99

# -P output of new-session / new-window
_SPAWN_FORMAT = _FIELD_SEP.join(["#{session_name}", "#{window_id}", "#{pane_id}"])


def _flag(value: str) -> bool:
    return value == "1"


def _optional_int(value: str) -> int | None:
    return int(value) if value else None


# (key, tmux format, converter)
_WINDOW_FIELDS: list[tuple[str, str, Callable[[str], object]]] = [
    ("session_id", "#{session_id}", str),
    ("session_name", "#{session_name}", str),
    ("window_id", "#{window_id}", str),
    ("window_name", "#{window_name}", str),
    ("width", "#{window_width}", int),
    ("height", "#{window_height}", int),
    ("active", "#{window_active}", _flag),
]

_PANE_FIELDS: list[tuple[str, str, Callable[[str], object]]] = [
    ("pane_id", "#{pane_id}", str),
    ("session_id", "#{session_id}", str),
    ("window_id", "#{window_id}", str),
    ("pane_index", "#{pane_index}", int),
    ("pane_name", "#{pane_title}", str),
    ("left", "#{pane_left}", int),
    ("top", "#{pane_top}", int),
    ("width", "#{pane_width}", int),
    ("height", "#{pane_height}", int),
    ("active", "#{pane_active}", _flag),
    ("path", "#{pane_current_path}", str),
    ("current_command", "#{pane_current_command}", str),
    ("pane_pid", "#{pane_pid}", _optional_int),
]


def _format(fields) -> str:
    return _FIELD_SEP.join(fmt for _, fmt, _ in fields)


def _parse_rows(output: str | None, fields, required: int) -> list[dict]:
    """Parse tab separated ``-F`` output.

    Rows with fewer than ``required`` columns or unparsable values are skipped.
    Trailing optional columns that come back empty are left out of the dict.
    """
    if not output:
        return []

    rows = []
    for line in output.strip().split("\n"):
        if not line:
            continue
        parts = line.split(_FIELD_SEP)
        if len(parts) < required:
            continue
        try:
            row = {}
            for (key, _, convert), raw in zip(fields, parts):
                value = convert(raw)
                if value is not None:
                    row[key] = value
        except ValueError as e:
            logger.warning(f"Failed to parse tmux line: {line!r}: {e}")
            continue
        rows.append(row)
    return rows


def session_name_for(name: str) -> str:
    """The session name tmux will actually use; it rewrites ``.`` and ``:`` to ``_``."""
    return name.replace(".", "_").replace(":", "_")


def ratio_to_percent(size_ratio: float) -> int:
    """Convert a split size ratio into a tmux ``-l N%`` percentage."""
    percent = round(size_ratio * 100)
    return max(_MIN_SPLIT_PERCENT, min(_MAX_SPLIT_PERCENT, percent))


class TmuxClient:
    """Subprocess client for one tmux server.

    Args:
        socket_path: ``-S`` socket of the server; the default server when None.
    """

    def __init__(self, socket_path: str | None = None):
        self._socket_path = socket_path

    async def run(self, *args: str) -> str | None:
        """Run ``tmux [-S socket] args...``.

        Returns:
            stdout on exit status 0, otherwise None.
        """
        cmd = ["tmux"]
        if self._socket_path:
            cmd += ["-S", self._socket_path]
        cmd += args

        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
            stdout, stderr = await proc.communicate()
        except Exception as e:
            logger.error(f"tmux subprocess error: {e}")
            return None

        if proc.returncode != 0:
            logger.warning(f"tmux {args[0] if args else ''} failed: {stderr.decode().strip()}")
            return None
        return stdout.decode()

    async def list_windows(self) -> list[dict]:
        """All windows of all sessions, keyed as in ``_WINDOW_FIELDS``."""
        output = await self.run("list-windows", "-a", "-F", _format(_WINDOW_FIELDS))
        return _parse_rows(output, _WINDOW_FIELDS, required=len(_WINDOW_FIELDS))

    async def list_panes(self) -> list[dict]:
        """All panes of all sessions, keyed as in ``_PANE_FIELDS``.

        ``left``/``top``/``width``/``height`` are in cells; ``pane_pid`` is absent
        when tmux does not report it.
        """
        output = await self.run("list-panes", "-a", "-F", _format(_PANE_FIELDS))
        return _parse_rows(output, _PANE_FIELDS, required=len(_PANE_FIELDS) - 1)

    async def split_window(
        self,
        pane_id: str,
        horizontal: bool,
        percent: int,
        cwd: str | None = None,
    ) -> str | None:
        """Split ``pane_id``; the new pane gets ``percent`` of its space.

        Args:
            horizontal: side by side (``-h``) when True, stacked (``-v``) otherwise

        Returns:
            ID of the new pane, or None.
        """
        args = ["split-window", "-h" if horizontal else "-v", "-t", pane_id, "-l", f"{percent}%"]
        if cwd:
            args += ["-c", cwd]
        args += ["-P", "-F", "#{pane_id}"]
        output = await self.run(*args)
        return (output or "").strip() or None

    async def has_session(self, name: str) -> bool:
        return await self.run("has-session", "-t", f"={name}") is not None

    async def new_session(self, name: str, cwd: str | None = None) -> tuple[str, str, str] | None:
        """Create a detached session; returns (session_name, window_id, pane_id)."""
        args = ["new-session", "-d", "-s", name]
        if cwd:
            args += ["-c", cwd]
        args += ["-P", "-F", _SPAWN_FORMAT]
        return self._parse_spawned(await self.run(*args))

    async def new_window(self, session: str, cwd: str | None = None) -> tuple[str, str, str] | None:
        """Append a window to ``session``; returns (session_name, window_id, pane_id)."""
        args = ["new-window", "-t", f"{session}:"]
        if cwd:
            args += ["-c", cwd]
        args += ["-P", "-F", _SPAWN_FORMAT]
        return self._parse_spawned(await self.run(*args))

    @staticmethod
    def _parse_spawned(output: str | None) -> tuple[str, str, str] | None:
        if not output:
            return None
        parts = output.strip().split(_FIELD_SEP)
        if len(parts) < 3:
            logger.warning(f"Unexpected tmux output: {output!r}")
            return None
        return parts[0], parts[1], parts[2]

    async def select_pane(self, pane_id: str) -> bool:
        return await self.run("select-pane", "-t", pane_id) is not None

    async def select_window(self, target: str) -> bool:
        return await self.run("select-window", "-t", target) is not None

    async def get_pane_field(self, pane_id: str, field: str) -> str | None:
        """Expand one format (e.g. ``#{pane_active}``) for a pane.

        Returns:
            The value, or None when the pane does not exist.
        """
        output = await self.run("display-message", "-t", pane_id, "-p", field)
        return None if output is None else output.strip()

    async def rename_pane(self, pane_id: str, name: str) -> bool:
        return await self.run("select-pane", "-t", pane_id, "-T", name) is not None

    async def rename_window(self, target: str, name: str) -> bool:
        return await self.run("rename-window", "-t", target, name) is not None

    async def send_keys(self, pane_id: str, text: str) -> bool:
        """Type ``text`` literally, then press Enter."""
        if await self.run("send-keys", "-t", pane_id, "-l", text) is None:
            return False
        return await self.run("send-keys", "-t", pane_id, "Enter") is not None

    async def display_message(self, message: str) -> bool:
        """Show a message on the attached client's status line."""
        return await self.run("display-message", message) is not None
