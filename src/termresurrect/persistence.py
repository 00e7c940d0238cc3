"""Workspace 状态文件

每个 workspace 一个 JSON 文件，位于 config.STATE_DIR：

    workspace_state_<转义后的名称>.json
    {"version": 1, "saved_at": 1700000000.0, "workspace": {...}, "checksum": "<sha256>"}

checksum 覆盖除 checksum 以外的全部内容。写入先落到同目录临时文件再 rename，
读取时任何损坏（版本、checksum、JSON、字段）都只告警并返回 None。
"""

import hashlib
import json
import os
import re
import tempfile
import time
from pathlib import Path

from . import config
from .layout.models import WorkspaceRecord
from .telemetry import get_logger, metrics

logger = get_logger(__name__)

_ESCAPED_BYTE = re.compile(r"(?:\+[0-9A-F]{2})+")
_SUFFIX = ".json"


class _CorruptState(Exception):
    def __init__(self, reason: str, detail: str):
        super().__init__(detail)
        self.reason = reason


def escape_file_name(name: str) -> str:
    """转义 workspace 名，ASCII 字母数字以外的字符按 UTF-8 字节写成 +XX"""
    return "".join(
        char if char.isascii() and char.isalnum()
        else "".join(f"+{byte:02X}" for byte in char.encode("utf-8"))
        for char in name
    )


def unescape_file_name(escaped: str) -> str:
    def _decode(match: re.Match) -> str:
        raw = bytes.fromhex(match.group(0).replace("+", ""))
        return raw.decode("utf-8", errors="replace")

    return _ESCAPED_BYTE.sub(_decode, escaped)


def state_file_path(name: str, state_dir: Path | None = None) -> Path:
    state_dir = state_dir or config.STATE_DIR
    return state_dir / f"{config.STATE_FILE_PREFIX}{escape_file_name(name)}{_SUFFIX}"


def _serialize(data: dict) -> bytes:
    return json.dumps(data, ensure_ascii=False, indent=2).encode("utf-8")


def _digest(data: dict) -> str:
    return hashlib.sha256(_serialize(data)).hexdigest()


def _encode(workspace: WorkspaceRecord, version: int) -> bytes:
    body = {"version": version, "saved_at": time.time(), "workspace": workspace.to_dict()}
    return _serialize({**body, "checksum": _digest(body)})


def _decode(content: bytes, version: int) -> WorkspaceRecord:
    """Raises: _CorruptState"""
    try:
        data = json.loads(content.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise _CorruptState("json", f"invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise _CorruptState("schema", f"top level is {type(data).__name__}, not an object")

    if data.get("version", 1) != version:
        raise _CorruptState("version", f"version {data.get('version')} != {version}")

    checksum = data.pop("checksum", None)
    if checksum and _digest(data) != checksum:
        raise _CorruptState("checksum", "checksum mismatch")

    try:
        return WorkspaceRecord.from_dict(data.get("workspace", {}))
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        raise _CorruptState("schema", f"invalid workspace data: {e!r}") from e


def _atomic_write(path: Path, payload: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, temp_path = tempfile.mkstemp(prefix="termresurrect_state_", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(payload)
        os.replace(temp_path, path)
    except BaseException:
        if os.path.exists(temp_path):
            os.unlink(temp_path)
        raise


def save(
    workspace: WorkspaceRecord,
    path: Path | None = None,
    version: int = config.PERSIST_VERSION,
) -> bool:
    """写入状态文件

    Args:
        workspace: 要保存的 workspace
        path: 目标文件，默认 state_file_path(workspace.name)
        version: 写入的格式版本

    Returns:
        是否成功；失败记录 persist.error{op=save}
    """
    path = path or state_file_path(workspace.name)
    try:
        _atomic_write(path, _encode(workspace, version))
    except (OSError, TypeError, ValueError) as e:
        logger.error(f"[Persist] Could not write {path}: {e}")
        metrics.inc("persist.error", {"op": "save"})
        return False

    logger.info(
        f"[Persist] Saved workspace {workspace.name!r} to {path.name}: "
        f"{len(workspace.windows)} windows, {workspace.pane_count()} panes"
    )
    return True


def load(path: Path, version: int = config.PERSIST_VERSION) -> WorkspaceRecord | None:
    """读取状态文件，不存在或损坏时返回 None"""
    try:
        content = path.read_bytes()
    except FileNotFoundError:
        logger.debug(f"[Persist] No state file at {path}")
        return None
    except OSError as e:
        logger.error(f"[Persist] Could not read {path}: {e}")
        metrics.inc("persist.error", {"op": "load", "reason": "io"})
        return None

    try:
        workspace = _decode(content, version)
    except _CorruptState as e:
        logger.warning(f"[Persist] Ignoring {path.name}: {e}")
        metrics.inc("persist.error", {"op": "load", "reason": e.reason})
        return None
    except Exception as e:
        logger.error(f"[Persist] Load of {path.name} failed: {e!r}")
        metrics.inc("persist.error", {"op": "load", "reason": "unknown"})
        return None

    logger.info(
        f"[Persist] Loaded workspace {workspace.name!r}: "
        f"{len(workspace.windows)} windows, {workspace.pane_count()} panes"
    )
    return workspace


def list_workspaces(state_dir: Path | None = None) -> list[tuple[str, str]]:
    """已保存的 workspace

    Returns:
        [(文件名, workspace 名)]，按文件名排序
    """
    state_dir = state_dir or config.STATE_DIR
    if not state_dir.is_dir():
        logger.info(f"[Persist] State directory not found: {state_dir}")
        return []

    prefix = config.STATE_FILE_PREFIX
    return [
        (path.name, unescape_file_name(path.name[len(prefix) : -len(_SUFFIX)]))
        for path in sorted(state_dir.iterdir())
        if path.is_file() and path.name.startswith(prefix) and path.name.endswith(_SUFFIX)
    ]


def delete(path: Path) -> bool:
    """删除状态文件，文件不存在也算成功"""
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        logger.error(f"[Persist] Could not delete {path}: {e}")
        return False
    logger.info(f"[Persist] Deleted {path}")
    return True
