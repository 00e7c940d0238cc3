"""Host factory for creating terminal hosts."""

import logging
import os
from typing import TYPE_CHECKING

from termresurrect import config

if TYPE_CHECKING:
    import iterm2

    from termresurrect.adapters.base import PaneHost

logger = logging.getLogger(__name__)


def detect_terminal_type() -> str:
    """Detect terminal type from environment.

    Returns:
        "tmux" if $TMUX is set, otherwise "iterm2"
    """
    if os.environ.get("TMUX"):
        return "tmux"
    return "iterm2"


def create_host(
    host_type: str | None = None,
    connection: "iterm2.Connection | None" = None,
    socket_path: str | None = None,
) -> "PaneHost":
    """Create a terminal host.

    Args:
        host_type: Host type ("iterm2", "tmux", "auto"). Default from config.
        connection: iTerm2 connection (required for iterm2 host)
        socket_path: Tmux socket path (optional for tmux host)

    Returns:
        PaneHost instance

    Raises:
        ValueError: If host type is unknown or required connection missing
    """
    if host_type is None:
        host_type = config.TERMINAL_HOST

    if host_type == "auto":
        host_type = detect_terminal_type()
        logger.info(f"Auto-detected terminal type: {host_type}")

    if host_type == "iterm2":
        if connection is None:
            raise ValueError("iTerm2 host requires connection")
        from termresurrect.adapters.iterm2 import ITerm2Host

        return ITerm2Host(connection)

    if host_type == "tmux":
        from termresurrect.adapters.tmux import TmuxHost

        return TmuxHost(socket_path=socket_path)

    raise ValueError(f"Unknown host type: {host_type}")
