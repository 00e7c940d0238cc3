"""Tmux host for termresurrect."""

from .adapter import TmuxHost
from .client import TmuxClient
from .layout import TmuxLayoutBuilder

__all__ = ["TmuxHost", "TmuxClient", "TmuxLayoutBuilder"]
