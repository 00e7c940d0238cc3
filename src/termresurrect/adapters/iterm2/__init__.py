"""iTerm2 交互模块"""

from termresurrect.adapters.iterm2.adapter import ITerm2Host
from termresurrect.adapters.iterm2.layout import get_layout, traverse_node
from termresurrect.adapters.iterm2.naming import get_name, set_session_name, set_tab_name

__all__ = [
    "ITerm2Host",
    "get_layout",
    "traverse_node",
    # Naming
    "get_name",
    "set_session_name",
    "set_tab_name",
]
