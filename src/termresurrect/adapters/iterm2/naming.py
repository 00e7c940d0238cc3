"""iTerm2 对象的显式名称

capture 只记录用户设置过的名称（user.name 或 iTerm2 的 override），
自动生成的标题（当前进程名等）不保存，恢复后由 iTerm2 自行维护。
恢复时同时写 user.name 和 iTerm2 内置名称。
"""

import logging

import iterm2

from termresurrect import config

logger = logging.getLogger(__name__)

# 各类对象在 user.name 之后查找的内置变量
_BUILTIN_NAME_VARS = {
    iterm2.Session: "name",
    iterm2.Tab: "titleOverride",
    iterm2.Window: "titleOverride",
}


async def get_name(obj: iterm2.Session | iterm2.Tab | iterm2.Window, default: str = "") -> str:
    """user.name > 内置名称变量 > default"""
    names = [config.USER_NAME_VAR]
    for cls, var in _BUILTIN_NAME_VARS.items():
        if isinstance(obj, cls):
            names.append(var)
            break

    for var in names:
        value = await obj.async_get_variable(var)
        if value:
            return value
    return default


async def set_session_name(session: iterm2.Session, name: str) -> bool:
    try:
        await session.async_set_variable(config.USER_NAME_VAR, name)
        await session.async_set_name(name)
    except Exception as e:
        logger.warning(f"[naming] Could not name session {session.session_id}: {e}")
        return False
    return True


async def set_tab_name(tab: iterm2.Tab, name: str) -> bool:
    try:
        await tab.async_set_variable(config.USER_NAME_VAR, name)
        await tab.async_set_title(name)
    except Exception as e:
        logger.warning(f"[naming] Could not name tab {tab.tab_id}: {e}")
        return False
    return True
