"""termresurrect 配置

配置分为以下几类：
- 终端配置：后端选择、默认 domain
- 激活配置：pane 激活的等待与确认参数
- 恢复配置：tab 创建后的等待、进程恢复
- 持久化配置：状态目录、文件名、版本
- 日志配置
"""

import os
from pathlib import Path

# === 终端配置 ===
TERMINAL_HOST = os.environ.get("TERMRESURRECT_HOST", "auto")  # auto, tmux, iterm2
DEFAULT_DOMAIN = "local"  # 本地 domain 名称

# === 用户配置 ===
USER_NAME_VAR = "user.name"  # iTerm2 用户自定义名称变量名

# === 激活配置 ===
ACTIVATION_SETTLE_SECONDS = 0.3  # 无法确认焦点时，激活前后的固定等待（秒）
ACTIVATION_TIMEOUT_SECONDS = 1.0  # 焦点确认超时（秒）
ACTIVATION_POLL_INTERVAL = 0.05  # 焦点确认轮询间隔（秒）

# === 恢复配置 ===
TAB_SETTLE_SECONDS = 0.5  # 新 tab 激活后等待（秒）
RESTORE_PROCESSES = False  # 是否重新启动保存的前台进程
RESTORABLE_PROCESSES = {"vim", "nvim", "htop", "top", "less", "man", "tail"}  # 允许重启的进程

# === 持久化配置 ===
STATE_DIR = Path(
    os.environ.get(
        "TERMRESURRECT_STATE_DIR",
        Path.home() / ".local" / "state" / "termresurrect",
    )
)
STATE_FILE_PREFIX = "workspace_state_"
PERSIST_VERSION = 1

# === 日志配置 ===
LOG_LEVEL = os.environ.get("TERMRESURRECT_LOG_LEVEL", "INFO")  # 日志级别
