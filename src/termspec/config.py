"""termspec 配置

配置分为以下几类：
- 缩放配置：zoom 因子范围
- 会话文件配置：持久化文档的 group/key 名称与版本
- 行为配置：新终端打开方式
- 日志配置：日志级别、默认 verbosity
"""

import os

# === 缩放配置 ===
ZOOM_MINIMUM = 1.0 / (1.2**7)  # 最小缩放因子 (≈0.279)
ZOOM_MAXIMUM = 1.2**7  # 最大缩放因子 (≈3.583)
ZOOM_EPSILON = 1e-6  # 夹取判断余量

# === 会话文件配置 ===
CONFIG_GROUP = "Terminal Configuration"  # 顶层 group（必须存在）
CONFIG_PROP_VERSION = "Version"
CONFIG_PROP_COMPAT_VERSION = "CompatVersion"
CONFIG_PROP_WINDOWS = "Windows"  # window group 名称列表

CONFIG_WINDOW_PROP_TABS = "Tabs"  # tab group 名称列表
CONFIG_WINDOW_PROP_ACTIVE_TAB = "ActiveTerminal"
CONFIG_WINDOW_PROP_ROLE = "Role"
CONFIG_WINDOW_PROP_GEOMETRY = "Geometry"
CONFIG_WINDOW_PROP_FULLSCREEN = "Fullscreen"
CONFIG_WINDOW_PROP_MAXIMIZED = "Maximized"
CONFIG_WINDOW_PROP_MENUBAR_VISIBLE = "MenubarVisible"

CONFIG_TERMINAL_PROP_PROFILE_ID = "ProfileID"
CONFIG_TERMINAL_PROP_WORKING_DIRECTORY = "WorkingDirectory"
CONFIG_TERMINAL_PROP_TITLE = "Title"
CONFIG_TERMINAL_PROP_COMMAND = "Command"

CONFIG_VERSION = 1  # 写出的版本
CONFIG_COMPAT_VERSION = 1  # 可读取的最高兼容版本

# === 行为配置 ===
# "tab": 新终端默认以 tab 打开（隐式首窗口）；"window": 总是新窗口
NEW_TERMINAL_MODE = os.environ.get("TERMSPEC_NEW_TERMINAL_MODE", "tab")

# === Profile 配置 ===
PROFILES_FILE = os.environ.get(
    "TERMSPEC_PROFILES_FILE",
    os.path.join(os.path.expanduser("~"), ".config", "termspec", "profiles.json"),
)
BUILTIN_DEFAULT_PROFILE = "b1dcc9dd-5262-4d8d-a863-c897e6d979b9"  # 无 profile 文件时的默认 profile

# === 日志配置 ===
LOG_LEVEL = os.environ.get("TERMSPEC_LOG_LEVEL", "INFO")  # 日志级别
DEFAULT_VERBOSITY = 1  # 0=quiet, 1=notice, 2+=detail

# === 输出配置 ===
OUTPUT_FORMAT = os.environ.get("TERMSPEC_OUTPUT", "tree")  # "tree" | "json"

VERSION = "0.1.0"
