"""规格树数据模型

包含：
- MenubarState: 菜单栏三态
- SourceTag: 窗口来源标记
- FdPass: fd 转发条目
- TabSpec / WindowSpec: 待打开的 tab / 窗口
- GlobalDefaults: 进程级默认值（仅在创建窗口时应用）
- TerminalOptions: 解析结果
"""

import os
from dataclasses import asdict, dataclass, field
from enum import Enum


class MenubarState(Enum):
    """菜单栏可见性（三态）"""
    UNSET = "unset"
    SHOWN = "shown"
    HIDDEN = "hidden"

    @property
    def forced(self) -> bool:
        return self != MenubarState.UNSET


class SourceTag(Enum):
    """窗口来源

    - CLI: 命令行直接创建
    - DEFAULT: --load-config 加载的文档
    - SESSION: 会话管理恢复的文档
    """
    CLI = 0
    DEFAULT = 1
    SESSION = 2


@dataclass(frozen=True)
class FdPass:
    """fd 转发条目

    Attributes:
        index: 在 tab 转发列表中的序号
        fd: 子进程中的目标 fd
    """
    index: int
    fd: int


@dataclass
class TabSpec:
    """一个待打开的终端 tab

    None 字段表示使用 GlobalDefaults 或消费方默认值。
    """
    profile: str | None = None
    exec_argv: list[str] | None = None
    title: str | None = None
    working_dir: str | None = None
    zoom: float = 1.0
    zoom_set: bool = False
    active: bool = False
    wait: bool = False
    fd_passes: list[FdPass] = field(default_factory=list)

    def has_fd(self, fd: int) -> bool:
        return any(p.fd == fd for p in self.fd_passes)

    def add_fd(self, fd: int) -> FdPass:
        """追加 fd 转发，分配下一个序号"""
        entry = FdPass(index=len(self.fd_passes), fd=fd)
        self.fd_passes.append(entry)
        return entry

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class WindowSpec:
    """一个待打开的窗口

    创建时总是带一个 tab。
    """
    tabs: list[TabSpec] = field(default_factory=lambda: [TabSpec()])
    role: str | None = None
    geometry: str | None = None
    menubar: MenubarState = MenubarState.UNSET
    fullscreen: bool = False
    maximized: bool = False
    implicit_first_window: bool = False
    source_tag: SourceTag = SourceTag.CLI

    def to_dict(self) -> dict:
        return {
            "tabs": [tab.to_dict() for tab in self.tabs],
            "role": self.role,
            "geometry": self.geometry,
            "menubar": self.menubar.value,
            "fullscreen": self.fullscreen,
            "maximized": self.maximized,
            "implicit_first_window": self.implicit_first_window,
            "source_tag": self.source_tag.value,
        }


@dataclass
class GlobalDefaults:
    """进程级默认值

    在第一个窗口出现之前由窗口/tab 级选项写入。
    role 和强制的菜单栏状态只会被下一个创建的窗口消费一次。
    """
    profile: str | None = None
    working_dir: str | None = None
    title: str | None = None
    role: str | None = None
    geometry: str | None = None
    menubar: MenubarState = MenubarState.UNSET
    fullscreen: bool = False
    maximize: bool = False
    zoom: float = 1.0
    zoom_set: bool = False

    def to_dict(self) -> dict:
        data = asdict(self)
        data["menubar"] = self.menubar.value
        return data


def apply_defaults(defaults: GlobalDefaults, window: WindowSpec) -> WindowSpec:
    """创建窗口时应用默认值（只在创建时调用一次）

    - role: 移入窗口后清空
    - geometry: 窗口未设置时复制
    - menubar: 强制状态移入窗口后清空
    - fullscreen/maximize: OR 合并

    Args:
        defaults: 默认值（role/menubar 会被消费）
        window: 新建的窗口

    Returns:
        同一个 window
    """
    if defaults.role is not None:
        window.role = defaults.role
        defaults.role = None

    if window.geometry is None:
        window.geometry = defaults.geometry

    if defaults.menubar.forced:
        window.menubar = defaults.menubar
        defaults.menubar = MenubarState.UNSET

    window.fullscreen = window.fullscreen or defaults.fullscreen
    window.maximized = window.maximized or defaults.maximize
    return window


def _env_startup_id() -> str | None:
    startup_id = os.environ.get("DESKTOP_STARTUP_ID")
    return startup_id or None


@dataclass
class TerminalOptions:
    """解析结果

    Attributes:
        windows: 按创建顺序排列的窗口规格
        defaults: 进程级默认值
        exec_argv: 尚未挂到 tab 上的命令（-x/--execute, --, 或早于窗口的 --command）
        execute: 命令是否来自 -x/--execute
        any_wait: 是否已经有 tab 使用 --wait
    """
    windows: list[WindowSpec] = field(default_factory=list)
    defaults: GlobalDefaults = field(default_factory=GlobalDefaults)
    exec_argv: list[str] | None = None
    execute: bool = False
    any_wait: bool = False
    app_id: str | None = None
    show_preferences: bool = False
    print_environment: bool = False
    startup_id: str | None = field(default_factory=_env_startup_id)
    sm_client_id: str | None = None
    sm_config_prefix: str | None = None
    sm_client_disable: bool = False

    @classmethod
    def new(cls, cwd: str | None = None) -> "TerminalOptions":
        """创建新的解析结果，默认工作目录为当前目录"""
        options = cls()
        options.defaults.working_dir = cwd if cwd is not None else os.getcwd()
        return options

    def to_dict(self) -> dict:
        return {
            "windows": [window.to_dict() for window in self.windows],
            "defaults": self.defaults.to_dict(),
            "exec_argv": self.exec_argv,
            "execute": self.execute,
            "app_id": self.app_id,
            "show_preferences": self.show_preferences,
            "print_environment": self.print_environment,
            "startup_id": self.startup_id,
            "sm_client_id": self.sm_client_id,
            "sm_config_prefix": self.sm_config_prefix,
            "sm_client_disable": self.sm_client_disable,
        }
