"""OptionDigester - 增量选项消化器

职责：
- 按命令行顺序消费 (option, value) 事件
- 维护窗口/tab 列表和指向最近创建的窗口/tab 的游标
- 窗口/tab 级选项作用于游标；尚无窗口时写入 GlobalDefaults
- finalize(): 挂载缓冲的命令，检查 -x 是否缺少命令

不负责：
- 词法解析（见 parser.py）
- 打开窗口或启动进程
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from ..core.shell import split_argv
from ..errors import (
    BadValueError,
    DuplicateOptionError,
    MissingCommandError,
    ProfileNotFoundError,
    ShellSyntaxError,
    UnsupportedOptionError,
)
from ..models import (
    MenubarState,
    SourceTag,
    TabSpec,
    TerminalOptions,
    WindowSpec,
    apply_defaults,
)
from ..profiles import ProfileResolver
from ..telemetry import Diagnostics, get_logger
from .merger import load_config, merge_config
from .prescan import deprecated_command_option_notice
from .values import parse_fd, parse_zoom, validate_app_id

logger = get_logger(__name__)

SHORT_OPTIONS = {
    "e": "command",
    "t": "title",
    "p": "print-environment",
    "v": "verbose",
    "q": "quiet",
}


def canonical_option_name(option: str) -> str:
    """"--zoom" -> "zoom", "-e" -> "command"."""
    name = option.lstrip("-")
    if not option.startswith("--") and name in SHORT_OPTIONS:
        return SHORT_OPTIONS[name]
    return name


@dataclass
class Cursor:
    """指向最近创建的窗口/tab 的位置（None 表示还没有窗口）"""

    window_index: int | None = None
    tab_index: int | None = None


class OptionDigester:
    """增量选项消化器

    使用示例:
        digester = OptionDigester(TerminalOptions.new(), resolver, Diagnostics())
        digester.handle("--window", None)
        digester.handle("--title", "logs")
        digester.finalize()
    """

    def __init__(
        self,
        options: TerminalOptions,
        resolver: ProfileResolver,
        diagnostics: Diagnostics | None = None,
    ):
        self.options = options
        self.resolver = resolver
        self.diagnostics = diagnostics or Diagnostics()
        self.cursor = Cursor()
        self._sync_cursor()

        self._handlers: dict[str, Callable[[str, str | None], None]] = {
            # 全局选项
            "app-id": self.on_app_id,
            "disable-factory": self.on_unsupported_fatal,
            "load-config": self.on_load_config,
            "save-config": self.on_unsupported,
            "preferences": self.on_preferences,
            "print-environment": self.on_print_environment,
            "verbose": self.on_verbose,
            "quiet": self.on_quiet,
            # 创建窗口/tab
            "window": self.on_window,
            "tab": self.on_tab,
            # 窗口级
            "show-menubar": self.on_show_menubar,
            "hide-menubar": self.on_hide_menubar,
            "maximize": self.on_maximize,
            "full-screen": self.on_fullscreen,
            "geometry": self.on_geometry,
            "role": self.on_role,
            "active": self.on_active,
            # tab 级
            "command": self.on_command,
            "profile": self.on_profile,
            "title": self.on_title,
            "working-directory": self.on_working_directory,
            "wait": self.on_wait,
            "fd": self.on_fd,
            "zoom": self.on_zoom,
            # 内部选项
            "profile-id": self.on_profile_id,
            "window-with-profile": self.on_window,
            "tab-with-profile": self.on_tab,
            "window-with-profile-internal-id": self.on_window,
            "tab-with-profile-internal-id": self.on_tab,
            "default-working-directory": self.on_default_working_directory,
            "use-factory": self.on_unsupported,
            "startup-id": self.on_startup_id,
            # 会话管理
            "sm-client-disable": self.on_sm_client_disable,
            "sm-disable": self.on_sm_client_disable,
            "sm-client-state-file": self.on_load_config,
            "sm-client-id": self.on_sm_client_id,
            "sm-config-prefix": self.on_sm_config_prefix,
        }

    @property
    def option_names(self) -> list[str]:
        return list(self._handlers)

    def handle(self, option: str, value: str | None = None) -> None:
        """分发一个选项事件

        Args:
            option: 选项名（"--zoom", "-e", "zoom" 均可）
            value: 选项值；无参数选项为 None

        Raises:
            OptionSyntaxError 以外的 OptionError: 选项值非法
            KeyError: 未知选项
        """
        name = canonical_option_name(option)
        self._handlers[name](option, value)

    # === 游标 ===

    def _sync_cursor(self) -> None:
        """把游标移到最后一个窗口的最后一个 tab"""
        if not self.options.windows:
            self.cursor = Cursor()
            return
        window_index = len(self.options.windows) - 1
        tab_index = len(self.options.windows[window_index].tabs) - 1
        self.cursor = Cursor(window_index, tab_index)

    def current_window(self) -> WindowSpec | None:
        if self.cursor.window_index is None:
            return None
        return self.options.windows[self.cursor.window_index]

    def current_tab(self) -> TabSpec | None:
        window = self.current_window()
        if window is None or self.cursor.tab_index is None:
            return None
        return window.tabs[self.cursor.tab_index]

    def _add_window(self, profile: str | None, implicit_if_first: bool) -> WindowSpec:
        window = WindowSpec(tabs=[TabSpec(profile=profile)])
        window.implicit_first_window = not self.options.windows and implicit_if_first
        apply_defaults(self.options.defaults, window)

        self.options.windows.append(window)
        self._sync_cursor()
        logger.debug(
            f"[Digester] Window #{self.cursor.window_index} created"
            f"{' (implicit)' if window.implicit_first_window else ''}"
        )
        return window

    def _ensure_top_window(self, implicit_if_first: bool) -> WindowSpec:
        window = self.current_window()
        if window is None:
            window = self._add_window(None, implicit_if_first)
        return window

    def _ensure_top_tab(self) -> TabSpec:
        self._ensure_top_window(True)
        return self.current_tab()

    # === Profile ===

    def _resolve_profile(self, value: str) -> str:
        """解析 profile；不存在时回退到默认 profile

        ProfileResolverError（没有默认 profile）直接向上抛出。
        """
        try:
            return self.resolver.resolve(value)
        except ProfileNotFoundError:
            self.diagnostics.notice(
                f"Profile “{value}” specified but not found. "
                "Attempting to fall back to the default profile."
            )
            return self.resolver.resolve(None)

    def _resolve_profile_uuid(self, option: str, value: str) -> str:
        try:
            return self.resolver.resolve_uuid(value)
        except ProfileNotFoundError as e:
            raise BadValueError(str(e), option) from e

    def _set_profile(self, profile: str) -> None:
        if self.options.windows:
            self._ensure_top_tab().profile = profile
        else:
            self.options.defaults.profile = profile

    # === 全局选项 ===

    def on_app_id(self, option: str, value: str | None) -> None:
        self.options.app_id = validate_app_id(value, option)

    def on_unsupported(self, option: str, value: str | None) -> None:
        self.diagnostics.notice(f"Option “{option}” is no longer supported in this version.")

    def on_unsupported_fatal(self, option: str, value: str | None) -> None:
        raise UnsupportedOptionError(
            f"Option “{option}” is no longer supported in this version.", option
        )

    def on_load_config(self, option: str, value: str | None) -> None:
        name = canonical_option_name(option)
        source_tag = SourceTag.DEFAULT if name == "load-config" else SourceTag.SESSION

        document = load_config(Path(value))
        merge_config(self.options, document, source_tag)
        self._sync_cursor()

    def on_preferences(self, option: str, value: str | None) -> None:
        self.options.show_preferences = True

    def on_print_environment(self, option: str, value: str | None) -> None:
        self.options.print_environment = True

    def on_verbose(self, option: str, value: str | None) -> None:
        self.diagnostics.increase()

    def on_quiet(self, option: str, value: str | None) -> None:
        self.diagnostics.quiet()

    # === 创建窗口/tab ===

    def on_window(self, option: str, value: str | None) -> None:
        profile = None
        if value is not None:
            if canonical_option_name(option).endswith("internal-id"):
                profile = self._resolve_profile_uuid(option, value)
            else:
                profile = self._resolve_profile(value)

        self._add_window(profile, False)

    def on_tab(self, option: str, value: str | None) -> None:
        profile = None
        if value is not None:
            if canonical_option_name(option).endswith("internal-id"):
                profile = self._resolve_profile_uuid(option, value)
            else:
                profile = self._resolve_profile(value)

        window = self.current_window()
        if window is None:
            self._add_window(profile, True)
            return

        window.tabs.append(TabSpec(profile=profile))
        self._sync_cursor()

    # === 窗口级 ===

    def on_role(self, option: str, value: str | None) -> None:
        window = self.current_window()
        defaults = self.options.defaults

        if window is not None and window.role is None:
            window.role = value
        elif window is None and defaults.role is None:
            defaults.role = value
        else:
            raise DuplicateOptionError("Two roles given for one window", option)

    def _set_menubar(self, option: str, state: MenubarState) -> None:
        window = self.current_window()
        if window is None:
            self.options.defaults.menubar = state
            return

        if window.menubar.forced:
            self.diagnostics.detail(f"“{option}” option given twice for the same window")
            return

        window.menubar = state

    def on_show_menubar(self, option: str, value: str | None) -> None:
        self._set_menubar(option, MenubarState.SHOWN)

    def on_hide_menubar(self, option: str, value: str | None) -> None:
        self._set_menubar(option, MenubarState.HIDDEN)

    def on_maximize(self, option: str, value: str | None) -> None:
        window = self.current_window()
        if window is not None:
            window.maximized = True
        else:
            self.options.defaults.maximize = True

    def on_fullscreen(self, option: str, value: str | None) -> None:
        window = self.current_window()
        if window is not None:
            window.fullscreen = True
        else:
            self.options.defaults.fullscreen = True

    def on_geometry(self, option: str, value: str | None) -> None:
        window = self.current_window()
        if window is not None:
            window.geometry = value
        else:
            self.options.defaults.geometry = value

    def on_active(self, option: str, value: str | None) -> None:
        self._ensure_top_tab().active = True

    # === tab 级 ===

    def on_command(self, option: str, value: str | None) -> None:
        deprecated_command_option_notice(self.diagnostics, option)

        try:
            exec_argv = split_argv(value or "")
        except ShellSyntaxError as e:
            raise BadValueError(
                f"Argument to “--command/-e” is not a valid command: {e}", option
            ) from e

        if self.options.windows:
            self._ensure_top_tab().exec_argv = exec_argv
        else:
            self.options.exec_argv = exec_argv

    def on_profile(self, option: str, value: str | None) -> None:
        self._set_profile(self._resolve_profile(value))

    def on_profile_id(self, option: str, value: str | None) -> None:
        self._set_profile(self._resolve_profile_uuid(option, value))

    def on_title(self, option: str, value: str | None) -> None:
        if self.options.windows:
            self._ensure_top_tab().title = value
        else:
            self.options.defaults.title = value

    def on_working_directory(self, option: str, value: str | None) -> None:
        if self.options.windows:
            self._ensure_top_tab().working_dir = value
        else:
            self.options.defaults.working_dir = value

    def on_default_working_directory(self, option: str, value: str | None) -> None:
        self.options.defaults.working_dir = value

    def on_wait(self, option: str, value: str | None) -> None:
        if self.options.any_wait:
            raise DuplicateOptionError("Can only use --wait once", option)

        self.options.any_wait = True
        self._ensure_top_tab().wait = True

    def on_fd(self, option: str, value: str | None) -> None:
        fd = parse_fd(value or "", option)

        tab = self._ensure_top_tab()
        if tab.has_fd(fd):
            raise BadValueError(f"Cannot pass FD {fd} twice", option)

        tab.add_fd(fd)

    def on_zoom(self, option: str, value: str | None) -> None:
        zoom = parse_zoom(value or "", self.diagnostics, option)

        if self.options.windows:
            tab = self._ensure_top_tab()
            tab.zoom = zoom
            tab.zoom_set = True
        else:
            self.options.defaults.zoom = zoom
            self.options.defaults.zoom_set = True

    # === 内部 / 会话管理 ===

    def on_startup_id(self, option: str, value: str | None) -> None:
        self.options.startup_id = value

    def on_sm_client_disable(self, option: str, value: str | None) -> None:
        self.options.sm_client_disable = True

    def on_sm_client_id(self, option: str, value: str | None) -> None:
        self.options.sm_client_id = value

    def on_sm_config_prefix(self, option: str, value: str | None) -> None:
        self.options.sm_config_prefix = value

    # === 收尾 ===

    def finalize(self) -> None:
        """所有事件消费完后调用一次

        Raises:
            MissingCommandError: -x/--execute 后没有命令
        """
        if self.options.execute and self.options.exec_argv is None:
            raise MissingCommandError(
                "Option “--execute/-x” requires specifying the command to run "
                "on the rest of the command line",
                "--execute/-x",
            )

        if self.options.exec_argv is None:
            return

        if self.options.windows:
            first_tab = self.options.windows[0].tabs[0]
        else:
            first_tab = self._add_window(None, True).tabs[0]

        first_tab.exec_argv = self.options.exec_argv
        self.options.exec_argv = None

    def ensure_window(self, implicit_if_first: bool) -> WindowSpec:
        """保证至少有一个窗口

        Args:
            implicit_if_first: 新终端默认以 tab 打开时为 True

        Returns:
            当前窗口
        """
        return self._ensure_top_window(implicit_if_first)
