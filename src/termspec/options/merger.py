"""Config-document merger

Builds window/tab specifications from a saved terminal configuration
(an INI-style key file) and appends them to TerminalOptions.

Document layout:

    [Terminal Configuration]
    Version=1
    CompatVersion=1
    Windows=Window0;Window1;

    [Window0]
    Tabs=Terminal0;Terminal1;
    ActiveTerminal=Terminal1
    Role=main
    MenubarVisible=true

    [Terminal0]
    ProfileID=b1dcc9dd-...
    WorkingDirectory=/home/user
    Command=vim 'my file.txt'

A window group without a Tabs key is skipped. Any failure discards every
window built by the same merge.
"""

import configparser
import dataclasses
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..config import (
    CONFIG_COMPAT_VERSION,
    CONFIG_GROUP,
    CONFIG_PROP_COMPAT_VERSION,
    CONFIG_PROP_VERSION,
    CONFIG_PROP_WINDOWS,
    CONFIG_TERMINAL_PROP_COMMAND,
    CONFIG_TERMINAL_PROP_PROFILE_ID,
    CONFIG_TERMINAL_PROP_TITLE,
    CONFIG_TERMINAL_PROP_WORKING_DIRECTORY,
    CONFIG_WINDOW_PROP_ACTIVE_TAB,
    CONFIG_WINDOW_PROP_FULLSCREEN,
    CONFIG_WINDOW_PROP_GEOMETRY,
    CONFIG_WINDOW_PROP_MAXIMIZED,
    CONFIG_WINDOW_PROP_MENUBAR_VISIBLE,
    CONFIG_WINDOW_PROP_ROLE,
    CONFIG_WINDOW_PROP_TABS,
)
from ..core.shell import compress, split_argv
from ..errors import (
    BadValueError,
    IncompatibleConfigVersionError,
    InvalidConfigFormatError,
    ShellSyntaxError,
)
from ..models import (
    MenubarState,
    SourceTag,
    TabSpec,
    TerminalOptions,
    WindowSpec,
    apply_defaults,
)
from ..telemetry import get_logger

logger = get_logger(__name__)

# Key-file level escapes; "\;" only matters inside lists
_KEYFILE_ESCAPES = {
    "s": " ",
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "\\": "\\",
    ";": ";",
}

# No group of a key file is special; keep configparser's DEFAULT out of the way
_NO_DEFAULT_SECTION = "\x00"


def _keyfile_unescape(value: str) -> str:
    """Decode key-file escapes; unknown escapes are kept verbatim."""
    out: list[str] = []
    i = 0
    while i < len(value):
        ch = value[i]
        if ch == "\\" and i + 1 < len(value) and value[i + 1] in _KEYFILE_ESCAPES:
            out.append(_KEYFILE_ESCAPES[value[i + 1]])
            i += 2
            continue
        out.append(ch)
        i += 1
    return "".join(out)


def _split_string_list(value: str) -> list[str]:
    """Split a ';'-separated key-file list, honouring "\\;" escapes."""
    items: list[str] = []
    current: list[str] = []
    i = 0
    while i < len(value):
        ch = value[i]
        if ch == "\\" and i + 1 < len(value):
            current.append(value[i:i + 2])
            i += 2
            continue
        if ch == ";":
            items.append(_keyfile_unescape("".join(current)))
            current = []
        else:
            current.append(ch)
        i += 1

    if current:
        items.append(_keyfile_unescape("".join(current)))
    return items


def _parse_bool(value: str) -> bool:
    """Key-file boolean; anything but true/1 reads as false."""
    return value.strip() in ("true", "1")


class _KeyFileGroup(BaseModel):
    """Common decoding for key-file group models."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class ConfigHeader(_KeyFileGroup):
    """Top group: versions and window group names."""

    version: int = Field(default=0, alias=CONFIG_PROP_VERSION)
    compat_version: int = Field(default=0, alias=CONFIG_PROP_COMPAT_VERSION)
    windows: list[str] | None = Field(default=None, alias=CONFIG_PROP_WINDOWS)

    @field_validator("version", "compat_version", mode="before")
    @classmethod
    def _lenient_int(cls, value):
        # Unparseable versions read as 0 and are rejected as incompatible
        try:
            return int(str(value).strip())
        except ValueError:
            return 0

    @field_validator("windows", mode="before")
    @classmethod
    def _string_list(cls, value):
        if isinstance(value, str):
            return _split_string_list(value)
        return value


class WindowGroup(_KeyFileGroup):
    """Per-window group."""

    tabs: list[str] | None = Field(default=None, alias=CONFIG_WINDOW_PROP_TABS)
    active_tab: str | None = Field(default=None, alias=CONFIG_WINDOW_PROP_ACTIVE_TAB)
    role: str | None = Field(default=None, alias=CONFIG_WINDOW_PROP_ROLE)
    geometry: str | None = Field(default=None, alias=CONFIG_WINDOW_PROP_GEOMETRY)
    fullscreen: bool | None = Field(default=None, alias=CONFIG_WINDOW_PROP_FULLSCREEN)
    maximized: bool | None = Field(default=None, alias=CONFIG_WINDOW_PROP_MAXIMIZED)
    menubar_visible: bool | None = Field(default=None, alias=CONFIG_WINDOW_PROP_MENUBAR_VISIBLE)

    @field_validator("tabs", mode="before")
    @classmethod
    def _string_list(cls, value):
        if isinstance(value, str):
            return _split_string_list(value)
        return value

    @field_validator("active_tab", "role", "geometry", mode="before")
    @classmethod
    def _string(cls, value):
        if isinstance(value, str):
            return _keyfile_unescape(value)
        return value

    @field_validator("fullscreen", "maximized", "menubar_visible", mode="before")
    @classmethod
    def _boolean(cls, value):
        if isinstance(value, str):
            return _parse_bool(value)
        return value


class TabGroup(_KeyFileGroup):
    """Per-terminal group.

    working_directory and command are stored C-escaped on top of key-file
    escaping; they are decoded further by the merger.
    """

    profile_id: str | None = Field(default=None, alias=CONFIG_TERMINAL_PROP_PROFILE_ID)
    working_directory: str | None = Field(default=None, alias=CONFIG_TERMINAL_PROP_WORKING_DIRECTORY)
    title: str | None = Field(default=None, alias=CONFIG_TERMINAL_PROP_TITLE)
    command: str | None = Field(default=None, alias=CONFIG_TERMINAL_PROP_COMMAND)

    @field_validator("*", mode="before")
    @classmethod
    def _string(cls, value):
        if isinstance(value, str):
            return _keyfile_unescape(value)
        return value


def _new_parser() -> configparser.ConfigParser:
    parser = configparser.ConfigParser(
        interpolation=None,
        delimiters=("=",),
        comment_prefixes=("#",),
        empty_lines_in_values=False,
        default_section=_NO_DEFAULT_SECTION,
        # Repeated keys: last value wins; repeated groups are merged
        strict=False,
    )
    # Key names are case-sensitive
    parser.optionxform = str
    return parser


def parse_config_text(text: str, source: str = "<string>") -> configparser.ConfigParser:
    """Parse key-file text into a document.

    Indentation carries no meaning in a key file, so leading whitespace is
    dropped from every line; there are no continuation lines.

    Raises:
        InvalidConfigFormatError: syntax error (key outside a group...)
    """
    text = "\n".join(line.lstrip() for line in text.splitlines())

    document = _new_parser()
    try:
        document.read_string(text, source=source)
    except configparser.Error as e:
        raise InvalidConfigFormatError(f"Failed to parse config file {source}: {e}") from e
    return document


def load_config(path: str | Path) -> configparser.ConfigParser:
    """Read and parse a config file.

    The file is read completely and closed before parsing.

    Raises:
        InvalidConfigFormatError: file cannot be read or parsed
    """
    path = Path(path).expanduser()
    try:
        with path.open(encoding="utf-8") as fp:
            text = fp.read()
    except (OSError, UnicodeDecodeError) as e:
        raise InvalidConfigFormatError(f"Failed to load config file {path}: {e}", str(path)) from e

    logger.debug(f"[Merger] Loaded {path} ({len(text)} bytes)")
    return parse_config_text(text, source=str(path))


def _group(document: configparser.ConfigParser, name: str) -> dict[str, str]:
    """Raw key/values of a group; a missing group reads as empty."""
    if not document.has_section(name):
        return {}
    return dict(document.items(name, raw=True))


def _validate(model: type[BaseModel], document: configparser.ConfigParser, name: str):
    try:
        return model.model_validate(_group(document, name))
    except ValidationError as e:
        raise InvalidConfigFormatError(f"Invalid group “{name}”: {e}", name) from e


def _build_tab(group_name: str, group: TabGroup, active_tab: str | None) -> TabSpec:
    tab = TabSpec(
        profile=group.profile_id,
        title=group.title,
        active=group_name == active_tab,
    )

    if group.working_directory is not None:
        tab.working_dir = compress(group.working_directory)

    if group.command is not None:
        try:
            tab.exec_argv = split_argv(compress(group.command))
        except ShellSyntaxError as e:
            raise BadValueError(
                f"Invalid command in “{group_name}”: {e}",
                f"{group_name}/{CONFIG_TERMINAL_PROP_COMMAND}",
            ) from e

    return tab


def merge_config(
    options: TerminalOptions,
    document: configparser.ConfigParser,
    source_tag: SourceTag,
) -> list[WindowSpec]:
    """Append the windows described by document to options.windows.

    Each new window gets GlobalDefaults applied at creation, then the
    per-window keys present in the document on top.

    Args:
        options: Parse result to extend
        document: Parsed key file
        source_tag: Provenance for the new windows

    Returns:
        The appended windows

    Raises:
        InvalidConfigFormatError: missing top group or window list
        IncompatibleConfigVersionError: bad version / compat version
        BadValueError: a command cannot be decoded
    """
    if not document.has_section(CONFIG_GROUP):
        raise InvalidConfigFormatError("Not a valid terminal config file.", CONFIG_GROUP)

    header = _validate(ConfigHeader, document, CONFIG_GROUP)
    if (
        header.version <= 0
        or header.compat_version <= 0
        or header.compat_version > CONFIG_COMPAT_VERSION
    ):
        raise IncompatibleConfigVersionError(
            "Incompatible terminal config file version.", CONFIG_PROP_COMPAT_VERSION
        )

    if header.windows is None:
        raise InvalidConfigFormatError(
            f"Key “{CONFIG_PROP_WINDOWS}” not found in group “{CONFIG_GROUP}”",
            CONFIG_PROP_WINDOWS,
        )

    # Defaults are only committed once the whole document has been merged
    defaults = dataclasses.replace(options.defaults)
    windows: list[WindowSpec] = []

    for window_group in header.windows:
        group = _validate(WindowGroup, document, window_group)
        if not group.tabs:
            logger.debug(f"[Merger] {window_group} has no tabs, skipped")
            continue

        window = apply_defaults(defaults, WindowSpec(tabs=[], source_tag=source_tag))

        if group.role is not None:
            window.role = group.role
        if group.geometry is not None:
            window.geometry = group.geometry
        if group.fullscreen is not None:
            window.fullscreen = group.fullscreen
        if group.maximized is not None:
            window.maximized = group.maximized
        if group.menubar_visible is not None:
            window.menubar = MenubarState.SHOWN if group.menubar_visible else MenubarState.HIDDEN

        for tab_group in group.tabs:
            tab = _validate(TabGroup, document, tab_group)
            window.tabs.append(_build_tab(tab_group, tab, group.active_tab))

        windows.append(window)

    options.defaults = defaults
    options.windows.extend(windows)
    logger.debug(f"[Merger] Merged {len(windows)} window(s) ({source_tag.name})")
    return windows
