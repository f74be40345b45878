"""termspec - terminal window/tab specification engine"""

from .errors import OptionError
from .models import (
    FdPass,
    GlobalDefaults,
    MenubarState,
    SourceTag,
    TabSpec,
    TerminalOptions,
    WindowSpec,
    apply_defaults,
)
from .options import merge_config, parse_options

__all__ = [
    "OptionError",
    "FdPass",
    "GlobalDefaults",
    "MenubarState",
    "SourceTag",
    "TabSpec",
    "TerminalOptions",
    "WindowSpec",
    "apply_defaults",
    "merge_config",
    "parse_options",
]
