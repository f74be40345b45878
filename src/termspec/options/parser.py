"""Command-line tokenizer wiring

argparse does the tokenizing (long/short options, ``--opt=value``, missing
arguments); every recognized option is forwarded as an ``(option, value)``
event to OptionDigester in command-line order through a custom Action.

Pipeline: prescan -> argparse/digester -> finalize -> ensure_window
"""

import argparse
import sys

from .. import config
from ..errors import OptionSyntaxError
from ..models import TerminalOptions
from ..profiles import ProfileResolver
from ..telemetry import Diagnostics, get_logger
from .digester import OptionDigester
from .prescan import prescan

logger = get_logger(__name__)


class _DigestAction(argparse.Action):
    """Forward an option occurrence to the digester."""

    def __init__(self, option_strings, dest, digester: OptionDigester, **kwargs):
        self.digester = digester
        kwargs.setdefault("default", argparse.SUPPRESS)
        super().__init__(option_strings, dest, **kwargs)

    def __call__(self, parser, namespace, values, option_string=None):
        value = values if isinstance(values, str) else None
        self.digester.handle(option_string or self.option_strings[0], value)


class OptionParser(argparse.ArgumentParser):
    """ArgumentParser that raises instead of exiting on syntax errors.

    The token after a value-taking option is always its value, even when
    it starts with "-" ("--title -foo", "-e -l").
    """

    def parse_known_args(self, args=None, namespace=None):
        if args is None:
            args = sys.argv[1:]
        return super().parse_known_args(self._attach_values(list(args)), namespace)

    def _attach_values(self, args: list[str]) -> list[str]:
        """"--title -foo" / "-t -foo" -> "--title=-foo"."""
        long_names = {}
        for action in self._actions:
            if isinstance(action, _DigestAction) and action.nargs is None:
                for flag in action.option_strings:
                    long_names[flag] = action.option_strings[-1]

        attached = []
        i = 0
        while i < len(args):
            if args[i] in long_names and i + 1 < len(args):
                attached.append(f"{long_names[args[i]]}={args[i + 1]}")
                i += 2
                continue
            attached.append(args[i])
            i += 1
        return attached

    def error(self, message):
        raise OptionSyntaxError(message)


# (flags, takes_value, metavar, help); help=None hides the option
_GLOBAL_OPTIONS = [
    (("--app-id",), True, "ID", None),
    (("--disable-factory",), False, None, None),
    (("--load-config",), True, "FILE", "Load a terminal configuration file"),
    (("--save-config",), True, "FILE", None),
    (("--preferences",), False, None, "Show preferences window"),
    (("-p", "--print-environment"), False, None, "Print environment variables to interact with the terminal"),
    (("-v", "--verbose"), False, None, "Increase diagnostic verbosity"),
    (("-q", "--quiet"), False, None, "Suppress output"),
]

_CREATION_OPTIONS = [
    (("--window",), False, None, "Open a new window containing a tab with the default profile"),
    (("--tab",), False, None, "Open a new tab in the last-opened window with the default profile"),
]

_WINDOW_OPTIONS = [
    (("--show-menubar",), False, None, "Turn on the menubar"),
    (("--hide-menubar",), False, None, "Turn off the menubar"),
    (("--maximize",), False, None, "Maximize the window"),
    (("--full-screen",), False, None, "Full-screen the window"),
    (("--geometry",), True, "GEOMETRY", "Set the window size; for example: 80x24, or 80x24+200+200 (COLSxROWS+X+Y)"),
    (("--role",), True, "ROLE", "Set the window role"),
    (("--active",), False, None, "Set the last specified tab as the active one in its window"),
]

_TERMINAL_OPTIONS = [
    (("-e", "--command"), True, "COMMAND", "Execute the argument to this option inside the terminal"),
    (("--profile",), True, "PROFILE-NAME", "Use the given profile instead of the default profile"),
    (("-t", "--title"), True, "TITLE", "Set the initial terminal title"),
    (("--working-directory",), True, "DIRNAME", "Set the working directory"),
    (("--wait",), False, None, "Wait until the child exits"),
    (("--fd",), True, "FD", "Forward file descriptor"),
    (("--zoom",), True, "ZOOM", "Set the terminal’s zoom factor (1.0 = normal size)"),
]

_INTERNAL_OPTIONS = [
    (("--profile-id",), True, None, None),
    (("--window-with-profile",), True, None, None),
    (("--tab-with-profile",), True, None, None),
    (("--window-with-profile-internal-id",), True, None, None),
    (("--tab-with-profile-internal-id",), True, None, None),
    (("--default-working-directory",), True, None, None),
    (("--use-factory",), False, None, None),
    (("--startup-id",), True, None, None),
    (("--sm-client-disable",), False, None, None),
    (("--sm-client-state-file",), True, None, None),
    (("--sm-client-id",), True, None, None),
    (("--sm-disable",), False, None, None),
    (("--sm-config-prefix",), True, None, None),
]


def _add_options(group, digester: OptionDigester, entries) -> None:
    for flags, takes_value, metavar, help_text in entries:
        group.add_argument(
            *flags,
            action=_DigestAction,
            digester=digester,
            nargs=None if takes_value else 0,
            metavar=metavar,
            help=help_text if help_text is not None else argparse.SUPPRESS,
        )


def build_parser(digester: OptionDigester, prog: str = "termspec") -> OptionParser:
    """Build the option parser feeding digester."""
    parser = OptionParser(
        prog=prog,
        usage=f"{prog} [OPTION…] [-- COMMAND …]",
        allow_abbrev=False,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {config.VERSION}", help=argparse.SUPPRESS)

    _add_options(parser, digester, _GLOBAL_OPTIONS)
    _add_options(
        parser.add_argument_group(
            "terminal",
            "Options to open new windows or terminal tabs; more than one of these may be specified",
        ),
        digester,
        _CREATION_OPTIONS,
    )
    _add_options(
        parser.add_argument_group(
            "window options",
            "Window options; if used before the first --window or --tab argument, sets the default for all windows",
        ),
        digester,
        _WINDOW_OPTIONS,
    )
    _add_options(
        parser.add_argument_group(
            "terminal options",
            "Terminal options; if used before the first --window or --tab argument, sets the default for all terminals",
        ),
        digester,
        _TERMINAL_OPTIONS,
    )
    _add_options(parser, digester, _INTERNAL_OPTIONS)
    return parser


def parse_options(
    argv: list[str],
    resolver: ProfileResolver,
    diagnostics: Diagnostics | None = None,
    new_terminal_mode: str = config.NEW_TERMINAL_MODE,
    cwd: str | None = None,
) -> TerminalOptions:
    """Parse a command line into a specification tree.

    Args:
        argv: Arguments without the program name
        resolver: Profile resolver
        diagnostics: Verbosity-controlled notices; -v/-q adjust it
        new_terminal_mode: "tab" marks a synthesized first window implicit
        cwd: Default working directory (process cwd if None)

    Returns:
        TerminalOptions with at least one window

    Raises:
        OptionError: any syntax or value error; nothing partial is returned
        ProfileResolverError: no default profile to fall back to
    """
    diagnostics = diagnostics or Diagnostics()
    options = TerminalOptions.new(cwd)

    scan = prescan(argv, diagnostics)
    options.exec_argv = scan.exec_argv
    options.execute = scan.execute

    digester = OptionDigester(options, resolver, diagnostics)
    build_parser(digester).parse_args(scan.argv)

    digester.finalize()
    digester.ensure_window(new_terminal_mode == "tab")

    logger.debug(f"[Parser] {len(options.windows)} window(s) requested")
    return options
