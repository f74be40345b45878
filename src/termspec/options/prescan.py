"""Command-line prescanner

Extracts a trailing literal command before formal option parsing:
- ``-- CMD ARGS...``: tokens after the separator, taken verbatim
- ``-x/--execute CMD ARGS...``: deprecated, same capture, ``execute=True``

Only the first match is used. The separator/flag and everything after it
are removed from the list handed to the option parser.
"""

from dataclasses import dataclass

from ..telemetry import Diagnostics

EXECUTE_FLAGS = ("-x", "--execute")
SEPARATOR = "--"


@dataclass
class PrescanResult:
    """Prescan output.

    Attributes:
        argv: Tokens left for the option parser
        exec_argv: Captured trailing command, None if nothing was captured
        execute: True if the capture came from -x/--execute
    """

    argv: list[str]
    exec_argv: list[str] | None = None
    execute: bool = False


def deprecated_option_notice(diagnostics: Diagnostics, option_name: str) -> None:
    diagnostics.notice(
        f"Option “{option_name}” is deprecated and might be removed in a later version."
    )


def deprecated_command_option_notice(diagnostics: Diagnostics, option_name: str) -> None:
    """Deprecation notice for the command-taking options (-x, -e)."""
    deprecated_option_notice(diagnostics, option_name)
    diagnostics.notice(
        f"Use “{SEPARATOR} ” to terminate the options and put the command line to execute after it."
    )


def prescan(argv: list[str], diagnostics: Diagnostics) -> PrescanResult:
    """Scan argv once for a trailing command.

    Args:
        argv: Arguments without the program name
        diagnostics: Receives the -x/--execute deprecation notice

    Returns:
        PrescanResult. When -x/--execute is the last token nothing is
        captured; the finalizer reports the missing command.
    """
    for i, token in enumerate(argv):
        is_execute = token in EXECUTE_FLAGS
        if not is_execute and token != SEPARATOR:
            continue

        if is_execute:
            deprecated_command_option_notice(diagnostics, token)

        rest = argv[i + 1:]
        return PrescanResult(
            argv=list(argv[:i]),
            exec_argv=list(rest) if rest else None,
            execute=is_execute,
        )

    return PrescanResult(argv=list(argv))
