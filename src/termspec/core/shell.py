"""Shell-style argv splitting and C-style escape decoding."""

import shlex

from ..errors import ShellSyntaxError

_SIMPLE_ESCAPES = {
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "v": "\v",
}

_OCTAL_DIGITS = "01234567"


def split_argv(text: str) -> list[str]:
    """Split a string into an argument vector using POSIX shell quoting.

    Args:
        text: Command line, e.g. ``vim "my file.txt"``

    Returns:
        Ordered list of tokens.

    Raises:
        ShellSyntaxError: Unbalanced quotes, dangling escape or empty text.
    """
    if not text or text.isspace():
        raise ShellSyntaxError("Text was empty (or contained only whitespace)")

    try:
        argv = shlex.split(text, posix=True)
    except ValueError as e:
        raise ShellSyntaxError(str(e)) from e

    if not argv:
        raise ShellSyntaxError("Text was empty (or contained only whitespace)")
    return argv


def compress(text: str) -> str:
    """Decode C-style backslash escapes.

    Handles ``\\b \\f \\n \\r \\t \\v``, octal ``\\NNN`` (up to three digits);
    any other escaped character is kept without its backslash. A trailing
    lone backslash is dropped.
    """
    out: list[str] = []
    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        if ch != "\\":
            out.append(ch)
            i += 1
            continue

        i += 1
        if i >= n:
            break

        ch = text[i]
        if ch in _OCTAL_DIGITS:
            end = i
            while end < n and end - i < 3 and text[end] in _OCTAL_DIGITS:
                end += 1
            out.append(chr(int(text[i:end], 8) & 0xFF))
            i = end
            continue

        out.append(_SIMPLE_ESCAPES.get(ch, ch))
        i += 1

    return "".join(out)
