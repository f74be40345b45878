"""Option value parsers: zoom factor, file descriptor, application ID."""

import locale
import re

from ..config import ZOOM_EPSILON, ZOOM_MAXIMUM, ZOOM_MINIMUM
from ..core.appid import is_valid_app_id
from ..errors import BadValueError
from ..telemetry import Diagnostics

# C-locale decimal: digits with optional fraction and exponent, no inf/nan
_MACHINE_DECIMAL_RE = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")
_DECIMAL_INT_RE = re.compile(r"[+-]?\d+")

STDIO_NAMES = {0: "stdin", 1: "stdout", 2: "stderr"}

# int range of the platform descriptor type
FD_MAX = 2**31 - 1


def _parse_decimal(value: str) -> float | None:
    # The whole string must be the number
    if "_" in value or value != value.strip():
        return None
    if _MACHINE_DECIMAL_RE.fullmatch(value):
        return float(value)

    # Typed by a person in their locale (e.g. "1,5")
    try:
        number = locale.atof(value)
    except ValueError:
        return None
    if number != number or number in (float("inf"), float("-inf")):
        return None
    return number


def parse_zoom(value: str, diagnostics: Diagnostics, option: str = "--zoom") -> float:
    """Parse and clamp a zoom factor.

    Args:
        value: Decimal string, machine format or current locale
        diagnostics: Receives clamping notices

    Returns:
        Zoom in [ZOOM_MINIMUM, ZOOM_MAXIMUM]

    Raises:
        BadValueError: value is not a decimal number
    """
    zoom = _parse_decimal(value)
    if zoom is None:
        raise BadValueError(f"“{value}” is not a valid zoom factor", option)

    if zoom < ZOOM_MINIMUM + ZOOM_EPSILON:
        diagnostics.notice(f"Zoom factor “{zoom:g}” is too small, using {ZOOM_MINIMUM:g}")
        zoom = ZOOM_MINIMUM

    if zoom > ZOOM_MAXIMUM - ZOOM_EPSILON:
        diagnostics.notice(f"Zoom factor “{zoom:g}” is too large, using {ZOOM_MAXIMUM:g}")
        zoom = ZOOM_MAXIMUM

    return zoom


def parse_fd(value: str, option: str = "--fd") -> int:
    """Parse a file descriptor number to forward.

    Raises:
        BadValueError: not a base-10 integer in descriptor range, or a
            standard stream (0, 1, 2)
    """
    if not _DECIMAL_INT_RE.fullmatch(value):
        raise BadValueError(f"Failed to parse “{value}” as file descriptor number", option)

    fd = int(value)
    if fd < 0 or fd > FD_MAX:
        raise BadValueError(f"Failed to parse “{value}” as file descriptor number", option)

    if fd in STDIO_NAMES:
        raise BadValueError(f"FD passing of {STDIO_NAMES[fd]} is not supported", option)

    return fd


def validate_app_id(value: str, option: str = "--app-id") -> str:
    """Return value unchanged if it is a valid application ID."""
    if not is_valid_app_id(value):
        raise BadValueError(f"“{value}” is not a valid application ID", option)
    return value
