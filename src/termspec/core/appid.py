"""Application ID validation

An application ID is a reverse-DNS style name such as ``org.example.Terminal``:
- at most 255 characters
- at least two elements separated by '.'
- elements are non-empty, use only [A-Za-z0-9_-], and do not start with a digit
"""

import re

MAX_APP_ID_LENGTH = 255

_ELEMENT_RE = re.compile(r"[A-Za-z_-][A-Za-z0-9_-]*")


def is_valid_app_id(value: str | None) -> bool:
    """Check whether value is a syntactically valid application ID.

    Args:
        value: Candidate ID

    Returns:
        True if valid
    """
    if not value or len(value) > MAX_APP_ID_LENGTH:
        return False

    elements = value.split(".")
    if len(elements) < 2:
        return False

    return all(_ELEMENT_RE.fullmatch(element) for element in elements)
