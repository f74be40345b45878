"""Error types raised while digesting options or merging config documents."""


class OptionError(Exception):
    """Base class for option digestion failures.

    Attributes:
        option: Offending option or document key, if known.
    """

    def __init__(self, message: str, option: str | None = None):
        super().__init__(message)
        self.message = message
        self.option = option


class BadValueError(OptionError):
    """Malformed option value (zoom, fd, app id, command string)."""


class DuplicateOptionError(OptionError):
    """Option given more often than allowed (second --wait, second role)."""


class UnsupportedOptionError(OptionError):
    """Recognized option that is no longer supported."""


class MissingCommandError(OptionError):
    """--execute/-x given without a command after it."""


class InvalidConfigFormatError(OptionError):
    """Document is not a terminal config document or cannot be read."""


class IncompatibleConfigVersionError(OptionError):
    """Document version is invalid or newer than supported."""


class OptionSyntaxError(OptionError):
    """Tokenizer-level failure (unknown option, missing argument)."""


class ShellSyntaxError(ValueError):
    """String could not be split into an argument vector."""


class ProfileNotFoundError(LookupError):
    """No profile matches the given name or id."""

    def __init__(self, name: str):
        super().__init__(f"No profile with UUID or name “{name}” exists")
        self.name = name


class ProfileResolverError(RuntimeError):
    """Resolver cannot produce a profile at all (e.g. no default profile)."""
