"""Pytest 配置"""

import pytest

from termspec.models import TerminalOptions
from termspec.options.digester import OptionDigester
from termspec.options.parser import parse_options
from termspec.profiles import StaticProfileResolver
from termspec.telemetry import Diagnostics

DEFAULT_PROFILE = "b1dcc9dd-5262-4d8d-a863-c897e6d979b9"
WORK_PROFILE = "0e7a1a5c-3f5e-4f8f-9a57-2f1c0d7b6a11"


@pytest.fixture
def resolver():
    """两个 profile 的目录，Default 为默认"""
    return StaticProfileResolver(
        {DEFAULT_PROFILE: "Default", WORK_PROFILE: "Work"},
        default=DEFAULT_PROFILE,
    )


@pytest.fixture
def diagnostics():
    return Diagnostics(verbosity=2)


@pytest.fixture
def options():
    return TerminalOptions.new(cwd="/home/user")


@pytest.fixture
def digester(options, resolver, diagnostics):
    return OptionDigester(options, resolver, diagnostics)


@pytest.fixture
def parse(resolver, diagnostics):
    """parse("--window", "--tab", ...) -> TerminalOptions"""

    def _parse(*argv: str, new_terminal_mode: str = "tab"):
        return parse_options(
            list(argv),
            resolver,
            diagnostics,
            new_terminal_mode=new_terminal_mode,
            cwd="/home/user",
        )

    return _parse
