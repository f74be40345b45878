"""Tests for the full command-line pipeline"""

import textwrap

import pytest

from termspec.errors import (
    BadValueError,
    DuplicateOptionError,
    InvalidConfigFormatError,
    MissingCommandError,
    OptionSyntaxError,
    UnsupportedOptionError,
)
from termspec.models import SourceTag
from termspec.options.digester import OptionDigester
from termspec.options.parser import build_parser

SESSION = """
    [Terminal Configuration]
    Version=1
    CompatVersion=1
    Windows=Window0;

    [Window0]
    Tabs=Terminal0;Terminal1;
    Role=restored

    [Terminal0]
    Title=first

    [Terminal1]
    Title=second
"""


class TestImplicitWindow:
    """没有窗口/tab 选项时总是得到一个隐式窗口"""

    @pytest.mark.parametrize(
        "argv",
        [
            [],
            ["--maximize"],
            ["--geometry", "80x24", "--hide-menubar"],
            ["--title", "x", "--zoom", "1.5"],
            ["-v", "--preferences"],
        ],
    )
    def test_exactly_one_implicit_window(self, parse, argv):
        options = parse(*argv)

        assert len(options.windows) == 1
        assert options.windows[0].implicit_first_window is True
        assert len(options.windows[0].tabs) == 1

    def test_window_mode_not_implicit(self, parse):
        options = parse(new_terminal_mode="window")

        assert len(options.windows) == 1
        assert options.windows[0].implicit_first_window is False

    def test_defaults_reach_ensured_window(self, parse):
        options = parse("--geometry", "80x24", "--role", "r")

        assert options.windows[0].geometry == "80x24"
        assert options.windows[0].role == "r"


class TestCommands:
    """-- / -x / --command"""

    def test_dashdash_and_command_equivalent(self, parse):
        via_dashdash = parse("--", "foo", "bar")
        via_command = parse("--command", "foo bar")

        assert via_dashdash.windows[0].tabs[0].exec_argv == ["foo", "bar"]
        assert via_command.windows[0].tabs[0].exec_argv == ["foo", "bar"]

    def test_dashdash_tokens_not_parsed_as_options(self, parse):
        options = parse("--window", "--", "ls", "--window", "-e")

        assert len(options.windows) == 1
        assert options.windows[0].tabs[0].exec_argv == ["ls", "--window", "-e"]

    def test_execute(self, parse):
        options = parse("--tab", "-x", "top")

        assert options.windows[0].tabs[0].exec_argv == ["top"]
        assert options.exec_argv is None

    def test_execute_without_command(self, parse):
        with pytest.raises(MissingCommandError):
            parse("--window", "--execute")

    def test_trailing_dashdash_is_fine(self, parse):
        options = parse("--window", "--")

        assert options.windows[0].tabs[0].exec_argv is None

    def test_command_equals_syntax(self, parse):
        options = parse("--window", "--command=vim 'a b'")

        assert options.windows[0].tabs[0].exec_argv == ["vim", "a b"]

    def test_command_for_second_tab(self, parse):
        options = parse("--window", "--tab", "-e", "htop")

        assert options.windows[0].tabs[0].exec_argv is None
        assert options.windows[0].tabs[1].exec_argv == ["htop"]


class TestDashValues:
    """取值选项的下一个参数总是它的值，即使以 "-" 开头"""

    def test_dash_leading_title(self, parse):
        options = parse("--window", "--title", "-foo")

        assert options.windows[0].tabs[0].title == "-foo"

    def test_lone_dash_and_short_options(self, parse):
        options = parse("--window", "-t", "-", "--working-directory", "-dir")

        tab = options.windows[0].tabs[0]
        assert tab.title == "-"
        assert tab.working_dir == "-dir"

    def test_dash_leading_command(self, parse):
        options = parse("--window", "-e", "-l")

        assert options.windows[0].tabs[0].exec_argv == ["-l"]

    def test_option_name_as_value(self, parse):
        options = parse("--window", "--title", "--tab")

        assert len(options.windows[0].tabs) == 1
        assert options.windows[0].tabs[0].title == "--tab"

    def test_empty_value(self, parse):
        options = parse("--window", "-t", "")

        assert options.windows[0].tabs[0].title == ""


class TestOrdering:
    """选项按从左到右的顺序作用于最近的窗口/tab"""

    def test_multi_window_layout(self, parse):
        options = parse(
            "--window", "--role", "A", "--title", "one",
            "--tab", "--title", "two", "--active",
            "--window", "--role", "B", "--maximize", "--zoom", "0.5",
        )

        first, second = options.windows
        assert first.role == "A"
        assert [t.title for t in first.tabs] == ["one", "two"]
        assert [t.active for t in first.tabs] == [False, True]
        assert first.maximized is False
        assert second.role == "B"
        assert second.maximized is True
        assert second.tabs[0].zoom == 0.5

    def test_role_twice_same_window(self, parse):
        with pytest.raises(DuplicateOptionError):
            parse("--window", "--role", "A", "--role", "B")

    def test_wait_twice_anywhere(self, parse):
        with pytest.raises(DuplicateOptionError):
            parse("--window", "--wait", "--window", "--tab", "--wait")

    def test_fd_twice_same_tab(self, parse):
        with pytest.raises(BadValueError, match="twice"):
            parse("--fd", "5", "--fd", "5")

    @pytest.mark.parametrize("fd", ["0", "1", "2"])
    def test_fd_stdio(self, parse, fd):
        with pytest.raises(BadValueError):
            parse("--window", "--fd", fd)

    def test_verbose_flags_combine(self, parse, diagnostics):
        parse("-vv")
        assert diagnostics.verbosity == 4


class TestLoadConfig:
    """--load-config / --sm-client-state-file"""

    def _write(self, tmp_path):
        path = tmp_path / "session.conf"
        path.write_text(textwrap.dedent(SESSION), encoding="utf-8")
        return str(path)

    def test_load_config(self, parse, tmp_path):
        options = parse("--window", "--load-config", self._write(tmp_path), "--title", "after")

        assert len(options.windows) == 2
        restored = options.windows[1]
        assert restored.source_tag == SourceTag.DEFAULT
        assert restored.role == "restored"
        # 游标移到合并进来的最后一个 tab
        assert [t.title for t in restored.tabs] == ["first", "after"]

    def test_session_state_file(self, parse, tmp_path):
        options = parse("--sm-client-state-file", self._write(tmp_path))

        assert len(options.windows) == 1
        assert options.windows[0].source_tag == SourceTag.SESSION

    def test_missing_file_aborts(self, parse, tmp_path):
        with pytest.raises(InvalidConfigFormatError):
            parse("--load-config", str(tmp_path / "nope.conf"))


class TestSyntaxErrors:
    """argparse 层面的错误"""

    def test_unknown_option(self, parse):
        with pytest.raises(OptionSyntaxError):
            parse("--no-such-option")

    def test_missing_argument(self, parse):
        with pytest.raises(OptionSyntaxError):
            parse("--title")

    def test_stray_positional(self, parse):
        with pytest.raises(OptionSyntaxError):
            parse("ls")

    def test_no_abbreviations(self, parse):
        with pytest.raises(OptionSyntaxError):
            parse("--wind")

    def test_unsupported_fatal(self, parse):
        with pytest.raises(UnsupportedOptionError):
            parse("--disable-factory")

    def test_unsupported_non_fatal(self, parse):
        options = parse("--save-config", "/tmp/x", "--use-factory")
        assert len(options.windows) == 1


class TestBuildParser:
    """build_parser"""

    def test_every_digester_option_is_registered(self, digester):
        parser = build_parser(digester)
        registered = {s.lstrip("-") for action in parser._actions for s in action.option_strings}

        assert set(digester.option_names) <= registered

    def test_hidden_options_not_in_help(self, digester):
        help_text = build_parser(digester).format_help()

        assert "--window" in help_text
        assert "--zoom" in help_text
        assert "--sm-client-id" not in help_text
        assert "--app-id" not in help_text

    def test_version_exits(self, digester, capsys):
        with pytest.raises(SystemExit) as exc_info:
            build_parser(digester).parse_args(["--version"])

        assert exc_info.value.code == 0
        assert "termspec" in capsys.readouterr().out


def test_digester_events_follow_command_line_order(options, resolver):
    seen = []

    class RecordingDigester(OptionDigester):
        def handle(self, option, value=None):
            seen.append((option, value))
            super().handle(option, value)

    parser = build_parser(RecordingDigester(options, resolver))
    parser.parse_args(["--tab", "--title=x", "-t", "y", "--zoom", "2", "--window"])

    assert seen == [
        ("--tab", None),
        ("--title", "x"),
        ("--title", "y"),
        ("--zoom", "2"),
        ("--window", None),
    ]
