"""Tests for the config-document merger"""

import textwrap

import pytest

from termspec.errors import BadValueError, IncompatibleConfigVersionError, InvalidConfigFormatError
from termspec.models import MenubarState, SourceTag, WindowSpec
from termspec.options.merger import (
    ConfigHeader,
    load_config,
    merge_config,
    parse_config_text,
)


def _document(text: str):
    return parse_config_text(textwrap.dedent(text))


SESSION = """
    [Terminal Configuration]
    Version=1
    CompatVersion=1
    Windows=Window0;Window1;

    [Window0]
    Tabs=Terminal0;Terminal1;
    ActiveTerminal=Terminal1
    Role=main
    Geometry=80x24+10+10
    Maximized=true
    MenubarVisible=false

    [Window1]
    Tabs=Terminal2;
    Fullscreen=true

    [Terminal0]
    ProfileID=b1dcc9dd-5262-4d8d-a863-c897e6d979b9
    WorkingDirectory=/home/user/my\\sproject
    Title=editor
    Command=vim 'notes file.txt'

    [Terminal1]
    WorkingDirectory=/tmp

    [Terminal2]
    Command=htop
"""


class TestParseConfigText:
    """Test parse_config_text / load_config"""

    def test_keys_are_case_sensitive(self):
        document = _document(
            """
            [Group]
            Title=x
            """
        )
        assert dict(document.items("Group", raw=True)) == {"Title": "x"}

    def test_syntax_error(self):
        with pytest.raises(InvalidConfigFormatError):
            parse_config_text("Key=value outside group\n")

    def test_repeated_group_is_merged(self):
        document = parse_config_text("[A]\nx=1\n[A]\ny=2\n")

        assert dict(document.items("A", raw=True)) == {"x": "1", "y": "2"}

    def test_repeated_key_last_wins(self):
        document = parse_config_text("[T]\nTitle=first\nTitle=second\n")

        assert document.get("T", "Title", raw=True) == "second"

    def test_indented_key_is_not_a_continuation(self):
        document = parse_config_text("[T]\nTitle=a\n  Command=ls\n")

        assert dict(document.items("T", raw=True)) == {"Title": "a", "Command": "ls"}

    def test_load_missing_file(self, tmp_path):
        with pytest.raises(InvalidConfigFormatError, match="Failed to load"):
            load_config(tmp_path / "missing.conf")

    def test_load_file(self, tmp_path):
        path = tmp_path / "session.conf"
        path.write_text(textwrap.dedent(SESSION), encoding="utf-8")

        document = load_config(path)
        assert document.has_section("Window0")


class TestConfigHeader:
    """Test header decoding"""

    def test_lists_and_versions(self):
        header = ConfigHeader.model_validate({"Version": "2", "CompatVersion": "1", "Windows": "A;B;"})

        assert header.version == 2
        assert header.compat_version == 1
        assert header.windows == ["A", "B"]

    def test_unparseable_version_reads_as_zero(self):
        header = ConfigHeader.model_validate({"Version": "one"})
        assert header.version == 0

    def test_escaped_separator(self):
        header = ConfigHeader.model_validate({"Windows": "A\\;B;C"})
        assert header.windows == ["A;B", "C"]


class TestMergeConfig:
    """Test merge_config function"""

    def test_full_session(self, options):
        windows = merge_config(options, _document(SESSION), SourceTag.SESSION)

        assert windows == options.windows
        assert len(options.windows) == 2

        first, second = options.windows
        assert first.source_tag == SourceTag.SESSION
        assert first.role == "main"
        assert first.geometry == "80x24+10+10"
        assert first.maximized is True
        assert first.fullscreen is False
        assert first.menubar == MenubarState.HIDDEN

        tab0, tab1 = first.tabs
        assert tab0.profile == "b1dcc9dd-5262-4d8d-a863-c897e6d979b9"
        assert tab0.working_dir == "/home/user/my project"
        assert tab0.title == "editor"
        assert tab0.exec_argv == ["vim", "notes file.txt"]
        assert tab0.active is False
        assert tab1.active is True
        assert tab1.exec_argv is None

        assert second.fullscreen is True
        assert second.menubar == MenubarState.UNSET
        assert second.tabs[0].exec_argv == ["htop"]

    def test_appends_after_existing_windows(self, options):
        existing = WindowSpec()
        options.windows.append(existing)

        merge_config(options, _document(SESSION), SourceTag.DEFAULT)

        assert options.windows[0] is existing
        assert len(options.windows) == 3
        assert options.windows[1].source_tag == SourceTag.DEFAULT

    def test_window_without_tabs_skipped(self, options):
        document = _document(
            """
            [Terminal Configuration]
            Version=1
            CompatVersion=1
            Windows=Window0;Window1;

            [Window0]
            Role=empty

            [Window1]
            Tabs=Terminal0;
            """
        )

        merge_config(options, document, SourceTag.DEFAULT)

        assert len(options.windows) == 1
        assert options.windows[0].role is None

    def test_missing_window_group_skipped(self, options):
        document = _document(
            """
            [Terminal Configuration]
            Version=1
            CompatVersion=1
            Windows=Ghost;
            """
        )

        assert merge_config(options, document, SourceTag.DEFAULT) == []
        assert options.windows == []

    def test_missing_tab_group_gives_default_tab(self, options):
        document = _document(
            """
            [Terminal Configuration]
            Version=1
            CompatVersion=1
            Windows=Window0;

            [Window0]
            Tabs=Nowhere;
            """
        )

        merge_config(options, document, SourceTag.DEFAULT)

        tab = options.windows[0].tabs[0]
        assert tab.profile is None
        assert tab.exec_argv is None

    def test_defaults_applied_then_overlaid(self, options):
        options.defaults.geometry = "100x30"
        options.defaults.role = "from-cli"
        options.defaults.fullscreen = True

        merge_config(options, _document(SESSION), SourceTag.DEFAULT)

        first, second = options.windows
        assert first.role == "main"
        assert first.geometry == "80x24+10+10"
        assert first.fullscreen is True
        assert second.role is None
        assert second.geometry == "100x30"
        assert options.defaults.role is None

    def test_missing_top_group(self, options):
        document = _document(
            """
            [Window0]
            Tabs=Terminal0;
            """
        )

        with pytest.raises(InvalidConfigFormatError, match="Not a valid terminal config file"):
            merge_config(options, document, SourceTag.DEFAULT)

    def test_missing_windows_key(self, options):
        document = _document(
            """
            [Terminal Configuration]
            Version=1
            CompatVersion=1
            """
        )

        with pytest.raises(InvalidConfigFormatError) as exc_info:
            merge_config(options, document, SourceTag.DEFAULT)

        assert exc_info.value.option == "Windows"

    @pytest.mark.parametrize(
        "version,compat",
        [("1", "0"), ("0", "1"), ("1", "2"), ("-1", "1"), ("", "1"), ("1", "x")],
    )
    def test_incompatible_versions(self, options, version, compat):
        document = _document(
            f"""
            [Terminal Configuration]
            Version={version}
            CompatVersion={compat}
            Windows=
            """
        )

        with pytest.raises(IncompatibleConfigVersionError):
            merge_config(options, document, SourceTag.DEFAULT)

    def test_newer_version_same_compat_accepted(self, options):
        document = _document(
            """
            [Terminal Configuration]
            Version=7
            CompatVersion=1
            Windows=
            """
        )

        assert merge_config(options, document, SourceTag.DEFAULT) == []

    def test_bad_command_discards_whole_merge(self, options):
        options.defaults.role = "kept"
        document = _document(
            """
            [Terminal Configuration]
            Version=1
            CompatVersion=1
            Windows=Window0;Window1;

            [Window0]
            Tabs=Good;

            [Window1]
            Tabs=Bad;

            [Good]
            Command=ls

            [Bad]
            Command=echo 'unbalanced
            """
        )

        with pytest.raises(BadValueError) as exc_info:
            merge_config(options, document, SourceTag.DEFAULT)

        assert exc_info.value.option == "Bad/Command"
        assert options.windows == []
        assert options.defaults.role == "kept"

    def test_command_escapes(self, options):
        document = _document(
            r"""
            [Terminal Configuration]
            Version=1
            CompatVersion=1
            Windows=Window0;

            [Window0]
            Tabs=T;

            [T]
            Command=printf \\"a\\tb\\"
            """
        )

        merge_config(options, document, SourceTag.DEFAULT)

        assert options.windows[0].tabs[0].exec_argv == ["printf", "a\tb"]

    def test_indented_and_repeated_keys(self, options):
        document = parse_config_text(
            "[Terminal Configuration]\n"
            "Version=1\n"
            "CompatVersion=1\n"
            "Windows=Window0;\n"
            "[Window0]\n"
            "Tabs=T;\n"
            "[T]\n"
            "Title=old\n"
            "Title=a\n"
            "    Command=ls\n"
        )

        merge_config(options, document, SourceTag.DEFAULT)

        tab = options.windows[0].tabs[0]
        assert (tab.title, tab.exec_argv) == ("a", ["ls"])

    def test_invalid_boolean_reads_false(self, options):
        document = _document(
            """
            [Terminal Configuration]
            Version=1
            CompatVersion=1
            Windows=Window0;

            [Window0]
            Tabs=T;
            Maximized=yes
            MenubarVisible=true
            """
        )

        merge_config(options, document, SourceTag.DEFAULT)

        assert options.windows[0].maximized is False
        assert options.windows[0].menubar == MenubarState.SHOWN
