"""Specification tree renderer using Rich library."""

from rich.console import Console
from rich.text import Text
from rich.tree import Tree

from .models import MenubarState, TabSpec, TerminalOptions, WindowSpec

_MENUBAR_LABELS = {
    MenubarState.SHOWN: "menubar shown",
    MenubarState.HIDDEN: "menubar hidden",
}


def _window_label(index: int, window: WindowSpec) -> Text:
    label = Text(f"Window {index}", style="bold")

    flags = []
    if window.implicit_first_window:
        flags.append("implicit")
    if window.source_tag.value:
        flags.append(window.source_tag.name.lower())
    if window.role:
        flags.append(f"role={window.role}")
    if window.geometry:
        flags.append(f"geometry={window.geometry}")
    if window.menubar in _MENUBAR_LABELS:
        flags.append(_MENUBAR_LABELS[window.menubar])
    if window.fullscreen:
        flags.append("fullscreen")
    if window.maximized:
        flags.append("maximized")

    if flags:
        label.append(f" ({', '.join(flags)})", style="dim")
    return label


def _tab_label(index: int, tab: TabSpec) -> Text:
    label = Text(f"Tab {index}", style="cyan")
    if tab.active:
        label.append(" *", style="bold green")

    fields = []
    if tab.profile:
        fields.append(f"profile={tab.profile}")
    if tab.title is not None:
        fields.append(f"title={tab.title!r}")
    if tab.working_dir is not None:
        fields.append(f"cwd={tab.working_dir}")
    if tab.zoom_set:
        fields.append(f"zoom={tab.zoom:g}")
    if tab.wait:
        fields.append("wait")
    if tab.fd_passes:
        fields.append("fd=" + ",".join(str(p.fd) for p in tab.fd_passes))

    if fields:
        label.append(" " + " ".join(fields))
    if tab.exec_argv:
        label.append(f" $ {' '.join(tab.exec_argv)}", style="yellow")
    return label


def render_tree(options: TerminalOptions) -> Tree:
    """构建规格树的 Rich Tree"""
    tree = Tree(Text("Terminal options", style="bold magenta"))
    for window_index, window in enumerate(options.windows):
        branch = tree.add(_window_label(window_index, window))
        for tab_index, tab in enumerate(window.tabs):
            branch.add(_tab_label(tab_index, tab))
    return tree


def print_tree(options: TerminalOptions, console: Console | None = None) -> None:
    (console or Console()).print(render_tree(options))
