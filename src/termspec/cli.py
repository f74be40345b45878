"""termspec 命令行入口

解析命令行并打印规格树（TERMSPEC_OUTPUT=json 时输出 JSON）。
"""

import json
import sys

from rich.console import Console
from rich.markup import escape

from . import config
from .errors import OptionError, ProfileResolverError
from .options import parse_options
from .profiles import load_profiles
from .render import print_tree
from .telemetry import Diagnostics, configure_logging


def main(argv: list[str] | None = None) -> int:
    """入口函数

    Returns:
        退出码：0 成功，1 解析失败
    """
    configure_logging()
    argv = sys.argv[1:] if argv is None else argv
    err_console = Console(stderr=True)

    try:
        resolver = load_profiles(config.PROFILES_FILE)
        options = parse_options(argv, resolver, Diagnostics())
    except (OptionError, ProfileResolverError) as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}", highlight=False)
        return 1

    if config.OUTPUT_FORMAT == "json":
        print(json.dumps(options.to_dict(), indent=2))
    else:
        print_tree(options)
    return 0


if __name__ == "__main__":
    sys.exit(main())
