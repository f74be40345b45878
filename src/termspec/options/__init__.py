"""Options 模块 - 命令行与会话文件消化

组件：
- prescan: 提取 -- / -x 之后的命令
- digester: 增量消化 (option, value) 事件
- merger: 合并会话配置文档
- parser: argparse 接线与完整解析流程
"""

from .digester import Cursor, OptionDigester
from .merger import load_config, merge_config, parse_config_text
from .parser import build_parser, parse_options
from .prescan import PrescanResult, prescan
from .values import parse_fd, parse_zoom, validate_app_id

__all__ = [
    "Cursor",
    "OptionDigester",
    "PrescanResult",
    "prescan",
    "merge_config",
    "load_config",
    "parse_config_text",
    "build_parser",
    "parse_options",
    "parse_fd",
    "parse_zoom",
    "validate_app_id",
]
