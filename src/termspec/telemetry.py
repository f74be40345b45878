"""Telemetry - 统一日志入口

提供日志工厂和 Diagnostics（verbosity 控制的诊断输出）。

日志格式: # [Component] msg
所有诊断行都以 "# " 开头，避免与 --print-environment 等机器可读输出混淆。
"""

import logging
import sys

from .config import DEFAULT_VERBOSITY, LOG_LEVEL

# 全局日志配置
_LOG_FORMAT = "# %(message)s"

# Diagnostics 专用 logger 名称
DIAGNOSTICS_LOGGER = "termspec.diagnostics"


def get_logger(name: str) -> logging.Logger:
    """获取带模块前缀的 logger

    Args:
        name: 模块名（通常使用 __name__）

    Returns:
        Logger 实例
    """
    return logging.getLogger(name)


def configure_logging(level: str | int = LOG_LEVEL) -> logging.Handler:
    """安装 stderr handler（每行以 "# " 开头）

    Args:
        level: 日志级别名或数值

    Returns:
        安装的 handler
    """
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))

    root = logging.getLogger("termspec")
    root.handlers = [handler]
    root.setLevel(level)
    root.propagate = False
    return handler


class Diagnostics:
    """verbosity 控制的诊断输出

    显式在解析流程中传递，而不是全局变量。

    级别:
        0 - quiet，不输出
        1 - notice（弃用提示、zoom 夹取、profile 回退等）
        2+ - detail（重复选项等次要提示）
    """

    def __init__(self, verbosity: int = DEFAULT_VERBOSITY, logger: logging.Logger | None = None):
        self.verbosity = verbosity
        self._logger = logger or get_logger(DIAGNOSTICS_LOGGER)

    def quiet(self) -> None:
        self.verbosity = 0

    def increase(self) -> None:
        self.verbosity += 1

    def notice(self, msg: str) -> None:
        """verbosity >= 1 时输出"""
        if self.verbosity >= 1:
            self._logger.warning(msg)

    def detail(self, msg: str) -> None:
        """verbosity >= 2 时输出"""
        if self.verbosity >= 2:
            self._logger.warning(msg)
