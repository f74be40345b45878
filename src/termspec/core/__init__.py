"""Core module - shell splitting and identifier helpers"""

from .appid import is_valid_app_id
from .shell import compress, split_argv

__all__ = [
    "split_argv",
    "compress",
    "is_valid_app_id",
]
