"""Profile Resolver 接口

把用户给出的 profile 名称或 UUID 解析为规范的 profile UUID。

- resolve(name): 名称或 UUID；None 表示默认 profile
- resolve_uuid(uuid): 只接受 UUID（内部选项使用）
"""

import json
from abc import ABC, abstractmethod
from pathlib import Path

from .config import BUILTIN_DEFAULT_PROFILE
from .errors import ProfileNotFoundError, ProfileResolverError
from .telemetry import get_logger

logger = get_logger(__name__)


class ProfileResolver(ABC):
    """Profile 解析接口

    使用示例:
        resolver = StaticProfileResolver({"uuid-1": "Work"}, default="uuid-1")
        resolver.resolve("Work")   # -> "uuid-1"
        resolver.resolve(None)     # -> "uuid-1"
    """

    @abstractmethod
    def resolve(self, name: str | None) -> str:
        """按 UUID 或名称解析

        Args:
            name: profile UUID 或可见名称；None 表示默认 profile

        Returns:
            profile UUID

        Raises:
            ProfileNotFoundError: 名称/UUID 不存在
            ProfileResolverError: 没有默认 profile
        """

    @abstractmethod
    def resolve_uuid(self, uuid: str) -> str:
        """严格按 UUID 解析

        Raises:
            ProfileNotFoundError: UUID 不存在
        """


class StaticProfileResolver(ProfileResolver):
    """内存中的 profile 目录"""

    def __init__(self, profiles: dict[str, str], default: str | None = None):
        """
        Args:
            profiles: {uuid: 可见名称}
            default: 默认 profile UUID
        """
        self._profiles = dict(profiles)
        self._default = default

    @property
    def profiles(self) -> dict[str, str]:
        return dict(self._profiles)

    @property
    def default(self) -> str | None:
        return self._default

    def resolve(self, name: str | None) -> str:
        if name is None:
            if self._default is None or self._default not in self._profiles:
                raise ProfileResolverError("No default profile configured")
            return self._default

        if name in self._profiles:
            return name

        matches = [uuid for uuid, visible in self._profiles.items() if visible == name]
        if len(matches) == 1:
            return matches[0]
        if len(matches) > 1:
            logger.warning(f"[Profiles] Ambiguous profile name “{name}”, using {matches[0]}")
            return matches[0]

        raise ProfileNotFoundError(name)

    def resolve_uuid(self, uuid: str) -> str:
        if uuid in self._profiles:
            return uuid
        raise ProfileNotFoundError(uuid)


def load_profiles(path: str | Path) -> StaticProfileResolver:
    """从 JSON 文件加载 profile 目录

    文件格式: {"default": "<uuid>", "profiles": {"<uuid>": "<name>", ...}}
    文件不存在时返回只含内置默认 profile 的目录。

    Args:
        path: JSON 文件路径

    Returns:
        StaticProfileResolver

    Raises:
        ProfileResolverError: 文件无法解析
    """
    path = Path(path)
    if not path.exists():
        logger.debug(f"[Profiles] {path} not found, using builtin default profile")
        return StaticProfileResolver({BUILTIN_DEFAULT_PROFILE: "Default"}, default=BUILTIN_DEFAULT_PROFILE)

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ProfileResolverError(f"Failed to load profiles from {path}: {e}") from e

    if not isinstance(data, dict):
        raise ProfileResolverError(f"Invalid profiles file {path}: expected an object")

    profiles = data.get("profiles") or {}
    if not isinstance(profiles, dict):
        raise ProfileResolverError(f"Invalid profiles in {path}: expected an object")

    return StaticProfileResolver(
        {str(uuid): str(name) for uuid, name in profiles.items()},
        default=data.get("default"),
    )
