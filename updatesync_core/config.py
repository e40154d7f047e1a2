"""YAML configuration for update resolution."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

import yaml

from .cache import DEFAULT_TTL_SECONDS, FileCache
from .engine import UpdateResolutionEngine
from .http import HttpFetcher
from .install import ArchiveSourceRemapper
from .providers import GenericAdapter, GitHubAdapter, GitLabAdapter, ProviderResolver
from .providers.generic import DEFAULT_QUERY_TEMPLATE

CONFIG_FILENAME = "updatesync.yml"
DEFAULT_CONFIG_DIR = ".updatesync"


def _ensure_mapping(data: Any, section: str) -> Mapping[str, Any]:
    if data is None:
        return {}
    if isinstance(data, Mapping):
        return data
    raise ValueError(f"expected mapping for {section} configuration")


def _resolve_env_value(value: Any) -> Any:
    if isinstance(value, str) and value.startswith("${") and value.endswith("}"):
        env_name = value[2:-1].strip()
        if env_name:
            return os.getenv(env_name, "")
    return value


def _to_int(value: Any, default: int, key: str) -> int:
    value = _resolve_env_value(value)
    if value is None or value == "":
        return default
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{key} must be an integer, got {value!r}") from exc


def _to_float(value: Any, default: float, key: str) -> float:
    value = _resolve_env_value(value)
    if value is None or value == "":
        return default
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{key} must be a number, got {value!r}") from exc


def _to_bool(value: Any, default: bool) -> bool:
    value = _resolve_env_value(value)
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in {"1", "true", "yes", "on"}:
            return True
        if normalized in {"0", "false", "no", "off"}:
            return False
    return bool(value)


def _to_optional_str(value: Any) -> str | None:
    value = _resolve_env_value(value)
    if value is None:
        return None
    text = str(value).strip()
    return text or None


@dataclass
class ProviderSettings:
    hosts: list[str] = field(default_factory=list)
    token: str | None = None
    raw_token: str | None = None

    @classmethod
    def from_dict(cls, data: Any, section: str, default_hosts: list[str]) -> "ProviderSettings":
        raw = _ensure_mapping(data, section)
        hosts_raw = raw.get("hosts")
        if hosts_raw is None:
            hosts = list(default_hosts)
        elif isinstance(hosts_raw, list):
            hosts = [str(item).strip().lower() for item in hosts_raw if str(item).strip()]
        else:
            raise ValueError(f"{section}.hosts must be a list")
        raw_token = raw.get("token")
        return cls(
            hosts=hosts,
            token=_to_optional_str(raw_token),
            raw_token=str(raw_token) if raw_token is not None else None,
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"hosts": list(self.hosts)}
        # Persist the ${ENV} reference rather than the resolved secret.
        if self.raw_token is not None:
            data["token"] = self.raw_token
        return data


@dataclass
class UpdateSyncConfig:
    ttl_seconds: int = DEFAULT_TTL_SECONDS
    cache_directory: str = "cache"
    timeout_seconds: float = 15.0
    download_timeout_seconds: float = 300.0
    user_agent: str = "UpdateSync"
    case_insensitive: bool = True
    github: ProviderSettings = field(default_factory=lambda: ProviderSettings(hosts=["github.com"]))
    gitlab: ProviderSettings = field(default_factory=lambda: ProviderSettings(hosts=["gitlab.com"]))
    generic_query_template: str = DEFAULT_QUERY_TEMPLATE

    @classmethod
    def from_dict(cls, data: Any) -> "UpdateSyncConfig":
        raw = _ensure_mapping(data, "updatesync")
        cache = _ensure_mapping(raw.get("cache"), "cache")
        http = _ensure_mapping(raw.get("http"), "http")
        remap = _ensure_mapping(raw.get("remap"), "remap")
        providers = _ensure_mapping(raw.get("providers"), "providers")
        generic = _ensure_mapping(providers.get("generic"), "providers.generic")

        ttl_seconds = _to_int(cache.get("ttl_seconds"), DEFAULT_TTL_SECONDS, "cache.ttl_seconds")
        if ttl_seconds <= 0:
            raise ValueError("cache.ttl_seconds must be positive")
        return cls(
            ttl_seconds=ttl_seconds,
            cache_directory=str(_resolve_env_value(cache.get("directory")) or "cache"),
            timeout_seconds=_to_float(http.get("timeout_seconds"), 15.0, "http.timeout_seconds"),
            download_timeout_seconds=_to_float(
                http.get("download_timeout_seconds"), 300.0, "http.download_timeout_seconds"
            ),
            user_agent=str(_resolve_env_value(http.get("user_agent")) or "UpdateSync"),
            case_insensitive=_to_bool(remap.get("case_insensitive"), True),
            github=ProviderSettings.from_dict(providers.get("github"), "providers.github", ["github.com"]),
            gitlab=ProviderSettings.from_dict(providers.get("gitlab"), "providers.gitlab", ["gitlab.com"]),
            generic_query_template=str(generic.get("query_template") or DEFAULT_QUERY_TEMPLATE),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "cache": {"ttl_seconds": self.ttl_seconds, "directory": self.cache_directory},
            "http": {
                "timeout_seconds": self.timeout_seconds,
                "download_timeout_seconds": self.download_timeout_seconds,
                "user_agent": self.user_agent,
            },
            "remap": {"case_insensitive": self.case_insensitive},
            "providers": {
                "github": self.github.to_dict(),
                "gitlab": self.gitlab.to_dict(),
                "generic": {"query_template": self.generic_query_template},
            },
        }


class ConfigService:
    def __init__(self, config_dir: Path | str | None = None) -> None:
        base_dir = Path(config_dir) if config_dir else Path(DEFAULT_CONFIG_DIR)
        self.config_dir = base_dir.expanduser()
        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.config_path = self.config_dir / CONFIG_FILENAME
        self.config = self._load()

    def _load(self) -> UpdateSyncConfig:
        if not self.config_path.exists():
            return UpdateSyncConfig()
        raw = yaml.safe_load(self.config_path.read_text(encoding="utf-8")) or {}
        return UpdateSyncConfig.from_dict(raw)

    def save(self, config: UpdateSyncConfig | None = None) -> Path:
        if config is not None:
            self.config = config
        self.config_path.write_text(yaml.safe_dump(self.config.to_dict(), sort_keys=False), encoding="utf-8")
        return self.config_path

    @property
    def cache_root(self) -> Path:
        directory = Path(self.config.cache_directory).expanduser()
        return directory if directory.is_absolute() else self.config_dir / directory

    def build_resolver(self) -> ProviderResolver:
        resolver = ProviderResolver(fallback=GenericAdapter(query_template=self.config.generic_query_template))
        github = GitHubAdapter(token=self.config.github.token)
        gitlab = GitLabAdapter(token=self.config.gitlab.token)
        for host in self.config.github.hosts:
            resolver.register(host, github)
        for host in self.config.gitlab.hosts:
            resolver.register(host, gitlab)
        return resolver

    def build_fetcher(self) -> HttpFetcher:
        return HttpFetcher(
            timeout_seconds=self.config.timeout_seconds,
            download_timeout_seconds=self.config.download_timeout_seconds,
            user_agent=self.config.user_agent,
        )

    def build_remapper(self) -> ArchiveSourceRemapper:
        return ArchiveSourceRemapper(case_insensitive=self.config.case_insensitive)

    def build_engine(self) -> UpdateResolutionEngine:
        return UpdateResolutionEngine(
            cache=FileCache(self.cache_root),
            fetcher=self.build_fetcher(),
            resolver=self.build_resolver(),
            ttl_seconds=self.config.ttl_seconds,
            timeout_seconds=self.config.timeout_seconds,
        )
