"""Update resolution datatypes."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Mapping

PACKAGE_TYPES = ("plugin", "theme")


@dataclass(frozen=True)
class LocalDescriptor:
    package_file: str
    slug: str
    local_version: str
    update_source_url: str | None = None
    path: Path | None = None

    @property
    def package_type(self) -> str:
        return "theme" if self.package_file.endswith("style.css") else "plugin"


@dataclass(frozen=True)
class UpdateManifest:
    """Provider-agnostic description of the latest remote release."""

    slug: str
    package_type: str
    provider_id: str
    remote_version: str
    download_link: str = ""
    tested: str = ""
    requires: str = ""
    requires_php: str = ""
    icons: Mapping[str, str] = field(default_factory=dict)
    banners: Mapping[str, str] = field(default_factory=dict)
    auth_header: Mapping[str, str] | None = None
    branch: str = ""
    details_url: str = ""
    published_at: str = ""
    name: str = ""

    def __post_init__(self) -> None:
        if self.package_type not in PACKAGE_TYPES:
            raise ValueError(f"package_type must be one of {PACKAGE_TYPES}, got {self.package_type!r}")

    def to_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        payload["icons"] = dict(self.icons)
        payload["banners"] = dict(self.banners)
        payload["auth_header"] = dict(self.auth_header) if self.auth_header is not None else None
        return payload

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "UpdateManifest":
        auth_header = data.get("auth_header")
        return cls(
            slug=str(data["slug"]),
            package_type=str(data["package_type"]),
            provider_id=str(data["provider_id"]),
            remote_version=str(data["remote_version"]),
            download_link=str(data.get("download_link") or ""),
            tested=str(data.get("tested") or ""),
            requires=str(data.get("requires") or ""),
            requires_php=str(data.get("requires_php") or ""),
            icons={str(k): str(v) for k, v in (data.get("icons") or {}).items()},
            banners={str(k): str(v) for k, v in (data.get("banners") or {}).items()},
            auth_header=(
                {str(k): str(v) for k, v in auth_header.items()} if isinstance(auth_header, Mapping) else None
            ),
            branch=str(data.get("branch") or ""),
            details_url=str(data.get("details_url") or ""),
            published_at=str(data.get("published_at") or ""),
            name=str(data.get("name") or ""),
        )


@dataclass(frozen=True)
class CacheEntry:
    key: str
    payload: UpdateManifest
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


@dataclass(frozen=True)
class UpdateDecision:
    has_update: bool
    manifest: UpdateManifest


@dataclass(frozen=True)
class FetchResponse:
    status_code: int
    body: str
    url: str = ""
