"""GitHub releases adapter."""

from __future__ import annotations

from typing import Any

from ..errors import InvalidUpdateSource, MalformedResponse, RemoteRepoNotFound
from ..types import LocalDescriptor, UpdateManifest
from ..versions import strip_version_prefix
from .base import host_of, repository_path, string_mapping, text_field

GITHUB_MEDIA_TYPE = "application/vnd.github+json"


class GitHubAdapter:
    provider_id = "github"

    def __init__(self, *, token: str | None = None) -> None:
        self.token = (token or "").strip() or None

    def build_query_url(self, local: LocalDescriptor) -> str:
        source = local.update_source_url or ""
        parts = repository_path(source).split("/")
        if len(parts) < 2:
            raise InvalidUpdateSource(f"GitHub update source must name owner and repository: {source!r}")
        owner, repo = parts[0], parts[1]
        host = host_of(source)
        if host.startswith("www."):
            host = host[len("www.") :]
        return f"https://api.{host}/repos/{owner}/{repo}/releases/latest"

    def _auth_header(self) -> dict[str, str]:
        if not self.token:
            return {}
        return {"Authorization": f"token {self.token}"}

    def request_options(self) -> dict[str, str]:
        return {"Accept": GITHUB_MEDIA_TYPE, **self._auth_header()}

    def download_headers(self) -> dict[str, str]:
        return self._auth_header()

    def normalize(self, raw: Any, local: LocalDescriptor) -> UpdateManifest:
        if not isinstance(raw, dict):
            raise MalformedResponse("GitHub release payload must be a JSON object")
        tag = text_field(raw, "tag_name")
        if not tag:
            message = text_field(raw, "message")
            if message:
                raise RemoteRepoNotFound(f"GitHub reported: {message}")
            raise MalformedResponse("GitHub release payload has no tag_name")

        download_link = ""
        assets = raw.get("assets")
        if isinstance(assets, list) and assets and isinstance(assets[0], dict):
            download_link = text_field(assets[0], "browser_download_url")
        if not download_link:
            download_link = text_field(raw, "zipball_url")

        return UpdateManifest(
            slug=local.slug,
            package_type=local.package_type,
            provider_id=self.provider_id,
            remote_version=strip_version_prefix(tag),
            download_link=download_link,
            tested=text_field(raw, "tested"),
            requires=text_field(raw, "requires"),
            requires_php=text_field(raw, "requires_php"),
            icons=string_mapping(raw.get("icons")),
            banners=string_mapping(raw.get("banners")),
            branch=text_field(raw, "target_commitish"),
            details_url=text_field(raw, "html_url"),
            published_at=text_field(raw, "published_at"),
            name=text_field(raw, "name"),
        )
