"""GitLab project releases adapter."""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

from ..errors import MalformedResponse, RemoteRepoNotFound
from ..types import LocalDescriptor, UpdateManifest
from ..versions import strip_version_prefix
from .base import host_of, repository_path, string_mapping, text_field


def _first_link(release: dict[str, Any]) -> str:
    assets = release.get("assets")
    if not isinstance(assets, dict):
        return ""
    links = assets.get("links")
    if isinstance(links, list):
        for link in links:
            if isinstance(link, dict):
                url = text_field(link, "direct_asset_url", "url")
                if url:
                    return url
    sources = assets.get("sources")
    if isinstance(sources, list):
        for source in sources:
            if isinstance(source, dict) and text_field(source, "format") == "zip":
                return text_field(source, "url")
    return ""


class GitLabAdapter:
    provider_id = "gitlab"

    def __init__(self, *, token: str | None = None) -> None:
        self.token = (token or "").strip() or None

    def build_query_url(self, local: LocalDescriptor) -> str:
        source = local.update_source_url or ""
        encoded = quote(repository_path(source), safe="")
        return f"https://{host_of(source)}/api/v4/projects/{encoded}/releases"

    def _auth_header(self) -> dict[str, str]:
        if not self.token:
            return {}
        return {"PRIVATE-TOKEN": self.token}

    def request_options(self) -> dict[str, str]:
        return self._auth_header()

    def download_headers(self) -> dict[str, str]:
        return self._auth_header()

    def normalize(self, raw: Any, local: LocalDescriptor) -> UpdateManifest:
        if isinstance(raw, dict):
            message = text_field(raw, "message", "error")
            if message:
                raise RemoteRepoNotFound(f"GitLab reported: {message}")
            raise MalformedResponse("GitLab releases payload must be a list")
        if not isinstance(raw, list) or not raw:
            raise MalformedResponse("GitLab releases payload must be a non-empty list")
        # GitLab lists releases newest first.
        release = raw[0]
        if not isinstance(release, dict):
            raise MalformedResponse("GitLab release entry must be a JSON object")
        tag = text_field(release, "tag_name")
        if not tag:
            raise MalformedResponse("GitLab release entry has no tag_name")

        links = release.get("_links")
        return UpdateManifest(
            slug=local.slug,
            package_type=local.package_type,
            provider_id=self.provider_id,
            remote_version=strip_version_prefix(tag),
            download_link=_first_link(release),
            tested=text_field(release, "tested"),
            requires=text_field(release, "requires"),
            requires_php=text_field(release, "requires_php"),
            icons=string_mapping(release.get("icons")),
            banners=string_mapping(release.get("banners")),
            details_url=text_field(links, "self") if isinstance(links, dict) else "",
            published_at=text_field(release, "released_at", "created_at"),
            name=text_field(release, "name"),
        )
