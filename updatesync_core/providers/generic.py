"""Pass-through adapter for update servers that already speak the manifest shape."""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

from ..errors import MalformedResponse
from ..types import PACKAGE_TYPES, LocalDescriptor, UpdateManifest
from ..versions import strip_version_prefix
from .base import string_mapping, text_field

DEFAULT_QUERY_TEMPLATE = "{url}"


class GenericAdapter:
    provider_id = "generic"

    def __init__(self, *, query_template: str = DEFAULT_QUERY_TEMPLATE) -> None:
        self.query_template = query_template or DEFAULT_QUERY_TEMPLATE

    def build_query_url(self, local: LocalDescriptor) -> str:
        url = (local.update_source_url or "").rstrip("/")
        return self.query_template.format(url=url, slug=quote(local.slug, safe=""))

    def request_options(self) -> dict[str, str]:
        return {}

    def download_headers(self) -> dict[str, str]:
        return {}

    def normalize(self, raw: Any, local: LocalDescriptor) -> UpdateManifest:
        if not isinstance(raw, dict):
            raise MalformedResponse("update API payload must be a JSON object")
        version = text_field(raw, "version", "tag_name")
        if not version:
            raise MalformedResponse("update API payload has no version")
        package_type = text_field(raw, "type")
        if package_type not in PACKAGE_TYPES:
            package_type = local.package_type
        auth_header = string_mapping(raw.get("auth_header"))
        return UpdateManifest(
            slug=text_field(raw, "slug") or local.slug,
            package_type=package_type,
            provider_id=text_field(raw, "git") or self.provider_id,
            remote_version=strip_version_prefix(version),
            download_link=text_field(raw, "download_link"),
            tested=text_field(raw, "tested"),
            requires=text_field(raw, "requires"),
            requires_php=text_field(raw, "requires_php"),
            icons=string_mapping(raw.get("icons")),
            banners=string_mapping(raw.get("banners")),
            auth_header=auth_header or None,
            branch=text_field(raw, "branch"),
            details_url=text_field(raw, "url", "homepage"),
            published_at=text_field(raw, "last_updated"),
            name=text_field(raw, "name"),
        )
