"""Provider adapter contract and helpers shared by the adapters."""

from __future__ import annotations

import json
from typing import Any, Mapping, Protocol
from urllib.parse import urlsplit

from ..errors import InvalidUpdateSource, MalformedResponse, RemoteRepoNotFound
from ..types import LocalDescriptor, UpdateManifest


class ProviderAdapter(Protocol):
    provider_id: str

    def build_query_url(self, local: LocalDescriptor) -> str: ...

    def request_options(self) -> dict[str, str]: ...

    def download_headers(self) -> dict[str, str]: ...

    def normalize(self, raw: Any, local: LocalDescriptor) -> UpdateManifest: ...


def parse_json_body(body: str, *, url: str = "") -> Any:
    text = (body or "").strip()
    if not text:
        raise MalformedResponse("empty response body", url=url)
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise MalformedResponse("response body is not valid JSON", url=url) from exc
    if not payload:
        raise MalformedResponse("response body is an empty JSON document", url=url)
    if isinstance(payload, dict) and payload.get("error"):
        raise RemoteRepoNotFound(f"provider reported an error: {payload.get('error')}", url=url)
    return payload


def text_field(payload: Mapping[str, Any], *keys: str) -> str:
    for key in keys:
        value = payload.get(key)
        if value is None:
            continue
        text = str(value).strip()
        if text:
            return text
    return ""


def string_mapping(value: Any) -> dict[str, str]:
    if not isinstance(value, Mapping):
        return {}
    return {str(k): str(v) for k, v in value.items() if v is not None}


def repository_path(update_source_url: str) -> str:
    parsed = urlsplit(update_source_url)
    path = parsed.path.strip("/")
    if path.endswith(".git"):
        path = path[: -len(".git")]
    if not path:
        raise InvalidUpdateSource(f"update source URL has no repository path: {update_source_url!r}")
    return path


def host_of(url: str) -> str:
    return (urlsplit(url).hostname or "").lower()

