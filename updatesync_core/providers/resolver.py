"""Select the provider adapter for an update source URL."""

from __future__ import annotations

import logging
from typing import Iterable
from urllib.parse import urlsplit

from ..errors import InvalidUpdateSource, UnknownProvider
from .base import ProviderAdapter
from .generic import GenericAdapter
from .github import GitHubAdapter
from .gitlab import GitLabAdapter

logger = logging.getLogger(__name__)


def _host_matches(host: str, pattern: str) -> bool:
    key = pattern.strip().lower()
    if not key:
        return False
    return host == key or host.endswith(f".{key}")


class ProviderResolver:
    """Host-pattern table; first registered match wins, otherwise the fallback."""

    def __init__(
        self,
        routes: Iterable[tuple[str, ProviderAdapter]] | None = None,
        *,
        fallback: ProviderAdapter | None = None,
    ) -> None:
        self._routes: list[tuple[str, ProviderAdapter]] = list(routes or [])
        self.fallback: ProviderAdapter = fallback or GenericAdapter()

    @classmethod
    def default(
        cls,
        *,
        github_token: str | None = None,
        gitlab_token: str | None = None,
    ) -> "ProviderResolver":
        return cls(
            [
                ("github.com", GitHubAdapter(token=github_token)),
                ("gitlab.com", GitLabAdapter(token=gitlab_token)),
            ]
        )

    @property
    def routes(self) -> tuple[tuple[str, ProviderAdapter], ...]:
        return tuple(self._routes)

    def register(self, host_pattern: str, adapter: ProviderAdapter) -> None:
        self._routes.append((host_pattern, adapter))

    def lookup(self, update_source_url: str) -> ProviderAdapter:
        parsed = urlsplit(update_source_url or "")
        if not parsed.scheme or not parsed.hostname:
            raise InvalidUpdateSource(f"update source must be an absolute URL: {update_source_url!r}")
        host = parsed.hostname.lower()
        for pattern, adapter in self._routes:
            if _host_matches(host, pattern):
                return adapter
        raise UnknownProvider(f"no provider registered for host '{host}'")

    def resolve(self, update_source_url: str) -> ProviderAdapter:
        try:
            return self.lookup(update_source_url)
        except UnknownProvider as exc:
            logger.debug("%s; using %s adapter", exc, self.fallback.provider_id)
            return self.fallback
