"""Update resolution: cached provider lookup followed by a version gate."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable

from .cache import DEFAULT_TTL_SECONDS, CacheGateway, cache_key
from .descriptor import load_local_descriptor
from .errors import MalformedResponse, MissingUpdateSource, NetworkError, RemoteRepoNotFound
from .http import Fetcher
from .install import AuthHeaderInjector
from .providers.base import parse_json_body
from .providers.resolver import ProviderResolver
from .types import LocalDescriptor, UpdateDecision, UpdateManifest
from .versions import compare_versions

logger = logging.getLogger(__name__)

DescriptorSource = Callable[[Path], LocalDescriptor]


class UpdateResolutionEngine:
    """Resolve whether a newer release exists for an installed package.

    The engine performs at most one network request per call and writes the
    cache only after a manifest has been built successfully. Failed lookups
    leave the cache untouched so the next trigger retries.
    """

    def __init__(
        self,
        *,
        cache: CacheGateway,
        fetcher: Fetcher,
        resolver: ProviderResolver | None = None,
        descriptor_source: DescriptorSource = load_local_descriptor,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        timeout_seconds: float | None = None,
    ) -> None:
        if int(ttl_seconds) <= 0:
            raise ValueError("ttl_seconds must be positive")
        self.cache = cache
        self.fetcher = fetcher
        self.resolver = resolver or ProviderResolver.default()
        self.descriptor_source = descriptor_source
        self.ttl_seconds = int(ttl_seconds)
        self.timeout_seconds = timeout_seconds

    def resolve_package(self, package_file: Path | str) -> UpdateDecision:
        return self.resolve_update(self.descriptor_source(Path(package_file)))

    def check_for_update(self, local: LocalDescriptor) -> UpdateDecision | None:
        try:
            return self.resolve_update(local)
        except MissingUpdateSource as exc:
            logger.debug("no usable update source package=%s: %s", local.package_file, exc)
            return None

    def auth_injector(self, local: LocalDescriptor, manifest: UpdateManifest) -> AuthHeaderInjector:
        """Injector for the single download of ``manifest.download_link``."""
        adapter = self.resolver.resolve(local.update_source_url or "")
        return AuthHeaderInjector(manifest, adapter.download_headers())

    def resolve_update(self, local: LocalDescriptor) -> UpdateDecision:
        if not local.update_source_url:
            raise MissingUpdateSource(f"{local.package_file} does not declare an update source")

        key = cache_key(local.package_file)
        entry = self.cache.get(key)
        if entry is not None:
            logger.debug("update cache hit package=%s key=%s", local.package_file, key)
            manifest = entry.payload
        else:
            logger.debug("update cache miss package=%s key=%s", local.package_file, key)
            manifest = self._fetch_manifest(local)
            self.cache.set(key, manifest, self.ttl_seconds)

        has_update = compare_versions(manifest.remote_version, local.local_version) > 0
        if has_update:
            logger.info(
                "update available package=%s local=%s remote=%s",
                local.package_file,
                local.local_version,
                manifest.remote_version,
            )
        else:
            logger.info("package up to date package=%s version=%s", local.package_file, local.local_version)
        return UpdateDecision(has_update=has_update, manifest=manifest)

    def _fetch_manifest(self, local: LocalDescriptor) -> UpdateManifest:
        adapter = self.resolver.resolve(local.update_source_url or "")
        url = adapter.build_query_url(local)
        options: dict[str, Any] = {"headers": adapter.request_options()}
        if self.timeout_seconds is not None:
            options["timeout_seconds"] = self.timeout_seconds
        logger.debug("update fetch provider=%s url=%s", adapter.provider_id, url)
        try:
            response = self.fetcher.fetch(url, options)
        except NetworkError as exc:
            logger.warning("update fetch failed provider=%s url=%s: %s", adapter.provider_id, url, exc)
            raise

        try:
            if response.status_code == 404:
                raise RemoteRepoNotFound(f"repository not found (status=404) url={url}", url=url)
            if not 200 <= response.status_code < 300:
                raise NetworkError(
                    f"unexpected status={response.status_code} url={url}",
                    url=url,
                    status_code=response.status_code,
                )
            raw = parse_json_body(response.body, url=url)
            manifest = adapter.normalize(raw, local)
        except RemoteRepoNotFound as exc:
            logger.warning("remote repository not found provider=%s url=%s: %s", adapter.provider_id, url, exc)
            raise
        except MalformedResponse as exc:
            if exc.url is None:
                exc.url = url
            logger.warning("malformed provider response provider=%s url=%s: %s", adapter.provider_id, url, exc)
            raise
        except NetworkError as exc:
            logger.warning("update fetch failed provider=%s url=%s: %s", adapter.provider_id, url, exc)
            raise
        return manifest
