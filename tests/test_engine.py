from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Mapping

import pytest

from updatesync_core.cache import FileCache, MemoryCache, cache_key
from updatesync_core.engine import UpdateResolutionEngine
from updatesync_core.errors import (
    InvalidUpdateSource,
    MalformedResponse,
    MissingUpdateSource,
    NetworkError,
    RemoteRepoNotFound,
)
from updatesync_core.providers import GitHubAdapter, ProviderResolver
from updatesync_core.types import FetchResponse, LocalDescriptor

GITHUB_PAYLOAD = {"tag_name": "v2.1.0", "assets": [{"browser_download_url": "https://x/a.zip"}]}


class _Clock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


class _FakeFetcher:
    def __init__(self, body: Any = GITHUB_PAYLOAD, status_code: int = 200) -> None:
        self.body = body if isinstance(body, str) else json.dumps(body)
        self.status_code = status_code
        self.calls: list[tuple[str, Mapping[str, Any] | None]] = []

    def fetch(self, url: str, options: Mapping[str, Any] | None = None) -> FetchResponse:
        self.calls.append((url, options))
        return FetchResponse(status_code=self.status_code, body=self.body, url=url)


class _FailingFetcher:
    def __init__(self) -> None:
        self.calls = 0

    def fetch(self, url: str, options: Mapping[str, Any] | None = None) -> FetchResponse:
        self.calls += 1
        raise NetworkError("request timed out after 15.0s", url=url)


def _local(version: str = "2.0.0", url: str | None = "https://github.com/acme/my-plugin") -> LocalDescriptor:
    return LocalDescriptor(
        package_file="my-plugin/my-plugin.php",
        slug="my-plugin",
        local_version=version,
        update_source_url=url,
    )


def _engine(fetcher, clock: _Clock | None = None, **kwargs) -> UpdateResolutionEngine:
    return UpdateResolutionEngine(cache=MemoryCache(clock=clock or _Clock()), fetcher=fetcher, **kwargs)


def test_github_release_newer_than_local_reports_update() -> None:
    fetcher = _FakeFetcher()
    decision = _engine(fetcher).resolve_update(_local("2.0.0"))
    assert decision.has_update is True
    assert decision.manifest.remote_version == "2.1.0"
    assert decision.manifest.download_link == "https://x/a.zip"
    url, options = fetcher.calls[0]
    assert url == "https://api.github.com/repos/acme/my-plugin/releases/latest"
    assert options["headers"]["Accept"] == "application/vnd.github+json"


def test_equal_versions_report_no_update() -> None:
    decision = _engine(_FakeFetcher()).resolve_update(_local("2.1.0"))
    assert decision.has_update is False
    assert decision.manifest.remote_version == "2.1.0"


def test_gitlab_release_without_assets_has_empty_download_link() -> None:
    fetcher = _FakeFetcher([{"tag_name": "v3.0.0", "assets": {"links": []}}])
    decision = _engine(fetcher).resolve_update(_local("2.0.0", "https://gitlab.com/acme/my-plugin"))
    assert decision.has_update is True
    assert decision.manifest.remote_version == "3.0.0"
    assert decision.manifest.download_link == ""


def test_second_resolution_within_ttl_does_not_fetch() -> None:
    fetcher = _FakeFetcher()
    engine = _engine(fetcher)
    first = engine.resolve_update(_local())
    second = engine.resolve_update(_local())
    assert len(fetcher.calls) == 1
    assert first.manifest == second.manifest


def test_expired_entry_triggers_new_fetch() -> None:
    clock = _Clock()
    fetcher = _FakeFetcher()
    engine = _engine(fetcher, clock, ttl_seconds=60)
    engine.resolve_update(_local())
    clock.now += 61
    engine.resolve_update(_local())
    assert len(fetcher.calls) == 2


def test_manifest_is_cached_under_package_file_key(tmp_path: Path) -> None:
    clock = _Clock()
    cache = FileCache(tmp_path, clock=clock)
    engine = UpdateResolutionEngine(cache=cache, fetcher=_FakeFetcher())
    engine.resolve_update(_local())
    entry = cache.get(cache_key("my-plugin/my-plugin.php"))
    assert entry is not None
    assert entry.payload.remote_version == "2.1.0"
    assert entry.expires_at == clock.now + 300


def test_missing_update_source_short_circuits() -> None:
    fetcher = _FakeFetcher()
    engine = _engine(fetcher)
    with pytest.raises(MissingUpdateSource):
        engine.resolve_update(_local(url=None))
    assert engine.check_for_update(_local(url=None)) is None
    assert fetcher.calls == []


@pytest.mark.parametrize(
    "body,status,error",
    [
        ("", 200, MalformedResponse),
        ("<html>", 200, MalformedResponse),
        ('{"error": "nope"}', 200, RemoteRepoNotFound),
        ('{"message": "Not Found"}', 404, RemoteRepoNotFound),
        ("{}", 500, NetworkError),
    ],
)
def test_failures_propagate_and_are_not_cached(body: str, status: int, error: type[Exception]) -> None:
    fetcher = _FakeFetcher(body, status_code=status)
    engine = _engine(fetcher)
    with pytest.raises(error):
        engine.resolve_update(_local())
    with pytest.raises(error):
        engine.resolve_update(_local())
    assert len(fetcher.calls) == 2


def test_network_error_propagates_without_retry() -> None:
    fetcher = _FailingFetcher()
    engine = _engine(fetcher)
    with pytest.raises(NetworkError):
        engine.resolve_update(_local())
    assert fetcher.calls == 1


def test_malformed_response_is_logged_differently_from_up_to_date(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level("INFO", logger="updatesync_core.engine")
    with pytest.raises(MalformedResponse):
        _engine(_FakeFetcher("")).resolve_update(_local())
    _engine(_FakeFetcher()).resolve_update(_local("2.1.0"))
    messages = [record.getMessage() for record in caplog.records]
    assert any(message.startswith("malformed provider response") for message in messages)
    assert any(message.startswith("package up to date") for message in messages)


def test_timeout_is_forwarded_to_fetcher() -> None:
    fetcher = _FakeFetcher()
    _engine(fetcher, timeout_seconds=5.0).resolve_update(_local())
    assert fetcher.calls[0][1]["timeout_seconds"] == 5.0


def test_unknown_host_uses_generic_adapter() -> None:
    fetcher = _FakeFetcher({"version": "9.0.0", "download_link": "https://updates.example.org/p.zip"})
    engine = _engine(fetcher, resolver=ProviderResolver.default())
    decision = engine.resolve_update(_local(url="https://updates.example.org/api/my-plugin"))
    assert fetcher.calls[0][0] == "https://updates.example.org/api/my-plugin"
    assert decision.manifest.provider_id == "generic"
    assert decision.has_update is True


def test_resolve_package_reads_descriptor(tmp_path: Path) -> None:
    plugin_dir = tmp_path / "my-plugin"
    plugin_dir.mkdir()
    plugin_file = plugin_dir / "my-plugin.php"
    plugin_file.write_text(
        "<?php\n/**\n * Version: 2.0.0\n * Update URI: https://github.com/acme/my-plugin\n */\n",
        encoding="utf-8",
    )
    decision = _engine(_FakeFetcher()).resolve_package(plugin_file)
    assert decision.has_update is True
    assert decision.manifest.slug == "my-plugin"


def test_ttl_must_be_positive() -> None:
    with pytest.raises(ValueError):
        _engine(_FakeFetcher(), ttl_seconds=0)


@pytest.mark.parametrize("url", ["false", "https://github.com/acme"])
def test_unusable_update_source_is_skipped_by_check(url: str) -> None:
    fetcher = _FakeFetcher()
    engine = _engine(fetcher)
    assert engine.check_for_update(_local(url=url)) is None
    with pytest.raises(InvalidUpdateSource):
        engine.resolve_update(_local(url=url))
    assert fetcher.calls == []


def test_provider_token_is_not_written_to_cache(tmp_path: Path) -> None:
    token = "ghp_SUPERSECRET"
    engine = UpdateResolutionEngine(
        cache=FileCache(tmp_path, clock=_Clock()),
        fetcher=_FakeFetcher(),
        resolver=ProviderResolver([("github.com", GitHubAdapter(token=token))]),
    )
    local = _local()
    decision = engine.resolve_update(local)
    assert decision.manifest.auth_header is None
    for path in tmp_path.rglob("*"):
        if path.is_file():
            assert token not in path.read_text(encoding="utf-8")

    injector = engine.auth_injector(local, decision.manifest)
    args = injector.inject({"headers": {}}, decision.manifest.download_link)
    assert args["headers"]["Authorization"] == f"token {token}"
