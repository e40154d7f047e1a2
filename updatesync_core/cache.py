"""Cache gateway contract and the stores shipped with the library."""

from __future__ import annotations

import hashlib
import json
import logging
import time
from pathlib import Path
from typing import Any, Callable, Protocol

from .types import CacheEntry, UpdateManifest

logger = logging.getLogger(__name__)

CACHE_NAMESPACE = "updatesync_"
DEFAULT_TTL_SECONDS = 5 * 60

Clock = Callable[[], float]


def cache_key(package_file: str) -> str:
    digest = hashlib.sha256(package_file.encode("utf-8")).hexdigest()
    return f"{CACHE_NAMESPACE}{digest}"


class CacheGateway(Protocol):
    def get(self, key: str) -> CacheEntry | None: ...

    def set(self, key: str, manifest: UpdateManifest, ttl_seconds: int) -> None: ...


class MemoryCache:
    """Process-local store, mostly useful for tests and short-lived hosts."""

    def __init__(self, *, clock: Clock = time.time) -> None:
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}

    def get(self, key: str) -> CacheEntry | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.is_expired(self._clock()):
            del self._entries[key]
            return None
        return entry

    def set(self, key: str, manifest: UpdateManifest, ttl_seconds: int) -> None:
        self._entries[key] = CacheEntry(key=key, payload=manifest, expires_at=self._clock() + ttl_seconds)


class FileCache:
    """One JSON document per key under ``root``; entries survive restarts."""

    def __init__(self, root: Path, *, clock: Clock = time.time) -> None:
        self.root = root.expanduser().resolve()
        self.root.mkdir(parents=True, exist_ok=True)
        self._clock = clock

    def _path(self, key: str) -> Path:
        safe = "".join(ch if ch.isalnum() or ch in ("-", "_", ".") else "_" for ch in key)
        return self.root / f"{safe}.json"

    def get(self, key: str) -> CacheEntry | None:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            document = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError):
            logger.warning("unreadable cache entry key=%s path=%s", key, path)
            return None
        if not isinstance(document, dict):
            return None
        try:
            expires_at = float(document.get("expires_at") or 0.0)
        except (TypeError, ValueError):
            logger.warning("unreadable cache entry key=%s path=%s", key, path)
            return None
        if self._clock() >= expires_at:
            return None
        payload = document.get("payload")
        if not isinstance(payload, dict):
            return None
        try:
            manifest = UpdateManifest.from_dict(payload)
        except (KeyError, ValueError):
            logger.warning("discarding incomplete cache entry key=%s", key)
            return None
        return CacheEntry(key=key, payload=manifest, expires_at=expires_at)

    def set(self, key: str, manifest: UpdateManifest, ttl_seconds: int) -> None:
        document: dict[str, Any] = {
            "key": key,
            "expires_at": self._clock() + ttl_seconds,
            "payload": manifest.to_dict(),
        }
        path = self._path(key)
        tmp_path = path.with_suffix(".json.tmp")
        tmp_path.write_text(json.dumps(document, sort_keys=True), encoding="utf-8")
        tmp_path.replace(path)

    def clear(self) -> None:
        for path in self.root.glob(f"{CACHE_NAMESPACE}*.json"):
            path.unlink(missing_ok=True)
