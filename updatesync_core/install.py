"""Install-time helpers: archive folder remapping and download authorization."""

from __future__ import annotations

import logging
import os
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from .errors import RemapFailed
from .types import PACKAGE_TYPES, UpdateManifest

logger = logging.getLogger(__name__)


def _normalized(path: Path) -> str:
    return os.path.normpath(str(path)).rstrip("/\\")


@dataclass(frozen=True)
class ArchiveSourceRemapper:
    """Rename an extracted archive folder to the package slug.

    ``case_insensitive`` makes the same-path-different-case safeguard
    explicit: when the extracted folder and the target differ only by case
    no move is attempted, since on case-insensitive filesystems that move
    would target the folder itself.
    """

    case_insensitive: bool = True

    def _same_path(self, left: Path, right: Path) -> bool:
        a, b = _normalized(left), _normalized(right)
        if self.case_insensitive:
            return a.casefold() == b.casefold()
        return a == b

    def remap(
        self,
        extracted_path: Path | str,
        expected_slug: str,
        install_kind: str,
        *,
        parent_dir: Path | str | None = None,
        fresh_install: bool = False,
    ) -> Path:
        if install_kind not in PACKAGE_TYPES:
            raise ValueError(f"install_kind must be one of {PACKAGE_TYPES}, got {install_kind!r}")
        source = Path(extracted_path)
        if fresh_install:
            return source
        slug = expected_slug.strip().strip("/\\")
        if not slug:
            raise ValueError("expected_slug cannot be empty")
        target = Path(parent_dir) / slug if parent_dir is not None else source.parent / slug

        if source.name == slug:
            return source
        if self._same_path(source, target):
            logger.debug("remap skipped, paths differ only by case source=%s target=%s", source, target)
            return target

        try:
            # On case-insensitive filesystems the target may be the source itself.
            if target.exists() and not os.path.samefile(source, target):
                shutil.rmtree(target)
            shutil.move(str(source), str(target))
        except OSError as exc:
            logger.warning("remap failed kind=%s source=%s target=%s: %s", install_kind, source, target, exc)
            raise RemapFailed(f"unable to move {source} to {target}: {exc}", source=source, target=target) from exc
        logger.info("remapped %s source=%s target=%s", install_kind, source, target)
        return target


def select_upgrade_source(
    source: Path | str,
    remote_source: Path | str,
    install_kind: str,
    hook_extra: Mapping[str, Any] | None,
    remapper: ArchiveSourceRemapper | None = None,
) -> Path:
    """Adapter for the host's source-selection hook."""
    extra = dict(hook_extra or {})
    if extra.get("action") == "install":
        return Path(source)
    slug = ""
    if install_kind == "plugin" and extra.get("plugin"):
        slug = os.path.dirname(str(extra["plugin"])) or str(extra["plugin"])
    elif install_kind == "theme" and extra.get("theme"):
        slug = str(extra["theme"])
    if not slug:
        return Path(source)
    remapper = remapper or ArchiveSourceRemapper()
    return remapper.remap(source, slug, install_kind, parent_dir=remote_source)


class AuthHeaderInjector:
    """Adds authorization headers to one download request for the manifest's package.

    ``provider_headers`` carries credentials owned by the provider adapter;
    they are never part of the (cached) manifest.
    """

    def __init__(self, manifest: UpdateManifest, provider_headers: Mapping[str, str] | None = None) -> None:
        self.manifest = manifest
        self.headers: dict[str, str] = {**(manifest.auth_header or {}), **(provider_headers or {})}

    def matches(self, url: str) -> bool:
        if not self.headers or not url:
            return False
        return url == self.manifest.download_link or self.manifest.slug in url

    def inject(self, request_args: Mapping[str, Any], url: str) -> Mapping[str, Any]:
        if not self.matches(url):
            return request_args
        headers = dict(request_args.get("headers") or {})
        headers.update(self.headers)
        return {**request_args, "headers": headers}
