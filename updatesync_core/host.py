"""Translate update decisions into the host's update-index records."""

from __future__ import annotations

from typing import Any, MutableMapping

from .types import LocalDescriptor, UpdateDecision, UpdateManifest


def update_record(decision: UpdateDecision, local: LocalDescriptor) -> dict[str, Any]:
    manifest = decision.manifest
    is_theme = manifest.package_type == "theme"
    record: dict[str, Any] = {
        "slug": manifest.slug,
        manifest.package_type: manifest.slug if is_theme else local.package_file,
        "url": manifest.details_url or manifest.slug,
        "icons": dict(manifest.icons),
        "banners": dict(manifest.banners),
        "branch": manifest.branch,
        "type": f"{manifest.provider_id}-{manifest.package_type}",
        "update-supported": True,
        "requires": manifest.requires,
        "requires_php": manifest.requires_php,
    }
    if is_theme:
        record["theme_uri"] = record["url"]
    if decision.has_update:
        record.update(
            {
                "new_version": manifest.remote_version,
                "package": manifest.download_link,
                "tested": manifest.tested,
            }
        )
    return record


def apply_decision(
    index: MutableMapping[str, Any],
    decision: UpdateDecision,
    local: LocalDescriptor,
) -> MutableMapping[str, Any]:
    record = update_record(decision, local)
    if decision.has_update:
        key = decision.manifest.slug if decision.manifest.package_type == "theme" else local.package_file
        index.setdefault("response", {})[key] = record
    else:
        index.setdefault("no_update", {})[local.package_file] = record
    return index


def package_information(manifest: UpdateManifest, action: str, slug: str) -> UpdateManifest | None:
    if action != f"{manifest.package_type}_information":
        return None
    if slug != manifest.slug:
        return None
    return manifest
