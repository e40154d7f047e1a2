"""Read local package metadata from a plugin or theme header."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

from .types import LocalDescriptor

HEADER_READ_BYTES = 8192
HEADER_FIELDS = {"version": "Version", "update_uri": "Update URI"}


def _header_pattern(label: str) -> re.Pattern[str]:
    return re.compile(
        rf"^(?:[ \t]*<\?php)?[ \t/*#@]*{re.escape(label)}:(.*)$",
        re.IGNORECASE | re.MULTILINE,
    )


_PATTERNS = {key: _header_pattern(label) for key, label in HEADER_FIELDS.items()}


def _clean_header_value(value: str) -> str:
    return re.sub(r"\s*(?:\*/|\?>).*", "", value).strip()


def read_header(path: Path) -> dict[str, Any]:
    with path.open("rb") as handle:
        raw = handle.read(HEADER_READ_BYTES)
    text = raw.decode("utf-8", errors="replace").replace("\r", "\n")
    values: dict[str, Any] = {}
    for key, pattern in _PATTERNS.items():
        match = pattern.search(text)
        values[key] = _clean_header_value(match.group(1)) if match else ""
    return {"version": values["version"], "update_uri": values["update_uri"] or None}


def load_local_descriptor(file_path: Path | str) -> LocalDescriptor:
    path = Path(file_path)
    slug = path.parent.name
    if path.name == "functions.php":
        path = path.parent / "style.css"
    header = read_header(path)
    return LocalDescriptor(
        package_file=f"{slug}/{path.name}",
        slug=slug,
        local_version=str(header["version"]),
        update_source_url=header["update_uri"],
        path=path,
    )
