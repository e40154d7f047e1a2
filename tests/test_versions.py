from __future__ import annotations

import pytest

from updatesync_core.versions import compare_versions, is_newer, strip_version_prefix

PAIRS = [
    ("1.0.0", "1.0.1"),
    ("1.2.0", "1.10.0"),
    ("2.0.0-beta", "2.0.0"),
    ("2.0.0-alpha", "2.0.0-beta"),
    ("2.0.0-rc1", "2.0.0-rc2"),
    ("2.0.0", "2.0.0-pl1"),
    ("1.9", "1.9.1"),
    ("v1.0.0", "1.0.1"),
]


@pytest.mark.parametrize("older,newer", PAIRS)
def test_comparison_is_antisymmetric(older: str, newer: str) -> None:
    assert compare_versions(newer, older) > 0
    assert compare_versions(older, newer) < 0


@pytest.mark.parametrize("value", ["1.0.0", "v3.2", "2.0.0-beta", "0.0.1+build.7"])
def test_comparison_is_reflexive(value: str) -> None:
    assert compare_versions(value, value) == 0


def test_missing_trailing_components_count_as_zero() -> None:
    assert compare_versions("1.0", "1.0.0") == 0
    assert compare_versions("v2.1.0", "2.1") == 0


def test_is_newer_is_strict() -> None:
    assert is_newer("2.1.0", "2.0.0")
    assert not is_newer("2.1.0", "2.1.0")
    assert not is_newer("2.0.9", "2.1.0")


def test_strip_version_prefix_only_removes_leading_v_before_digit() -> None:
    assert strip_version_prefix("v2.1.0") == "2.1.0"
    assert strip_version_prefix("V3") == "3"
    assert strip_version_prefix("version-1") == "version-1"
    assert strip_version_prefix(" 1.0 ") == "1.0"

