from __future__ import annotations

from pathlib import Path

from updatesync_core.descriptor import load_local_descriptor, read_header


def _write_plugin(root: Path, *, update_uri: str | None) -> Path:
    plugin_dir = root / "my-plugin"
    plugin_dir.mkdir(parents=True, exist_ok=True)
    lines = [
        "<?php",
        "/**",
        " * Plugin Name: My Plugin",
        " * Version:     2.0.0",
    ]
    if update_uri is not None:
        lines.append(f" * Update URI:  {update_uri}")
    lines.extend([" */", "", "function my_plugin() {}"])
    path = plugin_dir / "my-plugin.php"
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


def test_read_header_extracts_version_and_update_uri(tmp_path: Path) -> None:
    path = _write_plugin(tmp_path, update_uri="https://github.com/acme/my-plugin")
    header = read_header(path)
    assert header == {"version": "2.0.0", "update_uri": "https://github.com/acme/my-plugin"}


def test_read_header_without_update_uri_returns_none(tmp_path: Path) -> None:
    path = _write_plugin(tmp_path, update_uri=None)
    assert read_header(path)["update_uri"] is None


def test_load_local_descriptor_for_plugin(tmp_path: Path) -> None:
    path = _write_plugin(tmp_path, update_uri="https://gitlab.com/acme/my-plugin")
    local = load_local_descriptor(path)
    assert local.slug == "my-plugin"
    assert local.package_file == "my-plugin/my-plugin.php"
    assert local.package_type == "plugin"
    assert local.local_version == "2.0.0"
    assert local.update_source_url == "https://gitlab.com/acme/my-plugin"


def test_functions_php_is_redirected_to_style_css(tmp_path: Path) -> None:
    theme_dir = tmp_path / "my-theme"
    theme_dir.mkdir()
    (theme_dir / "functions.php").write_text("<?php\n", encoding="utf-8")
    (theme_dir / "style.css").write_text(
        "/*\nTheme Name: My Theme\nVersion: 1.4\nUpdate URI: https://github.com/acme/my-theme\n*/\n",
        encoding="utf-8",
    )
    local = load_local_descriptor(theme_dir / "functions.php")
    assert local.package_file == "my-theme/style.css"
    assert local.package_type == "theme"
    assert local.local_version == "1.4"
    assert local.path == theme_dir / "style.css"
