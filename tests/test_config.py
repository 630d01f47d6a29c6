"""Tests for catalog defaults and JSON configuration loading."""

import json
from pathlib import Path

import pytest

from gnome_theming.config import (
    Config,
    ExtensionSpec,
    Setting,
    load_config,
)
from gnome_theming.errors import ConfigurationError


def test_defaults_carry_the_kde_like_catalog() -> None:
    config = Config()
    assert "breeze-icon-theme" in config.PACKAGES
    assert config.EXTENSIONS["User Themes"] == ExtensionSpec(
        "user-theme@gnome-shell-extensions.gcampax.github.com", 19
    )
    assert config.ICON_THEME == "Breeze"
    assert config.WALLPAPER.path == Path("/usr/share/backgrounds/wisurf_wallpaper.png")
    assert config.EXTENSIONS_DIR.parts[-3:] == ("share", "gnome-shell", "extensions")


def test_download_url_uses_numeric_id() -> None:
    spec = ExtensionSpec("dash-to-panel@jderose.github.com", 1160)
    assert spec.download_url == (
        "https://extensions.gnome.org/extension-data/1160.shell-extension.zip"
    )


def test_duplicate_packages_collapse_in_order() -> None:
    config = Config(PACKAGES=["wget", "unzip", "wget"])
    assert config.PACKAGES == ["wget", "unzip"]


def test_duplicate_uuid_is_rejected() -> None:
    with pytest.raises(ConfigurationError, match="share UUID"):
        Config(
            EXTENSIONS={
                "A": ExtensionSpec("same@example.com", 1),
                "B": ExtensionSpec("same@example.com", 2),
            }
        )


def test_default_settings_table() -> None:
    table = Config().EXTENSION_SETTINGS
    assert Setting(
        "org.gnome.shell.extensions.dash-to-panel", "position", "BOTTOM"
    ) in table["dash-to-panel@jderose.github.com"]
    assert table["arcmenu@arcmenu.com"] == ()
    assert "user-theme@gnome-shell-extensions.gcampax.github.com" not in table


def test_load_config_overrides_from_json(tmp_path) -> None:
    path = tmp_path / "theme.json"
    path.write_text(
        json.dumps(
            {
                "packages": ["wget"],
                "icon_theme": "Papirus",
                "extensions": {"User Themes": {"uuid": "user-theme@x", "id": 19}},
                "extension_settings": {
                    "user-theme@x": [["org.example", "enabled", True]]
                },
                "wallpaper": {"path": str(tmp_path / "w.png"), "url": "https://e/w.png"},
            }
        )
    )
    config = load_config(path, log_file=str(tmp_path / "run.log"))
    assert config.PACKAGES == ["wget"]
    assert config.ICON_THEME == "Papirus"
    assert config.EXTENSIONS == {"User Themes": ExtensionSpec("user-theme@x", 19)}
    assert config.EXTENSION_SETTINGS["user-theme@x"] == (
        Setting("org.example", "enabled", True),
    )
    assert config.WALLPAPER.path == tmp_path / "w.png"
    assert config.LOG_FILE == tmp_path / "run.log"
    # untouched fields keep their defaults
    assert config.CURSOR_THEME == "Breeze"


def test_load_config_without_file_returns_defaults() -> None:
    assert load_config().PACKAGES == Config().PACKAGES


@pytest.mark.parametrize(
    "payload, message",
    [
        ('{"colour": "blue"}', "Unknown configuration key"),
        ("[1, 2]", "JSON object"),
        ("{not json", "not valid JSON"),
        ('{"packages": "wget"}', "list of package names"),
        ('{"extensions": {"X": {"uuid": "x@y"}}}', "Invalid extension entry"),
        ('{"extension_settings": {"x@y": [["only", "two"]]}}', "schema, key, value"),
        ('{"download_timeout": 0}', "positive"),
    ],
)
def test_load_config_rejects_bad_files(tmp_path, payload, message) -> None:
    path = tmp_path / "bad.json"
    path.write_text(payload)
    with pytest.raises(ConfigurationError, match=message):
        load_config(path)


def test_missing_config_file(tmp_path) -> None:
    with pytest.raises(ConfigurationError, match="Cannot read"):
        load_config(tmp_path / "missing.json")
