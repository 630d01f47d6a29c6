import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from gnome_theming.errors import ConfigurationError

EXTENSION_DOWNLOAD_URL = (
    "https://extensions.gnome.org/extension-data/{ext_id}.shell-extension.zip"
)


# ----------------------------------------------------------------
# Data Structures
# ----------------------------------------------------------------
@dataclass(frozen=True)
class ExtensionSpec:
    """A GNOME Shell extension: on-disk UUID plus its extensions.gnome.org id."""

    uuid: str
    ext_id: int

    @property
    def download_url(self) -> str:
        return EXTENSION_DOWNLOAD_URL.format(ext_id=self.ext_id)


@dataclass(frozen=True)
class AssetSpec:
    path: Path
    url: str


@dataclass(frozen=True)
class Setting:
    schema: str
    key: str
    value: Union[str, bool]


SettingsTable = Dict[str, Tuple[Setting, ...]]


def _dash_to_panel() -> Tuple[Setting, ...]:
    schema = "org.gnome.shell.extensions.dash-to-panel"
    return (
        Setting(schema, "position", "BOTTOM"),
        Setting(schema, "show-show-desktop-button", False),
        # Arc Menu replaces the apps button
        Setting(schema, "show-apps-button", False),
        Setting(schema, "animate-app-menu", False),
        Setting(schema, "dot-on-icon", False),
    )


def _ding() -> Tuple[Setting, ...]:
    schema = "org.gnome.shell.extensions.ding"
    return (
        Setting(schema, "show-trash", True),
        Setting(schema, "show-home", True),
        Setting(schema, "show-volumes", True),
        Setting(schema, "show-network-removable-devices", True),
    )


def default_extension_settings() -> SettingsTable:
    return {
        "dash-to-panel@jderose.github.com": _dash_to_panel(),
        # Arc Menu is configured through its own preferences dialog.
        "arcmenu@arcmenu.com": (),
        "ding@rastersoft.com": _ding(),
    }


@dataclass
class Config:
    LOG_FILE: Path = field(
        default_factory=lambda: Path.home()
        / ".local"
        / "state"
        / "gnome-theming"
        / "setup.log"
    )
    PACKAGES: List[str] = field(
        default_factory=lambda: [
            "gnome-shell-extension-manager",
            "gnome-tweaks",
            "breeze-icon-theme",
            "breeze-cursor-theme",
            "qt5-gtk-platformtheme",
            "qgnomeplatform-qt5",
            "qgnomeplatform-qt6",
            "wget",
            "unzip",
        ]
    )
    EXTENSIONS: Dict[str, ExtensionSpec] = field(
        default_factory=lambda: {
            "Dash to Panel": ExtensionSpec("dash-to-panel@jderose.github.com", 1160),
            "Arc Menu": ExtensionSpec("arcmenu@arcmenu.com", 3628),
            "AppIndicator and KStatusNotifierItem Support": ExtensionSpec(
                "appindicatorsupport@rgcjonas.gmail.com", 615
            ),
            "Desktop Icons NG (DING)": ExtensionSpec("ding@rastersoft.com", 2087),
            "User Themes": ExtensionSpec(
                "user-theme@gnome-shell-extensions.gcampax.github.com", 19
            ),
        }
    )
    EXTENSION_SETTINGS: SettingsTable = field(
        default_factory=default_extension_settings
    )
    EXTENSIONS_DIR: Path = field(
        default_factory=lambda: Path.home()
        / ".local"
        / "share"
        / "gnome-shell"
        / "extensions"
    )
    WALLPAPER: AssetSpec = field(
        default_factory=lambda: AssetSpec(
            Path("/usr/share/backgrounds/wisurf_wallpaper.png"),
            "https://github.com/goldencryer/wisurf/blob/main/Wallpaper.png?raw=true",
        )
    )
    WALLPAPER_OPTIONS: str = "zoom"
    GTK_THEME: str = "Yaru"
    ICON_THEME: str = "Breeze"
    CURSOR_THEME: str = "Breeze"
    # Needs the User Themes extension and a theme under ~/.themes
    SHELL_THEME: Optional[str] = None
    DOWNLOAD_TIMEOUT: int = 60

    def __post_init__(self):
        self.LOG_FILE = Path(self.LOG_FILE).expanduser()
        self.EXTENSIONS_DIR = Path(self.EXTENSIONS_DIR).expanduser()
        # dict.fromkeys keeps the first occurrence of each name
        self.PACKAGES = list(dict.fromkeys(self.PACKAGES))
        seen: Dict[str, str] = {}
        for name, spec in self.EXTENSIONS.items():
            if spec.uuid in seen:
                raise ConfigurationError(
                    f"Extensions '{seen[spec.uuid]}' and '{name}' share UUID {spec.uuid}"
                )
            seen[spec.uuid] = name
        if self.DOWNLOAD_TIMEOUT <= 0:
            raise ConfigurationError("download_timeout must be a positive number")


# ----------------------------------------------------------------
# JSON Overrides
# ----------------------------------------------------------------
def _parse_extensions(raw: Any) -> Dict[str, ExtensionSpec]:
    if not isinstance(raw, dict):
        raise ConfigurationError("'extensions' must map names to {uuid, id}")
    extensions = {}
    for name, entry in raw.items():
        try:
            uuid, ext_id = entry["uuid"], int(entry["id"])
        except (TypeError, KeyError, ValueError) as e:
            raise ConfigurationError(f"Invalid extension entry '{name}': {e}") from e
        if not uuid or "/" in uuid or ext_id <= 0:
            raise ConfigurationError(f"Invalid extension entry '{name}'")
        extensions[name] = ExtensionSpec(uuid, ext_id)
    return extensions


def _parse_settings(raw: Any) -> SettingsTable:
    if not isinstance(raw, dict):
        raise ConfigurationError("'extension_settings' must map UUIDs to lists")
    table: SettingsTable = {}
    for uuid, rows in raw.items():
        if not isinstance(rows, list) or not all(
            isinstance(row, list) and len(row) == 3 for row in rows
        ):
            raise ConfigurationError(
                f"Settings for {uuid} must be [schema, key, value] rows"
            )
        table[uuid] = tuple(Setting(*row) for row in rows)
    return table


def _parse_wallpaper(raw: Any) -> AssetSpec:
    try:
        return AssetSpec(Path(raw["path"]), str(raw["url"]))
    except (TypeError, KeyError) as e:
        raise ConfigurationError(f"'wallpaper' needs 'path' and 'url': {e}") from e


def _parse_packages(raw: Any) -> List[str]:
    if not isinstance(raw, list) or not all(isinstance(p, str) for p in raw):
        raise ConfigurationError("'packages' must be a list of package names")
    return raw


PARSERS = {
    "PACKAGES": _parse_packages,
    "EXTENSIONS": _parse_extensions,
    "EXTENSION_SETTINGS": _parse_settings,
    "WALLPAPER": _parse_wallpaper,
    "LOG_FILE": Path,
    "EXTENSIONS_DIR": Path,
    "DOWNLOAD_TIMEOUT": int,
}


def load_config(path: Optional[Union[str, Path]] = None, **overrides: Any) -> Config:
    """
    Build a Config from defaults, an optional JSON file and keyword overrides.

    JSON keys are matched case-insensitively against the Config fields, so
    ``{"packages": [...], "icon_theme": "Papirus"}`` is accepted.
    """
    known = Config.__dataclass_fields__
    kwargs: Dict[str, Any] = {}
    if path is not None:
        try:
            with open(Path(path).expanduser()) as f:
                raw = json.load(f)
        except OSError as e:
            raise ConfigurationError(f"Cannot read config file {path}: {e}") from e
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Config file {path} is not valid JSON: {e}") from e
        if not isinstance(raw, dict):
            raise ConfigurationError(f"Config file {path} must contain a JSON object")
        for key, value in raw.items():
            name = key.upper()
            if name not in known:
                raise ConfigurationError(f"Unknown configuration key: {key}")
            parser = PARSERS.get(name)
            if parser is not None:
                try:
                    value = parser(value)
                except (TypeError, ValueError) as e:
                    raise ConfigurationError(f"Invalid value for {key}: {e}") from e
            kwargs[name] = value

    for key, value in overrides.items():
        if value is None:
            continue
        if key.upper() not in known:
            raise ConfigurationError(f"Unknown configuration key: {key}")
        kwargs[key.upper()] = value
    return Config(**kwargs)
