import logging
import shutil
from enum import Enum
from pathlib import Path
from typing import Dict

from gnome_theming import LOGGER_NAME
from gnome_theming.config import Config, ExtensionSpec
from gnome_theming.errors import (
    DownloadError,
    EnableError,
    EnableFailure,
    ExtractionError,
    SettingsError,
)
from gnome_theming.host import Host, extract_archive, temp_path


class ExtensionState(str, Enum):
    CONFIGURED = "configured"
    SKIPPED = "skipped"


ENABLE_HINTS = {
    EnableFailure.MISSING_TOOL: "the gnome-extensions tool is not installed",
    EnableFailure.NOT_LOADED: "GNOME Shell has not loaded it yet; log out and back in",
    EnableFailure.INCOMPATIBLE: "it may not support this GNOME Shell version",
    EnableFailure.UNKNOWN: "it might require a Shell restart",
}


class ExtensionReconciler:
    """
    Installs, enables and configures each GNOME Shell extension in the catalog.

    Every entry is handled on its own: a failed download skips the rest of
    that entry only, and an existing install directory skips the download
    but still goes through enable and configure.
    """

    def __init__(self, config: Config, host: Host):
        self.config = config
        self.host = host
        self.logger = logging.getLogger(LOGGER_NAME)

    def install_dir(self, spec: ExtensionSpec) -> Path:
        return self.config.EXTENSIONS_DIR / spec.uuid

    def run(self) -> Dict[str, ExtensionState]:
        self.logger.info("Installing and configuring GNOME Extensions...")
        results = {
            name: self.process(name, spec)
            for name, spec in self.config.EXTENSIONS.items()
        }
        self.logger.info(
            "GNOME Extension installation and basic configuration complete."
        )
        return results

    def process(self, name: str, spec: ExtensionSpec) -> ExtensionState:
        self.logger.info(
            f"Processing extension: {name} (UUID: {spec.uuid}, ID: {spec.ext_id})"
        )
        ext_dir = self.install_dir(spec)
        if ext_dir.is_dir():
            self.logger.info(f"{name} is already installed. Ensuring it's enabled.")
        elif not self.install(name, spec, ext_dir):
            return ExtensionState.SKIPPED

        self.enable(name, spec)
        self.configure(name, spec)
        return ExtensionState.CONFIGURED

    def install(self, name: str, spec: ExtensionSpec, ext_dir: Path) -> bool:
        try:
            archive = temp_path(".zip")
        except OSError as e:
            self.logger.error(f"Cannot stage {name} download. Skipping installation. ({e})")
            return False
        self.logger.info(f"Downloading {name} (ID: {spec.ext_id})...")
        try:
            self.host.downloader.fetch(spec.download_url, archive)
            self.logger.info(f"Unzipping {name} to {ext_dir}...")
            ext_dir.mkdir(parents=True, exist_ok=True)
            extract_archive(archive, ext_dir)
        except DownloadError as e:
            self.logger.error(f"Failed to download {name}. Skipping installation. ({e})")
            return False
        except (ExtractionError, OSError) as e:
            # An empty directory would make the next run think it is installed
            shutil.rmtree(ext_dir, ignore_errors=True)
            self.logger.error(f"Failed to extract {name}. Skipping installation. ({e})")
            return False
        finally:
            archive.unlink(missing_ok=True)
        self.logger.info(f"{name} files extracted.")
        return True

    def enable(self, name: str, spec: ExtensionSpec) -> bool:
        self.logger.info(f"Enabling {name}...")
        try:
            self.host.extensions.enable(spec.uuid)
        except EnableError as e:
            self.logger.warning(
                f"Failed to enable {name}: {ENABLE_HINTS[e.reason]}. ({e})"
            )
            return False
        return True

    def configure(self, name: str, spec: ExtensionSpec) -> bool:
        """Apply the settings registered for this UUID. Unlisted UUIDs are left alone."""
        settings = self.config.EXTENSION_SETTINGS.get(spec.uuid)
        if settings is None:
            self.logger.debug(f"No extra configuration for {spec.uuid}.")
            return False
        self.logger.info(f"Configuring {name}...")
        for setting in settings:
            try:
                self.host.settings.set(setting.schema, setting.key, setting.value)
            except SettingsError as e:
                self.logger.warning(f"Failed to apply setting for {name}: {e}")
        return True
