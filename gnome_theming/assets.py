import logging
import os
from pathlib import Path

from gnome_theming import LOGGER_NAME
from gnome_theming.config import AssetSpec
from gnome_theming.errors import CommandError, DownloadError
from gnome_theming.host import Host, temp_path


class AssetFetcher:
    def __init__(self, asset: AssetSpec, host: Host):
        self.asset = asset
        self.host = host
        self.logger = logging.getLogger(LOGGER_NAME)

    def _writable(self, directory: Path) -> bool:
        return directory.is_dir() and os.access(directory, os.W_OK)

    def run(self) -> bool:
        """
        Make sure the asset file exists, downloading it when absent.
        Returns False when the file is still missing afterwards.
        """
        path = self.asset.path
        if path.exists():
            self.logger.info(f"Asset already exists at '{path}'.")
            return True

        self.logger.info(
            f"Asset not found at '{path}'. Downloading from '{self.asset.url}'..."
        )
        if self._writable(path.parent):
            try:
                self.host.downloader.fetch(self.asset.url, path)
            except DownloadError as e:
                self.logger.error(f"{e}. Skipping wallpaper setting.")
                return False
        else:
            # System directories such as /usr/share/backgrounds need root
            try:
                staged = temp_path(path.suffix)
            except OSError as e:
                self.logger.error(f"Cannot stage download: {e}. Skipping wallpaper setting.")
                return False
            try:
                self.host.downloader.fetch(self.asset.url, staged)
                self.host.runner.run(
                    ["install", "-D", "-m", "644", str(staged), str(path)],
                    privileged=True,
                )
            except (DownloadError, CommandError) as e:
                self.logger.error(f"{e}. Skipping wallpaper setting.")
                return False
            finally:
                staged.unlink(missing_ok=True)
        self.logger.info(f"Asset downloaded to '{path}'.")
        return True
