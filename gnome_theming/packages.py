import logging
from typing import List

from gnome_theming import LOGGER_NAME
from gnome_theming.config import Config
from gnome_theming.errors import CommandError
from gnome_theming.host import Host


class PackageReconciler:
    """
    Brings the APT package registry in line with Config.PACKAGES.

    The index refresh is the only fatal step of the whole run: IndexRefreshError
    propagates to the caller before any install is attempted. A failed install
    only costs that one package.
    """

    def __init__(self, config: Config, host: Host):
        self.config = config
        self.host = host
        self.logger = logging.getLogger(LOGGER_NAME)

    def run(self) -> List[str]:
        self.logger.info("Updating package lists...")
        self.host.packages.refresh_index()

        self.logger.info(f"Checking APT packages: {' '.join(self.config.PACKAGES)}")
        attempted = []
        for pkg in self.config.PACKAGES:
            try:
                installed = self.host.packages.is_installed(pkg)
            except CommandError as e:
                self.logger.warning(f"Cannot check {pkg}. Skipping. ({e})")
                continue
            if installed:
                self.logger.info(f"{pkg} is already installed.")
                continue
            self.logger.info(f"Installing {pkg}...")
            attempted.append(pkg)
            try:
                self.host.packages.install(pkg)
            except CommandError as e:
                self.logger.warning(f"Failed to install {pkg}. Continuing. ({e})")
        self.logger.info("APT package installation complete.")
        return attempted

    def cleanup(self) -> None:
        self.logger.info("Cleaning up...")
        try:
            self.host.packages.autoremove()
        except CommandError as e:
            self.logger.warning(f"apt autoremove failed: {e}")
        try:
            self.host.packages.clean_cache()
        except CommandError as e:
            self.logger.warning(f"apt clean failed: {e}")
        self.logger.info("Cleanup complete.")
