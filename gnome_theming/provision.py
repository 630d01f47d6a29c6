import logging
import time
from typing import Optional

from gnome_theming import APP_NAME, LOGGER_NAME
from gnome_theming.assets import AssetFetcher
from gnome_theming.config import Config
from gnome_theming.extensions import ExtensionReconciler
from gnome_theming.host import Host, build_host
from gnome_theming.packages import PackageReconciler
from gnome_theming.theme import ThemeApplier
from gnome_theming.ui import NordColors, console, create_header, display_panel

FINAL_NOTICE = (
    "You need to log out and log back in (or reboot) for all changes,\n"
    "especially extensions and themes, to take full effect.\n"
    "After logging in, open the 'Extensions' app and 'GNOME Tweaks' to\n"
    "fine-tune settings and optionally pick a custom Shell theme."
)


# ----------------------------------------------------------------
# Main Setup Class
# ----------------------------------------------------------------
class ThemingSetup:
    """
    Runs the five stages in order. Stages only see each other's work
    through the host, so each one re-checks what it needs before acting.
    """

    def __init__(
        self,
        config: Config,
        host: Optional[Host] = None,
        show_headers: bool = True,
    ):
        self.config = config
        self.host = host or build_host(config)
        self.show_headers = show_headers
        self.logger = logging.getLogger(LOGGER_NAME)
        self.start_time = time.time()

    def print_section(self, title: str) -> None:
        if self.show_headers:
            console.print(create_header(title))
        self.logger.info(f"--- {title} ---")

    # ----------------------------------------------------------------
    # Phase 1: APT Packages
    # ----------------------------------------------------------------
    def phase_packages(self) -> None:
        self.print_section("APT Packages")
        PackageReconciler(self.config, self.host).run()

    # ----------------------------------------------------------------
    # Phase 2: Wallpaper
    # ----------------------------------------------------------------
    def phase_wallpaper(self) -> None:
        self.print_section("Wallpaper")
        AssetFetcher(self.config.WALLPAPER, self.host).run()

    # ----------------------------------------------------------------
    # Phase 3: GNOME Extensions
    # ----------------------------------------------------------------
    def phase_extensions(self) -> None:
        self.print_section("GNOME Extensions")
        ExtensionReconciler(self.config, self.host).run()

    # ----------------------------------------------------------------
    # Phase 4: Theming
    # ----------------------------------------------------------------
    def phase_theming(self) -> None:
        self.print_section("Theming")
        ThemeApplier(self.config, self.host).run()

    # ----------------------------------------------------------------
    # Phase 5: Cleanup
    # ----------------------------------------------------------------
    def phase_cleanup(self) -> None:
        self.print_section("Cleanup")
        PackageReconciler(self.config, self.host).cleanup()

    def run(self) -> None:
        """Execute every phase. IndexRefreshError from phase 1 propagates."""
        self.logger.info(f"Starting {APP_NAME}: Ubuntu GNOME to KDE-like setup.")
        self.phase_packages()
        self.phase_wallpaper()
        self.phase_extensions()
        self.phase_theming()
        self.phase_cleanup()
        elapsed = time.time() - self.start_time
        self.logger.info(f"GNOME desktop customization finished in {elapsed:.1f}s.")
        display_panel(FINAL_NOTICE, NordColors.YELLOW, "IMPORTANT")
