import logging
from typing import List

from gnome_theming import LOGGER_NAME
from gnome_theming.config import Config, Setting
from gnome_theming.errors import SettingsError
from gnome_theming.host import Host

INTERFACE_SCHEMA = "org.gnome.desktop.interface"
BACKGROUND_SCHEMA = "org.gnome.desktop.background"
USER_THEME_SCHEMA = "org.gnome.shell.extensions.user-theme"


class ThemeApplier:
    def __init__(self, config: Config, host: Host):
        self.config = config
        self.host = host
        self.logger = logging.getLogger(LOGGER_NAME)

    def settings(self) -> List[Setting]:
        """
        The writes for this run. Wallpaper keys are only included when the
        wallpaper file exists right now.
        """
        settings = [
            Setting(INTERFACE_SCHEMA, "gtk-theme", self.config.GTK_THEME),
            Setting(INTERFACE_SCHEMA, "icon-theme", self.config.ICON_THEME),
            Setting(INTERFACE_SCHEMA, "cursor-theme", self.config.CURSOR_THEME),
        ]
        if self.config.SHELL_THEME:
            settings.append(Setting(USER_THEME_SCHEMA, "name", self.config.SHELL_THEME))

        wallpaper = self.config.WALLPAPER.path
        if wallpaper.is_file():
            uri = wallpaper.absolute().as_uri()
            settings += [
                Setting(BACKGROUND_SCHEMA, "picture-uri", uri),
                Setting(BACKGROUND_SCHEMA, "picture-uri-dark", uri),
                Setting(BACKGROUND_SCHEMA, "picture-options", self.config.WALLPAPER_OPTIONS),
            ]
        else:
            self.logger.warning(
                f"Wallpaper not found at '{wallpaper}'. Skipping wallpaper setting."
            )
        return settings

    def run(self) -> int:
        self.logger.info("Applying KDE-like theming to GNOME...")
        failures = 0
        for setting in self.settings():
            try:
                self.host.settings.set(setting.schema, setting.key, setting.value)
                self.logger.debug(f"Set {setting.schema} {setting.key} = {setting.value}")
            except SettingsError as e:
                failures += 1
                self.logger.warning(f"Failed to apply setting: {e}")
        if not self.config.SHELL_THEME:
            self.logger.info(
                "No Shell theme configured. Place a theme in ~/.themes and set "
                "'shell_theme' once the User Themes extension is enabled."
            )
        self.logger.info("Theming applied. Some changes may require a session restart.")
        return failures
