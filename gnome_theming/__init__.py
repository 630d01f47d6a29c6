"""
GNOME to KDE-like Theming Utility
----------------------------------

Reconciles an Ubuntu GNOME desktop against a declared look: APT packages,
a wallpaper, GNOME Shell extensions and gsettings theme keys.
"""

APP_NAME = "GNOME Theming"
VERSION = "1.0.0"
LOGGER_NAME = "gnome_theming"
