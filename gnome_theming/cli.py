import atexit
import signal
import sys
from typing import Optional

import click

from gnome_theming import APP_NAME, VERSION
from gnome_theming.config import load_config
from gnome_theming.errors import ConfigurationError, IndexRefreshError
from gnome_theming.host import cleanup_temp_files
from gnome_theming.log import setup_logger
from gnome_theming.provision import ThemingSetup
from gnome_theming.ui import console, create_header, print_error, print_warning


# ----------------------------------------------------------------
# Signal Handling and Cleanup
# ----------------------------------------------------------------
def signal_handler(signum, frame):
    sig = signal.Signals(signum).name
    print_warning(f"Setup interrupted by {sig}.")
    sys.exit(130 if signum == signal.SIGINT else 128 + signum)


def install_signal_handlers() -> None:
    for s in (signal.SIGINT, signal.SIGTERM):
        signal.signal(s, signal_handler)
    atexit.register(cleanup_temp_files)


# ----------------------------------------------------------------
# Main CLI Entry Point with Click
# ----------------------------------------------------------------
@click.command()
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    help="JSON file overriding packages, extensions, themes or wallpaper.",
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False),
    help="Where to write the debug log.",
)
@click.option("-v", "--verbose", is_flag=True, help="Show debug output.")
@click.version_option(VERSION, prog_name=APP_NAME)
def main(config_path: Optional[str], log_file: Optional[str], verbose: bool) -> None:
    """
    Turn an Ubuntu GNOME desktop into a KDE-like one.

    Installs APT packages, fetches the wallpaper, installs and enables GNOME
    Shell extensions and applies theme settings. Safe to run repeatedly.
    Run as the desktop user; sudo is used for package operations.
    """
    console.print(create_header(APP_NAME))
    try:
        config = load_config(config_path, log_file=log_file)
    except ConfigurationError as e:
        print_error(f"Invalid configuration: {e}")
        sys.exit(1)

    logger = setup_logger(config.LOG_FILE, verbose=verbose)
    install_signal_handlers()
    try:
        ThemingSetup(config).run()
    except IndexRefreshError as e:
        logger.error(f"Failed to update apt lists. Exiting. ({e})")
        sys.exit(1)


if __name__ == "__main__":
    main()
