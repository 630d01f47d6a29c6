"""
Adapters over the host utilities the stages drive: apt/dpkg, HTTP downloads,
zip archives, the gnome-extensions CLI and gsettings.

Each adapter only translates a request into a command or library call and
raises an exception from gnome_theming.errors on failure. Deciding whether a
failure is fatal is left to the stages.
"""

import logging
import os
import shutil
import subprocess
import tempfile
import zipfile
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

import requests
from rich.progress import (
    BarColumn,
    DownloadColumn,
    Progress,
    TextColumn,
    TimeRemainingColumn,
)

from gnome_theming import LOGGER_NAME
from gnome_theming.config import Config
from gnome_theming.errors import (
    CommandError,
    DownloadError,
    EnableError,
    EnableFailure,
    ExtractionError,
    IndexRefreshError,
    SettingsError,
)
from gnome_theming.ui import console

TEMP_PREFIX = "gnome_theming_"

logger = logging.getLogger(LOGGER_NAME)


def temp_path(suffix: str = "") -> Path:
    """Create an empty, uniquely named temp file swept by cleanup_temp_files."""
    fd, name = tempfile.mkstemp(prefix=TEMP_PREFIX, suffix=suffix)
    os.close(fd)
    return Path(name)


def cleanup_temp_files() -> None:
    tmp = Path(tempfile.gettempdir())
    for item in tmp.glob(f"{TEMP_PREFIX}*"):
        try:
            item.unlink() if item.is_file() else shutil.rmtree(item)
        except OSError as e:
            logger.debug(f"Failed to clean up {item}: {e}")


# ----------------------------------------------------------------
# Command Execution
# ----------------------------------------------------------------
class CommandRunner:
    def __init__(self, use_sudo: Optional[bool] = None):
        if use_sudo is None:
            use_sudo = os.geteuid() != 0
        self.use_sudo = use_sudo

    def run(
        self,
        cmd: List[str],
        privileged: bool = False,
        check: bool = True,
    ) -> subprocess.CompletedProcess:
        """
        Run a command and capture its output.

        Privileged commands are prefixed with sudo unless already running as
        root. Raises CommandError on a non-zero exit when check is set, and
        always when the executable cannot be found.
        """
        if privileged and self.use_sudo:
            cmd = ["sudo"] + cmd
        logger.debug(f"Running command: {' '.join(cmd)}")
        try:
            return subprocess.run(cmd, capture_output=True, text=True, check=check)
        except subprocess.CalledProcessError as e:
            raise CommandError(cmd, e.returncode, e.stderr) from e
        except FileNotFoundError as e:
            raise CommandError(cmd, None, str(e)) from e


# ----------------------------------------------------------------
# Package Manager
# ----------------------------------------------------------------
class AptPackageManager:
    def __init__(self, runner: CommandRunner):
        self.runner = runner

    def refresh_index(self) -> None:
        try:
            self.runner.run(["apt-get", "update"], privileged=True)
        except CommandError as e:
            raise IndexRefreshError(e.cmd, e.returncode, e.stderr) from e

    def is_installed(self, name: str) -> bool:
        # dpkg -s also succeeds for removed packages that left config files
        result = self.runner.run(
            ["dpkg-query", "-W", "-f=${db:Status-Status}", name], check=False
        )
        return result.returncode == 0 and result.stdout.strip() == "installed"

    def install(self, name: str) -> None:
        self.runner.run(["apt-get", "install", "-y", name], privileged=True)

    def autoremove(self) -> None:
        self.runner.run(["apt-get", "autoremove", "-y"], privileged=True)

    def clean_cache(self) -> None:
        self.runner.run(["apt-get", "clean"], privileged=True)


# ----------------------------------------------------------------
# Downloads and Archives
# ----------------------------------------------------------------
def content_length(headers) -> Optional[int]:
    # Repeated headers arrive merged as "6, 6"; an unusable length only
    # costs the progress bar its total.
    try:
        return int(headers.get("content-length", 0)) or None
    except (TypeError, ValueError):
        return None


class Downloader:
    def __init__(
        self,
        timeout: int = 60,
        session: Optional[requests.Session] = None,
        show_progress: bool = True,
    ):
        self.timeout = timeout
        self.session = session or requests.Session()
        self.show_progress = show_progress

    def fetch(self, url: str, dest: Union[str, Path]) -> Path:
        """
        Stream url into dest, overwriting it. A partially written file is
        removed before DownloadError is raised; dest is left untouched when
        the request fails before any body is read.
        """
        dest = Path(dest)
        logger.info(f"Downloading {url} to {dest}...")
        opened = False
        try:
            with self.session.get(url, stream=True, timeout=self.timeout) as response:
                response.raise_for_status()
                total_length = content_length(response.headers)
                opened = True
                with open(dest, "wb") as out, Progress(
                    TextColumn("[progress.description]{task.description}"),
                    BarColumn(),
                    DownloadColumn(),
                    TimeRemainingColumn(),
                    console=console,
                    transient=True,
                    disable=not self.show_progress,
                ) as progress:
                    task = progress.add_task(
                        f"Downloading {dest.name}", total=total_length
                    )
                    for chunk in response.iter_content(chunk_size=8192):
                        if chunk:
                            out.write(chunk)
                            progress.update(task, advance=len(chunk))
        except (requests.RequestException, OSError) as e:
            if opened:
                dest.unlink(missing_ok=True)
            raise DownloadError(f"Download of {url} failed: {e}") from e
        logger.debug(f"Download complete: {dest}")
        return dest


def extract_archive(archive: Union[str, Path], dest_dir: Union[str, Path]) -> None:
    try:
        with zipfile.ZipFile(archive) as zf:
            zf.extractall(dest_dir)
    except (zipfile.BadZipFile, OSError) as e:
        raise ExtractionError(f"Cannot extract {archive}: {e}") from e


# ----------------------------------------------------------------
# GNOME Shell and Preferences
# ----------------------------------------------------------------
class ExtensionRegistry:
    def __init__(self, runner: CommandRunner):
        self.runner = runner

    @staticmethod
    def classify(stderr: str) -> EnableFailure:
        message = stderr.lower()
        if "does not exist" in message or "doesn't exist" in message:
            # A freshly extracted extension is unknown to the running shell
            return EnableFailure.NOT_LOADED
        if "compatib" in message or "out of date" in message:
            return EnableFailure.INCOMPATIBLE
        return EnableFailure.UNKNOWN

    def enable(self, uuid: str) -> None:
        cmd = ["gnome-extensions", "enable", uuid]
        try:
            result = self.runner.run(cmd, check=False)
        except CommandError as e:
            raise EnableError(uuid, EnableFailure.MISSING_TOOL, e.stderr) from e
        if result.returncode != 0:
            detail = result.stderr or result.stdout or ""
            raise EnableError(uuid, self.classify(detail), detail)


def format_value(value: Union[str, bool]) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class GSettings:
    def __init__(self, runner: CommandRunner):
        self.runner = runner

    def set(self, schema: str, key: str, value: Union[str, bool]) -> None:
        try:
            self.runner.run(["gsettings", "set", schema, key, format_value(value)])
        except CommandError as e:
            raise SettingsError(f"{schema} {key}: {e}") from e


# ----------------------------------------------------------------
# Host Bundle
# ----------------------------------------------------------------
@dataclass
class Host:
    runner: CommandRunner
    packages: AptPackageManager
    downloader: Downloader
    extensions: ExtensionRegistry
    settings: GSettings


def build_host(config: Config) -> Host:
    runner = CommandRunner()
    return Host(
        runner=runner,
        packages=AptPackageManager(runner),
        downloader=Downloader(timeout=config.DOWNLOAD_TIMEOUT),
        extensions=ExtensionRegistry(runner),
        settings=GSettings(runner),
    )
