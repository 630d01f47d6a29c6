from enum import Enum, auto
from typing import List, Optional


# ----------------------------------------------------------------
# Custom Exceptions
# ----------------------------------------------------------------
class SetupError(Exception):
    """Base exception for setup errors."""

    pass


class ConfigurationError(SetupError):
    """Raised when the configuration file or catalogs are invalid."""

    pass


class CommandError(SetupError):
    """Raised when a host command exits non-zero or cannot be started."""

    def __init__(
        self, cmd: List[str], returncode: Optional[int] = None, stderr: str = ""
    ):
        self.cmd = cmd
        self.returncode = returncode
        self.stderr = (stderr or "").strip()
        detail = f" (exit {returncode})" if returncode is not None else ""
        message = f"Command failed{detail}: {' '.join(cmd)}"
        if self.stderr:
            message += f": {self.stderr}"
        super().__init__(message)


class IndexRefreshError(CommandError):
    """Raised when the package index cannot be refreshed. Aborts the run."""

    pass


class DownloadError(SetupError):
    """Raised when a network download fails."""

    pass


class ExtractionError(SetupError):
    """Raised when an archive cannot be extracted."""

    pass


class SettingsError(SetupError):
    """Raised when a gsettings write is rejected."""

    pass


class EnableFailure(Enum):
    MISSING_TOOL = auto()
    NOT_LOADED = auto()
    INCOMPATIBLE = auto()
    UNKNOWN = auto()


class EnableError(SetupError):
    """Raised when an extension cannot be enabled."""

    def __init__(self, uuid: str, reason: EnableFailure, detail: str = ""):
        self.uuid = uuid
        self.reason = reason
        self.detail = detail.strip()
        message = f"Could not enable {uuid} ({reason.name.lower()})"
        if self.detail:
            message += f": {self.detail}"
        super().__init__(message)
