"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    RESOLUTION_ERROR = 1
    IO_ERROR = 2


class ReleaseTypes(Enum):
    """Release types published in the .NET release index.

    Args:
        Enum (string): Release type values.
    """

    LTS = "lts"
    STS = "sts"


class SupportPhases(Enum):
    """Support phases published in the .NET release index.

    Args:
        Enum (string): Support phase values.
    """

    PREVIEW = "preview"
    GO_LIVE = "go-live"
    ACTIVE = "active"
    MAINTENANCE = "maintenance"
    EOL = "eol"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for default configuration; not intended to provide behavior.
    """

    PROG_NAME = "dver"
    USER_AGENT = "dver/0.1 (dotnet-version-manager)"

    RELEASES_INDEX_URL = (
        "https://dotnetcli.blob.core.windows.net/dotnet/release-metadata/releases-index.json"
    )
    INSTALL_SCRIPT_URL_SH = "https://dotnet.microsoft.com/download/dotnet/scripts/v1/dotnet-install.sh"
    INSTALL_SCRIPT_URL_PS1 = "https://dotnet.microsoft.com/download/dotnet/scripts/v1/dotnet-install.ps1"

    GLOBAL_JSON_FILE = "global.json"
    GLOBAL_JSON_BACKUP_SUFFIX = ".bak"
    SDK_SUBDIR = "sdk"
    DEFAULT_INSTALL_DIRNAME = ".dotnet"
    DEFAULT_CONFIG_PATH = "~/.config/dver/config.yml"

    ENV_LOG_LEVEL = "DVER_LOG_LEVEL"
    ENV_CONFIG = "DVER_CONFIG"
    ENV_INSTALL_DIR = "DVER_INSTALL_DIR"
    ENV_RELEASES_INDEX_URL = "DVER_RELEASES_INDEX_URL"
    ENV_DOTNET_ROOT = "DOTNET_ROOT"

    LOG_FORMAT = "[%(levelname)s] %(message)s"
    LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

    REQUEST_TIMEOUT = 30  # Timeout in seconds for all HTTP requests
    INSTALL_TIMEOUT = 1800  # dotnet-install may download several hundred MB
    HTTP_RETRY_MAX = 3
    HTTP_RETRY_BASE_DELAY_SEC = 0.3
    DOWNLOAD_CHUNK_SIZE = 64 * 1024
