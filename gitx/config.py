"""Paths and settings shared across gitx."""

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

HOME_ENV = "GITX_HOME"
SSH_CONFIG_ENV = "GITX_SSH_CONFIG"
BACKUP_RETENTION_ENV = "GITX_BACKUP_RETENTION"

CONFIG_DIR_NAME = ".config"
GITX_DIR_NAME = "gitx"
IDENTITIES_FILE = "identities.json"
LOG_FILE = "gitx.log"

DEFAULT_BACKUP_RETENTION = 10

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Local git config key recording the alias set by the last bind
BINDING_MARKER_KEY = "gitx.bound"
KEYCHAIN_SERVICE = "gitx"


def get_home_dir() -> Path:
    """Get the home directory gitx works under."""
    override = os.environ.get(HOME_ENV)
    home = Path(override) if override else Path.home()
    logger.debug(f"Using home directory: {home}")
    return home


def get_config_dir() -> Path:
    """Get the gitx configuration directory."""
    return get_home_dir() / CONFIG_DIR_NAME / GITX_DIR_NAME


def get_identities_path() -> Path:
    """Get the path of the identity store."""
    return get_config_dir() / IDENTITIES_FILE


def get_log_path() -> Path:
    """Get the path of the gitx log file."""
    return get_config_dir() / LOG_FILE


def get_ssh_dir() -> Path:
    """Get the user's SSH directory."""
    return get_home_dir() / ".ssh"


def get_ssh_config_path() -> Path:
    """Get the SSH client configuration file gitx manages."""
    override = os.environ.get(SSH_CONFIG_ENV)
    if override:
        return Path(override).expanduser()
    return get_ssh_dir() / "config"


def get_backup_retention() -> int:
    """Get how many SSH config backups to keep (0 keeps all)."""
    value = os.environ.get(BACKUP_RETENTION_ENV)
    if value is None:
        return DEFAULT_BACKUP_RETENTION
    try:
        return max(int(value), 0)
    except ValueError:
        logger.warning(
            f"Ignoring invalid {BACKUP_RETENTION_ENV}={value!r}, "
            f"using {DEFAULT_BACKUP_RETENTION}"
        )
        return DEFAULT_BACKUP_RETENTION
