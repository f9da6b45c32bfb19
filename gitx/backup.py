"""Timestamped backups of the SSH config file."""

import logging
import shutil
from datetime import datetime
from pathlib import Path

from .exceptions import ConfigIOError

logger = logging.getLogger(__name__)

BACKUP_INFIX = ".gitx.backup."
TIMESTAMP_FORMAT = "%Y%m%d-%H%M%S"


def backup_path_for(config_path: Path, when: datetime | None = None) -> Path:
    """Build the backup path for a config file at a given time."""
    timestamp = (when or datetime.now()).strftime(TIMESTAMP_FORMAT)
    return config_path.with_name(f"{config_path.name}{BACKUP_INFIX}{timestamp}")


def _unused_backup_path(config_path: Path) -> Path:
    """Get a backup path that no earlier backup uses.

    Backups made within the same second get a zero-padded counter so that
    name order stays chronological.
    """
    base = backup_path_for(config_path)
    candidate = base
    counter = 0
    while candidate.exists():
        counter += 1
        candidate = base.with_name(f"{base.name}-{counter:03d}")
    return candidate


def backup_file(config_path: Path) -> Path | None:
    """Copy a config file to a timestamped sibling.

    Args:
        config_path: File to back up

    Returns:
        Path to the backup, or None when there was nothing to back up
    """
    if not config_path.exists():
        logger.debug(f"No file at {config_path}, skipping backup")
        return None

    backup_path = _unused_backup_path(config_path)
    try:
        shutil.copy2(config_path, backup_path)
        backup_path.chmod(0o600)
    except OSError as e:
        logger.debug(f"Failed to back up {config_path}: {e}")
        raise ConfigIOError(f"Failed to back up SSH config: {e}") from e

    logger.debug(f"Backed up {config_path} to {backup_path}")
    return backup_path


def list_backups(config_path: Path) -> list[Path]:
    """List backups of a config file, oldest first.

    Ordering relies on the sortable timestamp in the file name, not on
    modification times.
    """
    pattern = f"{config_path.name}{BACKUP_INFIX}*"
    return sorted(config_path.parent.glob(pattern), key=lambda p: p.name)


def cleanup_old_backups(config_path: Path, keep: int) -> list[Path]:
    """Delete all but the ``keep`` most recent backups.

    Args:
        config_path: Config file whose backups are swept
        keep: Number of backups to keep

    Returns:
        The backups that were removed
    """
    backups = list_backups(config_path)
    if len(backups) <= keep:
        return []

    removed = []
    for old in backups[: len(backups) - keep]:
        try:
            old.unlink()
            removed.append(old)
        except OSError as e:
            logger.warning(f"Failed to remove old backup {old}: {e}")

    logger.debug(f"Removed {len(removed)} old backup(s) of {config_path}")
    return removed
