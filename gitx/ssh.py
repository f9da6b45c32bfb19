"""SSH config reconciliation and SSH key management for gitx."""

import logging
import platform
import shutil
import subprocess
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from . import ssh_config
from .backup import backup_file, cleanup_old_backups
from .exceptions import ConfigIOError, SSHConfigValidationError, SSHKeyError
from .ssh_config import HostEntry
from .system_utils import read_text_if_exists, write_atomically

logger = logging.getLogger(__name__)

DEFAULT_KEY_TYPE = "ed25519"
KEY_PREFIX = "gitx_"

Validator = Callable[[Path, str], None]


def validate_ssh_config(config_path: Path, host_alias: str) -> None:
    """Ask ssh to evaluate a config file for a host.

    ``ssh -G`` parses the whole file without connecting. An ssh binary
    that is missing or cannot be started is not treated as a failure.

    Raises:
        SSHConfigValidationError: If ssh rejects the file
    """
    try:
        result = subprocess.run(
            ["ssh", "-F", str(config_path), "-G", host_alias],
            capture_output=True,
            text=True,
        )
    except FileNotFoundError:
        logger.debug("ssh not installed, skipping config validation")
        return
    except OSError as e:
        logger.warning(f"Could not run ssh, skipping config validation: {e}")
        return

    if result.returncode != 0:
        raise SSHConfigValidationError(
            f"ssh rejected the rewritten config for {host_alias}",
            details=result.stderr.strip() or None,
        )


@dataclass
class ReconcileResult:
    """Outcome of one SSH config reconciliation."""
    config_path: Path
    content: str
    changed: bool
    backup_path: Optional[Path] = None
    warning: Optional[str] = None
    dry_run: bool = False


class SSHConfigReconciler:
    """Keeps the gitx managed block of an SSH config file in sync."""

    def __init__(
        self,
        config_path: Path,
        validator: Optional[Validator] = validate_ssh_config,
        keep_backups: Optional[int] = None,
    ) -> None:
        """Initialize the reconciler.

        Args:
            config_path: SSH config file to manage
            validator: Syntax check run against the temporary file, or None
            keep_backups: Backups to keep after each write; None or 0 keeps all
        """
        self.config_path = config_path
        self.validator = validator
        self.keep_backups = keep_backups

    def _read(self) -> str | None:
        try:
            return read_text_if_exists(self.config_path)
        except OSError as e:
            raise ConfigIOError(f"Failed to read SSH config {self.config_path}: {e}") from e

    def entries(self) -> tuple[HostEntry, ...]:
        """Get the entries currently in the managed block."""
        current = self._read() or ""
        return ssh_config.dedupe(ssh_config.parse(current).entries)

    def upsert(self, host_alias: str, key_path: str, dry_run: bool = False) -> ReconcileResult:
        """Point ``host_alias`` at ``key_path``, adding the entry if needed."""
        return self._reconcile(
            lambda entries: ssh_config.upsert_entry(entries, host_alias, key_path),
            host_alias,
            dry_run,
        )

    def remove(self, host_alias: str, dry_run: bool = False) -> ReconcileResult:
        """Drop every entry for ``host_alias``."""
        return self._reconcile(
            lambda entries: ssh_config.remove_entry(entries, host_alias),
            host_alias,
            dry_run,
        )

    def _reconcile(
        self,
        update: Callable[[tuple[HostEntry, ...]], tuple[HostEntry, ...]],
        host_alias: str,
        dry_run: bool,
    ) -> ReconcileResult:
        current = self._read()
        parsed = ssh_config.parse(current or "")
        entries = update(ssh_config.dedupe(parsed.entries))
        content = ssh_config.rebuild(parsed.outside_text, entries)

        changed = content != (current or "")
        result = ReconcileResult(
            config_path=self.config_path,
            content=content,
            changed=changed,
            dry_run=dry_run,
        )
        if dry_run:
            return result
        if not changed:
            logger.debug(f"SSH config already up to date for {host_alias}")
            return result

        result.backup_path = backup_file(self.config_path)

        def check(tmp_path: Path) -> None:
            if self.validator is None:
                return
            try:
                self.validator(tmp_path, host_alias)
            except SSHConfigValidationError as e:
                result.warning = f"{e.message}: {e.details}" if e.details else e.message
                logger.warning(f"SSH config validation failed: {result.warning}")

        try:
            self.config_path.parent.mkdir(mode=0o700, parents=True, exist_ok=True)
            write_atomically(self.config_path, content, before_replace=check)
        except OSError as e:
            logger.debug(f"Failed to write SSH config: {e}")
            raise ConfigIOError(f"Failed to update SSH config {self.config_path}: {e}") from e

        logger.info(f"Updated SSH config {self.config_path} for {host_alias}")

        if self.keep_backups:
            cleanup_old_backups(self.config_path, self.keep_backups)

        return result


def default_key_path(ssh_dir: Path, alias: str) -> Path:
    """Get the private key path gitx uses for an identity."""
    return ssh_dir / f"{KEY_PREFIX}{alias}"


def generate_ssh_key(alias: str, ssh_dir: Path) -> Path:
    """Generate an ed25519 key pair for an identity.

    An existing key at the target path is reused.

    Returns:
        Path to the private key
    """
    try:
        ssh_dir.mkdir(mode=0o700, parents=True, exist_ok=True)
    except OSError as e:
        raise SSHKeyError(f"Failed to create SSH directory: {e}") from e

    key_path = default_key_path(ssh_dir, alias)
    if key_path.exists():
        logger.info(f"Reusing existing SSH key {key_path}")
        return key_path

    cmd = [
        "ssh-keygen",
        "-t", DEFAULT_KEY_TYPE,
        "-f", str(key_path),
        "-N", "",
        "-C", f"gitx-{alias}",
    ]
    try:
        subprocess.run(cmd, check=True, capture_output=True, text=True)
    except FileNotFoundError as e:
        raise SSHKeyError("ssh-keygen is not installed") from e
    except subprocess.CalledProcessError as e:
        raise SSHKeyError(f"Failed to generate SSH key: {e.stderr.strip()}") from e

    key_path.chmod(0o600)
    logger.info(f"Generated {DEFAULT_KEY_TYPE} key {key_path}")
    return key_path


def public_key_path(key_path: Path) -> Path:
    """Get the public key that belongs to a private key."""
    return key_path.with_name(key_path.name + ".pub")


def read_public_key(key_path: Path) -> str:
    """Read the public half of a key pair."""
    pub_path = public_key_path(key_path)
    if not pub_path.exists():
        raise SSHKeyError(f"SSH public key not found: {pub_path}")
    try:
        return pub_path.read_text().strip()
    except OSError as e:
        raise SSHKeyError(f"Failed to read public key: {e}") from e


def delete_key_files(key_path: Path) -> list[Path]:
    """Delete a key pair, returning the files that were removed.

    Raises:
        SSHKeyError: If a file exists but cannot be removed
    """
    removed = []
    for path in (key_path, public_key_path(key_path)):
        try:
            path.unlink()
            removed.append(path)
        except FileNotFoundError:
            continue
        except OSError as e:
            raise SSHKeyError(f"Failed to delete {path}: {e}") from e
    return removed


def _clipboard_command() -> list[str]:
    system = platform.system().lower()
    if system == "darwin":
        return ["pbcopy"]
    if system == "windows":
        return ["clip"]
    for cmd in (["xclip", "-selection", "clipboard"], ["xsel", "--clipboard", "--input"], ["wl-copy"]):
        if shutil.which(cmd[0]):
            return cmd
    raise SSHKeyError(
        "No clipboard utility found",
        details="Install xclip, xsel or wl-copy, or copy the key manually",
    )


def copy_to_clipboard(text: str) -> None:
    """Copy text to the system clipboard."""
    cmd = _clipboard_command()
    try:
        subprocess.run(cmd, input=text, text=True, check=True)
    except (OSError, subprocess.CalledProcessError) as e:
        raise SSHKeyError(f"Failed to copy to clipboard: {e}") from e
