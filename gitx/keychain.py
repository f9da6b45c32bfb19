"""OS keychain access for personal access tokens."""

import logging
import subprocess

import keyring
from keyring.errors import KeyringError, PasswordDeleteError

from .config import KEYCHAIN_SERVICE, get_home_dir
from .exceptions import KeychainError
from .system_utils import read_text_if_exists, write_atomically

logger = logging.getLogger(__name__)

KNOWN_SECRETS = ("pat", "ssh_passphrase")


def _secret_name(alias: str, key: str) -> str:
    return f"{alias}:{key}"


def store_secret(alias: str, key: str, value: str) -> None:
    """Store a secret for an identity in the OS keychain."""
    try:
        keyring.set_password(KEYCHAIN_SERVICE, _secret_name(alias, key), value)
    except KeyringError as e:
        raise KeychainError(f"Failed to store {key} for '{alias}': {e}") from e
    logger.debug(f"Stored {key} for '{alias}' in keychain")


def get_secret(alias: str, key: str) -> str | None:
    """Get a secret for an identity, or None when it is not stored."""
    try:
        return keyring.get_password(KEYCHAIN_SERVICE, _secret_name(alias, key))
    except KeyringError as e:
        raise KeychainError(f"Failed to read {key} for '{alias}': {e}") from e


def delete_secret(alias: str, key: str) -> bool:
    """Delete a secret; returns False when there was nothing to delete."""
    try:
        keyring.delete_password(KEYCHAIN_SERVICE, _secret_name(alias, key))
    except PasswordDeleteError:
        return False
    except KeyringError as e:
        raise KeychainError(f"Failed to delete {key} for '{alias}': {e}") from e
    return True


def delete_all_secrets(alias: str) -> list[str]:
    """Delete every secret gitx may have stored for an identity.

    Returns:
        Names of the secrets that were deleted
    """
    return [key for key in KNOWN_SECRETS if delete_secret(alias, key)]


def _erase_from_osxkeychain(github_user: str) -> bool:
    request = f"protocol=https\nhost=github.com\nusername={github_user}\n\n"
    try:
        result = subprocess.run(
            ["git", "credential-osxkeychain", "erase"],
            input=request,
            capture_output=True,
            text=True,
        )
    except FileNotFoundError:
        return False
    return result.returncode == 0


def _erase_from_credential_store(github_user: str) -> bool:
    store_path = get_home_dir() / ".git-credentials"
    try:
        content = read_text_if_exists(store_path)
    except OSError as e:
        raise KeychainError(f"Failed to read credential store: {e}") from e
    if content is None:
        return False

    # Entries look like https://<user>[:<token>]@github.com
    prefixes = (f"https://{github_user}:", f"https://{github_user}@")
    lines = [line.strip() for line in content.splitlines() if line.strip()]
    kept = [
        line for line in lines
        if not (line.startswith(prefixes) and "@github.com" in line)
    ]
    if len(kept) == len(lines):
        return False

    new_content = "\n".join(kept) + "\n" if kept else ""
    try:
        write_atomically(store_path, new_content)
    except OSError as e:
        raise KeychainError(f"Failed to write credential store: {e}") from e
    return True


def remove_git_credentials(github_user: str) -> bool:
    """Remove a user's GitHub credentials from git's credential helpers.

    Tries the macOS keychain helper first, then ``~/.git-credentials``.

    Returns:
        True if credentials were found and removed
    """
    if _erase_from_osxkeychain(github_user):
        logger.debug(f"Erased osxkeychain credentials for {github_user}")
        return True
    removed = _erase_from_credential_store(github_user)
    if removed:
        logger.debug(f"Removed stored credentials for {github_user}")
    return removed
