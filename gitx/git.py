"""Repository-local git configuration and remote access."""

import configparser
import logging
from pathlib import Path
from typing import Optional

import git

from .exceptions import GitConfigError, NotARepositoryError

logger = logging.getLogger(__name__)

DEFAULT_REMOTE = "origin"


def split_key(key: str) -> tuple[str, str]:
    """Split a dotted git config key into a GitPython section and option.

    ``user.name`` maps to (``user``, ``name``) and ``remote.origin.url`` maps
    to (``remote "origin"``, ``url``).
    """
    parts = key.split(".")
    if len(parts) < 2 or not all(parts):
        raise GitConfigError(f"Invalid git config key: {key}")
    if len(parts) == 2:
        return parts[0], parts[1]
    subsection = ".".join(parts[1:-1])
    return f'{parts[0]} "{subsection}"', parts[-1]


class GitRepository:
    """Reads and writes the configuration of one repository."""

    def __init__(self, repo: git.Repo) -> None:
        self.repo = repo

    @classmethod
    def discover(cls, path: Optional[Path] = None) -> "GitRepository":
        """Open the repository enclosing ``path`` (the working directory by default).

        Raises:
            NotARepositoryError: If no repository encloses the path
        """
        start = path or Path.cwd()
        try:
            repo = git.Repo(start, search_parent_directories=True)
        except (git.InvalidGitRepositoryError, git.NoSuchPathError) as e:
            raise NotARepositoryError(str(start)) from e
        logger.debug(f"Using repository at {repo.git_dir}")
        return cls(repo)

    @property
    def git_dir(self) -> Path:
        return Path(self.repo.git_dir)

    def _remote(self) -> Optional[git.Remote]:
        remotes = self.repo.remotes
        if not remotes:
            return None
        for remote in remotes:
            if remote.name == DEFAULT_REMOTE:
                return remote
        return remotes[0]

    def get_remote_url(self) -> Optional[str]:
        """Get the URL of ``origin``, or of the first remote if there is no origin.

        Returns:
            The URL, or None when the repository has no remotes
        """
        remote = self._remote()
        if remote is None:
            return None
        try:
            return remote.url
        except (configparser.Error, git.GitCommandError) as e:
            raise GitConfigError(f"Failed to get remote URL: {e}") from e

    def set_remote_url(self, url: str) -> None:
        """Point the remote returned by ``get_remote_url`` at a new URL."""
        remote = self._remote()
        if remote is None:
            raise GitConfigError("Failed to set remote URL: no remote configured")
        try:
            remote.set_url(url)
        except git.GitCommandError as e:
            raise GitConfigError(f"Failed to set remote URL: {e.stderr.strip()}") from e
        logger.debug(f"Remote {remote.name} now points at {url}")

    def _read(self, key: str, config_level: Optional[str]) -> Optional[str]:
        section, option = split_key(key)
        reader = self.repo.config_reader(config_level)
        try:
            value = reader.get(section, option)
        except (configparser.NoSectionError, configparser.NoOptionError):
            return None
        except (configparser.Error, OSError) as e:
            raise GitConfigError(f"Failed to read {key}: {e}") from e
        value = str(value).strip()
        return value or None

    def get_local_config_value(self, key: str) -> Optional[str]:
        """Get a value from the repository's own config file."""
        return self._read(key, "repository")

    def get_config_value(self, key: str) -> Optional[str]:
        """Get the effective value of a key across all config levels."""
        return self._read(key, None)

    def set_local_config_value(self, key: str, value: str) -> None:
        """Set a value in the repository's own config file."""
        section, option = split_key(key)
        try:
            with self.repo.config_writer("repository") as writer:
                writer.set_value(section, option, value)
        except (configparser.Error, OSError) as e:
            raise GitConfigError(f"Failed to set {key}: {e}") from e
        logger.debug(f"Set {key} = {value}")

    def unset_local_config_value(self, key: str) -> bool:
        """Remove every value of a key from the repository's config file.

        Returns:
            True if the key was present
        """
        section, option = split_key(key)
        try:
            with self.repo.config_writer("repository") as writer:
                if not writer.has_section(section):
                    return False
                removed = writer.remove_option(section, option)
                if not writer.options(section):
                    writer.remove_section(section)
        except (configparser.Error, OSError) as e:
            raise GitConfigError(f"Failed to unset {key}: {e}") from e
        if removed:
            logger.debug(f"Unset {key}")
        return bool(removed)
