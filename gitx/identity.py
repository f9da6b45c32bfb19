"""Identity records and the JSON identity store."""

import json
import logging
from dataclasses import dataclass, replace
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from .exceptions import AliasConflictError, ConfigIOError, IdentityNotFoundError
from .system_utils import read_text_if_exists, write_atomically

logger = logging.getLogger(__name__)


class AuthMethod(str, Enum):
    """How an identity authenticates against GitHub."""
    SSH = "ssh"
    PAT = "pat"

    @classmethod
    def from_str(cls, value: str) -> "AuthMethod":
        """Convert string to auth method."""
        normalized = value.lower().strip()
        for method in cls:
            if method.value == normalized:
                return method
        raise ValueError(f"Invalid auth method: {value} (expected 'ssh' or 'pat')")

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Identity:
    """A named bundle of author identity and auth method."""
    alias: str
    name: str
    email: str
    github_user: str
    auth_method: AuthMethod = AuthMethod.SSH
    ssh_key_path: Optional[str] = None
    ssh_host_alias: Optional[str] = None

    @property
    def uses_ssh(self) -> bool:
        return self.auth_method is AuthMethod.SSH

    def with_ssh(self, key_path: str, host_alias: str) -> "Identity":
        """Return a copy carrying SSH key details."""
        return replace(self, ssh_key_path=key_path, ssh_host_alias=host_alias)

    def to_dict(self) -> dict[str, Any]:
        """Convert identity to dictionary for serialization."""
        data: dict[str, Any] = {
            "alias": self.alias,
            "name": self.name,
            "email": self.email,
            "github_user": self.github_user,
            "auth_method": self.auth_method.value,
        }
        if self.ssh_key_path:
            data["ssh_key_path"] = self.ssh_key_path
        if self.ssh_host_alias:
            data["ssh_host_alias"] = self.ssh_host_alias
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Identity":
        """Create identity from dictionary."""
        return cls(
            alias=data["alias"],
            name=data["name"],
            email=data["email"],
            github_user=data.get("github_user", ""),
            auth_method=AuthMethod.from_str(data.get("auth_method", "ssh")),
            ssh_key_path=data.get("ssh_key_path") or None,
            ssh_host_alias=data.get("ssh_host_alias") or None,
        )


class IdentityStore:
    """Ordered, alias-keyed collection of identities backed by a JSON file.

    Every mutation loads the whole file, builds a new tuple and writes it
    back, so callers never see a partially updated collection.
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def _load(self) -> tuple[Identity, ...]:
        try:
            raw = read_text_if_exists(self.path)
        except OSError as e:
            raise ConfigIOError(f"Failed to read identities: {e}") from e
        if raw is None or not raw.strip():
            return ()

        try:
            data = json.loads(raw)
            return tuple(Identity.from_dict(item) for item in data.get("identities", []))
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            raise ConfigIOError(
                f"Failed to parse identities: {e}",
                details=str(self.path),
            ) from e

    def _save(self, identities: tuple[Identity, ...]) -> None:
        data = {"identities": [identity.to_dict() for identity in identities]}
        try:
            write_atomically(self.path, json.dumps(data, indent=2) + "\n")
        except OSError as e:
            raise ConfigIOError(f"Failed to save identities: {e}") from e
        logger.debug(f"Saved {len(identities)} identities to {self.path}")

    def list(self) -> tuple[Identity, ...]:
        """Get all identities in insertion order."""
        return self._load()

    def aliases(self) -> set[str]:
        """Get the set of known aliases."""
        return {identity.alias for identity in self._load()}

    def find_by_alias(self, alias: str) -> Identity:
        """Get an identity by alias.

        Raises:
            IdentityNotFoundError: If no identity has that alias
        """
        for identity in self._load():
            if identity.alias == alias:
                return identity
        raise IdentityNotFoundError(alias)

    def upsert(self, identity: Identity, overwrite: bool = False) -> None:
        """Add an identity, or replace it in place when ``overwrite`` is set.

        Raises:
            AliasConflictError: If the alias exists and ``overwrite`` is False
        """
        current = self._load()
        existing = next((i for i in current if i.alias == identity.alias), None)
        if existing is not None and not overwrite:
            raise AliasConflictError(
                identity.alias,
                current_config={
                    "Name": existing.name,
                    "Email": existing.email,
                    "GitHub user": existing.github_user,
                    "Auth": existing.auth_method.value,
                },
            )

        if existing is None:
            updated = (*current, identity)
        else:
            updated = tuple(identity if i.alias == identity.alias else i for i in current)
        self._save(updated)
        logger.info(f"Stored identity '{identity.alias}'")

    def remove(self, alias: str) -> Identity:
        """Remove an identity and return the removed record.

        Raises:
            IdentityNotFoundError: If no identity has that alias
        """
        current = self._load()
        removed = next((i for i in current if i.alias == alias), None)
        if removed is None:
            raise IdentityNotFoundError(alias)

        self._save(tuple(i for i in current if i.alias != alias))
        logger.info(f"Removed identity '{alias}'")
        return removed
