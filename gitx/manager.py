"""Adding and removing identities together with their SSH and keychain state."""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from . import keychain
from .config import get_backup_retention, get_identities_path, get_ssh_config_path, get_ssh_dir
from .exceptions import AliasConflictError, GitxError, SSHKeyError
from .identity import AuthMethod, Identity, IdentityStore
from .remote import host_alias_for
from .ssh import SSHConfigReconciler, delete_key_files, generate_ssh_key, public_key_path, read_public_key

logger = logging.getLogger(__name__)

ALIAS_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")


@dataclass
class AddResult:
    """Outcome of adding an identity."""
    identity: Identity
    key_generated: bool = False
    warnings: list[str] = field(default_factory=list)
    dry_run: bool = False


@dataclass
class RemovalResult:
    """Outcome of removing an identity."""
    identity: Identity
    planned: list[str] = field(default_factory=list)
    removed: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    dry_run: bool = False


def validate_alias(alias: str) -> None:
    """Check an alias can be used as an SSH host alias suffix."""
    if not alias:
        raise GitxError("Alias cannot be empty")
    if not ALIAS_PATTERN.match(alias):
        raise GitxError(
            f"Invalid alias: {alias}",
            details="Use letters, digits, '.', '_' or '-', starting with a letter or digit",
        )


class IdentityManager:
    """Manages identities and the SSH config and keychain state that goes with them."""

    def __init__(
        self,
        store: IdentityStore,
        reconciler: SSHConfigReconciler,
        ssh_dir: Path,
    ) -> None:
        self.store = store
        self.reconciler = reconciler
        self.ssh_dir = ssh_dir

    @classmethod
    def from_config(cls) -> "IdentityManager":
        """Build a manager over the configured store and SSH config."""
        return cls(
            store=IdentityStore(get_identities_path()),
            reconciler=SSHConfigReconciler(
                get_ssh_config_path(), keep_backups=get_backup_retention()
            ),
            ssh_dir=get_ssh_dir(),
        )

    def add_identity(
        self,
        alias: str,
        name: str,
        email: str,
        github_user: str,
        auth_method: AuthMethod = AuthMethod.SSH,
        generate_key: bool = True,
        key_path: Optional[Path] = None,
        token: Optional[str] = None,
        dry_run: bool = False,
    ) -> AddResult:
        """Create a new identity.

        For SSH identities a key is generated (or ``key_path`` is used) and
        the host alias entry is written to the SSH config. For PAT
        identities the token goes to the OS keychain. The identity record is
        written last.

        Raises:
            GitxError: If a field is empty or the alias is invalid
            AliasConflictError: If the alias is already taken
        """
        validate_alias(alias)
        for label, value in (("Name", name), ("Email", email), ("GitHub username", github_user)):
            if not value or not value.strip():
                raise GitxError(f"{label} cannot be empty")
        if alias in self.store.aliases():
            existing = self.store.find_by_alias(alias)
            raise AliasConflictError(
                alias,
                current_config={"Name": existing.name, "Email": existing.email},
            )
        if auth_method is AuthMethod.PAT and not token:
            raise GitxError("Personal access token cannot be empty")

        identity = Identity(
            alias=alias,
            name=name.strip(),
            email=email.strip(),
            github_user=github_user.strip(),
            auth_method=auth_method,
        )
        result = AddResult(identity=identity, dry_run=dry_run)
        if dry_run:
            return result

        if auth_method is AuthMethod.SSH and (generate_key or key_path):
            if key_path is None:
                key_path = generate_ssh_key(alias, self.ssh_dir)
                result.key_generated = True
            elif not key_path.exists():
                raise SSHKeyError(f"SSH key not found: {key_path}")

            identity = identity.with_ssh(str(key_path), host_alias_for(alias))
            ssh_result = self.reconciler.upsert(identity.ssh_host_alias, identity.ssh_key_path)
            if ssh_result.warning:
                result.warnings.append(ssh_result.warning)
        elif auth_method is AuthMethod.PAT:
            keychain.store_secret(alias, "pat", token)

        self.store.upsert(identity)
        result.identity = identity
        logger.info(f"Added identity '{alias}' ({auth_method.value})")
        return result

    def remove_identity(
        self,
        alias: str,
        delete_keys: bool = False,
        dry_run: bool = False,
    ) -> RemovalResult:
        """Remove an identity and clean up what belongs to it.

        SSH config, keychain and key file cleanup are best-effort and turn
        into warnings; removing the record itself must succeed.

        Raises:
            IdentityNotFoundError: If the alias is unknown
            ConfigIOError: If the identity store cannot be written
        """
        identity = self.store.find_by_alias(alias)
        result = RemovalResult(identity=identity, dry_run=dry_run)

        result.planned.append("Identity config entry")
        if identity.ssh_host_alias:
            result.planned.append(f"SSH config entry: {identity.ssh_host_alias}")
        if identity.auth_method is AuthMethod.PAT:
            result.planned.append("Keychain secrets (PAT)")
            result.planned.append("Git credential helper entries")
        if delete_keys and identity.ssh_key_path:
            key = Path(identity.ssh_key_path)
            result.planned.append(f"SSH key files: {key}, {public_key_path(key)}")

        if dry_run:
            return result

        if identity.ssh_host_alias:
            try:
                self.reconciler.remove(identity.ssh_host_alias)
                result.removed.append("SSH config entry")
            except GitxError as e:
                result.warnings.append(f"Failed to remove SSH config entry: {e}")

        if identity.auth_method is AuthMethod.PAT:
            try:
                keychain.delete_all_secrets(alias)
                result.removed.append("Keychain secrets")
            except GitxError as e:
                result.warnings.append(f"Failed to remove keychain secrets: {e}")
            if identity.github_user:
                try:
                    if keychain.remove_git_credentials(identity.github_user):
                        result.removed.append("Git credentials")
                except GitxError as e:
                    result.warnings.append(f"Failed to remove git credentials: {e}")

        if delete_keys and identity.ssh_key_path:
            try:
                for path in delete_key_files(Path(identity.ssh_key_path)):
                    result.removed.append(f"SSH key: {path}")
            except SSHKeyError as e:
                result.warnings.append(str(e))

        for warning in result.warnings:
            logger.warning(warning)

        self.store.remove(alias)
        result.removed.append("Identity config entry")
        return result

    def public_key(self, alias: str) -> str:
        """Get the SSH public key of an identity."""
        identity = self.store.find_by_alias(alias)
        if not identity.ssh_key_path:
            raise SSHKeyError(f"Identity '{alias}' does not have an SSH key")
        return read_public_key(Path(identity.ssh_key_path))
