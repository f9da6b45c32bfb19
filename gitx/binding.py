"""Binding a repository to an identity, and working out what it is bound to."""

import logging
import platform
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from .config import BINDING_MARKER_KEY
from .exceptions import GitConfigError, GitxError
from .git import GitRepository
from .identity import AuthMethod, IdentityStore
from .remote import alias_from_remote, alias_ssh_remote, host_alias_for, to_canonical_ssh, to_https
from .ssh import ReconcileResult, SSHConfigReconciler

logger = logging.getLogger(__name__)


class BindingSource(str, Enum):
    """Which signal a binding was derived from."""
    MARKER = "marker"
    REMOTE = "remote"


@dataclass(frozen=True)
class BindingState:
    """Resolved binding of a repository."""
    alias: Optional[str] = None
    source: Optional[BindingSource] = None
    orphaned: bool = False

    @property
    def is_bound(self) -> bool:
        return self.alias is not None


def resolve_binding(
    marker: Optional[str],
    remote_url: Optional[str],
    known_aliases: Iterable[str],
) -> BindingState:
    """Derive the bound alias from the marker and the remote URL.

    The marker wins when it names a known identity. Otherwise an aliased
    SSH remote decides, even for an alias that is no longer stored; such a
    binding is flagged as orphaned.
    """
    known = set(known_aliases)
    if marker and marker in known:
        return BindingState(alias=marker, source=BindingSource.MARKER)

    url_alias = alias_from_remote(remote_url)
    if url_alias is not None:
        return BindingState(
            alias=url_alias,
            source=BindingSource.REMOTE,
            orphaned=url_alias not in known,
        )

    return BindingState()


@dataclass(frozen=True)
class PlannedChange:
    """A single setting a bind or unbind touches."""
    setting: str
    current: Optional[str]
    target: Optional[str]

    @property
    def is_noop(self) -> bool:
        return self.current == self.target


@dataclass
class BindResult:
    """Outcome of binding a repository."""
    alias: str
    changes: list[PlannedChange] = field(default_factory=list)
    ssh_result: Optional[ReconcileResult] = None
    warnings: list[str] = field(default_factory=list)
    dry_run: bool = False


@dataclass
class UnbindResult:
    """Outcome of unbinding a repository."""
    changes: list[PlannedChange] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    dry_run: bool = False


@dataclass(frozen=True)
class RepositoryStatus:
    """Identity-related state of a repository."""
    name: Optional[str]
    email: Optional[str]
    remote_url: Optional[str]
    binding: BindingState


def default_credential_helper() -> str:
    """Get the credential helper used for PAT identities on this OS."""
    return "osxkeychain" if platform.system().lower() == "darwin" else "store"


def _step(operation: str, description: str, action: Callable[..., Any], *args: Any) -> None:
    """Run one step of a multi-step operation, naming it in any error."""
    try:
        action(*args)
    except GitxError as e:
        raise GitConfigError(
            f"Could not {operation} repository: failed to {description}",
            details=e.message,
        ) from e


def bind_repository(
    repo: GitRepository,
    store: IdentityStore,
    reconciler: SSHConfigReconciler,
    alias: str,
    dry_run: bool = False,
) -> BindResult:
    """Bind a repository to an identity.

    Sets the local author, records the binding marker, keeps the SSH host
    entry in sync for SSH identities, and rewrites the remote URL to match
    the auth method. Steps already applied stay applied when a later one
    fails.

    Args:
        repo: Repository collaborator (see ``gitx.git.GitRepository``)
        store: Identity store
        reconciler: SSH config reconciler
        alias: Alias of the identity to bind
        dry_run: Only compute the changes

    Raises:
        IdentityNotFoundError: If the alias is unknown
        GitConfigError: If a git config or remote step fails
        ConfigIOError: If the SSH config cannot be updated
    """
    identity = store.find_by_alias(alias)
    result = BindResult(alias=alias, dry_run=dry_run)

    # The SSH entry and the rewritten remote must name the same host
    host_alias = host_alias_for(alias)
    sync_ssh = identity.auth_method is AuthMethod.SSH and bool(identity.ssh_key_path)

    remote_url = repo.get_remote_url()
    if remote_url is None:
        target_url = None
        result.warnings.append("Repository has no remote; remote URL left unchanged")
    elif sync_ssh:
        target_url = alias_ssh_remote(to_canonical_ssh(remote_url), alias)
    elif identity.auth_method is AuthMethod.PAT:
        target_url = to_https(remote_url)
    else:
        target_url = remote_url

    settings = [
        ("user.name", identity.name),
        ("user.email", identity.email),
        (BINDING_MARKER_KEY, alias),
    ]
    if identity.auth_method is AuthMethod.PAT:
        settings.append(("credential.helper", default_credential_helper()))

    for key, value in settings:
        result.changes.append(PlannedChange(key, repo.get_local_config_value(key), value))
    if remote_url is not None:
        result.changes.append(PlannedChange("remote.url", remote_url, target_url))

    if dry_run:
        if sync_ssh:
            result.ssh_result = reconciler.upsert(host_alias, identity.ssh_key_path, dry_run=True)
        return result

    for key, value in settings:
        _step("bind", f"set {key}", repo.set_local_config_value, key, value)

    if sync_ssh:
        result.ssh_result = reconciler.upsert(host_alias, identity.ssh_key_path)
        if result.ssh_result.warning:
            result.warnings.append(result.ssh_result.warning)
    elif identity.auth_method is AuthMethod.SSH:
        result.warnings.append(f"Identity '{alias}' has no SSH key; SSH config left unchanged")

    if remote_url is not None:
        if target_url != remote_url:
            _step("bind", "update remote URL", repo.set_remote_url, target_url)
        elif sync_ssh and alias_from_remote(remote_url) != alias:
            result.warnings.append(f"Remote URL {remote_url} is not a GitHub remote; left unchanged")

    logger.info(f"Bound repository to identity '{alias}'")
    return result


def unbind_repository(repo: GitRepository, dry_run: bool = False) -> UnbindResult:
    """Undo what ``bind_repository`` set in a repository.

    Reverting an aliased remote is best-effort: a failure there becomes a
    warning.
    """
    result = UnbindResult(dry_run=dry_run)
    keys = ("user.name", "user.email", BINDING_MARKER_KEY)
    for key in keys:
        result.changes.append(PlannedChange(key, repo.get_local_config_value(key), None))

    remote_url = repo.get_remote_url()
    target_url = to_canonical_ssh(remote_url) if alias_from_remote(remote_url) else remote_url
    if remote_url is not None and target_url != remote_url:
        result.changes.append(PlannedChange("remote.url", remote_url, target_url))

    if dry_run:
        return result

    for key in keys:
        _step("unbind", f"unset {key}", repo.unset_local_config_value, key)

    if remote_url is not None and target_url != remote_url:
        try:
            repo.set_remote_url(target_url)
        except GitxError as e:
            logger.warning(f"Could not revert remote URL: {e}")
            result.warnings.append(f"Could not revert remote URL: {e}")

    logger.info("Unbound repository")
    return result


def repository_status(repo: GitRepository, store: IdentityStore) -> RepositoryStatus:
    """Collect the author, remote and binding of a repository."""
    remote_url = repo.get_remote_url()
    binding = resolve_binding(
        repo.get_local_config_value(BINDING_MARKER_KEY),
        remote_url,
        store.aliases(),
    )
    return RepositoryStatus(
        name=repo.get_config_value("user.name"),
        email=repo.get_config_value("user.email"),
        remote_url=remote_url,
        binding=binding,
    )
