"""Test configuration and fixtures."""

from collections.abc import Generator
from pathlib import Path
from typing import Optional

import pytest

from gitx.exceptions import GitConfigError
from gitx.identity import AuthMethod, Identity, IdentityStore
from gitx.ssh import SSHConfigReconciler


class FakeRepository:
    """In-memory stand-in for ``gitx.git.GitRepository``."""

    def __init__(
        self,
        remote_url: Optional[str] = None,
        global_config: Optional[dict[str, str]] = None,
        git_dir: Optional[Path] = None,
    ) -> None:
        self.remote_url = remote_url
        self.local: dict[str, str] = {}
        self.global_config = dict(global_config or {})
        self.git_dir = git_dir or Path("/nonexistent/.git")
        self.fail_on_set: set[str] = set()
        self.fail_remote = False

    def get_remote_url(self) -> Optional[str]:
        return self.remote_url

    def set_remote_url(self, url: str) -> None:
        if self.fail_remote:
            raise GitConfigError("Failed to set remote URL: remote is locked")
        if self.remote_url is None:
            raise GitConfigError("Failed to set remote URL: no remote configured")
        self.remote_url = url

    def get_local_config_value(self, key: str) -> Optional[str]:
        return self.local.get(key)

    def get_config_value(self, key: str) -> Optional[str]:
        return self.local.get(key, self.global_config.get(key))

    def set_local_config_value(self, key: str, value: str) -> None:
        if key in self.fail_on_set:
            raise GitConfigError(f"Failed to set {key}: config is locked")
        self.local[key] = value

    def unset_local_config_value(self, key: str) -> bool:
        return self.local.pop(key, None) is not None


@pytest.fixture
def temp_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[Path, None, None]:
    """Create a temporary home directory for testing."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("GITX_HOME", str(home))
    monkeypatch.delenv("GITX_SSH_CONFIG", raising=False)
    monkeypatch.delenv("GITX_BACKUP_RETENTION", raising=False)
    yield home


@pytest.fixture
def ssh_config_path(temp_home: Path) -> Path:
    """Path of the SSH config file under the temporary home."""
    return temp_home / ".ssh" / "config"


@pytest.fixture
def reconciler(ssh_config_path: Path) -> SSHConfigReconciler:
    """Reconciler that skips the external ssh syntax check."""
    return SSHConfigReconciler(ssh_config_path, validator=None)


@pytest.fixture
def store(temp_home: Path) -> IdentityStore:
    """Empty identity store under the temporary home."""
    return IdentityStore(temp_home / ".config" / "gitx" / "identities.json")


@pytest.fixture
def work_identity(temp_home: Path) -> Identity:
    """SSH identity with a key path and host alias."""
    return Identity(
        alias="work",
        name="Work User",
        email="work@example.com",
        github_user="work-user",
        auth_method=AuthMethod.SSH,
        ssh_key_path=str(temp_home / ".ssh" / "gitx_work"),
        ssh_host_alias="github.com-work",
    )


@pytest.fixture
def pat_identity() -> Identity:
    """PAT identity."""
    return Identity(
        alias="oss",
        name="OSS User",
        email="oss@example.com",
        github_user="oss-user",
        auth_method=AuthMethod.PAT,
    )


@pytest.fixture
def fake_repo() -> FakeRepository:
    """Repository with a canonical GitHub SSH remote."""
    return FakeRepository(remote_url="git@github.com:org/repo.git")


@pytest.fixture
def make_repo() -> type[FakeRepository]:
    """Factory for in-memory repositories."""
    return FakeRepository
