"""Test repository config access against real repositories."""

import shutil
from pathlib import Path

import git
import pytest

from gitx.exceptions import GitConfigError, NotARepositoryError
from gitx.git import GitRepository, split_key

pytestmark = pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")


@pytest.fixture
def repo(tmp_path: Path) -> GitRepository:
    """Fresh repository with an origin remote."""
    raw = git.Repo.init(tmp_path / "repo")
    raw.create_remote("origin", "git@github.com:org/repo.git")
    return GitRepository(raw)


def test_split_key() -> None:
    assert split_key("user.name") == ("user", "name")
    assert split_key("remote.origin.url") == ('remote "origin"', "url")
    with pytest.raises(GitConfigError):
        split_key("user")
    with pytest.raises(GitConfigError):
        split_key("user..name")


def test_discover_from_subdirectory(repo: GitRepository) -> None:
    sub = Path(repo.repo.working_tree_dir) / "a" / "b"
    sub.mkdir(parents=True)
    assert GitRepository.discover(sub).git_dir == repo.git_dir


def test_discover_outside_repository(tmp_path: Path) -> None:
    with pytest.raises(NotARepositoryError):
        GitRepository.discover(tmp_path)


def test_local_config_round_trip(repo: GitRepository) -> None:
    assert repo.get_local_config_value("gitx.bound") is None

    repo.set_local_config_value("gitx.bound", "work")
    assert repo.get_local_config_value("gitx.bound") == "work"
    assert repo.repo.git.config("--local", "--get", "gitx.bound") == "work"

    assert repo.unset_local_config_value("gitx.bound")
    assert repo.get_local_config_value("gitx.bound") is None
    assert not repo.unset_local_config_value("gitx.bound")


def test_remote_url(repo: GitRepository) -> None:
    assert repo.get_remote_url() == "git@github.com:org/repo.git"

    repo.set_remote_url("git@github.com-work:org/repo.git")

    assert repo.get_remote_url() == "git@github.com-work:org/repo.git"
    assert repo.repo.git.remote("get-url", "origin") == "git@github.com-work:org/repo.git"


def test_first_remote_without_origin(tmp_path: Path) -> None:
    raw = git.Repo.init(tmp_path / "repo")
    raw.create_remote("upstream", "git@github.com:up/repo.git")
    assert GitRepository(raw).get_remote_url() == "git@github.com:up/repo.git"


def test_no_remote(tmp_path: Path) -> None:
    repo = GitRepository(git.Repo.init(tmp_path / "repo"))
    assert repo.get_remote_url() is None
    with pytest.raises(GitConfigError):
        repo.set_remote_url("git@github.com:a/b.git")
