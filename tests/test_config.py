"""Test path and setting resolution."""

from pathlib import Path

import pytest

from gitx.config import (
    DEFAULT_BACKUP_RETENTION,
    get_backup_retention,
    get_config_dir,
    get_identities_path,
    get_log_path,
    get_ssh_config_path,
)


def test_paths_follow_home(temp_home: Path) -> None:
    assert get_config_dir() == temp_home / ".config" / "gitx"
    assert get_identities_path() == temp_home / ".config" / "gitx" / "identities.json"
    assert get_log_path() == temp_home / ".config" / "gitx" / "gitx.log"
    assert get_ssh_config_path() == temp_home / ".ssh" / "config"


def test_ssh_config_override(temp_home: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GITX_SSH_CONFIG", str(tmp_path / "alt_config"))
    assert get_ssh_config_path() == tmp_path / "alt_config"


@pytest.mark.parametrize(
    ("value", "expected"),
    [(None, DEFAULT_BACKUP_RETENTION), ("3", 3), ("0", 0), ("-2", 0), ("lots", DEFAULT_BACKUP_RETENTION)],
)
def test_backup_retention(
    temp_home: Path, monkeypatch: pytest.MonkeyPatch, value: str | None, expected: int
) -> None:
    if value is not None:
        monkeypatch.setenv("GITX_BACKUP_RETENTION", value)
    assert get_backup_retention() == expected
