"""Test SSH config backups."""

from datetime import datetime
from pathlib import Path
from unittest.mock import patch

import pytest

from gitx.backup import backup_file, backup_path_for, cleanup_old_backups, list_backups
from gitx.exceptions import ConfigIOError


def test_backup_path_for() -> None:
    path = backup_path_for(Path("/h/.ssh/config"), datetime(2024, 3, 5, 14, 7, 9))
    assert path == Path("/h/.ssh/config.gitx.backup.20240305-140709")


def test_backup_file_copies_content(tmp_path: Path) -> None:
    """Test the backup is a private copy next to the original."""
    config = tmp_path / "config"
    config.write_text("Host a\n")

    backup = backup_file(config)

    assert backup is not None
    assert backup.parent == tmp_path
    assert backup.name.startswith("config.gitx.backup.")
    assert backup.read_text() == "Host a\n"
    assert (backup.stat().st_mode & 0o777) == 0o600


def test_backup_missing_file(tmp_path: Path) -> None:
    assert backup_file(tmp_path / "config") is None


def test_backup_failure(tmp_path: Path) -> None:
    config = tmp_path / "config"
    config.write_text("Host a\n")
    with patch("gitx.backup.shutil.copy2", side_effect=OSError("read-only")):
        with pytest.raises(ConfigIOError, match="read-only"):
            backup_file(config)


def test_list_backups_sorted_by_name(tmp_path: Path) -> None:
    """Test ordering follows the timestamp in the name."""
    config = tmp_path / "config"
    for stamp in ("20240103-000000", "20240101-000000", "20240102-000000"):
        (tmp_path / f"config.gitx.backup.{stamp}").write_text("")
    (tmp_path / "other.gitx.backup.20240101-000000").write_text("")

    assert [p.name[-15:] for p in list_backups(config)] == [
        "20240101-000000",
        "20240102-000000",
        "20240103-000000",
    ]


def test_cleanup_keeps_most_recent(tmp_path: Path) -> None:
    config = tmp_path / "config"
    stamps = [f"2024010{i}-000000" for i in range(1, 6)]
    for stamp in stamps:
        (tmp_path / f"config.gitx.backup.{stamp}").write_text("")

    removed = cleanup_old_backups(config, keep=2)

    assert [p.name[-15:] for p in removed] == stamps[:3]
    assert [p.name[-15:] for p in list_backups(config)] == stamps[3:]


def test_cleanup_under_limit(tmp_path: Path) -> None:
    config = tmp_path / "config"
    (tmp_path / "config.gitx.backup.20240101-000000").write_text("")
    assert cleanup_old_backups(config, keep=5) == []


def test_backups_in_same_second_are_kept(tmp_path: Path) -> None:
    """Test a second backup within one second does not replace the first."""
    config = tmp_path / "config"
    config.write_text("first\n")

    with patch("gitx.backup.datetime") as mock_datetime:
        mock_datetime.now.return_value = datetime(2024, 3, 5, 14, 7, 9)
        first = backup_file(config)
        config.write_text("second\n")
        second = backup_file(config)

    assert first != second
    assert first.read_text() == "first\n"
    assert second.name == "config.gitx.backup.20240305-140709-001"
    assert list_backups(config) == [first, second]
