"""File system utilities for gitx."""

import logging
import os
import tempfile
from collections.abc import Callable
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


def write_atomically(
    path: Path,
    content: str,
    mode: int = 0o600,
    before_replace: Optional[Callable[[Path], None]] = None,
) -> None:
    """Write content to path through a sibling temporary file.

    The temporary file is created next to ``path`` so the final
    ``os.replace`` stays on one file system. If anything fails before the
    rename, the temporary file is removed and ``path`` is left as it was.

    Args:
        path: Destination file
        content: Text to write
        mode: Permission bits for the new file
        before_replace: Called with the temporary path after it is written
            and before it replaces ``path``; an exception aborts the write

    Raises:
        OSError: If the temporary file cannot be written or renamed
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{path.name}.", suffix=".tmp", dir=path.parent
    )
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(content)
        tmp_path.chmod(mode)

        if before_replace is not None:
            before_replace(tmp_path)

        os.replace(tmp_path, path)
        logger.debug(f"Replaced {path} atomically")
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise


def read_text_if_exists(path: Path) -> str | None:
    """Read a text file, returning None when it does not exist."""
    try:
        with path.open("r", encoding="utf-8", newline="") as f:
            return f.read()
    except FileNotFoundError:
        return None
