"""Pre-push hook that refuses pushes from unbound repositories."""

import logging
from enum import Enum
from pathlib import Path

from .config import BINDING_MARKER_KEY
from .exceptions import GitxError

logger = logging.getLogger(__name__)

HOOK_NAME = "pre-push"
HOOK_SIGNATURE = "# gitx pre-push hook"

HOOK_SCRIPT = f"""#!/bin/sh
{HOOK_SIGNATURE}
# Blocks push if repository is not bound to an identity

if [ -n "$(git config --local --get {BINDING_MARKER_KEY} 2>/dev/null)" ]; then
  exit 0
fi

remote=$(git remote get-url origin 2>/dev/null)
if echo "$remote" | grep -q "github.com-"; then
  exit 0
fi

name=$(git config --local --get user.name 2>/dev/null)
email=$(git config --local --get user.email 2>/dev/null)
if [ -n "$name" ] && [ -n "$email" ]; then
  exit 0
fi

echo "Error: Repository is not bound to an identity."
echo "Run 'gitx bind <identity>' to bind this repository."
exit 1
"""


class HookStatus(str, Enum):
    """Result of installing or removing the hook."""
    INSTALLED = "installed"
    ALREADY_INSTALLED = "already_installed"
    FOREIGN_HOOK = "foreign_hook"
    REMOVED = "removed"
    NOT_FOUND = "not_found"


def hook_path(git_dir: Path) -> Path:
    return git_dir / "hooks" / HOOK_NAME


def _is_gitx_hook(path: Path) -> bool:
    return HOOK_SIGNATURE in path.read_text(errors="replace")


def install_hook(git_dir: Path) -> HookStatus:
    """Install the gitx pre-push hook, never replacing someone else's hook."""
    path = hook_path(git_dir)
    try:
        if path.exists():
            if _is_gitx_hook(path):
                return HookStatus.ALREADY_INSTALLED
            logger.warning(f"Existing pre-push hook at {path} left in place")
            return HookStatus.FOREIGN_HOOK

        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(HOOK_SCRIPT)
        path.chmod(0o755)
    except OSError as e:
        raise GitxError(f"Failed to install pre-push hook: {e}") from e

    logger.info(f"Installed pre-push hook at {path}")
    return HookStatus.INSTALLED


def uninstall_hook(git_dir: Path) -> HookStatus:
    """Remove the gitx pre-push hook if it is the one installed."""
    path = hook_path(git_dir)
    try:
        if not path.exists():
            return HookStatus.NOT_FOUND
        if not _is_gitx_hook(path):
            return HookStatus.FOREIGN_HOOK
        path.unlink()
    except OSError as e:
        raise GitxError(f"Failed to remove pre-push hook: {e}") from e

    logger.info(f"Removed pre-push hook at {path}")
    return HookStatus.REMOVED
