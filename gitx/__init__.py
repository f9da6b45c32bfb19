"""gitx - Switch between GitHub identities per repository."""

from gitx.cli import cli
from gitx.identity import AuthMethod, Identity, IdentityStore
from gitx.manager import IdentityManager
from gitx.ssh import SSHConfigReconciler
from gitx.version import __version__

__all__ = [
    "AuthMethod",
    "Identity",
    "IdentityManager",
    "IdentityStore",
    "SSHConfigReconciler",
    "__version__",
    "cli",
]
