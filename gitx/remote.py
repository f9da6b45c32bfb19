"""Conversions between the remote URL shapes gitx works with.

Three shapes are recognized:

* canonical SSH: ``git@github.com:org/repo.git``
* aliased SSH: ``git@github.com-<alias>:org/repo.git``
* HTTPS: ``https://github.com/org/repo.git``

Every function returns its input unchanged when the URL is not in a shape
it knows how to convert.
"""

from .ssh_config import GITHUB_HOST

SSH_USER_PREFIX = "git@"
CANONICAL_SSH_PREFIX = f"{SSH_USER_PREFIX}{GITHUB_HOST}:"
HTTPS_PREFIX = f"https://{GITHUB_HOST}/"
HOST_ALIAS_PREFIX = f"{GITHUB_HOST}-"


def host_alias_for(alias: str) -> str:
    """Get the SSH host alias for an identity alias."""
    return f"{HOST_ALIAS_PREFIX}{alias}"


def _split_ssh(url: str) -> tuple[str, str] | None:
    """Split ``git@<host>:<path>`` into host and path."""
    if not url.startswith(SSH_USER_PREFIX) or ":" not in url:
        return None
    host, path = url[len(SSH_USER_PREFIX):].split(":", 1)
    if not host or not path:
        return None
    return host, path


def alias_ssh_remote(url: str, alias: str) -> str:
    """Point a canonical GitHub SSH remote at the host alias for ``alias``."""
    if not url.startswith(CANONICAL_SSH_PREFIX):
        return url
    path = url[len(CANONICAL_SSH_PREFIX):]
    return f"{SSH_USER_PREFIX}{host_alias_for(alias)}:{path}"


def to_https(url: str) -> str:
    """Convert a GitHub SSH remote, aliased or not, to HTTPS."""
    parts = _split_ssh(url)
    if parts is None:
        return url
    host, path = parts
    if host != GITHUB_HOST and not host.startswith(HOST_ALIAS_PREFIX):
        return url
    return f"{HTTPS_PREFIX}{path}"


def to_canonical_ssh(url: str) -> str:
    """Convert an aliased SSH or HTTPS GitHub remote to canonical SSH."""
    if url.startswith(HTTPS_PREFIX):
        path = url[len(HTTPS_PREFIX):]
        return f"{CANONICAL_SSH_PREFIX}{path}" if path else url

    parts = _split_ssh(url)
    if parts is None:
        return url
    host, path = parts
    if host.startswith(HOST_ALIAS_PREFIX):
        return f"{CANONICAL_SSH_PREFIX}{path}"
    return url


def alias_from_remote(url: str | None) -> str | None:
    """Extract the identity alias from an aliased SSH remote, if any."""
    if not url:
        return None
    parts = _split_ssh(url)
    if parts is None:
        return None
    host = parts[0]
    if not host.startswith(HOST_ALIAS_PREFIX):
        return None
    alias = host[len(HOST_ALIAS_PREFIX):]
    return alias or None


def is_aliased(url: str | None) -> bool:
    """Check whether a remote goes through a gitx host alias."""
    return alias_from_remote(url) is not None
