"""Custom exceptions for gitx."""


class GitxError(Exception):
    """Base exception for gitx."""

    def __init__(self, message: str, details: str | None = None) -> None:
        self.message = message
        self.details = details
        super().__init__(message)

    @staticmethod
    def _escape_markup(text: str) -> str:
        """Escape Rich markup in text."""
        return str(text).replace("[", "\\[").replace("]", "\\]")

    def __str__(self) -> str:
        return self.message


class NotARepositoryError(GitxError):
    """Raised when a command needs a git repository and there is none."""

    def __init__(self, path: str | None = None) -> None:
        self.path = path
        super().__init__(
            "Not a git repository",
            details=f"No repository found at or above {path}" if path else None,
        )


class IdentityNotFoundError(GitxError):
    """Raised when an alias is not present in the identity store."""

    def __init__(self, alias: str) -> None:
        self.alias = alias
        super().__init__(f"Identity '{alias}' not found")


class AliasConflictError(GitxError):
    """Raised when adding an identity whose alias is already taken."""

    def __init__(self, alias: str, current_config: dict | None = None) -> None:
        self.alias = alias
        self.current_config = current_config
        super().__init__(f"Identity with alias '{alias}' already exists")


class ConfigIOError(GitxError):
    """Read, write or rename failure on the SSH config or identity store."""
    pass


class GitConfigError(GitxError):
    """Errors related to Git configuration."""
    pass


class SSHKeyError(GitxError):
    """Errors related to SSH key management."""
    pass


class SSHConfigValidationError(GitxError):
    """The external syntax check rejected a rewritten SSH config."""
    pass


class KeychainError(GitxError):
    """Errors raised by the OS keychain."""
    pass
