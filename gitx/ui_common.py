"""Console output shared by the CLI and its helpers.

Normal output goes to stdout; errors and warnings go to stderr so that
``gitx show-key work > key.pub`` stays clean.
"""

from rich.console import Console
from rich.prompt import Confirm
from rich.theme import Theme

theme = Theme(
    {
        "info": "cyan",
        "warning": "yellow",
        "error": "red",
        "success": "green",
        "dry_run": "bold magenta",
        "muted": "dim",
        "path": "blue",
        "command": "green",
    }
)

console = Console(theme=theme)
err_console = Console(theme=theme, stderr=True)


def print_error(message: str) -> None:
    err_console.print(f"[error]Error:[/error] {message}")


def print_warning(message: str) -> None:
    err_console.print(f"[warning]Warning:[/warning] {message}")


def print_info(message: str) -> None:
    console.print(f"[info]Info:[/info] {message}")


def print_success(message: str) -> None:
    console.print(f"[success]✓[/success] {message}")


def print_dry_run(message: str) -> None:
    """Print a line describing a change that was not made."""
    console.print(f"[dry_run]\\[DRY RUN][/dry_run] {message}")


def confirm_action(prompt: str, default: bool = True) -> bool:
    """Ask a yes/no question.

    Raises:
        GitxError: If the user interrupts or stdin is closed
    """
    from .exceptions import GitxError

    try:
        return Confirm.ask(prompt, default=default)
    except KeyboardInterrupt:
        raise GitxError("Operation cancelled by user") from None
    except EOFError:
        raise GitxError(
            "No answer available on stdin",
            details="Re-run with --force to skip confirmation",
        ) from None
