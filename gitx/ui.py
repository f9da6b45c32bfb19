"""UI module for gitx."""

from collections.abc import Iterable

from rich import box
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table
from rich.text import Text

from .binding import BindingSource, PlannedChange, RepositoryStatus
from .exceptions import GitxError
from .identity import AuthMethod, Identity
from .ui_common import (
    console,
    print_dry_run,
    print_error,
    print_info,
    print_success,
    print_warning,
    confirm_action,
)
from .version import __version__

BANNER = "gitx"
TAGLINE = "Git Identity Switcher - Never push to the wrong account again"

AUTH_ICONS = {
    AuthMethod.SSH: "🔑",
    AuthMethod.PAT: "🎫",
}

NOT_SET = "(not set)"


def print_banner() -> None:
    """Print the banner with version."""
    console.print(f"\n[bold cyan]{BANNER}[/bold cyan] [dim]v{__version__}[/dim]")
    console.print(f"[italic cyan]{TAGLINE}[/italic cyan]\n")


def print_version() -> None:
    """Print version information."""
    print_banner()
    console.print(Panel(f"Version: {__version__}", border_style="cyan", expand=False))


def print_identity_table(identities: Iterable[Identity]) -> None:
    """Print configured identities as a table (no secrets)."""
    identities = list(identities)
    if not identities:
        console.print(
            Panel(
                "⚠️  No identities configured.\n\n"
                "Use [command]gitx add[/command] to add your first identity.",
                border_style="yellow",
                expand=False,
            )
        )
        return

    table = Table(
        title="🔐 Configured Identities",
        box=box.ROUNDED,
        show_header=True,
        border_style="blue",
    )
    table.add_column("Alias", style="cyan")
    table.add_column("Name", style="white")
    table.add_column("Email", style="green")
    table.add_column("GitHub", style="magenta")
    table.add_column("Auth", style="yellow")
    table.add_column("SSH Key", style="blue")

    for identity in identities:
        table.add_row(
            identity.alias,
            identity.name,
            identity.email,
            identity.github_user,
            f"{AUTH_ICONS[identity.auth_method]} {identity.auth_method.value.upper()}",
            escape(identity.ssh_key_path or "-"),
        )

    console.print(table)


def print_status(status: RepositoryStatus) -> None:
    """Print the identity status of a repository."""
    binding = status.binding
    if binding.is_bound:
        icon = "✅"
        state = f"Bound to: [bold]{escape(binding.alias)}[/bold]"
        border = "green"
    else:
        icon = "⚠️ "
        state = "Not bound to any identity"
        border = "yellow"

    lines = [
        f"📝 Name:    [info]{escape(status.name or NOT_SET)}[/info]",
        f"📧 Email:   [info]{escape(status.email or NOT_SET)}[/info]",
        f"🔗 Remote:  [muted]{escape(status.remote_url or NOT_SET)}[/muted]",
        f"{icon} {state}",
    ]
    if binding.is_bound and binding.source is BindingSource.REMOTE:
        lines.append("[muted]   (detected from the remote URL host alias)[/muted]")
    if binding.orphaned:
        lines.append(
            f"[warning]   Identity '{escape(binding.alias)}' is no longer configured[/warning]"
        )

    console.print(
        Panel(
            "\n".join(lines),
            title=f"{icon} Repository Identity Status",
            border_style=border,
            expand=False,
        )
    )


def print_changes(changes: Iterable[PlannedChange], header: str) -> None:
    """Print the settings an operation changes."""
    table = Table(title=header, box=box.SIMPLE, show_header=True)
    table.add_column("Setting", style="cyan")
    table.add_column("Current", style="dim")
    table.add_column("New", style="green")
    for change in changes:
        if change.is_noop:
            continue
        table.add_row(
            change.setting,
            escape(change.current or NOT_SET),
            escape(change.target or "(unset)"),
        )
    console.print(table)


def print_public_key(alias: str, public_key: str) -> None:
    """Print an SSH public key with instructions."""
    console.print(
        Panel(
            Text(public_key),
            title=f"SSH Public Key for '{escape(alias)}'",
            border_style="cyan",
        )
    )
    console.print("Add this key to your GitHub account:")
    console.print("  [path]https://github.com/settings/ssh/new[/path]\n")
    console.print(f"Or copy it with: [command]gitx copy-key {escape(alias)}[/command]")


def print_removal_plan(alias: str, planned: Iterable[str], email: str) -> None:
    """Print what removing an identity will touch."""
    body = "\n".join(f"  • {escape(item)}" for item in planned)
    console.print(
        Panel(
            f"This will remove:\n{body}",
            title=f"Removing identity: {escape(alias)}",
            border_style="red",
            expand=False,
        )
    )
    print_warning(
        f"If any repositories are bound to this identity (email: {escape(email)}), "
        "you may need to rebind them to another identity."
    )


def _prompt_required(label: str, hint: str | None = None, default: str | None = None) -> str:
    if hint:
        console.print(f"[dim]{hint}[/dim]")
    while True:
        value = Prompt.ask(f"[cyan]{label}[/cyan]", default=default)
        if value and value.strip():
            return value.strip()
        print_error(f"{label} cannot be empty")


def prompt_alias() -> str:
    """Prompt for an identity alias."""
    return _prompt_required("Identity alias", hint="e.g. work, personal, client-acme")


def prompt_name() -> str:
    """Prompt for the author name."""
    return _prompt_required("Name")


def prompt_email() -> str:
    """Prompt for the author email."""
    return _prompt_required("Email")


def prompt_github_user() -> str:
    """Prompt for the GitHub username."""
    return _prompt_required("GitHub username")


def prompt_auth_method() -> AuthMethod:
    """Prompt for the auth method."""
    value = Prompt.ask(
        "[cyan]Auth method[/cyan]",
        choices=[m.value for m in AuthMethod],
        default=AuthMethod.SSH.value,
    )
    return AuthMethod.from_str(value)


def prompt_token() -> str:
    """Prompt for a personal access token without echoing it."""
    token = Prompt.ask("[cyan]Personal Access Token[/cyan]", password=True)
    if not token:
        raise GitxError("PAT cannot be empty")
    return token.strip()
