"""Command-line interface."""

import logging
import sys
from collections.abc import Callable
from functools import wraps
from pathlib import Path
from typing import Any, TypeVar, cast

import click

from .binding import bind_repository, repository_status, unbind_repository
from .config import LOG_FORMAT
from .exceptions import AliasConflictError, GitxError
from .git import GitRepository
from .hooks import HookStatus, install_hook, uninstall_hook
from .identity import AuthMethod
from .manager import IdentityManager
from .ssh import copy_to_clipboard
from .ui import (
    confirm_action,
    print_changes,
    print_dry_run,
    print_error,
    print_identity_table,
    print_info,
    print_public_key,
    print_removal_plan,
    print_status,
    print_success,
    print_version,
    print_warning,
    prompt_alias,
    prompt_auth_method,
    prompt_email,
    prompt_github_user,
    prompt_name,
    prompt_token,
)
from .ui_common import console, err_console

logger = logging.getLogger(__name__)

F = TypeVar('F', bound=Callable[..., Any])


def handle_errors(f: F) -> F:
    """Decorator to handle errors in CLI commands."""
    @wraps(f)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return f(*args, **kwargs)
        except AliasConflictError as e:
            print_error(e._escape_markup(str(e)))
            if e.current_config:
                console.print("\n[bold cyan]Current configuration:[/bold cyan]")
                for key, value in e.current_config.items():
                    console.print(f"• {key}: {e._escape_markup(value)}")
            console.print("\n[bold cyan]Options:[/bold cyan]")
            console.print("1. Use a different alias for the new identity")
            console.print(f"2. Remove the existing one: [yellow]gitx remove {e.alias}[/yellow]")
            raise SystemExit(1)
        except GitxError as e:
            print_error(e._escape_markup(str(e)))
            if e.details:
                err_console.print(f"[dim]{e._escape_markup(e.details)}[/dim]")
            raise SystemExit(1)
    return cast(F, wrapper)


def get_manager() -> IdentityManager:
    """Build the identity manager from the current configuration."""
    return IdentityManager.from_config()


def get_repository() -> GitRepository:
    """Open the repository enclosing the working directory."""
    return GitRepository.discover()


def enable_debug_logging() -> None:
    """Lower the root level to DEBUG and mirror log records on stderr."""
    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)


def _report_warnings(warnings: list[str]) -> None:
    for warning in warnings:
        print_warning(warning)


@click.group()
@click.option('--debug', is_flag=True, help='Enable debug logging')
def cli(debug: bool) -> None:
    """Manage multiple GitHub identities with per-repository binding."""
    if debug:
        enable_debug_logging()
        logger.debug("Debug mode enabled")


@cli.command()
def version() -> None:
    """Show gitx version."""
    print_version()


@cli.command()
@handle_errors
def status() -> None:
    """Show the identity status of the current repository."""
    repo = get_repository()
    print_status(repository_status(repo, get_manager().store))


@cli.command()
@click.option("--alias", help="Identity alias (e.g. work, personal)")
@click.option("--name", help="Git author name")
@click.option("--email", help="Git author email")
@click.option("--github-user", help="GitHub username")
@click.option(
    "--auth",
    "auth_method",
    type=click.Choice([m.value for m in AuthMethod]),
    help="Authentication method",
)
@click.option(
    "--key",
    "key_path",
    type=click.Path(path_type=Path, exists=True, dir_okay=False),
    help="Use an existing private key instead of generating one",
)
@click.option("--no-key", is_flag=True, help="Do not generate an SSH key")
@click.option("--token", envvar="GITX_TOKEN", help="Personal access token (PAT auth)")
@click.option("--non-interactive", is_flag=True, help="Fail instead of prompting")
@click.option("--dry-run", is_flag=True, help="Show what would be done without making changes")
@handle_errors
def add(
    alias: str | None,
    name: str | None,
    email: str | None,
    github_user: str | None,
    auth_method: str | None,
    key_path: Path | None,
    no_key: bool,
    token: str | None,
    non_interactive: bool,
    dry_run: bool,
) -> None:
    """Add a new identity."""
    if non_interactive:
        missing = [
            flag for flag, value in (
                ("--alias", alias), ("--name", name),
                ("--email", email), ("--github-user", github_user),
            ) if not value
        ]
        if missing:
            raise GitxError(f"Missing {', '.join(missing)} in non-interactive mode")

    alias = alias or prompt_alias()
    name = name or prompt_name()
    email = email or prompt_email()
    github_user = github_user or prompt_github_user()
    if auth_method:
        method = AuthMethod.from_str(auth_method)
    elif non_interactive:
        method = AuthMethod.SSH
    else:
        method = prompt_auth_method()

    generate_key = not no_key
    if method is AuthMethod.SSH and key_path is None and not no_key and not non_interactive:
        generate_key = confirm_action("Generate SSH key?", default=True)
    if method is AuthMethod.PAT and not token and not dry_run:
        if non_interactive:
            raise GitxError("--token is required for PAT identities in non-interactive mode")
        token = prompt_token()

    result = get_manager().add_identity(
        alias=alias,
        name=name,
        email=email,
        github_user=github_user,
        auth_method=method,
        generate_key=generate_key,
        key_path=key_path,
        token=token,
        dry_run=dry_run,
    )

    if dry_run:
        print_dry_run("Would add identity:")
        console.print(f"  Alias:  {alias}")
        console.print(f"  Name:   {name}")
        console.print(f"  Email:  {email}")
        console.print(f"  GitHub: {github_user}")
        console.print(f"  Auth:   {method.value}")
        return

    identity = result.identity
    if identity.ssh_key_path:
        verb = "generated" if result.key_generated else "configured"
        print_success(f"SSH key {verb}: {identity.ssh_key_path}")
        print_success("SSH config updated")
    if method is AuthMethod.PAT:
        print_success("PAT stored securely in keychain")
    _report_warnings(result.warnings)
    print_success(f"Identity '{alias}' added successfully")
    if identity.ssh_key_path:
        print_info(f"Add the public key to GitHub: gitx show-key {alias}")


@cli.command(name="list")
@handle_errors
def list_identities() -> None:
    """List all stored identities."""
    print_identity_table(get_manager().store.list())


@cli.command()
@click.argument("alias")
@click.option("--dry-run", is_flag=True, help="Show what would be deleted without making changes")
@click.option("--force", is_flag=True, help="Skip confirmation prompt")
@click.option("--delete-keys", is_flag=True, help="Delete SSH key files")
@handle_errors
def remove(alias: str, dry_run: bool, force: bool, delete_keys: bool) -> None:
    """Remove an identity and its SSH config, keychain and key entries."""
    manager = get_manager()
    identity = manager.store.find_by_alias(alias)

    if not delete_keys and identity.ssh_key_path and not force and not dry_run:
        delete_keys = confirm_action("Delete SSH key files?", default=False)

    plan = manager.remove_identity(alias, delete_keys=delete_keys, dry_run=True)
    print_removal_plan(alias, plan.planned, identity.email)

    if dry_run:
        print_dry_run("No changes were made")
        return
    if not force and not confirm_action(
        "Are you sure you want to remove this identity?", default=False
    ):
        print_info("Cancelled.")
        return

    result = manager.remove_identity(alias, delete_keys=delete_keys)
    for item in result.removed:
        print_success(f"Removed {item}")
    _report_warnings(result.warnings)
    print_success(f"Identity '{alias}' removed successfully")


@cli.command()
@click.argument("alias")
@click.option("--dry-run", is_flag=True, help="Show what would be changed without making changes")
@handle_errors
def bind(alias: str, dry_run: bool) -> None:
    """Bind the current repository to an identity."""
    repo = get_repository()
    manager = get_manager()
    result = bind_repository(repo, manager.store, manager.reconciler, alias, dry_run=dry_run)

    if dry_run:
        print_changes(result.changes, "[DRY RUN] Would make the following changes")
        if result.ssh_result is not None and result.ssh_result.changed:
            print_dry_run(f"SSH config {result.ssh_result.config_path} would be updated")
        return

    if result.ssh_result is not None and result.ssh_result.backup_path:
        print_info(f"SSH config backed up to: {result.ssh_result.backup_path}")
    _report_warnings(result.warnings)
    print_success(f"Repository bound to identity '{alias}'")


@cli.command()
@click.option("--dry-run", is_flag=True, help="Show what would be changed without making changes")
@handle_errors
def unbind(dry_run: bool) -> None:
    """Revert the repository-local changes made by bind."""
    result = unbind_repository(get_repository(), dry_run=dry_run)
    if dry_run:
        print_changes(result.changes, "[DRY RUN] Would make the following changes")
        return
    _report_warnings(result.warnings)
    print_success("Repository unbound successfully")


@cli.command(name="show-key")
@click.argument("alias")
@handle_errors
def show_key(alias: str) -> None:
    """Show the SSH public key of an identity."""
    print_public_key(alias, get_manager().public_key(alias))


@cli.command(name="copy-key")
@click.argument("alias")
@handle_errors
def copy_key(alias: str) -> None:
    """Copy the SSH public key of an identity to the clipboard."""
    copy_to_clipboard(get_manager().public_key(alias) + "\n")
    print_success(f"SSH public key for '{alias}' copied to clipboard")
    print_info("Paste it at: https://github.com/settings/ssh/new")


@cli.command(name="install-hook")
@handle_errors
def install_hook_command() -> None:
    """Install a pre-push hook that blocks pushes from unbound repositories."""
    status = install_hook(get_repository().git_dir)
    if status is HookStatus.INSTALLED:
        print_success("Pre-push hook installed")
    elif status is HookStatus.ALREADY_INSTALLED:
        print_info("gitx pre-push hook already installed")
    else:
        print_warning("pre-push hook already exists. gitx hook not installed.")
        print_info("You can manually merge the gitx check into your existing hook.")


@cli.command(name="uninstall-hook")
@handle_errors
def uninstall_hook_command() -> None:
    """Remove the gitx pre-push hook."""
    status = uninstall_hook(get_repository().git_dir)
    if status is HookStatus.REMOVED:
        print_success("Pre-push hook uninstalled")
    elif status is HookStatus.NOT_FOUND:
        print_info("No gitx pre-push hook found")
    else:
        print_info("Pre-push hook exists but is not a gitx hook")
