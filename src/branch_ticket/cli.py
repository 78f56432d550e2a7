from __future__ import annotations

import logging
import os
import shutil
import sys
from pathlib import Path
from typing import NoReturn

import click
from rich.console import Console
from rich.markup import escape as rich_escape

from .config import BRACKET_STYLE_KEY, CONFIG_KEYS, CONTEXT_POSITION_KEY, SettingsStore, qualified_key
from .exceptions import BranchTicketError, HookInstallError
from .git import GitError, GitGateway
from .hook import run_hook

console = Console()
err_console = Console(stderr=True)

_EXECUTABLE_NAME = "branch-ticket"
_HOOK_NAME = "commit-msg"
# Strings found in the installed console script, used to recognise our hook
_HOOK_MARKERS = (b"branch_ticket", b"branch-ticket")


class _HookGroup(click.Group):
    """Route an unknown first argument to the hidden ``run`` command.

    git calls the hook as ``commit-msg <message file>``, so anything that is
    not a subcommand name is taken to be the message file.
    """

    def resolve_command(self, ctx: click.Context, args: list[str]):
        if args and args[0] not in self.commands:
            args = ["run", *args]
        return super().resolve_command(ctx, args)


def _fail(message: str, exit_code: int = 1) -> NoReturn:
    err_console.print(f"[bold red]{rich_escape(message)}[/]")
    sys.exit(exit_code)


def _resolve_executable_path() -> str:
    """Find the absolute path to the branch-ticket executable."""
    # 1. On PATH
    found = shutil.which(_EXECUTABLE_NAME)
    if found:
        return os.path.abspath(found)

    # 2. Next to this Python interpreter (venv/bin/)
    candidate = Path(sys.executable).parent / _EXECUTABLE_NAME
    if candidate.exists():
        return str(candidate)

    # 3. Whatever we were started as, e.g. an installed commit-msg hook
    return os.path.abspath(sys.argv[0])


@click.group(cls=_HookGroup, invoke_without_command=True)
@click.option(
    "--verbose", "-v", is_flag=True, envvar="BRANCH_TICKET_VERBOSE",
    help="Enable debug logging (also BRANCH_TICKET_VERBOSE=1).",
)
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """Add the ticket from the current branch name to commit messages.

    Called with a commit message file, as git does for the commit-msg hook,
    the file is rewritten in place. Without arguments, prints the path to
    this executable.
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="[DEBUG] %(message)s")
        logging.getLogger("branch_ticket").setLevel(logging.DEBUG)

    if ctx.invoked_subcommand is None:
        click.echo(_resolve_executable_path())


@main.command("run", hidden=True)
@click.argument("message_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def run_cmd(message_file: Path) -> None:
    """Add the branch ticket to MESSAGE_FILE."""
    try:
        result = run_hook(message_file, GitGateway())
    except OSError as e:
        _fail(f"Cannot rewrite commit message: {e}")

    if result.exit_code:
        _fail(result.reason, result.exit_code)


# --- Hook management ---

def _hooks_directory() -> Path:
    try:
        return GitGateway().hooks_directory()
    except GitError as e:
        err_console.print(f"[yellow]Warning: {rich_escape(str(e))}[/]")
        sys.exit(e.returncode)


def _is_own_hook(hook_path: Path) -> bool:
    try:
        content = hook_path.read_bytes()
    except OSError:
        return False
    return any(marker in content for marker in _HOOK_MARKERS)


def _install_hook(hooks_dir: Path, executable: Path, force: bool = False) -> Path:
    if not executable.is_file():
        raise HookInstallError(f"Cannot find the {_EXECUTABLE_NAME} executable (looked for {executable}).")

    hooks_dir.mkdir(parents=True, exist_ok=True)
    hook_path = hooks_dir / _HOOK_NAME
    if hook_path.exists() and not force and not _is_own_hook(hook_path):
        raise HookInstallError(
            f"{hook_path} exists and was not installed by {_EXECUTABLE_NAME}. Use --force to replace it."
        )
    shutil.copyfile(executable, hook_path)
    hook_path.chmod(0o755)
    return hook_path


@main.command("install")
@click.option("--force", is_flag=True, help="Replace an existing commit-msg hook.")
def install(force: bool) -> None:
    """Copy this executable into the repository hooks as commit-msg."""
    hooks_dir = _hooks_directory()
    try:
        hook_path = _install_hook(hooks_dir, Path(_resolve_executable_path()), force=force)
    except (HookInstallError, OSError) as e:
        _fail(str(e))
    console.print(f"[green]Installed {_HOOK_NAME} hook: {rich_escape(str(hook_path))}[/]")


@main.command("uninstall")
@click.option("--force", is_flag=True, help="Remove the commit-msg hook even if another tool installed it.")
def uninstall(force: bool) -> None:
    """Remove the commit-msg hook from the repository."""
    hook_path = _hooks_directory() / _HOOK_NAME
    if not hook_path.exists():
        console.print(f"[dim]{_HOOK_NAME} hook is not installed.[/]")
        return
    if not force and not _is_own_hook(hook_path):
        _fail(f"{hook_path} was not installed by {_EXECUTABLE_NAME}. Use --force to remove it anyway.")
    hook_path.unlink()
    console.print(f"[green]Removed {_HOOK_NAME} hook.[/]")


# --- Settings ---

_KEY_CHOICE = click.Choice(CONFIG_KEYS, case_sensitive=False)


@main.group("config")
def config_group() -> None:
    """Manage hook settings stored in git config."""
    pass


@config_group.command("show")
def config_show() -> None:
    """Show the configuration the hook would use."""
    effective = SettingsStore().effective()
    values = {
        BRACKET_STYLE_KEY: effective.bracket_style.value,
        CONTEXT_POSITION_KEY: effective.context_position.value,
    }
    for key, value in values.items():
        console.print(f"{rich_escape(qualified_key(key))} = {rich_escape(value)}")


@config_group.command("get")
@click.argument("key", type=_KEY_CHOICE)
def config_get(key: str) -> None:
    """Print the stored value of KEY."""
    try:
        value = SettingsStore().get(key)
    except GitError as e:
        _fail(str(e))
    if value is None:
        console.print(f"[dim]{rich_escape(qualified_key(key))} is not set[/]")
    else:
        console.print(rich_escape(value))


@config_group.command("set")
@click.argument("key", type=_KEY_CHOICE)
@click.argument("value")
@click.option("--global", "global_scope", is_flag=True, help="Store in the user's global git config.")
def config_set(key: str, value: str, global_scope: bool) -> None:
    """Store VALUE for KEY: branch-ticket config set bracketStyle round"""
    try:
        stored = SettingsStore().set(key, value, global_scope=global_scope)
    except BranchTicketError as e:
        _fail(str(e))
    console.print(f"[green]Set {rich_escape(qualified_key(key))} = {rich_escape(stored)}[/]")


@config_group.command("unset")
@click.argument("key", type=_KEY_CHOICE)
@click.option("--global", "global_scope", is_flag=True, help="Remove from the user's global git config.")
def config_unset(key: str, global_scope: bool) -> None:
    """Remove KEY so the default applies again."""
    try:
        removed = SettingsStore().unset(key, global_scope=global_scope)
    except GitError as e:
        _fail(str(e))
    if removed:
        console.print(f"[green]Unset {rich_escape(qualified_key(key))}[/]")
    else:
        console.print(f"[dim]{rich_escape(qualified_key(key))} was not set[/]")
