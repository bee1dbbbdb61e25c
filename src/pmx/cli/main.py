from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional

import click

from pmx import __version__, constants
from pmx.cli.formatters import render_tree
from pmx.errors import PmxError
from pmx.models.enums import Agent
from pmx.models.storage import StorageRoot
from pmx.services import completion_service, extension_service, storage_service
from pmx.services.clipboard_service import copy_text
from pmx.services.editor_service import ProfileEditor
from pmx.services.integration_service import IntegrationService
from pmx.services.profile_service import ProfileRepository
from pmx.utils.logging import setup_logging

LOG = logging.getLogger(__name__)


@contextmanager
def _cli_errors() -> Iterator[None]:
    """Report pmx errors as ``Error: ...`` with exit status 1."""
    try:
        yield
    except PmxError as exc:
        LOG.debug("Command failed", exc_info=True)
        raise click.ClickException(str(exc)) from exc


def _storage(ctx: click.Context) -> StorageRoot:
    obj = ctx.find_object(dict)
    if obj.get("storage") is None:
        with _cli_errors():
            obj["storage"] = storage_service.open_storage(obj.get("config"))
    return obj["storage"]


class PmxGroup(click.Group):
    """Command group that hands unknown subcommands to ``pmx-<name>`` extensions."""

    def get_command(self, ctx: click.Context, cmd_name: str) -> Optional[click.Command]:
        command = super().get_command(ctx, cmd_name)
        if command is not None:
            return command
        return _extension_command(cmd_name)


def _extension_command(name: str) -> click.Command:
    @click.command(
        name=name,
        context_settings={"ignore_unknown_options": True, "allow_extra_args": True},
        add_help_option=False,
    )
    @click.argument("args", nargs=-1, type=click.UNPROCESSED)
    @click.pass_context
    def run_extension(ctx: click.Context, args: tuple) -> None:
        storage = _storage(ctx)
        with _cli_errors():
            code = extension_service.execute_extension(storage, [name, *args])
        if code != 0:
            ctx.exit(code if code > 0 else 1)

    return run_extension


@click.group(cls=PmxGroup, help="A prompt management suite for AI coding agents.")
@click.version_option(version=__version__, prog_name="pmx")
@click.option(
    "--config",
    type=click.Path(path_type=Path),
    default=None,
    help=f"Path to the storage directory (overrides ${constants.CONFIG_ENV_VAR}).",
)
@click.option("--verbose", "-v", is_flag=True, help="Verbose output.")
@click.pass_context
def cli(ctx: click.Context, config: Optional[Path], verbose: bool) -> None:
    """Root command for pmx."""
    setup_logging(logging.DEBUG if verbose else logging.WARNING)
    ctx.ensure_object(dict)
    ctx.obj["config"] = config


def _set_command(agent: Agent, display: str) -> click.Command:
    @click.command(f"set-{agent.value}-profile", help=f"Set the {display} profile from a stored profile.")
    @click.argument("name")
    @click.pass_context
    def command(ctx: click.Context, name: str) -> None:
        storage = _storage(ctx)
        with _cli_errors():
            target = IntegrationService(storage).set_profile(agent, name)
        click.echo(f"Successfully applied profile '{name}' to {target}")

    return command


def _append_command(agent: Agent, display: str) -> click.Command:
    @click.command(
        f"append-{agent.value}-profile",
        help=f"Append a stored profile (or a file path) to the {display} profile.",
    )
    @click.argument("name_or_path")
    @click.pass_context
    def command(ctx: click.Context, name_or_path: str) -> None:
        storage = _storage(ctx)
        with _cli_errors():
            target = IntegrationService(storage).append_profile(agent, name_or_path)
        click.echo(f"Successfully appended '{name_or_path}' to {target}")

    return command


def _reset_command(agent: Agent, display: str) -> click.Command:
    @click.command(f"reset-{agent.value}-profile", help=f"Reset the current {display} profile.")
    @click.pass_context
    def command(ctx: click.Context) -> None:
        storage = _storage(ctx)
        service = IntegrationService(storage)
        with _cli_errors():
            removed = service.reset_profile(agent)
            target = service.target(agent).path
        if removed:
            click.echo(f"Successfully reset {display} profile (removed {target})")
        else:
            click.echo(f"No {display} profile found at {target} (already reset)")

    return command


for _agent, _display in ((Agent.CLAUDE, "Claude"), (Agent.CODEX, "Codex")):
    cli.add_command(_set_command(_agent, _display))
    cli.add_command(_append_command(_agent, _display))
    cli.add_command(_reset_command(_agent, _display))


@cli.group()
def profile() -> None:
    """Profile management commands."""


@profile.command("list")
@click.option(
    "--tree/--flat",
    "tree",
    default=None,
    help="Force tree or flat output (defaults to tree on a terminal).",
)
@click.pass_context
def list_profiles(ctx: click.Context, tree: Optional[bool]) -> None:
    """List all stored profiles."""
    storage = _storage(ctx)
    interactive = sys.stdout.isatty() if tree is None else tree
    with _cli_errors():
        click.echo(render_tree(ProfileRepository(storage).list(), interactive))


@profile.command("show")
@click.argument("name")
@click.pass_context
def show_profile(ctx: click.Context, name: str) -> None:
    """Print a profile's content."""
    storage = _storage(ctx)
    with _cli_errors():
        click.echo(ProfileRepository(storage).read(name))


@profile.command("create")
@click.argument("name")
@click.pass_context
def create_profile(ctx: click.Context, name: str) -> None:
    """Create a profile in $EDITOR."""
    storage = _storage(ctx)
    with _cli_errors():
        ProfileEditor(ProfileRepository(storage)).create(name)
    click.echo(f"Profile '{name}' created successfully")


@profile.command("edit")
@click.argument("name")
@click.pass_context
def edit_profile(ctx: click.Context, name: str) -> None:
    """Edit an existing profile in $EDITOR."""
    storage = _storage(ctx)
    with _cli_errors():
        changed = ProfileEditor(ProfileRepository(storage)).edit(name)
    if changed:
        click.echo(f"Profile '{name}' edited successfully")
    else:
        click.echo(f"Profile '{name}' unchanged")


@profile.command("delete")
@click.argument("name")
@click.option("--yes", "-y", is_flag=True, help="Delete without asking for confirmation.")
@click.pass_context
def delete_profile(ctx: click.Context, name: str, yes: bool) -> None:
    """Delete a profile after showing its content."""
    storage = _storage(ctx)
    repository = ProfileRepository(storage)
    with _cli_errors():
        content = repository.read(name)
        if not yes:
            click.echo(f"Profile '{name}' contents:")
            click.echo(content)
            click.echo()
            if not click.confirm(f"Delete profile '{name}'?", default=False):
                click.echo("Deletion cancelled")
                return
        repository.delete(name)
    click.echo(f"Profile '{name}' deleted successfully")


@profile.command("copy")
@click.argument("name")
@click.pass_context
def copy_profile(ctx: click.Context, name: str) -> None:
    """Copy a profile's content to the clipboard."""
    storage = _storage(ctx)
    with _cli_errors():
        copy_text(ProfileRepository(storage).read(name))
    click.echo(f"Profile content copied to clipboard: {name}")


@cli.command("internal-completion", hidden=True)
@click.argument("kind", type=click.Choice(completion_service.COMPLETION_KINDS))
@click.pass_context
def internal_completion(ctx: click.Context, kind: str) -> None:
    """Print completion candidates, one per line."""
    storage = _storage(ctx)
    with _cli_errors():
        words: List[str] = completion_service.completion_words(storage, kind)
    for word in words:
        click.echo(word)


@cli.command()
@click.option("--host", default=constants.SERVER_HOST, show_default=True)
@click.option("--port", default=constants.SERVER_PORT, show_default=True, type=int)
@click.pass_context
def serve(ctx: click.Context, host: str, port: int) -> None:
    """Serve profiles and prompts over HTTP."""
    import uvicorn

    from pmx.api import main as api_main

    storage = _storage(ctx)
    setup_logging(logging.INFO)
    api_main.configure(storage.path)
    uvicorn.run(api_main.app, host=host, port=port)


if __name__ == "__main__":
    cli()
