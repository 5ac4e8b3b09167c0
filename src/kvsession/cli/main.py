"""CLI entry point for kvsession.

Invoked as::

    kvsession [OPTIONS] COMMAND [ARGS]...

or, during development::

    python -m kvsession.cli.main

Commands
--------
- version  — Show version information
- create   — Create and persist a new session
- show     — Display the fields of a stored session
- set      — Set one field of a stored session
- exists   — Report whether a session record exists
- ttl      — Show a session record's remaining time-to-live
- destroy  — Delete a session record
"""
from __future__ import annotations

import asyncio
import json
import sys
from typing import Any, Awaitable, Callable, TypeVar

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from kvsession.model import SessionModel
from kvsession.session.key import InvalidSessionKeyError, SessionKey
from kvsession.session.serializer import StateSerializer
from kvsession.session.session import SessionError
from kvsession.store.base import SessionStore, StoreError
from kvsession.store.configuration import StoreConfiguration
from kvsession.store.redis import RedisSessionStore

console = Console()

R = TypeVar("R")

_DEFAULT_URL = "redis://localhost:6379/0"
_DEFAULT_TTL_SECONDS = 86_400

# ---------------------------------------------------------------------------
# Store factory
# ---------------------------------------------------------------------------


async def _open_store(url: str, prefix: str) -> SessionStore:
    """Connect to the Redis store at ``url`` with keys namespaced by ``prefix``."""
    return await RedisSessionStore.connect(url, StoreConfiguration.with_prefix(prefix))


def _run(ctx: click.Context, action: Callable[[SessionStore], Awaitable[R]]) -> R:
    """Open the store, run ``action`` against it, and close it.

    Store and session failures are reported in red and exit with status 1.
    """

    async def _main() -> R:
        store = await _open_store(ctx.obj["url"], ctx.obj["prefix"])
        async with store:
            return await action(store)

    try:
        return asyncio.run(_main())
    except (StoreError, SessionError) as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        sys.exit(1)


def _parse_key(raw: str) -> SessionKey:
    try:
        return SessionKey.parse(raw)
    except InvalidSessionKeyError as exc:
        raise click.BadParameter(str(exc), param_hint="KEY") from exc


def _parse_value(raw: str) -> Any:
    """Interpret ``raw`` as JSON, falling back to the literal string."""
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


async def _load_or_fail(store: SessionStore, key: SessionKey) -> SessionModel:
    model = await SessionModel.load(store, key)
    if model is None:
        console.print(f"[red]Session {key!r} not found.[/red]")
        sys.exit(1)
    return model


# ---------------------------------------------------------------------------
# Root group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="kvsession")
@click.option(
    "--url",
    envvar="KVSESSION_REDIS_URL",
    default=_DEFAULT_URL,
    show_default=True,
    help="Redis connection URL.",
)
@click.option(
    "--prefix",
    envvar="KVSESSION_KEY_PREFIX",
    default="",
    help="Namespace prepended to every record key.",
)
@click.pass_context
def cli(ctx: click.Context, url: str, prefix: str) -> None:
    """Inspect and manage key-addressed sessions"""
    ctx.ensure_object(dict)
    ctx.obj["url"] = url
    ctx.obj["prefix"] = prefix


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    from kvsession import __version__

    console.print(f"[bold]kvsession[/bold] v{__version__}")


# ---------------------------------------------------------------------------
# create
# ---------------------------------------------------------------------------


@cli.command(name="create")
@click.option(
    "--ttl",
    "ttl_seconds",
    default=_DEFAULT_TTL_SECONDS,
    show_default=True,
    type=click.IntRange(min=1),
    help="Time-to-live in seconds.",
)
@click.option(
    "--field",
    "fields",
    multiple=True,
    metavar="NAME=VALUE",
    help="Initial field; VALUE is parsed as JSON when possible.",
)
@click.pass_context
def create_command(ctx: click.Context, ttl_seconds: int, fields: tuple[str, ...]) -> None:
    """Create and persist a new session, printing its key."""
    parsed: list[tuple[str, Any]] = []
    for item in fields:
        name, sep, raw = item.partition("=")
        if not sep or not name:
            raise click.BadParameter(f"expected NAME=VALUE, got {item!r}", param_hint="--field")
        parsed.append((name, _parse_value(raw)))

    async def action(store: SessionStore) -> SessionKey:
        model = SessionModel(store, ttl_seconds)
        for name, value in parsed:
            model.insert(name, value)
        await model.save()
        return model.id

    key = _run(ctx, action)
    console.print("[green]Created session[/green]")
    click.echo(str(key))


# ---------------------------------------------------------------------------
# show
# ---------------------------------------------------------------------------


@cli.command(name="show")
@click.argument("key")
@click.option(
    "--format",
    "output_format",
    default="table",
    show_default=True,
    type=click.Choice(["table", "json", "yaml"], case_sensitive=False),
    help="Output format.",
)
@click.pass_context
def show_command(ctx: click.Context, key: str, output_format: str) -> None:
    """Display the fields of the session stored under KEY."""
    session_key = _parse_key(key)
    model = _run(ctx, lambda store: _load_or_fail(store, session_key))
    state = model.session.state
    serializer = StateSerializer()

    if output_format == "json":
        click.echo(json.dumps(state.model_dump(), indent=2, sort_keys=True))
        return
    if output_format == "yaml":
        click.echo(serializer.to_yaml(state), nl=False)
        return

    table = Table(title=f"Session {session_key.value[:8]}...", show_lines=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    for name in state.fields():
        table.add_row(escape(name), escape(state.get(name) or ""))
    console.print(table)
    console.print(f"TTL: {model.ttl if model.ttl is not None else 'no expiry'}")


# ---------------------------------------------------------------------------
# set
# ---------------------------------------------------------------------------


@cli.command(name="set")
@click.argument("key")
@click.argument("field")
@click.argument("value")
@click.pass_context
def set_command(ctx: click.Context, key: str, field: str, value: str) -> None:
    """Set FIELD of the session stored under KEY to VALUE (JSON when possible)."""
    session_key = _parse_key(key)

    async def action(store: SessionStore) -> None:
        model = await _load_or_fail(store, session_key)
        # Previous value is discarded; any stored type may be replaced.
        model.insert(field, _parse_value(value), type_=Any)
        await model.save()

    _run(ctx, action)
    console.print(f"[green]Updated[/green] {escape(repr(field))}")


# ---------------------------------------------------------------------------
# exists / ttl / destroy
# ---------------------------------------------------------------------------


@cli.command(name="exists")
@click.argument("key")
@click.pass_context
def exists_command(ctx: click.Context, key: str) -> None:
    """Report whether a record exists for KEY (exit status 1 when absent)."""
    session_key = _parse_key(key)
    found = _run(ctx, lambda store: store.exists(session_key))
    console.print("true" if found else "false")
    if not found:
        sys.exit(1)


@cli.command(name="ttl")
@click.argument("key")
@click.pass_context
def ttl_command(ctx: click.Context, key: str) -> None:
    """Show the remaining time-to-live of the record for KEY."""
    session_key = _parse_key(key)
    remaining = _run(ctx, lambda store: store.ttl(session_key))
    if remaining is None:
        console.print("no expiry")
    else:
        console.print(f"{int(remaining.total_seconds())}s")


@cli.command(name="destroy")
@click.argument("key")
@click.pass_context
def destroy_command(ctx: click.Context, key: str) -> None:
    """Delete the record for KEY.  Succeeds when it is already absent."""
    session_key = _parse_key(key)
    _run(ctx, lambda store: store.destroy(session_key))
    console.print("[green]Destroyed[/green]")


if __name__ == "__main__":
    cli()
