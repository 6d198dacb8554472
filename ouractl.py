#!/usr/bin/env python3
"""
Oura Connector CLI Tool

Commands for exploring the Oura API from a terminal.

Usage:
    ouractl fetch daily_activity --start 2024-06-01 --end 2024-06-03 --sandbox
    ouractl get workout <document-id>
    ouractl auth url --scope personal --scope daily
    ouractl auth exchange <code>
    ouractl webhook list
    ouractl webhook create --callback-url https://example.com/hook --token secret \\
        --event-type create --data-type sleep

Credentials are read from OURA_* environment variables or a .env file.
"""

import asyncio
import json
import logging
from collections.abc import Awaitable
from typing import Any, List, Optional, TypeVar

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from oura_connector import (
    DataType,
    EventType,
    OuraError,
    OuraSettings,
    Resource,
    Subscription,
    __version__,
)

T = TypeVar("T")

console = Console()

app = typer.Typer(
    name="ouractl",
    help="Oura Connector CLI - Oura Ring API v2 client",
    no_args_is_help=True,
)


def version_callback(value: bool):
    """Show version and exit."""
    if value:
        console.print(f"[bold cyan]Oura Connector CLI[/bold cyan] version [green]{__version__}[/green]")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log HTTP requests"),
):
    """Oura Connector CLI - Oura Ring API v2 client."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_path=False)],
        )


# ============================================================================
# Helper Functions
# ============================================================================

def _run(coro: Awaitable[T]) -> T:
    """Run a library call, turning client errors into a red message and exit 1."""
    try:
        return asyncio.run(coro)
    except OuraError as e:
        console.print(f"[red]❌ {e.__class__.__name__}: {e.message}[/red]")
        detail = getattr(e, "detail", None)
        if detail:
            console.print(f"   [dim]{detail}[/dim]")
        raise typer.Exit(1)


def _print_json(data: Any) -> None:
    console.print_json(json.dumps(data, default=str))


def _print_documents(documents: list[dict[str, Any]], title: str) -> None:
    """Show a document list as a table of its scalar fields."""
    if not documents:
        console.print(f"[yellow]No {title} documents in range[/yellow]")
        return

    columns = [
        key for key, value in documents[0].items()
        if not isinstance(value, (dict, list))
    ]
    table = Table(title=f"{title} ({len(documents)})")
    for column in columns:
        table.add_column(column)
    for document in documents:
        table.add_row(*(str(document.get(column, "")) for column in columns))
    console.print(table)


def _print_subscriptions(subscriptions: list[Subscription]) -> None:
    table = Table(title=f"Subscriptions ({len(subscriptions)})")
    for column in ("id", "event_type", "data_type", "callback_url", "expiration_time"):
        table.add_column(column)
    for sub in subscriptions:
        table.add_row(sub.id, sub.event_type, sub.data_type, sub.callback_url, str(sub.expiration_time or ""))
    console.print(table)


async def _fetch(
    settings: OuraSettings,
    resource: Resource,
    start: Optional[str],
    end: Optional[str],
    sandbox: bool,
) -> Any:
    async with settings.build_client(use_sandbox=sandbox or None) as client:
        if resource is Resource.PERSONAL_INFO:
            return await client.get_personal_info()
        if resource is Resource.HEARTRATE:
            return await client.get_heartrate(start, end)
        return await client.get_documents(resource, start, end)


async def _get(settings: OuraSettings, resource: Resource, document_id: str, sandbox: bool) -> Any:
    async with settings.build_client(use_sandbox=sandbox or None) as client:
        return await client.get_document(resource, document_id)


# ============================================================================
# DATA Commands
# ============================================================================

@app.command()
def fetch(
    resource: Resource = typer.Argument(..., help="Resource to fetch (e.g. daily_activity)"),
    start: Optional[str] = typer.Option(None, "--start", "-s", help="Start date or datetime (ISO 8601)"),
    end: Optional[str] = typer.Option(None, "--end", "-e", help="End date or datetime (ISO 8601)"),
    sandbox: bool = typer.Option(False, "--sandbox", help="Use the Oura sandbox"),
    as_json: bool = typer.Option(False, "--json", help="Print raw JSON"),
):
    """
    Fetch all documents of a resource in a date range.

    Example:
        ouractl fetch daily_sleep --start 2024-06-01 --end 2024-06-07
        ouractl fetch heartrate --start 2024-06-01T00:00:00Z --end 2024-06-01T12:00:00Z
        ouractl fetch personal_info
    """
    if resource is not Resource.PERSONAL_INFO and not (start and end):
        console.print("[red]❌ --start and --end are required for this resource[/red]")
        raise typer.Exit(1)

    settings = OuraSettings.from_env()
    data = _run(_fetch(settings, resource, start, end, sandbox))

    if as_json or not isinstance(data, list):
        _print_json(data)
    else:
        _print_documents(data, resource.value)


@app.command()
def get(
    resource: Resource = typer.Argument(..., help="Resource of the document"),
    document_id: str = typer.Argument(..., help="Document id"),
    sandbox: bool = typer.Option(False, "--sandbox", help="Use the Oura sandbox"),
):
    """
    Fetch one document by id.

    Example:
        ouractl get workout 8f9a5221-639e-4a85-81cb-4065ef23f979
    """
    if resource in (Resource.HEARTRATE, Resource.PERSONAL_INFO):
        console.print(f"[red]❌ {resource.value} has no documents by id; use fetch[/red]")
        raise typer.Exit(1)

    settings = OuraSettings.from_env()
    _print_json(_run(_get(settings, resource, document_id, sandbox)))


# ============================================================================
# AUTH Commands
# ============================================================================

auth_app = typer.Typer(help="OAuth2 authorization flow")
app.add_typer(auth_app, name="auth")


@auth_app.command("url")
def auth_url(
    scope: List[str] = typer.Option(["personal", "daily"], "--scope", help="OAuth scope (repeatable)"),
    state: str = typer.Option("", "--state", help="Opaque state value echoed back on redirect"),
):
    """Print the authorization URL to send the user to."""
    settings = OuraSettings.from_env()
    url = _run(_auth_url(settings, scope, state or None))
    console.print(url, soft_wrap=True)


async def _auth_url(settings: OuraSettings, scopes: List[str], state: Optional[str]) -> str:
    async with settings.build_oauth_client() as client:
        return client.generate_auth_url(scopes, state)


async def _oauth_call(settings: OuraSettings, method: str, argument: str) -> Any:
    async with settings.build_oauth_client() as client:
        return await getattr(client, method)(argument)


@auth_app.command("exchange")
def auth_exchange(code: str = typer.Argument(..., help="Authorization code from the redirect")):
    """Exchange an authorization code for tokens."""
    settings = OuraSettings.from_env()
    tokens = _run(_oauth_call(settings, "exchange_code_for_token", code))
    _print_json(tokens.model_dump(mode="json"))


@auth_app.command("refresh")
def auth_refresh(refresh_token: str = typer.Argument(..., help="Refresh token")):
    """Get a new access token from a refresh token."""
    settings = OuraSettings.from_env()
    tokens = _run(_oauth_call(settings, "refresh_access_token", refresh_token))
    _print_json(tokens.model_dump(mode="json"))


@auth_app.command("revoke")
def auth_revoke(
    token: str = typer.Argument(..., help="Access token to revoke"),
    confirm: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
):
    """Revoke an access token."""
    if not confirm:
        confirm = typer.confirm("Are you sure you want to revoke this token?")
        if not confirm:
            console.print("Cancelled.")
            raise typer.Exit(0)

    settings = OuraSettings.from_env()
    _run(_oauth_call(settings, "revoke_access_token", token))
    console.print("[green]✅ Token revoked[/green]")


# ============================================================================
# WEBHOOK Commands
# ============================================================================

webhook_app = typer.Typer(help="Webhook subscription management")
app.add_typer(webhook_app, name="webhook")


async def _webhook_call(settings: OuraSettings, method: str, *args: Any) -> Any:
    async with settings.build_webhook_client() as client:
        return await getattr(client, method)(*args)


@webhook_app.command("list")
def webhook_list():
    """List subscriptions."""
    settings = OuraSettings.from_env()
    _print_subscriptions(_run(_webhook_call(settings, "list_subscriptions")))


@webhook_app.command("get")
def webhook_get(subscription_id: str = typer.Argument(..., help="Subscription id")):
    """Show one subscription."""
    settings = OuraSettings.from_env()
    sub = _run(_webhook_call(settings, "get_subscription", subscription_id))
    _print_json(sub.model_dump())


@webhook_app.command("create")
def webhook_create(
    callback_url: str = typer.Option(..., "--callback-url", help="URL Oura will call"),
    token: str = typer.Option(..., "--token", help="Verification token"),
    event_type: EventType = typer.Option(..., "--event-type", help="Event type"),
    data_type: DataType = typer.Option(..., "--data-type", help="Data type"),
):
    """Create a subscription."""
    settings = OuraSettings.from_env()
    sub = _run(_webhook_call(settings, "create_subscription", callback_url, token, event_type, data_type))
    console.print(f"[green]✅ Created subscription {sub.id}[/green]")


@webhook_app.command("update")
def webhook_update(
    subscription_id: str = typer.Argument(..., help="Subscription id"),
    token: str = typer.Option(..., "--token", help="Verification token"),
    callback_url: Optional[str] = typer.Option(None, "--callback-url", help="New callback URL"),
    event_type: Optional[EventType] = typer.Option(None, "--event-type", help="New event type"),
    data_type: Optional[DataType] = typer.Option(None, "--data-type", help="New data type"),
):
    """Update a subscription; only the options given are changed."""
    settings = OuraSettings.from_env()
    sub = _run(_webhook_call(
        settings, "update_subscription", subscription_id, token, callback_url, event_type, data_type
    ))
    _print_json(sub.model_dump())


@webhook_app.command("delete")
def webhook_delete(
    subscription_id: str = typer.Argument(..., help="Subscription id"),
    confirm: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
):
    """Delete a subscription."""
    if not confirm:
        confirm = typer.confirm(f"Are you sure you want to delete subscription {subscription_id}?")
        if not confirm:
            console.print("Cancelled.")
            raise typer.Exit(0)

    settings = OuraSettings.from_env()
    _run(_webhook_call(settings, "delete_subscription", subscription_id))
    console.print(f"[green]✅ Deleted subscription {subscription_id}[/green]")


@webhook_app.command("renew")
def webhook_renew(subscription_id: str = typer.Argument(..., help="Subscription id")):
    """Renew a subscription before it expires."""
    settings = OuraSettings.from_env()
    sub = _run(_webhook_call(settings, "renew_subscription", subscription_id))
    console.print(f"[green]✅ Renewed {sub.id}, expires {sub.expiration_time}[/green]")


# ============================================================================
# VERSION Command
# ============================================================================

@app.command()
def version():
    """Show version information."""
    console.print("[bold]Oura Connector CLI[/bold]")
    console.print(f"Version: [cyan]{__version__}[/cyan]")


# ============================================================================
# Main Entry Point
# ============================================================================

if __name__ == "__main__":
    app()
