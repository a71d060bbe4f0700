"""
Flask CLI commands that drive the location picker against a running store.

Usage:
    flask list-addresses
    flask save-address "221B Baker Street" --category Home
    flask delete-address 3
    flask search-address "Baker Street, London" --category Home --save
    flask locate-address --category Home --save -- 51.5237 -0.1585

The store is reached over HTTP at STORE_API_BASE_URL (override with --api).
"""

from __future__ import annotations

import click
from flask import current_app
from flask.cli import with_appcontext

from .services.picker import LocationPicker
from .services.store_client import StoreClient

api_option = click.option(
    "--api", "api_base", default=None,
    help="Store API base URL (defaults to STORE_API_BASE_URL).",
)


def _make_picker(api_base: str | None) -> LocationPicker:
    client = StoreClient(
        api_base or current_app.config["STORE_API_BASE_URL"],
        timeout=current_app.config.get("STORE_CLIENT_TIMEOUT"),
    )
    picker = LocationPicker(
        client,
        notify=click.echo,
        default_position=current_app.config.get("DEFAULT_MAP_CENTER", (20.5937, 78.9629)),
    )
    picker.mount()
    return picker


def _echo_addresses(items) -> None:
    if not items:
        click.echo("No saved addresses.")
        return
    for item in items:
        click.echo(f"{item.get('id')}\t{item.get('address')} ({item.get('category')})")


def _finish(picker: LocationPicker, resolved: bool, category: str | None, save: bool) -> None:
    if not resolved:
        raise SystemExit(1)
    lat, lng = picker.position
    click.echo(f"Current Address: {picker.address or 'No address selected'} ({lat:.5f}, {lng:.5f})")
    if save:
        picker.set_category(category)
        if picker.save() is None:
            raise SystemExit(1)


@click.command("list-addresses")
@api_option
@with_appcontext
def list_addresses_command(api_base: str | None) -> None:
    """Print saved addresses."""
    picker = _make_picker(api_base)
    _echo_addresses(picker.saved_addresses)


@click.command("save-address")
@click.argument("address")
@click.option("--category", required=True, help="Label such as Home, Office, Friends & Family.")
@api_option
@with_appcontext
def save_address_command(address: str, category: str, api_base: str | None) -> None:
    """Save ADDRESS under a category."""
    picker = _make_picker(api_base)
    picker.select_place({"formatted_address": address, "lat": picker.position[0], "lng": picker.position[1]})
    picker.set_category(category)
    if picker.save() is None:
        raise SystemExit(1)
    _echo_addresses(picker.saved_addresses)


@click.command("delete-address")
@click.argument("address_id", type=int)
@api_option
@with_appcontext
def delete_address_command(address_id: int, api_base: str | None) -> None:
    """Delete the saved address with ADDRESS_ID."""
    picker = _make_picker(api_base)
    if not picker.delete(address_id):
        click.echo(f"Failed to delete address {address_id}.")
        raise SystemExit(1)
    click.echo(f"Deleted address {address_id}.")
    _echo_addresses(picker.saved_addresses)


@click.command("search-address")
@click.argument("query")
@click.option("--category", default=None)
@click.option("--save", is_flag=True, default=False, help="Save the match under --category.")
@api_option
@with_appcontext
def search_address_command(query: str, category: str | None, save: bool, api_base: str | None) -> None:
    """Resolve QUERY to an address via place search."""
    picker = _make_picker(api_base)
    _finish(picker, picker.search(query), category, save)


@click.command("locate-address")
@click.argument("lat", type=float)
@click.argument("lng", type=float)
@click.option("--category", default=None)
@click.option("--save", is_flag=True, default=False, help="Save the address under --category.")
@api_option
@with_appcontext
def locate_address_command(lat: float, lng: float, category: str | None, save: bool, api_base: str | None) -> None:
    """Resolve LAT/LNG to an address, as if the marker was dropped there."""
    picker = _make_picker(api_base)
    _finish(picker, picker.drag_marker(lat, lng), category, save)


COMMANDS = (
    list_addresses_command,
    save_address_command,
    delete_address_command,
    search_address_command,
    locate_address_command,
)
