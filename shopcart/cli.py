# shopcart/cli.py
import click
from flask import current_app
from flask.cli import with_appcontext

from .catalog import seed_catalog


def _services():
    return current_app.extensions["shopcart"]

@click.command("seed-catalog")
@with_appcontext
def seed_catalog_command():
    inserted = seed_catalog()
    if not inserted:
        click.echo("Catalog already seeded"); return
    click.echo(f"Seeded {inserted} products (restart to reload the catalog)")

@click.command("list-products")
@with_appcontext
def list_products():
    for product in _services()["catalog"]:
        click.echo(f"{product.id:>4}  {product.name:<24} {product.price:>10.2f}")

@click.command("show-cart")
@with_appcontext
def show_cart():
    summary = _services()["cart"].get_cart_summary()
    for item in summary["items"]:
        click.echo(f"{item['cartItemId']}  {item['name']:<24} x{item['quantity']}")
    click.echo(f"items: {summary['itemCount']}  total: {summary['total']:.2f}")

@click.command("clear-cart")
@with_appcontext
@click.confirmation_option(prompt="Remove every line from the cart?")
def clear_cart():
    removed = _services()["cart"].clear_cart()
    click.echo(f"Removed {removed} line(s)")

def register_cli(app):
    app.cli.add_command(seed_catalog_command)
    app.cli.add_command(list_products)
    app.cli.add_command(show_cart)
    app.cli.add_command(clear_cart)
