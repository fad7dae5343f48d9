import click
from flask import current_app
from flask.cli import with_appcontext

from Models.storeItemModel import StoreItem
from Models.userModel import User, Role

DEMO_ITEMS = [
    {"name": "Sticker Pack", "description": "Five glossy vinyl stickers.", "price": 10,
     "image_url": "https://picsum.photos/seed/stickers/400/300"},
    {"name": "Mystery Box", "description": "Could be anything. Probably socks.", "price": 60,
     "image_url": "https://picsum.photos/seed/mystery/400/300"},
    {"name": "Homework Pass", "description": "Skip one homework assignment.", "price": 150,
     "image_url": "https://picsum.photos/seed/homework/400/300"},
]


def _set_role(identifier, role):
    user = User.find_by_identifier(identifier)
    if not user:
        raise click.ClickException(f"No user matches '{identifier}'")
    User.objects(id=user.id).update_one(set__role=role)
    current_app.extensions["change_hub"].notify("users")
    return user


@click.command("users:promote")
@click.argument("identifier")
@with_appcontext
def promote_user(identifier):
    """Grant the admin role to a user (email or username)."""
    user = _set_role(identifier, Role.ADMIN)
    click.echo(f"✅ {user.username} is now an admin")


@click.command("users:demote")
@click.argument("identifier")
@with_appcontext
def demote_user(identifier):
    """Revoke the admin role from a user (email or username)."""
    user = _set_role(identifier, Role.USER)
    click.echo(f"✅ {user.username} is now a regular user")


@click.command("store:seed")
@with_appcontext
def seed_store():
    """Add the demo items that are not in the store yet."""
    added = 0
    for entry in DEMO_ITEMS:
        if StoreItem.objects(name=entry["name"]).first():
            continue
        StoreItem(**entry).save()
        added += 1
    if added:
        current_app.extensions["change_hub"].notify("items")
    click.echo(f"🌱 Seeded {added} store item(s)")


def register_commands(app):
    for command in (promote_user, demote_user, seed_store):
        app.cli.add_command(command)
