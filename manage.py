#!/usr/bin/env python3
"""
Bolão Management CLI

Command-line management for players, rounds and the database.
"""

import logging

import click
from flask.cli import with_appcontext
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from bolao import create_app, db
from bolao.errors import BolaoError
from bolao.models import Match, Pick, Player, Round
from bolao.services.player_service import create_player
from bolao.utils.timezone_utils import format_kickoff


@click.group()
def cli():
    """Bolão Management CLI"""
    pass


# Player Management Commands
@cli.group()
def player():
    """Player management commands"""
    pass


@player.command("add")
@click.argument("name")
@click.option("--admin", is_flag=True, help="Allow managing rounds and scores")
@with_appcontext
def add_player(name, admin):
    """Register a player (password is set on first login)"""
    try:
        created = create_player(name, is_admin=admin)
        click.echo(f"✅ Created player {created.name}" + (" (admin)" if admin else ""))
    except BolaoError as e:
        click.echo(f"❌ {e.message}")
    except SQLAlchemyError as e:
        db.session.rollback()
        click.echo(f"❌ Database error creating player: {str(e)}")
        logging.error(f"Player creation failed - SQL error: {e}")


@player.command("list")
@with_appcontext
def list_players():
    """List all players"""
    players = Player.query.order_by(Player.name).all()

    if not players:
        click.echo("No players found.")
        return

    click.echo("Players:")
    for p in players:
        status = "🟢 active" if p.active else "⚪ inactive"
        password = "password set" if p.has_password else "awaiting first login"
        admin = " [admin]" if p.is_admin else ""
        click.echo(f"  {p.name}{admin}: {status} - {password}")


def _set_player_flag(name, **flags):
    target = Player.find_by_name(name)
    if not target:
        click.echo(f"❌ Player {name} not found!")
        return None

    for key, value in flags.items():
        setattr(target, key, value)
    db.session.commit()
    return target


@player.command()
@click.argument("name")
@with_appcontext
def deactivate(name):
    """Hide a player from rankings and block their login"""
    if _set_player_flag(name, active=False):
        click.echo(f"✅ Deactivated {name}")


@player.command()
@click.argument("name")
@with_appcontext
def activate(name):
    """Re-enable a player"""
    if _set_player_flag(name, active=True):
        click.echo(f"✅ Activated {name}")


@player.command("make-admin")
@click.argument("name")
@with_appcontext
def make_admin(name):
    """Grant admin rights"""
    if _set_player_flag(name, is_admin=True):
        click.echo(f"✅ {name} is now an admin")


@player.command("reset-password")
@click.argument("name")
@with_appcontext
def reset_password(name):
    """Clear a password so the next login sets a new one"""
    if _set_player_flag(name, password_hash=None):
        click.echo(f"✅ {name} will choose a new password on next login")


# Round Commands
@cli.group("round")
def round_cmd():
    """Round inspection commands"""
    pass


@round_cmd.command("list")
@with_appcontext
def list_rounds():
    """List rounds with match counts and reveal state"""
    rounds = Round.query.order_by(Round.number).all()

    if not rounds:
        click.echo("No rounds found.")
        return

    for r in rounds:
        matches = r.get_matches()
        scored = sum(1 for m in matches if m.is_scored)
        state = "🔓 revealed" if r.is_revealed() else "🔒 hidden"
        click.echo(f"  Round {r.number}: {len(matches)} matches, {scored} scored - {state}")


@round_cmd.command("show")
@click.argument("number", type=int)
@with_appcontext
def show_round(number):
    """Show the matches of a round"""
    rnd = Round.get_by_number(number)
    if not rnd:
        click.echo(f"❌ Round {number} not found!")
        return

    for m in rnd.get_matches():
        score = (
            f"{m.home_score} x {m.away_score}" if m.is_scored else "-"
        )
        picks = m.picks.count()
        click.echo(
            f"  #{m.id} {format_kickoff(m.kickoff_at)} {m.home_team} x {m.away_team} "
            f"[{score}] {picks} picks"
        )


# Database Commands
@cli.group()
def db_cmd():
    """Database management commands"""
    pass


@db_cmd.command("init")
@with_appcontext
def init_db():
    """Create all tables"""
    db.create_all()
    click.echo("✅ Database initialized")


@cli.command()
@with_appcontext
def status():
    """Show application status"""
    click.echo("⚽ Bolão Status")
    click.echo("=" * 40)

    try:
        db.session.execute(text("SELECT 1"))
        click.echo("✅ Database: Connected")
    except SQLAlchemyError as e:
        click.echo(f"❌ Database: Error - {str(e)}")
        return

    click.echo(f"👥 Active players: {Player.query.filter_by(active=True).count()}")
    click.echo(f"📅 Rounds: {Round.query.count()}")
    click.echo(f"⚽ Matches: {Match.query.count()}")
    click.echo(f"📝 Picks: {Pick.query.count()}")


if __name__ == "__main__":
    app = create_app()
    with app.app_context():
        cli()
