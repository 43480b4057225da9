import logging

from bolao import db
from bolao.errors import ValidationError
from bolao.models import Player

logger = logging.getLogger(__name__)

MODE_CREATED = "created"
MODE_LOGIN = "login"


class AuthenticationError(Exception):
    """Login refused, message is safe to show"""


def authenticate(name, password):
    """Log a player in by name, setting the password on first access.

    Returns:
        tuple: (player, mode) where mode is "created" when this call set the
        password and "login" otherwise

    Raises:
        ValidationError: name or password missing
        AuthenticationError: unknown/inactive player or wrong password
    """
    name = (name or "").strip()
    password = (password or "").strip()
    if not name or not password:
        raise ValidationError("Informe nome e senha")

    player = Player.find_by_name(name)
    if player is None or not player.active:
        raise AuthenticationError("Jogador não encontrado")

    if not player.has_password:
        player.set_password(password)
        player.update_last_login()
        db.session.commit()
        logger.info(f"Player {player.name} set a password on first login")
        return player, MODE_CREATED

    if not player.check_password(password):
        logger.info(f"Failed login for player {player.name}")
        raise AuthenticationError("Senha incorreta")

    player.update_last_login()
    db.session.commit()
    return player, MODE_LOGIN


def create_player(name, is_admin=False):
    """Register a player; the password is chosen on first login"""
    name = (name or "").strip()
    if not name:
        raise ValidationError("Informe o nome")
    if Player.find_by_name(name):
        raise ValidationError(f"Jogador {name} já existe")

    player = Player(name=name, active=True, is_admin=is_admin)
    db.session.add(player)
    db.session.commit()
    logger.info(f"Created player {name}")
    return player
