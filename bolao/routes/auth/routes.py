import logging

from flask import jsonify
from flask_login import current_user, login_required, login_user, logout_user
from flask_wtf.csrf import generate_csrf

from bolao import db, limiter, login_manager
from bolao.errors import ValidationError
from bolao.forms.auth import LoginForm
from bolao.models import Player
from bolao.routes.auth import bp
from bolao.services.player_service import AuthenticationError, authenticate

logger = logging.getLogger(__name__)


@login_manager.user_loader
def load_player(player_id):
    return db.session.get(Player, int(player_id))


@login_manager.unauthorized_handler
def unauthorized():
    return jsonify({"ok": False, "error": "Não autenticado", "code": "unauthorized"}), 401


@bp.route("/csrf-token")
def csrf_token():
    """Token to send back in the X-CSRFToken header on POST requests"""
    return jsonify({"csrfToken": generate_csrf()})


@bp.route("/login", methods=["POST"])
@limiter.limit("10 per minute")
def login():
    form = LoginForm()
    if not form.validate_on_submit():
        raise ValidationError("Informe nome e senha")

    try:
        player, mode = authenticate(form.name.data, form.password.data)
    except AuthenticationError as e:
        return jsonify({"ok": False, "error": str(e), "code": "unauthorized"}), 401

    login_user(player, remember=True)
    return jsonify({"ok": True, "mode": mode, "player": player.to_dict()})


@bp.route("/logout", methods=["POST"])
def logout():
    logout_user()
    return jsonify({"ok": True})


@bp.route("/me")
@login_required
def me():
    return jsonify(
        {
            "ok": True,
            "player": dict(current_user.to_dict(), isAdmin=current_user.is_admin),
        }
    )
