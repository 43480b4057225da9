import logging
from functools import wraps

from flask import abort, jsonify, request
from flask_login import current_user, login_required

from bolao.errors import ValidationError
from bolao.routes.admin import bp
from bolao.services import admin_service

logger = logging.getLogger(__name__)


def admin_required(f):
    """Only players flagged as admin may manage rounds and scores"""

    @wraps(f)
    @login_required
    def decorated_function(*args, **kwargs):
        if not current_user.is_admin:
            logger.warning(f"Player {current_user.name} tried to reach {request.path}")
            abort(403)
        return f(*args, **kwargs)

    return decorated_function


def _json_body():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Dados inválidos")
    return data


@bp.route("/rounds")
@admin_required
def rounds():
    return jsonify({"rounds": admin_service.list_rounds()})


@bp.route("/rounds", methods=["POST"])
@admin_required
def save_round():
    """Save a round's five matches, keeping existing match ids"""
    data = _json_body()
    result = admin_service.upsert_round(data.get("round"), data.get("games"))
    return jsonify(dict(result, ok=True))


@bp.route("/scores", methods=["POST"])
@admin_required
def save_scores():
    data = _json_body()
    return jsonify(admin_service.update_scores(data.get("round"), data.get("scores")))


@bp.route("/block")
@admin_required
def block():
    """Round matches with ids, to prefill the structure form"""
    return jsonify(admin_service.get_round_for_editing(request.args.get("round", "")))


@bp.route("/last-round")
@admin_required
def last_round():
    return jsonify({"lastRound": admin_service.last_round_with_matches()})
