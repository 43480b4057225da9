import logging

from flask import jsonify, request
from flask_login import current_user, login_required

from bolao.errors import ValidationError
from bolao.forms.picks import MakePickForm
from bolao.models import Player
from bolao.routes.api import bp
from bolao.services import aggregator, picks_service
from bolao.services.admin_service import last_round_with_matches

logger = logging.getLogger(__name__)


def _round_arg():
    """``round`` query parameter, validated against 1..MAX_ROUND"""
    return aggregator.validate_round_number(request.args.get("round", ""))


@bp.route("/block/by-round")
def block_by_round():
    """Round matches and the public pick grid"""
    return jsonify(picks_service.get_round_board(_round_arg()))


@bp.route("/block/current")
def block_current():
    """Board of the highest-numbered round"""
    return jsonify(picks_service.get_round_board())


@bp.route("/pick", methods=["POST"])
@login_required
def submit_pick():
    """Create or replace the logged in player's pick for one match"""
    form = MakePickForm()
    if not form.validate_on_submit():
        raise ValidationError("Dados inválidos")

    picks_service.submit_pick(current_user, form.gameId.data, form.choice.data)
    return jsonify({"ok": True})


@bp.route("/pick/get")
@login_required
def own_picks():
    """The logged in player's own picks, readable before the reveal"""
    picks = picks_service.get_own_picks(current_user)
    return jsonify(
        {"ok": True, "picks": {str(match_id): o.value for match_id, o in picks.items()}}
    )


@bp.route("/results/by-round")
def results_by_round():
    return jsonify(aggregator.get_round_results(_round_arg()))


@bp.route("/ranking/by-round")
def ranking_by_round():
    return jsonify(aggregator.get_round_ranking(_round_arg()))


@bp.route("/ranking/overall")
def ranking_overall():
    return jsonify(aggregator.get_overall_ranking())


@bp.route("/round/latest")
def round_latest():
    """Highest round with at least one match, 1 when there is none"""
    return jsonify({"round": last_round_with_matches()})


@bp.route("/players/active")
def players_active():
    players = Player.get_active_players()
    return jsonify({"ok": True, "players": [p.to_dict() for p in players]})
