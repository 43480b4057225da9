"""
Round and match administration.

Match rows are never deleted or recreated here: picks reference match ids,
so a round's structure is saved by updating matches in place and inserting
only the slots that have no id yet. Score updates touch score columns only.
"""

import logging
import math

from flask import current_app

from bolao import db
from bolao.errors import NotFoundError, ValidationError
from bolao.models import Match, Round
from bolao.services.aggregator import validate_round_number
from bolao.utils.timezone_utils import parse_kickoff

logger = logging.getLogger(__name__)


def _parse_match_id(value):
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    try:
        return int(str(value).strip())
    except ValueError:
        raise ValidationError(f"game id inválido: {value}")


def _parse_score(value):
    """Score as a non-negative int; None, blank or NaN mean "not entered" """
    if value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    if isinstance(value, bool):
        raise ValidationError(f"Placar inválido: {value}")
    if isinstance(value, float):
        if math.isnan(value):
            return None
        if not value.is_integer():
            raise ValidationError(f"Placar inválido: {value}")
    try:
        score = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Placar inválido: {value}")
    if score < 0:
        raise ValidationError(f"Placar inválido: {value}")
    return score


def _clean_match_input(raw):
    """Validate one slot of the round form without touching the store"""
    if not isinstance(raw, dict):
        raise ValidationError("Jogo com campos vazios")

    home_team = str(raw.get("team1") or "").strip()
    away_team = str(raw.get("team2") or "").strip()
    kickoff_raw = raw.get("kickoff_at")
    if not home_team or not away_team or not str(kickoff_raw or "").strip():
        raise ValidationError("Jogo com campos vazios")

    return {
        "id": _parse_match_id(raw.get("id")),
        "kickoff_at": parse_kickoff(kickoff_raw),
        "home_team": home_team,
        "away_team": away_team,
    }


def upsert_round(round_number, games):
    """Create or update a round and its fixed set of matches.

    Slots carrying an ``id`` update that match in place (it must belong to the
    round); slots without one create a new match. Existing matches are never
    removed, so picks keep pointing at the same rows.

    Raises:
        ValidationError: bad round number, wrong number of matches, empty
            field, bad kickoff or repeated id
        NotFoundError: an id does not belong to this round
    """
    number = validate_round_number(round_number)
    expected = current_app.config.get("MATCHES_PER_ROUND", 5)

    if not isinstance(games, (list, tuple)) or len(games) != expected:
        raise ValidationError(f"Informe exatamente {expected} jogos")

    cleaned = [_clean_match_input(g) for g in games]

    ids = [c["id"] for c in cleaned if c["id"] is not None]
    if len(ids) != len(set(ids)):
        raise ValidationError("game id repetido")

    rnd = Round.get_by_number(number)
    if rnd is None:
        rnd = Round(number=number)
        db.session.add(rnd)
        db.session.flush()
        logger.info(f"Created round {number}")

    saved_ids = []
    try:
        for slot in cleaned:
            if slot["id"] is not None:
                match = Match.query.filter_by(id=slot["id"], round_id=rnd.id).first()
                if match is None:
                    raise NotFoundError(
                        f"game id inválido para esta rodada: {slot['id']}"
                    )
                match.kickoff_at = slot["kickoff_at"]
                match.home_team = slot["home_team"]
                match.away_team = slot["away_team"]
            else:
                match = Match(
                    round_id=rnd.id,
                    kickoff_at=slot["kickoff_at"],
                    home_team=slot["home_team"],
                    away_team=slot["away_team"],
                )
                db.session.add(match)
                db.session.flush()
            saved_ids.append(match.id)
    except NotFoundError:
        db.session.rollback()
        raise

    db.session.commit()
    logger.info(f"Saved round {number} structure, matches {saved_ids}")

    return {"block": {"id": rnd.id, "round": rnd.number}, "savedIds": saved_ids}


def update_scores(round_number, scores):
    """Set home/away scores of matches in one round.

    Ids that do not belong to the round are skipped and reported in
    ``ignored``. Kickoff, teams and picks are left alone.

    Raises:
        ValidationError: bad round number, empty list or invalid score
        NotFoundError: the round does not exist
    """
    number = validate_round_number(round_number)

    if not isinstance(scores, (list, tuple)) or not scores:
        raise ValidationError("scores vazio")

    cleaned = []
    for entry in scores:
        if not isinstance(entry, dict):
            raise ValidationError("scores inválido")
        match_id = _parse_match_id(entry.get("gameId"))
        if match_id is None:
            continue
        cleaned.append(
            (match_id, _parse_score(entry.get("score1")), _parse_score(entry.get("score2")))
        )

    rnd = Round.get_by_number(number)
    if rnd is None:
        raise NotFoundError("Bloco/rodada não encontrado")

    matches = {m.id: m for m in rnd.matches.all()}

    updated, ignored = [], []
    for match_id, home_score, away_score in cleaned:
        match = matches.get(match_id)
        if match is None:
            ignored.append(match_id)
            continue
        match.home_score = home_score
        match.away_score = away_score
        updated.append(match_id)

    db.session.commit()

    if ignored:
        logger.warning(f"Score update for round {number} ignored foreign matches {ignored}")
    logger.info(f"Updated scores for round {number}: {updated}")

    return {"ok": True, "updated": updated, "ignored": ignored}


def list_rounds():
    """Round numbers in ascending order"""
    return [r.number for r in Round.query.order_by(Round.number).all()]


def last_round_with_matches():
    """Highest round that has at least one match, 1 when there is none"""
    number = (
        db.session.query(db.func.max(Round.number))
        .filter(Round.matches.any())
        .scalar()
    )
    return number or 1


def get_round_for_editing(round_number):
    """Round with its matches (ids included) to fill the admin form"""
    number = validate_round_number(round_number)
    rnd = Round.get_by_number(number)
    if rnd is None:
        return {"block": None, "games": []}

    return {
        "block": {"id": rnd.id, "round": rnd.number},
        "games": [m.to_dict() for m in rnd.get_matches()],
    }
