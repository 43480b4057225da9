"""
Pick storage and the public pick board.

Writes go through the reveal gate of the match's round and are stored
encrypted. Reads for other players only say whether a pick was sent until the
round is revealed; a player can always read back their own picks.
"""

import logging
from datetime import datetime, timezone

from bolao import db
from bolao.errors import LockedError, NotFoundError, ValidationError
from bolao.models import Match, Pick, Player, Round
from bolao.utils.crypto import encode_pick, try_decode_pick
from bolao.utils.outcome import Outcome, outcome_text
from bolao.utils.reveal import is_revealed

logger = logging.getLogger(__name__)

STATUS_MISSING = "MISSING"
STATUS_SENT = "SENT"
STATUS_REVEALED = "REVEALED"
DECODE_ERROR_TEXT = "ERRO"


def submit_pick(player, match_id, choice, now=None):
    """Create or replace ``player``'s pick for a match.

    Raises:
        ValidationError: choice is not TEAM1, DRAW or TEAM2
        NotFoundError: match does not exist
        LockedError: the match's round has already been revealed
    """
    outcome = Outcome.from_choice(choice)
    if outcome is None:
        raise ValidationError("Dados inválidos")

    match = db.session.get(Match, match_id)
    if match is None:
        raise NotFoundError("Jogo não encontrado")

    if match.round.is_revealed(now):
        logger.info(
            f"Rejected pick from {player.name} for match {match.id}: round {match.round.number} is locked"
        )
        raise LockedError()

    _upsert_pick(player.id, match.id, encode_pick(outcome))
    db.session.commit()

    logger.debug(f"Stored pick for player {player.id}, match {match.id}")
    return Pick.query.filter_by(player_id=player.id, match_id=match.id).one()


def _upsert_pick(player_id, match_id, encrypted_choice):
    """Insert or overwrite the (player, match) pick, last write wins"""
    now = datetime.now(timezone.utc)
    dialect = db.session.get_bind().dialect.name

    if dialect in ("postgresql", "sqlite"):
        if dialect == "postgresql":
            from sqlalchemy.dialects.postgresql import insert
        else:
            from sqlalchemy.dialects.sqlite import insert

        stmt = insert(Pick).values(
            player_id=player_id,
            match_id=match_id,
            encrypted_choice=encrypted_choice,
            created_at=now,
            updated_at=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["player_id", "match_id"],
            set_={"encrypted_choice": encrypted_choice, "updated_at": now},
        )
        db.session.execute(stmt)
        return

    existing = Pick.query.filter_by(player_id=player_id, match_id=match_id).first()
    if existing:
        existing.encrypted_choice = encrypted_choice
        existing.updated_at = now
    else:
        db.session.add(
            Pick(
                player_id=player_id,
                match_id=match_id,
                encrypted_choice=encrypted_choice,
            )
        )


def get_own_picks(player):
    """The player's own decoded picks keyed by match id, whatever the round state"""
    picks = {}
    for pick in Pick.query.filter_by(player_id=player.id).all():
        outcome = try_decode_pick(pick.encrypted_choice, pick_id=pick.id)
        if outcome is not None:
            picks[pick.match_id] = outcome
    return picks


def build_pick_grid(matches, players, picks, revealed):
    """Public status grid, one row per match and one cell per player.

    Before the reveal a cell only tells whether a pick was sent.
    """
    encrypted = {(p.match_id, p.player_id): p for p in picks}

    grid = []
    for match in matches:
        row = []
        for player in players:
            pick = encrypted.get((match.id, player.id))
            if pick is None:
                row.append({"status": STATUS_MISSING, "text": None})
                continue

            if not revealed:
                row.append({"status": STATUS_SENT, "text": None})
                continue

            outcome = try_decode_pick(pick.encrypted_choice, pick_id=pick.id)
            if outcome is None:
                row.append({"status": STATUS_SENT, "text": DECODE_ERROR_TEXT})
                continue

            row.append(
                {
                    "status": STATUS_REVEALED,
                    "text": outcome_text(outcome, match.home_team, match.away_team),
                }
            )
        grid.append(row)

    return grid


def get_round_board(round_number=None, now=None):
    """Matches, active players and the public pick grid for a round.

    With no round number the latest round is used. A round that does not
    exist yet yields an empty board.
    """
    rnd = Round.get_by_number(round_number) if round_number else Round.get_latest()

    if rnd is None:
        return {
            "block": None,
            "players": [],
            "games": [],
            "isRevealed": False,
            "grid": [],
        }

    players = Player.get_active_players()
    matches = rnd.get_matches()
    kickoff_min = rnd.kickoff_min
    revealed = is_revealed(kickoff_min, now)
    picks = Pick.for_matches([m.id for m in matches])

    return {
        "block": {
            "id": rnd.id,
            "round": rnd.number,
            "kickoffMin": kickoff_min.isoformat() if kickoff_min else None,
        },
        "players": [p.to_dict() for p in players],
        "games": [m.to_dict() for m in matches],
        "isRevealed": revealed,
        "grid": build_pick_grid(matches, players, picks, revealed),
    }
