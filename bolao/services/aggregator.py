"""
Round aggregator

One scoring pass over a set of matches, used with two match filters: the
matches of a single round, and every match that already has both scores.
Totals are rebuilt from the picks on every call; nothing is kept between
requests.
"""

import logging
import unicodedata

from flask import current_app

from bolao.errors import NotFoundError, ValidationError
from bolao.models import Match, Pick, Player, Round
from bolao.utils.outcome import outcome_text
from bolao.utils.reveal import is_revealed
from bolao.utils.scoring import cell_points

logger = logging.getLogger(__name__)


def validate_round_number(value):
    """Parse a round number, raising ValidationError outside 1..MAX_ROUND"""
    max_round = current_app.config.get("MAX_ROUND", 38)
    if isinstance(value, bool):
        raise ValidationError(f"round inválida (1..{max_round})")
    # JSON bodies may carry 5.0 for 5
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    try:
        number = int(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError(f"round inválida (1..{max_round})")

    if number < 1 or number > max_round:
        raise ValidationError(f"round inválida (1..{max_round})")
    return number


def name_sort_key(name):
    """Accent and case insensitive key, so "Álvaro" sorts next to "Alvaro" """
    folded = unicodedata.normalize("NFKD", name or "")
    folded = "".join(c for c in folded if not unicodedata.combining(c))
    return (folded.casefold(), name or "")


def rank(entries, total_key):
    """Sort by total descending, then by player name"""
    return sorted(entries, key=lambda e: (-e[total_key], name_sort_key(e["name"])))


# Match filters


def round_matches(rnd):
    """Matches of one round by kickoff, then id. No round means no matches."""
    if rnd is None:
        return []
    return rnd.get_matches()


def scored_matches():
    """Every match, in any round, with both scores filled in"""
    return (
        Match.query.filter(Match.home_score.isnot(None), Match.away_score.isnot(None))
        .order_by(Match.kickoff_at, Match.id)
        .all()
    )


def score_matches(matches, players):
    """Score every (player, match) pair.

    Returns a dict keyed by player id with ``cells`` (one entry per match, in
    match order, holding the decoded pick and its points) and ``total``. Points
    are None while the match has no outcome or the player has no valid pick;
    such cells add nothing to the total.
    """
    picks = {}
    for pick in Pick.for_matches([m.id for m in matches]):
        outcome = pick.decoded()
        if outcome is not None:
            picks[(pick.player_id, pick.match_id)] = outcome

    table = {}
    for player in players:
        cells = []
        total = 0
        for match in matches:
            pick = picks.get((player.id, match.id))
            points = cell_points(match.outcome, pick)
            if points is not None:
                total += points
            cells.append({"pick": pick, "points": points})
        table[player.id] = {"cells": cells, "total": total}

    return table


def overall_totals(players):
    """All-time totals over every scored match, recomputed from scratch"""
    table = score_matches(scored_matches(), players)
    return rank(
        [
            {"playerId": p.id, "name": p.name, "totalOverall": table[p.id]["total"]}
            for p in players
        ],
        "totalOverall",
    )


def get_round_results(round_number, now=None):
    """Grid, round ranking and overall ranking for a round.

    A round that is missing or has no matches is a normal state: the grid is
    empty and every active player totals zero.
    """
    number = validate_round_number(round_number)

    players = Player.get_active_players()
    rnd = Round.get_by_number(number)
    matches = round_matches(rnd)

    kickoff_min = rnd.kickoff_min if rnd is not None else None
    revealed = is_revealed(kickoff_min, now)

    table = score_matches(matches, players)

    # Rows per player, empty altogether while the round has no matches.
    # Points would give a pick away too, so both stay hidden until the reveal.
    grid = []
    for player in players if matches else []:
        row = []
        for cell in table[player.id]["cells"]:
            if not revealed:
                row.append({"pick": None, "points": None})
                continue
            pick = cell["pick"]
            row.append(
                {
                    "pick": pick.label if pick is not None else None,
                    "points": cell["points"],
                }
            )
        grid.append(row)

    totals_round = rank(
        [
            {"playerId": p.id, "name": p.name, "totalRound": table[p.id]["total"]}
            for p in players
        ],
        "totalRound",
    )

    return {
        "round": number,
        "isRevealed": revealed,
        "kickoffMin": kickoff_min.isoformat() if kickoff_min else None,
        "players": [p.to_dict() for p in players],
        "games": [m.to_dict() for m in matches],
        "grid": grid,
        "totalsRound": totals_round,
        "overall": overall_totals(players),
    }


def get_round_ranking(round_number, now=None):
    """Round ranking with per-game points.

    Raises:
        NotFoundError: the round has not been created
    """
    number = validate_round_number(round_number)
    rnd = Round.get_by_number(number)
    if rnd is None:
        raise NotFoundError("rodada não encontrada")

    players = Player.get_active_players()
    matches = round_matches(rnd)
    revealed = rnd.is_revealed(now)
    table = score_matches(matches, players)

    details = []
    for player in players:
        per_game = []
        for match, cell in zip(matches, table[player.id]["cells"]):
            pick = cell["pick"]
            show = revealed and cell["points"] is not None
            per_game.append(
                {
                    "gameId": match.id,
                    "points": cell["points"] if revealed else None,
                    "pickText": (
                        outcome_text(pick, match.home_team, match.away_team)
                        if show
                        else None
                    ),
                }
            )
        details.append(
            {
                "playerId": player.id,
                "name": player.name,
                "total": table[player.id]["total"],
                "perGame": per_game,
            }
        )

    details = rank(details, "total")

    return {
        "round": rnd.number,
        "players": [{"name": d["name"], "total": d["total"]} for d in details],
        "details": details,
        "games": [
            dict(m.to_dict(), result=m.outcome.value if m.outcome else None)
            for m in matches
        ],
    }


def get_overall_ranking():
    """Cumulative ranking over every scored match"""
    players = Player.get_active_players()
    ranking = [
        {"playerId": e["playerId"], "name": e["name"], "total": e["totalOverall"]}
        for e in overall_totals(players)
    ]
    logger.debug(f"Overall ranking computed for {len(ranking)} players")
    return {"ranking": ranking}
