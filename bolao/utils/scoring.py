"""
Scoring rule for the bolão

Points for one pick against the match outcome ("gabarito"):
    +3  pick matches the outcome
     0  outcome is a draw and the pick is not (a missed draw never costs)
    -1  pick is the opposite result (home vs away)
     0  pick is a draw but the match was decided
"""

from bolao.utils.outcome import Outcome

HIT_POINTS = 3
OPPOSITE_POINTS = -1
MISS_POINTS = 0

_OPPOSITES = {(Outcome.HOME, Outcome.AWAY), (Outcome.AWAY, Outcome.HOME)}


def calculate_points(outcome, pick):
    """Points earned by ``pick`` when the match ended in ``outcome``"""
    if pick == outcome:
        return HIT_POINTS
    if outcome == Outcome.DRAW:
        return MISS_POINTS
    if (outcome, pick) in _OPPOSITES:
        return OPPOSITE_POINTS
    return MISS_POINTS


def cell_points(outcome, pick):
    """Points for a grid cell, None while outcome or pick is unknown"""
    if outcome is None or pick is None:
        return None
    return calculate_points(outcome, pick)
