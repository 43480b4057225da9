"""
Outcome vocabulary shared by scores and picks.

A match outcome ("gabarito") is derived from the two scores; a pick is one of
the same three values. The enum value is the choice string players submit and
the plaintext that gets encrypted at rest.
"""

from enum import Enum


class Outcome(str, Enum):
    HOME = "TEAM1"
    DRAW = "DRAW"
    AWAY = "TEAM2"

    @property
    def label(self):
        """1X2 label used in result grids"""
        return ONE_X_TWO[self]

    @classmethod
    def from_choice(cls, choice):
        """Parse a submitted choice, returning None when it is not one of ours"""
        if isinstance(choice, cls):
            return choice
        try:
            return cls(str(choice).strip().upper())
        except ValueError:
            return None


ONE_X_TWO = {Outcome.HOME: "1", Outcome.DRAW: "X", Outcome.AWAY: "2"}

DRAW_TEXT = "Empate"


def score_to_outcome(home_score, away_score):
    """Outcome for a scoreline, or None while either score is missing"""
    if home_score is None or away_score is None:
        return None
    if home_score > away_score:
        return Outcome.HOME
    if away_score > home_score:
        return Outcome.AWAY
    return Outcome.DRAW


def outcome_text(outcome, home_team, away_team):
    """Human readable pick: the chosen team's name or "Empate" """
    if outcome is Outcome.HOME:
        return home_team
    if outcome is Outcome.AWAY:
        return away_team
    return DRAW_TEXT
