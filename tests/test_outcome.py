import pytest

from bolao.utils.outcome import Outcome, outcome_text, score_to_outcome


@pytest.mark.parametrize(
    "home, away, expected",
    [
        (2, 1, Outcome.HOME),
        (0, 3, Outcome.AWAY),
        (1, 1, Outcome.DRAW),
        (0, 0, Outcome.DRAW),
        (10, 9, Outcome.HOME),
    ],
)
def test_score_to_outcome(home, away, expected):
    assert score_to_outcome(home, away) is expected


@pytest.mark.parametrize("home, away", [(None, 1), (2, None), (None, None)])
def test_score_to_outcome_missing_score(home, away):
    assert score_to_outcome(home, away) is None


def test_score_to_outcome_is_total_over_small_scores():
    for home in range(6):
        for away in range(6):
            outcome = score_to_outcome(home, away)
            assert outcome in set(Outcome)
            assert (outcome is Outcome.DRAW) == (home == away)


def test_from_choice():
    assert Outcome.from_choice("TEAM1") is Outcome.HOME
    assert Outcome.from_choice(" draw ") is Outcome.DRAW
    assert Outcome.from_choice(Outcome.AWAY) is Outcome.AWAY
    assert Outcome.from_choice("HOME") is None
    assert Outcome.from_choice(None) is None


def test_labels():
    assert [o.label for o in Outcome] == ["1", "X", "2"]


def test_outcome_text():
    assert outcome_text(Outcome.HOME, "Santos", "Vasco") == "Santos"
    assert outcome_text(Outcome.AWAY, "Santos", "Vasco") == "Vasco"
    assert outcome_text(Outcome.DRAW, "Santos", "Vasco") == "Empate"
