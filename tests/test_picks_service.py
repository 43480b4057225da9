from datetime import timedelta

import pytest

from bolao import db
from bolao.errors import LockedError, NotFoundError, ValidationError
from bolao.models import Pick
from bolao.services import picks_service
from bolao.utils.crypto import decode_pick
from bolao.utils.outcome import Outcome
from conftest import NOW, add_pick, make_player, make_round


def test_submit_pick_before_reveal(app):
    player = make_player("Ana")
    rnd = make_round(1)
    match = rnd.get_matches()[0]

    pick = picks_service.submit_pick(player, match.id, "TEAM1", now=NOW)

    assert pick.player_id == player.id
    assert decode_pick(pick.encrypted_choice) is Outcome.HOME
    assert "TEAM1" not in pick.encrypted_choice


def test_resubmitting_keeps_one_pick_with_latest_value(app):
    player = make_player("Ana")
    match = make_round(1).get_matches()[0]

    picks_service.submit_pick(player, match.id, "TEAM1", now=NOW)
    picks_service.submit_pick(player, match.id, "TEAM1", now=NOW)
    picks_service.submit_pick(player, match.id, "DRAW", now=NOW)

    picks = Pick.query.filter_by(player_id=player.id, match_id=match.id).all()
    assert len(picks) == 1
    assert decode_pick(picks[0].encrypted_choice) is Outcome.DRAW


def test_locked_at_and_after_first_kickoff(app):
    player = make_player("Ana")
    kickoff = NOW + timedelta(hours=2)
    rnd = make_round(1, kickoffs=[kickoff + timedelta(hours=3), kickoff])
    late_match = rnd.get_matches()[1]

    # The gate uses the round's earliest kickoff, even for the later match
    with pytest.raises(LockedError):
        picks_service.submit_pick(player, late_match.id, "DRAW", now=kickoff)
    with pytest.raises(LockedError):
        picks_service.submit_pick(
            player, late_match.id, "DRAW", now=kickoff + timedelta(minutes=5)
        )

    picks_service.submit_pick(
        player, late_match.id, "DRAW", now=kickoff - timedelta(seconds=1)
    )
    assert Pick.query.count() == 1


def test_locked_write_leaves_existing_pick(app):
    player = make_player("Ana")
    rnd = make_round(1)
    match = rnd.get_matches()[0]
    picks_service.submit_pick(player, match.id, "TEAM1", now=NOW)

    with pytest.raises(LockedError):
        picks_service.submit_pick(
            player, match.id, "TEAM2", now=rnd.kickoff_min + timedelta(seconds=1)
        )

    assert picks_service.get_own_picks(player) == {match.id: Outcome.HOME}


def test_invalid_choice(app):
    player = make_player("Ana")
    match = make_round(1).get_matches()[0]
    with pytest.raises(ValidationError):
        picks_service.submit_pick(player, match.id, "HOME", now=NOW)


def test_unknown_match(app):
    player = make_player("Ana")
    with pytest.raises(NotFoundError):
        picks_service.submit_pick(player, 999, "DRAW", now=NOW)


def test_own_picks_skip_corrupt_rows(app):
    player = make_player("Ana")
    matches = make_round(1).get_matches()
    add_pick(player, matches[0], Outcome.AWAY)
    db.session.add(Pick(player_id=player.id, match_id=matches[1].id, encrypted_choice="junk"))
    db.session.commit()

    assert picks_service.get_own_picks(player) == {matches[0].id: Outcome.AWAY}


def test_board_before_reveal_only_shows_status(app):
    ana = make_player("Ana")
    make_player("Bruno")
    rnd = make_round(3)
    match = rnd.get_matches()[0]
    add_pick(ana, match, Outcome.HOME)

    board = picks_service.get_round_board(3, now=NOW)

    assert board["isRevealed"] is False
    assert board["block"]["round"] == 3
    assert [p["name"] for p in board["players"]] == ["Ana", "Bruno"]
    assert board["grid"][0] == [
        {"status": "SENT", "text": None},
        {"status": "MISSING", "text": None},
    ]


def test_board_after_reveal_shows_text(app):
    ana = make_player("Ana")
    bruno = make_player("Bruno")
    rnd = make_round(3)
    matches = rnd.get_matches()
    add_pick(ana, matches[0], Outcome.HOME)
    add_pick(bruno, matches[0], Outcome.DRAW)
    db.session.add(Pick(player_id=ana.id, match_id=matches[1].id, encrypted_choice="junk"))
    db.session.commit()

    board = picks_service.get_round_board(3, now=rnd.kickoff_min)

    assert board["isRevealed"] is True
    assert board["grid"][0] == [
        {"status": "REVEALED", "text": "Flamengo"},
        {"status": "REVEALED", "text": "Empate"},
    ]
    assert board["grid"][1][0] == {"status": "SENT", "text": "ERRO"}


def test_board_for_missing_round(app):
    board = picks_service.get_round_board(7, now=NOW)
    assert board == {
        "block": None,
        "players": [],
        "games": [],
        "isRevealed": False,
        "grid": [],
    }


def test_current_board_uses_latest_round(app):
    make_round(1)
    make_round(2)
    assert picks_service.get_round_board(now=NOW)["block"]["round"] == 2
