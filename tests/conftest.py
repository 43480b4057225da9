from datetime import datetime, timedelta, timezone

import pytest

from bolao import create_app, db
from bolao.models import Match, Pick, Player, Round
from bolao.utils.crypto import encode_pick

NOW = datetime(2025, 5, 10, 15, 0, tzinfo=timezone.utc)

TEAMS = [
    ("Flamengo", "Palmeiras"),
    ("Corinthians", "São Paulo"),
    ("Grêmio", "Internacional"),
    ("Atlético-MG", "Cruzeiro"),
    ("Santos", "Vasco"),
]


@pytest.fixture
def app():
    app = create_app("testing")
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def make_player(name, password=None, is_admin=False, active=True):
    player = Player(name=name, is_admin=is_admin, active=active)
    if password:
        player.set_password(password)
    db.session.add(player)
    db.session.commit()
    return player


def make_round(number, kickoffs=None, scores=None):
    """Round with one match per kickoff; scores is a list of (home, away)"""
    if kickoffs is None:
        kickoffs = [NOW + timedelta(days=1, hours=i) for i in range(5)]

    rnd = Round(number=number)
    db.session.add(rnd)
    db.session.flush()

    for i, kickoff in enumerate(kickoffs):
        home, away = TEAMS[i % len(TEAMS)]
        home_score, away_score = (scores[i] if scores else (None, None))
        db.session.add(
            Match(
                round_id=rnd.id,
                kickoff_at=kickoff,
                home_team=home,
                away_team=away,
                home_score=home_score,
                away_score=away_score,
            )
        )
    db.session.commit()
    return rnd


def add_pick(player, match, outcome):
    """Store a pick directly, bypassing the reveal gate"""
    pick = Pick(
        player_id=player.id,
        match_id=match.id,
        encrypted_choice=encode_pick(outcome),
    )
    db.session.add(pick)
    db.session.commit()
    return pick


def login(client, name, password):
    return client.post("/auth/login", json={"name": name, "password": password})
