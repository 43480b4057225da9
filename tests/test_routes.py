from datetime import datetime, timedelta, timezone

from bolao.models import Player
from bolao.utils.outcome import Outcome
from conftest import add_pick, login, make_player, make_round


def _future():
    now = datetime.now(timezone.utc)
    return [now + timedelta(days=2, hours=i) for i in range(5)]


def _past():
    now = datetime.now(timezone.utc)
    return [now - timedelta(days=2, hours=i) for i in range(5)]


def test_health(client):
    assert client.get("/health").get_json() == {"status": "ok"}


def test_first_login_sets_password(app, client):
    make_player("Ana")

    response = login(client, "ana", "segredo")
    assert response.status_code == 200
    assert response.get_json()["mode"] == "created"
    assert Player.find_by_name("Ana").check_password("segredo")

    client.post("/auth/logout")
    assert login(client, "ANA", "segredo").get_json()["mode"] == "login"
    assert login(client, "Ana", "errada").status_code == 401


def test_login_rejects_unknown_and_inactive(app, client):
    make_player("Zeca", active=False)
    assert login(client, "Zeca", "x").status_code == 401
    assert login(client, "Ninguem", "x").status_code == 401
    assert login(client, "Ana", "").status_code == 400


def test_me_requires_login(app, client):
    assert client.get("/auth/me").status_code == 401
    make_player("Ana", password="segredo")
    login(client, "Ana", "segredo")
    assert client.get("/auth/me").get_json()["player"]["name"] == "Ana"


def test_submit_pick_flow(app, client):
    make_player("Ana", password="segredo")
    match_id = make_round(1, kickoffs=_future()).get_matches()[0].id

    assert client.post("/api/pick", json={"gameId": match_id, "choice": "DRAW"}).status_code == 401

    login(client, "Ana", "segredo")
    response = client.post("/api/pick", json={"gameId": match_id, "choice": "DRAW"})
    assert response.status_code == 200
    assert response.get_json() == {"ok": True}

    own = client.get("/api/pick/get").get_json()
    assert own == {"ok": True, "picks": {str(match_id): "DRAW"}}


def test_submit_pick_invalid_and_unknown(app, client):
    make_player("Ana", password="segredo")
    match_id = make_round(1, kickoffs=_future()).get_matches()[0].id
    login(client, "Ana", "segredo")

    bad = client.post("/api/pick", json={"gameId": match_id, "choice": "HOME"})
    assert bad.status_code == 400
    assert bad.get_json()["code"] == "validation"

    missing = client.post("/api/pick", json={"gameId": 999, "choice": "DRAW"})
    assert missing.status_code == 404
    assert missing.get_json()["code"] == "not_found"


def test_submit_pick_locked(app, client):
    make_player("Ana", password="segredo")
    match_id = make_round(1, kickoffs=_past()).get_matches()[0].id
    login(client, "Ana", "segredo")

    response = client.post("/api/pick", json={"gameId": match_id, "choice": "TEAM1"})

    assert response.status_code == 403
    assert response.get_json()["code"] == "locked"


def test_own_picks_visible_before_reveal_but_board_hides_them(app, client):
    ana = make_player("Ana", password="segredo")
    rnd = make_round(1, kickoffs=_future())
    add_pick(ana, rnd.get_matches()[0], Outcome.AWAY)
    login(client, "Ana", "segredo")

    board = client.get("/api/block/current").get_json()
    assert board["isRevealed"] is False
    assert board["grid"][0][0] == {"status": "SENT", "text": None}

    own = client.get("/api/pick/get").get_json()
    assert list(own["picks"].values()) == ["TEAM2"]


def test_results_and_rankings(app, client):
    ana = make_player("Ana")
    bia = make_player("Bia")
    rnd = make_round(5, kickoffs=_past(), scores=[(2, 1)] * 5)
    match = rnd.get_matches()[0]
    add_pick(ana, match, Outcome.HOME)
    add_pick(bia, match, Outcome.AWAY)

    results = client.get("/api/results/by-round?round=5").get_json()
    assert results["isRevealed"] is True
    assert results["totalsRound"][0]["name"] == "Ana"
    assert results["totalsRound"][0]["totalRound"] == 3
    assert results["totalsRound"][1]["totalRound"] == -1

    ranking = client.get("/api/ranking/by-round?round=5").get_json()
    assert ranking["players"] == [{"name": "Ana", "total": 3}, {"name": "Bia", "total": -1}]

    overall = client.get("/api/ranking/overall").get_json()
    assert [r["total"] for r in overall["ranking"]] == [3, -1]

    assert client.get("/api/ranking/by-round?round=6").status_code == 404
    assert client.get("/api/results/by-round?round=99").status_code == 400


def test_results_for_round_not_created(app, client):
    make_player("Ana")
    results = client.get("/api/results/by-round?round=3").get_json()
    assert results["grid"] == []
    assert results["totalsRound"][0]["totalRound"] == 0


def test_latest_round_and_players(app, client):
    assert client.get("/api/round/latest").get_json() == {"round": 1}
    make_round(7, kickoffs=_future())
    make_player("Ana")
    assert client.get("/api/round/latest").get_json() == {"round": 7}
    assert client.get("/api/players/active").get_json()["players"][0]["name"] == "Ana"


def test_admin_requires_admin_player(app, client):
    assert client.get("/admin/rounds").status_code == 401
    make_player("Ana", password="segredo")
    login(client, "Ana", "segredo")
    assert client.get("/admin/rounds").status_code == 403


def test_admin_round_and_scores(app, client):
    make_player("Chefe", password="segredo", is_admin=True)
    login(client, "Chefe", "segredo")
    games = [
        {"kickoff_at": k.isoformat(), "team1": f"Casa {i}", "team2": f"Fora {i}"}
        for i, k in enumerate(_future())
    ]

    saved = client.post("/admin/rounds", json={"round": 2, "games": games}).get_json()
    assert saved["ok"] is True
    ids = saved["savedIds"]
    assert len(ids) == 5

    for game, match_id in zip(games, ids):
        game["id"] = match_id
    games[0]["team1"] = "Casa renomeada"
    again = client.post("/admin/rounds", json={"round": 2, "games": games}).get_json()
    assert again["savedIds"] == ids

    short = client.post("/admin/rounds", json={"round": 2, "games": games[:4]})
    assert short.status_code == 400

    scores = client.post(
        "/admin/scores",
        json={"round": 2, "scores": [{"gameId": ids[0], "score1": 1, "score2": 0}]},
    )
    assert scores.get_json()["updated"] == [ids[0]]

    block = client.get("/admin/block?round=2").get_json()
    assert block["games"][0]["team1"] == "Casa renomeada"
    assert block["games"][0]["gabarito"] == "1"

    assert client.get("/admin/rounds").get_json() == {"rounds": [2]}
    assert client.get("/admin/last-round").get_json() == {"lastRound": 2}

    missing = client.post(
        "/admin/scores",
        json={"round": 3, "scores": [{"gameId": ids[0], "score1": 1, "score2": 0}]},
    )
    assert missing.status_code == 404


def test_json_responses_are_not_cached(app, client):
    response = client.get("/api/ranking/overall")
    assert response.headers["Cache-Control"] == "no-store, max-age=0"
    assert response.headers["X-Content-Type-Options"] == "nosniff"
