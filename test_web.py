"""test_web.py — FastAPI companion endpoints, driven through TestClient.

Run:  pytest test_web.py
"""
from __future__ import annotations

from fastapi.testclient import TestClient

from timed_phase import CONFLICT_POLICIES
from web.server import app, gm

client = TestClient(app)


def _create(seed: int = 42) -> dict:
    resp = client.post("/create", data={"seed": str(seed)})
    assert resp.status_code == 200
    return resp.json()


def test_create_game_view():
    view = _create()
    ui = view["ui"]
    assert view["meta"]["seed"] == 42
    assert ui["board"] == {
        "round_no": 1,
        "phase": "prepare_timed",
        "panic_level": "yellow",
        "ufos_left": 0,
        "alien_base_discovered": False,
        "result": None,
    }
    assert [a["action_id"] for a in ui["actions"]] == ["enter_timed_phase"]

    again = client.get(f"/g/{view['game_id']}")
    assert again.status_code == 200
    assert again.json()["ui"]["board"] == ui["board"]


def test_unknown_game_is_404():
    assert client.get("/g/nope").status_code == 404
    assert client.post("/g/nope/next").status_code == 404


def test_walk_one_round():
    gid = _create(seed=3)["game_id"]

    view = client.post(f"/g/{gid}/timed-phase").json()
    schedule = view["ui"]["schedule"]
    assert schedule["total"] == 7
    assert schedule["index"] == 0
    assert schedule["current"]["kind"] == "take_income"
    assert view["ui"]["prompt"] == schedule["current"]["title"]
    assert schedule["done"] == []

    back = next(a for a in view["ui"]["actions"] if a["action_id"] == "back")
    assert back["enabled"] is False

    for _ in range(7):
        view = client.post(f"/g/{gid}/next").json()
    assert view["ui"]["schedule"]["current"] is None
    assert len(view["ui"]["schedule"]["done"]) == 7

    # Confirm past the last prompt completes the timed phase
    view = client.post(f"/g/{gid}/next").json()
    assert view["ui"]["board"]["phase"] == "prepare_resolution"

    view = client.post(f"/g/{gid}/resolution-phase").json()
    assert view["ui"]["board"]["phase"] == "resolution"

    resp = client.post(f"/g/{gid}/resolution", data={"panic_level": "Orange", "ufos_left": "5"})
    assert resp.status_code == 200
    board = resp.json()["ui"]["board"]
    assert board["round_no"] == 2
    assert board["panic_level"] == "orange"
    assert board["ufos_left"] == 5
    assert board["phase"] == "prepare_timed"


def test_back_steps_cursor():
    gid = _create(seed=4)["game_id"]
    client.post(f"/g/{gid}/timed-phase")
    client.post(f"/g/{gid}/next")
    view = client.post(f"/g/{gid}/back").json()
    assert view["ui"]["schedule"]["index"] == 0
    assert view["ui"]["schedule"]["latest_index"] == 1


def test_action_in_wrong_phase_is_409():
    gid = _create()["game_id"]
    assert client.post(f"/g/{gid}/next").status_code == 409
    assert client.post(f"/g/{gid}/resolution", data={"panic_level": "red", "ufos_left": "1"}).status_code == 409


def test_bad_resolution_values_are_422():
    gid = _create()["game_id"]
    resp = client.post(f"/g/{gid}/resolution", data={"panic_level": "blue", "ufos_left": "1"})
    assert resp.status_code == 422
    resp = client.post(f"/g/{gid}/resolution", data={"panic_level": "red", "ufos_left": "-1"})
    assert resp.status_code == 422


def test_bad_conflict_policy_is_422():
    assert client.post("/create", data={"on_conflict": "shuffle"}).status_code == 422


def _to_resolution(gid: str) -> dict:
    view = client.post(f"/g/{gid}/timed-phase").json()
    for _ in range(view["ui"]["schedule"]["total"] + 1):
        view = client.post(f"/g/{gid}/next").json()
    return client.post(f"/g/{gid}/resolution-phase").json()


def test_ufos_left_above_cap_is_422():
    gid = _create()["game_id"]
    _to_resolution(gid)
    resp = client.post(f"/g/{gid}/resolution", data={"panic_level": "red", "ufos_left": "19"})
    assert resp.status_code == 422
    resp = client.post(f"/g/{gid}/resolution", data={"panic_level": "red", "ufos_left": "18"})
    assert resp.status_code == 200


def test_destroying_undiscovered_base_is_422():
    gid = _create()["game_id"]
    _to_resolution(gid)
    resp = client.post(
        f"/g/{gid}/resolution",
        data={"panic_level": "red", "ufos_left": "0", "alien_base_destroyed": "true"},
    )
    assert resp.status_code == 422
    assert client.get(f"/g/{gid}").json()["ui"]["board"]["phase"] == "resolution"


def test_game_ends_and_can_be_reopened():
    gid = _create(seed=11)["game_id"]
    _to_resolution(gid)

    resp = client.post(f"/g/{gid}/resolution", data={"panic_level": "alien", "ufos_left": "4"})
    assert resp.status_code == 200
    ui = resp.json()["ui"]
    assert ui["board"]["phase"] == "game_completed"
    assert ui["board"]["result"] == "defeat"
    assert ui["prompt"].endswith("Game over: Defeat.")
    assert [a["action_id"] for a in ui["actions"]] == ["reopen_resolution"]

    # Nothing else is allowed once the game is over
    assert client.post(f"/g/{gid}/timed-phase").status_code == 409
    assert client.post(f"/g/{gid}/next").status_code == 409
    assert client.post(f"/g/{gid}/resolution", data={"panic_level": "red", "ufos_left": "0"}).status_code == 409

    view = client.post(f"/g/{gid}/reopen-resolution").json()
    assert view["ui"]["board"]["phase"] == "resolution"
    assert view["ui"]["board"]["result"] is None
    assert client.post(f"/g/{gid}/reopen-resolution").status_code == 409


def test_destroying_discovered_base_wins():
    gid = _create(seed=12)["game_id"]
    sess = gm.get_game(gid)
    sess.state["alien_base_discovered"] = True
    _to_resolution(gid)

    resp = client.post(
        f"/g/{gid}/resolution",
        data={"panic_level": "orange", "ufos_left": "2", "alien_base_destroyed": "true"},
    )
    assert resp.json()["ui"]["board"]["result"] == "victory"


def test_conflict_policies_are_accepted():
    for name in CONFLICT_POLICIES:
        view = client.post("/create", data={"on_conflict": name}).json()
        assert view["meta"]["on_conflict"] == name
