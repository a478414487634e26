def _create_full_room(client):
    created = client.post("/room/create", json={"playerName": "Alice"}).json()
    room_id = created["roomId"]
    ids = {"Alice": created["playerId"]}
    for name in ("Bob", "Carol", "Dave"):
        res = client.post("/room/join", json={"roomId": room_id, "playerName": name})
        assert res.status_code == 200
        ids[name] = res.json()["playerId"]
    return room_id, ids


def _roles(client, room_id, ids):
    roles = {}
    for name, player_id in ids.items():
        body = client.get(f"/role/me/{room_id}/{player_id}").json()
        roles[body["role"]] = {"name": name, "id": player_id, "instruction": body["instruction"]}
    return roles


def test_root_and_health(client):
    assert client.get("/").json()["status"] == "ok"
    assert client.get("/health").json() == {"status": "healthy"}


def test_create_room(client):
    res = client.post("/room/create", json={"playerName": "Alice"})
    assert res.status_code == 200
    data = res.json()
    assert data["message"] == "Room created"
    assert data["roomId"]
    assert data["playerId"]


def test_create_room_requires_name(client):
    res = client.post("/room/create", json={})
    assert res.status_code == 400
    assert res.json() == {"error": "ValidationError", "detail": "Name required"}


def test_join_and_list_players(client):
    room_id, _ = _create_full_room(client)

    res = client.get(f"/room/players/{room_id}")
    assert res.status_code == 200
    assert res.json() == {"players": ["Alice", "Bob", "Carol", "Dave"], "count": 4}

    res = client.post("/room/join", json={"roomId": room_id, "playerName": "Eve"})
    assert res.status_code == 400
    assert res.json()["error"] == "CapacityError"


def test_join_missing_room(client):
    res = client.post("/room/join", json={"roomId": "NOPE42", "playerName": "Bob"})
    assert res.status_code == 404
    assert res.json()["error"] == "NotFoundError"


def test_join_duplicate_name(client):
    room_id = client.post("/room/create", json={"playerName": "Alice"}).json()["roomId"]
    res = client.post("/room/join", json={"roomId": room_id, "playerName": "Alice"})
    assert res.status_code == 400
    assert res.json()["error"] == "ValidationError"


def test_players_of_missing_room(client):
    assert client.get("/room/players/NOPE42").json() == {"players": [], "count": 0}


def test_room_state_polling(client):
    room_id, _ = _create_full_room(client)

    state = client.get(f"/room/state/{room_id}").json()
    assert state == {
        "roomId": room_id,
        "status": "WAITING",
        "rolesAssigned": False,
        "playerCount": 4,
        "capacity": 4,
    }

    client.post(f"/room/assign/{room_id}")
    state = client.get(f"/room/state/{room_id}").json()
    assert state["status"] == "PLAYING"
    assert state["rolesAssigned"] is True

    assert client.get("/room/state/NOPE42").status_code == 404


def test_assign_needs_four_players(client):
    room_id = client.post("/room/create", json={"playerName": "Alice"}).json()["roomId"]
    client.post("/room/join", json={"roomId": room_id, "playerName": "Bob"})
    client.post("/room/join", json={"roomId": room_id, "playerName": "Carol"})

    res = client.post(f"/room/assign/{room_id}")
    assert res.status_code == 400
    assert res.json() == {"error": "IncompletePlayersError", "detail": "Need 4 players"}


def test_assign_only_once(client):
    room_id, _ = _create_full_room(client)

    res = client.post(f"/room/assign/{room_id}")
    assert res.status_code == 200
    assert res.json() == {"message": "Roles assigned. Game started!"}

    res = client.post(f"/room/assign/{room_id}")
    assert res.status_code == 409
    assert res.json()["error"] == "InvalidStateError"


def test_role_before_assignment(client):
    room_id, ids = _create_full_room(client)

    res = client.get(f"/role/me/{room_id}/{ids['Alice']}")
    assert res.status_code == 400
    assert res.json() == {"error": "NotReadyError", "detail": "Wait for game start"}


def test_roles_after_assignment(client):
    room_id, ids = _create_full_room(client)
    client.post(f"/room/assign/{room_id}")

    roles = _roles(client, room_id, ids)
    assert set(roles) == {"Raja", "Mantri", "Sipahi", "Chor"}
    assert roles["Mantri"]["instruction"] == "Guess the Chor!"
    assert roles["Chor"]["instruction"] == "Wait for Mantri..."

    res = client.get(f"/role/me/{room_id}/missing")
    assert res.status_code == 404


def test_correct_guess_flow(client):
    room_id, ids = _create_full_room(client)
    client.post(f"/room/assign/{room_id}")
    roles = _roles(client, room_id, ids)

    res = client.get(f"/result/{room_id}")
    assert res.status_code == 400
    assert res.json() == {"error": "GameInProgressError", "detail": "Game running"}

    guess = {"mantriPlayerId": roles["Mantri"]["id"], "suspectedPlayerName": roles["Chor"]["name"]}
    res = client.post(f"/room/guess/{room_id}", json=guess)
    assert res.status_code == 200
    assert res.json() == {"result": "Correct! Mantri caught the Chor.", "suspectRole": "Chor"}

    res = client.post(f"/room/guess/{room_id}", json=guess)
    assert res.status_code == 409
    assert res.json() == {"error": "InvalidStateError", "detail": "Game already resolved"}

    players = client.get(f"/result/{room_id}").json()["players"]
    assert [p["name"] for p in players] == ["Alice", "Bob", "Carol", "Dave"]
    scores = {p["role"]: p["score"] for p in players}
    assert scores == {"Raja": 1000, "Mantri": 800, "Sipahi": 500, "Chor": 0}


def test_wrong_guess_flow(client):
    room_id, ids = _create_full_room(client)
    client.post(f"/room/assign/{room_id}")
    roles = _roles(client, room_id, ids)

    guess = {"mantriPlayerId": roles["Mantri"]["id"], "suspectedPlayerName": roles["Raja"]["name"]}
    res = client.post(f"/room/guess/{room_id}", json=guess)
    assert res.json() == {"result": "Wrong! Chor steals points.", "suspectRole": "Raja"}

    scores = {p["role"]: p["score"] for p in client.get(f"/result/{room_id}").json()["players"]}
    assert scores == {"Raja": 1000, "Mantri": 0, "Sipahi": 500, "Chor": 800}


def test_guess_errors(client):
    room_id, ids = _create_full_room(client)
    client.post(f"/room/assign/{room_id}")
    roles = _roles(client, room_id, ids)

    res = client.post(
        f"/room/guess/{room_id}",
        json={"mantriPlayerId": roles["Raja"]["id"], "suspectedPlayerName": roles["Chor"]["name"]}
    )
    assert res.status_code == 403
    assert res.json() == {"error": "AuthorizationError", "detail": "Not Mantri"}

    res = client.post(
        f"/room/guess/{room_id}",
        json={"mantriPlayerId": roles["Mantri"]["id"], "suspectedPlayerName": "Eve"}
    )
    assert res.status_code == 404
    assert res.json()["error"] == "NotFoundError"

    res = client.post(f"/room/guess/{room_id}", json={"mantriPlayerId": roles["Mantri"]["id"]})
    assert res.status_code == 422


def test_result_missing_room(client):
    res = client.get("/result/NOPE42")
    assert res.status_code == 404
    assert res.json()["error"] == "NotFoundError"
