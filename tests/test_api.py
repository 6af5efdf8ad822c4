def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.get_json() == {"status": "ok"}


def test_requests_without_token_are_401(client):
    resp = client.post("/shifts/clock-in", json={})
    assert resp.status_code == 401
    assert resp.get_json()["error"] == "not_authenticated"

    resp = client.get("/me", headers={"Authorization": "Bearer garbage"})
    assert resp.status_code == 401


def test_clock_in_out_flow(client, token):
    alice = token("alice")

    resp = client.post(
        "/shifts/clock-in",
        json={"note": "start", "latitude": 13.067014, "longitude": 77.466541},
        headers=alice,
    )
    assert resp.status_code == 201
    shift = resp.get_json()
    assert shift["status"] == "ACTIVE"
    assert shift["clock_in_note"] == "start"
    assert shift["clock_in_location"] == {"latitude": 13.067014, "longitude": 77.466541}

    resp = client.post("/shifts/clock-in", json={}, headers=alice)
    assert resp.status_code == 409
    assert resp.get_json()["error"] == "already_active"

    resp = client.get("/shifts/active", headers=alice)
    assert resp.get_json()["id"] == shift["id"]

    resp = client.post("/shifts/clock-out", json={"note": "done"}, headers=alice)
    assert resp.status_code == 200
    assert resp.get_json()["status"] == "COMPLETED"

    resp = client.post("/shifts/clock-out", json={}, headers=alice)
    assert resp.status_code == 409
    assert resp.get_json()["error"] == "no_active_shift"

    resp = client.get("/shifts/active", headers=alice)
    assert resp.get_json() is None

    resp = client.get("/shifts/history?page=1&limit=5", headers=alice)
    body = resp.get_json()
    assert body["pagination"] == {"page": 1, "limit": 5, "total": 1, "pages": 1}
    assert body["shifts"][0]["id"] == shift["id"]


def test_out_of_range_clock_in(client, token):
    resp = client.post("/shifts/clock-in", json={"latitude": 13.1, "longitude": 77.5}, headers=token("bob"))
    assert resp.status_code == 422
    body = resp.get_json()
    assert body["error"] == "out_of_range"
    assert body["distance"] > 2000
    assert body["allowed_radius"] == 2000
    assert body["location_name"] == "Main Healthcare Center"


def test_invalid_body_is_400(client, token):
    resp = client.post("/shifts/clock-in", json={"latitude": "north", "longitude": 77.5}, headers=token("bob"))
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "invalid_input"

    resp = client.post("/shifts/clock-in", json=[1, 2], headers=token("bob"))
    assert resp.status_code == 400


def test_manager_only_routes(client, token):
    alice = token("alice")
    boss = token("boss", role="MANAGER")
    client.post("/shifts/clock-in", json={}, headers=alice)

    for path in ("/dashboard/stats", "/staff/active", "/shifts/logs", "/workers"):
        resp = client.get(path, headers=alice)
        assert resp.status_code == 403, path
        assert resp.get_json()["error"] == "access_denied"

    stats = client.get("/dashboard/stats", headers=boss).get_json()
    assert stats == {"total_staff": 1, "active_staff": 1, "today_shifts": 1, "hours_worked": 0.0}

    rows = client.get("/dashboard/stats?view=workers", headers=boss).get_json()
    assert rows[0]["clock_ins_today"] == 1

    assert client.get("/dashboard/stats?view=monthly", headers=boss).status_code == 400

    active = client.get("/staff/active", headers=boss).get_json()
    assert [a["external_id"] for a in active] == ["alice"]

    logs = client.get("/shifts/logs", headers=boss).get_json()
    assert logs["shifts"][0]["worker"]["external_id"] == "alice"
    assert logs["pagination"]["limit"] == 50

    workers = client.get("/workers", headers=boss).get_json()
    assert {w["external_id"]: w["shift_count"] for w in workers} == {"alice": 1, "boss": 0}


def test_locations(client, token):
    boss = token("boss", role="MANAGER")

    listed = client.get("/locations", headers=token("alice")).get_json()
    assert listed[0]["name"] == "Main Healthcare Center"
    assert listed[0]["radius"] == 2000

    resp = client.put("/locations", json={"name": "Annex", "latitude": 13.1, "longitude": 77.5, "radius": 300}, headers=token("alice"))
    assert resp.status_code == 403

    resp = client.put("/locations", json={"name": "Annex", "latitude": 13.1, "longitude": 77.5}, headers=boss)
    assert resp.status_code == 400

    resp = client.put("/locations", json={"name": "Annex", "latitude": 13.1, "longitude": 77.5, "radius": 300}, headers=boss)
    assert resp.status_code == 200
    assert resp.get_json()["updated_at"] is not None

    resp = client.post("/shifts/clock-in", json={"latitude": 13.1, "longitude": 77.5}, headers=token("alice"))
    assert resp.status_code == 201


def test_profile_and_roles(client, token):
    alice = token("alice")
    boss = token("boss", role="MANAGER")

    me = client.get("/me", headers=alice).get_json()
    assert me["role"] == "CAREWORKER"
    assert me["email"] == "alice@example.com"

    resp = client.patch("/me", json={"name": "Alice Johnson"}, headers=alice)
    assert resp.get_json()["name"] == "Alice Johnson"

    resp = client.patch(f"/workers/{me['id']}/role", json={"role": "MANAGER"}, headers=boss)
    assert resp.status_code == 200
    assert resp.get_json()["role"] == "MANAGER"

    resp = client.patch("/workers/999/role", json={"role": "MANAGER"}, headers=boss)
    assert resp.status_code == 404

    assert client.get("/dashboard/stats", headers=alice).status_code == 200


def test_unknown_route_is_json_404(client):
    resp = client.get("/nope")
    assert resp.status_code == 404
    assert resp.get_json()["error"] == "not_found"
