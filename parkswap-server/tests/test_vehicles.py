from conftest import register


async def _add(client, headers, model: str, plate: str):
    response = await client.post("/api/vehicles", json={"model": model, "plate": plate}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


async def test_first_vehicle_becomes_default(client):
    _, headers = await register(client, "driver")

    first = await _add(client, headers, "Clio", "ab-123-cd")
    second = await _add(client, headers, "Zoe", "EF-456-GH")

    assert first["is_default"] is True
    assert first["plate"] == "AB-123-CD"
    assert second["is_default"] is False

    listed = (await client.get("/api/vehicles", headers=headers)).json()["vehicles"]
    assert [vehicle["id"] for vehicle in listed] == [first["id"], second["id"]]


async def test_select_default_moves_the_flag(client):
    _, headers = await register(client, "switcher")
    first = await _add(client, headers, "Clio", "AB-123-CD")
    second = await _add(client, headers, "Zoe", "EF-456-GH")

    response = await client.post(f"/api/vehicles/{second['id']}/default", headers=headers)

    assert response.status_code == 200
    listed = (await client.get("/api/vehicles", headers=headers)).json()["vehicles"]
    defaults = {vehicle["id"]: vehicle["is_default"] for vehicle in listed}
    assert defaults == {first["id"]: False, second["id"]: True}
    assert listed[0]["id"] == second["id"]


async def test_deleting_default_promotes_the_next_vehicle(client):
    _, headers = await register(client, "seller")
    first = await _add(client, headers, "Clio", "AB-123-CD")
    second = await _add(client, headers, "Zoe", "EF-456-GH")

    response = await client.delete(f"/api/vehicles/{first['id']}", headers=headers)

    assert response.status_code == 200
    listed = (await client.get("/api/vehicles", headers=headers)).json()["vehicles"]
    assert [(vehicle["id"], vehicle["is_default"]) for vehicle in listed] == [(second["id"], True)]


async def test_vehicles_are_scoped_to_their_owner(client):
    _, owner = await register(client, "owner")
    _, other = await register(client, "intruder")
    vehicle = await _add(client, owner, "Clio", "AB-123-CD")

    deleted = await client.delete(f"/api/vehicles/{vehicle['id']}", headers=other)
    selected = await client.post(f"/api/vehicles/{vehicle['id']}/default", headers=other)

    assert deleted.status_code == 404
    assert deleted.json()["detail"]["code"] == "vehicle_missing"
    assert selected.status_code == 404
    assert (await client.get("/api/vehicles", headers=other)).json()["vehicles"] == []


async def test_blank_plate_is_rejected(client):
    _, headers = await register(client, "blank")

    response = await client.post("/api/vehicles", json={"model": "Clio", "plate": "   "}, headers=headers)

    assert response.status_code == 400
    assert response.json()["detail"]["code"] == "vehicle_invalid"
