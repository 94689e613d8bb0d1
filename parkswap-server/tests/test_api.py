from conftest import event_body, register, sign_payload


async def _fund(client, uid: str, cents: int, session_id: str) -> None:
    body = event_body(
        "checkout.session.completed",
        {
            "id": session_id,
            "payment_status": "paid",
            "metadata": {"uid": uid, "amountCents": str(cents)},
        },
    )
    response = await client.post(
        "/api/webhooks/stripe",
        content=body,
        headers={"Content-Type": "application/json", "Stripe-Signature": sign_payload(body)},
    )
    assert response.status_code == 200


async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


async def test_register_login_and_profile(client):
    uid, headers = await register(client, "alice", "Alice")

    duplicate = await client.post("/api/auth/register", json={"username": "alice", "password": "secret123"})
    assert duplicate.status_code == 400

    bad_login = await client.post("/api/auth/login", json={"username": "alice", "password": "wrong"})
    assert bad_login.status_code == 401

    login = await client.post("/api/auth/login", json={"username": "alice", "password": "secret123"})
    assert login.status_code == 200
    assert login.json()["account_id"] == uid

    me = (await client.get("/api/me", headers=headers)).json()
    assert me["display_name"] == "Alice"
    assert me["premium_parks"] == 5
    assert me["transactions"] == 0
    assert me["last_login_at"] is not None
    assert me["kyc_session_id"] is None
    assert me["kyc_provider"] is None

    await _fund(client, uid, 1250, "cs_profile")
    me = (await client.get("/api/me", headers=headers)).json()
    assert me["wallet_available_cents"] == 1250
    assert me["wallet_reserved_cents"] == 0
    assert me["wallet"] == 12.5
    assert me["wallet_version"] == 1

    patched = await client.patch("/api/me", json={"display_name": "Alice B.", "language": "fr"}, headers=headers)
    assert patched.status_code == 200
    assert patched.json()["display_name"] == "Alice B."
    assert patched.json()["language"] == "fr"
    assert patched.json()["phone"] is None


async def test_requests_without_a_valid_token_are_rejected(client):
    missing = await client.get("/api/wallet")
    forged = await client.get("/api/wallet", headers={"Authorization": "Bearer not-a-token"})

    assert missing.status_code in (401, 403)
    assert forged.status_code == 401


async def test_wallet_starts_empty(client):
    _, headers = await register(client, "empty")

    wallet = (await client.get("/api/wallet", headers=headers)).json()
    ledger = (await client.get("/api/wallet/ledger", headers=headers)).json()

    assert wallet["available_cents"] == 0
    assert wallet["reserved_cents"] == 0
    assert wallet["currency"] == "eur"
    assert ledger["entries"] == []


async def test_paid_swap_end_to_end(client):
    host_id, host = await register(client, "hugo", "Hugo")
    booker_id, booker = await register(client, "bea", "Bea")
    await _fund(client, booker_id, 1200, "cs_fund_bea")

    proposed = await client.post(
        "/api/spots",
        json={"time": 30, "price": "5", "car_model": "Clio", "vehicle_plate": "AB-123-CD", "lat": 48.85, "lng": 2.35},
        headers=host,
    )
    assert proposed.status_code == 201, proposed.text
    spot = proposed.json()
    assert spot["status"] == "available"
    assert spot["price_cents"] == 500
    assert spot["host_name"] == "Hugo"

    second = await client.post("/api/spots", json={"price": "1"}, headers=host)
    assert second.status_code == 409
    assert second.json()["detail"]["code"] == "active_spot_exists"

    available = (await client.get("/api/spots")).json()["spots"]
    assert [item["id"] for item in available] == [spot["id"]]

    booked = await client.post(
        f"/api/spots/{spot['id']}/book",
        json={"booking_session_id": "sess-1", "op_id": "op-1", "booker_vehicle_plate": "ZZ-999-ZZ"},
        headers=booker,
    )
    assert booked.status_code == 200, booked.text
    assert booked.json() == {
        "ok": True,
        "is_free": False,
        "booking_session_id": "sess-1",
        "host_id": host_id,
        "already_booked": False,
    }

    assert (await client.get("/api/wallet", headers=booker)).json()["available_cents"] == 700
    assert (await client.get("/api/wallet", headers=host)).json()["available_cents"] == 500
    assert (await client.get("/api/spots", headers=booker)).json()["spots"] == []

    navigation = await client.post(
        f"/api/spots/{spot['id']}/navigation",
        json={"booking_session_id": "sess-1", "nav_op_id": "nav-1"},
        headers=booker,
    )
    assert navigation.status_code == 200, navigation.text
    assert navigation.json()["is_free"] is False
    assert navigation.json()["premium_parks_delta_applied"] is False

    wrong_plate = await client.post(
        f"/api/spots/{spot['id']}/booker-plate",
        json={"plate": "XX-000-XX", "booking_session_id": "sess-1"},
        headers=host,
    )
    assert wrong_plate.status_code == 409
    assert wrong_plate.json()["detail"]["code"] == "plate_mismatch"

    host_check = await client.post(
        f"/api/spots/{spot['id']}/booker-plate",
        json={"plate": "zz 999 zz", "booking_session_id": "sess-1"},
        headers=host,
    )
    assert host_check.json() == {"ok": True, "already": False, "finalized": False}

    booker_check = await client.post(
        f"/api/spots/{spot['id']}/host-plate",
        json={"plate": "ab123cd", "booking_session_id": "sess-1"},
        headers=booker,
    )
    assert booker_check.json() == {"ok": True, "already": False, "finalized": True}

    detail = (await client.get(f"/api/spots/{spot['id']}", headers=host)).json()
    assert detail["status"] == "completed"
    assert detail["plate_confirmed"] is True

    history = (await client.get("/api/history", headers=host)).json()["transactions"]
    assert len(history) == 1
    assert history[0]["status"] == "concluded"
    assert history[0]["role"] == "host"
    assert history[0]["title"] == "Bea ➜ Hugo"
    assert history[0]["amount_cents"] == 500

    booker_history = (await client.get("/api/history", headers=booker)).json()["transactions"]
    assert [(item["role"], item["status"]) for item in booker_history] == [("booker", "concluded")]

    leaderboard = (await client.get("/api/leaderboard", headers=booker)).json()["entries"]
    counted = {entry["account_id"]: entry["transactions"] for entry in leaderboard}
    assert counted[host_id] == 1
    assert counted[booker_id] == 1
    assert [entry["rank"] for entry in leaderboard] == list(range(1, len(leaderboard) + 1))

    mine = (await client.get("/api/spots/mine", headers=booker)).json()["spots"]
    assert [item["id"] for item in mine] == [spot["id"]]


async def test_booking_without_funds_is_refused(client):
    _, host = await register(client, "pricey-host")
    _, booker = await register(client, "broke")
    spot = (await client.post("/api/spots", json={"price": "3,50"}, headers=host)).json()

    response = await client.post(f"/api/spots/{spot['id']}/book", json={}, headers=booker)

    assert response.status_code == 409
    detail = response.json()["detail"]
    assert detail["code"] == "insufficient_funds"
    assert detail["details"] == {"required_cents": 350, "available_cents": 0}
    assert (await client.get(f"/api/spots/{spot['id']}", headers=booker)).json()["status"] == "available"


async def test_free_swap_moves_premium_parks(client):
    host_id, host = await register(client, "free-host")
    booker_id, booker = await register(client, "free-booker")
    spot = (await client.post("/api/spots", json={"price": 0}, headers=host)).json()

    booked = await client.post(f"/api/spots/{spot['id']}/book", json={"booking_session_id": "free-1"}, headers=booker)
    assert booked.json()["is_free"] is True

    navigation = (
        await client.post(
            f"/api/spots/{spot['id']}/navigation",
            json={"booking_session_id": "free-1", "nav_op_id": "nav-free"},
            headers=booker,
        )
    ).json()
    assert navigation["premium_parks_delta_applied"] is True
    assert navigation["booker_before"] == 5
    assert navigation["booker_after"] == 4

    assert (await client.get("/api/me", headers=booker)).json()["premium_parks"] == 4
    assert (await client.get("/api/me", headers=host)).json()["premium_parks"] == 5

    replay = (
        await client.post(
            f"/api/spots/{spot['id']}/navigation",
            json={"booking_session_id": "free-1", "nav_op_id": "nav-free"},
            headers=booker,
        )
    ).json()
    assert replay["premium_parks_delta_applied"] is False
    assert (await client.get("/api/me", headers=booker)).json()["premium_parks"] == 4


async def test_host_only_actions(client):
    _, host = await register(client, "owner-host")
    _, stranger = await register(client, "stranger")
    spot = (await client.post("/api/spots", json={"price": "2"}, headers=host)).json()

    forbidden = await client.post(f"/api/spots/{spot['id']}/cancel", headers=stranger)
    assert forbidden.status_code == 403
    assert forbidden.json()["detail"]["code"] == "not_host"

    cancelled = await client.post(f"/api/spots/{spot['id']}/cancel", headers=host)
    assert cancelled.json()["deleted"] is True

    missing = await client.get(f"/api/spots/{spot['id']}", headers=host)
    assert missing.status_code == 404


async def test_booker_cancellation_reopens_spot(client):
    _, host = await register(client, "reopen-host")
    _, booker = await register(client, "reopen-booker")
    spot = (await client.post("/api/spots", json={"price": 0}, headers=host)).json()
    await client.post(f"/api/spots/{spot['id']}/book", json={"booking_session_id": "r-1"}, headers=booker)

    stale = await client.post(
        f"/api/spots/{spot['id']}/cancel-booking",
        json={"booking_session_id": "other"},
        headers=booker,
    )
    assert stale.json()["stale"] is True

    released = await client.post(
        f"/api/spots/{spot['id']}/cancel-booking",
        json={"booking_session_id": "r-1"},
        headers=booker,
    )
    assert released.status_code == 200
    assert released.json()["ok"] is True

    detail = (await client.get(f"/api/spots/{spot['id']}", headers=host)).json()
    assert detail["status"] == "available"
    assert detail["booker_id"] is None
