import json
import time

from sqlalchemy import select

from app.db.models import Account, WalletLedgerEntry, WalletTopup
from conftest import event_body, register, sign_payload


async def _post_event(client, body: bytes, signature: str | None = None):
    headers = {"Content-Type": "application/json"}
    headers["Stripe-Signature"] = signature if signature is not None else sign_payload(body)
    return await client.post("/api/webhooks/stripe", content=body, headers=headers)


def _checkout(uid: str, session_id: str = "cs_test_1", amount: str = "1000", **extra):
    obj = {
        "id": session_id,
        "object": "checkout.session",
        "payment_status": "paid",
        "currency": "eur",
        "payment_intent": "pi_123",
        "client_reference_id": uid,
        "metadata": {"uid": uid, "amountCents": amount, "feeCents": "40", "totalCents": "1040"},
    }
    obj.update(extra)
    return obj


async def test_create_topup_session(client, gateway):
    _, headers = await register(client, "payer")

    response = await client.post(
        "/api/wallet/topups",
        json={"amount": "10,00", "return_url": "https://app.parkswap.test/wallet"},
        headers=headers,
    )

    assert response.status_code == 201, response.text
    body = response.json()
    assert body["session_id"] == "cs_test_1"
    assert body["url"].startswith("https://checkout.stripe.test/")
    assert (body["amount_cents"], body["fee_cents"], body["total_cents"]) == (1000, 40, 1040)

    params = gateway.checkout_calls[0]
    assert params["mode"] == "payment"
    assert params["payment_method_types"] == ["card"]
    names = [item["price_data"]["product_data"]["name"] for item in params["line_items"]]
    assert names == ["Recharge wallet 10,00€", "Frais de service 0,40€"]
    assert params["success_url"] == (
        "https://app.parkswap.test/wallet?topup=success&session_id={CHECKOUT_SESSION_ID}"
    )
    assert params["cancel_url"] == "https://app.parkswap.test/wallet?topup=cancel"
    assert params["metadata"]["amountCents"] == "1000"
    assert params["metadata"]["totalCents"] == "1040"


async def test_topup_amount_validation(client):
    _, headers = await register(client, "validator")

    invalid = await client.post("/api/wallet/topups", json={"amount": "lots"}, headers=headers)
    assert invalid.status_code == 400
    assert invalid.json()["detail"]["code"] == "invalid_amount"

    too_small = await client.post("/api/wallet/topups", json={"amount": 0.5}, headers=headers)
    assert too_small.status_code == 400
    assert too_small.json()["detail"]["code"] == "amount_out_of_range"

    too_big = await client.post("/api/wallet/topups", json={"amount": 100.01}, headers=headers)
    assert too_big.json()["detail"]["code"] == "amount_out_of_range"


async def test_topup_requires_stripe(client, gateway):
    _, headers = await register(client, "nostripe")
    gateway._secret_key = ""

    response = await client.post("/api/wallet/topups", json={"amount": 10}, headers=headers)

    assert response.status_code == 503
    assert response.json()["detail"]["code"] == "stripe_not_configured"


async def test_checkout_completed_credits_wallet_once(client, session):
    uid, headers = await register(client, "credited")
    body = event_body("checkout.session.completed", _checkout(uid))

    first = await _post_event(client, body)
    second = await _post_event(client, body)

    assert first.status_code == 200
    assert first.json() == {"received": True}
    assert second.json() == {"received": True}

    wallet = (await client.get("/api/wallet", headers=headers)).json()
    assert wallet["available_cents"] == 1000

    topups = (await session.execute(select(WalletTopup))).scalars().all()
    assert len(topups) == 1
    assert (topups[0].fee_cents, topups[0].total_cents, topups[0].payment_intent_id) == (40, 1040, "pi_123")

    ledger = (await session.execute(select(WalletLedgerEntry))).scalars().all()
    assert [(row.id, row.balance_after_cents) for row in ledger] == [(f"topup_cs_test_1_{uid}", 1000)]

    listed = (await client.get("/api/wallet/topups", headers=headers)).json()["topups"]
    assert [item["id"] for item in listed] == ["cs_test_1"]
    entries = (await client.get("/api/wallet/ledger", headers=headers)).json()["entries"]
    assert entries[0]["type"] == "topup"


async def test_checkout_credit_migrates_legacy_wallet(client, session):
    uid, headers = await register(client, "legacy-payer")
    account = await session.get(Account, uid)
    account.wallet = 2.5
    account.wallet_available_cents = None
    account.wallet_reserved_cents = None
    await session.commit()

    await _post_event(client, event_body("checkout.session.completed", _checkout(uid, amount="500")))

    wallet = (await client.get("/api/wallet", headers=headers)).json()
    assert wallet["available_cents"] == 750
    assert wallet["reserved_cents"] == 0


async def test_unpaid_or_malformed_checkouts_are_acknowledged_only(client):
    uid, headers = await register(client, "unpaid")

    unpaid = event_body("checkout.session.completed", _checkout(uid, payment_status="unpaid"))
    malformed = event_body("checkout.session.completed", _checkout(uid, "cs_test_2", amount="n/a"))
    other = event_body("invoice.paid", {"id": "in_1"})
    for body in (unpaid, malformed, other):
        response = await _post_event(client, body)
        assert response.status_code == 200
        assert response.json() == {"received": True}

    wallet = (await client.get("/api/wallet", headers=headers)).json()
    assert wallet["available_cents"] == 0


async def test_uid_falls_back_to_client_reference(client):
    uid, headers = await register(client, "referenced")
    checkout = _checkout(uid)
    checkout["metadata"].pop("uid")

    await _post_event(client, event_body("checkout.session.completed", checkout))

    wallet = (await client.get("/api/wallet", headers=headers)).json()
    assert wallet["available_cents"] == 1000


async def test_bad_signature_is_rejected(client):
    body = event_body("checkout.session.completed", {"id": "cs_x"})

    wrong_secret = await _post_event(client, body, sign_payload(body, secret="whsec_other"))
    assert wrong_secret.status_code == 400
    assert wrong_secret.text.startswith("Webhook signature verification failed")

    stale = await _post_event(client, body, sign_payload(body, timestamp=int(time.time()) - 3600))
    assert stale.status_code == 400

    missing = await client.post("/api/webhooks/stripe", content=body)
    assert missing.status_code == 400


async def test_webhook_without_secret_is_a_server_error(client, gateway):
    gateway._webhook_secret = ""
    body = event_body("checkout.session.completed", {"id": "cs_x"})

    response = await _post_event(client, body)

    assert response.status_code == 500
    assert "webhook secret" in response.text


async def test_events_with_malformed_payloads_are_acknowledged(client):
    uid, headers = await register(client, "odd-payloads")
    bodies = [
        event_body("checkout.session.completed", ["cs_list"]),
        json.dumps({"id": "evt_str", "type": "checkout.session.completed", "data": {"object": "cs_str"}}).encode(),
        json.dumps({"id": "evt_nodata", "type": "identity.verification_session.verified", "data": []}).encode(),
        event_body("checkout.session.completed", {**_checkout(uid), "metadata": "uid=" + uid}),
        event_body("identity.verification_session.verified", {"id": "vs_odd", "metadata": ["uid"]}),
    ]

    for body in bodies:
        response = await _post_event(client, body)
        assert response.status_code == 200
        assert response.json() == {"received": True}

    me = (await client.get("/api/me", headers=headers)).json()
    assert me["kyc_status"] is None
    wallet = (await client.get("/api/wallet", headers=headers)).json()
    assert wallet["available_cents"] == 0
