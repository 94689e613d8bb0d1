"""Shared fixtures: in-memory database, fake Stripe gateway and an HTTP client."""

from __future__ import annotations

import hashlib
import hmac
import json
import os
import time
from collections.abc import AsyncIterator
from typing import Any

os.environ.setdefault("SECURITY__SECRET_KEY", "parkswap-test-secret")
os.environ["SPOTS__EXPIRY_SWEEP_SECONDS"] = "0"
os.environ["ENVIRONMENT"] = "test"

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.core.config import DatabaseSettings
from app.db import models  # noqa: F401
from app.infrastructure.database.base import Base
from app.infrastructure.database.session import create_engine_from_settings
from app.infrastructure.payments import CheckoutSessionResult, StripeGateway, VerificationSessionResult
from app.modules.accounts import AccountCreateInput, AccountService

WEBHOOK_SECRET = "whsec_test_parkswap"


class FakeStripeGateway(StripeGateway):
    """Records outgoing Stripe calls; webhook verification stays the real one."""

    def __init__(self, secret_key: str = "sk_test_parkswap", webhook_secret: str = WEBHOOK_SECRET) -> None:
        super().__init__(secret_key, webhook_secret=webhook_secret)
        self.checkout_calls: list[dict[str, Any]] = []
        self.verification_calls: list[dict[str, Any]] = []
        self.verification_status: str | None = "requires_input"

    async def create_checkout_session(self, params: dict[str, Any]) -> CheckoutSessionResult:
        self._request_options()
        self.checkout_calls.append(params)
        session_id = f"cs_test_{len(self.checkout_calls)}"
        return CheckoutSessionResult(id=session_id, url=f"https://checkout.stripe.test/pay/{session_id}")

    async def create_verification_session(self, *, uid: str, return_url: str) -> VerificationSessionResult:
        self._request_options()
        self.verification_calls.append({"uid": uid, "return_url": return_url})
        session_id = f"vs_test_{len(self.verification_calls)}"
        return VerificationSessionResult(
            id=session_id,
            status=self.verification_status,
            url=f"https://verify.stripe.test/{session_id}",
            client_secret=f"{session_id}_secret",
        )


def sign_payload(payload: bytes, secret: str = WEBHOOK_SECRET, timestamp: int | None = None) -> str:
    """Build a ``Stripe-Signature`` header the way Stripe signs webhook deliveries."""
    ts = int(time.time()) if timestamp is None else timestamp
    signed = f"{ts}.".encode("utf-8") + payload
    digest = hmac.new(secret.encode("utf-8"), signed, hashlib.sha256).hexdigest()
    return f"t={ts},v1={digest}"


def event_body(event_type: str, obj: dict[str, Any]) -> bytes:
    return json.dumps({"id": "evt_test", "type": event_type, "data": {"object": obj}}).encode("utf-8")


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def file_session_factory(tmp_path) -> AsyncIterator[async_sessionmaker[AsyncSession]]:
    """Sessions on a SQLite file, one connection each, configured like the service engine."""
    engine = create_engine_from_settings(DatabaseSettings(url=f"sqlite+aiosqlite:///{tmp_path / 'parkswap.db'}"))
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()


@pytest.fixture
def session_factory(engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def session(session_factory) -> AsyncIterator[AsyncSession]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def gateway() -> FakeStripeGateway:
    return FakeStripeGateway()


@pytest.fixture
async def make_account(session):
    service = AccountService.with_session(session)

    async def _make(username: str, *, display_name: str | None = None, **fields: Any) -> models.Account:
        account = await service.create_account(
            AccountCreateInput(username=username, password="secret123", display_name=display_name)
        )
        model = await session.get(models.Account, account.id)
        for key, value in fields.items():
            setattr(model, key, value)
        await session.flush()
        return model

    return _make


@pytest.fixture
async def client(session_factory, gateway) -> AsyncIterator[AsyncClient]:
    from app.interfaces.http.deps import get_db_session, get_payment_gateway
    from app.main import app

    async def override_db_session() -> AsyncIterator[AsyncSession]:
        async with session_factory() as db:
            yield db

    app.dependency_overrides[get_db_session] = override_db_session
    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as http:
        yield http
    app.dependency_overrides.clear()


async def register(client: AsyncClient, username: str, display_name: str | None = None) -> tuple[str, dict[str, str]]:
    response = await client.post(
        "/api/auth/register",
        json={"username": username, "password": "secret123", "display_name": display_name},
    )
    assert response.status_code == 201, response.text
    body = response.json()
    return body["account_id"], {"Authorization": f"Bearer {body['access_token']}"}
