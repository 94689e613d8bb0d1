"""SQLAlchemy ORM models."""
import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, Float, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.infrastructure.database.base import Base


def generate_uuid() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Account(Base):
    __tablename__ = "accounts"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    username = Column(String(50), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), default="user")
    is_active = Column(Boolean, default=True)
    email = Column(String(100), unique=True)
    display_name = Column(String(100))
    phone = Column(String(32))
    language = Column(String(8), default="en")

    # Legacy rows only carry the euro float in ``wallet``.
    wallet_available_cents = Column(Integer)
    wallet_reserved_cents = Column(Integer)
    wallet = Column(Float)
    wallet_version = Column(Integer)

    premium_parks = Column(Integer)
    premium_parks_initialized = Column(Boolean, default=False)
    transactions = Column(Integer, nullable=False, default=0)

    kyc_status = Column(String(32))
    kyc_session_id = Column(String(255))
    kyc_provider = Column(String(32))
    kyc_updated_at = Column(DateTime(timezone=True))

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    last_login_at = Column(DateTime(timezone=True))

    vehicles = relationship("Vehicle", back_populates="owner", cascade="all, delete-orphan")


class Vehicle(Base):
    __tablename__ = "vehicles"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    owner_id = Column(String(36), ForeignKey("accounts.id"), nullable=False, index=True)
    model = Column(String(100), nullable=False)
    plate = Column(String(32), nullable=False)
    photo = Column(String(1024))
    is_default = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    owner = relationship("Account", back_populates="vehicles")


class Spot(Base):
    __tablename__ = "spots"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    host_id = Column(String(36), ForeignKey("accounts.id"), index=True)
    host_name = Column(String(100))
    car_model = Column(String(100))
    host_vehicle_plate = Column(String(32))
    host_vehicle_id = Column(String(36))
    time = Column(Integer)
    price = Column(String(32))
    length = Column(Float)
    lat = Column(Float)
    lng = Column(Float)
    x = Column(Float)
    y = Column(Float)
    address = Column(String(255))
    status = Column(String(20), default="available", index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    booking_session_id = Column(String(64))
    booked_at = Column(DateTime(timezone=True))
    book_op_id = Column(String(64))
    book_op_at = Column(DateTime(timezone=True))
    booker_id = Column(String(36), index=True)
    booker_name = Column(String(100))
    booker_accepted = Column(Boolean, default=False)
    booker_accepted_at = Column(DateTime(timezone=True))
    nav_op_id = Column(String(64))
    nav_op_at = Column(DateTime(timezone=True))
    booker_vehicle_plate = Column(String(32))
    booker_vehicle_id = Column(String(36))

    premium_parks_applied_at = Column(DateTime(timezone=True))
    premium_parks_applied_by = Column(String(36))
    premium_parks_booker_delta = Column(Integer)
    premium_parks_booker_after = Column(Integer)
    premium_parks_host_delta = Column(Integer)
    premium_parks_host_after = Column(Integer)

    host_verified_booker_plate = Column(Boolean, default=False)
    host_verified_booker_plate_at = Column(DateTime(timezone=True))
    host_confirmed_booker_plate = Column(String(32))
    host_confirmed_booker_plate_norm = Column(String(32))
    booker_verified_host_plate = Column(Boolean, default=False)
    booker_verified_host_plate_at = Column(DateTime(timezone=True))
    booker_confirmed_host_plate = Column(String(32))
    booker_confirmed_host_plate_norm = Column(String(32))
    plate_confirmed = Column(Boolean, default=False)

    completed_at = Column(DateTime(timezone=True))
    cancelled_at = Column(DateTime(timezone=True))
    cancelled_by = Column(String(36))
    cancelled_by_role = Column(String(16))
    cancelled_for = Column(String(36))
    cancelled_for_name = Column(String(100))

    host = relationship("Account")


class WalletLedgerEntry(Base):
    __tablename__ = "wallet_ledger"

    id = Column(String(255), primary_key=True)
    uid = Column(String(36), nullable=False, index=True)
    type = Column(String(20), nullable=False)  # topup, booking_debit, booking_credit
    amount_cents = Column(Integer, nullable=False)
    balance_after_cents = Column(Integer, nullable=False)
    currency = Column(String(10), nullable=False, default="eur")
    spot_id = Column(String(36))
    booking_session_id = Column(String(64))
    counterparty_uid = Column(String(36))
    session_id = Column(String(255))
    payment_intent_id = Column(String(255))
    created_at = Column(DateTime(timezone=True), default=utcnow)


class WalletTopup(Base):
    __tablename__ = "wallet_topups"

    # Stripe checkout session id; the primary key makes crediting idempotent.
    id = Column(String(255), primary_key=True)
    uid = Column(String(36), nullable=False, index=True)
    amount_cents = Column(Integer, nullable=False)
    fee_cents = Column(Integer, nullable=False, default=0)
    total_cents = Column(Integer, nullable=False)
    status = Column(String(20), nullable=False, default="paid")
    currency = Column(String(10), nullable=False, default="eur")
    session_id = Column(String(255))
    payment_intent_id = Column(String(255))
    created_at = Column(DateTime(timezone=True), default=utcnow)


class SwapTransaction(Base):
    __tablename__ = "swap_transactions"

    id = Column(String(255), primary_key=True)
    user_id = Column(String(36), nullable=False, index=True)
    spot_id = Column(String(36), nullable=False)
    booking_session_id = Column(String(64))
    status = Column(String(20), nullable=False)  # started, accepted, concluded
    role = Column(String(10), nullable=False)  # host, booker
    host_id = Column(String(36))
    host_name = Column(String(100))
    booker_id = Column(String(36))
    booker_name = Column(String(100))
    amount_cents = Column(Integer, nullable=False, default=0)
    title = Column(String(255))
    concluded_counted_at = Column(DateTime(timezone=True))
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
