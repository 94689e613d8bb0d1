"""Amount parsing, Stripe fee gross-up and return URL helpers."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Any, Mapping
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

_LEADING_NUMBER = re.compile(r"^\s*[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")

# Stripe substitutes this placeholder in success URLs; it must stay unescaped.
CHECKOUT_SESSION_PLACEHOLDER = "{CHECKOUT_SESSION_ID}"


@dataclass(frozen=True, slots=True)
class FeeBreakdown:
    fee_cents: int
    total_cents: int


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def clamp(value: float, low: float, high: float) -> float:
    return min(high, max(low, value))


def _as_number_text(value: Any) -> str | None:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return repr(value)
    if isinstance(value, str):
        return value.replace(",", ".", 1)
    return None


def parse_amount_to_cents(value: Any) -> int | None:
    """Parse a user supplied amount in euros into cents.

    Accepts ``12.5``, ``"12,50"`` and strings with trailing garbage
    (``"12.5 EUR"``). Returns ``None`` for anything without a leading number.
    """
    text = _as_number_text(value)
    if text is None:
        return None
    match = _LEADING_NUMBER.match(text)
    if not match:
        return None
    amount = float(match.group(0))
    if not math.isfinite(amount):
        return None
    cents = amount * 100
    if not math.isfinite(cents):
        return None
    return round_half_up(cents)


def parse_price_to_cents(value: Any) -> int | None:
    """Parse a stored spot price; the whole value must be numeric.

    Empty strings count as zero, missing or malformed values give ``None``.
    """
    if isinstance(value, str) and not value.strip():
        return 0
    text = _as_number_text(value)
    if text is None:
        return None
    try:
        amount = float(text.strip())
    except ValueError:
        return None
    if not math.isfinite(amount):
        return None
    return round_half_up(amount * 100)


def compute_fee_cents(amount_cents: int, fee_percent: float, fee_fixed: float) -> FeeBreakdown:
    """Gross up ``amount_cents`` so the payout after Stripe fees equals it."""
    percent = fee_percent / 100 if math.isfinite(fee_percent) else 0.0
    fixed = fee_fixed if math.isfinite(fee_fixed) else 0.0
    total = (amount_cents / 100 + fixed) / max(0.01, 1 - percent)
    total_cents = round_half_up(total * 100)
    fee_cents = max(0, total_cents - amount_cents)
    return FeeBreakdown(fee_cents=fee_cents, total_cents=total_cents)


def format_amount_label(cents: int) -> str:
    return f"{cents / 100:.2f}".replace(".", ",")


def normalize_return_url(value: Any) -> str:
    if not value:
        return ""
    try:
        parts = urlsplit(str(value))
    except ValueError:
        return ""
    if parts.scheme not in {"http", "https"} or not parts.netloc:
        return ""
    path = parts.path or "/"
    return urlunsplit((parts.scheme, parts.netloc, path, parts.query, parts.fragment))


def build_return_url(base_url: Any, params: Mapping[str, Any], fallback: str) -> str:
    normalized = normalize_return_url(base_url) or normalize_return_url(fallback)
    if not normalized:
        return ""
    parts = urlsplit(normalized)
    query = dict(parse_qsl(parts.query, keep_blank_values=True))
    for key, value in params.items():
        if value is None:
            continue
        query[key] = str(value)
    encoded = urlencode(query, safe="{}")
    return urlunsplit((parts.scheme, parts.netloc, parts.path, encoded, parts.fragment))


__all__ = [
    "CHECKOUT_SESSION_PLACEHOLDER",
    "FeeBreakdown",
    "build_return_url",
    "clamp",
    "compute_fee_cents",
    "format_amount_label",
    "normalize_return_url",
    "parse_amount_to_cents",
    "parse_price_to_cents",
    "round_half_up",
]
