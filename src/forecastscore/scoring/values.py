"""Parsing of raw prediction and outcome strings into typed values.

Malformed input raises ValidationError instead of flowing into the metric
arithmetic as NaN.
"""

from __future__ import annotations

import math
from decimal import Decimal

from forecastscore.errors import ValidationError
from forecastscore.models.forecast import ForecastType

BINARY_TRUE = "true"
BINARY_FALSE = "false"

_BINARY_ALIASES = {
    "true": BINARY_TRUE,
    "yes": BINARY_TRUE,
    "false": BINARY_FALSE,
    "no": BINARY_FALSE,
}


def parse_binary(raw: str | None, field: str = "value") -> bool:
    if raw == BINARY_TRUE:
        return True
    if raw == BINARY_FALSE:
        return False
    raise ValidationError(f"{field} must be 'true' or 'false', got {raw!r}")


def parse_continuous(raw: str | None, field: str = "value") -> float:
    if raw is None:
        raise ValidationError(f"{field} is missing")
    text = str(raw).strip()
    if not text or "_" in text:
        raise ValidationError(f"{field} is not a number: {raw!r}")
    try:
        number = float(text)
    except ValueError:
        raise ValidationError(f"{field} is not a number: {raw!r}") from None
    if not math.isfinite(number):
        raise ValidationError(f"{field} must be finite, got {raw!r}")
    return number


def parse_confidence(raw: int | float | Decimal | None) -> float | None:
    """Convert a 0-100 confidence into a probability, None when not given."""
    if raw is None:
        return None
    value = float(raw)
    if not 0 <= value <= 100:
        raise ValidationError(f"confidence must be between 0 and 100, got {raw}")
    return value / 100


def parse_amount(raw: int | float | Decimal | str | None, field: str) -> float:
    if raw is None:
        return 0.0
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} is not a number: {raw!r}") from None
    if not math.isfinite(value) or value < 0:
        raise ValidationError(f"{field} must be a non-negative amount, got {raw}")
    return value


def parse_minutes(raw: int | float | Decimal | None) -> float:
    return parse_amount(raw, "estimated_time")


def normalize_actual_value(forecast_type: ForecastType, raw: str | None) -> str:
    """Canonical stored form of an outcome entered by an administrator.

    BINARY accepts yes/no/true/false in any case. CONTINUOUS drops currency
    signs and thousands separators and must leave a finite number.
    """
    text = (raw or "").strip()
    if not text:
        raise ValidationError("actual value is required")

    if forecast_type == ForecastType.BINARY:
        canonical = _BINARY_ALIASES.get(text.lower())
        if canonical is None:
            raise ValidationError(
                f"binary actual value must be 'true' or 'false', got {raw!r}"
            )
        return canonical

    if forecast_type == ForecastType.CONTINUOUS:
        cleaned = text.replace("$", "").replace(",", "").strip()
        parse_continuous(cleaned, field="actual value")
        return cleaned

    return text
