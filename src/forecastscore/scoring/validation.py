from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal

from forecastscore.errors import ValidationError
from forecastscore.models.forecast import ForecastType
from forecastscore.scoring.values import parse_binary, parse_continuous

logger = logging.getLogger(__name__)

# Cap on equity + debt committed to a single prediction
MAX_TOTAL_INVESTMENT = 20_000_000


@dataclass
class ValidationResult:
    is_valid: bool
    errors: list[str] = field(default_factory=list)

    @property
    def summary(self) -> str:
        return "; ".join(self.errors) if self.errors else "OK"


def _is_whole(value: int | float | Decimal) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return float(value).is_integer()


def validate_prediction_input(
    forecast_type: ForecastType,
    value: str | None,
    confidence: int | float | None = None,
    equity_investment: int | float | Decimal | None = None,
    debt_financing: int | float | Decimal | None = None,
    estimated_time: int | float | None = None,
) -> ValidationResult:
    """Check a submitted prediction against the rules the scoring relies on.

    Collects every problem rather than stopping at the first one, so the
    caller can report them together.
    """
    errors: list[str] = []

    if not value:
        errors.append("Prediction value is required")
    elif forecast_type == ForecastType.BINARY:
        try:
            parse_binary(value)
        except ValidationError:
            errors.append("Binary prediction must be 'true' or 'false'")
    elif forecast_type == ForecastType.CONTINUOUS:
        try:
            parse_continuous(value)
        except ValidationError:
            errors.append("Continuous prediction must be a valid number")

    if confidence is not None:
        if not _is_whole(confidence) or not 0 <= confidence <= 100:
            errors.append("Confidence must be a whole number between 0 and 100")

    if estimated_time is not None:
        if not _is_whole(estimated_time) or estimated_time < 0:
            errors.append("Estimated time must be a whole number of minutes, at least 0")

    equity = equity_investment if equity_investment is not None else 0
    debt = debt_financing if debt_financing is not None else 0

    if equity < 0:
        errors.append("Equity investment must be at least 0")
    elif not _is_whole(equity):
        errors.append("Equity investment must be a whole-dollar amount (no decimals)")
    elif equity > MAX_TOTAL_INVESTMENT:
        errors.append(f"Equity investment cannot exceed {MAX_TOTAL_INVESTMENT:,}")

    if debt < 0:
        errors.append("Debt financing must be at least 0")

    if equity >= 0 and debt >= 0 and float(equity) + float(debt) > MAX_TOTAL_INVESTMENT:
        errors.append(
            f"Total of equity investment + debt financing cannot exceed {MAX_TOTAL_INVESTMENT:,}"
        )

    if errors:
        logger.debug("Rejected %s prediction %r: %s", forecast_type, value, "; ".join(errors))

    return ValidationResult(is_valid=not errors, errors=errors)
