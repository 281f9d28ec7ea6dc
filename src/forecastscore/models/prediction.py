from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


@dataclass
class Prediction:
    id: str
    forecast_id: str
    value: str
    confidence: int | None = None
    equity_investment: Decimal | float | None = None
    debt_financing: Decimal | float | None = None
    estimated_time: int | None = None
    user_id: str | None = None
