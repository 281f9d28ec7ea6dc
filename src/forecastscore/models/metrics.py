from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from enum import StrEnum


class HighLow(StrEnum):
    HIGH = "HIGH"
    LOW = "LOW"
    PERFECT = "PERFECT"


@dataclass
class MetricBundle:
    """Derived scoring metrics for one prediction.

    Every field is optional and only set when it can be computed from the
    forecast outcome and the prediction's inputs. A bundle is always written
    whole, never patched field by field.

    ``pp_variance`` is not a statistical variance: it is the distance between
    the stated confidence and the ideal confidence for the observed outcome
    (``|1 - p|`` when correct, ``|p|`` when wrong). The name is kept because
    stored rows and downstream consumers use it.
    """

    total_investment: float | None = None
    is_correct: bool | None = None
    pp_variance: float | None = None
    brier_score: float | None = None
    error: float | None = None
    high_low: HighLow | None = None
    absolute_error: float | None = None
    absolute_actual_error_pct: float | None = None
    absolute_forecast_error_pct: float | None = None
    roi_score: float | None = None
    roe: float | None = None
    roe_pct: float | None = None
    financing_gross_profit: float | None = None
    debt_repayment: float | None = None
    rof: float | None = None
    rof_pct: float | None = None
    net_profit_equity_plus_debt: float | None = None
    roi_equity_plus_debt_pct: float | None = None
    profit_per_hour: float | None = None

    def as_dict(self) -> dict:
        """All fields, including the ``None`` ones, in column order."""
        return asdict(self)


METRIC_FIELDS: tuple[str, ...] = tuple(f.name for f in fields(MetricBundle))
