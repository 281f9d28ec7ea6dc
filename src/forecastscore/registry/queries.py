from __future__ import annotations

import logging
from enum import Enum

from forecastscore.errors import ForecastNotFoundError
from forecastscore.models.forecast import Forecast, ForecastType
from forecastscore.models.metrics import METRIC_FIELDS, MetricBundle
from forecastscore.models.prediction import Prediction
from forecastscore.registry.db import Database

logger = logging.getLogger(__name__)

_PREDICTION_INPUT_COLUMNS = (
    "id", "forecast_id", "user_id", "value", "confidence",
    "equity_investment", "debt_financing", "estimated_time",
)

# Kept by a reset: they depend only on the prediction's own amounts.
_AMOUNT_METRIC_FIELDS = ("total_investment", "debt_repayment")
_OUTCOME_METRIC_FIELDS = tuple(f for f in METRIC_FIELDS if f not in _AMOUNT_METRIC_FIELDS)


class Registry:
    """Query layer bridging Python models and the scoring schema."""

    def __init__(self, db: Database) -> None:
        self._db = db

    # ------------------------------------------------------------------
    # Forecasts
    # ------------------------------------------------------------------

    async def get_forecast(self, forecast_id: str) -> Forecast | None:
        """Return the forecast's type and actual value, None if it does not exist."""
        rows = await self._db.execute(
            "SELECT id, title, type, actual_value FROM scoring.forecasts WHERE id = %s",
            (forecast_id,),
        )
        if not rows:
            return None
        r = rows[0]
        return Forecast(
            id=r["id"],
            type=ForecastType(r["type"]),
            actual_value=r["actual_value"],
            title=r.get("title") or "",
        )

    async def set_actual_value(self, forecast_id: str, actual_value: str | None) -> None:
        rows = await self._db.execute(
            "UPDATE scoring.forecasts SET actual_value = %s, updated_at = NOW() "
            "WHERE id = %s RETURNING id",
            (actual_value, forecast_id),
        )
        if not rows:
            raise ForecastNotFoundError(forecast_id)

    # ------------------------------------------------------------------
    # Predictions
    # ------------------------------------------------------------------

    async def get_predictions_for_forecast(self, forecast_id: str) -> list[Prediction]:
        """Every prediction of a forecast, in a stable order."""
        columns = ", ".join(_PREDICTION_INPUT_COLUMNS)
        rows = await self._db.execute(
            f"SELECT {columns} FROM scoring.predictions "
            "WHERE forecast_id = %s ORDER BY id",
            (forecast_id,),
        )
        return [self._row_to_prediction(r) for r in rows]

    async def update_prediction_metrics(self, prediction_id: str, bundle: MetricBundle) -> None:
        """Overwrite every metric column of one prediction."""
        assignments = ", ".join(f"{name} = %s" for name in METRIC_FIELDS)
        params = tuple(_to_param(v) for v in bundle.as_dict().values())
        rows = await self._db.execute(
            f"UPDATE scoring.predictions SET {assignments}, updated_at = NOW() "
            "WHERE id = %s RETURNING id",
            (*params, prediction_id),
        )
        if not rows:
            raise LookupError(f"Prediction {prediction_id} not updated: no such row")

    async def clear_prediction_metrics(self, forecast_id: str) -> int:
        """Null the outcome-derived metrics of a forecast's predictions. Returns row count."""
        assignments = ", ".join(f"{name} = NULL" for name in _OUTCOME_METRIC_FIELDS)
        rows = await self._db.execute(
            f"UPDATE scoring.predictions SET {assignments}, updated_at = NOW() "
            "WHERE forecast_id = %s RETURNING id",
            (forecast_id,),
        )
        return len(rows)

    @staticmethod
    def _row_to_prediction(r: dict) -> Prediction:
        return Prediction(
            id=r["id"],
            forecast_id=r["forecast_id"],
            user_id=r.get("user_id"),
            value=r["value"],
            confidence=r.get("confidence"),
            equity_investment=r.get("equity_investment"),
            debt_financing=r.get("debt_financing"),
            estimated_time=r.get("estimated_time"),
        )


def _to_param(value: object) -> object:
    if isinstance(value, Enum):
        return value.value
    return value
