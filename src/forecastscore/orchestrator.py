"""Metrics recalculation for a resolved forecast.

When a forecast's actual value is written, every prediction under it is
rescored from scratch and its metric bundle overwritten:
  1. Load the forecast (missing -> ForecastNotFoundError, nothing written)
  2. Validate the actual value for the forecast type
  3. Load all predictions, check their inputs and compute each bundle
  4. Persist bundles one per prediction, in groups of ``concurrency``

There is no transaction around the batch. If a write fails, no further writes
start; predictions already written keep their new metrics and the run raises
RecalculationError.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field

from forecastscore.errors import ForecastNotFoundError, RecalculationError, ValidationError
from forecastscore.models.forecast import Forecast, ForecastType
from forecastscore.models.metrics import MetricBundle
from forecastscore.registry.queries import Registry
from forecastscore.scoring import CALCULATORS, calculate_metrics, validate_prediction_input
from forecastscore.scoring.values import parse_binary, parse_continuous

logger = logging.getLogger(__name__)


@dataclass
class RecalculationResult:
    """Outcome of one recalculation run over a forecast."""

    forecast_id: str
    forecast_type: ForecastType
    total: int = 0
    updated: int = 0
    skipped: int = 0
    # (prediction_id, reason) for predictions whose inputs could not be scored
    invalid: list[tuple[str, str]] = field(default_factory=list)


def _check_actual_value(forecast: Forecast) -> None:
    if not forecast.is_resolved:
        return
    if forecast.type == ForecastType.BINARY:
        parse_binary(forecast.actual_value, field="actual value")
    elif forecast.type == ForecastType.CONTINUOUS:
        parse_continuous(forecast.actual_value, field="actual value")


class MetricsOrchestrator:
    """Recomputes and stores the metric bundle of every prediction of a forecast."""

    def __init__(self, registry: Registry, concurrency: int = 1) -> None:
        if concurrency < 1:
            raise ValueError(f"concurrency must be >= 1, got {concurrency}")
        self._registry = registry
        self._concurrency = concurrency

    async def recalculate_metrics_for_forecast(self, forecast_id: str) -> RecalculationResult:
        forecast = await self._registry.get_forecast(forecast_id)
        if forecast is None:
            raise ForecastNotFoundError(forecast_id)

        result = RecalculationResult(forecast_id=forecast_id, forecast_type=forecast.type)
        predictions = await self._registry.get_predictions_for_forecast(forecast_id)
        result.total = len(predictions)

        if forecast.type not in CALCULATORS:
            result.skipped = result.total
            logger.info(
                "Forecast %s is %s: %d predictions left unscored",
                forecast_id, forecast.type, result.total,
            )
            return result

        _check_actual_value(forecast)

        pending: list[tuple[str, MetricBundle]] = []
        for prediction in predictions:
            checked = validate_prediction_input(
                forecast.type,
                prediction.value,
                confidence=prediction.confidence,
                equity_investment=prediction.equity_investment,
                debt_financing=prediction.debt_financing,
                estimated_time=prediction.estimated_time,
            )
            reason = None if checked.is_valid else checked.summary
            bundle = None
            if reason is None:
                try:
                    bundle = calculate_metrics(forecast, prediction)
                except ValidationError as exc:
                    reason = str(exc)
            if reason is not None:
                logger.warning(
                    "Prediction %s of forecast %s not scored: %s",
                    prediction.id, forecast_id, reason,
                )
                result.invalid.append((prediction.id, reason))
                continue
            if bundle is not None:
                pending.append((prediction.id, bundle))

        await self._persist(forecast_id, pending, result)

        logger.info(
            "Recalculated metrics for forecast %s (%s): %d/%d updated, %d invalid",
            forecast_id, forecast.type, result.updated, result.total, len(result.invalid),
        )
        return result

    async def _persist(
        self,
        forecast_id: str,
        pending: list[tuple[str, MetricBundle]],
        result: RecalculationResult,
    ) -> None:
        for start in range(0, len(pending), self._concurrency):
            group = pending[start:start + self._concurrency]
            outcomes = await asyncio.gather(
                *(self._registry.update_prediction_metrics(pid, bundle) for pid, bundle in group),
                return_exceptions=True,
            )
            failure: BaseException | None = None
            for (prediction_id, _), outcome in zip(group, outcomes):
                if isinstance(outcome, asyncio.CancelledError):
                    raise outcome
                if isinstance(outcome, BaseException):
                    logger.error(
                        "Failed to store metrics for prediction %s of forecast %s: %s",
                        prediction_id, forecast_id, outcome,
                    )
                    failure = failure or outcome
                else:
                    result.updated += 1
            if failure is not None:
                raise RecalculationError(forecast_id, result.updated, result.total) from failure
