"""Setting and clearing forecast outcomes.

Writing an actual value is the trigger for rescoring: the value is
normalized for the forecast type, stored, and every prediction under the
forecast is recalculated in the same call.
"""

from __future__ import annotations

import logging

from forecastscore.errors import ForecastNotFoundError
from forecastscore.orchestrator import MetricsOrchestrator, RecalculationResult
from forecastscore.registry.queries import Registry
from forecastscore.scoring.values import normalize_actual_value

logger = logging.getLogger(__name__)


class ActualValueManager:
    """Administrative outcome writes and the recalculation they trigger."""

    def __init__(self, registry: Registry, orchestrator: MetricsOrchestrator) -> None:
        self._registry = registry
        self._orchestrator = orchestrator

    async def set_actual_value(self, forecast_id: str, raw_value: str) -> RecalculationResult:
        """Store the outcome of a forecast and rescore all of its predictions.

        Raises ForecastNotFoundError or ValidationError before anything is
        written. If the recalculation itself fails, the actual value stays
        stored and the error propagates so the caller knows metrics may be
        incomplete.
        """
        forecast = await self._registry.get_forecast(forecast_id)
        if forecast is None:
            raise ForecastNotFoundError(forecast_id)

        actual_value = normalize_actual_value(forecast.type, raw_value)
        await self._registry.set_actual_value(forecast_id, actual_value)
        logger.info("Forecast %s resolved to %r", forecast_id, actual_value)

        try:
            return await self._orchestrator.recalculate_metrics_for_forecast(forecast_id)
        except Exception:
            logger.exception(
                "Actual value stored for forecast %s but recalculation failed", forecast_id
            )
            raise

    async def clear_actual_value(self, forecast_id: str) -> int:
        """Unresolve a forecast and wipe the outcome metrics of its predictions."""
        forecast = await self._registry.get_forecast(forecast_id)
        if forecast is None:
            raise ForecastNotFoundError(forecast_id)

        await self._registry.set_actual_value(forecast_id, None)
        cleared = await self._registry.clear_prediction_metrics(forecast_id)
        logger.info("Cleared actual value of forecast %s and metrics of %d predictions",
                    forecast_id, cleared)
        return cleared
