"""Per-prediction metric calculators, dispatched on forecast type."""

from __future__ import annotations

from collections.abc import Callable

from forecastscore.models.forecast import Forecast, ForecastType
from forecastscore.models.metrics import MetricBundle
from forecastscore.models.prediction import Prediction
from forecastscore.scoring.binary import calculate_binary_metrics
from forecastscore.scoring.continuous import calculate_continuous_metrics
from forecastscore.scoring.validation import (
    MAX_TOTAL_INVESTMENT,
    ValidationResult,
    validate_prediction_input,
)
from forecastscore.scoring.values import parse_amount, parse_minutes

Calculator = Callable[[Forecast, Prediction], MetricBundle]


def _score_binary(forecast: Forecast, prediction: Prediction) -> MetricBundle:
    return calculate_binary_metrics(
        actual_value=forecast.actual_value,
        predicted_value=prediction.value,
        confidence=prediction.confidence,
        equity_investment=parse_amount(prediction.equity_investment, "equity_investment"),
        debt_financing=parse_amount(prediction.debt_financing, "debt_financing"),
        estimated_time=parse_minutes(prediction.estimated_time),
    )


def _score_continuous(forecast: Forecast, prediction: Prediction) -> MetricBundle:
    return calculate_continuous_metrics(
        actual_value=forecast.actual_value,
        predicted_value=prediction.value,
        equity_investment=parse_amount(prediction.equity_investment, "equity_investment"),
        debt_financing=parse_amount(prediction.debt_financing, "debt_financing"),
        estimated_time=parse_minutes(prediction.estimated_time),
    )


# CATEGORICAL forecasts have no numeric scoring.
CALCULATORS: dict[ForecastType, Calculator] = {
    ForecastType.BINARY: _score_binary,
    ForecastType.CONTINUOUS: _score_continuous,
}


def calculate_metrics(forecast: Forecast, prediction: Prediction) -> MetricBundle | None:
    """Compute the metric bundle for one prediction, None if the type is unscored.

    Raises ValidationError when the prediction or the outcome is malformed.
    """
    calculator = CALCULATORS.get(forecast.type)
    if calculator is None:
        return None
    return calculator(forecast, prediction)


__all__ = [
    "CALCULATORS",
    "calculate_metrics",
    "calculate_binary_metrics",
    "calculate_continuous_metrics",
    "MAX_TOTAL_INVESTMENT",
    "ValidationResult",
    "validate_prediction_input",
]
