from __future__ import annotations

from forecastscore.models.forecast import Forecast, ForecastType
from forecastscore.models.metrics import METRIC_FIELDS, HighLow, MetricBundle
from forecastscore.models.prediction import Prediction

__all__ = [
    # forecast
    "ForecastType",
    "Forecast",
    # prediction
    "Prediction",
    # metrics
    "HighLow",
    "MetricBundle",
    "METRIC_FIELDS",
]
