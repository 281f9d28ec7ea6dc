"""Scoring of numeric forecasts.

Accuracy is measured as the absolute error relative to the actual value.
The ROI score is a deliberate step function of that relative error; the
bucket edges are discontinuous and each upper bound is exclusive.
"""

from __future__ import annotations

import math

from forecastscore.models.metrics import HighLow, MetricBundle
from forecastscore.scoring.financing import apply_financing
from forecastscore.scoring.values import parse_continuous

PERFECT_ROI = 5.0
MISS_ROI = -1.0

# Exclusive upper bounds of the relative-error buckets
NEAR_MISS_BOUND = 0.03
CLOSE_BOUND = 0.2
NEUTRAL_BOUND = 0.25
FAR_BOUND = 0.55


def continuous_roi_score(e: float) -> float:
    if e == 0:
        return PERFECT_ROI
    if e < NEAR_MISS_BOUND:
        # 3.0 as e -> 0, 0.51 at e = 0.03
        return 0.51 + ((NEAR_MISS_BOUND - e) / NEAR_MISS_BOUND) * 2.49
    if e < CLOSE_BOUND:
        return -math.log10(e) / (e * 100)
    if e < NEUTRAL_BOUND:
        return 0.0
    if e < FAR_BOUND:
        return -(math.exp(e) ** 5) * (e / 9)
    return MISS_ROI


def classify_error(error: float) -> HighLow:
    if error == 0:
        return HighLow.PERFECT
    return HighLow.HIGH if error > 0 else HighLow.LOW


def calculate_continuous_metrics(
    actual_value: str | None,
    predicted_value: str,
    equity_investment: float,
    debt_financing: float,
    estimated_time: float,
) -> MetricBundle:
    forecast_value = parse_continuous(predicted_value)
    actual = parse_continuous(actual_value, field="actual value") if actual_value is not None else None

    bundle = MetricBundle()
    roi_score = None

    if actual is not None:
        error = forecast_value - actual
        absolute_error = abs(error)
        bundle.error = error
        bundle.high_low = classify_error(error)
        bundle.absolute_error = absolute_error
        # Signed denominators: a negative actual gives a negative ratio.
        if actual != 0:
            bundle.absolute_actual_error_pct = absolute_error / actual
        if forecast_value != 0:
            bundle.absolute_forecast_error_pct = absolute_error / forecast_value

        if bundle.absolute_actual_error_pct is not None:
            roi_score = continuous_roi_score(bundle.absolute_actual_error_pct)

    return apply_financing(bundle, roi_score, equity_investment, debt_financing, estimated_time)
