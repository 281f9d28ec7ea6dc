"""Scoring of yes/no forecasts.

The prediction's confidence (0-100) is read as the probability it assigned
to its own call. From that and the outcome come the Brier score and an ROI
score on an asymmetric curve: a perfect call returns +5, a confident miss
loses 10, and everything between is weighted by how far the stated
probability sat from the ideal one.
"""

from __future__ import annotations

from forecastscore.models.metrics import MetricBundle
from forecastscore.scoring.financing import apply_financing
from forecastscore.scoring.values import parse_binary, parse_confidence

PERFECT_ROI = 5.0
WORST_ROI = -10.0
# Brier score of a coin-flip call; the sign of the ROI score flips here.
BRIER_PIVOT = 0.25


def binary_roi_score(brier: float, pp_variance: float) -> float | None:
    if brier == 0:
        return PERFECT_ROI
    if brier == 1:
        return WORST_ROI
    if brier < BRIER_PIVOT:
        if pp_variance == 0:
            return None
        return ((BRIER_PIVOT - brier) * (0.5 / pp_variance)) / 3
    return (BRIER_PIVOT - brier) * (pp_variance * 6)


def calculate_binary_metrics(
    actual_value: str | None,
    predicted_value: str,
    confidence: int | None,
    equity_investment: float,
    debt_financing: float,
    estimated_time: float,
) -> MetricBundle:
    predicted = parse_binary(predicted_value)
    actual = parse_binary(actual_value, field="actual value") if actual_value is not None else None
    probability = parse_confidence(confidence)

    bundle = MetricBundle()
    roi_score = None

    if actual is not None:
        bundle.is_correct = predicted == actual

        if probability is not None:
            if bundle.is_correct:
                bundle.pp_variance = abs(1 - probability)
                bundle.brier_score = (1 - probability) ** 2
            else:
                bundle.pp_variance = abs(probability)
                bundle.brier_score = bundle.pp_variance ** 2
            roi_score = binary_roi_score(bundle.brier_score, bundle.pp_variance)

    return apply_financing(bundle, roi_score, equity_investment, debt_financing, estimated_time)
