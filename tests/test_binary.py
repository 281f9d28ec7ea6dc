from __future__ import annotations

import pytest

from forecastscore.errors import ValidationError
from forecastscore.scoring.binary import (
    PERFECT_ROI,
    WORST_ROI,
    binary_roi_score,
    calculate_binary_metrics,
)


def _score(actual, value="true", confidence=None, equity=0.0, debt=0.0, minutes=0.0):
    return calculate_binary_metrics(actual, value, confidence, equity, debt, minutes)


class TestBinaryRoiScore:
    def test_perfect(self) -> None:
        assert binary_roi_score(0.0, 0.0) == PERFECT_ROI == 5

    def test_worst(self) -> None:
        assert binary_roi_score(1.0, 1.0) == WORST_ROI == -10

    def test_low_brier_branch(self) -> None:
        # ((0.25 - 0.01) * (0.5 / 0.1)) / 3
        assert binary_roi_score(0.01, 0.1) == pytest.approx(0.4)

    def test_coin_flip_scores_zero(self) -> None:
        assert binary_roi_score(0.25, 0.5) == 0

    def test_high_brier_branch_is_negative(self) -> None:
        # (0.25 - 0.64) * (0.8 * 6)
        assert binary_roi_score(0.64, 0.8) == pytest.approx(-1.872)

    def test_zero_deviation_off_the_exact_branches(self) -> None:
        assert binary_roi_score(0.1, 0.0) is None


class TestBinaryMetrics:
    def test_perfect_call(self) -> None:
        b = _score("true", "true", 100)
        assert b.is_correct is True
        assert b.pp_variance == 0
        assert b.brier_score == 0
        assert b.roi_score == 5

    def test_worst_call(self) -> None:
        b = _score("false", "true", 100)
        assert b.is_correct is False
        assert b.pp_variance == 1
        assert b.brier_score == 1
        assert b.roi_score == -10

    def test_correct_with_high_confidence(self) -> None:
        b = _score("true", "true", 90, equity=100, debt=50, minutes=60)
        assert b.total_investment == 150
        assert b.is_correct is True
        assert b.pp_variance == pytest.approx(0.1)
        assert b.brier_score == pytest.approx(0.01)
        assert b.roi_score == pytest.approx(0.4)
        assert b.roe == pytest.approx(40.0)
        assert b.rof == pytest.approx(15.0)
        assert b.profit_per_hour == pytest.approx(55.0)

    def test_incorrect_call(self) -> None:
        b = _score("false", "true", 80, equity=100, minutes=30)
        assert b.is_correct is False
        assert b.pp_variance == pytest.approx(0.8)
        assert b.brier_score == pytest.approx(0.64)
        assert b.roi_score < 0
        assert b.roe == pytest.approx(-187.2)

    def test_false_prediction_on_false_outcome_is_correct(self) -> None:
        b = _score("false", "false", 70)
        assert b.is_correct is True
        assert b.pp_variance == pytest.approx(0.3)
        assert b.brier_score == pytest.approx(0.09)
        assert b.roi_score > 0

    def test_pp_variance_is_deviation_not_variance(self) -> None:
        # A wrong call at 30% confidence sits 0.3 away from the ideal 0.
        b = _score("true", "false", 30)
        assert b.pp_variance == pytest.approx(0.3)
        assert b.brier_score == pytest.approx(0.09)

    def test_missing_confidence_still_marks_correctness(self) -> None:
        b = _score("true", "true", None, equity=100)
        assert b.is_correct is True
        assert b.pp_variance is None
        assert b.brier_score is None
        assert b.roi_score is None
        assert b.roe is None
        assert b.rof_pct is None
        assert b.total_investment == 100

    def test_unresolved_forecast(self) -> None:
        b = _score(None, "true", 90, equity=100, debt=50, minutes=60)
        assert b.is_correct is None
        assert b.pp_variance is None
        assert b.brier_score is None
        assert b.roi_score is None
        assert b.roe is None
        assert b.rof is None
        assert b.net_profit_equity_plus_debt is None
        assert b.profit_per_hour is None
        assert b.error is None and b.high_low is None
        # input-only fields
        assert b.total_investment == 150
        assert b.debt_repayment == pytest.approx(-5.0)

    def test_continuous_fields_never_set(self) -> None:
        b = _score("true", "true", 60)
        assert b.error is None
        assert b.high_low is None
        assert b.absolute_error is None
        assert b.absolute_actual_error_pct is None
        assert b.absolute_forecast_error_pct is None

    def test_malformed_prediction_rejected(self) -> None:
        with pytest.raises(ValidationError):
            _score("true", "yes", 90)

    def test_malformed_actual_rejected(self) -> None:
        with pytest.raises(ValidationError, match="actual value"):
            _score("TRUE", "true", 90)

    def test_deterministic(self) -> None:
        args = ("true", "false", 65, 1234.0, 567.0, 45.0)
        assert calculate_binary_metrics(*args) == calculate_binary_metrics(*args)
