from __future__ import annotations


class ForecastNotFoundError(LookupError):
    """Raised when a forecast id does not exist."""

    def __init__(self, forecast_id: str) -> None:
        super().__init__(f"Forecast not found: {forecast_id}")
        self.forecast_id = forecast_id


class ValidationError(ValueError):
    """Raised when a prediction or actual value cannot be interpreted."""


class RecalculationError(RuntimeError):
    """Raised when persisting a forecast's metrics stops part-way.

    Predictions written before the failure keep their new metrics; the rest
    keep whatever they had before the run.
    """

    def __init__(self, forecast_id: str, updated: int, total: int) -> None:
        super().__init__(
            f"Recalculation for forecast {forecast_id} incomplete: "
            f"{updated}/{total} predictions updated"
        )
        self.forecast_id = forecast_id
        self.updated = updated
        self.total = total
