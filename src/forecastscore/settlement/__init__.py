from forecastscore.settlement.actuals import ActualValueManager

__all__ = ["ActualValueManager"]
