"""Prediction scoring engine: accuracy, ROI and financing metrics per prediction."""

__version__ = "0.1.0"
