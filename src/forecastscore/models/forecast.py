from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class ForecastType(StrEnum):
    BINARY = "BINARY"
    CONTINUOUS = "CONTINUOUS"
    CATEGORICAL = "CATEGORICAL"


@dataclass
class Forecast:
    id: str
    type: ForecastType
    actual_value: str | None = None
    title: str = ""

    @property
    def is_resolved(self) -> bool:
        return self.actual_value is not None
