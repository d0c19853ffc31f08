# ===============================
# File: labreader/parsers/models.py
# ===============================
from dataclasses import dataclass
from enum import Enum
from typing import Optional


@dataclass(frozen=True)
class ParsedTest:
    name: str
    short_code: Optional[str] = None
    value: Optional[float] = None
    unit: Optional[str] = None
    ref_low: Optional[float] = None
    ref_high: Optional[float] = None

    @property
    def display_name(self) -> str:
        return f"{self.name} ({self.short_code})" if self.short_code else self.name

    @property
    def has_range(self) -> bool:
        return self.ref_low is not None and self.ref_high is not None


class RiskLevel(str, Enum):
    NORMAL = "normal"
    OUT_OF_RANGE = "out_of_range"


@dataclass(frozen=True)
class RiskResult:
    level: RiskLevel
    label: str
    emoji: str

    @property
    def is_out_of_range(self) -> bool:
        return self.level is RiskLevel.OUT_OF_RANGE


@dataclass(frozen=True)
class MeaningEntry:
    meaning: str
    metaphor: str
