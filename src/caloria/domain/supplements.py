"""Supplement domain models."""

from dataclasses import dataclass
from enum import StrEnum


class SupplementType(StrEnum):
    PROTEIN_POWDER = "protein_powder"
    CREATINE = "creatine"
    PRE_WORKOUT = "pre_workout"
    POST_WORKOUT = "post_workout"
    BCAA = "bcaa"
    VITAMINS = "vitamins"
    MINERALS = "minerals"
    OMEGA3 = "omega3"
    TESTOSTERONE = "testosterone"
    ANABOLIC_STEROID = "anabolic_steroid"
    SARM = "sarm"
    GROWTH_HORMONE = "growth_hormone"
    OTHER = "other"


class WarningLevel(StrEnum):
    INFO = "info"
    CAUTION = "caution"
    DANGER = "danger"
    CRITICAL = "critical"


@dataclass(frozen=True)
class SupplementDosage:
    """Amount of a supplement per intake."""

    amount: float
    unit: str


@dataclass(frozen=True)
class SupplementWarning:
    """Safety notice shown before logging a supplement."""

    level: WarningLevel
    message: str
    recommendation: str
    learn_more_url: str | None = None
