"""Seeded, reproducible sampling."""

from .generator import RandomState, uniform_choice, uniform_int
from .strategies import (
    PerEntryDowngrade,
    RunLevelSuppression,
    SamplingStrategy,
    strategy_from_flag,
)

__all__ = [
    "RandomState",
    "uniform_choice",
    "uniform_int",
    "PerEntryDowngrade",
    "RunLevelSuppression",
    "SamplingStrategy",
    "strategy_from_flag",
]
