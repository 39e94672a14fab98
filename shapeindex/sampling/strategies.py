"""Randomization strategies that make a shape index deliberately incomplete."""

from abc import ABC, abstractmethod
from typing import Tuple

from shapeindex.errors import ConfigurationError
from shapeindex.sampling.generator import RandomState, uniform_int

# Percentile draws are uniform over [0, PERCENT_MAX); a draw passes when it is
# below the generation probability, so 0 never passes and 100 always does.
PERCENT_MAX = 100


class SamplingStrategy(ABC):
    """
    Decides which parts of a shape index survive.

    Strategies hold no generator state: every decision takes the current
    ``RandomState`` and returns the next one.
    """

    name: str = "abstract"

    def __init__(self, generation_probability: float = 100):
        """
        Initialize the strategy.

        Args:
            generation_probability: Probability (0 - 100) that a decision keeps
                the index content

        Raises:
            ConfigurationError: If the probability is outside [0, 100]
        """
        if not 0 <= generation_probability <= 100:
            raise ConfigurationError(
                f"Generation probability must be between 0 and 100, got {generation_probability}"
            )
        self.generation_probability = generation_probability

    def _passes(self, state: RandomState) -> Tuple[bool, RandomState]:
        value, state = uniform_int(state, 0, PERCENT_MAX - 1)
        return value < self.generation_probability, state

    @abstractmethod
    def registration_enabled(self, state: RandomState) -> Tuple[bool, RandomState]:
        """
        Decide once, at construction, whether entries are registered at all.

        Args:
            state: Current generator state

        Returns:
            Tuple of (enabled, next state)
        """
        pass

    @abstractmethod
    def keep_entry_shape(self, state: RandomState) -> Tuple[bool, RandomState]:
        """
        Decide, per entry at serialization, whether its own shape is kept.

        A False result replaces the shape with the open shape.

        Args:
            state: Current generator state

        Returns:
            Tuple of (keep, next state)
        """
        pass

    def __repr__(self) -> str:
        return f"{type(self).__name__}(generation_probability={self.generation_probability})"


class RunLevelSuppression(SamplingStrategy):
    """One coin flip for the whole run: either a full index or none."""

    name = "run-level-suppression"

    def registration_enabled(self, state: RandomState) -> Tuple[bool, RandomState]:
        return self._passes(state)

    def keep_entry_shape(self, state: RandomState) -> Tuple[bool, RandomState]:
        return True, state


class PerEntryDowngrade(SamplingStrategy):
    """Always register; each entry may fall back to the open shape."""

    name = "per-entry-downgrade"

    def registration_enabled(self, state: RandomState) -> Tuple[bool, RandomState]:
        return True, state

    def keep_entry_shape(self, state: RandomState) -> Tuple[bool, RandomState]:
        return self._passes(state)


def strategy_from_flag(
    probabilistic_generation_on_entries: bool,
    generation_probability: float = 100
) -> SamplingStrategy:
    """
    Select the strategy named by the configuration flag.

    Args:
        probabilistic_generation_on_entries: True for per-entry downgrade,
            False for run-level suppression
        generation_probability: Probability (0 - 100)

    Returns:
        SamplingStrategy instance
    """
    if probabilistic_generation_on_entries:
        return PerEntryDowngrade(generation_probability)
    return RunLevelSuppression(generation_probability)
