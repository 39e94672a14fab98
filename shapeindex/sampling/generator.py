"""Pure random draws over an immutable generator state.

Every draw takes a ``RandomState`` and returns the drawn value together with
the next state. Nothing holds a mutable cursor, so a run is reproduced by
replaying the same sequence of draws from the same seed, and a state can be
kept and replayed at will.

The state wraps numpy's PCG64 bit generator, including its buffered 32-bit
half-word, so draws are bit-for-bit identical to numpy's own.
"""

from dataclasses import dataclass
from typing import Sequence, Tuple, TypeVar

import numpy as np

T = TypeVar("T")


@dataclass(frozen=True)
class RandomState:
    """
    Immutable snapshot of a PCG64 generator.

    Attributes:
        state: 128-bit LCG state
        inc: 128-bit LCG increment
        has_uint32: Whether a buffered 32-bit half-word is pending
        uinteger: The buffered half-word
    """

    state: int
    inc: int
    has_uint32: int = 0
    uinteger: int = 0

    @classmethod
    def from_seed(cls, seed: int) -> "RandomState":
        """Create the initial state for a seed."""
        return cls.from_bit_generator(np.random.PCG64(seed))

    @classmethod
    def from_bit_generator(cls, bit_generator: np.random.PCG64) -> "RandomState":
        """Snapshot a numpy PCG64 bit generator."""
        raw = bit_generator.state
        return cls(
            state=int(raw["state"]["state"]),
            inc=int(raw["state"]["inc"]),
            has_uint32=int(raw["has_uint32"]),
            uinteger=int(raw["uinteger"]),
        )

    def to_bit_generator(self) -> np.random.PCG64:
        """Build a fresh numpy PCG64 bit generator positioned at this state."""
        bit_generator = np.random.PCG64()
        bit_generator.state = {
            "bit_generator": "PCG64",
            "state": {"state": self.state, "inc": self.inc},
            "has_uint32": self.has_uint32,
            "uinteger": self.uinteger,
        }
        return bit_generator


def uniform_int(state: RandomState, low: int, high: int) -> Tuple[int, RandomState]:
    """
    Draw an integer uniformly from ``[low, high]`` (both inclusive).

    Args:
        state: Current generator state
        low: Lowest value
        high: Highest value

    Returns:
        Tuple of (value, next state)

    Raises:
        ValueError: If high < low
    """
    if high < low:
        raise ValueError(f"Empty range [{low}, {high}]")

    bit_generator = state.to_bit_generator()
    value = np.random.Generator(bit_generator).integers(low, high, endpoint=True)
    return int(value), RandomState.from_bit_generator(bit_generator)


def uniform_choice(state: RandomState, items: Sequence[T]) -> Tuple[T, RandomState]:
    """
    Pick one item with even probability.

    Args:
        state: Current generator state
        items: Non-empty sequence

    Returns:
        Tuple of (item, next state)
    """
    if not items:
        raise ValueError("Cannot choose from an empty sequence")
    index, state = uniform_int(state, 0, len(items) - 1)
    return items[index], state
