"""
Weighted random selection backed by a numpy random generator
"""
import math
from typing import Callable, Optional, Sequence, Tuple, TypeVar, Union

import numpy as np

from bettingai.exceptions import InvalidInput

T = TypeVar("T")

# Strongest skew exponent, reached at |bias| == 1
MAX_SKEW_STRENGTH = 3.0

SeedLike = Union[None, int, np.random.SeedSequence, np.random.Generator]


class WeightedSelector:
    """
    Random draws for the prediction engine

    Every draw goes through a single ``numpy.random.Generator`` owned by the
    selector. Generators are not safe for concurrent use, so a selector is
    meant to be confined to one thread; call :meth:`spawn` to get an
    independent selector for another worker.
    """

    def __init__(self, seed: SeedLike = None):
        """
        Initialize the selector

        Args:
            seed: Seed, SeedSequence or ready-made Generator. ``None`` pulls
                fresh entropy from the OS.
        """
        if isinstance(seed, np.random.Generator):
            self.rng = seed
        else:
            self.rng = np.random.default_rng(seed)

    def spawn(self) -> "WeightedSelector":
        """Return a selector with an independent child generator"""
        return WeightedSelector(self.rng.spawn(1)[0])

    def pick_weighted(self, items: Sequence[Tuple[T, float]]) -> T:
        """
        Pick one item with probability proportional to its weight

        Args:
            items: Sequence of (item, weight) pairs, every weight > 0

        Returns:
            The chosen item
        """
        if not items:
            raise InvalidInput("Cannot pick from an empty sequence")

        weights = []
        for _, weight in items:
            if not weight > 0 or not math.isfinite(weight):
                raise InvalidInput(f"Weights must be positive, got {weight}")
            weights.append(float(weight))

        p = np.array(weights) / sum(weights)
        index = int(self.rng.choice(len(items), p=p))
        return items[index][0]

    def int_in_range(self, low: int, high: int,
                     skew: Optional[Callable[[float], float]] = None) -> int:
        """
        Draw an integer in [low, high] inclusive

        Args:
            low: Lower bound
            high: Upper bound
            skew: Optional mapping of a uniform value in [0, 1) onto [0, 1).
                Without it the draw is uniform.
        """
        if low > high:
            raise InvalidInput(f"Empty range [{low}, {high}]")

        if skew is None:
            return int(self.rng.integers(low, high, endpoint=True))

        u = skew(float(self.rng.random()))
        span = high - low + 1
        return min(high, low + int(u * span))

    def skewed_in_range(self, low: int, high: int, bias: float) -> int:
        """
        Draw an integer in [low, high] leaning towards one bound

        Args:
            low: Lower bound
            high: Upper bound
            bias: Value in [-1, 1]. 0 is uniform, positive leans towards
                ``high``, negative towards ``low``.
        """
        if not -1.0 <= bias <= 1.0:
            raise InvalidInput(f"Bias must be between -1 and 1, got {bias}")
        if bias == 0:
            return self.int_in_range(low, high)

        # u ** e stays in [0, 1); e < 1 pushes values up, e > 1 pushes them down
        exponent = 1.0 + MAX_SKEW_STRENGTH * abs(bias)
        if bias > 0:
            exponent = 1.0 / exponent
        return self.int_in_range(low, high, skew=lambda u: u ** exponent)
