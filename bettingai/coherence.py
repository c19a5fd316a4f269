"""
Rules that keep confidence and probability mutually plausible
"""
from typing import Dict, Mapping, Optional, Tuple

from bettingai.exceptions import InvalidInput
from bettingai.models import (
    MAX_CONFIDENCE,
    MAX_PROBABILITY,
    MIN_CONFIDENCE,
    MIN_PROBABILITY,
)
from bettingai.selector import WeightedSelector

# Probability band per confidence level. Both bounds rise with confidence
# and the band narrows, so a confident call is always a strong one.
DEFAULT_BANDS: Dict[int, Tuple[int, int]] = {
    1: (15, 85),
    2: (20, 86),
    3: (26, 87),
    4: (32, 88),
    5: (38, 89),
    6: (44, 90),
    7: (50, 91),
    8: (56, 92),
    9: (62, 93),
    10: (70, 95),
}


class CoherenceRules:
    """
    Confidence/probability policy

    Confidence is drawn uniformly in [1, 10]; the probability is then drawn
    inside the band declared for that confidence.
    """

    def __init__(self, bands: Optional[Mapping[int, Tuple[int, int]]] = None,
                 probability_bias: float = 0.0):
        """
        Initialize the rules

        Args:
            bands: Confidence -> (low, high) probability band. Must cover every
                confidence level, stay inside the probability range and be
                monotonic (default: DEFAULT_BANDS)
            probability_bias: Skew of the draw inside the band, in [-1, 1]
                (default: 0.0, uniform)
        """
        self.bands = dict(DEFAULT_BANDS if bands is None else bands)
        if not -1.0 <= probability_bias <= 1.0:
            raise InvalidInput(f"Bias must be between -1 and 1, got {probability_bias}")
        self.probability_bias = probability_bias
        self._validate_bands()

    def _validate_bands(self) -> None:
        levels = list(range(MIN_CONFIDENCE, MAX_CONFIDENCE + 1))
        if sorted(self.bands) != levels:
            raise InvalidInput(
                f"Bands must cover confidence {MIN_CONFIDENCE}..{MAX_CONFIDENCE} exactly"
            )

        previous = None
        for confidence in levels:
            low, high = self.bands[confidence]
            if not MIN_PROBABILITY <= low <= high <= MAX_PROBABILITY:
                raise InvalidInput(f"Band {low}-{high} for confidence {confidence} is out of range")
            if previous is not None:
                prev_low, prev_high = previous
                if low < prev_low or high < prev_high:
                    raise InvalidInput(f"Band for confidence {confidence} moves backwards")
                if high - low >= prev_high - prev_low:
                    raise InvalidInput(f"Band for confidence {confidence} does not narrow")
            previous = (low, high)

    def band(self, confidence: int) -> Tuple[int, int]:
        """Probability band (inclusive) allowed for a confidence level"""
        try:
            return self.bands[confidence]
        except KeyError:
            raise InvalidInput(
                f"Confidence must be between {MIN_CONFIDENCE} and {MAX_CONFIDENCE}, "
                f"got {confidence}"
            ) from None

    def check(self, confidence: int, probability: int) -> bool:
        """Whether the pair satisfies the rules"""
        low, high = self.band(confidence)
        return low <= probability <= high

    def draw(self, selector: WeightedSelector) -> Tuple[int, int]:
        """
        Draw a coherent pair

        Args:
            selector: Source of randomness

        Returns:
            Tuple of (confidence, probability)
        """
        confidence = selector.int_in_range(MIN_CONFIDENCE, MAX_CONFIDENCE)
        low, high = self.band(confidence)
        probability = selector.skewed_in_range(low, high, self.probability_bias)
        return confidence, probability
