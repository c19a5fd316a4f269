"""
Data models for the prediction engine
"""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple, Union

from bettingai.exceptions import InvalidInput

MIN_PROBABILITY = 1
MAX_PROBABILITY = 99
MIN_CONFIDENCE = 1
MAX_CONFIDENCE = 10


class BetCategory(Enum):
    """Kind of bet an outcome template describes"""

    MATCH_WINNER = "match-winner"
    OVER_UNDER = "over-under"
    HANDICAP = "handicap"
    CORRECT_SCORE = "correct-score"
    BOTH_TEAMS_SCORE = "both-teams-score"
    SPECIAL = "special"

    @property
    def label(self) -> str:
        """Human readable name, e.g. 'match winner'"""
        return self.value.replace("-", " ")


@dataclass(frozen=True)
class OutcomeTemplate:
    """One catalog entry: a bet description with its narrative variants"""

    category: BetCategory
    bet_type: str
    emoji: str
    reasons: Tuple[str, ...]
    analyses: Tuple[str, ...]
    weight: float = 1.0

    def __post_init__(self):
        """Validate catalog entry"""
        if not self.bet_type:
            raise InvalidInput("Outcome template needs a bet description")
        if self.weight <= 0:
            raise InvalidInput(f"Template weight must be positive, got {self.weight}")
        # Lists are accepted for convenience but stored as tuples
        object.__setattr__(self, "reasons", tuple(self.reasons))
        object.__setattr__(self, "analyses", tuple(self.analyses))


@dataclass(frozen=True)
class Prediction:
    """Represents a rendered prediction"""

    bet_type: str
    emoji: str
    probability: int
    confidence: int
    reason: str
    analysis: str

    def __post_init__(self):
        """Validate prediction data"""
        if not MIN_PROBABILITY <= self.probability <= MAX_PROBABILITY:
            raise InvalidInput(
                f"Probability must be between {MIN_PROBABILITY} and {MAX_PROBABILITY}, "
                f"got {self.probability}"
            )
        if not MIN_CONFIDENCE <= self.confidence <= MAX_CONFIDENCE:
            raise InvalidInput(
                f"Confidence must be between {MIN_CONFIDENCE} and {MAX_CONFIDENCE}, "
                f"got {self.confidence}"
            )

    def to_dict(self) -> Dict[str, Union[str, int]]:
        """Wire representation used by the HTTP API"""
        return {
            "betType": self.bet_type,
            "emoji": self.emoji,
            "probability": self.probability,
            "confidence": self.confidence,
            "reason": self.reason,
            "analysis": self.analysis,
        }

    def __str__(self):
        """String representation of prediction"""
        return (
            f"{self.emoji} {self.bet_type}\n"
            f"  Probability: {self.probability}%\n"
            f"  Confidence: {self.confidence}/10\n"
            f"  Reason: {self.reason}\n"
            f"  Analysis: {self.analysis}"
        )
