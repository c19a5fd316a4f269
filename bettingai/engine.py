"""
Prediction engine: draws a coherent random prediction from the catalog
"""
import logging
import numbers
from typing import List, Optional

from bettingai.catalog import DEFAULT_CATALOG, OutcomeCatalog
from bettingai.coherence import CoherenceRules
from bettingai.exceptions import InvalidInput
from bettingai.models import Prediction
from bettingai.narrative import NarrativeComposer
from bettingai.selector import SeedLike, WeightedSelector

logger = logging.getLogger(__name__)

# Constants
MIN_BATCH_SIZE = 1
MAX_BATCH_SIZE = 10
CATEGORY_WEIGHT = 1.0


class PredictionEngine:
    """
    Generates entertainment predictions

    The catalog and coherence rules are immutable and may be shared between
    engines. The selector is not: an engine is meant for one thread (or one
    event loop) at a time, use :meth:`spawn` to hand an independent engine
    to another worker.
    """

    def __init__(self, catalog: Optional[OutcomeCatalog] = None,
                 rules: Optional[CoherenceRules] = None,
                 selector: Optional[WeightedSelector] = None,
                 composer: Optional[NarrativeComposer] = None,
                 seed: SeedLike = None):
        """
        Initialize the prediction engine

        Args:
            catalog: Outcome catalog (default: DEFAULT_CATALOG)
            rules: Coherence rules (default: CoherenceRules())
            selector: Random source; takes precedence over ``seed``
            composer: Narrative composer; rebound to the engine's selector
            seed: Seed for a new selector when none is given
        """
        self.catalog = catalog if catalog is not None else DEFAULT_CATALOG
        self.rules = rules if rules is not None else CoherenceRules()
        self.selector = selector if selector is not None else WeightedSelector(seed)
        if composer is None:
            self.composer = NarrativeComposer(self.selector)
        else:
            self.composer = composer.with_selector(self.selector)

        for template in self.catalog:
            self.composer.validate(template)

    def spawn(self) -> "PredictionEngine":
        """Engine sharing this catalog and rules with an independent random source"""
        return PredictionEngine(
            catalog=self.catalog,
            rules=self.rules,
            selector=self.selector.spawn(),
            composer=self.composer,
        )

    def generate(self) -> Prediction:
        """
        Generate one prediction

        Returns:
            Fully rendered Prediction
        """
        category = self.selector.pick_weighted(
            [(category, CATEGORY_WEIGHT) for category in self.catalog.categories]
        )
        template = self.selector.pick_weighted(
            [(template, template.weight) for template in self.catalog.templates_for(category)]
        )
        confidence, probability = self.rules.draw(self.selector)
        reason, analysis = self.composer.render(category, template, probability, confidence)

        prediction = Prediction(
            bet_type=template.bet_type,
            emoji=template.emoji,
            probability=probability,
            confidence=confidence,
            reason=reason,
            analysis=analysis,
        )
        logger.debug("Generated prediction: %s (%d%%, %d/10)",
                     prediction.bet_type, probability, confidence)
        return prediction

    def generate_multiple(self, n: int) -> List[Prediction]:
        """
        Generate several independent predictions

        Bet types may repeat within a batch.

        Args:
            n: Number of predictions, between MIN_BATCH_SIZE and MAX_BATCH_SIZE

        Returns:
            List of predictions
        """
        if isinstance(n, bool) or not isinstance(n, numbers.Integral):
            raise InvalidInput(f"Batch size must be an integer, got {n!r}")
        n = int(n)
        if not MIN_BATCH_SIZE <= n <= MAX_BATCH_SIZE:
            raise InvalidInput(
                f"Batch size must be between {MIN_BATCH_SIZE} and {MAX_BATCH_SIZE}, got {n}"
            )
        return [self.generate() for _ in range(n)]
