"""
Narrative text for predictions

Reason and analysis strings are filled from catalog templates with the
already-drawn numbers, so the text always describes the same bet, probability
and confidence as the prediction it belongs to.
"""
from string import Formatter
from typing import Dict, List, Optional, Sequence, Tuple

from bettingai.exceptions import InvalidInput, TemplateError
from bettingai.models import BetCategory, OutcomeTemplate
from bettingai.selector import WeightedSelector

PLACEHOLDERS = frozenset({
    "bet",
    "emoji",
    "category",
    "probability",
    "confidence",
    "confidence_label",
    "stars",
    "odds",
})

# Upper confidence bound of each tier
LOW_CONFIDENCE_MAX = 3
MEDIUM_CONFIDENCE_MAX = 7

# Closing sentence of every analysis; each one states both numbers
DEFAULT_VERDICTS: Dict[str, Tuple[str, ...]] = {
    "low": (
        "Treat this as a speculative pick at {probability}% with only {confidence}/10 confidence.",
        "The signal is weak, so {confidence}/10 confidence and a {probability}% estimate call for a small stake.",
        "This is close to a coin flip: {probability}% likely, confidence {confidence}/10.",
    ),
    "medium": (
        "Overall we rate it {probability}% likely with a solid {confidence}/10 confidence.",
        "A balanced value spot at {probability}% and {confidence}/10 confidence.",
        "The numbers line up at {probability}% with {confidence}/10 confidence, fair odds around {odds}.",
    ),
    "high": (
        "This is one of the strongest reads of the day at {probability}% with {confidence}/10 confidence.",
        "Everything points the same way: {probability}% likely and {confidence}/10 confidence {stars}.",
        "Top pick territory with {probability}% probability and {confidence}/10 confidence.",
    ),
}


def confidence_label(confidence: int) -> str:
    """Tier name for a confidence level"""
    if confidence <= LOW_CONFIDENCE_MAX:
        return "low"
    if confidence <= MEDIUM_CONFIDENCE_MAX:
        return "medium"
    return "high"


def implied_odds(probability: int) -> str:
    """Decimal odds implied by a percentage, e.g. 62 -> '1.61'"""
    return f"{100.0 / probability:.2f}"


def template_fields(text: str) -> List[str]:
    """
    Placeholder names used by a template string

    Raises:
        TemplateError: on malformed braces, positional fields, conversions,
            format specs or unknown names
    """
    try:
        parsed = list(Formatter().parse(text))
    except ValueError as e:
        raise TemplateError(f"Malformed template {text!r}: {e}") from e

    fields = []
    for _, field_name, format_spec, conversion in parsed:
        if field_name is None:
            continue
        if field_name not in PLACEHOLDERS:
            raise TemplateError(f"Unknown placeholder {{{field_name}}} in template {text!r}")
        if format_spec or conversion:
            raise TemplateError(f"Placeholder {{{field_name}}} in {text!r} cannot carry a format")
        fields.append(field_name)
    return fields


class NarrativeComposer:
    """Renders reason and analysis text for a chosen outcome"""

    def __init__(self, selector: Optional[WeightedSelector] = None,
                 verdicts: Optional[Dict[str, Sequence[str]]] = None):
        """
        Initialize the composer

        Args:
            selector: Source of randomness for picking variants
            verdicts: Tier name ('low', 'medium', 'high') -> closing sentences
                for the analysis (default: DEFAULT_VERDICTS)
        """
        self.selector = selector if selector is not None else WeightedSelector()
        self.verdicts = {
            tier: tuple(texts)
            for tier, texts in (DEFAULT_VERDICTS if verdicts is None else verdicts).items()
        }
        for tier in ("low", "medium", "high"):
            if not self.verdicts.get(tier):
                raise InvalidInput(f"No verdicts for {tier} confidence")
            for text in self.verdicts[tier]:
                fields = set(template_fields(text))
                if not {"probability", "confidence"} <= fields:
                    raise TemplateError(f"Verdict {text!r} must state probability and confidence")

    def with_selector(self, selector: WeightedSelector) -> "NarrativeComposer":
        """Copy of this composer drawing from another selector"""
        return NarrativeComposer(selector, self.verdicts)

    def validate(self, template: OutcomeTemplate) -> None:
        """Fail fast if any variant of the template cannot be rendered"""
        for text in template.reasons + template.analyses:
            template_fields(text)

    def _values(self, category: BetCategory, template: OutcomeTemplate,
                probability: int, confidence: int) -> Dict[str, str]:
        return {
            "bet": template.bet_type,
            "emoji": template.emoji,
            "category": category.label,
            "probability": str(probability),
            "confidence": str(confidence),
            "confidence_label": confidence_label(confidence),
            "stars": "⭐" * confidence,
            "odds": implied_odds(probability),
        }

    def _fill(self, text: str, values: Dict[str, str]) -> str:
        # Unknown fields are rejected before str.format sees them
        template_fields(text)
        return text.format(**values)

    def _pick(self, variants: Sequence[str]) -> str:
        return self.selector.pick_weighted([(text, 1.0) for text in variants])

    def render(self, category: BetCategory, template: OutcomeTemplate,
               probability: int, confidence: int) -> Tuple[str, str]:
        """
        Render the narrative for a drawn prediction

        Args:
            category: Category the template was chosen from
            template: Chosen outcome template
            probability: Drawn probability
            confidence: Drawn confidence

        Returns:
            Tuple of (reason, analysis)
        """
        if template.category is not category:
            raise InvalidInput(
                f"Template {template.bet_type!r} belongs to {template.category.value}, "
                f"not {category.value}"
            )

        values = self._values(category, template, probability, confidence)
        reason = self._fill(self._pick(template.reasons), values)
        analysis = " ".join([
            self._fill(self._pick(template.analyses), values),
            self._fill(self._pick(self.verdicts[confidence_label(confidence)]), values),
        ])
        return reason, analysis
