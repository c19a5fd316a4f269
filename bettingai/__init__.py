"""
Betting AI - entertainment sports prediction generator
"""

__version__ = "1.0.0"
__author__ = "Andy Cheng"

from bettingai.catalog import DEFAULT_CATALOG, OutcomeCatalog
from bettingai.coherence import CoherenceRules
from bettingai.engine import PredictionEngine
from bettingai.exceptions import InvalidInput, PredictionError, TemplateError
from bettingai.models import BetCategory, OutcomeTemplate, Prediction
from bettingai.narrative import NarrativeComposer
from bettingai.selector import WeightedSelector

__all__ = [
    "BetCategory",
    "CoherenceRules",
    "DEFAULT_CATALOG",
    "InvalidInput",
    "NarrativeComposer",
    "OutcomeCatalog",
    "OutcomeTemplate",
    "Prediction",
    "PredictionEngine",
    "PredictionError",
    "TemplateError",
    "WeightedSelector",
]
