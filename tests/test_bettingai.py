"""
Unit tests for the prediction engine
"""
import dataclasses
import re
import unittest
from concurrent.futures import ThreadPoolExecutor

import numpy as np

from bettingai.catalog import DEFAULT_CATALOG, MIN_VARIANTS, OutcomeCatalog
from bettingai.coherence import DEFAULT_BANDS, CoherenceRules
from bettingai.engine import MAX_BATCH_SIZE, PredictionEngine
from bettingai.exceptions import InvalidInput, PredictionError, TemplateError
from bettingai.models import BetCategory, OutcomeTemplate, Prediction
from bettingai.narrative import (
    NarrativeComposer,
    confidence_label,
    implied_odds,
    template_fields,
)
from bettingai.selector import WeightedSelector

SENTENCE_END = re.compile(r"(?<=[.!?])\s+")


def count_sentences(text):
    return len([part for part in SENTENCE_END.split(text.strip()) if part])


def make_template(category=BetCategory.MATCH_WINNER, bet_type="Team A wins",
                  reasons=None, analyses=None, emoji="🎯", **kwargs):
    return OutcomeTemplate(
        category=category,
        bet_type=bet_type,
        emoji=emoji,
        reasons=reasons or (
            "{bet} ({probability}% likely, confidence {confidence}/10).",
            "{bet} is {probability}% likely with confidence {confidence}/10.",
        ),
        analyses=analyses or (
            "Team A has won five in a row.",
            "Team A looks sharper in every department.",
        ),
        **kwargs
    )


class ScriptedSelector(WeightedSelector):
    """Selector returning scripted integers, picks stay seeded"""

    def __init__(self, ints, seed=0):
        super().__init__(seed)
        self.ints = list(ints)

    def int_in_range(self, low, high, skew=None):
        value = self.ints.pop(0)
        if not low <= value <= high:
            raise AssertionError(f"scripted {value} outside [{low}, {high}]")
        return value


class TestModels(unittest.TestCase):
    """Test Prediction and OutcomeTemplate models"""

    def test_prediction_creation(self):
        """Test creating a prediction"""
        prediction = Prediction("Draw (X)", "🤝", 40, 3, "Reason.", "One. Two.")
        self.assertEqual(prediction.bet_type, "Draw (X)")
        self.assertEqual(prediction.to_dict(), {
            "betType": "Draw (X)",
            "emoji": "🤝",
            "probability": 40,
            "confidence": 3,
            "reason": "Reason.",
            "analysis": "One. Two.",
        })

    def test_prediction_validation(self):
        """Test prediction range validation"""
        with self.assertRaises(InvalidInput):
            Prediction("X", "🤝", 0, 5, "r", "a")
        with self.assertRaises(InvalidInput):
            Prediction("X", "🤝", 100, 5, "r", "a")
        with self.assertRaises(InvalidInput):
            Prediction("X", "🤝", 50, 11, "r", "a")
        with self.assertRaises(ValueError):
            Prediction("X", "🤝", 50, 0, "r", "a")

    def test_prediction_is_immutable(self):
        """Test predictions cannot be modified"""
        prediction = Prediction("X", "🤝", 50, 5, "r", "a")
        with self.assertRaises(dataclasses.FrozenInstanceError):
            prediction.probability = 60

    def test_template_validation(self):
        """Test template weight and bet type validation"""
        with self.assertRaises(InvalidInput):
            make_template(weight=0)
        with self.assertRaises(InvalidInput):
            make_template(bet_type="")

    def test_category_label(self):
        """Test human-readable category labels"""
        self.assertEqual(BetCategory.MATCH_WINNER.label, "match winner")


class TestWeightedSelector(unittest.TestCase):
    """Test WeightedSelector"""

    def test_pick_weighted_rejects_bad_input(self):
        """Test weighted pick rejects empty or non-positive weights"""
        selector = WeightedSelector(1)
        with self.assertRaises(InvalidInput):
            selector.pick_weighted([])
        with self.assertRaises(InvalidInput):
            selector.pick_weighted([("a", 1.0), ("b", 0)])
        with self.assertRaises(InvalidInput):
            selector.pick_weighted([("a", -2.0)])

    def test_pick_weighted_follows_weights(self):
        """Test weighted pick favours heavier items"""
        selector = WeightedSelector(7)
        self.assertEqual(selector.pick_weighted([("only", 0.5)]), "only")

        picks = [selector.pick_weighted([("a", 1000.0), ("b", 0.001)]) for _ in range(200)]
        self.assertGreaterEqual(picks.count("a"), 195)

    def test_int_in_range_is_inclusive(self):
        """Test integer draws include both bounds"""
        selector = WeightedSelector(3)
        values = {selector.int_in_range(1, 3) for _ in range(300)}
        self.assertEqual(values, {1, 2, 3})
        self.assertEqual(selector.int_in_range(5, 5), 5)
        with self.assertRaises(InvalidInput):
            selector.int_in_range(4, 3)

    def test_skewed_in_range(self):
        """Test bias pushes draws toward the matching end"""
        selector = WeightedSelector(11)
        high = [selector.skewed_in_range(1, 100, 1.0) for _ in range(1000)]
        low = [selector.skewed_in_range(1, 100, -1.0) for _ in range(1000)]

        self.assertTrue(all(1 <= v <= 100 for v in high + low))
        self.assertGreater(sum(high) / len(high), 65)
        self.assertLess(sum(low) / len(low), 35)

        with self.assertRaises(InvalidInput):
            selector.skewed_in_range(1, 10, 1.5)

    def test_seeded_selectors_repeat(self):
        """Test equal seeds give equal draws"""
        a = WeightedSelector(42)
        b = WeightedSelector(42)
        self.assertEqual([a.int_in_range(1, 1000) for _ in range(20)],
                         [b.int_in_range(1, 1000) for _ in range(20)])

    def test_spawn_is_independent_and_reproducible(self):
        """Test spawned selectors own a reproducible child generator"""
        parent = WeightedSelector(5)
        child = parent.spawn()
        self.assertIsNot(child.rng, parent.rng)

        again = WeightedSelector(5).spawn()
        self.assertEqual([child.int_in_range(1, 1000) for _ in range(10)],
                         [again.int_in_range(1, 1000) for _ in range(10)])


class TestCoherenceRules(unittest.TestCase):
    """Test CoherenceRules"""

    def test_default_bands_are_monotonic(self):
        """Test default bands rise and narrow with confidence"""
        rules = CoherenceRules()
        for confidence in range(2, 11):
            low, high = rules.band(confidence)
            prev_low, prev_high = rules.band(confidence - 1)
            self.assertGreaterEqual(low, prev_low)
            self.assertGreaterEqual(high, prev_high)
            self.assertLess(high - low, prev_high - prev_low)

    def test_band_bounds(self):
        """Test band lookup at the edges"""
        rules = CoherenceRules()
        self.assertEqual(rules.band(1), (15, 85))
        self.assertEqual(rules.band(10), (70, 95))
        with self.assertRaises(InvalidInput):
            rules.band(0)
        with self.assertRaises(InvalidInput):
            rules.band(11)

    def test_invalid_bands(self):
        """Test malformed band tables are rejected"""
        missing = dict(DEFAULT_BANDS)
        del missing[4]
        with self.assertRaises(InvalidInput):
            CoherenceRules(missing)

        widening = dict(DEFAULT_BANDS)
        widening[10] = (60, 99)
        with self.assertRaises(InvalidInput):
            CoherenceRules(widening)

        out_of_range = dict(DEFAULT_BANDS)
        out_of_range[1] = (0, 85)
        with self.assertRaises(InvalidInput):
            CoherenceRules(out_of_range)

        with self.assertRaises(InvalidInput):
            CoherenceRules(probability_bias=2.0)

    def test_draws_stay_in_band(self):
        """Test drawn probabilities fall inside their band"""
        rules = CoherenceRules()
        selector = WeightedSelector(2024)
        for _ in range(500):
            confidence, probability = rules.draw(selector)
            self.assertTrue(1 <= confidence <= 10)
            self.assertTrue(rules.check(confidence, probability))

    def test_check(self):
        """Test band membership check"""
        rules = CoherenceRules()
        self.assertTrue(rules.check(7, 62))
        self.assertFalse(rules.check(10, 20))
        self.assertFalse(rules.check(2, 95))


class TestNarrativeComposer(unittest.TestCase):
    """Test NarrativeComposer"""

    def setUp(self):
        self.composer = NarrativeComposer(WeightedSelector(9))

    def test_render_uses_drawn_numbers(self):
        """Test rendered text states the drawn numbers"""
        template = make_template()
        reason, analysis = self.composer.render(BetCategory.MATCH_WINNER, template, 62, 7)

        self.assertIn("Team A wins", reason)
        self.assertIn("62%", reason)
        self.assertIn("7/10", reason)
        self.assertIn("62%", analysis)
        self.assertIn("7/10", analysis)
        self.assertEqual(count_sentences(reason), 1)
        self.assertTrue(2 <= count_sentences(analysis) <= 4)

    def test_derived_placeholders(self):
        """Test derived placeholders such as odds and stars"""
        template = make_template(reasons=(
            "{emoji} {category} at odds {odds}, {confidence_label} {stars}.",
            "{emoji} {category} at odds {odds}, {confidence_label} {stars}!",
        ))
        reason, _ = self.composer.render(BetCategory.MATCH_WINNER, template, 50, 9)
        self.assertIn("🎯 match winner at odds 2.00, high", reason)
        self.assertIn("⭐" * 9, reason)

    def test_unknown_placeholder(self):
        """Test unknown placeholders are rejected"""
        template = make_template(reasons=("{team} wins.", "{bet} wins."))
        with self.assertRaises(TemplateError):
            self.composer.validate(template)
        with self.assertRaises(TemplateError):
            for _ in range(20):
                self.composer.render(BetCategory.MATCH_WINNER, template, 50, 5)

    def test_malformed_placeholders(self):
        """Test formats, positional fields and broken braces are rejected"""
        for text in ("{probability:.1f}%", "{0} wins", "{} wins", "{bet!r}", "{probability"):
            with self.assertRaises(TemplateError, msg=text):
                template_fields(text)

    def test_template_from_other_category(self):
        """Test rendering a template under the wrong category"""
        template = make_template(category=BetCategory.SPECIAL)
        with self.assertRaises(InvalidInput):
            self.composer.render(BetCategory.MATCH_WINNER, template, 50, 5)

    def test_verdicts_must_state_numbers(self):
        """Test verdicts must mention probability and confidence"""
        with self.assertRaises(TemplateError):
            NarrativeComposer(verdicts={
                "low": ("Weak at {probability}%.",),
                "medium": ("{probability}% and {confidence}/10.",),
                "high": ("{probability}% and {confidence}/10.",),
            })
        with self.assertRaises(InvalidInput):
            NarrativeComposer(verdicts={"low": ("{probability}% {confidence}/10.",)})

    def test_helpers(self):
        """Test confidence tiers and implied odds"""
        self.assertEqual(confidence_label(1), "low")
        self.assertEqual(confidence_label(3), "low")
        self.assertEqual(confidence_label(4), "medium")
        self.assertEqual(confidence_label(7), "medium")
        self.assertEqual(confidence_label(8), "high")
        self.assertEqual(implied_odds(62), "1.61")
        self.assertEqual(implied_odds(50), "2.00")


class TestOutcomeCatalog(unittest.TestCase):
    """Test OutcomeCatalog"""

    def test_default_catalog(self):
        """Test the default catalog covers every category"""
        self.assertEqual(DEFAULT_CATALOG.list_categories(), frozenset(BetCategory))
        for category in BetCategory:
            templates = DEFAULT_CATALOG.templates_for(category)
            self.assertTrue(templates)
            for template in templates:
                self.assertIs(template.category, category)
                self.assertGreaterEqual(len(template.reasons), MIN_VARIANTS)
                self.assertGreaterEqual(len(template.analyses), MIN_VARIANTS)

    def test_bet_types_are_unique(self):
        """Test default bet types are unique"""
        bet_types = [template.bet_type for template in DEFAULT_CATALOG]
        self.assertEqual(len(bet_types), len(set(bet_types)))
        self.assertEqual(len(DEFAULT_CATALOG), len(bet_types))

    def test_declared_category_without_templates(self):
        """Test a declared category needs templates"""
        with self.assertRaises(InvalidInput):
            OutcomeCatalog([make_template()])

    def test_undeclared_category(self):
        """Test templates must belong to a declared category"""
        with self.assertRaises(InvalidInput):
            OutcomeCatalog([make_template(category=BetCategory.SPECIAL)],
                           categories=[BetCategory.MATCH_WINNER])

    def test_too_few_variants(self):
        """Test templates need enough text variants"""
        template = make_template(reasons=("{bet} wins.",))
        with self.assertRaises(InvalidInput):
            OutcomeCatalog([template], categories=[BetCategory.MATCH_WINNER])

    def test_unknown_category_lookup(self):
        """Test looking up an undeclared category"""
        catalog = OutcomeCatalog([make_template()], categories=[BetCategory.MATCH_WINNER])
        self.assertEqual(catalog.categories, (BetCategory.MATCH_WINNER,))
        with self.assertRaises(InvalidInput):
            catalog.templates_for(BetCategory.HANDICAP)


class TestPredictionEngine(unittest.TestCase):
    """Test PredictionEngine"""

    def assertValid(self, prediction, rules=None):
        rules = rules or CoherenceRules()
        self.assertIsInstance(prediction, Prediction)
        self.assertTrue(1 <= prediction.probability <= 99)
        self.assertTrue(1 <= prediction.confidence <= 10)
        self.assertTrue(rules.check(prediction.confidence, prediction.probability))
        for text in (prediction.reason, prediction.analysis):
            self.assertNotIn("{", text)
            self.assertNotIn("}", text)
        self.assertEqual(count_sentences(prediction.reason), 1)
        self.assertTrue(2 <= count_sentences(prediction.analysis) <= 4)

    def test_generate_invariants(self):
        """Test generated predictions are coherent and varied"""
        engine = PredictionEngine(seed=123)
        emoji_for = {template.bet_type: template.emoji for template in DEFAULT_CATALOG}
        seen = set()

        for _ in range(300):
            prediction = engine.generate()
            self.assertValid(prediction)
            self.assertEqual(prediction.emoji, emoji_for[prediction.bet_type])
            self.assertIn(f"{prediction.probability}%", prediction.analysis)
            self.assertIn(f"{prediction.confidence}/10", prediction.analysis)
            seen.add(prediction.bet_type)

        self.assertGreater(len(seen), 10)

    def test_scripted_scenario(self):
        """Test a prediction built from scripted draws"""
        catalog = OutcomeCatalog([make_template()], categories=[BetCategory.MATCH_WINNER])
        engine = PredictionEngine(catalog=catalog, selector=ScriptedSelector([7, 62]))

        prediction = engine.generate()

        self.assertEqual(prediction.bet_type, "Team A wins")
        self.assertEqual(prediction.emoji, "🎯")
        self.assertEqual(prediction.probability, 62)
        self.assertEqual(prediction.confidence, 7)
        for text in (prediction.reason, prediction.analysis):
            self.assertIn("62%", text)
            self.assertIn("7/10", text)

    def test_seeded_engines_match(self):
        """Test equal seeds give equal predictions"""
        first = PredictionEngine(seed=99)
        second = PredictionEngine(seed=99)
        self.assertEqual(first.generate(), second.generate())
        self.assertEqual(first.generate_multiple(5), second.generate_multiple(5))

    def test_generate_multiple(self):
        """Test batch generation"""
        engine = PredictionEngine(seed=5)
        predictions = engine.generate_multiple(5)
        self.assertEqual(len(predictions), 5)
        for prediction in predictions:
            self.assertValid(prediction)

        self.assertEqual(len(engine.generate_multiple(1)), 1)
        self.assertEqual(len(engine.generate_multiple(MAX_BATCH_SIZE)), MAX_BATCH_SIZE)

    def test_generate_multiple_bounds(self):
        """Test batch size limits and types"""
        engine = PredictionEngine(seed=5)
        for n in (0, 11, -1):
            with self.assertRaises(InvalidInput):
                engine.generate_multiple(n)
        for n in ("3", 2.0, True):
            with self.assertRaises(InvalidInput):
                engine.generate_multiple(n)
        with self.assertRaises(InvalidInput):
            engine.generate_multiple(np.int64(11))

    def test_generate_multiple_accepts_numpy_integers(self):
        """Test batch sizes given as numpy integers"""
        engine = PredictionEngine(seed=5)
        predictions = engine.generate_multiple(np.int64(3))
        self.assertEqual(len(predictions), 3)
        self.assertEqual(len(engine.generate_multiple(np.uint8(MAX_BATCH_SIZE))), MAX_BATCH_SIZE)

    def test_bad_catalog_template_fails_at_construction(self):
        """Test broken templates fail when the engine is built"""
        template = make_template(analyses=("{weather} helps.", "Fine."))
        catalog = OutcomeCatalog([template], categories=[BetCategory.MATCH_WINNER])
        with self.assertRaises(PredictionError):
            PredictionEngine(catalog=catalog, seed=1)

    def test_composer_shares_engine_selector(self):
        """Test the composer draws from the engine selector"""
        selector = WeightedSelector(1)
        engine = PredictionEngine(selector=selector, composer=NarrativeComposer())
        self.assertIs(engine.composer.selector, selector)

    def test_spawn(self):
        """Test spawned engines share data but not randomness"""
        engine = PredictionEngine(seed=8)
        child = engine.spawn()
        self.assertIs(child.catalog, engine.catalog)
        self.assertIs(child.rules, engine.rules)
        self.assertIsNot(child.selector, engine.selector)
        self.assertIs(child.composer.selector, child.selector)

    def test_concurrent_spawned_engines(self):
        """Test spawned engines in parallel threads"""
        engine = PredictionEngine(seed=31)
        workers = [engine.spawn() for _ in range(4)]

        with ThreadPoolExecutor(max_workers=4) as pool:
            batches = list(pool.map(
                lambda worker: [worker.generate() for _ in range(50)], workers
            ))

        self.assertEqual(len(batches), 4)
        for batch in batches:
            self.assertEqual(len(batch), 50)
            for prediction in batch:
                self.assertValid(prediction)


if __name__ == "__main__":
    unittest.main()
