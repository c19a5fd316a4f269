"""
Example of running the engine with a custom catalog and coherence rules
"""
from bettingai import (
    BetCategory,
    CoherenceRules,
    OutcomeCatalog,
    OutcomeTemplate,
    PredictionEngine,
)


def main():
    """Run custom catalog example"""
    print("Betting AI - Custom Catalog Example\n")

    # A tennis-only catalog with two categories
    templates = [
        OutcomeTemplate(
            BetCategory.MATCH_WINNER, "Favourite wins in straight sets", "🎾",
            reasons=(
                "The favourite has dropped only one set in the tournament.",
                "Serve dominance puts {bet} at {probability}%.",
            ),
            analyses=(
                "First-serve points won are well above the tour average. The underdog struggles on return.",
                "Head-to-head meetings have all been one-sided.",
            ),
            weight=2.0,
        ),
        OutcomeTemplate(
            BetCategory.MATCH_WINNER, "Underdog takes a set", "🔥",
            reasons=(
                "The underdog has pushed top players deep into matches this season.",
                "Recent form makes {bet} a {probability}% call.",
            ),
            analyses=(
                "Long rallies suit the underdog on this surface. The favourite has looked tired late in matches.",
                "Tie-breaks have been a strength for the underdog all year.",
            ),
        ),
        OutcomeTemplate(
            BetCategory.OVER_UNDER, "Over 22.5 games", "📈",
            reasons=(
                "Two big servers usually means long sets.",
                "Holds on both sides push {bet} to {probability}%.",
            ),
            analyses=(
                "Both players hold serve in almost nine games out of ten. Tie-breaks are likely.",
                "Their last three meetings all went past twenty-three games.",
            ),
        ),
    ]
    catalog = OutcomeCatalog(
        templates,
        categories=[BetCategory.MATCH_WINNER, BetCategory.OVER_UNDER],
        version="tennis-1",
    )

    # Lean probabilities towards the top of each confidence band
    rules = CoherenceRules(probability_bias=0.5)

    engine = PredictionEngine(catalog=catalog, rules=rules, seed=7)

    print("Generating predictions...\n")
    for prediction in engine.generate_multiple(3):
        low, high = rules.band(prediction.confidence)
        print(prediction)
        print(f"  Allowed band for {prediction.confidence}/10: {low}-{high}%")
        print("-" * 60 + "\n")


if __name__ == "__main__":
    main()
