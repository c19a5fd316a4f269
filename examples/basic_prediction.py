"""
Basic example of using the prediction engine
"""
from bettingai import PredictionEngine


def main():
    """Run basic prediction example"""
    print("Betting AI - Basic Example\n")

    # Seeded engine, so the output is the same on every run
    engine = PredictionEngine(seed=2024)

    print("Generating prediction...\n")
    prediction = engine.generate()

    print(prediction)
    print("\n" + "="*60)
    print("Summary:")
    print(f"  - Suggested bet: {prediction.emoji} {prediction.bet_type}")
    print(f"  - Confidence level: {prediction.confidence}/10")

    if prediction.confidence > 7:
        print("  - This is a HIGH confidence prediction")
    elif prediction.confidence > 3:
        print("  - This is a MEDIUM confidence prediction")
    else:
        print("  - This is a LOW confidence prediction")

    print("="*60)
    print("\nPredictions are random. Do not use them for real betting.")


if __name__ == "__main__":
    main()
