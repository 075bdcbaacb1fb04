"""Example analysis script demonstrating programmatic usage.

Run this script to see how to use the confluence engine from Python, both
one-shot and over a streaming candle window.
"""

from pathlib import Path
import sys

# Add src to path if running directly
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from confluence_engine.analysis import ConfluenceAnalyzer, LightweightAnalyzer
from confluence_engine.config import load_config
from confluence_engine.data import SyntheticCandleGenerator
from confluence_engine.signals import Direction
from confluence_engine.streaming import CandleWindow


def main():
    """Run example analyses."""
    print("=" * 60)
    print("Confluence Engine Example")
    print("=" * 60)

    # 1. Load configuration (packaged defaults)
    config = load_config()
    print(f"\nConfig: {config.name} v{config.version}")

    generator = SyntheticCandleGenerator(seed=42)
    analyzer = ConfluenceAnalyzer(config)

    # 2. One-shot analysis of each market shape
    print("\n" + "=" * 60)
    print("ONE-SHOT ANALYSIS")
    print("=" * 60)

    for shape in ("bullish", "bearish", "sideways", "mean_reverting"):
        candles = generator.generate(80, shape, noise_pct=0.0005)
        result = analyzer.analyze(candles)
        light = LightweightAnalyzer(config.lightweight).analyze(candles)

        print(
            f"{shape:<15} full={result.direction.value:<8} score={result.score:5.1f} "
            f"conf={result.confidence:3d}%  light={light.direction.value:<7} "
            f"prob={light.probability:.0f}%"
        )
        for reason in result.rationale:
            print(f"{'':<15} - {reason}")

    # 3. Streaming replay
    print("\n" + "=" * 60)
    print("STREAMING REPLAY")
    print("=" * 60)

    window = CandleWindow(maxlen=200)
    signals = 0
    for candle in generator.generate(150, "bullish", noise_pct=0.001):
        window.push(candle)
        result = window.analyze(analyzer)
        if result.direction != Direction.NEUTRAL and analyzer.is_signal_strong(result):
            signals += 1

    print(f"Candles replayed:   {len(window)}")
    print(f"Strong signals:     {signals}")
    print("=" * 60)


if __name__ == "__main__":
    main()
