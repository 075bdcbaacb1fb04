"""Command-line interface for running a one-shot analysis."""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from loguru import logger

from .analysis import (
    AnalysisResult,
    ConfluenceAnalyzer,
    LightweightAnalyzer,
    LightweightResult,
)
from .config import load_config, resolved_config_hash, save_config
from .data import Candle, SyntheticCandleGenerator, TrendType, load_candles
from .utils import setup_logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Technical-analysis confluence engine (CALL/PUT/NEUTRAL signals)"
    )

    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--input",
        "-i",
        type=Path,
        help="CSV file with time,open,high,low,close[,volume] columns",
    )
    source.add_argument(
        "--synthetic",
        choices=[t.value for t in TrendType if t != TrendType.FLAT],
        help="Analyze a generated candle series of the given shape",
    )

    parser.add_argument(
        "--engine",
        choices=["full", "lightweight"],
        default="full",
        help="Analysis engine (default: full)",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=None,
        help="Engine configuration YAML merged over the defaults",
    )
    parser.add_argument("--min-score", type=float, default=None, help="Override gate min score")
    parser.add_argument(
        "--min-confidence", type=float, default=None, help="Override gate min confidence"
    )
    parser.add_argument(
        "--candles", type=int, default=120, help="Synthetic series length (default: 120)"
    )
    parser.add_argument("--seed", type=int, default=42, help="Synthetic series seed")
    parser.add_argument(
        "--save-config",
        type=Path,
        default=None,
        help="Write the resolved configuration (defaults, file and overrides) to YAML",
    )
    parser.add_argument("--json", action="store_true", help="Print the result as JSON")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")

    return parser


def _gate_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    gate: Dict[str, float] = {}
    if args.min_score is not None:
        gate["min_score"] = args.min_score
    if args.min_confidence is not None:
        gate["min_confidence"] = args.min_confidence
    return {"gate": gate} if gate else {}


def _load_input(args: argparse.Namespace) -> List[Candle]:
    if args.input is not None:
        return load_candles(args.input)

    generator = SyntheticCandleGenerator(seed=args.seed)
    return generator.generate(args.candles, TrendType(args.synthetic))


def _print_full(result: AnalysisResult, strong: bool, config_hash: str) -> None:
    print("\n" + "=" * 60)
    print("CONFLUENCE ANALYSIS")
    print("=" * 60)
    print(f"Direction:        {result.direction.value}")
    print(f"Score:            {result.score:.1f}")
    print(f"Confidence:       {result.confidence}%")
    print(f"Trend:            {result.trend.value}")
    print(f"Entry:            {result.entry_price:.5f}")
    if result.stop_loss is not None and result.take_profit is not None:
        print(f"Stop Loss:        {result.stop_loss:.5f}")
        print(f"Take Profit:      {result.take_profit:.5f}")
    print(f"ATR:              {result.volatility:.5f}")
    print(f"Candles:          {result.candle_count}")
    print(f"Config Hash:      {config_hash}")
    print(f"Strong Signal:    {'YES' if strong else 'no'}")
    print("-" * 60)
    for signal in result.indicators.as_list():
        print(f"{signal.name:<12} {signal.direction.value:<8} {signal.score:5.1f}/{signal.weight:.0f}")
    print("-" * 60)
    for reason in result.rationale:
        print(f"- {reason}")
    print("=" * 60)


def _print_lightweight(result: LightweightResult) -> None:
    print("\n" + "=" * 60)
    print("LIGHTWEIGHT ANALYSIS")
    print("=" * 60)
    print(f"Direction:        {result.direction.value}")
    print(f"Score:            {result.score:.0f}")
    print(f"Probability:      {result.probability:.0f}%")
    print(f"Ready:            {'YES' if result.ready else 'no'}")
    print("-" * 60)
    for factor in result.factors:
        print(f"{factor.status.value:<9} {factor.weight:4.0f}  {factor.label}")
    print("=" * 60)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main CLI entry point.

    Returns:
        Exit code (0 for success, 1 for error).
    """
    args = build_parser().parse_args(argv)

    if args.config is not None and not args.config.exists():
        print(f"Error: Config file not found: {args.config}", file=sys.stderr)
        return 1

    try:
        config = load_config(args.config, overrides=_gate_overrides(args))

        setup_logger(
            log_level="DEBUG" if args.verbose else config.log_level,
            log_to_file=config.log_to_file,
            log_dir=Path("logs"),
        )

        config_hash = resolved_config_hash(config)
        if args.save_config is not None:
            save_config(config, args.save_config)

        candles = _load_input(args)
        logger.info(f"Analyzing {len(candles)} candles with the {args.engine} engine")

        if args.engine == "lightweight":
            light = LightweightAnalyzer(config.lightweight).analyze(candles)
            if args.json:
                payload = light.to_dict()
                payload["config_hash"] = config_hash
                print(json.dumps(payload, indent=2))
            else:
                _print_lightweight(light)
            return 0

        analyzer = ConfluenceAnalyzer(config)
        result = analyzer.analyze(candles)
        strong = analyzer.is_signal_strong(result)

        if args.json:
            payload = result.to_dict()
            payload["strong"] = strong
            payload["config_hash"] = config_hash
            print(json.dumps(payload, indent=2))
        else:
            _print_full(result, strong, config_hash)

        return 0

    except Exception as e:
        logger.error(f"Analysis failed: {e}")
        print(f"\nError: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
