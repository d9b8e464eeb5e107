#!/usr/bin/env python
"""Play offers against a hidden counterpart or evaluate random probing."""
from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import List

from emotive_negotiator import (
    EmotionInferenceEngine,
    ProbeEnvConfig,
    default_catalog,
    emotion_name,
    evaluate_random,
    load_config,
)


def parse_offer(spec: str) -> List[int]:
    try:
        return [int(part) for part in spec.split(",")]
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Offer '{spec}' must be comma-separated integers (e.g. 7,0,0,0)") from exc


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Infer a counterpart's orientation and weights from its emotions")
    parser.add_argument("--config", type=Path, default=Path("configs/default.yaml"), help="Path to YAML config file")
    parser.add_argument("--offer", action="append", type=parse_offer, dest="offers", help="Offer to play, e.g. 7,0,0,0")
    parser.add_argument("--scenario", type=str, default=None, help="Name of the hidden scenario (random if omitted)")
    parser.add_argument("--episodes", type=int, default=5, help="Episodes for the random-probing evaluation")
    parser.add_argument("--rounds", type=int, default=20, help="Offers per evaluation episode")
    parser.add_argument("--seed", type=int, default=7, help="Random seed")
    parser.add_argument("--log-level", type=str, default="WARNING", help="Logging level")
    return parser.parse_args()


def play(args: argparse.Namespace) -> None:
    engine = EmotionInferenceEngine(load_config(args.config))
    catalog = default_catalog(len(engine.quantities), seed=args.seed)
    scenario = catalog.get(args.scenario) if args.scenario else catalog.choose()
    engine.reset_with_scenario(scenario)
    for offer in args.offers:
        result = engine.apply_offer(offer)
        summary = result.summary
        w_mean = ", ".join(f"{v:.2f}" for v in summary.w_mean)
        print(
            f"R{result.round}: {offer} -> {emotion_name(result.emotion):8s} "
            f"theta={summary.theta_mean:6.1f} (MAP {summary.theta_map:5.1f}) w=[{w_mean}]"
        )
    truth = engine.true_parameters()
    print(f"Hidden counterpart: {truth.name} theta={truth.theta} w={list(truth.w)}")


def evaluate(args: argparse.Namespace) -> None:
    config = ProbeEnvConfig(inference=load_config(args.config), max_rounds=args.rounds)
    stats = evaluate_random(config, episodes=args.episodes, seed=args.seed)
    print("Random probing over", args.episodes, "episodes")
    print("  mean |theta error|:", round(stats.theta_error, 2))
    print("  mean w error:", round(stats.w_error, 3))
    print("  theta MAP hit rate:", round(stats.theta_map_hit_rate, 3))
    print("  avg rounds:", round(stats.average_rounds, 2))
    print("  avg posterior entropy:", round(stats.average_entropy, 3))


def main() -> None:
    args = parse_args()
    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    if args.offers:
        play(args)
    else:
        evaluate(args)


if __name__ == "__main__":
    main()
