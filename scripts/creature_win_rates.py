"""Single-battle win rate of a preset against every creature in the library.

Usage:
    python scripts/creature_win_rates.py [--runs 1000] [--preset warrior] [--agent heuristic]
"""

from __future__ import annotations

import argparse
import logging
import time

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np

from dice_battler.sim.campaign.difficulty import classify_difficulty
from dice_battler.sim.config import EngineConfig
from dice_battler.sim.content.registry import ContentRegistry
from dice_battler.sim.play_agents.heuristic_agent import HeuristicAgent
from dice_battler.sim.play_agents.random_agent import RandomAgent
from dice_battler.sim.runner import BatchRunner

_AGENTS = {"random": RandomAgent, "heuristic": HeuristicAgent}


def main() -> None:
    parser = argparse.ArgumentParser(description="Per-creature single-battle win rates")
    parser.add_argument("--runs", type=int, default=1000, help="Battles per creature")
    parser.add_argument("--preset", default="warrior", help="Character preset id")
    parser.add_argument("--agent", choices=sorted(_AGENTS), default="heuristic")
    parser.add_argument("--seed", type=int, default=42, help="Base seed")
    parser.add_argument("--config", default=None, help="EngineConfig JSON overrides")
    parser.add_argument("--parallel", action="store_true", default=False)
    parser.add_argument("--out", default="creature_win_rates.png", help="Chart output path")
    parser.add_argument("--log-level", default="WARNING", help="Logging level")
    args = parser.parse_args()

    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")
    config = EngineConfig.from_json(args.config) if args.config else None

    print("Loading registry...")
    registry = ContentRegistry()
    registry.load_all()
    runner = BatchRunner(registry, agent_class=_AGENTS[args.agent], engine_config=config)

    rows: list[tuple[str, str, float, float, float]] = []
    t0 = time.perf_counter()
    for creature_id, creature in sorted(registry.creatures.items(), key=lambda kv: (kv[1].stamina, kv[1].skill)):
        telemetry = runner.run_batch(
            args.runs, {"preset": args.preset, "creature_id": creature_id},
            base_seed=args.seed, parallel=args.parallel,
        )
        battles = [r.battles[0] for r in telemetry]
        win_rate = np.mean([b.result == "win" for b in battles]) * 100
        rounds = np.mean([b.rounds for b in battles])
        taken = np.mean([b.damage_taken for b in battles])
        difficulty = classify_difficulty(creature.stamina, creature.skill).value
        rows.append((creature.name, difficulty, win_rate, rounds, taken))
    elapsed = time.perf_counter() - t0
    print(f"Done in {elapsed:.1f}s\n")

    print(f"  {'creature':24s} {'difficulty':10s} {'win%':>6s} {'rounds':>7s} {'taken':>6s}")
    for name, difficulty, win_rate, rounds, taken in rows:
        print(f"  {name:24s} {difficulty:10s} {win_rate:6.1f} {rounds:7.1f} {taken:6.1f}")

    fig, ax = plt.subplots(figsize=(12, 6))
    colors = {"easy": "#2ecc71", "medium": "#f1c40f", "hard": "#e67e22", "legendary": "#e74c3c"}
    ax.bar([r[0] for r in rows], [r[2] for r in rows],
           color=[colors[r[1]] for r in rows], edgecolor="black", linewidth=0.5)
    ax.set_ylabel("Win Rate (%)")
    ax.set_ylim(0, 105)
    ax.set_title(f"{args.preset} vs creature library ({args.agent} agent, {args.runs} battles each)")
    plt.setp(ax.get_xticklabels(), rotation=30, ha="right")
    plt.tight_layout()
    plt.savefig(args.out, dpi=150, bbox_inches="tight")
    print(f"\nChart saved to {args.out}")


if __name__ == "__main__":
    main()
