"""Compare RandomAgent vs HeuristicAgent over many campaigns.

Usage:
    python scripts/compare_agents.py [--runs N] [--preset warrior] [--max-battles 20]
"""

from __future__ import annotations

import argparse
import logging
import time

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np

from dice_battler.sim.config import EngineConfig
from dice_battler.sim.content.registry import ContentRegistry
from dice_battler.sim.play_agents.heuristic_agent import HeuristicAgent
from dice_battler.sim.play_agents.random_agent import RandomAgent
from dice_battler.sim.runner import BatchRunner


def run_comparison(
    n_runs: int = 500,
    preset: str = "warrior",
    max_battles: int = 20,
    config: EngineConfig | None = None,
    seed: int = 0,
    out_path: str = "agent_comparison.png",
) -> None:
    print("Loading registry...")
    registry = ContentRegistry()
    registry.load_all()

    encounter_config = {"preset": preset, "max_battles": max_battles}
    results = {}
    for label, agent_class in [("RandomAgent", RandomAgent), ("HeuristicAgent", HeuristicAgent)]:
        print(f"\nRunning {n_runs} campaigns with {label}...")
        runner = BatchRunner(registry, agent_class=agent_class, engine_config=config)
        t0 = time.time()
        telemetry = runner.run_campaign_batch(n_runs=n_runs, encounter_config=encounter_config, base_seed=seed)
        elapsed = time.time() - t0

        scores = [r.score for r in telemetry]
        battles_won = [r.battles_won for r in telemetry]
        luck_tests = sum(b.luck_tests for r in telemetry for b in r.battles)
        lucky = sum(b.lucky_tests for r in telemetry for b in r.battles)

        results[label] = {
            "telemetry": telemetry,
            "scores": scores,
            "battles_won": battles_won,
            "luck_rate": lucky / luck_tests * 100 if luck_tests else 0.0,
            "elapsed": elapsed,
        }

        print(f"  Time: {elapsed:.1f}s ({elapsed/n_runs*1000:.0f}ms/run)")
        print(f"  Avg score: {np.mean(scores):,.0f} (median {np.median(scores):,.0f}, max {max(scores):,})")
        print(f"  Avg battles won: {np.mean(battles_won):.1f} (max {max(battles_won)})")
        print(f"  Lucky tests: {lucky}/{luck_tests}")

    generate_charts(results, n_runs, out_path)


def generate_charts(results: dict, n_runs: int, out_path: str) -> None:
    fig, axes = plt.subplots(2, 2, figsize=(14, 10))
    fig.suptitle(f"RandomAgent vs HeuristicAgent: {n_runs} Campaigns", fontsize=16, fontweight="bold")

    colors = {"RandomAgent": "#e74c3c", "HeuristicAgent": "#2ecc71"}
    labels = list(results.keys())

    # --- Chart 1: Average score ---
    ax = axes[0, 0]
    means = [np.mean(results[l]["scores"]) for l in labels]
    bars = ax.bar(labels, means, color=[colors[l] for l in labels], edgecolor="black", linewidth=0.5)
    for bar, mean in zip(bars, means):
        ax.text(bar.get_x() + bar.get_width()/2, bar.get_height(),
                f"{mean:,.0f}", ha="center", va="bottom", fontsize=11, fontweight="bold")
    ax.set_ylabel("Score")
    ax.set_title("Average Campaign Score")

    # --- Chart 2: Score distribution ---
    ax = axes[0, 1]
    for label in labels:
        ax.hist(results[label]["scores"], bins=30, alpha=0.6, label=label,
                color=colors[label], edgecolor="black", linewidth=0.3)
    ax.set_xlabel("Final Score")
    ax.set_ylabel("Count")
    ax.set_title("Score Distribution")
    ax.legend()

    # --- Chart 3: Battles won distribution ---
    ax = axes[1, 0]
    max_bw = max(max(results[l]["battles_won"]) for l in labels)
    bins = np.arange(-0.5, max_bw + 1.5, 1)
    for label in labels:
        bw = results[label]["battles_won"]
        ax.hist(bw, bins=bins, alpha=0.6, label=f"{label} (avg={np.mean(bw):.1f})",
                color=colors[label], edgecolor="black", linewidth=0.3)
    ax.set_xlabel("Battles Won Per Campaign")
    ax.set_ylabel("Count")
    ax.set_title("Battles Won Distribution")
    ax.legend()

    # --- Chart 4: Summary table ---
    ax = axes[1, 1]
    ax.axis("off")
    row_labels = ["Avg Score", "Median Score", "Avg Battles Won", "Max Battles Won", "Lucky Tests", "Time (s)"]
    table_data = []
    for metric in row_labels:
        row = []
        for label in labels:
            r = results[label]
            if metric == "Avg Score":
                row.append(f'{np.mean(r["scores"]):,.0f}')
            elif metric == "Median Score":
                row.append(f'{np.median(r["scores"]):,.0f}')
            elif metric == "Avg Battles Won":
                row.append(f'{np.mean(r["battles_won"]):.1f}')
            elif metric == "Max Battles Won":
                row.append(f'{max(r["battles_won"])}')
            elif metric == "Lucky Tests":
                row.append(f'{r["luck_rate"]:.1f}%')
            elif metric == "Time (s)":
                row.append(f'{r["elapsed"]:.1f}')
        table_data.append(row)

    table = ax.table(cellText=table_data, rowLabels=row_labels, colLabels=labels, cellLoc="center", loc="center")
    table.auto_set_font_size(False)
    table.set_fontsize(11)
    table.scale(1.0, 1.6)
    for j, label in enumerate(labels):
        table[0, j].set_facecolor(colors[label])
        table[0, j].set_text_props(color="white", fontweight="bold")

    plt.tight_layout()
    plt.savefig(out_path, dpi=150, bbox_inches="tight")
    print(f"\nChart saved to {out_path}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    parser.add_argument("--runs", type=int, default=500, help="Number of campaigns per agent")
    parser.add_argument("--preset", default="warrior", help="Character preset id")
    parser.add_argument("--max-battles", type=int, default=20, help="Campaign length cap")
    parser.add_argument("--seed", type=int, default=0, help="Base seed")
    parser.add_argument("--config", default=None, help="EngineConfig JSON overrides")
    parser.add_argument("--out", default="agent_comparison.png", help="Chart output path")
    parser.add_argument("--log-level", default="WARNING", help="Logging level")
    args = parser.parse_args()

    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")
    config = EngineConfig.from_json(args.config) if args.config else None
    run_comparison(args.runs, args.preset, args.max_battles, config, args.seed, args.out)
