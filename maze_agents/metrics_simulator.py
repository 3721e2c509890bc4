import argparse
import csv
import logging
import os
import statistics
import time

import matplotlib.pyplot as plt

from .agent import TieBreak
from .config import DEFAULT_MAX_TICKS
from .simulation import Simulation

logger = logging.getLogger(__name__)

DEFAULT_TIE_BREAKS = [t.value for t in TieBreak]
DEFAULT_SIZES = [10, 25]

AGENT_METRICS = [
    "algorithm_steps",
    "forward_moves",
    "backtracks",
    "unique_explored",
    "path_length",
    "frontier_max",
]


def run_single(rows, cols, agents=1, tie_break="priority", seed=None, max_ticks=DEFAULT_MAX_TICKS):
    """Generates one maze, runs every agent to completion and returns a flat result row."""
    sim = Simulation(tie_break=tie_break)

    t0 = time.perf_counter()
    sim.generate(rows, cols, seed=seed)
    sim.spawn_agents(agents)
    for _ in sim.run(max_ticks=max_ticks):
        pass
    elapsed = time.perf_counter() - t0

    states = [a.state.value for a in sim.agents]
    result = {
        "rows": rows,
        "cols": cols,
        "agents": agents,
        "tie_break": TieBreak(tie_break).value,
        "seed": seed,
        "ticks": sim.ticks,
        "elapsed_sec": elapsed,
        "solved": states.count("solved"),
        "stuck": states.count("stuck"),
        "finished": sim.is_done,
    }
    # Per-agent metrics are averaged so rows stay comparable across agent counts
    for m in AGENT_METRICS:
        result[m] = statistics.mean(a.metrics[m] for a in sim.agents)
    return result


def aggregate_results(rows, group_by=("rows", "cols", "tie_break")):
    grouped = {}
    for r in rows:
        key = tuple(r[k] for k in group_by)
        grouped.setdefault(key, []).append(r)

    def agg_stat(values):
        if not values:
            return {"avg": 0, "min": 0, "max": 0, "stdev": 0}
        return {
            "avg": statistics.mean(values),
            "min": min(values),
            "max": max(values),
            "stdev": statistics.pstdev(values) if len(values) > 1 else 0,
        }

    metrics = ["elapsed_sec", "ticks"] + AGENT_METRICS

    summary = []
    for key, items in grouped.items():
        entry = dict(zip(group_by, key))
        entry["count"] = len(items)
        for m in metrics:
            stats = agg_stat([it[m] for it in items])
            for stat_name, value in stats.items():
                entry[f"{m}_{stat_name}"] = value
        entry["finished_rate"] = sum(1 for it in items if it["finished"]) / len(items)
        summary.append(entry)
    return summary


def write_csv(path, rows):
    if not rows:
        return
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=list(rows[0].keys()))
        writer.writeheader()
        for r in rows:
            writer.writerow(r)


def plot_metric(summary, metric_key, out_path):
    labels = [f"{row['rows']}x{row['cols']}\n({row['tie_break']})" for row in summary]
    values = [row.get(metric_key, 0) for row in summary]
    plt.figure(figsize=(max(8, len(labels) * 0.6), 5))
    plt.bar(range(len(values)), values)
    plt.xticks(range(len(values)), labels, rotation=45, ha="right")
    plt.ylabel(metric_key)
    plt.tight_layout()
    directory = os.path.dirname(out_path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    plt.savefig(out_path)
    plt.close()


def main(argv=None):
    parser = argparse.ArgumentParser(description="Run repeated maze simulations and plot solver metrics.")
    parser.add_argument("--runs", type=int, default=10, help="Runs per (size, tie-break) pair")
    parser.add_argument("--sizes", type=int, nargs="*", default=DEFAULT_SIZES, help="Square maze sizes to try")
    parser.add_argument("--agents", type=int, default=1)
    parser.add_argument("--tie_breaks", nargs="*", default=DEFAULT_TIE_BREAKS, choices=DEFAULT_TIE_BREAKS)
    parser.add_argument("--max_ticks", type=int, default=DEFAULT_MAX_TICKS)
    parser.add_argument("--seed", type=int, default=None, help="Base seed (default: current time)")
    parser.add_argument("--out_dir", default="metrics_output")
    parser.add_argument("--no_charts", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    all_rows = []
    seed_base = args.seed if args.seed is not None else int(time.time())

    for size in args.sizes:
        for tie_break in args.tie_breaks:
            for i in range(args.runs):
                res = run_single(
                    rows=size,
                    cols=size,
                    agents=args.agents,
                    tie_break=tie_break,
                    seed=seed_base + i,
                    max_ticks=args.max_ticks,
                )
                all_rows.append(res)
            logger.info("finished %d runs of %dx%d (%s)", args.runs, size, size, tie_break)

    write_csv(os.path.join(args.out_dir, "raw_results.csv"), all_rows)

    summary = aggregate_results(all_rows)
    write_csv(os.path.join(args.out_dir, "summary.csv"), summary)

    if not args.no_charts:
        for metric in [
            "elapsed_sec_avg",
            "ticks_avg",
            "algorithm_steps_avg",
            "backtracks_avg",
            "unique_explored_avg",
            "path_length_avg",
            "frontier_max_avg",
        ]:
            plot_metric(summary, metric, os.path.join(args.out_dir, f"{metric}.png"))

    print(f"Wrote results to {args.out_dir}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
