"""Export training results to JSON or CSV."""

import json
import csv
from pathlib import Path

from .engine import TrainingResult
from .moves import MOVES
from .stats import exploitability
from .tournament import summarize_runs


def export_json(results: list[TrainingResult], path: str):
    """Export results and their batch summary to a JSON file."""
    data = {
        "runs": [r.to_dict() for r in results],
        "summary": summarize_runs(results),
    }

    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    with open(out, "w") as f:
        json.dump(data, f, indent=2)
    print(f"  ✓ Results exported to {out}")


def export_csv(results: list[TrainingResult], path: str):
    """Export one row per run and player with its final average strategy."""
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)

    fieldnames = [
        "run", "player", "iterations", "wins", "losses", "draws",
        *(f"avg_{m.value}_pct" for m in MOVES),
        "exploitability",
    ]

    with open(out, "w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=fieldnames)
        writer.writeheader()
        for i, r in enumerate(results, 1):
            sides = [
                (r.p1_name, r.p1_end, r.p1_wins, r.p2_wins),
                (r.p2_name, r.p2_end, r.p2_wins, r.p1_wins),
            ]
            for name, end, wins, losses in sides:
                row = {
                    "run": i,
                    "player": name,
                    "iterations": r.iterations,
                    "wins": wins,
                    "losses": losses,
                    "draws": r.draws,
                    "exploitability": round(exploitability(end), 4),
                }
                for m in MOVES:
                    row[f"avg_{m.value}_pct"] = round(end[m.value] * 100, 2)
                writer.writerow(row)
    print(f"  ✓ Results exported to {out}")
