# belote_engine/results/summary.py
"""
Aggregate statistics over score CSVs written by `belote_engine.cli`.

    python -m belote_engine.results.summary belote_scores.csv --plot totals.png
"""
from __future__ import annotations

import argparse
from pathlib import Path
from typing import List

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402
import pandas as pd  # noqa: E402

from ..paths import resolve_results_path  # noqa: E402


def _load(csv_path: str | Path) -> pd.DataFrame:
    df = pd.read_csv(csv_path)
    missing = {
        "game_id",
        "round_number",
        "team_id",
        "team_name",
        "round_score",
        "total_score",
        "winner_team_id",
    } - set(df.columns)
    if missing:
        raise ValueError(f"{csv_path} is missing columns: {sorted(missing)}")
    return df


def game_winners(df: pd.DataFrame) -> pd.Series:
    """Winning team name per finished game_id, from the recorded winner_team_id."""
    names = df.drop_duplicates("team_id").set_index("team_id")["team_name"]
    finished = df.dropna(subset=["winner_team_id"]).drop_duplicates("game_id")
    winner_ids = finished.set_index("game_id")["winner_team_id"].astype(int)
    return winner_ids.map(names).rename("winner")


def summarize_scores(csv_path: str | Path) -> pd.DataFrame:
    """
    Per-team summary of a score CSV.

    Columns: games_won, rounds, mean_round_score, ci95 (1.96 * standard error),
    failed_rounds.
    """
    df = _load(csv_path)

    stats = (
        df.groupby("team_name")["round_score"]
        .agg(["mean", "std", "count"])
        .rename(columns={"mean": "mean_round_score", "count": "rounds"})
    )
    stats["se"] = stats["std"].fillna(0.0) / np.sqrt(stats["rounds"])
    stats["ci95"] = 1.96 * stats["se"]

    if "failed" in df.columns:
        failed = df["failed"].astype(str).str.lower() == "true"
        stats["failed_rounds"] = failed.groupby(df["team_name"]).sum().astype(int)
    else:
        stats["failed_rounds"] = 0

    wins = game_winners(df).value_counts()
    stats["games_won"] = wins.reindex(stats.index).fillna(0).astype(int)

    return stats[["games_won", "rounds", "mean_round_score", "ci95", "failed_rounds"]]


def plot_total_scores(csv_path: str | Path, output_path: str | Path) -> Path:
    """Plot the per-round mean cumulative score of each team with a 95% CI."""
    df = _load(csv_path)

    round_stats = (
        df.groupby(["team_name", "round_number"])["total_score"]
        .agg(["mean", "std", "count"])
        .reset_index()
    )
    round_stats["se"] = round_stats["std"].fillna(0.0) / np.sqrt(round_stats["count"])
    round_stats["ci95"] = 1.96 * round_stats["se"]

    fig, ax = plt.subplots(figsize=(10, 6))
    for team_name in sorted(round_stats["team_name"].unique()):
        sub = round_stats[round_stats["team_name"] == team_name].sort_values("round_number")
        ax.errorbar(
            sub["round_number"],
            sub["mean"],
            yerr=sub["ci95"],
            marker="o",
            capsize=3,
            label=team_name,
        )

    ax.set_xlabel("Round")
    ax.set_ylabel("Mean total score across games")
    ax.set_title("Per-round mean total score with 95% CI")
    ax.grid(True)
    ax.legend()
    fig.tight_layout()

    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(output, dpi=150)
    plt.close(fig)
    return output


def main(argv: List[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Summarize Belote score CSVs.")
    parser.add_argument("csv", help="Score CSV (relative paths resolve to the results dir).")
    parser.add_argument("--plot", default=None, help="Optional PNG path for the totals plot.")
    args = parser.parse_args(argv)

    csv_path = resolve_results_path(args.csv)
    print(summarize_scores(csv_path).to_string())
    if args.plot:
        print(f"Wrote {plot_total_scores(csv_path, resolve_results_path(args.plot))}")


if __name__ == "__main__":
    main()
