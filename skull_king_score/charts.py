# skull_king_score/charts.py
from __future__ import annotations

from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402
import pandas as pd  # noqa: E402

REQUIRED_COLUMNS = {"round", "player_id", "player_name", "total_score"}


def load_score_sheet(csv_path: str | Path) -> pd.DataFrame:
    """Read a sheet written by game_log.write_round_scores_csv."""
    df = pd.read_csv(csv_path, dtype={"player_id": str, "player_name": str})
    missing = REQUIRED_COLUMNS - set(df.columns)
    if missing:
        raise ValueError(
            f"{csv_path} is not a score sheet; missing columns: "
            + ", ".join(sorted(missing))
        )
    return df


def running_totals(df: pd.DataFrame) -> pd.DataFrame:
    """Pivot to one column per player, indexed by round, holding running totals.

    Columns are keyed by player id (names need not be unique) and relabelled
    with the player's latest name.
    """
    names = df.groupby("player_id", sort=False)["player_name"].last()
    totals = (
        df.pivot_table(
            index="round",
            columns="player_id",
            values="total_score",
            aggfunc="last",
        )
        .sort_index()
    )
    return totals[list(names.index)].rename(columns=names.to_dict())


def plot_running_totals(csv_path: str | Path, output_path: str | Path) -> Path:
    """Draw each player's running total per round and save it as an image."""
    totals = running_totals(load_score_sheet(csv_path))
    output = Path(output_path)

    fig, ax = plt.subplots(figsize=(10, 6))
    for i, player_name in enumerate(totals.columns):
        ax.plot(totals.index, totals.iloc[:, i], marker="o", label=player_name)

    if len(totals.index):
        ax.set_xticks(np.arange(totals.index.min(), totals.index.max() + 1))
    ax.axhline(0, linestyle="--", linewidth=0.8)
    ax.set_xlabel("Manche")
    ax.set_ylabel("Score cumulé")
    ax.set_title("Skull King - score cumulé par manche")
    ax.grid(True, linestyle=":", alpha=0.5)
    ax.legend()
    fig.tight_layout()

    output.parent.mkdir(parents=True, exist_ok=True)
    fig.savefig(output)
    plt.close(fig)
    return output
