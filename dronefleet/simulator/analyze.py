"""Offline analysis of exported completed orders.

Works on the frame returned by :meth:`FleetSimulation.completed_orders_frame`
(or a CSV written by ``export_completed_orders_csv`` and read back with
pandas). Orders are binned by creation time; simulation seconds are laid on
a midnight base so bins read as clock times.
"""

from __future__ import annotations

from os import PathLike

import matplotlib.pyplot as plt
import pandas as pd

BASE_TIME = pd.Timestamp("2000-01-01")
SEC2MIN = 1.0 / 60.0


def _indexed_by_creation(frame: pd.DataFrame) -> pd.DataFrame:
    df = frame.copy()
    df.index = BASE_TIME + pd.to_timedelta(df["created_at"], unit="s")
    return df.sort_index()


def summarize_wait_times(frame: pd.DataFrame, freq: str = "30min") -> pd.DataFrame:
    """Per-bin mean, standard deviation and count of wait and delivery times.

    Returns:
        pandas.DataFrame: One row per non-empty bin with the columns
        ``wait_mu``, ``wait_sigma``, ``total_mu``, ``total_sigma`` and ``n``,
        all times in seconds. Empty when ``frame`` has no rows.
    """
    columns = ["wait_mu", "wait_sigma", "total_mu", "total_sigma", "n"]
    if frame.empty:
        return pd.DataFrame(columns=columns)

    df = _indexed_by_creation(frame)
    stats = df.resample(freq).agg(
        wait_mu=("wait_seconds", "mean"),
        wait_sigma=("wait_seconds", "std"),
        total_mu=("total_seconds", "mean"),
        total_sigma=("total_seconds", "std"),
        n=("wait_seconds", "count"),
    )
    return stats.loc[stats["n"] > 0, columns].copy()


def plot_wait_times(
    frame: pd.DataFrame,
    save_path: str | PathLike | None = None,
    freq: str = "30min",
    title: str = "Order Wait Time",
):
    """Box plot of wait times (minutes) per creation-time bin.

    Returns:
        matplotlib.figure.Figure | None: The figure, or None if there is
        nothing to plot. The figure is closed after saving when
        ``save_path`` is given.
    """
    if frame.empty:
        return None

    df = _indexed_by_creation(frame)
    df["wait_min"] = df["wait_seconds"] * SEC2MIN
    df["period"] = df.index.floor(freq)

    data = []
    labels = []
    for period, group in df.groupby("period"):
        data.append(group["wait_min"].to_numpy())
        labels.append(period.strftime("%H:%M"))

    fig, ax = plt.subplots(1, 1, figsize=(12, 6))
    ax.boxplot(
        data,
        patch_artist=True,
        showmeans=True,
        meanline=True,
        boxprops=dict(facecolor="lightgreen", alpha=0.7),
        meanprops=dict(color="red", linewidth=2),
        medianprops=dict(color="darkgreen", linewidth=2),
        flierprops=dict(marker="o", markerfacecolor="red", markersize=3, alpha=0.5),
    )
    ax.set_xticks(range(1, len(labels) + 1), labels)
    ax.set_title(f"{title} ({freq} bins)", fontsize=14)
    ax.set_xlabel("Creation Time", fontsize=12)
    ax.set_ylabel("Wait (minutes)", fontsize=12)
    ax.grid(True, alpha=0.3, axis="y")
    if len(labels) > 8:
        ax.tick_params(axis="x", labelrotation=45)

    ax.plot([], [], color="red", linewidth=2, label="Mean")
    ax.plot([], [], color="darkgreen", linewidth=2, label="Median")
    ax.legend(loc="upper right")
    fig.tight_layout()

    if save_path is not None:
        fig.savefig(save_path, dpi=150)
        plt.close(fig)
    return fig
