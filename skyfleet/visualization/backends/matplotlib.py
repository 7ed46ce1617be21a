"""Matplotlib visualizations."""

from __future__ import annotations

from pathlib import Path

import numpy as np

from ...core.bounds import Box
from ...simulation.outputs import SimulationResult


def _box_outline(box: Box):
    xs = [box.min_x, box.max_x, box.max_x, box.min_x, box.min_x]
    zs = [box.min_z, box.min_z, box.max_z, box.max_z, box.min_z]
    return xs, zs


def render_matplotlib_bundle(
    result: SimulationResult,
    output_dir: str | Path,
    *,
    max_tracks: int = 60,
    show_window: bool = False,
):
    try:
        import matplotlib.pyplot as plt
    except ImportError as exc:
        raise ImportError("matplotlib is required for matplotlib backend") from exc

    out_dir = Path(output_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    generated = {}
    figures_to_show = []

    n_tracks = min(result.num_agents, max(0, int(max_tracks)))
    times = result.times_s

    # Top-down tracks
    fig, ax = plt.subplots(figsize=(9, 9))
    wx, wz = _box_outline(result.world)
    sx, sz = _box_outline(result.safe_volume)
    ax.plot(wx, wz, color="black", linewidth=1.5, label="World bounds")
    ax.plot(sx, sz, color="#2ca02c", linewidth=1.0, linestyle="--", label="Safe volume")
    for i in range(n_tracks):
        track = result.positions[:, i, :]
        ax.plot(track[:, 0], track[:, 2], linewidth=0.7, alpha=0.6)
        ax.scatter(track[-1, 0], track[-1, 2], s=6, color="black")
    ax.set_xlabel("x (m)")
    ax.set_ylabel("z (m)")
    ax.set_aspect("equal", adjustable="box")
    ax.set_title(f"Fleet Tracks ({n_tracks} of {result.num_agents} agents)")
    ax.grid(True, alpha=0.25)
    ax.legend(loc="upper right")

    pt = out_dir / "matplotlib_tracks.png"
    fig.tight_layout()
    fig.savefig(pt, dpi=180)
    if show_window:
        figures_to_show.append(fig)
    else:
        plt.close(fig)
    generated["tracks_png"] = str(pt)

    # Altitude and speed over time
    fig2, axes = plt.subplots(2, 1, figsize=(11, 7), sharex=True)
    for i in range(n_tracks):
        axes[0].plot(times, result.positions[:, i, 1], linewidth=0.6, alpha=0.5)
        axes[1].plot(times, result.speeds[:, i], linewidth=0.6, alpha=0.5)
    axes[0].axhline(result.world.min_y, color="black", linewidth=1.0)
    axes[0].axhline(result.world.max_y, color="black", linewidth=1.0)
    axes[0].set_ylabel("Altitude (m)")
    axes[0].grid(True, alpha=0.25)
    if result.speeds.size:
        axes[1].plot(times, np.mean(result.speeds, axis=1), color="black", linewidth=1.8, label="Fleet mean")
        axes[1].legend(loc="best")
    axes[1].set_xlabel("Simulated time (s)")
    axes[1].set_ylabel("Speed (m/s)")
    axes[1].grid(True, alpha=0.25)
    axes[0].set_title("Altitude and Speed History")

    ph = out_dir / "matplotlib_history.png"
    fig2.tight_layout()
    fig2.savefig(ph, dpi=180)
    if show_window:
        figures_to_show.append(fig2)
    else:
        plt.close(fig2)
    generated["history_png"] = str(ph)

    # Final fleet histograms
    report = result.final_report
    fig3, (ax_speed, ax_alt) = plt.subplots(1, 2, figsize=(12, 5))
    speed_edges = np.asarray(report.speed_bin_edges, dtype=float)
    alt_edges = np.asarray(report.altitude_bin_edges, dtype=float)
    ax_speed.bar(
        speed_edges[:-1],
        report.speed_histogram,
        width=np.diff(speed_edges),
        align="edge",
        color="#1f77b4",
        edgecolor="white",
    )
    ax_speed.set_xlabel("Speed (m/s)")
    ax_speed.set_ylabel("Agents")
    ax_speed.set_title("Speed Distribution")
    ax_alt.bar(
        alt_edges[:-1],
        report.altitude_histogram,
        width=np.diff(alt_edges),
        align="edge",
        color="#ff7f0e",
        edgecolor="white",
    )
    ax_alt.set_xlabel("Altitude (m)")
    ax_alt.set_title("Altitude Distribution")
    fig3.suptitle(
        f"t={report.sim_time_s:.1f}s: {report.in_bounds} in bounds, "
        f"{report.out_of_bounds} out of bounds ({100.0 * report.out_of_bounds_fraction:.1f}%)"
    )

    pd = out_dir / "matplotlib_distributions.png"
    fig3.tight_layout()
    fig3.savefig(pd, dpi=180)
    if show_window:
        figures_to_show.append(fig3)
    else:
        plt.close(fig3)
    generated["distributions_png"] = str(pd)

    if show_window and figures_to_show:
        plt.show()

    return generated
