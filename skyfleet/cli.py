"""Command-line entrypoint for fleet simulation runs."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from .config import load_config
from .simulation.engine import FleetSimulator
from .visualization import render_matplotlib_bundle


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Autonomous aircraft fleet simulation")
    parser.add_argument("--config", default=None, help="Path to config JSON")
    parser.add_argument("--output-dir", default=None, help="Output directory override")
    parser.add_argument("--agents", type=int, default=None, help="Number of agents override")
    parser.add_argument("--seed", type=int, default=None, help="Random seed override")
    parser.add_argument("--duration", type=float, default=None, help="Simulated duration in seconds")
    parser.add_argument("--dt", type=float, default=None, help="Frame delta in seconds")
    parser.add_argument("--skip-matplotlib", action="store_true", help="Disable matplotlib outputs")
    parser.add_argument(
        "--interactive",
        action="store_true",
        help="Open live matplotlib windows after rendering",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity",
    )
    return parser


def main(argv=None):
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    cfg = load_config(args.config)
    if args.output_dir is not None:
        cfg.visualization.output_dir = args.output_dir
    if args.agents is not None:
        cfg.fleet.num_agents = args.agents
    if args.seed is not None:
        cfg.fleet.seed = args.seed
    if args.duration is not None:
        cfg.runtime.duration_s = args.duration
    if args.dt is not None:
        cfg.runtime.dt_s = args.dt

    output_dir = Path(cfg.visualization.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    simulator = FleetSimulator(cfg)
    result = simulator.run()

    summary_path = output_dir / "simulation_summary.json"
    npz_path = output_dir / "simulation_tracks.npz"
    result.save_json_summary(summary_path)
    result.save_npz(npz_path)

    print(f"[done] summary: {summary_path}")
    print(f"[done] tracks:  {npz_path}")

    generated = {}
    if cfg.visualization.enable_matplotlib and not args.skip_matplotlib:
        try:
            generated["matplotlib"] = render_matplotlib_bundle(
                result,
                output_dir,
                max_tracks=cfg.visualization.max_tracks,
                show_window=args.interactive,
            )
        except Exception as exc:
            print(f"[warn] matplotlib backend failed: {exc}")

    if generated:
        print("[done] generated visual outputs:")
        for backend, outputs in generated.items():
            for key, path in outputs.items():
                print(f"  - {backend}:{key} -> {path}")

    return result


if __name__ == "__main__":
    main()
