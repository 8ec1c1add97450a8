"""Entry point for ``python -m zombiegrid``.

Loads the default YAML config, builds a simulation engine, and either
opens a Pygame window to watch the outbreak or runs a fixed number of
ticks headless and logs the outcome.
"""

from __future__ import annotations

import argparse
import logging
import pathlib

from zombiegrid.simulation.config import SimulationConfig
from zombiegrid.simulation.engine import SimulationEngine

logger = logging.getLogger("zombiegrid")

_DEFAULT_CONFIG = (
    pathlib.Path(__file__).resolve().parent.parent / "config" / "default.yaml"
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="zombiegrid",
        description="Zombiegrid - human vs. zombie cellular automaton",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=pathlib.Path,
        default=_DEFAULT_CONFIG,
        help="Path to YAML config file (default: config/default.yaml)",
    )
    parser.add_argument(
        "--cell-size",
        type=int,
        default=4,
        help="Pixel size per grid cell (default: 4)",
    )
    parser.add_argument(
        "--fps",
        type=int,
        default=30,
        help="Target frames per second (default: 30)",
    )
    parser.add_argument(
        "--speed",
        type=float,
        default=10.0,
        help="Simulation ticks per second (default: 10)",
    )
    parser.add_argument(
        "--headless",
        action="store_true",
        help="Run without a window and log the census when done",
    )
    parser.add_argument(
        "--ticks",
        type=int,
        default=100,
        help="Ticks to run in headless mode (default: 100)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: INFO)",
    )
    return parser


def run_headless(engine: SimulationEngine, ticks: int) -> None:
    """Advance ``engine`` by ``ticks`` and log the final census."""
    engine.run(ticks)
    census = engine.census()
    logger.info(
        f"After {engine.tick} ticks: humans={census.humans} "
        f"({census.human_cells} cells), zombies={census.zombies} "
        f"({census.zombie_cells} cells), empty={census.empty_cells}"
    )


def main(argv: list[str] | None = None) -> None:
    """Parse CLI args, create engine, launch renderer or run headless."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=args.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = SimulationConfig.from_yaml(args.config)
    with SimulationEngine(config=config) as engine:
        if args.headless:
            run_headless(engine, args.ticks)
            return

        from zombiegrid.ui.pygame_client import PygameRenderer

        renderer = PygameRenderer(
            engine=engine,
            cell_size=args.cell_size,
            ticks_per_second=args.speed,
        )
        renderer.run(fps=args.fps)


if __name__ == "__main__":
    main()
