"""
Wa-Tor Simulator — CLI Entry Point

Usage:
    python main.py --mode animate --fish 10 --sharks 5 --rows 5 --columns 5 --delay-ms 500
    python main.py --mode record --config config/default_config.json
"""

import argparse
import logging
import sys
import time


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Wa-Tor Simulator — fish and sharks on a toroidal ocean",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py --mode animate                                     Print the board every tick
  python main.py --mode animate --fish 10 --sharks 5 --rows 5 --columns 5 --delay-ms 500
  python main.py --mode record --config config/default_config.json  Record population history
        """,
    )

    parser.add_argument(
        "--mode",
        choices=["animate", "record"],
        default=None,
        help="Run mode: 'animate' prints the board each tick, 'record' writes population history",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to JSON config file (default: built-in defaults)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Override random seed (overrides config value)",
    )
    parser.add_argument(
        "--ticks",
        type=int,
        default=None,
        help="Override max ticks",
    )
    parser.add_argument("--fish", type=int, default=None, help="Override initial fish count")
    parser.add_argument("--sharks", type=int, default=None, help="Override initial shark count")
    parser.add_argument("--rows", type=int, default=None, help="Override grid rows")
    parser.add_argument("--columns", type=int, default=None, help="Override grid columns")
    parser.add_argument(
        "--delay-ms",
        type=int,
        default=None,
        help="Override pause between frames in animate mode",
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Override output directory",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging of every move",
    )

    return parser.parse_args(argv)


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )


def build_config(args: argparse.Namespace):
    """Load the config file (or defaults) and apply command-line overrides."""
    from wator.core.config import load_config, get_default_config, apply_param_override

    config = load_config(args.config, validate=False) if args.config else get_default_config()

    overrides = {
        "grid.seed": args.seed,
        "grid.rows": args.rows,
        "grid.columns": args.columns,
        "population.fish": args.fish,
        "population.sharks": args.sharks,
        "run.max_ticks": args.ticks,
        "run.delay_ms": args.delay_ms,
        "output.output_dir": args.output,
    }
    for key, value in overrides.items():
        if value is not None:
            apply_param_override(config, key, value)

    errors = config.validate()
    if errors:
        raise ValueError("Invalid configuration:\n" + "\n".join(f"  - {e}" for e in errors))

    return config


def run_animate(config) -> None:
    """Print the board after every tick until a species dies out or max_ticks is hit."""
    from wator.core.errors import SimulationError
    from wator.simulation.engine import SimulationEngine
    from wator.ui.text_view import render_grid, render_counts

    engine = SimulationEngine(config)
    engine.initialize()

    every = config.run.display_every_n_ticks
    delay = config.run.delay_ms / 1000.0
    max_ticks = config.run.max_ticks

    while max_ticks is None or engine.current_tick < max_ticks:
        try:
            engine.tick()
        except SimulationError as err:
            print(f"[Stopped] {err}")
            break

        if engine.current_tick % every == 0:
            print(render_grid(engine.grid))
            print(render_counts(engine.grid, engine.current_tick))
        if delay > 0:
            time.sleep(delay)


def run_record(config) -> None:
    """Record population counts per tick and write the run directory."""
    from wator.simulation.engine import SimulationEngine
    from wator.simulation.metrics import MetricsCollector
    from wator.logging.run_manager import RunManager

    print(f"[Wa-Tor Simulator] Record run")
    print(f"  Grid: {config.grid.rows}x{config.grid.columns}")
    print(f"  Fish: {config.population.fish}")
    print(f"  Sharks: {config.population.sharks}")
    print(f"  Seed: {config.grid.seed}")
    print(f"  Max Ticks: {config.run.max_ticks}")
    print(f"  Output: {config.output.output_dir}")
    print()

    engine = SimulationEngine(config)
    engine.initialize()
    metrics = MetricsCollector()
    run_manager = RunManager(config)

    metrics.collect(engine.grid, tick=0)
    engine.on_tick = lambda tick, eng: metrics.collect(eng.grid, tick, eng.tick_stats)

    start_time = time.time()
    result = engine.run()
    elapsed = time.time() - start_time

    print(f"[Result]")
    print(f"  Ticks: {result.total_ticks}")
    print(f"  Final fish: {result.final_fish}")
    print(f"  Final sharks: {result.final_sharks}")
    print(f"  Terminated: {result.terminated}")
    if result.terminated:
        print(f"    Reason: {result.termination_reason}")
    print(f"  Elapsed: {elapsed:.1f}s")

    if config.output.write_csv:
        path = run_manager.write_metrics(metrics.to_dataframe())
        print(f"  {path.name} written to {path.parent}")
    if config.output.write_matlab:
        path = run_manager.export_matlab(result.fish_history, result.shark_history)
        print(f"  {path.name} written to {path.parent}")

    summary = {
        "total_ticks": result.total_ticks,
        "final_fish": result.final_fish,
        "final_sharks": result.final_sharks,
        "terminated": result.terminated,
        "termination_reason": result.termination_reason,
        "elapsed_seconds": round(elapsed, 2),
        "seed": config.grid.seed,
        **engine.get_accumulated_stats(),
        **metrics.summary(),
    }
    run_manager.finalize(summary)
    print(f"  Output saved to: {run_manager.run_dir}")


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    configure_logging(args.verbose)

    if args.mode is None:
        print("Error: Specify --mode (animate|record).")
        print("Run with --help for usage information.")
        sys.exit(1)

    try:
        config = build_config(args)
    except (FileNotFoundError, ValueError, KeyError) as err:
        print(f"Error: {err}")
        sys.exit(1)

    if args.mode == "animate":
        run_animate(config)
    elif args.mode == "record":
        run_record(config)


if __name__ == "__main__":
    main()
