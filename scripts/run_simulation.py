"""
CLI entry point for running a Sim Church game headless.

Runs N weeks (sandbox or a challenge scenario), auto-answers choice
events, prints a weekly line and writes CSVs to the output directory.

Usage:
    python scripts/run_simulation.py --weeks 52 --seed 42
    python scripts/run_simulation.py --scenario turnaround --choices random
"""

import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path

# Ensure project root is in sys.path
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from dotenv import load_dotenv
load_dotenv(PROJECT_ROOT / ".env")

from config import get_settings
from simchurch.analysis_layer.weekly_report import export_run, summarize_run
from simchurch.simulation_layer.engine import CHOICE_STRATEGIES, ChurchSimulation
from simchurch.simulation_layer.scenario.scenarios import SCENARIOS


def setup_logging(log_file: Path = None, verbose: bool = False):
    """Console logging, plus an optional log file."""
    logger = logging.getLogger()
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    # drop handlers from an earlier setup so lines are not printed twice
    if logger.handlers:
        logger.handlers.clear()

    formatter = logging.Formatter("[%(levelname)s] %(message)s")

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(logging.WARNING)
    logger.addHandler(console_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8", mode="w")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)


def main():
    parser = argparse.ArgumentParser(description="Sim Church weekly simulation")
    parser.add_argument("--weeks", type=int, default=52, help="Number of weeks to simulate (default: 52)")
    parser.add_argument("--seed", type=int, default=None, help="RNG seed (default: SIM_SEED or random)")
    parser.add_argument(
        "--scenario",
        choices=sorted(SCENARIOS),
        default=None,
        help="Start a challenge scenario instead of a sandbox game",
    )
    parser.add_argument(
        "--choices",
        choices=sorted(CHOICE_STRATEGIES) + ["none"],
        default="first",
        help="How to answer choice events (default: first option)",
    )
    parser.add_argument("--output-dir", type=Path, default=None, help="CSV output directory")
    parser.add_argument("--save-slot", default=None, help="Save the final state to this slot")
    parser.add_argument("--log-file", type=Path, default=None, help="Also write the log to this file")
    parser.add_argument("--verbose", action="store_true", help="Debug-level logging")
    args = parser.parse_args()

    setup_logging(args.log_file, args.verbose)
    settings = get_settings()
    output_dir = args.output_dir or settings.paths.output_dir

    print("=" * 60)
    print("Sim Church - Weekly Simulation")
    print("=" * 60)
    print(f"Weeks: {args.weeks}")
    print(f"Seed: {args.seed if args.seed is not None else settings.simulation.seed}")
    print(f"Mode: {'challenge / ' + args.scenario if args.scenario else 'sandbox'}")
    print(f"Choice events: {args.choices}")
    print()

    # 1. Game setup
    print("[1/3] Setting up game...")
    simulation = ChurchSimulation.new_game(seed=args.seed, settings=settings)
    if args.scenario:
        result = simulation.start_scenario(args.scenario)
        print(f"  {result.message}")
    state = simulation.state
    print(f"  Church: {state.church.name}")
    print(f"  Congregation: {len(state.congregation)} members")
    print()

    # 2. Run
    print("[2/3] Running weeks...")
    resolver = CHOICE_STRATEGIES.get(args.choices)
    weekly = simulation.run_weeks(args.weeks, resolve_choice=resolver)
    for row in weekly.itertuples(index=False):
        event = f"  event={row.event_id}" if isinstance(row.event_id, str) else ""
        print(
            f"  Week {row.week:>3}: attendance={row.attendance:>4}  budget=${row.budget:>8,}"
            f"  rep={row.reputation:>3}  morale={row.congregation_morale:>3}  net={row.net_income:+,}{event}"
        )
    print()

    # 3. Save results
    print("[3/3] Saving results...")
    prefix = f"simchurch_{datetime.now().strftime('%Y%m%d_%H%M%S')}"
    paths = export_run(weekly, simulation.state, output_dir, prefix=prefix)
    for label, path in paths.items():
        print(f"  {label} -> {path}")
    if args.save_slot:
        saved = simulation.save(args.save_slot)
        print(f"  save slot '{args.save_slot}': {'ok' if saved else 'FAILED'}")

    summary = summarize_run(weekly)
    print()
    print("=" * 60)
    print("Simulation complete!")
    print("=" * 60)
    print(f"  Status: {simulation.get_church_status()}")
    print(f"  Attendance: {summary.start_attendance} -> {summary.end_attendance} (peak {summary.peak_attendance})")
    print(f"  Budget: ${summary.start_budget:,} -> ${summary.end_budget:,}")
    print(f"  Average weekly net: ${summary.average_net:,.2f}")
    print(f"  Events: {summary.events_fired}")
    print(f"  Visitors / conversions / departures: "
          f"{summary.new_visitors} / {summary.conversions} / {summary.departures}")

    goals = simulation.check_goals()
    if goals.get("active"):
        print()
        for goal in goals["goals"]:
            mark = "✓" if goal["completed"] else " "
            print(f"  [{mark}] {goal['label']}: {goal['current']} ({goal['progress']}%)")
        if goals["victory"]:
            print("  Victory!")
        elif goals["defeat"]:
            print("  Time is up.")


if __name__ == "__main__":
    main()
