#!/usr/bin/env python3
"""
===============================================================================
LAUNCHPLAN - MAIN ENTRY POINT
===============================================================================
Estimates whether a launch vehicle can deliver a payload to a target body,
proposes a mitigation strategy when it cannot, and lists the next launch
windows.

USAGE:
    launchplan list
    launchplan plan --vehicle "NASA's SLS" --body Mars --payload 20000
    launchplan plan --vehicle "SpaceX's Starship" --body Mars \\
                    --payload 50000 --start 2026-06-01 --save-report output
    launchplan compare --body "Titan (Saturn)" --payload 5000 --csv out.csv

OUTPUTS (optional):
    --save-report DIR   mission_YYYYMMDD_HHMM.txt text summary
    --db PATH           SQLite mission log
    --plot PATH         Delta-V budget chart
    --csv PATH          Vehicle comparison table

DEPENDENCIES:
    numpy, pandas, matplotlib, pyyaml
===============================================================================
"""

import argparse
import logging
import sys
from typing import List, Optional

import yaml

from launchplan.core.catalog import VehicleCatalog
from launchplan.core.constants import DEFAULT_START_DATE
from launchplan.core.data_structures import InvalidDateError, MissionRequest
from launchplan.database.mission_db import MissionDatabase
from launchplan.database.report import format_report, write_report
from launchplan.guidance.mission_planner import MissionPlanner
from launchplan.simulation.batch import compare_vehicles

logger = logging.getLogger('launchplan')

EXIT_OK = 0
EXIT_INVALID_INPUT = 2

HELP_TEXT = """
Space mission planner:
 - Estimates whether a selected rocket can perform a mission to a chosen body
 - Uses simplified delta-v budgets and empirical staging factors for capability
 - Strategies considered: direct, Oberth/perigee kicks, gravity-assist,
   LEO refueling, kick-stage
 - For serious mission design use dedicated astrodynamics tools and
   high-fidelity models
"""


def setup_logging(verbose: bool = False) -> None:
    """Configure root logging for command-line use."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def list_catalog(catalog: VehicleCatalog) -> str:
    """Render every vehicle and body with its parameters."""
    lines = ["", "Available Rockets:"]
    for i, v in enumerate(catalog.vehicles, start=1):
        lines.append(f" {i}) {v.name}")
        lines.append(
            f"    Wet mass:   {v.wet_mass_kg:.0f} kg | Dry mass: {v.dry_mass_kg:.0f} kg"
            f" | Payload LEO: {v.payload_leo_kg:.0f} kg"
        )
        lines.append(
            f"    Isp_avg:    {v.isp_s:.1f} s   | Staging factor: {v.staging_factor:.2f}"
            f" | Tanker DV/mission: {v.refuel_dv_per_tanker:.2f} km/s"
        )
    lines += ["", "Available Destinations:"]
    for i, b in enumerate(catalog.bodies, start=1):
        lines.append(f" {i}) {b.name}")
        lines.append(
            f"    DV transfer: {b.dv_transfer:.2f} km/s | DV capture: {b.dv_capture:.2f} km/s"
            f" | Synodic: {b.synodic_period_days:.1f} days"
        )
        lines.append(
            f"    Epoch: {b.epoch.isoformat()} | Typical transit: {b.typical_transit_days:.0f} days"
        )
    return "\n".join(lines) + "\n"


def run_plan(args, catalog: VehicleCatalog) -> int:
    """Plan one mission and emit the requested outputs."""
    request = MissionRequest(
        vehicle=catalog.vehicle(args.vehicle),
        body=catalog.body(args.body),
        payload_kg=args.payload,
        start_date=args.start,
    )
    plan = MissionPlanner(catalog=catalog).plan(request)
    print(format_report(plan), end="")

    if args.save_report:
        write_report(plan, args.save_report)
    if args.db:
        with MissionDatabase(args.db) as db:
            result_id = db.record_plan(plan)
        logger.info("Recorded plan in %s (result %d)", args.db, result_id)
    if args.plot:
        # Deferred so the plain planning path never imports matplotlib
        from launchplan.visualization.budget_plots import plot_budget
        plot_budget(plan, args.plot)
    return EXIT_OK


def run_compare(args, catalog: VehicleCatalog) -> int:
    """Compare catalog vehicles on one mission."""
    df = compare_vehicles(
        catalog,
        args.body,
        args.payload,
        args.start,
        vehicles=args.vehicles,
        num_workers=args.workers,
    )
    cols = ["vehicle", "strategy", "tankers", "base_capability",
            "final_capability", "final_margin", "feasible"]
    print(df[cols].to_string(index=False, float_format=lambda x: f"{x:.2f}"))
    if args.csv:
        df.to_csv(args.csv, index=False)
        logger.info("Comparison saved to %s", args.csv)
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='launchplan',
        description='Space mission feasibility planner',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=HELP_TEXT,
    )
    parser.add_argument('--config', type=str, default=None,
                        help='Path to catalog YAML (default: config/mission_catalog.yaml)')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Debug logging')

    sub = parser.add_subparsers(dest='command', required=True)

    sub.add_parser('list', help='List available rockets and targets')

    p_plan = sub.add_parser('plan', help='Plan a mission')
    p_plan.add_argument('--vehicle', required=True, help='Vehicle name')
    p_plan.add_argument('--body', required=True, help='Target body name')
    p_plan.add_argument('--payload', type=float, required=True, help='Payload mass (kg)')
    p_plan.add_argument('--start', default=DEFAULT_START_DATE,
                        help=f'Start date YYYY-MM-DD (default: {DEFAULT_START_DATE})')
    p_plan.add_argument('--save-report', metavar='DIR', default=None,
                        help='Write a text summary to DIR')
    p_plan.add_argument('--db', metavar='PATH', default=None,
                        help='Record the plan in a SQLite mission log')
    p_plan.add_argument('--plot', metavar='PATH', default=None,
                        help='Save a delta-V budget chart')

    p_cmp = sub.add_parser('compare', help='Compare vehicles on one mission')
    p_cmp.add_argument('--body', required=True, help='Target body name')
    p_cmp.add_argument('--payload', type=float, required=True, help='Payload mass (kg)')
    p_cmp.add_argument('--start', default=DEFAULT_START_DATE,
                       help=f'Start date YYYY-MM-DD (default: {DEFAULT_START_DATE})')
    p_cmp.add_argument('--vehicles', nargs='+', default=None,
                       help='Vehicle names (default: all)')
    p_cmp.add_argument('--workers', type=int, default=1,
                       help='Worker processes (default: 1)')
    p_cmp.add_argument('--csv', metavar='PATH', default=None,
                       help='Save the comparison table as CSV')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point. Parses command line arguments and runs the
    requested command.

    Returns:
        Process exit status (0 success, 2 invalid input).
    """
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    try:
        catalog = VehicleCatalog.from_yaml(args.config)
        if args.command == 'list':
            print(list_catalog(catalog), end="")
            return EXIT_OK
        if args.command == 'plan':
            return run_plan(args, catalog)
        return run_compare(args, catalog)
    except InvalidDateError as e:
        logger.error("Invalid date: %s", e)
    except (KeyError, ValueError) as e:
        logger.error("Invalid input: %s", e)
    except FileNotFoundError as e:
        logger.error("Catalog not found: %s", e)
    except yaml.YAMLError as e:
        logger.error("Malformed catalog: %s", e)
    return EXIT_INVALID_INPUT


if __name__ == '__main__':
    sys.exit(main())
