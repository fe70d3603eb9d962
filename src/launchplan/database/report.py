"""
===============================================================================
LAUNCHPLAN - Mission Report Writer
===============================================================================
Human-readable text summary of a MissionPlan, for the console or a file
named after the generation time (mission_YYYYMMDD_HHMM.txt).
===============================================================================
"""

import datetime as dt
import logging
from pathlib import Path
from typing import List, Optional, Union

from launchplan.core.data_structures import Strategy

logger = logging.getLogger(__name__)


def report_filename(now: dt.datetime) -> str:
    """File name for a report generated at ``now``."""
    return now.strftime("mission_%Y%m%d_%H%M.txt")


def format_report(plan, now: Optional[dt.datetime] = None) -> str:
    """
    Render a plan as plain text.

    Args:
        plan: MissionPlan
        now:  Generation time printed in the header (default: current time)

    Returns:
        Multi-line report text ending in a newline.
    """
    now = now or dt.datetime.now()
    req, budget, res = plan.request, plan.budget, plan.result

    if res.feasible and res.strategy == Strategy.DIRECT:
        status = "DIRECT MISSION FEASIBLE"
    elif res.feasible:
        status = "ALTERNATE PROFILE FEASIBLE"
    else:
        status = "NOT FEASIBLE WITH CURRENT ASSUMPTIONS"

    lines: List[str] = [
        "Mission planner output",
        f"Generated: {now.strftime('%Y-%m-%d %H:%M:%S')}",
        "",
        f"Rocket: {req.vehicle.name}",
        f"Target: {req.body.name}",
        f"Launch date: {req.start_date.isoformat()}",
        f"Payload: {req.payload_kg:.0f} kg",
        f"Status: {status}",
        f"Strategy: {res.strategy.label}",
        "",
        "DV breakdown (km/s):",
        f"  Earth ascent: {budget.ascent:.2f}",
        f"  Transfer:     {budget.transfer:.2f}",
        f"  Capture:      {budget.capture:.2f}",
        f"  Total req:    {budget.total:.2f}",
        f"  Rocket base capability: {res.base_capability:.2f}",
        f"  Final capability:       {res.final_capability:.2f}",
        f"  Margin:                 {res.final_margin:.2f}",
        "",
    ]
    if res.tankers > 0:
        lines.append(f"Recommended tankers: {res.tankers}")
    lines.append(f"Notes: {res.rationale}")

    if plan.alternatives:
        lines += ["", "Suggestions:"]
        lines += [
            f"  - Use {alt.name} (cap {alt.capability:.2f} km/s) could enable mission"
            for alt in plan.alternatives
        ]

    if plan.chronology:
        lines += ["", "Mission chronology:"]
        lines += [
            f"  {e.regime:<24} | {e.marker:<15} | {e.event}"
            for e in plan.chronology
        ]

    lines += ["", "Next launch windows (estimated):", f" # | {'LAUNCH DATE':<15} | ARRIVAL (Est)"]
    lines += [
        f" {i} | {w.launch_date.isoformat():<15} | {w.arrival_date.isoformat()}"
        for i, w in enumerate(plan.windows, start=1)
    ]
    return "\n".join(lines) + "\n"


def write_report(
    plan,
    directory: Union[str, Path] = ".",
    now: Optional[dt.datetime] = None,
) -> Path:
    """
    Write the plan report to ``directory``.

    Args:
        plan:      MissionPlan
        directory: Output directory (created if needed)
        now:       Generation time, used for the header and the file name

    Returns:
        Path of the written file.
    """
    now = now or dt.datetime.now()
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / report_filename(now)
    path.write_text(format_report(plan, now), encoding="utf-8")
    logger.info("Saved mission summary to %s", path)
    return path
