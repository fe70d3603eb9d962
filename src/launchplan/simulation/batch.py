"""
===============================================================================
LAUNCHPLAN - Batch Vehicle Comparison
===============================================================================
Plans the same payload / target / start date for several vehicles and
collects the outcomes in a pandas DataFrame.

Every plan is independent and reads the catalog without mutating it, so the
runs are farmed out to a multiprocessing Pool with no coordination. Records
are frozen dataclasses and pickle cleanly across process boundaries.
===============================================================================
"""

import logging
from multiprocessing import Pool
from typing import Any, Dict, List, Optional, Sequence, Tuple

import pandas as pd

from launchplan.core.data_structures import DateLike, MissionRequest
from launchplan.guidance.mission_planner import MissionPlanner

logger = logging.getLogger(__name__)

COLUMNS = [
    "vehicle", "body", "payload_kg", "base_capability", "total_required",
    "strategy", "bonus_dv", "tankers", "final_capability", "final_margin",
    "feasible", "rationale", "first_launch", "first_arrival",
]


def _plan_single_wrapper(args: Tuple[MissionRequest, int]) -> Dict[str, Any]:
    """
    Module-level wrapper for one plan.

    Required because multiprocessing Pool.map cannot pickle bound methods.

    Parameters
    ----------
    args : tuple of (MissionRequest, window_count)

    Returns
    -------
    dict
        One row of the comparison table.
    """
    request, window_count = args
    plan = MissionPlanner(window_count=window_count).plan(request)
    res = plan.result
    first = plan.windows[0] if plan.windows else None
    return {
        "vehicle": request.vehicle.name,
        "body": request.body.name,
        "payload_kg": request.payload_kg,
        "base_capability": res.base_capability,
        "total_required": res.total_required,
        "strategy": res.strategy.label,
        "bonus_dv": res.bonus_dv,
        "tankers": res.tankers,
        "final_capability": res.final_capability,
        "final_margin": res.final_margin,
        "feasible": res.feasible,
        "rationale": res.rationale,
        "first_launch": first.launch_date if first else None,
        "first_arrival": first.arrival_date if first else None,
    }


def compare_vehicles(
    catalog,
    body,
    payload_kg: float,
    start_date: DateLike,
    vehicles: Optional[Sequence[str]] = None,
    num_workers: Optional[int] = None,
    window_count: int = 1,
) -> pd.DataFrame:
    """
    Compare vehicles flying the same mission.

    Parameters
    ----------
    catalog : VehicleCatalog
        Source of vehicle records.
    body : Body or str
        Target body record, or its catalog name.
    payload_kg : float
        Payload mass (kg).
    start_date : date or str
        Earliest launch date.
    vehicles : sequence of str, optional
        Vehicle names to compare. Default: every catalog vehicle.
    num_workers : int, optional
        Worker processes. 1 runs serially in-process; None lets the Pool
        pick ``os.cpu_count()``.
    window_count : int
        Windows computed per plan (only the first is reported).

    Returns
    -------
    pd.DataFrame
        One row per vehicle, in request order, with the columns in COLUMNS.

    Raises
    ------
    KeyError
        If a vehicle or body name is not in the catalog.
    InvalidDateError
        If the start date cannot be parsed.
    """
    if isinstance(body, str):
        body = catalog.body(body)
    selected = (
        catalog.vehicles if vehicles is None
        else [catalog.vehicle(name) for name in vehicles]
    )

    # Build (and validate) every request before spawning workers
    jobs: List[Tuple[MissionRequest, int]] = [
        (MissionRequest(v, body, payload_kg, start_date), window_count)
        for v in selected
    ]
    logger.info(
        "Comparing %d vehicle(s) to %s with %.0f kg payload",
        len(jobs), body.name, payload_kg,
    )

    if num_workers == 1 or len(jobs) <= 1:
        rows = [_plan_single_wrapper(job) for job in jobs]
    else:
        with Pool(processes=num_workers) as pool:
            rows = pool.map(_plan_single_wrapper, jobs)

    df = pd.DataFrame(rows, columns=COLUMNS)
    logger.info("%d of %d vehicle(s) feasible", int(df["feasible"].sum()), len(df))
    return df
