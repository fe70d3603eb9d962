"""
===============================================================================
LAUNCHPLAN - Mission Planner (Strategy Resolution)
===============================================================================
Turns a capability / requirement mismatch into a concrete mission profile
and runs the full planning flow for one request.

Decision procedure (one evaluation per request):

    margin >= 0:
        direct, or an Oberth-kick annotation for a small vehicle flying a
        light payload to an eligible long-transfer target
    margin < 0, first applicable in fixed priority order:
        1. gravity assist   -- target supports multi-flyby routing
        2. orbital refuel   -- vehicle accepts tanker flights
        3. kick stage       -- shortfall smaller than 1.5 km/s
        4. infeasible

Each strategy is described by an entry in STRATEGY_PROFILES holding its
rationale template and the strategy-specific rows of the mission chronology.
===============================================================================
"""

import logging
from typing import Dict, List, Optional, Sequence, Tuple

from launchplan.core.constants import (
    DEFAULT_WINDOW_COUNT,
    GRAVITY_ASSIST_BONUS_KM_S,
    GRAVITY_ASSIST_TRANSIT_DAYS,
    KICK_STAGE_BONUS_KM_S,
    KICK_STAGE_MAX_SHORTFALL_KM_S,
    OBERTH_KICK_BONUS_KM_S,
    OBERTH_KICK_MAX_PAYLOAD_KG,
)
from launchplan.core.data_structures import (
    AlternativeVehicle,
    ChronologyEvent,
    MissionPlan,
    MissionRequest,
    MissionResult,
    Strategy,
    StrategyOutcome,
)
from launchplan.dynamics.launch_vehicle import CapabilityModel
from launchplan.guidance.maneuver_planner import BudgetCalculator, TankerPlanner
from launchplan.guidance.window_scheduler import WindowScheduler

logger = logging.getLogger(__name__)


# =============================================================================
# STRATEGY PROFILES
# =============================================================================

STRATEGY_PROFILES: Dict[Strategy, dict] = {

    Strategy.DIRECT: {
        "rationale": "Direct transfer with current vehicle",
        "chronology": [
            ("Trans Injection", "T+ 1-3d", "Escape / Trans-Target Burn"),
        ],
    },

    Strategy.OBERTH_KICK: {
        "rationale": "Oberth/kick-perigee method for low-mass mission (+{bonus:.2f} km/s)",
        "chronology": [
            ("Oberth Kicks", "Days-Weeks", "Perigee burns to increase injection energy"),
        ],
    },

    Strategy.GRAVITY_ASSIST: {
        "rationale": (
            "Alternate route: multi-flyby gravity assist "
            "(+{bonus:.2f} km/s, ~{transit:.0f} day flight)"
        ),
        "chronology": [
            ("Gravity Assist Phase", "Years", "Multiple flybys (VEEGA/EGA approximation)"),
        ],
    },

    Strategy.ORBITAL_REFUEL: {
        "rationale": (
            "LEO refueling: estimated {tankers} tanker(s) required "
            "(+{gain:.2f} km/s each)"
        ),
        "chronology": [
            ("Orbital Rendezvous", "T+ 12h - 48h", "Tanker Docking & Fuel Transfer"),
            ("Departure Burn", "T+ 1-2d", "Full Injection to Interplanetary Trajectory"),
        ],
    },

    Strategy.KICK_STAGE: {
        "rationale": "Assumption: added solid kick stage (+{bonus:.2f} km/s)",
        "chronology": [
            ("Kick Stage Ignition", "T+ 01:00:00", "Final Impulsive Injection"),
        ],
    },

    Strategy.INFEASIBLE: {
        "rationale": "No feasible profile found with current assumptions",
        "chronology": [],
    },
}

# Rows shared by every feasible mission, before and after the strategy rows
_CHRONOLOGY_HEAD = [
    ("Pre-Launch", "T- 00:00:10", "Final Systems Checkout"),
    ("Atmospheric Ascent", "T+ 00:01:00", "Max-Q / Stack Separation"),
    ("LEO Insertion", "T+ 00:08:30", "Circularize / Prepare for Ops"),
]
_CHRONOLOGY_TAIL = [
    ("Interplanetary Cruise", "Months-Years", "Mid-course Corrections & Trajectory Maintenance"),
    ("Approach & Capture", "Arr - Days", "Terminal Descent & Insertion Ops"),
    ("Landing/Arrival", "Arrival", "Surface contact / Orbit achieved"),
]


def build_chronology(strategy: Strategy, feasible: bool) -> Tuple[ChronologyEvent, ...]:
    """
    Mission chronology for a resolved strategy.

    Returns an empty tuple for infeasible missions.
    """
    if not feasible or strategy == Strategy.INFEASIBLE:
        return ()
    rows = _CHRONOLOGY_HEAD + STRATEGY_PROFILES[strategy]["chronology"] + _CHRONOLOGY_TAIL
    return tuple(ChronologyEvent(*row) for row in rows)


# =============================================================================
# STRATEGY RESOLVER
# =============================================================================

class StrategyResolver:
    """
    Selects the mitigation strategy for a single request.

    The candidate order is fixed in code (gravity assist, refuel, kick
    stage, infeasible) and never depends on catalog or collection order.

    Args:
        tanker_planner: Sizes refuelling campaigns (default TankerPlanner())
    """

    def __init__(self, tanker_planner: Optional[TankerPlanner] = None) -> None:
        self.tanker_planner = tanker_planner or TankerPlanner()

    @staticmethod
    def _oberth_applies(vehicle, body, payload_kg: float) -> bool:
        return (
            vehicle.oberth_kick_capable
            and body.oberth_kick_eligible
            and payload_kg <= OBERTH_KICK_MAX_PAYLOAD_KG
        )

    def select(self, vehicle, body, payload_kg: float, margin: float) -> Strategy:
        """
        Pick the strategy for a given base margin.

        Args:
            vehicle:    Vehicle record
            body:       Body record
            payload_kg: Payload mass (kg)
            margin:     Base capability minus total requirement (km/s)

        Returns:
            The selected Strategy.
        """
        if margin >= 0.0:
            if self._oberth_applies(vehicle, body, payload_kg):
                return Strategy.OBERTH_KICK
            return Strategy.DIRECT

        if body.supports_gravity_assist:
            return Strategy.GRAVITY_ASSIST
        if vehicle.supports_refuel:
            return Strategy.ORBITAL_REFUEL
        if margin > -KICK_STAGE_MAX_SHORTFALL_KM_S:
            return Strategy.KICK_STAGE
        return Strategy.INFEASIBLE

    def resolve(
        self,
        vehicle,
        body,
        payload_kg: float,
        capability: float,
        total_required: float,
    ) -> StrategyOutcome:
        """
        Resolve the mission profile and the resulting final margin.

        Args:
            vehicle:        Vehicle record
            body:           Body record
            payload_kg:     Payload mass (kg)
            capability:     Base vehicle capability (km/s)
            total_required: Total delta-V requirement (km/s)

        Returns:
            StrategyOutcome with the bonus, tanker count, final capability,
            final margin, feasibility flag and rationale.
        """
        margin = capability - total_required
        strategy = self.select(vehicle, body, payload_kg, margin)

        bonus = 0.0
        tankers = 0
        transit_days = None
        template = STRATEGY_PROFILES[strategy]["rationale"]

        if strategy == Strategy.OBERTH_KICK:
            bonus = OBERTH_KICK_BONUS_KM_S
            rationale = template.format(bonus=bonus)
        elif strategy == Strategy.GRAVITY_ASSIST:
            bonus = GRAVITY_ASSIST_BONUS_KM_S
            transit_days = GRAVITY_ASSIST_TRANSIT_DAYS
            rationale = template.format(bonus=bonus, transit=transit_days)
        elif strategy == Strategy.ORBITAL_REFUEL:
            gain = vehicle.refuel_dv_per_tanker
            tankers = self.tanker_planner.plan_tankers(-margin, gain)
            bonus = tankers * gain
            rationale = template.format(tankers=tankers, gain=gain)
        elif strategy == Strategy.KICK_STAGE:
            bonus = KICK_STAGE_BONUS_KM_S
            rationale = template.format(bonus=bonus)
        else:
            rationale = template

        final_capability = capability + bonus
        final_margin = final_capability - total_required
        if strategy == Strategy.ORBITAL_REFUEL:
            # Same operands the tanker count was sized against
            feasible = bonus >= -margin
            final_margin = max(final_margin, 0.0)
        else:
            feasible = final_margin >= 0.0 and strategy != Strategy.INFEASIBLE

        log = logger.info if feasible else logger.warning
        log(
            "%s -> %s: strategy=%s, base margin=%.2f km/s, final margin=%.2f km/s",
            vehicle.name, body.name, strategy.label, margin, final_margin,
        )

        return StrategyOutcome(
            strategy=strategy,
            bonus_dv=bonus,
            tankers=tankers,
            final_capability=final_capability,
            final_margin=final_margin,
            feasible=feasible,
            rationale=rationale,
            transit_days=transit_days,
        )


# =============================================================================
# MISSION PLANNER FACADE
# =============================================================================

class MissionPlanner:
    """
    Runs the complete planning flow for one request.

        capability -> budget -> strategy -> launch windows

    The launch window table is produced whatever the feasibility outcome.
    When a catalog is supplied, infeasible plans also list the other
    vehicles that could fly the mission directly.

    Args:
        catalog:      Optional VehicleCatalog used for alternative suggestions
        window_count: Number of launch windows per plan
    """

    def __init__(self, catalog=None, window_count: int = DEFAULT_WINDOW_COUNT) -> None:
        self.catalog = catalog
        self.window_count = window_count
        self.capability_model = CapabilityModel()
        self.budget_calculator = BudgetCalculator()
        self.resolver = StrategyResolver()
        self.scheduler = WindowScheduler()

    def evaluate(self, request: MissionRequest) -> MissionResult:
        """Feasibility result only (no windows, chronology or suggestions)."""
        result, _, _ = self._evaluate(request)
        return result

    def _evaluate(self, request: MissionRequest):
        vehicle, body = request.vehicle, request.body
        cap = self.capability_model.capability(vehicle, request.payload_kg)
        budget = self.budget_calculator.budget(body)
        outcome = self.resolver.resolve(vehicle, body, request.payload_kg, cap, budget.total)

        result = MissionResult(
            base_capability=cap,
            total_required=budget.total,
            strategy=outcome.strategy,
            bonus_dv=outcome.bonus_dv,
            tankers=outcome.tankers,
            final_capability=outcome.final_capability,
            final_margin=outcome.final_margin,
            feasible=outcome.feasible,
            rationale=outcome.rationale,
        )
        return result, budget, outcome

    def alternatives(self, request: MissionRequest, total_required: float) -> List[AlternativeVehicle]:
        """Other catalog vehicles whose base capability meets the requirement."""
        if self.catalog is None:
            return []
        found = []
        for vehicle in self.catalog.vehicles:
            if vehicle.name == request.vehicle.name:
                continue
            cap = self.capability_model.capability(vehicle, request.payload_kg)
            if cap - total_required >= 0.0:
                found.append(AlternativeVehicle(name=vehicle.name, capability=cap))
        return found

    def plan(self, request: MissionRequest) -> MissionPlan:
        """
        Plan one mission.

        Args:
            request: MissionRequest (already validated on construction)

        Returns:
            MissionPlan with budget, result, launch windows, chronology and
            alternative vehicles.
        """
        result, budget, outcome = self._evaluate(request)

        windows = self.scheduler.windows(
            request.body,
            request.start_date,
            count=self.window_count,
            transit_override=outcome.transit_days,
        )
        alternatives: Sequence[AlternativeVehicle] = ()
        if not result.feasible:
            alternatives = self.alternatives(request, budget.total)

        return MissionPlan(
            request=request,
            budget=budget,
            result=result,
            windows=tuple(windows),
            chronology=build_chronology(result.strategy, result.feasible),
            alternatives=tuple(alternatives),
        )

    def __repr__(self) -> str:
        return f"MissionPlanner(catalog={self.catalog!r}, window_count={self.window_count})"


def resolve(vehicle, body, payload_kg: float, capability: float, total_required: float) -> StrategyOutcome:
    """Module-level shortcut for ``StrategyResolver().resolve``."""
    return StrategyResolver().resolve(vehicle, body, payload_kg, capability, total_required)
