"""
===============================================================================
LAUNCHPLAN - Mission Data Records
===============================================================================
Immutable records passed between the planning components:

    Vehicle, Body        -- catalog inputs, validated on construction
    MissionRequest       -- one planning request (vehicle, body, payload, date)
    DeltaVBudget         -- ascent / transfer / capture legs and their total
    StrategyOutcome      -- decision of the strategy resolver
    MissionResult        -- derived feasibility result for one request
    LaunchWindow         -- one launch / arrival date pair
    MissionPlan          -- everything the presentation layer needs

All records are frozen dataclasses. Invalid catalog or request data raises
ValueError at construction so the engine itself never divides by zero or
takes the log of a non-positive number.
===============================================================================
"""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Dict, Optional, Tuple, Union

from launchplan.core.constants import DATE_FORMAT

DateLike = Union[str, dt.date]


class InvalidDateError(ValueError):
    """Raised when a start date or reference epoch cannot be parsed."""


def parse_date(value: DateLike) -> dt.date:
    """
    Convert a YYYY-MM-DD string (or a date/datetime) to a calendar date.

    Args:
        value: ISO-like date string, ``datetime.date`` or ``datetime.datetime``.
               A datetime is reduced to its date; time of day is dropped.

    Returns:
        datetime.date

    Raises:
        InvalidDateError: If the value is not a valid calendar date.
    """
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    if not isinstance(value, str):
        raise InvalidDateError(
            f"Expected a date or YYYY-MM-DD string, got {type(value).__name__}: {value!r}"
        )
    try:
        return dt.datetime.strptime(value.strip(), DATE_FORMAT).date()
    except ValueError as exc:
        raise InvalidDateError(f"Invalid date {value!r}, expected YYYY-MM-DD") from exc


# =============================================================================
# STRATEGY ENUMERATION
# =============================================================================

class Strategy(IntEnum):
    """Mission profile selected by the strategy resolver."""
    INFEASIBLE = -1
    DIRECT = 0
    OBERTH_KICK = 1
    GRAVITY_ASSIST = 2
    ORBITAL_REFUEL = 3
    KICK_STAGE = 4

    @property
    def label(self) -> str:
        """Lower-case hyphenated name, e.g. 'gravity-assist'."""
        return self.name.lower().replace("_", "-")


# =============================================================================
# CATALOG RECORDS
# =============================================================================

@dataclass(frozen=True)
class Vehicle:
    """
    Launch vehicle parameters.

    Attributes:
        name:                  Display name
        wet_mass_kg:           Fully fuelled mass (kg)
        dry_mass_kg:           Mass without propellant (kg)
        isp_s:                 Average specific impulse (s)
        payload_leo_kg:        Practical payload limit to LEO (kg)
        staging_factor:        Empirical multi-stage performance multiplier (>= 1)
        refuel_dv_per_tanker:  Delta-V gained per tanker mission (km/s, 0 = no refuelling)
        oberth_kick_capable:   Small vehicle that can raise apogee with perigee kicks
    """
    name: str
    wet_mass_kg: float
    dry_mass_kg: float
    isp_s: float
    payload_leo_kg: float
    staging_factor: float = 1.0
    refuel_dv_per_tanker: float = 0.0
    oberth_kick_capable: bool = False

    def __post_init__(self) -> None:
        if not self.dry_mass_kg > 0.0:
            raise ValueError(f"{self.name}: dry mass must be positive, got {self.dry_mass_kg}")
        if not self.wet_mass_kg > self.dry_mass_kg:
            raise ValueError(
                f"{self.name}: wet mass ({self.wet_mass_kg}) must exceed "
                f"dry mass ({self.dry_mass_kg})"
            )
        if not self.isp_s > 0.0:
            raise ValueError(f"{self.name}: Isp must be positive, got {self.isp_s}")
        if self.payload_leo_kg < 0.0:
            raise ValueError(f"{self.name}: payload limit must be non-negative")
        if self.staging_factor < 1.0:
            raise ValueError(
                f"{self.name}: staging factor must be >= 1, got {self.staging_factor}"
            )
        if self.refuel_dv_per_tanker < 0.0:
            raise ValueError(f"{self.name}: tanker delta-V must be non-negative")

    @property
    def supports_refuel(self) -> bool:
        return self.refuel_dv_per_tanker > 0.0


@dataclass(frozen=True)
class Body:
    """
    Target body with its transfer requirements and window cadence.

    Attributes:
        name:                     Display name
        dv_transfer:              Transfer delta-V from Earth escape (km/s)
        dv_capture:               Capture / braking delta-V at arrival (km/s)
        synodic_period_days:      Days between favourable departure windows (> 0)
        epoch:                    Reference window date (date or YYYY-MM-DD)
        typical_transit_days:     Typical one-way flight time (days)
        supports_gravity_assist:  Distant target reachable by multi-flyby routing
        oberth_kick_eligible:     Long transfer where perigee kicks pay off
    """
    name: str
    dv_transfer: float
    dv_capture: float
    synodic_period_days: float
    epoch: dt.date
    typical_transit_days: float
    supports_gravity_assist: bool = False
    oberth_kick_eligible: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "epoch", parse_date(self.epoch))
        if self.dv_transfer < 0.0 or self.dv_capture < 0.0:
            raise ValueError(f"{self.name}: delta-V legs must be non-negative")
        if not self.synodic_period_days > 0.0:
            raise ValueError(
                f"{self.name}: synodic period must be positive, got {self.synodic_period_days}"
            )
        if self.typical_transit_days < 0.0:
            raise ValueError(f"{self.name}: transit time must be non-negative")


# =============================================================================
# REQUEST / RESULT RECORDS
# =============================================================================

@dataclass(frozen=True)
class MissionRequest:
    """One planning request. The start date is parsed on construction."""
    vehicle: Vehicle
    body: Body
    payload_kg: float
    start_date: dt.date

    def __post_init__(self) -> None:
        object.__setattr__(self, "start_date", parse_date(self.start_date))
        if self.payload_kg < 0.0:
            raise ValueError(f"Payload mass must be non-negative, got {self.payload_kg}")


@dataclass(frozen=True)
class DeltaVBudget:
    """Fixed mission legs (km/s)."""
    ascent: float
    transfer: float
    capture: float
    total: float

    def margin(self, capability: float) -> float:
        """Capability minus total requirement (km/s)."""
        return capability - self.total


@dataclass(frozen=True)
class StrategyOutcome:
    """
    Decision of the strategy resolver.

    ``transit_days`` is set only when the strategy replaces the body's
    typical transit time (gravity assist); None means no override.
    """
    strategy: Strategy
    bonus_dv: float
    tankers: int
    final_capability: float
    final_margin: float
    feasible: bool
    rationale: str
    transit_days: Optional[float] = None


@dataclass(frozen=True)
class MissionResult:
    """Feasibility result for one request (km/s throughout)."""
    base_capability: float
    total_required: float
    strategy: Strategy
    bonus_dv: float
    tankers: int
    final_capability: float
    final_margin: float
    feasible: bool
    rationale: str

    @property
    def base_margin(self) -> float:
        return self.base_capability - self.total_required


@dataclass(frozen=True)
class LaunchWindow:
    """Launch date and estimated arrival date."""
    launch_date: dt.date
    arrival_date: dt.date

    @property
    def transit_days(self) -> int:
        return (self.arrival_date - self.launch_date).days


@dataclass(frozen=True)
class ChronologyEvent:
    """One row of the mission chronology table."""
    regime: str
    marker: str
    event: str


@dataclass(frozen=True)
class AlternativeVehicle:
    """Another catalog vehicle that could fly the mission directly."""
    name: str
    capability: float


@dataclass(frozen=True)
class MissionPlan:
    """Complete output of one planning request."""
    request: MissionRequest
    budget: DeltaVBudget
    result: MissionResult
    windows: Tuple[LaunchWindow, ...]
    chronology: Tuple[ChronologyEvent, ...] = field(default_factory=tuple)
    alternatives: Tuple[AlternativeVehicle, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        """Flatten the plan to plain data (dates as YYYY-MM-DD strings)."""
        res = self.result
        return {
            "vehicle": self.request.vehicle.name,
            "body": self.request.body.name,
            "payload_kg": self.request.payload_kg,
            "start_date": self.request.start_date.isoformat(),
            "ascent_dv": self.budget.ascent,
            "transfer_dv": self.budget.transfer,
            "capture_dv": self.budget.capture,
            "total_required": res.total_required,
            "base_capability": res.base_capability,
            "strategy": res.strategy.label,
            "bonus_dv": res.bonus_dv,
            "tankers": res.tankers,
            "final_capability": res.final_capability,
            "final_margin": res.final_margin,
            "feasible": res.feasible,
            "rationale": res.rationale,
            "windows": [
                {
                    "launch_date": w.launch_date.isoformat(),
                    "arrival_date": w.arrival_date.isoformat(),
                }
                for w in self.windows
            ],
            "chronology": [
                {"regime": e.regime, "marker": e.marker, "event": e.event}
                for e in self.chronology
            ],
            "alternatives": [
                {"vehicle": a.name, "capability": a.capability}
                for a in self.alternatives
            ],
        }
