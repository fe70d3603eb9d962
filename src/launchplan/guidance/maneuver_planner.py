"""
===============================================================================
LAUNCHPLAN - Delta-V Budget and Tanker Planning
===============================================================================
Sums the fixed mission legs into a delta-V requirement and sizes the number
of orbital refuelling flights needed to close a shortfall.

Mission legs (km/s):
    1. Earth ascent to LEO including escape losses (fixed, 9.30)
    2. Transfer from Earth to the target
    3. Capture / braking at the target

Sign conventions and units:
    - All delta-V values in km/s
    - margin = capability - total requirement (negative = shortfall)
===============================================================================
"""

import logging
from typing import Tuple

import numpy as np

from launchplan.core.constants import EARTH_ASCENT_COST_KM_S
from launchplan.core.data_structures import DeltaVBudget

logger = logging.getLogger(__name__)


class BudgetCalculator:
    """
    Builds the delta-V budget of a mission to a body.

    The ascent leg does not depend on the vehicle or the target, so a budget
    is a function of the body alone. Total function: no failure modes.
    """

    def __init__(self, ascent_dv: float = EARTH_ASCENT_COST_KM_S) -> None:
        self.ascent_dv = ascent_dv

    def budget(self, body) -> DeltaVBudget:
        """
        Compute the mission legs and their total.

        Args:
            body: Target Body record

        Returns:
            DeltaVBudget(ascent, transfer, capture, total) in km/s
        """
        total = self.ascent_dv + body.dv_transfer + body.dv_capture
        logger.debug(
            "Budget to %s: ascent=%.2f transfer=%.2f capture=%.2f total=%.2f km/s",
            body.name, self.ascent_dv, body.dv_transfer, body.dv_capture, total,
        )
        return DeltaVBudget(
            ascent=self.ascent_dv,
            transfer=body.dv_transfer,
            capture=body.dv_capture,
            total=total,
        )

    def legs(self, body) -> Tuple[float, float, float, float]:
        """Budget as a plain (ascent, transfer, capture, total) tuple."""
        b = self.budget(body)
        return b.ascent, b.transfer, b.capture, b.total

    @staticmethod
    def margin(capability: float, total_required: float) -> float:
        """Capability minus requirement (km/s)."""
        return capability - total_required


class TankerPlanner:
    """
    Sizes LEO refuelling campaigns.

    Each tanker flight adds a fixed delta-V to the receiving vehicle, so the
    number of flights is the shortfall divided by the per-tanker gain,
    rounded up. Rounding down would leave the vehicle short.
    """

    def plan_tankers(self, shortfall_km_s: float, per_tanker_gain_km_s: float) -> int:
        """
        Minimum number of tanker flights that closes the shortfall.

        Args:
            shortfall_km_s:       Missing delta-V (km/s); <= 0 means none missing
            per_tanker_gain_km_s: Delta-V added per tanker flight (km/s), > 0

        Returns:
            Tanker count, ceil(shortfall / gain), or 0 when nothing is missing.

        Raises:
            ValueError: If the per-tanker gain is not positive.
        """
        if not per_tanker_gain_km_s > 0.0:
            raise ValueError(
                f"Per-tanker delta-V gain must be positive, got {per_tanker_gain_km_s}"
            )
        if shortfall_km_s <= 0.0:
            return 0

        tankers = int(np.ceil(shortfall_km_s / per_tanker_gain_km_s))
        # Guard against float round-off in the quotient (e.g. 1.1 / 0.1)
        if tankers * per_tanker_gain_km_s < shortfall_km_s:
            tankers += 1
        elif tankers > 1 and (tankers - 1) * per_tanker_gain_km_s >= shortfall_km_s:
            tankers -= 1

        logger.debug(
            "Tanker plan: shortfall=%.3f km/s, gain=%.3f km/s -> %d tanker(s)",
            shortfall_km_s, per_tanker_gain_km_s, tankers,
        )
        return tankers


_BUDGET = BudgetCalculator()
_TANKERS = TankerPlanner()


def budget(body) -> DeltaVBudget:
    """Module-level shortcut for ``BudgetCalculator().budget``."""
    return _BUDGET.budget(body)


def plan_tankers(shortfall_km_s: float, per_tanker_gain_km_s: float) -> int:
    """Module-level shortcut for ``TankerPlanner().plan_tankers``."""
    return _TANKERS.plan_tankers(shortfall_km_s, per_tanker_gain_km_s)
