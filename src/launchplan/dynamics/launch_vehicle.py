"""
===============================================================================
LAUNCHPLAN - Launch Vehicle Capability Model
===============================================================================
Delta-V capability of a launch vehicle carrying a given payload.

Physics modeled:
    - Tsiolkovsky rocket equation with the payload riding on both the
      initial and the burnout mass: dv = Isp * g0 * ln(m0 / mf)
    - Empirical staging multiplier approximating the gain of a multi-stage
      vehicle over a single-stage estimate
    - Practical payload limit: above it the vehicle cannot lift the payload
      at all and the capability is reported as zero
===============================================================================
"""

import logging

import numpy as np

from launchplan.core.constants import G0

logger = logging.getLogger(__name__)


class CapabilityModel:
    """
    Computes the delta-V a vehicle can deliver for a payload mass.

    The model is stateless; every call is a pure function of its inputs.

    Typical usage:
        model = CapabilityModel()
        dv = model.capability(vehicle, payload_kg=50000.0)   # km/s
    """

    @staticmethod
    def rocket_equation(isp: float, m0: float, mf: float) -> float:
        """
        Ideal single-stage delta-V.

        Equation:
            dv = Isp * g0 * ln(m0 / mf)

        Args:
            isp: Specific impulse (s)
            m0:  Initial mass (kg)
            mf:  Final mass (kg)

        Returns:
            Delta-V in m/s, or 0.0 for a degenerate mass ratio
            (mf <= 0 or m0 <= mf).
        """
        if mf <= 0.0 or m0 <= mf:
            return 0.0
        return float(isp * G0 * np.log(m0 / mf))

    def capability(self, vehicle, payload_kg: float) -> float:
        """
        Delta-V capability of ``vehicle`` carrying ``payload_kg``.

        Args:
            vehicle:    Vehicle record
            payload_kg: Payload mass (kg), must be non-negative

        Returns:
            Capability in km/s. Zero when the payload exceeds the vehicle's
            LEO payload limit or the mass ratio is degenerate.

        Raises:
            ValueError: If payload_kg is negative.
        """
        if payload_kg < 0.0:
            raise ValueError(f"Payload mass must be non-negative, got {payload_kg}")

        if payload_kg > vehicle.payload_leo_kg:
            logger.warning(
                "%s: payload %.0f kg exceeds LEO limit %.0f kg, capability set to 0",
                vehicle.name, payload_kg, vehicle.payload_leo_kg,
            )
            return 0.0

        m0 = vehicle.wet_mass_kg + payload_kg
        mf = vehicle.dry_mass_kg + payload_kg
        if mf <= 0.0 or m0 <= mf:
            logger.warning(
                "%s: degenerate mass ratio (m0=%.0f kg, mf=%.0f kg), capability set to 0",
                vehicle.name, m0, mf,
            )
            return 0.0

        dv = self.rocket_equation(vehicle.isp_s, m0, mf) / 1000.0
        dv *= vehicle.staging_factor

        logger.debug(
            "%s: payload=%.0f kg, m0/mf=%.3f, capability=%.3f km/s",
            vehicle.name, payload_kg, m0 / mf, dv,
        )
        return dv


_DEFAULT_MODEL = CapabilityModel()


def capability(vehicle, payload_kg: float) -> float:
    """Module-level shortcut for ``CapabilityModel().capability``."""
    return _DEFAULT_MODEL.capability(vehicle, payload_kg)
