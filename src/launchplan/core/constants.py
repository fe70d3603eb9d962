"""
===============================================================================
LAUNCHPLAN - Physical and Planning Constants
===============================================================================
Central repository for the constants used by the feasibility engine.

Mass in kilograms, specific impulse in seconds, delta-V in km/s and
durations in days unless the name says otherwise.
===============================================================================
"""

# =============================================================================
# PHYSICAL CONSTANTS
# =============================================================================
G0 = 9.80665                           # Standard gravity (m/s^2)

# =============================================================================
# DELTA-V BUDGET
# =============================================================================
# Ascent to LEO plus escape losses, independent of vehicle and target
EARTH_ASCENT_COST_KM_S = 9.30

# =============================================================================
# MITIGATION STRATEGIES
# =============================================================================
GRAVITY_ASSIST_BONUS_KM_S = 4.5        # multi-flyby (VEEGA-like) gain
GRAVITY_ASSIST_TRANSIT_DAYS = 2555.0   # ~7 year flight
KICK_STAGE_BONUS_KM_S = 2.0            # solid upper kick stage
KICK_STAGE_MAX_SHORTFALL_KM_S = 1.5    # margin must be above -1.5 km/s
OBERTH_KICK_BONUS_KM_S = 6.5           # repeated perigee burns
OBERTH_KICK_MAX_PAYLOAD_KG = 1500.0

# =============================================================================
# LAUNCH WINDOWS
# =============================================================================
DEFAULT_WINDOW_COUNT = 5
DATE_FORMAT = "%Y-%m-%d"
DEFAULT_START_DATE = "2025-01-01"
