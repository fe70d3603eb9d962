"""
===============================================================================
LAUNCHPLAN - Guidance Package
===============================================================================
Mission-level planning: delta-V budget, strategy selection and launch
window projection.

Modules:
    maneuver_planner  : Delta-V budget legs and tanker sizing
    mission_planner   : Strategy resolver and the MissionPlanner facade
    window_scheduler  : Synodic-period launch window projection
===============================================================================
"""
