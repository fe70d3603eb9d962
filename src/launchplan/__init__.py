"""
===============================================================================
LAUNCHPLAN - Space Mission Feasibility Planner
===============================================================================
Estimates whether a launch vehicle can deliver a payload to a target body
under simplified astrodynamics, proposes a mitigation strategy when it
cannot, and lists upcoming launch windows.

Subpackages:
    core           : constants, data records, YAML catalog
    dynamics       : launch vehicle delta-V capability
    guidance       : delta-V budget, strategy resolution, launch windows
    simulation     : batch comparison across vehicles
    database       : SQLite mission log and text reports
    visualization  : delta-V budget charts
===============================================================================
"""

__version__ = "1.0.0"
