"""
===============================================================================
LAUNCHPLAN - Dynamics Module
===============================================================================
Submodules:
    launch_vehicle -- Rocket-equation delta-V capability with staging factor
===============================================================================
"""
