"""
===============================================================================
LAUNCHPLAN - Simulation Module
===============================================================================
Submodules:
    batch -- Parallel comparison of vehicles on one mission
===============================================================================
"""
