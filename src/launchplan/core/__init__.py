"""
===============================================================================
LAUNCHPLAN - Core Module
===============================================================================
Constants, immutable mission records and the vehicle/body catalog.

Submodules:
    constants        -- g0, ascent cost, strategy constants
    data_structures  -- Vehicle, Body, MissionRequest, MissionResult, ...
    catalog          -- YAML-backed VehicleCatalog
===============================================================================
"""
