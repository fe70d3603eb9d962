"""
===============================================================================
LAUNCHPLAN - Database Module
===============================================================================
SQLite-backed mission log and human-readable report files. Provides a
pandas-integrated interface for queries and CSV export.

Submodules:
    mission_db -- MissionDatabase class for all database operations
    report     -- Text summaries named after the generation time
===============================================================================
"""
