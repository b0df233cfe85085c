"""
League standings engine.

Turns the per-sheet CSV exports of the league spreadsheet into drivers,
teams, circuits and race events, then derives championship standings and
round-by-round progression from them.
"""
__version__ = "0.1.0"
