"""
Google Sheets ingestion package.

Sheets fetched per pass (one CSV export each):
  - DriverMaster, TeamMaster, CircuitMaster
  - RaceCalendar
  - RaceResults, QualifyingResults
  - DriverStats, Media
"""
