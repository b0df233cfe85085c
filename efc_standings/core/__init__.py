"""
Derivation core.

  date_normalizer   free-text date cells → 'Month D, YYYY'
  entity_resolver   circuit / team name matching
  points            result cell → points
  season            RaceEvents, winners, calendar stats
  standings         driver and constructor standings
  progression       round-by-round points and position changes
"""
