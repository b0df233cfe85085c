"""
Points engine: turns a free-text result cell into a point value.

Result cells look like 'P3', 'P1 (Fastest Lap)', 'P12 FL' or 'DNF'.
Scoring:
  P1..P10 → 25, 18, 15, 12, 10, 8, 6, 4, 2, 1; anything lower → 0
  Fastest lap → +1, whatever the finishing position or classification
  DNF / DNS / DSQ anywhere in the cell → no position points

The fastest-lap flag is "Fastest Lap" or a standalone "FL" token, so text
such as "P5 (FLAG)" carries no bonus.
"""
import re
from typing import Optional

from efc_standings.domain.models import ParsedResult


POINTS_TABLE: dict[int, int] = {
    1: 25, 2: 18, 3: 15, 4: 12, 5: 10,
    6: 8, 7: 6, 8: 4, 9: 2, 10: 1,
    11: 0, 12: 0, 13: 0, 14: 0, 15: 0,
    16: 0, 17: 0, 18: 0, 19: 0, 20: 0,
}
FASTEST_LAP_BONUS = 1

POSITION_PATTERN = re.compile(r"P(\d+)", re.IGNORECASE)
NON_FINISH_PATTERN = re.compile(r"(DNF|DNS|DSQ)", re.IGNORECASE)
FASTEST_LAP_PATTERN = re.compile(r"Fastest Lap|\bFL\b")


def parse_result(text: Optional[str]) -> ParsedResult:
    """
    Parse one result cell.

    Args:
        text: Raw cell text (None and blanks are accepted).

    Returns:
        ParsedResult with position, fastest-lap flag and non-finish class.
    """
    raw = text or ""
    position: Optional[int] = None
    match = POSITION_PATTERN.search(raw)
    if match:
        position = int(match.group(1))

    dnf_match = NON_FINISH_PATTERN.search(raw)
    dnf_class = dnf_match.group(1).upper() if dnf_match else None

    fastest_lap = FASTEST_LAP_PATTERN.search(raw) is not None
    return ParsedResult(raw=raw, position=position, fastest_lap=fastest_lap, dnf_class=dnf_class)


def points_for_position(position: Optional[int]) -> int:
    """Table value for a finishing position; 0 for unknown or non-scoring."""
    if position is None:
        return 0
    return POINTS_TABLE.get(position, 0)


def points_for_result(result: ParsedResult) -> int:
    """Position points (zero for a non-finish) plus the fastest-lap bonus."""
    points = 0 if result.dnf_class else points_for_position(result.position)
    if result.fastest_lap:
        points += FASTEST_LAP_BONUS
    return points


def points(text: Optional[str]) -> int:
    """Shortcut: points for a raw result cell."""
    return points_for_result(parse_result(text))
