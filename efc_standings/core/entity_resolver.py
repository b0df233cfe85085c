"""
Heuristic matching of free-text names to canonical entities.

The league sheets are maintained independently, so a calendar entry such as
'Germany Grand Prix' has to be joined to a CircuitMaster row by name, and a
driver's team code has to be turned into a display name. Matching is
best-effort and never raises.

Circuit matching runs an ordered list of strategies; the first strategy that
matches wins, and within a strategy the first candidate in sheet order wins:
  1. case-insensitive full-name equality
  2. target contains the candidate's first word
  3. both names contain the same country keyword
  4. otherwise a synthetic placeholder circuit
"""
from typing import Callable, Iterable, Optional, Protocol, Sequence

from efc_standings.domain.models import Circuit, ConstructorStanding, Team


# ── Static dictionaries ───────────────────────────────────────────────────────

# Closed list; extend only by adding entries.
COUNTRY_KEYWORDS: tuple[str, ...] = (
    "germany", "australia", "japan", "brazil", "usa",
    "britain", "italy", "monaco", "spain",
)

TEAM_ABBREVIATIONS: dict[str, str] = {
    "MCL": "McLaren",
    "MER": "Mercedes",
    "FER": "Ferrari",
    "RBR": "Red Bull",
    "ALP": "Alpine",
    "AST": "Aston Martin",
    "HAA": "Haas",
    "ALF": "Alfa Romeo",
    "WIL": "Williams",
    "RBU": "Racing Bulls",
}

TEAM_FULL_NAMES: dict[str, str] = {
    "MCL": "McLaren",
    "MER": "Mercedes-AMG Petronas",
    "FER": "Scuderia Ferrari",
    "RBR": "Red Bull Racing",
    "ALP": "Alpine",
    "AST": "Aston Martin Aramco",
    "HAA": "Haas F1 Team",
    "ALF": "Alfa Romeo",
    "WIL": "Williams",
    "RBU": "Visa Cash App RB",
}

NO_TEAM = "No Team"
PLACEHOLDER_LOCATION = "TBA"


# ── Circuit matchers ──────────────────────────────────────────────────────────

class CircuitMatcher(Protocol):
    name: str

    def try_match(self, target: str, candidates: Sequence[Circuit]) -> Optional[Circuit]:
        ...


def _first(candidates: Iterable[Circuit], predicate: Callable[[Circuit], bool]) -> Optional[Circuit]:
    return next((c for c in candidates if c.race_name and predicate(c)), None)


class ExactNameMatcher:
    name = "exact"

    def try_match(self, target: str, candidates: Sequence[Circuit]) -> Optional[Circuit]:
        target_lower = target.lower()
        return _first(candidates, lambda c: c.race_name.lower() == target_lower)


class FirstWordMatcher:
    name = "first_word"

    def try_match(self, target: str, candidates: Sequence[Circuit]) -> Optional[Circuit]:
        target_lower = target.lower()

        def contains_first_word(c: Circuit) -> bool:
            words = c.race_name.lower().split()
            return bool(words) and words[0] in target_lower

        return _first(candidates, contains_first_word)


class CountryKeywordMatcher:
    name = "country_keyword"

    def __init__(self, keywords: Sequence[str] = COUNTRY_KEYWORDS) -> None:
        self.keywords = tuple(keywords)

    def try_match(self, target: str, candidates: Sequence[Circuit]) -> Optional[Circuit]:
        target_lower = target.lower()
        wanted = [k for k in self.keywords if k in target_lower]
        if not wanted:
            return None
        return _first(candidates, lambda c: any(k in c.race_name.lower() for k in wanted))


DEFAULT_CIRCUIT_MATCHERS: tuple[CircuitMatcher, ...] = (
    ExactNameMatcher(),
    FirstWordMatcher(),
    CountryKeywordMatcher(),
)


def placeholder_circuit(race_name: str) -> Circuit:
    """Synthetic circuit for a race that matched nothing."""
    stripped = race_name.replace("Grand Prix", "").strip()
    return Circuit(
        race_name=race_name,
        id="",
        location=PLACEHOLDER_LOCATION,
        length="",
        lap_record="",
        circuit_name=f"{stripped} Circuit",
        placeholder=True,
    )


def match_circuit(
    race_name: str,
    circuits: Sequence[Circuit],
    matchers: Sequence[CircuitMatcher] = DEFAULT_CIRCUIT_MATCHERS,
) -> tuple[Optional[Circuit], Optional[str]]:
    """
    Run the matcher chain.

    Returns:
        (circuit, matcher name), or (None, None) when nothing matched.
    """
    if not race_name:
        return None, None
    for matcher in matchers:
        found = matcher.try_match(race_name, circuits)
        if found is not None:
            return found, matcher.name
    return None, None


def resolve_circuit(
    race_name: str,
    circuits: Sequence[Circuit],
    matchers: Sequence[CircuitMatcher] = DEFAULT_CIRCUIT_MATCHERS,
) -> Circuit:
    """Matched circuit, or the placeholder for `race_name`."""
    found, _ = match_circuit(race_name, circuits, matchers)
    return found if found is not None else placeholder_circuit(race_name)


# ── Teams ─────────────────────────────────────────────────────────────────────

class TeamResolver:
    """Resolves team codes against TeamMaster, then the static dictionary."""

    def __init__(self, teams: Sequence[Team]) -> None:
        self._by_id: dict[str, Team] = {}
        for team in teams:
            # First row wins for duplicated ids
            self._by_id.setdefault(team.id, team)

    def team(self, code: str) -> Optional[Team]:
        return self._by_id.get(code) if code else None

    def display_name(self, code: str) -> str:
        """TeamMaster name → abbreviation dictionary → the code itself."""
        if not code:
            return NO_TEAM
        team = self._by_id.get(code)
        if team is not None:
            return team.name or code
        return TEAM_ABBREVIATIONS.get(code, code)

    def is_known(self, code: str) -> bool:
        return bool(code) and (code in self._by_id or code in TEAM_ABBREVIATIONS)


def full_team_name(name_or_code: str) -> str:
    """Sponsor-style full name for a team code or partial team name."""
    if not name_or_code:
        return "Unknown Team"
    if name_or_code in TEAM_FULL_NAMES:
        return TEAM_FULL_NAMES[name_or_code]
    lower = name_or_code.lower()
    for full in TEAM_FULL_NAMES.values():
        if lower in full.lower() or full.lower() in lower:
            return full
    return name_or_code


# ── Constructor reconciliation ────────────────────────────────────────────────

def reconcile_constructor(
    team_display_name: str,
    team_code: str,
    constructors: Sequence[ConstructorStanding],
) -> Optional[ConstructorStanding]:
    """
    Find the constructor that should receive a driver's round points.

    Tries exact display name, then substring either way, then team code.
    None means the points for that round are dropped.
    """
    if team_display_name:
        for c in constructors:
            if c.name == team_display_name:
                return c
        for c in constructors:
            if c.name and (team_display_name in c.name or c.name in team_display_name):
                return c
    if team_code:
        for c in constructors:
            if c.team_code == team_code:
                return c
    return None
