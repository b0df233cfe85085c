"""
Canonical domain records for one league season.

Every record is a frozen dataclass: an ingestion pass builds a complete new
set of them and never mutates one in place.
"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


# ── Master sheets ─────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Driver:
    username: str
    id: str = ""
    short_display: str = ""
    discord: str = ""
    nationality: str = ""
    team_code: str = ""
    position: str = ""
    active: str = ""
    photo_url: str = ""
    number: str = ""
    socials: str = ""
    description: str = ""
    value: str = ""


@dataclass(frozen=True)
class Team:
    id: str
    name: str = ""
    sponsor: str = ""
    primary_color: str = "#00f7ff"
    secondary_color: str = "#ffffff"
    logo_url: str = ""
    car_image_url: str = ""
    driver1: str = ""
    driver2: str = ""
    reserve1: str = ""
    reserve2: str = ""
    owner: str = ""
    principal: str = ""
    engineer: str = ""
    description: str = ""
    active: str = "y"

    @property
    def roster(self) -> list[str]:
        """Free-text roster names, not guaranteed to match a Driver."""
        return [n for n in (self.driver1, self.driver2, self.reserve1, self.reserve2) if n]


@dataclass(frozen=True)
class Circuit:
    race_name: str
    id: str = ""
    location: str = ""
    length: str = ""
    lap_record: str = ""
    description: str = ""
    circuit_name: str = ""
    track_image_url: str = ""
    placeholder: bool = False


@dataclass(frozen=True)
class CalendarEntry:
    name: str
    raw_date: str
    round_label: str
    column: int  # 1-based calendar column, i.e. the round index


@dataclass(frozen=True)
class DriverStatsRecord:
    driver: str
    races_attended: float = 0.0
    points: float = 0.0
    pts_per_race: float = 0.0
    avg_finish: float = 0.0
    avg_quali: float = 0.0
    wins: float = 0.0
    podiums: float = 0.0
    poles: float = 0.0
    driver_rating: float = 0.0
    consistency_score: float = 0.0
    performance_score: float = 0.0
    fastest_laps: float = 0.0
    highest_finish: str = ""
    avg_pos_gain_loss: float = 0.0
    podium_rate: float = 0.0
    dnfs: float = 0.0
    championships: float = 0.0


@dataclass(frozen=True)
class MediaInfo:
    driver_of_the_day: str = ""
    article_link: str = ""
    youtube_link: str = ""


# ── Results ───────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class ParsedResult:
    """Structured reading of one result cell such as 'P1 (Fastest Lap)'."""

    raw: str
    position: Optional[int] = None
    fastest_lap: bool = False
    dnf_class: Optional[str] = None  # DNF, DNS or DSQ

    @property
    def is_empty(self) -> bool:
        return self.raw.strip() == ""


@dataclass(frozen=True)
class DriverResultRow:
    driver: str
    results: dict[int, ParsedResult]  # round index (1-based) → parsed cell


@dataclass(frozen=True)
class ResultsTable:
    race_names: list[str] = field(default_factory=list)
    round_labels: list[str] = field(default_factory=list)
    rows: list[DriverResultRow] = field(default_factory=list)
    completed_indices: list[int] = field(default_factory=list)  # 0-based columns marked 'x'

    @property
    def completed_count(self) -> int:
        return len(self.completed_indices)

    def is_empty(self) -> bool:
        return not self.rows and not self.race_names and not self.completed_indices


# ── Season view ───────────────────────────────────────────────────────────────

class RaceStatus(str, Enum):
    COMPLETED = "completed"
    NEXT = "next"
    UPCOMING = "upcoming"


@dataclass(frozen=True)
class RaceEvent:
    round: int
    round_label: str
    name: str
    raw_date: str
    date: str  # normalized "Month D, YYYY", "TBD", or the raw text
    status: RaceStatus
    circuit: Circuit
    winner: Optional[str] = None
    fastest_lap: Optional[str] = None
    date_value: Optional[datetime] = None  # re-parsed from `date`, not `raw_date`


@dataclass(frozen=True)
class CalendarStats:
    completed: int
    upcoming: int
    total: int
    progress: int


# ── Derived standings ─────────────────────────────────────────────────────────

@dataclass(frozen=True)
class DriverStanding:
    name: str
    team_code: str
    team_name: str
    number: str = ""
    nationality: str = ""
    photo_url: str = ""
    points: int = 0
    wins: int = 0
    podiums: int = 0
    poles: int = 0
    fastest_laps: int = 0
    dnfs: int = 0
    races_attended: int = 0
    gap: int = 0
    position: int = 0  # tie-aware championship position


@dataclass(frozen=True)
class ConstructorStanding:
    team_code: str
    name: str
    full_name: str = ""  # sponsor-style name, e.g. "Scuderia Ferrari"
    primary_color: str = "#00f7ff"
    secondary_color: str = "#ffffff"
    logo_url: str = ""
    points: int = 0
    wins: int = 0
    podiums: int = 0
    drivers: list[str] = field(default_factory=list)
    gap: int = 0
    position: int = 0


@dataclass(frozen=True)
class ProgressionRow:
    """
    Round-by-round points for one driver or constructor.

    `round_points[i]` is None for rounds not yet run, which is distinct from
    a run round that scored zero.
    """

    name: str
    round_points: list[Optional[int]]
    cumulative: list[Optional[int]]
    fastest_laps: list[bool] = field(default_factory=list)
    repaired: bool = False

    @property
    def total(self) -> int:
        return sum(p for p in self.round_points if p is not None)


@dataclass(frozen=True)
class ProgressionTable:
    total_rounds: int
    completed_rounds: int
    rows: list[ProgressionRow] = field(default_factory=list)

    def row_for(self, name: str) -> Optional[ProgressionRow]:
        return next((r for r in self.rows if r.name == name), None)
