"""
Pytest fixtures for league standings tests.

One small synthetic season: five registered drivers plus one driver who only
appears in RaceResults, two TeamMaster teams plus one unknown team code, and
four calendar rounds of which the first two are completed.
"""
import pytest

from efc_standings.config import cfg
from efc_standings.ingest_sheets.pipeline import build_snapshot
from efc_standings.parsing.csv_table import parse_table


def _csv(*lines: str) -> str:
    return "\n".join(lines) + "\n"


DRIVER_MASTER = _csv(
    "Username,ID,Short,Discord,Nationality,Team,Position,Active,Photo,Number,Socials,Description,Value",
    "Alice,D1,ALI,alice#1,Germany,MCL,Driver,y,https://img/alice.png,4,,,",
    "Bob,D2,BOB,bob#2,Japan,MCL,Driver,y,,81,,,",
    "Carol,D3,CAR,carol#3,Brazil,FER,Driver,y,,16,,,",
    "Dave,D4,DAV,dave#4,USA,XYZ,Driver,y,,7,,,",
    "Eve,D5,EVE,eve#5,Spain,,Reserve,y,,99,,,",
    "Broken,D6",
)

TEAM_MASTER = _csv(
    "Name,Sponsor,ID,Primary,Secondary,Logo,Car,Driver1,Driver2,Reserve1,Reserve2,Owner,Principal,Engineer,Description,Active",
    "McLaren Racing,Papaya,MCL,#ff8000,#000000,https://img/mcl.png,,Alice,Bob,,,Zak,Andrea,Will,,y",
    "Ferrari,Shell,FER,#dc0000,,,,Carol,,,,,Fred,,,y",
)

CIRCUIT_MASTER = _csv(
    "Race,ID,Location,Length,Lap Record,Description,Circuit,Track Image",
    'Germany Grand Prix,C1,Hockenheim,4.574 km,1:13.780,"Fast, flowing",Hockenheimring,',
    "Japanese Grand Prix,C2,Suzuka,5.807 km,1:30.983,Figure eight,Suzuka Circuit,",
    "Brazil GP,C3,Sao Paulo,4.309 km,1:10.540,Anti-clockwise,Interlagos,",
)

RACE_CALENDAR = _csv(
    "Race,Germany Grand Prix,Japan Grand Prix,Brazil Grand Prix,Atlantis Grand Prix",
    "Date,3/30/2024,4/13/2024,30/5/2024,TBD",
    "Round,Round 1,Round 2,Round 3,Round 4",
)

RACE_RESULTS = _csv(
    ",x,x,,",
    "Driver,Germany Grand Prix,Japan Grand Prix,Brazil Grand Prix,Atlantis Grand Prix",
    ",Round 1,Round 2,Round 3,Round 4",
    "Alice,P1 (Fastest Lap),P3,P2,",
    "Bob,P2,P1,,",
    "Carol,P3,DNF FL,,",
    "Dave,P4,P2,,",
    "Ghost,P10,P11,,",
    "Eve,,,,",
)

QUALIFYING_RESULTS = _csv(
    "Driver,Germany Grand Prix,Japan Grand Prix,Brazil Grand Prix",
    ",Round 1,Round 2,Round 3",
    "Alice,P1,P2,P1",
    "Bob,P2,P1,",
    "Carol,P3,P3,",
)

DRIVER_STATS = _csv(
    "Driver,Races,Points,PtsPerRace,AvgFinish,AvgQuali,Wins,Podiums,Poles,Rating,Consistency,Performance,"
    "FastestLaps,HighestFinish,AvgGain,PodiumRate,DNFs,Championships",
    "Alice,2,41,20.5,2,1.5,1,2,1,88.5,90,85,1,P1,0.5,100%,0,0",
    "Bob,2,43,21.5,1.5,1.5,1,2,1,91.2,92,90,0,P1,1,100%,0,1",
    "Carol,2,16,8,,3,0,1,0,n/a,70,60,1,P3,-1,50%,1,0",
    "Solo",
)

MEDIA = _csv(
    "Driver of the Day,Article,YouTube",
    "Bob,https://example.com/article,https://youtube.com/watch?v=1",
)


@pytest.fixture
def sheet_texts() -> dict[str, str]:
    """Raw CSV text keyed by logical sheet key."""
    return {
        "driver_master": DRIVER_MASTER,
        "team_master": TEAM_MASTER,
        "race_calendar": RACE_CALENDAR,
        "circuit_master": CIRCUIT_MASTER,
        "race_results": RACE_RESULTS,
        "qualifying_results": QUALIFYING_RESULTS,
        "driver_stats": DRIVER_STATS,
        "media": MEDIA,
    }


@pytest.fixture
def sheets_by_name(sheet_texts) -> dict[str, str]:
    """Raw CSV text keyed by spreadsheet tab name, as a source serves it."""
    names = cfg.sheets.sheet_names()
    return {names[key]: text for key, text in sheet_texts.items()}


@pytest.fixture
def sheet_rows(sheet_texts) -> dict[str, list[list[str]]]:
    return {key: parse_table(text) for key, text in sheet_texts.items()}


@pytest.fixture
def snapshot(sheet_texts):
    return build_snapshot(sheet_texts)


@pytest.fixture
def sheet_dir(tmp_path, sheets_by_name):
    """Directory of '<tab name>.csv' exports for offline sources."""
    for name, text in sheets_by_name.items():
        (tmp_path / f"{name}.csv").write_text(text, encoding="utf-8")
    return tmp_path
