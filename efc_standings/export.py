"""
Tabular views of a SeasonSnapshot as pandas DataFrames.

Used by the CLI for printing and CSV export. Columns for rounds that have
not run yet hold NA rather than 0.
"""
from dataclasses import asdict, fields
from pathlib import Path

import pandas as pd

from efc_standings.domain.models import DriverStanding, ProgressionTable
from efc_standings.ingest_sheets.pipeline import SeasonSnapshot
from efc_standings.utils.logger import logger


DRIVER_COLUMNS = [
    "position", "name", "team_name", "points", "gap",
    "wins", "podiums", "poles", "fastest_laps", "dnfs", "races_attended",
]
CONSTRUCTOR_COLUMNS = ["position", "name", "team_code", "points", "gap", "wins", "podiums", "drivers"]
CALENDAR_COLUMNS = ["round", "round_label", "name", "date", "status", "circuit", "location", "winner", "fastest_lap"]


def driver_standings_frame(snapshot: SeasonSnapshot) -> pd.DataFrame:
    rows = [asdict(s) for s in snapshot.driver_standings]
    df = pd.DataFrame(rows, columns=[f.name for f in fields(DriverStanding)])
    df["change"] = df["name"].map(snapshot.driver_position_changes).fillna(0).astype(int)
    return df[DRIVER_COLUMNS + ["change"]]


def constructor_standings_frame(snapshot: SeasonSnapshot) -> pd.DataFrame:
    rows = []
    for c in snapshot.constructor_standings:
        record = asdict(c)
        record["drivers"] = ", ".join(c.drivers)
        rows.append(record)
    df = pd.DataFrame(rows, columns=CONSTRUCTOR_COLUMNS) if rows else pd.DataFrame(columns=CONSTRUCTOR_COLUMNS)
    return df[CONSTRUCTOR_COLUMNS]


def progression_frame(table: ProgressionTable) -> pd.DataFrame:
    """One row per entity: TOTAL then 'R1'..'Rn' (nullable ints)."""
    round_cols = [f"R{i}" for i in range(1, table.total_rounds + 1)]
    records = []
    for row in table.rows:
        record = {"name": row.name, "total": row.total}
        record.update(dict(zip(round_cols, row.round_points)))
        records.append(record)
    df = pd.DataFrame(records, columns=["name", "total"] + round_cols)
    for col in round_cols:
        df[col] = df[col].astype("Int64")
    return df


def calendar_frame(snapshot: SeasonSnapshot) -> pd.DataFrame:
    records = [
        {
            "round": e.round,
            "round_label": e.round_label,
            "name": e.name,
            "date": e.date,
            "status": e.status.value,
            "circuit": e.circuit.circuit_name,
            "location": e.circuit.location,
            "winner": e.winner,
            "fastest_lap": e.fastest_lap,
        }
        for e in snapshot.calendar
    ]
    return pd.DataFrame(records, columns=CALENDAR_COLUMNS)


def export_snapshot(snapshot: SeasonSnapshot, out_dir: Path) -> list[Path]:
    """Write all derived tables as CSV files into `out_dir`."""
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    frames = {
        "driver_standings": driver_standings_frame(snapshot),
        "constructor_standings": constructor_standings_frame(snapshot),
        "driver_progression": progression_frame(snapshot.driver_progression),
        "constructor_progression": progression_frame(snapshot.constructor_progression),
        "calendar": calendar_frame(snapshot),
    }
    written: list[Path] = []
    for name, df in frames.items():
        path = out_dir / f"{name}.csv"
        df.to_csv(path, index=False)
        logger.debug(f"Saved {len(df)} rows → {path.name}")
        written.append(path)
    return written
