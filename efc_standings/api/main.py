"""
FastAPI backend for the league standings engine.
Serves the cached season snapshot as JSON to the website frontend.
"""
from dataclasses import asdict
from enum import Enum
from functools import lru_cache
from typing import Any

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from efc_standings.config import cfg
from efc_standings.core.season import calendar_stats, next_race, previous_race
from efc_standings.core.standings import top_rated_drivers
from efc_standings.ingest_sheets.overrides import load_overrides
from efc_standings.ingest_sheets.pipeline import IngestionResult, Ingestor

app = FastAPI(title="EFC Standings API", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@lru_cache(maxsize=1)
def get_ingestor() -> Ingestor:
    return Ingestor(overrides=load_overrides(cfg.paths.overrides))


def _clean(obj: Any) -> Any:
    """Recursively turn dataclass output into JSON-safe values."""
    if isinstance(obj, dict):
        return {str(k): _clean(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_clean(v) for v in obj]
    if isinstance(obj, Enum):
        return obj.value
    if hasattr(obj, "isoformat"):
        return obj.isoformat()
    return obj


def _empty_body(result: IngestionResult) -> dict:
    return {"status": result.status.value, "issues": _clean([asdict(i) for i in result.issues])}


def _snapshot_or_empty():
    result = get_ingestor().load()
    return result, result.snapshot


# ── Health ───────────────────────────────────────────────────────────────────

@app.get("/api/health")
def health():
    cached = get_ingestor().cached
    return {"status": "ok", "cached": cached.status.value if cached else None}


# ── Standings ────────────────────────────────────────────────────────────────

@app.get("/api/standings/drivers")
def driver_standings():
    result, snapshot = _snapshot_or_empty()
    if snapshot is None:
        return _empty_body(result)
    return {
        "status": "ok",
        "completed_rounds": snapshot.completed_rounds,
        "total_rounds": snapshot.total_rounds,
        "standings": _clean([asdict(s) for s in snapshot.driver_standings]),
        "changes": snapshot.driver_position_changes,
    }


@app.get("/api/standings/constructors")
def constructor_standings():
    result, snapshot = _snapshot_or_empty()
    if snapshot is None:
        return _empty_body(result)
    return {
        "status": "ok",
        "completed_rounds": snapshot.completed_rounds,
        "total_rounds": snapshot.total_rounds,
        "standings": _clean([asdict(s) for s in snapshot.constructor_standings]),
        "changes": snapshot.constructor_position_changes,
    }


# ── Driver stats ─────────────────────────────────────────────────────────────

@app.get("/api/stats/top")
def top_drivers(limit: int = 5):
    result, snapshot = _snapshot_or_empty()
    if snapshot is None:
        return _empty_body(result)
    top = top_rated_drivers(snapshot.driver_stats, limit=max(limit, 0))
    return {"status": "ok", "drivers": _clean([asdict(s) for s in top])}


# ── Progression ──────────────────────────────────────────────────────────────

@app.get("/api/progression/{kind}")
def progression(kind: str):
    if kind not in ("drivers", "constructors"):
        raise HTTPException(status_code=404, detail=f"Unknown progression '{kind}'")
    result, snapshot = _snapshot_or_empty()
    if snapshot is None:
        return _empty_body(result)
    table = snapshot.driver_progression if kind == "drivers" else snapshot.constructor_progression
    return {"status": "ok", **_clean(asdict(table))}


# ── Calendar & results ───────────────────────────────────────────────────────

@app.get("/api/calendar")
def calendar():
    result, snapshot = _snapshot_or_empty()
    if snapshot is None:
        return _empty_body(result)
    upcoming = next_race(snapshot.calendar)
    last = previous_race(snapshot.calendar)
    return {
        "status": "ok",
        "races": _clean([asdict(e) for e in snapshot.calendar]),
        "next_race": _clean(asdict(upcoming)) if upcoming else None,
        "previous_race": _clean(asdict(last)) if last else None,
        "stats": asdict(calendar_stats(snapshot.calendar)),
    }


@app.get("/api/results/{kind}")
def results(kind: str):
    if kind not in ("race", "qualifying"):
        raise HTTPException(status_code=404, detail=f"Unknown results '{kind}'")
    result, snapshot = _snapshot_or_empty()
    if snapshot is None:
        return _empty_body(result)
    table = snapshot.race_results if kind == "race" else snapshot.qualifying_results
    return {"status": "ok", **_clean(asdict(table))}


@app.post("/api/refresh")
def refresh():
    result = get_ingestor().refresh()
    if not result.is_ok:
        return _empty_body(result)
    return {"status": "ok", "created_at": result.snapshot.created_at.isoformat()}
