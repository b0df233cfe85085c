"""
Manual overrides supplied by the admin tooling.

Two maps, both matched on exact strings:
  race_dates  race name → raw date text (re-normalized on merge)
  circuits    circuit id or circuit name → replacement circuit details

Overrides are merged after ingestion and take precedence over sheet data.
"""
import json
from dataclasses import replace
from pathlib import Path
from typing import Optional, Sequence

from pydantic import BaseModel, Field, ValidationError

from efc_standings.core.date_normalizer import normalize_date, parse_display_date
from efc_standings.domain.models import Circuit, RaceEvent
from efc_standings.utils.logger import logger


class CircuitOverride(BaseModel):
    circuit_name: Optional[str] = None
    location: Optional[str] = None
    length: Optional[str] = None
    lap_record: Optional[str] = None
    description: Optional[str] = None
    track_image_url: Optional[str] = None


class Overrides(BaseModel):
    race_dates: dict[str, str] = Field(default_factory=dict)
    circuits: dict[str, CircuitOverride] = Field(default_factory=dict)

    def is_empty(self) -> bool:
        return not self.race_dates and not self.circuits


def load_overrides(path: Optional[Path]) -> Overrides:
    """
    Read an overrides JSON file.

    A missing or invalid file yields empty overrides; it never blocks a pass.
    """
    if path is None or not Path(path).exists():
        return Overrides()
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
        return Overrides.model_validate(data)
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        logger.warning(f"Ignoring overrides file {path}: {e}")
        return Overrides()


def _circuit_override_for(circuit: Circuit, overrides: Overrides) -> Optional[CircuitOverride]:
    for key in (circuit.id, circuit.circuit_name):
        if key and key in overrides.circuits:
            return overrides.circuits[key]
    return None


def apply_overrides(
    events: Sequence[RaceEvent],
    overrides: Overrides,
    day_first: Optional[bool] = None,
) -> list[RaceEvent]:
    """Return new events with date and circuit overrides merged in."""
    if overrides.is_empty():
        return list(events)

    merged: list[RaceEvent] = []
    for event in events:
        if event.name in overrides.race_dates:
            raw = overrides.race_dates[event.name]
            display = normalize_date(raw, day_first)
            event = replace(event, raw_date=raw, date=display, date_value=parse_display_date(display))
            logger.debug(f"Date override for {event.name}: {raw}")

        circuit_override = _circuit_override_for(event.circuit, overrides)
        if circuit_override is not None:
            changes = circuit_override.model_dump(exclude_none=True)
            event = replace(event, circuit=replace(event.circuit, **changes))
            logger.debug(f"Circuit override for {event.name}: {sorted(changes)}")

        merged.append(event)
    return merged
