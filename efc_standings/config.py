"""
Project-wide configuration using Pydantic Settings.
Sheet locations, ingestion limits, and filesystem paths live here.
"""
from pathlib import Path
from pydantic_settings import BaseSettings


ROOT_DIR = Path(__file__).resolve().parent.parent


class SheetConfig(BaseSettings):
    base_url: str = "https://docs.google.com/spreadsheets/d"
    spreadsheet_id: str = "1q5C96pUBR5SUsW3lTyF8LFbzkSlPYVa8w-hrW564Rxo"
    timeout: int = 20
    max_retries: int = 3
    backoff_factor: float = 1.0
    max_workers: int = 8  # concurrent sheet fetches per pass

    # Sheet (tab) names in the league spreadsheet
    driver_master: str = "DriverMaster"
    team_master: str = "TeamMaster"
    race_calendar: str = "RaceCalendar"
    circuit_master: str = "CircuitMaster"
    race_results: str = "RaceResults"
    qualifying_results: str = "QualifyingResults"
    driver_stats: str = "DriverStats"
    media: str = "Media"

    model_config = {"env_prefix": "EFC_SHEETS_"}

    def sheet_names(self) -> dict[str, str]:
        """Logical sheet key → tab name, in fetch order."""
        return {
            "driver_master": self.driver_master,
            "team_master": self.team_master,
            "race_calendar": self.race_calendar,
            "circuit_master": self.circuit_master,
            "race_results": self.race_results,
            "qualifying_results": self.qualifying_results,
            "driver_stats": self.driver_stats,
            "media": self.media,
        }


class IngestConfig(BaseSettings):
    # Round ceilings of the result sheets (columns B-K / B-L)
    max_race_rounds: int = 10
    max_qualifying_rounds: int = 11

    # Numeric dates: month first unless the first part cannot be a month
    day_first: bool = False

    default_primary_color: str = "#00f7ff"
    default_secondary_color: str = "#ffffff"

    model_config = {"env_prefix": "EFC_INGEST_"}


class PathConfig(BaseSettings):
    root: Path = ROOT_DIR
    data: Path = ROOT_DIR / "data"
    exports: Path = ROOT_DIR / "data" / "exports"
    overrides: Path = ROOT_DIR / "data" / "overrides.json"
    logs: Path = ROOT_DIR / "logs"

    def setup(self) -> None:
        """Create all directories if they don't exist."""
        for field_name in ("data", "exports", "logs"):
            getattr(self, field_name).mkdir(parents=True, exist_ok=True)

    model_config = {"env_prefix": "EFC_PATH_"}


class Config:
    """Unified project configuration."""

    sheets: SheetConfig = SheetConfig()
    ingest: IngestConfig = IngestConfig()
    paths: PathConfig = PathConfig()


# Singleton instance
cfg = Config()
