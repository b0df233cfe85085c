"""
Raw-text sources for the league spreadsheet.

A source answers `fetch_sheet_text(sheet_name)` with the sheet's CSV export
and never raises: any failure (network, non-2xx, unknown sheet) is logged and
reported as empty text, which downstream adapters treat as an empty table.
"""
from pathlib import Path
from typing import Mapping, Optional, Protocol
from urllib.parse import quote

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from efc_standings.config import cfg
from efc_standings.utils.logger import logger


class SheetTextSource(Protocol):
    def fetch_sheet_text(self, sheet_name: str) -> str:
        ...


# gviz answers unknown sheets with an HTML/JS error page instead of a 4xx
_GVIZ_ERROR_MARKERS = ("google.visualization.Query.setResponse", "<!DOCTYPE html")


class GoogleSheetSource:
    """
    CSV exports of a Google Sheets document via the gviz endpoint.

    Uses a pooled session with retries on transient status codes.
    """

    def __init__(
        self,
        spreadsheet_id: str | None = None,
        base_url: str | None = None,
        timeout: int | None = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.spreadsheet_id = spreadsheet_id or cfg.sheets.spreadsheet_id
        self.base_url = (base_url or cfg.sheets.base_url).rstrip("/")
        self.timeout = timeout or cfg.sheets.timeout

        if session is None:
            session = requests.Session()
            retry_strategy = Retry(
                total=cfg.sheets.max_retries,
                backoff_factor=cfg.sheets.backoff_factor,
                status_forcelist=[429, 500, 502, 503, 504],
                allowed_methods=["GET"],
            )
            adapter = HTTPAdapter(max_retries=retry_strategy)
            session.mount("https://", adapter)
            session.mount("http://", adapter)
            session.headers.update({"Accept": "text/csv"})
        self.session = session

    def sheet_url(self, sheet_name: str) -> str:
        return (
            f"{self.base_url}/{self.spreadsheet_id}/gviz/tq"
            f"?tqx=out:csv&sheet={quote(sheet_name, safe='')}"
        )

    def fetch_sheet_text(self, sheet_name: str) -> str:
        url = self.sheet_url(sheet_name)
        logger.debug(f"Fetching sheet: {sheet_name}")
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            logger.warning(f"HTTP error for sheet {sheet_name}: {e}")
            return ""
        except requests.exceptions.RequestException as e:
            logger.warning(f"Request failed for sheet {sheet_name}: {e}")
            return ""

        text = response.text
        if any(marker in text[:200] for marker in _GVIZ_ERROR_MARKERS):
            logger.warning(f"Sheet {sheet_name} not found or not shared")
            return ""
        return text


class DirectorySheetSource:
    """Offline source: one `<sheet name>.csv` file per sheet in a directory."""

    def __init__(self, directory: Path) -> None:
        self.directory = Path(directory)

    def fetch_sheet_text(self, sheet_name: str) -> str:
        path = self.directory / f"{sheet_name}.csv"
        if not path.exists():
            logger.warning(f"No export for sheet {sheet_name} at {path}")
            return ""
        try:
            return path.read_text(encoding="utf-8-sig")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Could not read {path}: {e}")
            return ""


class StaticSheetSource:
    """In-memory source keyed by sheet name."""

    def __init__(self, sheets: Mapping[str, str]) -> None:
        self.sheets = dict(sheets)
        self.calls: list[str] = []

    def fetch_sheet_text(self, sheet_name: str) -> str:
        self.calls.append(sheet_name)
        return self.sheets.get(sheet_name, "")
