"""
Recovered-error taxonomy for ingestion passes.

None of these conditions is fatal. Each is recovered where it happens and
recorded as an IngestIssue so a caller can see what a pass degraded.
"""
from dataclasses import dataclass
from enum import Enum


class IssueKind(str, Enum):
    SOURCE_UNAVAILABLE = "source_unavailable"      # sheet fetch failed → empty table
    MALFORMED_ROW = "malformed_row"                # too few fields → row skipped
    UNRESOLVED_REFERENCE = "unresolved_reference"  # name matched nothing → fallback
    UNPARSEABLE_DATE = "unparseable_date"          # date kept as original text


@dataclass(frozen=True)
class IngestIssue:
    kind: IssueKind
    sheet: str
    detail: str


class IssueLog:
    """Append-only collector for the issues of a single pass."""

    def __init__(self) -> None:
        self._issues: list[IngestIssue] = []

    def add(self, kind: IssueKind, sheet: str, detail: str) -> None:
        self._issues.append(IngestIssue(kind=kind, sheet=sheet, detail=detail))

    def of_kind(self, kind: IssueKind) -> list[IngestIssue]:
        return [i for i in self._issues if i.kind == kind]

    def as_list(self) -> list[IngestIssue]:
        return list(self._issues)

    def __len__(self) -> int:
        return len(self._issues)
