"""Structured diagnostics emitted at each transaction lifecycle transition."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Protocol

from omnigraph.point import Point, format_point


class Phase(Enum):
    """Lifecycle phase a diagnostic record reports."""

    SUBMITTING = "submitting"
    SUBMITTED = "submitted"
    CONFIRMED = "confirmed"
    FAILED = "failed"


@dataclass(frozen=True)
class DiagnosticRecord:
    """One lifecycle transition of a transaction."""

    point: Point
    description: Optional[str]
    phase: Phase
    hash: Optional[str] = None

    def format(self) -> str:
        description = self.description or "[no description]"
        line = f"{format_point(self.point)}: {description}"
        if self.hash:
            line = f"{line}: {self.hash}"
        return line


class DiagnosticsSink(Protocol):
    """Receiver of diagnostic records."""

    def emit(self, record: DiagnosticRecord) -> None:
        ...


class LoggingDiagnosticsSink:
    """Writes diagnostic records to a logger."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger("omnigraph.diagnostics")

    def emit(self, record: DiagnosticRecord) -> None:
        if record.phase == Phase.FAILED:
            self.logger.error(f"{record.format()} ({record.phase.value})")
        else:
            self.logger.debug(record.format())


class CollectingDiagnosticsSink:
    """Keeps diagnostic records in memory, in emission order."""

    def __init__(self):
        self.records: List[DiagnosticRecord] = []

    def emit(self, record: DiagnosticRecord) -> None:
        self.records.append(record)

    def phases(self) -> List[Phase]:
        return [r.phase for r in self.records]

    def hashes(self, phase: Phase) -> List[Optional[str]]:
        return [r.hash for r in self.records if r.phase == phase]
