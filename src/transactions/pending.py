"""Pending transactions and per-run execution records."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional

from omnigraph.point import Point, format_point


class TransactionState(Enum):
    """Lifecycle of a single transaction within a run."""

    PENDING = "pending"
    SUBMITTED = "submitted"
    CONFIRMED = "confirmed"
    FAILED = "failed"


class RunState(Enum):
    """Lifecycle of an executor run."""

    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    ABORTED = "aborted"


@dataclass(frozen=True)
class PendingTransaction:
    """
    An unsubmitted unit of work bound to a point.

    The point's network selects the signer; the payload is opaque to the
    executor and handed to the signer as-is.
    """

    point: Point
    payload: Any
    description: Optional[str] = None

    def describe(self) -> str:
        return f"{format_point(self.point)}: {self.description or '[no description]'}"


@dataclass
class ExecutionResult:
    """Outcome of one transaction in a run."""

    transaction: PendingTransaction
    state: TransactionState = TransactionState.PENDING
    submission_hash: Optional[str] = None
    confirmation_hash: Optional[str] = None
    error: Optional[BaseException] = None


@dataclass
class RunReport:
    """Run state and the ordered results of every attempted transaction."""

    state: RunState = RunState.IDLE
    results: List[ExecutionResult] = field(default_factory=list)

    @property
    def confirmed(self) -> List[ExecutionResult]:
        return [r for r in self.results if r.state == TransactionState.CONFIRMED]

    @property
    def confirmation_hashes(self) -> List[str]:
        return [r.confirmation_hash for r in self.confirmed]
