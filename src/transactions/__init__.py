"""Pending transactions, aggregation and sequential execution."""

from .pending import (
    PendingTransaction,
    TransactionState,
    RunState,
    ExecutionResult,
    RunReport,
)
from .signer import (
    ConfirmationReceipt,
    SubmissionResponse,
    Signer,
    SignerResolver,
    MappingSignerResolver,
    maybe_await,
)
from .aggregator import TransactionAggregator
from .executor import TransactionExecutor

__all__ = [
    "PendingTransaction",
    "TransactionState",
    "RunState",
    "ExecutionResult",
    "RunReport",
    "ConfirmationReceipt",
    "SubmissionResponse",
    "Signer",
    "SignerResolver",
    "MappingSignerResolver",
    "maybe_await",
    "TransactionAggregator",
    "TransactionExecutor",
]
