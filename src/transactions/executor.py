"""Sequential transaction executor.

Runs an ordered list of pending transactions one at a time: each transaction
is submitted through the signer of its network and must be confirmed before
the next one is submitted. The order is treated as an opaque total order;
transactions on different networks are never run concurrently, because the
caller's order encodes dependencies the executor does not know about.

Any failure aborts the run. Nothing is retried and nothing is rolled back:
transactions confirmed before the failure stay confirmed.

Run states:
    IDLE -> RUNNING -> COMPLETED
                    -> ABORTED

Transaction states:
    PENDING -> SUBMITTED -> CONFIRMED
    PENDING | SUBMITTED -> FAILED
"""

import asyncio
import logging
import time
from typing import Dict, Optional, Sequence

from opentelemetry import trace

from omnigraph.config import WiringConfig
from omnigraph.errors import (
    ConfirmationTimeout,
    NoSignerConfigured,
    ResolutionError,
    SubmissionError,
    WiringError,
)
from omnigraph.point import format_point
from observability.diagnostics import (
    DiagnosticRecord,
    DiagnosticsSink,
    LoggingDiagnosticsSink,
    Phase,
)
from observability.metrics import MetricsCollector
from observability.metrics import metrics_collector as default_metrics
from observability.tracing import create_span

from .pending import (
    ExecutionResult,
    PendingTransaction,
    RunReport,
    RunState,
    TransactionState,
)
from .signer import Signer, SignerResolver, maybe_await

logger = logging.getLogger(__name__)


class TransactionExecutor:
    """
    Executes one run of pending transactions.

    An executor instance owns exactly one run; create a new executor for
    every run.
    """

    def __init__(
        self,
        signer_resolver: SignerResolver,
        config: Optional[WiringConfig] = None,
        diagnostics: Optional[DiagnosticsSink] = None,
        metrics: Optional[MetricsCollector] = None,
        tracer: Optional[trace.Tracer] = None,
    ):
        """
        Initialize executor.

        Args:
            signer_resolver: Maps network ids to signers
            config: Wiring settings (confirmation timeout)
            diagnostics: Receives a record at each transaction transition
            metrics: Metrics collector (defaults to the process collector)
            tracer: OpenTelemetry tracer (defaults to the process tracer)
        """
        self.signer_resolver = signer_resolver
        self.config = config or WiringConfig()
        self.diagnostics = diagnostics or LoggingDiagnosticsSink()
        self.metrics = metrics or default_metrics
        self.tracer = tracer
        self.report = RunReport()

    @property
    def state(self) -> RunState:
        return self.report.state

    async def execute(self, transactions: Sequence[PendingTransaction]) -> RunReport:
        """
        Execute transactions strictly in order.

        Args:
            transactions: Aggregated, ordered pending transactions

        Returns:
            RunReport in COMPLETED state

        Raises:
            ResolutionError: A network in the run has no signer; nothing was submitted
            SubmissionError: A transaction was rejected or reverted
            ConfirmationTimeout: A transaction was not confirmed in time
            RuntimeError: The executor has already run
        """
        if self.report.state != RunState.IDLE:
            raise RuntimeError(
                f"Executor already used (state: {self.report.state.value})"
            )

        transactions = list(transactions)
        self.report.state = RunState.RUNNING
        self.metrics.record_run_started()

        logger.info(f"Executing {len(transactions)} transactions")

        try:
            with create_span(
                "omnigraph.execute", {"transactions": len(transactions)}, self.tracer
            ):
                signers = await self._resolve_signers(transactions)
                for transaction in transactions:
                    await self._execute_one(
                        transaction, signers[transaction.point.network_id]
                    )
        except BaseException:
            # Includes cancellation by the caller
            self._finish(RunState.ABORTED)
            raise

        self._finish(RunState.COMPLETED)
        return self.report

    async def _resolve_signers(
        self, transactions: Sequence[PendingTransaction]
    ) -> Dict[int, Signer]:
        """Resolve one signer per distinct network before anything is submitted."""
        signers: Dict[int, Signer] = {}

        for transaction in transactions:
            network_id = transaction.point.network_id
            if network_id in signers:
                continue

            try:
                signer = await maybe_await(self.signer_resolver.for_network(network_id))
            except ResolutionError as e:
                if e.point is None:
                    e.point = transaction.point
                raise self._fail_unsubmitted(transaction, e)
            except Exception as e:
                error = ResolutionError(
                    f"Failed to resolve signer for network {network_id}: {e}",
                    transaction.point,
                )
                raise self._fail_unsubmitted(transaction, error) from e

            if signer is None:
                raise self._fail_unsubmitted(
                    transaction, NoSignerConfigured(network_id, transaction.point)
                )

            signers[network_id] = signer

        return signers

    async def _execute_one(self, transaction: PendingTransaction, signer: Signer) -> None:
        result = ExecutionResult(transaction=transaction)
        self.report.results.append(result)
        point = transaction.point

        with create_span(
            "omnigraph.transaction",
            {
                "point": format_point(point),
                "network_id": point.network_id,
                "description": transaction.description,
            },
            self.tracer,
        ):
            self._emit(transaction, Phase.SUBMITTING)

            try:
                response = await maybe_await(signer.submit(transaction.payload))
                submission_hash = response.submission_hash
            except Exception as e:
                error = SubmissionError(
                    f"{transaction.describe()}: submission rejected: {e}",
                    point,
                    transaction.description,
                )
                raise self._fail(result, error) from e

            if not submission_hash:
                error = SubmissionError(
                    f"{transaction.describe()}: signer returned no submission hash",
                    point,
                    transaction.description,
                )
                raise self._fail(result, error)

            result.submission_hash = submission_hash
            result.state = TransactionState.SUBMITTED
            self.metrics.record_submitted(point.network_id)
            self._emit(transaction, Phase.SUBMITTED, submission_hash)

            submitted_at = time.monotonic()
            try:
                # A synchronous wait() blocks here and is not bounded by the timeout
                receipt = await asyncio.wait_for(
                    maybe_await(response.wait()), timeout=self.config.confirmation_timeout
                )
            except asyncio.TimeoutError as e:
                error = ConfirmationTimeout(
                    f"{transaction.describe()}: not confirmed within "
                    f"{self.config.confirmation_timeout}s "
                    f"(submission {submission_hash})",
                    point,
                    transaction.description,
                    submission_hash,
                )
                raise self._fail(result, error) from e
            except Exception as e:
                error = SubmissionError(
                    f"{transaction.describe()}: transaction "
                    f"{submission_hash} failed: {e}",
                    point,
                    transaction.description,
                    submission_hash,
                )
                raise self._fail(result, error) from e

            confirmation_hash = getattr(receipt, "confirmation_hash", None)
            if not confirmation_hash:
                error = SubmissionError(
                    f"{transaction.describe()}: no confirmation for {submission_hash}",
                    point,
                    transaction.description,
                    submission_hash,
                )
                raise self._fail(result, error)

            result.confirmation_hash = confirmation_hash
            result.state = TransactionState.CONFIRMED
            self.metrics.record_confirmed(point.network_id, time.monotonic() - submitted_at)
            self._emit(transaction, Phase.CONFIRMED, confirmation_hash)

    def _fail(self, result: ExecutionResult, error: WiringError) -> WiringError:
        """Mark a transaction failed and return the error to raise."""
        transaction = result.transaction
        result.state = TransactionState.FAILED
        result.error = error

        self.metrics.record_failed(transaction.point.network_id, type(error).__name__)
        self._emit(transaction, Phase.FAILED, result.submission_hash)
        logger.error(f"Aborting run: {error}")
        return error

    def _fail_unsubmitted(
        self, transaction: PendingTransaction, error: WiringError
    ) -> WiringError:
        result = ExecutionResult(transaction=transaction)
        self.report.results.append(result)
        return self._fail(result, error)

    def _emit(self, transaction: PendingTransaction, phase: Phase, hash: Optional[str] = None):
        self.diagnostics.emit(
            DiagnosticRecord(
                point=transaction.point,
                description=transaction.description,
                phase=phase,
                hash=hash,
            )
        )

    def _finish(self, state: RunState) -> None:
        self.report.state = state
        self.metrics.record_run_finished(state.value)

        confirmed = len(self.report.confirmed)
        if state == RunState.COMPLETED:
            logger.info(f"Run completed: {confirmed} transactions confirmed")
        else:
            logger.warning(f"Run aborted after {confirmed} confirmed transactions")
