"""Configurator interface and the plumbing shared by the concrete configurators.

A configurator compares the desired state carried by a topology graph with
what is on-chain and returns the transactions that would reconcile the two.
It only reads on-chain state (through SDK objects built by an SDK factory);
submitting is left to the TransactionExecutor.
"""

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, List, Protocol, Sequence, Tuple, TypeVar

from omnigraph.builder import ContractHandle, ContractResolver, resolve_contract
from omnigraph.errors import ResolutionError
from omnigraph.graph import TopologyGraph
from omnigraph.point import Point
from transactions.aggregator import TransactionAggregator
from transactions.pending import PendingTransaction
from transactions.signer import maybe_await

logger = logging.getLogger(__name__)

Sdk = TypeVar("Sdk")
SdkFactory = Callable[[Point], Awaitable[Sdk]]


@dataclass(frozen=True)
class ContractCall:
    """Transaction payload produced by the SDKs: a method call on a contract."""

    to: str
    method: str
    args: Tuple[Any, ...] = ()


class ContractReader(Protocol):
    """Read access to a deployed contract."""

    def call(self, method: str, *args: Any) -> Any:
        ...


class Configurator(Protocol):
    """Reconciles one contract kind's graph to its desired state."""

    async def reconcile(
        self, graph: TopologyGraph, sdk_factory: SdkFactory
    ) -> List[PendingTransaction]:
        ...


class ContractSdk:
    """Base for SDK objects wrapping a resolved contract handle."""

    def __init__(self, handle):
        self.handle = handle

    @property
    def point(self) -> Point:
        return self.handle.point

    @property
    def address(self) -> str:
        return self.handle.address

    async def _read(self, method: str, *args: Any) -> Any:
        contract = getattr(self.handle, "contract", None)
        if contract is None:
            raise ResolutionError(
                f"No contract to read {method} from at {self.address}", self.point
            )
        return await maybe_await(contract.call(method, *args))

    def _transaction(self, method: str, args: Tuple[Any, ...], description: str) -> PendingTransaction:
        return PendingTransaction(
            point=self.point,
            payload=ContractCall(to=self.address, method=method, args=args),
            description=description,
        )


def create_sdk_factory(resolver: ContractResolver, sdk_class: Callable[[Any], Sdk]) -> SdkFactory:
    """
    Build an SDK factory from a contract resolver.

    A resolver returning a bare address yields an SDK over a ContractHandle
    without a contract: it can build transactions but not read state.

    Example:
        endpoint_factory = create_sdk_factory(resolver, Endpoint)
        endpoint = await endpoint_factory(point)
    """

    async def factory(point: Point) -> Sdk:
        resolved = await resolve_contract(resolver, point)
        if resolved is None:
            raise ResolutionError(f"Resolver returned nothing for {point}", point)
        if not hasattr(resolved, "address"):
            resolved = ContractHandle(point=point, address=str(resolved))
        return sdk_class(resolved)

    return factory


@dataclass(frozen=True)
class ConfiguratorStep:
    """One configurator invocation within a run."""

    domain: str
    configurator: Configurator
    graph: TopologyGraph
    sdk_factory: SdkFactory


async def run_configurators(
    aggregator: TransactionAggregator, steps: Sequence[ConfiguratorStep]
) -> List[PendingTransaction]:
    """
    Run configurators one after another and aggregate their output.

    Args:
        aggregator: Aggregator holding the fixed domain order
        steps: Configurator invocations; each step's domain must be known to
            the aggregator

    Returns:
        Aggregated transactions in domain order
    """
    for step in steps:
        transactions = await step.configurator.reconcile(step.graph, step.sdk_factory)
        logger.debug(f"Configurator for {step.domain} produced {len(transactions)} transactions")
        aggregator.add(step.domain, transactions)

    transactions = aggregator.transactions()
    logger.info(f"Aggregated {len(transactions)} transactions across {len(steps)} configurators")
    return transactions
