"""Endpoint configurator: default send and receive libraries per connection."""

import logging
from dataclasses import dataclass
from typing import List, Optional

from omnigraph.graph import TopologyGraph
from omnigraph.point import format_point
from transactions.pending import PendingTransaction

from .base import ContractSdk, SdkFactory

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EndpointEdgeConfig:
    """Desired configuration of a connection between two endpoints."""

    default_send_library: str
    default_receive_library: str
    receive_library_grace_period: int = 0


class Endpoint(ContractSdk):
    """SDK over an EndpointV2 contract."""

    async def get_default_send_library(self, network_id: int) -> Optional[str]:
        return await self._read("defaultSendLibrary", network_id)

    async def get_default_receive_library(self, network_id: int) -> Optional[str]:
        return await self._read("defaultReceiveLibrary", network_id)

    def set_default_send_library(self, network_id: int, library: str) -> PendingTransaction:
        return self._transaction(
            "setDefaultSendLibrary",
            (network_id, library),
            f"Setting default send library for {network_id} to {library}",
        )

    def set_default_receive_library(
        self, network_id: int, library: str, grace_period: int = 0
    ) -> PendingTransaction:
        return self._transaction(
            "setDefaultReceiveLibrary",
            (network_id, library, grace_period),
            f"Setting default receive library for {network_id} to {library}",
        )


async def configure_endpoint_default_receive_libraries(
    graph: TopologyGraph, sdk_factory: SdkFactory
) -> List[PendingTransaction]:
    transactions = []
    for link in graph.links:
        config: EndpointEdgeConfig = link.config
        sdk: Endpoint = await sdk_factory(link.from_point)
        current = await sdk.get_default_receive_library(link.to_point.network_id)
        if current == config.default_receive_library:
            continue

        transactions.append(
            sdk.set_default_receive_library(
                link.to_point.network_id,
                config.default_receive_library,
                config.receive_library_grace_period,
            )
        )
    return transactions


async def configure_endpoint_default_send_libraries(
    graph: TopologyGraph, sdk_factory: SdkFactory
) -> List[PendingTransaction]:
    transactions = []
    for link in graph.links:
        config: EndpointEdgeConfig = link.config
        sdk: Endpoint = await sdk_factory(link.from_point)
        current = await sdk.get_default_send_library(link.to_point.network_id)
        if current == config.default_send_library:
            continue

        transactions.append(
            sdk.set_default_send_library(link.to_point.network_id, config.default_send_library)
        )
    return transactions


async def configure_endpoint(
    graph: TopologyGraph, sdk_factory: SdkFactory
) -> List[PendingTransaction]:
    """
    Reconcile default libraries of every endpoint connection.

    Receive libraries for all links come before send libraries, so a
    destination can always accept messages before a source starts sending.
    """
    transactions = await configure_endpoint_default_receive_libraries(graph, sdk_factory)
    transactions += await configure_endpoint_default_send_libraries(graph, sdk_factory)

    logger.debug(
        f"Endpoint graph {graph}: {len(transactions)} transactions "
        f"({', '.join(format_point(t.point) for t in transactions) or 'none'})"
    )
    return transactions


class EndpointConfigurator:
    """Configurator for EndpointV2 graphs."""

    async def reconcile(
        self, graph: TopologyGraph, sdk_factory: SdkFactory
    ) -> List[PendingTransaction]:
        return await configure_endpoint(graph, sdk_factory)
