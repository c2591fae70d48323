"""ULN302 configurator: default ULN and executor settings per remote network."""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from omnigraph.graph import TopologyGraph
from transactions.pending import PendingTransaction

from .base import ContractSdk, SdkFactory

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Uln302UlnConfig:
    """
    Verification settings for messages to or from one remote network.

    DVN address lists are stored sorted, matching what the contract accepts,
    so configs compare equal regardless of declaration order.
    """

    confirmations: int
    required_dvns: Tuple[str, ...] = ()
    optional_dvns: Tuple[str, ...] = ()
    optional_dvn_threshold: int = 0

    def __post_init__(self):
        object.__setattr__(self, "required_dvns", tuple(sorted(self.required_dvns)))
        object.__setattr__(self, "optional_dvns", tuple(sorted(self.optional_dvns)))
        if self.optional_dvn_threshold > len(self.optional_dvns):
            raise ValueError(
                f"optional_dvn_threshold {self.optional_dvn_threshold} exceeds "
                f"{len(self.optional_dvns)} optional DVNs"
            )


@dataclass(frozen=True)
class Uln302ExecutorConfig:
    max_message_size: int
    executor: str


@dataclass(frozen=True)
class Uln302NodeConfig:
    """Desired defaults of a ULN302 contract, keyed by remote network id."""

    default_uln_configs: Tuple[Tuple[int, Uln302UlnConfig], ...] = field(default_factory=tuple)
    default_executor_configs: Tuple[Tuple[int, Uln302ExecutorConfig], ...] = field(
        default_factory=tuple
    )

    def __post_init__(self):
        object.__setattr__(
            self, "default_uln_configs", tuple(tuple(e) for e in self.default_uln_configs)
        )
        object.__setattr__(
            self,
            "default_executor_configs",
            tuple(tuple(e) for e in self.default_executor_configs),
        )


class Uln302(ContractSdk):
    """SDK over a SendUln302 or ReceiveUln302 contract."""

    async def get_default_uln_config(self, network_id: int) -> Optional[Uln302UlnConfig]:
        return await self._read("defaultUlnConfigs", network_id)

    async def get_default_executor_config(
        self, network_id: int
    ) -> Optional[Uln302ExecutorConfig]:
        return await self._read("defaultExecutorConfigs", network_id)

    def set_default_uln_configs(
        self, configs: Sequence[Tuple[int, Uln302UlnConfig]]
    ) -> PendingTransaction:
        network_ids = ", ".join(str(network_id) for network_id, _ in configs)
        return self._transaction(
            "setDefaultUlnConfigs",
            (tuple(configs),),
            f"Setting default ULN configs for {network_ids}",
        )

    def set_default_executor_configs(
        self, configs: Sequence[Tuple[int, Uln302ExecutorConfig]]
    ) -> PendingTransaction:
        network_ids = ", ".join(str(network_id) for network_id, _ in configs)
        return self._transaction(
            "setDefaultExecutorConfigs",
            (tuple(configs),),
            f"Setting default executor configs for {network_ids}",
        )


async def configure_uln302(
    graph: TopologyGraph, sdk_factory: SdkFactory
) -> List[PendingTransaction]:
    """
    Reconcile default ULN and executor configs of every ULN302 node.

    Emits at most two transactions per node, ULN configs first, each carrying
    only the entries that differ from on-chain state.
    """
    transactions = []

    for node in graph.nodes:
        config: Optional[Uln302NodeConfig] = node.config
        if config is None:
            continue

        sdk: Uln302 = await sdk_factory(node.point)

        uln_changes = []
        for network_id, uln_config in config.default_uln_configs:
            if await sdk.get_default_uln_config(network_id) != uln_config:
                uln_changes.append((network_id, uln_config))

        executor_changes = []
        for network_id, executor_config in config.default_executor_configs:
            if await sdk.get_default_executor_config(network_id) != executor_config:
                executor_changes.append((network_id, executor_config))

        if uln_changes:
            transactions.append(sdk.set_default_uln_configs(uln_changes))
        if executor_changes:
            transactions.append(sdk.set_default_executor_configs(executor_changes))

    logger.debug(f"ULN302 graph {graph}: {len(transactions)} transactions")
    return transactions


class Uln302Configurator:
    """Configurator for SendUln302 / ReceiveUln302 graphs."""

    async def reconcile(
        self, graph: TopologyGraph, sdk_factory: SdkFactory
    ) -> List[PendingTransaction]:
        return await configure_uln302(graph, sdk_factory)
