"""Deploy and wire a default endpoint setup across devnet chains.

Deploys EndpointV2, SendUln302 and ReceiveUln302 on every network, then wires
them with minimal configuration: every ULN gets default ULN and executor
configs for every other network, and every endpoint pair gets default send
and receive libraries. Transactions run in the order send ULN, receive ULN,
endpoint, since the endpoint wiring points at the ULN contracts.
"""

import logging
from typing import Optional, Sequence

from opentelemetry import trace

from configurators import (
    ConfiguratorStep,
    Endpoint,
    EndpointConfigurator,
    EndpointEdgeConfig,
    Uln302,
    Uln302Configurator,
    Uln302ExecutorConfig,
    Uln302NodeConfig,
    Uln302UlnConfig,
    create_sdk_factory,
    run_configurators,
)
from omnigraph import (
    GraphBuilder,
    LinkDeclaration,
    NodeDeclaration,
    Point,
    TopologyDeclaration,
    WiringConfig,
)
from observability.diagnostics import DiagnosticsSink
from transactions import RunReport, TransactionAggregator, TransactionExecutor

from .chain import Devnet
from .resolvers import DevnetContractResolver, DevnetSignerResolver

logger = logging.getLogger(__name__)

ENDPOINT = "EndpointV2"
SEND_ULN = "SendUln302"
RECEIVE_ULN = "ReceiveUln302"

DOMAIN_ORDER = ["send_uln", "receive_uln", "endpoint"]

DEFAULT_EXECUTOR_CONFIG = Uln302ExecutorConfig(
    max_message_size=10000,
    executor="0x0000000000000000000000000000000000000001",
)

DEFAULT_ULN_CONFIG = Uln302UlnConfig(
    confirmations=1,
    required_dvns=(
        "0x0000000000000000000000000000000000000002",
        "0x0000000000000000000000000000000000000003",
    ),
    optional_dvns=(),
    optional_dvn_threshold=0,
)


def deploy_endpoint_infrastructure(devnet: Devnet, network_ids: Sequence[int]) -> None:
    """Deploy EndpointV2 and both ULNs on every network."""
    for network_id in network_ids:
        chain = devnet.chain(network_id)
        for role in (ENDPOINT, SEND_ULN, RECEIVE_ULN):
            chain.deploy(role)


def _uln_declaration(
    network_ids: Sequence[int], role: str, with_executors: bool
) -> TopologyDeclaration:
    nodes = []
    for network_id in network_ids:
        remotes = [n for n in network_ids if n != network_id]
        nodes.append(
            NodeDeclaration(
                point=Point(network_id, role),
                config=Uln302NodeConfig(
                    default_uln_configs=tuple((r, DEFAULT_ULN_CONFIG) for r in remotes),
                    default_executor_configs=tuple(
                        (r, DEFAULT_EXECUTOR_CONFIG) for r in remotes
                    )
                    if with_executors
                    else (),
                ),
            )
        )
    return TopologyDeclaration(nodes=nodes, links=[])


def _endpoint_declaration(devnet: Devnet, network_ids: Sequence[int]) -> TopologyDeclaration:
    nodes = [NodeDeclaration(point=Point(n, ENDPOINT)) for n in network_ids]
    links = []
    for from_id in network_ids:
        chain = devnet.chain(from_id)
        for to_id in network_ids:
            if to_id == from_id:
                continue
            links.append(
                LinkDeclaration(
                    from_point=Point(from_id, ENDPOINT),
                    to_point=Point(to_id, ENDPOINT),
                    config=EndpointEdgeConfig(
                        default_send_library=chain.contracts[SEND_ULN].address,
                        default_receive_library=chain.contracts[RECEIVE_ULN].address,
                    ),
                )
            )
    return TopologyDeclaration(nodes=nodes, links=links)


async def setup_default_endpoint(
    devnet: Devnet,
    network_ids: Sequence[int],
    config: Optional[WiringConfig] = None,
    diagnostics: Optional[DiagnosticsSink] = None,
    tracer: Optional[trace.Tracer] = None,
) -> RunReport:
    """
    Deploy (if needed) and wire the default endpoint setup.

    Running it again once everything is wired produces no transactions.

    Returns:
        Report of the executed run
    """
    config = config or WiringConfig()
    deploy_endpoint_infrastructure(devnet, network_ids)

    contract_resolver = DevnetContractResolver(devnet)
    builder = GraphBuilder(contract_resolver, config, tracer=tracer)
    uln_factory = create_sdk_factory(contract_resolver, Uln302)
    endpoint_factory = create_sdk_factory(contract_resolver, Endpoint)

    send_uln_graph = await builder.build(_uln_declaration(network_ids, SEND_ULN, True))
    receive_uln_graph = await builder.build(_uln_declaration(network_ids, RECEIVE_ULN, False))
    endpoint_graph = await builder.build(_endpoint_declaration(devnet, network_ids))

    transactions = await run_configurators(
        TransactionAggregator(DOMAIN_ORDER),
        [
            ConfiguratorStep("send_uln", Uln302Configurator(), send_uln_graph, uln_factory),
            ConfiguratorStep("receive_uln", Uln302Configurator(), receive_uln_graph, uln_factory),
            ConfiguratorStep("endpoint", EndpointConfigurator(), endpoint_graph, endpoint_factory),
        ],
    )

    logger.debug(f"Executing {len(transactions)} transactions")

    executor = TransactionExecutor(
        DevnetSignerResolver(devnet), config=config, diagnostics=diagnostics, tracer=tracer
    )
    report = await executor.execute(transactions)

    logger.debug("Done configuring endpoint")
    return report
