"""Tests for the Endpoint and ULN302 configurators against a devnet."""

import sys
import os
import pytest

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from configurators import (
    ContractCall,
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
from devnet import Devnet, DevnetContractResolver
from omnigraph import (
    GraphBuilder,
    LinkDeclaration,
    NodeDeclaration,
    Point,
    ResolutionError,
    TopologyDeclaration,
)
from transactions import TransactionAggregator


ETH = 101
AVAX = 106


@pytest.fixture
def devnet():
    devnet = Devnet()
    for network_id in (ETH, AVAX):
        chain = devnet.chain(network_id)
        for role in ("EndpointV2", "SendUln302", "ReceiveUln302"):
            chain.deploy(role)
    return devnet


@pytest.fixture
def resolver(devnet):
    return DevnetContractResolver(devnet)


def _endpoint_declaration(devnet):
    eth, avax = devnet.chain(ETH), devnet.chain(AVAX)
    return TopologyDeclaration(
        nodes=[NodeDeclaration(Point(ETH, "EndpointV2")), NodeDeclaration(Point(AVAX, "EndpointV2"))],
        links=[
            LinkDeclaration(
                Point(ETH, "EndpointV2"),
                Point(AVAX, "EndpointV2"),
                EndpointEdgeConfig(
                    default_send_library=eth.contracts["SendUln302"].address,
                    default_receive_library=eth.contracts["ReceiveUln302"].address,
                ),
            ),
            LinkDeclaration(
                Point(AVAX, "EndpointV2"),
                Point(ETH, "EndpointV2"),
                EndpointEdgeConfig(
                    default_send_library=avax.contracts["SendUln302"].address,
                    default_receive_library=avax.contracts["ReceiveUln302"].address,
                ),
            ),
        ],
    )


class TestEndpointConfigurator:
    """Test default library reconciliation."""

    @pytest.mark.asyncio
    async def test_fresh_endpoints_need_all_libraries(self, devnet, resolver):
        graph = await GraphBuilder(resolver).build(_endpoint_declaration(devnet))
        factory = create_sdk_factory(resolver, Endpoint)

        transactions = await EndpointConfigurator().reconcile(graph, factory)

        methods = [t.payload.method for t in transactions]
        # Receive libraries for every link first, then send libraries
        assert methods == [
            "setDefaultReceiveLibrary",
            "setDefaultReceiveLibrary",
            "setDefaultSendLibrary",
            "setDefaultSendLibrary",
        ]
        assert [t.point.network_id for t in transactions] == [ETH, AVAX, ETH, AVAX]

        first = transactions[0]
        assert first.payload.to == devnet.chain(ETH).contracts["EndpointV2"].address
        assert first.payload.args == (AVAX, devnet.chain(ETH).contracts["ReceiveUln302"].address, 0)
        assert first.description.startswith(f"Setting default receive library for {AVAX}")

    @pytest.mark.asyncio
    async def test_configured_library_is_skipped(self, devnet, resolver):
        eth = devnet.chain(ETH)
        eth.contracts["EndpointV2"].write(
            "defaultSendLibrary", AVAX, eth.contracts["SendUln302"].address
        )
        graph = await GraphBuilder(resolver).build(_endpoint_declaration(devnet))

        transactions = await EndpointConfigurator().reconcile(
            graph, create_sdk_factory(resolver, Endpoint)
        )

        sends = [t for t in transactions if t.payload.method == "setDefaultSendLibrary"]
        assert [t.point.network_id for t in sends] == [AVAX]

    @pytest.mark.asyncio
    async def test_no_links_no_transactions(self, devnet, resolver):
        graph = await GraphBuilder(resolver).build(
            TopologyDeclaration(nodes=[NodeDeclaration(Point(ETH, "EndpointV2"))])
        )

        transactions = await EndpointConfigurator().reconcile(
            graph, create_sdk_factory(resolver, Endpoint)
        )
        assert transactions == []


class TestUln302Configurator:
    """Test default ULN / executor config reconciliation."""

    uln_config = Uln302UlnConfig(
        confirmations=1,
        required_dvns=("0x03", "0x02"),
    )
    executor_config = Uln302ExecutorConfig(max_message_size=10000, executor="0x01")

    def _declaration(self, with_config=True):
        config = Uln302NodeConfig(
            default_uln_configs=[(AVAX, self.uln_config)],
            default_executor_configs=[(AVAX, self.executor_config)],
        )
        return TopologyDeclaration(
            nodes=[
                NodeDeclaration(Point(ETH, "SendUln302"), config if with_config else None),
                NodeDeclaration(Point(AVAX, "SendUln302"), None),
            ]
        )

    def test_dvns_sorted(self):
        assert self.uln_config.required_dvns == ("0x02", "0x03")
        assert Uln302UlnConfig(1, ["0x03", "0x02"]) == self.uln_config

    def test_threshold_bounded_by_optional_dvns(self):
        with pytest.raises(ValueError):
            Uln302UlnConfig(1, ("0x02",), optional_dvns=("0x04",), optional_dvn_threshold=2)

    @pytest.mark.asyncio
    async def test_fresh_uln_needs_both_configs(self, resolver):
        graph = await GraphBuilder(resolver).build(self._declaration())

        transactions = await Uln302Configurator().reconcile(
            graph, create_sdk_factory(resolver, Uln302)
        )

        assert [t.payload.method for t in transactions] == [
            "setDefaultUlnConfigs",
            "setDefaultExecutorConfigs",
        ]
        assert all(t.point == Point(ETH, "SendUln302") for t in transactions)
        assert transactions[0].payload.args == (((AVAX, self.uln_config),),)
        assert transactions[1].description == f"Setting default executor configs for {AVAX}"

    @pytest.mark.asyncio
    async def test_matching_config_is_skipped(self, devnet, resolver):
        devnet.chain(ETH).contracts["SendUln302"].write("defaultUlnConfigs", AVAX, self.uln_config)
        graph = await GraphBuilder(resolver).build(self._declaration())

        transactions = await Uln302Configurator().reconcile(
            graph, create_sdk_factory(resolver, Uln302)
        )

        assert [t.payload.method for t in transactions] == ["setDefaultExecutorConfigs"]

    @pytest.mark.asyncio
    async def test_nodes_without_config_skipped(self, resolver):
        graph = await GraphBuilder(resolver).build(self._declaration(with_config=False))

        transactions = await Uln302Configurator().reconcile(
            graph, create_sdk_factory(resolver, Uln302)
        )
        assert transactions == []


class TestRunConfigurators:
    """Test configurators feeding the aggregator."""

    @pytest.mark.asyncio
    async def test_domain_order_applied(self, devnet, resolver):
        builder = GraphBuilder(resolver)
        endpoint_graph = await builder.build(_endpoint_declaration(devnet))
        uln_graph = await builder.build(
            TopologyDeclaration(
                nodes=[
                    NodeDeclaration(
                        Point(ETH, "SendUln302"),
                        Uln302NodeConfig(
                            default_executor_configs=[
                                (AVAX, Uln302ExecutorConfig(max_message_size=1, executor="0x01"))
                            ]
                        ),
                    )
                ]
            )
        )

        # Endpoint step listed first but the aggregator puts ULN first
        transactions = await run_configurators(
            TransactionAggregator(["uln", "endpoint"]),
            [
                ConfiguratorStep("endpoint", EndpointConfigurator(), endpoint_graph, create_sdk_factory(resolver, Endpoint)),
                ConfiguratorStep("uln", Uln302Configurator(), uln_graph, create_sdk_factory(resolver, Uln302)),
            ],
        )

        assert len(transactions) == 5
        assert transactions[0].payload == ContractCall(
            to=devnet.chain(ETH).contracts["SendUln302"].address,
            method="setDefaultExecutorConfigs",
            args=(((AVAX, Uln302ExecutorConfig(max_message_size=1, executor="0x01")),),),
        )
        assert all(t.point.contract_role == "EndpointV2" for t in transactions[1:])


class TestSdkFactory:
    """SDK factories over different resolver return types."""

    @pytest.mark.asyncio
    async def test_handle_from_devnet_resolver(self, devnet, resolver):
        endpoint = await create_sdk_factory(resolver, Endpoint)(Point(ETH, "EndpointV2"))

        assert endpoint.point == Point(ETH, "EndpointV2")
        assert endpoint.address == devnet.chain(ETH).contracts["EndpointV2"].address
        assert await endpoint.get_default_send_library(AVAX) is None

    @pytest.mark.asyncio
    async def test_bare_address_resolver(self):
        class AddressResolver:
            def resolve(self, point):
                return f"0xendpoint{point.network_id}"

        point = Point(ETH, "EndpointV2")
        endpoint = await create_sdk_factory(AddressResolver(), Endpoint)(point)

        assert endpoint.point == point
        assert endpoint.address == "0xendpoint101"

        transaction = endpoint.set_default_send_library(AVAX, "0xlib")
        assert transaction.point == point
        assert transaction.payload == ContractCall(
            to="0xendpoint101", method="setDefaultSendLibrary", args=(AVAX, "0xlib")
        )

        with pytest.raises(ResolutionError, match="No contract"):
            await endpoint.get_default_send_library(AVAX)

    @pytest.mark.asyncio
    async def test_resolver_returning_nothing(self):
        class EmptyResolver:
            async def resolve(self, point):
                return None

        with pytest.raises(ResolutionError):
            await create_sdk_factory(EmptyResolver(), Endpoint)(Point(ETH, "EndpointV2"))
