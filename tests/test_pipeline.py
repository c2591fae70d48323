"""End-to-end wiring runs: build, reconcile, aggregate and execute on a devnet."""

import sys
import os
import pytest

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from configurators import ContractCall, Endpoint, Uln302
from devnet import (
    Devnet,
    DevnetContractResolver,
    DevnetSignerResolver,
    FailureMode,
    DEFAULT_ULN_CONFIG,
    DEFAULT_EXECUTOR_CONFIG,
    setup_default_endpoint,
)
from omnigraph import (
    ConfirmationTimeout,
    GraphBuilder,
    LinkDeclaration,
    NetworkUnavailable,
    NodeDeclaration,
    NotDeployed,
    Point,
    ResolutionError,
    SubmissionError,
    TopologyDeclaration,
    WiringConfig,
)
from observability.diagnostics import CollectingDiagnosticsSink, Phase
from transactions import PendingTransaction, RunState, TransactionExecutor


ETH = 101
AVAX = 106


class TestDefaultEndpointWiring:
    """Wire two fresh chains, then verify the second run is a no-op."""

    @pytest.mark.asyncio
    async def test_fresh_wiring(self):
        devnet = Devnet()
        sink = CollectingDiagnosticsSink()

        report = await setup_default_endpoint(devnet, [ETH, AVAX], diagnostics=sink)

        assert report.state == RunState.COMPLETED
        # Per chain: send ULN (uln + executor), receive ULN (uln), endpoint (receive + send)
        assert len(report.confirmed) == 10
        assert sink.phases().count(Phase.CONFIRMED) == 10

        methods = [r.transaction.payload.method for r in report.results]
        assert methods == [
            "setDefaultUlnConfigs",
            "setDefaultExecutorConfigs",
            "setDefaultUlnConfigs",
            "setDefaultExecutorConfigs",
            "setDefaultUlnConfigs",
            "setDefaultUlnConfigs",
            "setDefaultReceiveLibrary",
            "setDefaultReceiveLibrary",
            "setDefaultSendLibrary",
            "setDefaultSendLibrary",
        ]

        eth = devnet.chain(ETH)
        endpoint = eth.contracts["EndpointV2"]
        assert endpoint.call("defaultSendLibrary", AVAX) == eth.contracts["SendUln302"].address
        assert endpoint.call("defaultReceiveLibrary", AVAX) == eth.contracts["ReceiveUln302"].address
        assert eth.contracts["SendUln302"].call("defaultUlnConfigs", AVAX) == DEFAULT_ULN_CONFIG
        assert eth.contracts["SendUln302"].call("defaultExecutorConfigs", AVAX) == DEFAULT_EXECUTOR_CONFIG
        assert eth.contracts["ReceiveUln302"].call("defaultExecutorConfigs", AVAX) is None

    @pytest.mark.asyncio
    async def test_second_run_is_idempotent(self):
        devnet = Devnet()
        await setup_default_endpoint(devnet, [ETH, AVAX])
        submissions = len(devnet.all_submissions())

        report = await setup_default_endpoint(devnet, [ETH, AVAX])

        assert report.state == RunState.COMPLETED
        assert report.results == []
        assert len(devnet.all_submissions()) == submissions

    @pytest.mark.asyncio
    async def test_three_chains(self):
        devnet = Devnet()
        report = await setup_default_endpoint(devnet, [1, 2, 3])

        # Per chain: 2 send ULN + 1 receive ULN + 2 links x 2 libraries
        assert len(report.confirmed) == 3 * (2 + 1 + 4)

    @pytest.mark.asyncio
    async def test_failure_mid_run_resumes_on_rerun(self):
        """Confirmed work survives an abort and is not redone by the next run."""
        devnet = Devnet()
        devnet.chain(AVAX).inject_failure(FailureMode.REVERT, method="setDefaultReceiveLibrary")

        with pytest.raises(SubmissionError) as exc_info:
            await setup_default_endpoint(devnet, [ETH, AVAX])

        assert exc_info.value.point == Point(AVAX, "EndpointV2")
        assert exc_info.value.submission_hash is not None

        report = await setup_default_endpoint(devnet, [ETH, AVAX])

        # Only the failed receive library and the two send libraries remain
        assert [r.transaction.payload.method for r in report.results] == [
            "setDefaultReceiveLibrary",
            "setDefaultSendLibrary",
            "setDefaultSendLibrary",
        ]


def _two_endpoint_declaration():
    a = Point(1, "EndpointV2")
    b = Point(2, "EndpointV2")
    return TopologyDeclaration(
        nodes=[NodeDeclaration(a), NodeDeclaration(b)],
        links=[LinkDeclaration(a, b, {"defaultLib": "X"})],
    )


class TestConcreteScenarios:
    """Two endpoints with one link and a stub configurator."""

    @pytest.mark.asyncio
    async def test_missing_signer_for_network(self):
        devnet = Devnet()
        for network_id in (1, 2):
            devnet.chain(network_id).deploy("EndpointV2")

        graph = await GraphBuilder(DevnetContractResolver(devnet)).build(
            _two_endpoint_declaration()
        )
        assert len(graph.nodes) == 2 and len(graph.links) == 1

        a = graph.nodes[0]
        transactions = [
            PendingTransaction(
                point=a.point,
                payload=ContractCall(to=a.address, method="setDefaultSendLibrary", args=(2, a.address)),
                description="set default lib",
            )
        ]

        signer_resolver = DevnetSignerResolver(devnet, networks={2})
        executor = TransactionExecutor(signer_resolver)

        with pytest.raises(ResolutionError):
            await executor.execute(transactions)

        assert executor.state == RunState.ABORTED
        assert devnet.all_submissions() == []

    @pytest.mark.asyncio
    async def test_unregistered_library_reverts(self):
        devnet = Devnet()
        endpoint = devnet.chain(1).deploy("EndpointV2")

        executor = TransactionExecutor(DevnetSignerResolver(devnet))
        with pytest.raises(SubmissionError, match="OnlyRegisteredLib"):
            await executor.execute(
                [
                    PendingTransaction(
                        point=Point(1, "EndpointV2"),
                        payload=ContractCall(endpoint.address, "setDefaultSendLibrary", (2, "0xnowhere")),
                    )
                ]
            )

    @pytest.mark.asyncio
    async def test_hanging_confirmation_times_out(self):
        devnet = Devnet()
        endpoint = devnet.chain(1).deploy("EndpointV2")
        library = devnet.chain(1).deploy("SendUln302")
        devnet.chain(1).inject_failure(FailureMode.HANG)

        executor = TransactionExecutor(
            DevnetSignerResolver(devnet), config=WiringConfig(confirmation_timeout=0.05)
        )
        with pytest.raises(ConfirmationTimeout) as exc_info:
            await executor.execute(
                [
                    PendingTransaction(
                        point=Point(1, "EndpointV2"),
                        payload=ContractCall(endpoint.address, "setDefaultSendLibrary", (2, library.address)),
                    )
                ]
            )

        assert exc_info.value.submission_hash == devnet.chain(1).submissions[0].submission_hash
        assert endpoint.call("defaultSendLibrary", 2) is None

    @pytest.mark.asyncio
    async def test_rejected_submission(self):
        devnet = Devnet()
        endpoint = devnet.chain(1).deploy("EndpointV2")
        devnet.chain(1).inject_failure(FailureMode.REJECT)

        executor = TransactionExecutor(DevnetSignerResolver(devnet))
        with pytest.raises(SubmissionError) as exc_info:
            await executor.execute(
                [PendingTransaction(point=Point(1, "EndpointV2"), payload=ContractCall(endpoint.address, "noop"))]
            )

        assert exc_info.value.submission_hash is None
        assert devnet.chain(1).submissions == []


class TestDevnetResolution:
    """Devnet resolver failures surface as resolution errors."""

    @pytest.mark.asyncio
    async def test_not_deployed(self):
        devnet = Devnet()
        devnet.chain(1).deploy("EndpointV2")
        devnet.chain(2)

        with pytest.raises(NotDeployed):
            await GraphBuilder(DevnetContractResolver(devnet)).build(_two_endpoint_declaration())

    @pytest.mark.asyncio
    async def test_network_unavailable(self):
        devnet = Devnet()
        for network_id in (1, 2):
            devnet.chain(network_id).deploy("EndpointV2")
        devnet.chain(2).available = False

        with pytest.raises(NetworkUnavailable):
            await GraphBuilder(DevnetContractResolver(devnet)).build(_two_endpoint_declaration())

    @pytest.mark.asyncio
    async def test_sdk_reads_through_handle(self):
        devnet = Devnet()
        devnet.chain(1).deploy("SendUln302").write("defaultUlnConfigs", 2, DEFAULT_ULN_CONFIG)
        resolver = DevnetContractResolver(devnet)

        sdk = Uln302(await resolver.resolve(Point(1, "SendUln302")))

        assert await sdk.get_default_uln_config(2) == DEFAULT_ULN_CONFIG
        assert await sdk.get_default_uln_config(3) is None
        assert sdk.point == Point(1, "SendUln302")
