"""Contract and signer resolvers backed by a Devnet."""

import asyncio
import logging
from typing import List, Optional, Set

from omnigraph.builder import ContractHandle
from omnigraph.errors import NetworkUnavailable, NotDeployed
from omnigraph.point import Point, format_point
from transactions.signer import ConfirmationReceipt

from .chain import (
    Devnet,
    DevnetChain,
    FailureMode,
    SubmittedTransaction,
    TransactionReverted,
)

logger = logging.getLogger(__name__)


class DevnetContractResolver:
    """Resolves points to contracts deployed on a Devnet."""

    def __init__(self, devnet: Devnet):
        self.devnet = devnet
        self.calls: List[Point] = []

    async def resolve(self, point: Point) -> ContractHandle:
        self.calls.append(point)
        # Yield so concurrent resolutions interleave as real network calls would
        await asyncio.sleep(0)

        chain = self.devnet.chains.get(point.network_id)
        if chain is None or not chain.available:
            raise NetworkUnavailable(f"Network {point.network_id} is unavailable", point)

        contract = chain.contracts.get(point.contract_role)
        if contract is None:
            raise NotDeployed(f"{format_point(point)} is not deployed", point)

        return ContractHandle(point=point, address=contract.address, contract=contract)


class DevnetSubmission:
    """Accepted submission on a devnet chain."""

    def __init__(self, chain: DevnetChain, submitted: SubmittedTransaction, failure: Optional[FailureMode]):
        self.chain = chain
        self.submitted = submitted
        self.failure = failure
        self.submission_hash = submitted.submission_hash

    async def wait(self) -> ConfirmationReceipt:
        if self.failure == FailureMode.HANG:
            await self.chain.never_confirm()
        if self.failure == FailureMode.REVERT:
            raise TransactionReverted(f"Injected revert of {self.submitted.call.method}")

        block_number, confirmation_hash = self.chain.apply(self.submitted)
        return ConfirmationReceipt(confirmation_hash=confirmation_hash, block_number=block_number)


class DevnetSigner:
    """Signer that submits to one devnet chain."""

    def __init__(self, chain: DevnetChain):
        self.chain = chain

    async def submit(self, payload) -> DevnetSubmission:
        submitted, failure = self.chain.submit(payload)
        logger.debug(f"Network {self.chain.network_id} accepted {submitted.submission_hash}")
        return DevnetSubmission(self.chain, submitted, failure)


class DevnetSignerResolver:
    """
    Signer resolver for a Devnet.

    Only networks listed in ``networks`` have a signer; None means every
    chain of the devnet does.
    """

    def __init__(self, devnet: Devnet, networks: Optional[Set[int]] = None):
        self.devnet = devnet
        self.networks = networks
        self.calls: List[int] = []

    async def for_network(self, network_id: int) -> Optional[DevnetSigner]:
        self.calls.append(network_id)
        if self.networks is not None and network_id not in self.networks:
            return None

        chain = self.devnet.chains.get(network_id)
        if chain is None:
            return None
        return DevnetSigner(chain)
