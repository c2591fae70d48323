"""In-memory networks for development and tests.

Each DevnetChain holds deployed contracts with simple keyed storage and
applies ContractCall payloads when a submitted transaction is confirmed.
Failures (rejection, revert, missing confirmation) can be injected per chain.
"""

import asyncio
import hashlib
import logging
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Deque, Dict, List, Optional, Tuple

from configurators.base import ContractCall

logger = logging.getLogger(__name__)

# setter method -> storage slot it writes
SETTERS: Dict[str, str] = {
    "setDefaultSendLibrary": "defaultSendLibrary",
    "setDefaultReceiveLibrary": "defaultReceiveLibrary",
    "setDefaultUlnConfigs": "defaultUlnConfigs",
    "setDefaultExecutorConfigs": "defaultExecutorConfigs",
}

# setters whose value must be the address of a contract on the same chain
LIBRARY_SETTERS = {"setDefaultSendLibrary", "setDefaultReceiveLibrary"}


class FailureMode(Enum):
    """Ways an injected failure can surface."""

    REJECT = "reject"  # submit() raises
    REVERT = "revert"  # wait() raises
    HANG = "hang"  # wait() never returns


class TransactionRejected(Exception):
    """The chain refused a submission."""
    pass


class TransactionReverted(Exception):
    """A submitted transaction reverted during execution."""
    pass


def _digest(*parts: Any) -> str:
    content = "|".join(repr(p) for p in parts)
    return "0x" + hashlib.sha256(content.encode("utf-8")).hexdigest()


@dataclass
class DevnetContract:
    """A deployed contract: role, address and keyed storage slots."""

    network_id: int
    role: str
    address: str
    storage: Dict[str, Dict[Any, Any]] = field(default_factory=dict)

    def call(self, method: str, *args: Any) -> Any:
        """Read a storage slot, e.g. call("defaultSendLibrary", 30106)."""
        slot = self.storage.get(method, {})
        if not args:
            return slot
        return slot.get(args[0])

    def write(self, slot: str, key: Any, value: Any) -> None:
        self.storage.setdefault(slot, {})[key] = value


@dataclass
class _InjectedFailure:
    mode: FailureMode
    method: Optional[str] = None


@dataclass
class SubmittedTransaction:
    """Record of a submission, kept in submission order."""

    submission_hash: str
    call: ContractCall
    nonce: int


class DevnetChain:
    """A single in-memory network."""

    def __init__(self, network_id: int):
        self.network_id = network_id
        self.available = True
        self.block_number = 0
        self.nonce = 0
        self.contracts: Dict[str, DevnetContract] = {}
        self.submissions: List[SubmittedTransaction] = []
        self._failures: Deque[_InjectedFailure] = deque()

    def deploy(self, role: str) -> DevnetContract:
        """Deploy (or return the existing) contract for a role."""
        if role in self.contracts:
            return self.contracts[role]

        address = "0x" + hashlib.sha256(f"{self.network_id}:{role}".encode("utf-8")).hexdigest()[:40]
        contract = DevnetContract(network_id=self.network_id, role=role, address=address)
        self.contracts[role] = contract

        logger.debug(f"Deployed {role} on network {self.network_id} at {address}")
        return contract

    def contract_at(self, address: str) -> Optional[DevnetContract]:
        for contract in self.contracts.values():
            if contract.address == address:
                return contract
        return None

    def inject_failure(self, mode: FailureMode, method: Optional[str] = None) -> None:
        """Make the next submission (optionally only of one method) fail."""
        self._failures.append(_InjectedFailure(mode=mode, method=method))

    def _take_failure(self, call: ContractCall) -> Optional[FailureMode]:
        for failure in list(self._failures):
            if failure.method is None or failure.method == call.method:
                self._failures.remove(failure)
                return failure.mode
        return None

    def submit(self, call: ContractCall) -> Tuple[SubmittedTransaction, Optional[FailureMode]]:
        """
        Accept a call into the mempool.

        Raises:
            TransactionRejected: Chain unavailable, unknown target or injected rejection
        """
        if not self.available:
            raise TransactionRejected(f"Network {self.network_id} is unavailable")
        if not isinstance(call, ContractCall):
            raise TransactionRejected(f"Malformed payload: {call!r}")
        if self.contract_at(call.to) is None:
            raise TransactionRejected(f"No contract at {call.to} on network {self.network_id}")

        failure = self._take_failure(call)
        if failure == FailureMode.REJECT:
            raise TransactionRejected(f"Injected rejection of {call.method}")

        self.nonce += 1
        submitted = SubmittedTransaction(
            submission_hash=_digest(self.network_id, self.nonce, call),
            call=call,
            nonce=self.nonce,
        )
        self.submissions.append(submitted)
        return submitted, failure

    def apply(self, submitted: SubmittedTransaction) -> Tuple[int, str]:
        """
        Execute a submitted call and mine it into a block.

        Returns:
            (block_number, confirmation_hash)

        Raises:
            TransactionReverted: Unknown method or invalid library address
        """
        call = submitted.call
        contract = self.contract_at(call.to)
        slot = SETTERS.get(call.method)
        if contract is None or slot is None:
            raise TransactionReverted(f"Unknown method {call.method}")

        if call.method in LIBRARY_SETTERS:
            network_id, library = call.args[0], call.args[1]
            if self.contract_at(library) is None:
                raise TransactionReverted(f"OnlyRegisteredLib: {library}")
            contract.write(slot, network_id, library)
        else:
            for network_id, value in call.args[0]:
                contract.write(slot, network_id, value)

        self.block_number += 1
        return self.block_number, _digest(self.network_id, self.block_number, submitted.submission_hash)

    async def never_confirm(self) -> None:
        await asyncio.Event().wait()


class Devnet:
    """A set of in-memory chains keyed by network id."""

    def __init__(self):
        self.chains: Dict[int, DevnetChain] = {}

    def chain(self, network_id: int) -> DevnetChain:
        """Get a chain, creating it on first use."""
        if network_id not in self.chains:
            self.chains[network_id] = DevnetChain(network_id)
        return self.chains[network_id]

    def all_submissions(self) -> List[SubmittedTransaction]:
        return [s for chain in self.chains.values() for s in chain.submissions]
