"""Signer interfaces and a mapping-backed signer resolver.

Signers and resolvers may be implemented synchronously or with coroutines;
the executor awaits whatever they return.
"""

import inspect
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional, Protocol, Union

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConfirmationReceipt:
    """Proof that a network included a transaction."""

    confirmation_hash: str
    block_number: Optional[int] = None


class SubmissionResponse(Protocol):
    """An accepted submission, awaiting confirmation."""

    submission_hash: str

    def wait(self) -> Union[ConfirmationReceipt, Awaitable[ConfirmationReceipt]]:
        ...


class Signer(Protocol):
    """Signing authority for a single network."""

    def submit(self, payload: Any) -> Union[SubmissionResponse, Awaitable[SubmissionResponse]]:
        ...


class SignerResolver(Protocol):
    """Maps a network id to the signer allowed to submit there."""

    def for_network(self, network_id: int) -> Union[Optional[Signer], Awaitable[Optional[Signer]]]:
        ...


async def maybe_await(value: Any) -> Any:
    """Await value if it is awaitable, otherwise return it."""
    if inspect.isawaitable(value):
        return await value
    return value


class MappingSignerResolver:
    """
    Signer resolver over a fixed network id -> signer mapping.

    Values may also be zero-argument factories, called on first lookup.
    """

    def __init__(self, signers: Dict[int, Union[Signer, Callable[[], Signer]]]):
        self._signers = dict(signers)

    def for_network(self, network_id: int) -> Optional[Signer]:
        signer = self._signers.get(network_id)
        if signer is None:
            logger.debug(f"No signer registered for network {network_id}")
            return None

        if callable(signer) and not hasattr(signer, "submit"):
            signer = signer()
            self._signers[network_id] = signer

        return signer
