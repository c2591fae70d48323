"""Error taxonomy for topology builds and transaction runs."""

from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .point import Point


class WiringError(Exception):
    """Base exception for all topology wiring errors."""
    pass


class ValidationError(WiringError):
    """Malformed topology declaration. Raised before any network I/O."""
    pass


class ResolutionError(WiringError):
    """A contract or signer could not be resolved."""

    def __init__(self, message: str, point: Optional["Point"] = None):
        super().__init__(message)
        self.point = point


class NotDeployed(ResolutionError):
    """No contract is deployed for the requested role on the network."""
    pass


class NetworkUnavailable(ResolutionError):
    """The network could not be reached."""
    pass


class NoSignerConfigured(ResolutionError):
    """No signing authority is configured for a network."""

    def __init__(self, network_id: int, point: Optional["Point"] = None):
        super().__init__(f"No signer configured for network {network_id}", point)
        self.network_id = network_id


class TransactionError(WiringError):
    """Base for failures of a single transaction during a run."""

    def __init__(
        self,
        message: str,
        point: "Point",
        description: Optional[str] = None,
        submission_hash: Optional[str] = None,
    ):
        super().__init__(message)
        self.point = point
        self.description = description
        self.submission_hash = submission_hash


class SubmissionError(TransactionError):
    """
    The network rejected a transaction.

    ``submission_hash`` is set when the transaction was accepted and later
    reverted, and is None when the submission itself was refused.
    """
    pass


class ConfirmationTimeout(TransactionError):
    """Submission accepted but no confirmation arrived in time."""
    pass
