"""In-memory networks, resolvers and signers for development and tests."""

from .chain import (
    Devnet,
    DevnetChain,
    DevnetContract,
    FailureMode,
    SubmittedTransaction,
    TransactionRejected,
    TransactionReverted,
)
from .resolvers import (
    DevnetContractResolver,
    DevnetSigner,
    DevnetSignerResolver,
    DevnetSubmission,
)
from .bootstrap import (
    deploy_endpoint_infrastructure,
    setup_default_endpoint,
    DEFAULT_EXECUTOR_CONFIG,
    DEFAULT_ULN_CONFIG,
)

__all__ = [
    "Devnet",
    "DevnetChain",
    "DevnetContract",
    "FailureMode",
    "SubmittedTransaction",
    "TransactionRejected",
    "TransactionReverted",
    "DevnetContractResolver",
    "DevnetSigner",
    "DevnetSignerResolver",
    "DevnetSubmission",
    "deploy_endpoint_infrastructure",
    "setup_default_endpoint",
    "DEFAULT_EXECUTOR_CONFIG",
    "DEFAULT_ULN_CONFIG",
]
