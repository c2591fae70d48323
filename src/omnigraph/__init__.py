"""Declarative cross-network topology model."""

from .point import Point, format_point, point_from_dict
from .errors import (
    WiringError,
    ValidationError,
    ResolutionError,
    NotDeployed,
    NetworkUnavailable,
    NoSignerConfigured,
    TransactionError,
    SubmissionError,
    ConfirmationTimeout,
)
from .declaration import NodeDeclaration, LinkDeclaration, TopologyDeclaration
from .graph import GraphNode, GraphLink, TopologyGraph
from .builder import ContractHandle, ContractResolver, GraphBuilder, resolve_contract
from .config import WiringConfig

__all__ = [
    "Point",
    "format_point",
    "point_from_dict",
    "WiringError",
    "ValidationError",
    "ResolutionError",
    "NotDeployed",
    "NetworkUnavailable",
    "NoSignerConfigured",
    "TransactionError",
    "SubmissionError",
    "ConfirmationTimeout",
    "NodeDeclaration",
    "LinkDeclaration",
    "TopologyDeclaration",
    "GraphNode",
    "GraphLink",
    "TopologyGraph",
    "ContractHandle",
    "ContractResolver",
    "GraphBuilder",
    "resolve_contract",
    "WiringConfig",
]
