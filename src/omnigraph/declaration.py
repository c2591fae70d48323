"""Desired-state topology declarations.

A declaration lists the contracts (nodes) that take part in a topology and the
directed connections (links) between them. Configuration payloads are opaque
here: only the configurator for the contract kind interprets them.
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, Generic, List, Optional, Tuple, TypeVar

from .errors import ValidationError
from .point import Point, format_point, point_from_dict

NodeConfig = TypeVar("NodeConfig")
LinkConfig = TypeVar("LinkConfig")


@dataclass(frozen=True)
class NodeDeclaration(Generic[NodeConfig]):
    """A contract and its desired node-level configuration (None for none)."""

    point: Point
    config: Optional[NodeConfig] = None


@dataclass(frozen=True)
class LinkDeclaration(Generic[LinkConfig]):
    """A directed connection from one contract to another."""

    from_point: Point
    to_point: Point
    config: LinkConfig

    @property
    def key(self) -> Tuple[Point, Point]:
        return (self.from_point, self.to_point)


@dataclass(frozen=True)
class TopologyDeclaration(Generic[NodeConfig, LinkConfig]):
    """Nodes plus directed links, as supplied by the caller."""

    nodes: Tuple[NodeDeclaration[NodeConfig], ...] = field(default_factory=tuple)
    links: Tuple[LinkDeclaration[LinkConfig], ...] = field(default_factory=tuple)

    def __post_init__(self):
        # Accept any sequence but store tuples so the declaration stays immutable
        object.__setattr__(self, "nodes", tuple(self.nodes))
        object.__setattr__(self, "links", tuple(self.links))

    def validate(self) -> None:
        """
        Check structural consistency without touching any network.

        Raises:
            ValidationError: On duplicate nodes, duplicate links, links
                without configuration or links referencing an undeclared node
        """
        node_counts = Counter(node.point for node in self.nodes)
        duplicates = [p for p, count in node_counts.items() if count > 1]
        if duplicates:
            raise ValidationError(
                "Duplicate node declarations: "
                + ", ".join(format_point(p) for p in duplicates)
            )

        declared = set(node_counts)
        seen_links = set()
        for link in self.links:
            for endpoint in (link.from_point, link.to_point):
                if endpoint not in declared:
                    raise ValidationError(
                        f"Link {format_point(link.from_point)} -> "
                        f"{format_point(link.to_point)} references undeclared "
                        f"node {format_point(endpoint)}"
                    )

            if link.config is None:
                raise ValidationError(
                    f"Link {format_point(link.from_point)} -> "
                    f"{format_point(link.to_point)} has no configuration"
                )

            if link.key in seen_links:
                raise ValidationError(
                    f"Duplicate link {format_point(link.from_point)} -> "
                    f"{format_point(link.to_point)}"
                )
            seen_links.add(link.key)

    def distinct_points(self) -> List[Point]:
        """All points referenced by the declaration, in first-seen order."""
        points: Dict[Point, None] = {}
        for node in self.nodes:
            points.setdefault(node.point, None)
        for link in self.links:
            points.setdefault(link.from_point, None)
            points.setdefault(link.to_point, None)
        return list(points)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TopologyDeclaration":
        """
        Build a declaration from its structured form.

        Expected shape::

            {
                "contracts": [
                    {"contract": {"network_id": 1, "contract_role": "EndpointV2"},
                     "config": {...}},
                ],
                "connections": [
                    {"from": {...point...}, "to": {...point...}, "config": {...}},
                ],
            }

        Payloads are passed through untouched.

        Raises:
            ValidationError: If the structure is malformed
        """
        if not isinstance(data, dict):
            raise ValidationError(f"Topology must be a mapping, got {type(data).__name__}")

        try:
            nodes = [
                NodeDeclaration(
                    point=point_from_dict(entry["contract"]),
                    config=entry.get("config"),
                )
                for entry in data.get("contracts", [])
            ]
            links = [
                LinkDeclaration(
                    from_point=point_from_dict(entry["from"]),
                    to_point=point_from_dict(entry["to"]),
                    config=entry["config"],
                )
                for entry in data.get("connections", [])
            ]
        except (KeyError, TypeError, AttributeError) as e:
            raise ValidationError(f"Malformed topology entry: {e}") from e

        return cls(nodes=tuple(nodes), links=tuple(links))
