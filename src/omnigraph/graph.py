"""Resolved, address-bound topology graph."""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Generic, Iterator, List, Mapping, Optional, Tuple, TypeVar

from .point import Point

NodeConfig = TypeVar("NodeConfig")
LinkConfig = TypeVar("LinkConfig")


@dataclass(frozen=True)
class GraphNode(Generic[NodeConfig]):
    """A declared contract together with its resolved address."""

    point: Point
    address: str
    config: Optional[NodeConfig] = None


@dataclass(frozen=True)
class GraphLink(Generic[LinkConfig]):
    """A directed connection between two graph nodes."""

    from_point: Point
    to_point: Point
    config: LinkConfig


class TopologyGraph(Generic[NodeConfig, LinkConfig]):
    """
    Immutable graph of addressed nodes and directed links.

    Built by GraphBuilder and only read afterwards, so a single graph can be
    shared between configurators.
    """

    __slots__ = ("_nodes", "_links", "_node_index", "_link_index")

    def __init__(
        self,
        nodes: Tuple[GraphNode[NodeConfig], ...],
        links: Tuple[GraphLink[LinkConfig], ...],
    ):
        self._nodes = tuple(nodes)
        self._links = tuple(links)
        self._node_index: Mapping[Point, GraphNode[NodeConfig]] = MappingProxyType(
            {node.point: node for node in self._nodes}
        )
        self._link_index: Mapping[Tuple[Point, Point], GraphLink[LinkConfig]] = (
            MappingProxyType({(l.from_point, l.to_point): l for l in self._links})
        )

    @property
    def nodes(self) -> Tuple[GraphNode[NodeConfig], ...]:
        return self._nodes

    @property
    def links(self) -> Tuple[GraphLink[LinkConfig], ...]:
        return self._links

    def __contains__(self, point: object) -> bool:
        return point in self._node_index

    def __iter__(self) -> Iterator[GraphNode[NodeConfig]]:
        return iter(self._nodes)

    def __len__(self) -> int:
        return len(self._nodes)

    def get_node(self, point: Point) -> Optional[GraphNode[NodeConfig]]:
        return self._node_index.get(point)

    def get_link(self, from_point: Point, to_point: Point) -> Optional[GraphLink[LinkConfig]]:
        return self._link_index.get((from_point, to_point))

    def links_from(self, point: Point) -> List[GraphLink[LinkConfig]]:
        """Outgoing links of a node, in declaration order."""
        return [link for link in self._links if link.from_point == point]

    def links_to(self, point: Point) -> List[GraphLink[LinkConfig]]:
        """Incoming links of a node, in declaration order."""
        return [link for link in self._links if link.to_point == point]

    def address_of(self, point: Point) -> str:
        """
        Get the resolved address of a node.

        Raises:
            KeyError: If the point is not part of this graph
        """
        node = self._node_index.get(point)
        if node is None:
            raise KeyError(f"Point not in graph: {point}")
        return node.address

    def __repr__(self) -> str:
        return f"TopologyGraph(nodes={len(self._nodes)}, links={len(self._links)})"
