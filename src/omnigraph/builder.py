"""Graph builder: validates a topology declaration and resolves its addresses.

Validation runs before any network I/O. Address resolution issues one
resolver call per distinct point, concurrently, and either returns a fully
resolved graph or raises; a partially resolved graph is never returned.
"""

import asyncio
import inspect
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol, Union

from opentelemetry import trace

from observability.metrics import MetricsCollector, graph_build_latency, track_time_async
from observability.metrics import metrics_collector as default_metrics
from observability.tracing import create_span

from .config import WiringConfig
from .declaration import TopologyDeclaration
from .errors import ResolutionError, ValidationError
from .graph import GraphLink, GraphNode, TopologyGraph
from .point import Point, format_point

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ContractHandle:
    """A live contract bound to its point and address."""

    point: Point
    address: str
    contract: Any = None


class ContractResolver(Protocol):
    """Maps a point to a live contract handle (or its bare address)."""

    def resolve(self, point: Point) -> Union[ContractHandle, str, Any]:
        ...


async def resolve_contract(resolver: ContractResolver, point: Point) -> Any:
    """Call a resolver that may be either sync or async."""
    result = resolver.resolve(point)
    if inspect.isawaitable(result):
        result = await result
    return result


def _address_of(resolved: Any) -> Optional[str]:
    return getattr(resolved, "address", resolved)


class GraphBuilder:
    """
    Builds TopologyGraphs from declarations.

    The resolver, config, metrics collector and tracer are passed in
    explicitly; one builder can build any number of graphs.
    """

    def __init__(
        self,
        resolver: ContractResolver,
        config: Optional[WiringConfig] = None,
        metrics: Optional[MetricsCollector] = None,
        tracer: Optional[trace.Tracer] = None,
    ):
        self.resolver = resolver
        self.config = config or WiringConfig()
        self.metrics = metrics or default_metrics
        self.tracer = tracer

    @track_time_async(graph_build_latency)
    async def build(self, declaration: TopologyDeclaration) -> TopologyGraph:
        """
        Validate and resolve a declaration.

        Args:
            declaration: Desired topology

        Returns:
            Immutable TopologyGraph with one node per declared node and one
            link per declared link

        Raises:
            ValidationError: Malformed declaration (no resolver calls made)
            ResolutionError: Any point failed to resolve
        """
        with create_span(
            "omnigraph.build",
            {"nodes": len(declaration.nodes), "links": len(declaration.links)},
            self.tracer,
        ):
            try:
                declaration.validate()
            except ValidationError as e:
                logger.warning(f"Rejected topology declaration: {e}")
                self.metrics.record_graph_build("invalid")
                raise

            try:
                addresses = await self._resolve_all(declaration.distinct_points())
            except ResolutionError:
                self.metrics.record_graph_build("unresolved")
                raise

            graph = TopologyGraph(
                nodes=tuple(
                    GraphNode(point=n.point, address=addresses[n.point], config=n.config)
                    for n in declaration.nodes
                ),
                links=tuple(
                    GraphLink(from_point=l.from_point, to_point=l.to_point, config=l.config)
                    for l in declaration.links
                ),
            )

            self.metrics.record_graph_build("ok")
            logger.info(
                f"Built topology graph with {len(graph.nodes)} nodes "
                f"and {len(graph.links)} links"
            )
            return graph

    async def _resolve_all(self, points: List[Point]) -> Dict[Point, str]:
        """Resolve every point concurrently; raise the first failure in point order."""
        semaphore = asyncio.Semaphore(self.config.resolution_concurrency)

        async def resolve_one(point: Point) -> str:
            async with semaphore:
                return await self._resolve(point)

        results = await asyncio.gather(
            *(resolve_one(point) for point in points), return_exceptions=True
        )

        addresses: Dict[Point, str] = {}
        for point, result in zip(points, results):
            if isinstance(result, BaseException):
                raise result
            addresses[point] = result
        return addresses

    async def _resolve(self, point: Point) -> str:
        try:
            resolved = await resolve_contract(self.resolver, point)
        except ResolutionError as e:
            if e.point is None:
                e.point = point
            self.metrics.record_resolution(point.network_id, ok=False)
            logger.error(f"Failed to resolve {format_point(point)}: {e}")
            raise
        except Exception as e:
            self.metrics.record_resolution(point.network_id, ok=False)
            logger.error(f"Failed to resolve {format_point(point)}: {e}")
            raise ResolutionError(
                f"Failed to resolve {format_point(point)}: {e}", point
            ) from e

        address = _address_of(resolved) if resolved is not None else None
        if not address:
            self.metrics.record_resolution(point.network_id, ok=False)
            logger.error(f"Resolver returned no address for {format_point(point)}")
            raise ResolutionError(
                f"Resolver returned no address for {format_point(point)}", point
            )

        self.metrics.record_resolution(point.network_id, ok=True)
        logger.debug(f"Resolved {format_point(point)} to {address}")
        return address
