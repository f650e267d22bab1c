from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, Tuple, Union

from streets.domain.errors import EmptyNetworkError
from streets.domain.graph import Edge, RoadNetwork
from streets.domain.models import Point, RawEdge, Rect, Vertex
from streets.observers.base import SimulationObserver
from streets.observers.implementations import NullObserver

def bounding_box(network: RoadNetwork) -> Tuple[Point, Point]:
    """Axis-aligned box around every vertex that has at least one incident edge."""
    vertices = network.vertices_with_edges()
    if not vertices:
        raise EmptyNetworkError("cannot compute the bounding box of a network without edges")

    first = vertices[0]
    bot_x, bot_y, top_x, top_y = first.x, first.y, first.x, first.y
    for vertex in vertices[1:]:
        bot_x = min(bot_x, vertex.x)
        bot_y = min(bot_y, vertex.y)
        top_x = max(top_x, vertex.x)
        top_y = max(top_y, vertex.y)

    return Point(x=bot_x, y=bot_y), Point(x=top_x, y=top_y)

def split_interval(low: float, high: float, parts: int) -> List[float]:
    # parts + 1 boundaries; the last one is exactly `high` so the slices cover [low, high]
    step = (high - low) / parts
    return [low + step * i for i in range(parts)] + [high]

def vertices_in_box(vertices: Iterable[Vertex], bot_left: Point, top_right: Point) -> Tuple[Vertex, ...]:
    return tuple(
        v for v in vertices
        if bot_left.x <= v.x <= top_right.x and bot_left.y <= v.y <= top_right.y
    )

class Partitioner(ABC):
    def __init__(self, observer: Optional[SimulationObserver] = None):
        self.observer = observer or NullObserver()

    @abstractmethod
    def divide_into_rects(self, n: int, network: RoadNetwork) -> List[Rect]:
        pass

    def bounding_box(self, network: RoadNetwork) -> Tuple[Point, Point]:
        bot_left, top_right = bounding_box(network)
        self.observer.bounding_box_computed(bot_left, top_right)
        return bot_left, top_right

    def subgraph_from_rect(self, edges: Iterable[Union[RawEdge, Edge]], rect: Rect) -> RoadNetwork:
        """
        Induced subgraph of the rect: its vertices plus every edge with both
        endpoints inside. Cross-boundary edges are dropped and duplicate edges
        are ignored. Each edge gets a fresh, empty queue.
        """
        network = RoadNetwork()
        for vertex in rect.vertices:
            network.add_vertex(vertex)

        members = rect.vertex_ids()
        for edge in edges:
            if edge.source in members and edge.target in members:
                network.add_edge(edge.source, edge.target, edge.length, edge.max_speed)
        return network

    def _check_count(self, n: int):
        if n < 1:
            raise ValueError(f"number of partitions must be at least 1, got {n}")
