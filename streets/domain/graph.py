import logging
import networkx as nx
from typing import Iterable, List, Optional, Union
from pydantic import ValidationError

from streets.domain import config
from streets.domain.errors import (
    EdgeNotFoundError, InvalidEdgeLengthError, NetworkParseError, NoRouteError,
    VertexNotFoundError
)
from streets.domain.models import GraphDocument, RawEdge, Vertex
from streets.simulation.edge_queue import EdgeQueue

logger = logging.getLogger(__name__)

class Edge:
    """A directed road segment. The queue holds the vehicles currently on it."""

    def __init__(self, source: int, target: int, length: float,
                 max_speed: float = config.DEFAULT_MAX_SPEED, queue: Optional[EdgeQueue] = None):
        self.source = source
        self.target = target
        self.length = length
        self.max_speed = max_speed
        self.queue = queue if queue is not None else EdgeQueue()

    @property
    def id(self) -> str:
        return f"{self.source}->{self.target}"

    def to_raw(self) -> RawEdge:
        return RawEdge(source=self.source, target=self.target, length=self.length, max_speed=self.max_speed)

    def __repr__(self) -> str:
        return f"Edge({self.id}, length={self.length}, max_speed={self.max_speed}, queued={len(self.queue)})"

class RoadNetwork:
    def __init__(self):
        self.graph = nx.DiGraph()

    @classmethod
    def from_document(cls, document: GraphDocument) -> "RoadNetwork":
        logger.info("Creating new graph (%d vertices, %d edges).",
                    len(document.graph.vertices), len(document.graph.edges))
        network = cls()
        for jv in document.graph.vertices:
            network.add_vertex(Vertex(id=jv.osmId, x=jv.x, y=jv.y))

        for je in document.graph.edges:
            try:
                network.add_edge(je.source, je.target, je.length, je.maxSpeed)
            except VertexNotFoundError as e:
                logger.warning("Skipping edge %s->%s: %s", je.source, je.target, e)
        return network

    @classmethod
    def from_json(cls, raw: Union[str, bytes]) -> "RoadNetwork":
        try:
            document = GraphDocument.model_validate_json(raw)
        except ValidationError as e:
            raise NetworkParseError(f"invalid network document: {e}") from e
        return cls.from_document(document)

    # Mutation (idempotent: re-adding returns False)

    def add_vertex(self, vertex: Vertex) -> bool:
        if self.graph.has_node(vertex.id):
            return False
        self.graph.add_node(vertex.id, vertex=vertex)
        return True

    def add_edge(self, source: int, target: int, length: float,
                 max_speed: float = config.DEFAULT_MAX_SPEED) -> bool:
        if length < 0:
            raise InvalidEdgeLengthError(source, target, length)
        for endpoint in (source, target):
            if not self.graph.has_node(endpoint):
                raise VertexNotFoundError(endpoint)
        if self.graph.has_edge(source, target):
            return False
        edge = Edge(source, target, length, max_speed)
        self.graph.add_edge(source, target, length=length, max_speed=max_speed, edge=edge)
        return True

    # Lookup

    def has_vertex(self, vertex_id: int) -> bool:
        return self.graph.has_node(vertex_id)

    def vertex(self, vertex_id: int) -> Vertex:
        if not self.graph.has_node(vertex_id):
            raise VertexNotFoundError(vertex_id)
        return self.graph.nodes[vertex_id]["vertex"]

    def vertices(self) -> List[Vertex]:
        return [data["vertex"] for _, data in self.graph.nodes(data=True)]

    def edges(self) -> List[Edge]:
        return [data["edge"] for _, _, data in self.graph.edges(data=True)]

    def raw_edges(self) -> List[RawEdge]:
        return [edge.to_raw() for edge in self.edges()]

    def edge(self, source: int, target: int) -> Edge:
        data = self.graph.get_edge_data(source, target)
        if data is None:
            raise EdgeNotFoundError(source, target)
        return data["edge"]

    def get_corresponding_edge(self, v1: Vertex, v2: Vertex) -> Edge:
        return self.edge(v1.id, v2.id)

    def vertices_with_edges(self) -> List[Vertex]:
        # Vertices without an incident edge are left out on purpose
        ids = dict.fromkeys(node for pair in self.graph.edges() for node in pair)
        return [self.vertex(vertex_id) for vertex_id in ids]

    @property
    def vertex_count(self) -> int:
        return self.graph.number_of_nodes()

    @property
    def edge_count(self) -> int:
        return self.graph.number_of_edges()

    # Routing

    def shortest_path(self, origin_id: int, destination_id: int) -> List[Vertex]:
        for vertex_id in (origin_id, destination_id):
            if not self.graph.has_node(vertex_id):
                raise VertexNotFoundError(vertex_id)
        try:
            ids = nx.shortest_path(self.graph, origin_id, destination_id, weight="length")
        except nx.NetworkXNoPath as e:
            raise NoRouteError(origin_id, destination_id) from e
        return [self.vertex(vertex_id) for vertex_id in ids]

    def path_from_ids(self, vertex_ids: Iterable[int]) -> List[Vertex]:
        return [self.vertex(vertex_id) for vertex_id in vertex_ids]
