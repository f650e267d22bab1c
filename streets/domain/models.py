import re
from enum import Enum
from typing import FrozenSet, List, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator

from streets.domain import config

_INTEGER = re.compile(r"[+-]?[0-9]+")

# Core Models

class Vertex(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    x: float
    y: float

class Point(BaseModel):
    model_config = ConfigDict(frozen=True)

    x: float
    y: float

class RawEdge(BaseModel):
    """An edge without a queue, as handed to the partitioner."""
    model_config = ConfigDict(frozen=True)

    source: int
    target: int
    length: float = 0.0
    max_speed: float = config.DEFAULT_MAX_SPEED

class Rect(BaseModel):
    model_config = ConfigDict(frozen=True)

    bot_left: Point
    top_right: Point
    vertices: Tuple[Vertex, ...] = ()

    _ids: FrozenSet[int] = PrivateAttr(default_factory=frozenset)

    def model_post_init(self, __context) -> None:
        self._ids = frozenset(v.id for v in self.vertices)

    def vertex_ids(self) -> FrozenSet[int]:
        return self._ids

    def contains(self, vertex: Vertex) -> bool:
        return vertex.id in self._ids

class StepResult(str, Enum):
    IDLE = "IDLE"                  # already parked, nothing happened
    ADVANCED = "ADVANCED"          # progressed along the current edge
    TRANSITIONED = "TRANSITIONED"  # carried past the end of a non-final edge
    PARKED = "PARKED"              # reached the destination this tick

# JSON Network Document

class JVertex(BaseModel):
    osmId: int
    x: float
    y: float

class JEdge(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    source: int = Field(alias="from")
    target: int = Field(alias="to")
    length: float = Field(default=0.0, ge=0)
    maxSpeed: float = config.DEFAULT_MAX_SPEED

    @field_validator("maxSpeed", mode="before")
    @classmethod
    def parse_max_speed(cls, value):
        # Only plain signed integer strings are accepted, everything else falls back to the default
        text = str(value)
        if not _INTEGER.fullmatch(text):
            return config.DEFAULT_MAX_SPEED
        return float(int(text))

class JGraph(BaseModel):
    vertices: List[JVertex] = []
    edges: List[JEdge] = []

class GraphDocument(BaseModel):
    graph: JGraph

# API/Response Models

class VehicleRequest(BaseModel):
    path: List[int]  # vertex ids, origin first
    speed: float = Field(default=config.DEFAULT_VEHICLE_SPEED, gt=0)
    id: Optional[str] = None

class VehicleState(BaseModel):
    id: str
    speed: float
    parked: bool
    edge: Optional[str] = None
    position: Optional[int] = None  # 0-based index in the edge queue
    queueLength: int = 0
    leading: bool = False
    remainingDistance: float
    ledger: List[float]

class VehicleFault(BaseModel):
    id: str
    reason: str

class SimulationSnapshot(BaseModel):
    tick: int
    vehicles: List[VehicleState]
    faulted: List[VehicleFault] = []

class NetworkSummary(BaseModel):
    vertexCount: int
    edgeCount: int
    botLeft: Optional[Point] = None
    topRight: Optional[Point] = None

class RectSummary(BaseModel):
    index: int
    botLeft: Point
    topRight: Point
    vertexIds: List[int]
    edgeCount: int

class TickResult(BaseModel):
    ticks: int
    snapshot: SimulationSnapshot
