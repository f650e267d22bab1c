from typing import Any, Dict, Optional
from pydantic import BaseModel, ConfigDict
from streets.domain.graph import RoadNetwork

class SimulationState(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    tick_id: int = 0
    vehicles: Dict[str, Any] = {}  # id -> Vehicle, insertion order is the step order
    faulted: Dict[str, str] = {}   # id -> reason

    road_network: Optional[RoadNetwork] = None
