import asyncio
import logging
import time
from contextlib import asynccontextmanager
from pathlib import Path
from typing import List, Optional

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware

from streets.domain import config
from streets.domain.errors import (
    DuplicateVehicleError, EmptyNetworkError, LookupMissError, StreetsError
)
from streets.domain.graph import RoadNetwork
from streets.domain.models import (
    GraphDocument, NetworkSummary, RectSummary, SimulationSnapshot, TickResult,
    VehicleRequest, VehicleState
)
from streets.kernel.commands import RemoveVehicleCommand
from streets.kernel.simulation_kernel import SimulationKernel
from streets.observers.implementations import LoggingObserver, configure_logging
from streets.partitioning.column import ColumnPartitioner

logger = logging.getLogger(__name__)

observer = LoggingObserver()
kernel: Optional[SimulationKernel] = None

def load_network(network: RoadNetwork) -> SimulationKernel:
    global kernel
    kernel = SimulationKernel(network, observer)
    return kernel

# Background task for simulation loop
@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    if config.NETWORK_PATH:
        load_network(RoadNetwork.from_json(Path(config.NETWORK_PATH).read_bytes()))
        logger.info("Loaded network from %s", config.NETWORK_PATH)

    loop_task = None
    if config.TICK_RATE_HZ > 0:
        loop_task = asyncio.create_task(run_simulation())
    yield
    if loop_task:
        loop_task.cancel()

app = FastAPI(lifespan=lifespan)

# Enable CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

async def run_simulation():
    """Ticks the loaded network at TICK_RATE_HZ"""
    dt = 1.0 / config.TICK_RATE_HZ

    while True:
        start_time = time.time()

        if kernel is not None:
            kernel.run_tick()

        elapsed = time.time() - start_time
        await asyncio.sleep(max(0.0, dt - elapsed))

def _require_kernel() -> SimulationKernel:
    if kernel is None:
        raise HTTPException(status_code=409, detail="No road network loaded")
    return kernel

def _http_error(e: StreetsError) -> HTTPException:
    if isinstance(e, LookupMissError):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, DuplicateVehicleError):
        return HTTPException(status_code=409, detail=str(e))
    return HTTPException(status_code=400, detail=str(e))

def _summarize(network: RoadNetwork) -> NetworkSummary:
    summary = NetworkSummary(vertexCount=network.vertex_count, edgeCount=network.edge_count)
    try:
        summary.botLeft, summary.topRight = ColumnPartitioner().bounding_box(network)
    except EmptyNetworkError:
        pass
    return summary

@app.post("/api/network", response_model=NetworkSummary)
async def post_network(document: GraphDocument):
    """Replaces the simulated network; all vehicles are dropped"""
    network = RoadNetwork.from_document(document)
    load_network(network)
    return _summarize(network)

@app.get("/api/network", response_model=NetworkSummary)
async def get_network():
    return _summarize(_require_kernel().network)

@app.post("/api/vehicles", response_model=VehicleState, status_code=201)
async def add_vehicle(request: VehicleRequest):
    """Adds a vehicle following the given vertex path"""
    k = _require_kernel()
    try:
        vehicle = k.add_vehicle(request.path, request.speed, request.id)
    except StreetsError as e:
        raise _http_error(e)
    return k.snapshot_builder.vehicle_state(vehicle)

@app.get("/api/vehicles/{vehicle_id}", response_model=VehicleState)
async def get_vehicle(vehicle_id: str):
    try:
        return _require_kernel().get_vehicle_state(vehicle_id)
    except StreetsError as e:
        raise _http_error(e)

@app.delete("/api/vehicles/{vehicle_id}", status_code=202)
async def remove_vehicle(vehicle_id: str):
    """Queues the removal for the next tick"""
    k = _require_kernel()
    if vehicle_id not in k.state.vehicles:
        raise HTTPException(status_code=404, detail="Vehicle not found")
    k.queue_command(RemoveVehicleCommand(vehicle_id))
    return {"status": "Removal queued", "id": vehicle_id}

@app.post("/api/tick", response_model=TickResult)
async def tick(count: int = Query(1, ge=1, le=config.MAX_TICKS_PER_REQUEST)):
    """Advances the simulation by `count` ticks"""
    k = _require_kernel()
    k.run(count)
    return TickResult(ticks=count, snapshot=k.get_state())

@app.get("/api/state", response_model=SimulationSnapshot)
async def get_state():
    return _require_kernel().get_state()

@app.get("/api/partitions", response_model=List[RectSummary])
async def get_partitions(n: int = Query(config.DEFAULT_PARTITIONS, ge=1)):
    """Column partitions of the loaded network"""
    network = _require_kernel().network
    partitioner = ColumnPartitioner(observer)
    try:
        rects = partitioner.divide_into_rects(n, network)
    except StreetsError as e:
        raise _http_error(e)

    edges = network.raw_edges()
    return [
        RectSummary(
            index=i,
            botLeft=rect.bot_left,
            topRight=rect.top_right,
            vertexIds=sorted(rect.vertex_ids()),
            edgeCount=partitioner.subgraph_from_rect(edges, rect).edge_count,
        )
        for i, rect in enumerate(rects)
    ]

@app.get("/")
def read_root():
    return {"status": "Streets simulator running", "networkLoaded": kernel is not None}
