from typing import Any


class StreetsError(Exception):
    """Base class for every error raised by the simulator."""


# Lookup misses: recoverable, raised before any state is touched

class LookupMissError(StreetsError, LookupError):
    pass


class VertexNotFoundError(LookupMissError):
    def __init__(self, vertex_id: Any):
        super().__init__(f"vertex {vertex_id} not found")
        self.vertex_id = vertex_id


class EdgeNotFoundError(LookupMissError):
    def __init__(self, source: Any, target: Any):
        super().__init__(f"edge {source}->{target} not found")
        self.source = source
        self.target = target


class VehicleNotFoundError(LookupMissError):
    def __init__(self, vehicle_id: str):
        super().__init__(f"vehicle {vehicle_id} not found")
        self.vehicle_id = vehicle_id


class NoRouteError(LookupMissError):
    def __init__(self, origin: Any, destination: Any):
        super().__init__(f"no route from {origin} to {destination}")
        self.origin = origin
        self.destination = destination


# Configuration errors: fatal to the owning vehicle, never to the process

class ConfigurationError(StreetsError):
    pass


class PathNotConnectedError(ConfigurationError):
    def __init__(self, source: Any, target: Any, vehicle_id: str = ""):
        owner = f"vehicle {vehicle_id}: " if vehicle_id else ""
        super().__init__(f"{owner}path is not edge-connected between {source} and {target}")
        self.source = source
        self.target = target
        self.vehicle_id = vehicle_id


class InvalidSpeedError(ConfigurationError, ValueError):
    def __init__(self, speed: float):
        super().__init__(f"speed must be positive, got {speed}")
        self.speed = speed


class PathCrossesPartitionError(ConfigurationError):
    def __init__(self, path: Any):
        super().__init__(f"path {path} is not contained in a single partition")
        self.path = path


class DuplicateVehicleError(ConfigurationError):
    def __init__(self, vehicle_id: str):
        super().__init__(f"vehicle {vehicle_id} already exists")
        self.vehicle_id = vehicle_id


class EmptyQueueError(StreetsError, IndexError):
    pass


class EmptyNetworkError(StreetsError):
    pass


class NetworkParseError(StreetsError):
    pass


class InvalidEdgeLengthError(ConfigurationError, ValueError):
    def __init__(self, source: Any, target: Any, length: float):
        super().__init__(f"edge {source}->{target} length must be non-negative, got {length}")
        self.source = source
        self.target = target
        self.length = length
