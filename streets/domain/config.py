# Simulation Configuration
import os

# Road Network
DEFAULT_MAX_SPEED = 50.0   # Used when an edge's maxSpeed is not an integer string
NETWORK_PATH = os.environ.get("STREETS_NETWORK", "")

# Edge Queues
NOT_IN_QUEUE = -1

# Vehicles
DEFAULT_VEHICLE_SPEED = 10.0   # meters per tick
VEHICLE_ID_PREFIX = "v-"

# Partitioning
DEFAULT_PARTITIONS = 4
MAX_PARTITION_WORKERS = 8

# API tick loop (0 disables the background loop, ticks are then driven via POST /api/tick)
TICK_RATE_HZ = float(os.environ.get("STREETS_TICK_RATE_HZ", "0"))
MAX_TICKS_PER_REQUEST = 10000

# Logging
LOGGER_NAME = "streets"
LOG_LEVEL = os.environ.get("STREETS_LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
