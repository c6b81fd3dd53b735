from devtrack.client.api import ApiError, DevTrackClient
from devtrack.client.cache import LocalCache
from devtrack.client.state import InvalidTransition, Mode, StoppedTimer, TrackerState

__all__ = [
    "ApiError",
    "DevTrackClient",
    "InvalidTransition",
    "LocalCache",
    "Mode",
    "StoppedTimer",
    "TrackerState",
]
