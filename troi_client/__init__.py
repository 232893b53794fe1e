from .client import (
    TroiClient,
    TroiClientError,
    AuthenticationFailed,
    NoMatchingElement,
    NotInitializedError,
    ClientState,
    RequestOptions
)
from .config import TroiConfig
from .models import CalculationPosition, TimeEntry, CalendarEvent, CalendarEventType
from .proxy import ServerSideProxy

__version__ = "1.0.0"
__all__ = [
    "TroiClient",
    "TroiClientError",
    "AuthenticationFailed",
    "NoMatchingElement",
    "NotInitializedError",
    "ClientState",
    "RequestOptions",
    "TroiConfig",
    "CalculationPosition",
    "TimeEntry",
    "CalendarEvent",
    "CalendarEventType",
    "ServerSideProxy"
]
