from .clients import ClientsEndpoint
from .employees import EmployeesEndpoint
from .calculation_positions import CalculationPositionsEndpoint
from .time_entries import TimeEntriesEndpoint
from .calendar_events import CalendarEventsEndpoint

__all__ = [
    "ClientsEndpoint",
    "EmployeesEndpoint",
    "CalculationPositionsEndpoint",
    "TimeEntriesEndpoint",
    "CalendarEventsEndpoint"
]
