from datetime import date
from typing import List, Union

from ..models import CalendarEvent, CalendarEventType
from ..utils import build_query_params


class CalendarEventsEndpoint:
    def __init__(self, client):
        self.client = client

    def list(self, start_date: Union[str, date], end_date: Union[str, date],
             event_type: Union[CalendarEventType, str] = "") -> List[CalendarEvent]:
        params = build_query_params(start=start_date, end=end_date, type=event_type)
        response = self.client.get('/calendarEvents', params=params)

        # troi answers with nothing at all when there are no events in the range
        if not isinstance(response, list):
            return []

        events = [CalendarEvent.from_dict(item) for item in response]
        return sorted(events, key=lambda event: event.start_date)
