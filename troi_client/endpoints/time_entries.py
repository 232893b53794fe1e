from datetime import date
from typing import Any, Dict, List, Optional, Union

from ..models import TimeEntry
from ..utils import build_query_params, format_date, resource_path


class TimeEntriesEndpoint:
    """Hour billings (/billings/hours) of the configured client"""

    def __init__(self, client):
        self.client = client

    def list(self, calculation_position_id: int, start_date: Union[str, date],
             end_date: Union[str, date], employee_id: Optional[int] = None) -> List[TimeEntry]:
        """
        Lists the hours booked on a calculation position, oldest first.

        Args:
            calculation_position_id: Position to list bookings for
            start_date: First day of the range (inclusive)
            end_date: Last day of the range (inclusive)
            employee_id: Someone else's employee id, defaults to the logged in user
        """
        params = build_query_params(
            clientId=self.client.require_client_id(),
            employeeId=self.client.require_employee_id(employee_id),
            calculationPositionId=calculation_position_id,
            startDate=start_date,
            endDate=end_date
        )
        response = self.client.get('/billings/hours', params=params)

        time_entries = [TimeEntry.from_dict(item) for item in response]
        # ISO dates from troi are zero-padded, plain string order is date order
        return sorted(time_entries, key=lambda entry: entry.date)

    def create(self, calculation_position_id: int, date_at: Union[str, date],
               hours: float, description: str) -> Any:
        payload = self._build_payload(calculation_position_id, date_at, hours, description)
        return self.client.post('/billings/hours', payload)

    def update(self, calculation_position_id: int, date_at: Union[str, date],
               hours: float, description: str, billing_id: int) -> Any:
        payload = self._build_payload(calculation_position_id, date_at, hours, description)
        return self.client.put(resource_path('billings/hours', billing_id), payload)

    def delete(self, entry_id: int) -> Any:
        return self.client.delete(resource_path('billings/hours', entry_id))

    def _build_payload(self, calculation_position_id: int, date_at: Union[str, date],
                       hours: float, description: str) -> Dict[str, Any]:
        return {
            'Client': {
                'Path': resource_path('clients', self.client.require_client_id())
            },
            'CalculationPosition': {
                'Path': resource_path('calculationPositions', calculation_position_id)
            },
            'Employee': {
                'Path': resource_path('employees', self.client.require_employee_id())
            },
            'Date': format_date(date_at),
            'Quantity': hours,
            'Remark': description
        }
