from typing import Any, Dict, List, Optional

from ..models import CalculationPosition
from ..utils import build_query_params


class CalculationPositionsEndpoint:
    def __init__(self, client):
        self.client = client

    def list(self, favourites_only: bool = True, time_recording_only: bool = True) -> List[CalculationPosition]:
        params = build_query_params(
            clientId=self.client.require_client_id(),
            favoritesOnly=favourites_only,
            timeRecording=time_recording_only
        )
        response = self.client.get('/calculationPositions', params=params)

        positions = []
        for item in response:
            positions.append(CalculationPosition.from_dict(item))

        return positions

    def last_recorded(self, employee_id: Optional[int] = None) -> Optional[List[Dict[str, Any]]]:
        params = build_query_params(
            clientId=self.client.require_client_id(),
            employeeId=self.client.require_employee_id(employee_id)
        )
        response = self.client.get('/billings/calculationPositionsLastRecorded', params=params)
        if not isinstance(response, list):
            return None
        return response
