from typing import Any, Dict, List, Optional

from ..utils import build_query_params


class EmployeesEndpoint:
    def __init__(self, client):
        self.client = client

    def list(self, login_name: Optional[str] = None) -> List[Dict[str, Any]]:
        params = build_query_params(
            clientId=self.client.require_client_id(),
            employeeLoginName=login_name
        )
        return self.client.get('/employees', params=params)

    def find_id_by_login_name(self, login_name: str) -> Optional[int]:
        employees = self.list(login_name=login_name)
        if not employees:
            return None
        return employees[0].get('Id')
