from typing import Any, Dict


class ClientsEndpoint:
    def __init__(self, client):
        self.client = client

    def find_by_name(self, name: str) -> Dict[str, Any]:
        # troi has no server-side name filter for clients, the list is small enough to scan
        return self.client.get('/clients', predicate=lambda obj: obj.get('Name') == name)
