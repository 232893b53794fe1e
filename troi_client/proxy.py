"""
Server-side proxy access.

Some deployments put a same-origin proxy in front of troi which takes the
user's credentials as plain headers and talks to troi on its own. Requests on
this path never carry the Basic Authorization header and never go to the troi
base URL, so they live apart from TroiClient.make_request.
"""

import logging

import requests

from .auth import TroiAuth


class ServerSideProxy:
    def __init__(self, proxy_url: str, auth: TroiAuth, session: requests.Session,
                 timeout_seconds: int):
        self.proxy_url = proxy_url.rstrip('/')
        self.auth = auth
        self.session = session
        self.timeout_seconds = timeout_seconds
        self.logger = logging.getLogger(self.__class__.__name__)

    def get_url(self, endpoint: str) -> str:
        return f"{self.proxy_url}/{endpoint.lstrip('/')}"

    def delete_time_entry(self, entry_id: int) -> requests.Response:
        url = self.get_url(f"time_entries/{entry_id}")
        self.logger.debug(f"Requesting DELETE {url} via server-side proxy")
        return self.session.request(
            method="DELETE",
            url=url,
            headers=self.auth.get_proxy_headers(),
            timeout=self.timeout_seconds
        )
