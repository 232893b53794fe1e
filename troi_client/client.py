import logging
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union

import requests

from .auth import TroiAuth
from .config import TroiConfig
from .endpoints.clients import ClientsEndpoint
from .endpoints.employees import EmployeesEndpoint
from .endpoints.calculation_positions import CalculationPositionsEndpoint
from .endpoints.time_entries import TimeEntriesEndpoint
from .endpoints.calendar_events import CalendarEventsEndpoint
from .models import CalculationPosition, CalendarEvent, CalendarEventType, TimeEntry
from .proxy import ServerSideProxy
from .utils import QueryParams, build_query_string


DEFAULT_TIMEOUT_SECONDS = 30


class TroiClientError(Exception):
    pass


class AuthenticationFailed(TroiClientError):
    def __init__(self, status_code: Optional[int] = None):
        super().__init__("Troi Authentication Failed")
        self.status_code = status_code


class NoMatchingElement(TroiClientError):
    pass


class NotInitializedError(TroiClientError):
    pass


class ClientState(Enum):
    UNCONFIGURED = "unconfigured"
    CONFIGURING = "configuring"
    READY = "ready"


@dataclass
class RequestOptions:
    """Everything a single call to the troi API can vary"""
    method: str = "GET"
    params: Optional[QueryParams] = None
    # merged over the Authorization header, so callers may override it
    headers: Dict[str, str] = field(default_factory=dict)
    json_data: Optional[Any] = None
    body: Optional[Union[str, bytes]] = None
    predicate: Optional[Callable[[Any], bool]] = None


class TroiClient:
    def __init__(
        self,
        config: Optional[TroiConfig] = None,
        base_url: Optional[str] = None,
        client_name: Optional[str] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        proxy_url: Optional[str] = None
    ):
        if config is None:
            env_config = TroiConfig.from_env()
            config = TroiConfig(
                base_url=base_url or env_config.base_url,
                client_name=client_name or env_config.client_name,
                username=username or env_config.username,
                password=password or env_config.password,
                proxy_url=proxy_url or env_config.proxy_url,
            )

        missing = config.missing_fields()
        if missing:
            raise TroiClientError(
                f"Missing troi configuration: {', '.join(missing)}. "
                f"Set the TROI_* environment variables or pass them explicitly."
            )

        self.config = config
        self.auth = TroiAuth(config.base_url, config.username, config.password)
        self.session = requests.Session()
        self.logger = logging.getLogger(self.__class__.__name__)

        self.state = ClientState.UNCONFIGURED
        self.client_id: Optional[int] = None
        self.employee_id: Optional[int] = None

        # Initialize endpoints
        self.clients = ClientsEndpoint(self)
        self.employees = EmployeesEndpoint(self)
        self.calculation_positions = CalculationPositionsEndpoint(self)
        self.time_entries = TimeEntriesEndpoint(self)
        self.calendar_events = CalendarEventsEndpoint(self)

        self.proxy = None
        if config.proxy_url:
            self.proxy = ServerSideProxy(config.proxy_url, self.auth, self.session, DEFAULT_TIMEOUT_SECONDS)

    @classmethod
    def from_env(cls) -> 'TroiClient':
        return cls(TroiConfig.from_env())

    @property
    def is_ready(self) -> bool:
        return self.state is ClientState.READY

    def initialize(self) -> None:
        """
        Resolves the client id and then the employee id.

        Every operation that books against a client or employee needs this to
        have succeeded first. On failure the client falls back to UNCONFIGURED
        and the error propagates.
        """
        self.state = ClientState.CONFIGURING
        try:
            self.client_id = self.resolve_client_id()
            self.employee_id = self.resolve_employee_id()
        except Exception:
            self.client_id = None
            self.employee_id = None
            self.state = ClientState.UNCONFIGURED
            raise

        if self.employee_id is None:
            self.logger.warning(
                f"No employee found for login name '{self.config.username}' "
                f"in client {self.client_id}"
            )
        self.logger.info(f"Initialized: client_id={self.client_id}, employee_id={self.employee_id}")
        self.state = ClientState.READY

    def require_client_id(self) -> int:
        if self.client_id is None:
            raise NotInitializedError("Client id is not resolved yet. Call initialize() first.")
        return self.client_id

    def require_employee_id(self, employee_id: Optional[int] = None) -> int:
        if employee_id is not None:
            return employee_id
        if not self.is_ready:
            raise NotInitializedError("Employee id is not resolved yet. Call initialize() first.")
        if self.employee_id is None:
            raise NotInitializedError(
                f"No employee id could be resolved for '{self.config.username}'."
            )
        return self.employee_id

    def make_request(self, endpoint: str, options: Optional[RequestOptions] = None) -> Any:
        options = options or RequestOptions()

        url = self.auth.get_url(endpoint)
        query_string = build_query_string(options.params)
        if query_string:
            url = f"{url}?{query_string}"

        headers = dict(self.auth.get_headers())
        headers.update(options.headers)
        method = options.method.upper()

        self.logger.debug(f"Requesting {method} {url}")
        response = self.session.request(
            method=method,
            url=url,
            headers=headers,
            json=options.json_data,
            data=options.body,
            timeout=DEFAULT_TIMEOUT_SECONDS
        )

        if response.status_code in (401, 403):
            raise AuthenticationFailed(response.status_code)
        if response.status_code >= 400:
            self.logger.warning(f"{method} {url} returned HTTP {response.status_code}")

        response_objects = response.json() if response.content else None

        if options.predicate is None:
            return response_objects

        if response_objects is None:
            response_objects = []
        if not isinstance(response_objects, list):
            raise TroiClientError(
                f"{method} {url} returned HTTP {response.status_code} "
                f"with a {type(response_objects).__name__} instead of a list"
            )

        for response_object in response_objects:
            if options.predicate(response_object):
                return response_object

        raise NoMatchingElement("predicate provided, but no response object fulfills it")

    def get(self, endpoint: str, params: Optional[QueryParams] = None,
            predicate: Optional[Callable[[Any], bool]] = None) -> Any:
        return self.make_request(endpoint, RequestOptions(params=params, predicate=predicate))

    def post(self, endpoint: str, json_data: Any) -> Any:
        return self.make_request(endpoint, RequestOptions(method="POST", json_data=json_data))

    def put(self, endpoint: str, json_data: Any) -> Any:
        return self.make_request(endpoint, RequestOptions(method="PUT", json_data=json_data))

    def delete(self, endpoint: str) -> Any:
        return self.make_request(endpoint, RequestOptions(method="DELETE"))

    def resolve_client_id(self) -> int:
        client = self.clients.find_by_name(self.config.client_name)
        return client['Id']

    def resolve_employee_id(self, username: Optional[str] = None) -> Optional[int]:
        return self.employees.find_id_by_login_name(username or self.config.username)

    def list_calculation_positions(self, favourites_only: bool = True,
                                   time_recording_only: bool = True) -> List[CalculationPosition]:
        return self.calculation_positions.list(favourites_only, time_recording_only)

    def list_last_recorded_calculation_positions(self, employee_id: Optional[int] = None) -> Optional[List[Dict[str, Any]]]:
        return self.calculation_positions.last_recorded(employee_id)

    def list_time_entries(self, calculation_position_id: int, start_date: Union[str, date],
                          end_date: Union[str, date], employee_id: Optional[int] = None) -> List[TimeEntry]:
        return self.time_entries.list(calculation_position_id, start_date, end_date, employee_id)

    def create_time_entry(self, calculation_position_id: int, date_at: Union[str, date],
                          hours: float, description: str) -> Any:
        return self.time_entries.create(calculation_position_id, date_at, hours, description)

    def update_time_entry(self, calculation_position_id: int, date_at: Union[str, date],
                          hours: float, description: str, billing_id: int) -> Any:
        return self.time_entries.update(calculation_position_id, date_at, hours, description, billing_id)

    def delete_time_entry(self, entry_id: int) -> Any:
        return self.time_entries.delete(entry_id)

    def delete_time_entry_via_server_side_proxy(self, entry_id: int) -> requests.Response:
        if self.proxy is None:
            raise TroiClientError(
                "No server-side proxy configured. Set proxy_url (TROI_PROXY_URL) to use this path."
            )
        return self.proxy.delete_time_entry(entry_id)

    def list_calendar_events(self, start_date: Union[str, date], end_date: Union[str, date],
                             event_type: Union[CalendarEventType, str] = "") -> List[CalendarEvent]:
        return self.calendar_events.list(start_date, end_date, event_type)

    def close(self):
        if self.session:
            self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exception_type, exception_value, traceback):
        self.close()
        return False
