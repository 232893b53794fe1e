from datetime import date
from enum import Enum
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple, Union
from urllib.parse import urlencode


QueryParams = Union[str, Mapping[str, Any], Iterable[Tuple[str, Any]]]


def format_date(dt: Union[str, date]) -> str:
    if isinstance(dt, date):
        return dt.strftime('%Y-%m-%d')
    return dt


def format_value(value: Any) -> str:
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, date):
        return format_date(value)
    return str(value)


def build_query_params(**kwargs) -> Dict[str, str]:
    params = {}
    for key, value in kwargs.items():
        if value is not None:
            params[key] = format_value(value)
    return params


def build_query_string(params: Optional[QueryParams]) -> str:
    """
    Renders query parameters the way a browser's URLSearchParams would.

    Accepts a ready-made query string (a leading '?' is dropped), a mapping,
    or a sequence of key/value pairs. Returns '' when there is nothing to send.
    """
    if not params:
        return ''
    if isinstance(params, str):
        return params[1:] if params.startswith('?') else params
    pairs = params.items() if isinstance(params, Mapping) else params
    return urlencode([(key, format_value(value)) for key, value in pairs])


def resource_path(resource: str, resource_id: Any) -> str:
    return f"/{resource}/{resource_id}"
