"""Pytest fixtures. HTTP is faked by swapping requests.Session for a MagicMock."""

import json
from unittest.mock import MagicMock
from urllib.parse import parse_qs, urlsplit

import pytest

from troi_client import TroiClient, TroiConfig


BASE_URL = "https://troi.example.com/api/v2/rest"


def make_response(json_data=None, status_code=200):
    response = MagicMock()
    response.status_code = status_code
    response.ok = status_code < 400
    response.content = b"" if json_data is None else json.dumps(json_data).encode("utf-8")
    response.json.return_value = json_data
    return response


def request_call(session, index=-1):
    """Returns (method, url, kwargs) of a recorded session.request call."""
    call = session.request.call_args_list[index]
    return call.kwargs["method"], call.kwargs["url"], call.kwargs


def query_of(url):
    return {key: values[0] for key, values in parse_qs(urlsplit(url).query, keep_blank_values=True).items()}


@pytest.fixture
def config():
    return TroiConfig(
        base_url=BASE_URL,
        client_name="Example GmbH",
        username="jdoe",
        password="secret",
        proxy_url="http://localhost:3000",
    )


@pytest.fixture
def session(monkeypatch):
    fake_session = MagicMock()
    fake_session.request.return_value = make_response([])
    monkeypatch.setattr("troi_client.client.requests.Session", lambda: fake_session)
    return fake_session


@pytest.fixture
def client(config, session):
    return TroiClient(config)


@pytest.fixture
def ready_client(client, session):
    """A client that went through initialize() with client 3 and employee 42."""
    session.request.side_effect = [
        make_response([{"Name": "Other AG", "Id": 1}, {"Name": "Example GmbH", "Id": 3}]),
        make_response([{"Id": 42}]),
    ]
    client.initialize()
    session.request.reset_mock(side_effect=True)
    session.request.return_value = make_response([])
    return client
