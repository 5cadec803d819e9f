from __future__ import annotations

import json
import os
from http import HTTPStatus
from typing import Any

import pytest
import requests

from netflix_client.config import AppSettings
from netflix_client.models import SessionState

FIXTURES_DIR = os.path.join(os.path.dirname(__file__), "fixtures")


def _build_response(
    status_code: int = 200,
    json_body: Any = None,
    text: str | None = None,
    reason: str | None = None,
) -> requests.Response:
    response = requests.Response()
    response.status_code = status_code
    response.reason = reason or HTTPStatus(status_code).phrase
    response.encoding = "utf-8"
    if json_body is not None:
        response._content = json.dumps(json_body).encode("utf-8")
        response.headers["Content-Type"] = "application/json"
    elif text is not None:
        response._content = text.encode("utf-8")
        response.headers["Content-Type"] = "text/html; charset=utf-8"
    else:
        response._content = b""
    return response


@pytest.fixture
def make_response():
    return _build_response


@pytest.fixture
def load_fixture():
    def _load(name: str) -> str:
        with open(os.path.join(FIXTURES_DIR, name), "r", encoding="utf-8") as fixture:
            return fixture.read()

    return _load


@pytest.fixture
def settings() -> AppSettings:
    return AppSettings()


@pytest.fixture
def ready_state() -> SessionState:
    return SessionState(
        context={
            "profilesModel": {"data": {"profiles": [{"guid": "PROFILE1"}, {"guid": "PROFILE2"}]}},
        },
        api_root="https://api.example.com/v123",
        auth_urls={"/ManageProfiles": "token-profiles", "/YourAccount": "token-account"},
    )
