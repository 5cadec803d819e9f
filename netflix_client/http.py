from __future__ import annotations

import logging
from typing import Any

import requests

from netflix_client.config import AppSettings
from netflix_client.models import ApiResponse, SessionState


logger = logging.getLogger(__name__)


class ApiHttpError(RuntimeError):
    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code


class ApplicationError(RuntimeError):
    def __init__(self, error_code: str):
        super().__init__(error_code)
        self.error_code = error_code


class UnexpectedResponseError(RuntimeError):
    """The server answered 200 but the payload fails a local check."""


class HttpClient:
    """Cookie-backed transport shared by every request of one session."""

    def __init__(
        self,
        settings: AppSettings,
        cookie_jar: requests.cookies.RequestsCookieJar | None = None,
    ):
        self._settings = settings
        self._session = requests.Session()
        if cookie_jar is not None:
            self._session.cookies = cookie_jar
        self._session.headers.update({"User-Agent": settings.user_agent})

    @property
    def cookies(self) -> requests.cookies.RequestsCookieJar:
        return self._session.cookies

    def get_page(self, path: str, allow_redirects: bool = True) -> requests.Response:
        url = self._settings.url_for(path)
        logger.debug("GET %s", url)
        response = self._session.get(
            url,
            allow_redirects=allow_redirects,
            timeout=self._settings.timeout_seconds,
        )
        if response.status_code != 200:
            raise ApiHttpError(
                status_code=response.status_code,
                message=f"HTTP {response.status_code}: {response.reason}",
            )
        return response

    def post_form(self, path: str, form: dict[str, str]) -> requests.Response:
        url = self._settings.url_for(path)
        logger.debug("POST %s (%d fields)", url, len(form))
        return self._session.post(
            url,
            data=form,
            allow_redirects=False,
            timeout=self._settings.timeout_seconds,
        )

    def api_request(
        self,
        state: SessionState,
        endpoint: str,
        params: dict[str, Any] | None = None,
        json_body: Any = None,
        method: str = "GET",
    ) -> ApiResponse:
        state.require_context()
        url = f"{state.api_root.rstrip('/')}/{endpoint.lstrip('/')}"
        logger.debug("%s %s", method, url)

        response = self._session.request(
            method,
            url,
            params=params,
            json=json_body,
            headers={"Accept": "application/json"},
            timeout=self._settings.timeout_seconds,
        )
        payload = self._decode_json(response)

        if response.status_code == 500 and isinstance(payload, dict) and payload.get("errorCode"):
            raise ApplicationError(str(payload["errorCode"]))

        if response.status_code != 200:
            raise ApiHttpError(
                status_code=response.status_code,
                message=f"HTTP {response.status_code}: {response.reason}",
            )

        if payload is None and response.content:
            raise ApiHttpError(
                status_code=response.status_code,
                message="Invalid JSON response",
            )

        return ApiResponse(response=response, payload=payload)

    @staticmethod
    def _decode_json(response: requests.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return None
