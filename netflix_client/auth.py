from __future__ import annotations

import logging

from netflix_client.config import AppSettings
from netflix_client.http import HttpClient
from netflix_client.models import Credentials, SessionState
from netflix_client.pages import extract_login_error, extract_login_form, require_path
from netflix_client.sandbox import evaluate_page_context


logger = logging.getLogger(__name__)


class AuthenticationError(RuntimeError):
    pass


class AuthManager:
    """Drives the login form and keeps the session context up to date."""

    def __init__(self, settings: AppSettings, http_client: HttpClient, state: SessionState | None = None):
        self._settings = settings
        self._http_client = http_client
        self._state = state if state is not None else SessionState()

    @property
    def state(self) -> SessionState:
        return self._state

    def login(self, credentials: Credentials | None = None) -> SessionState:
        """Sign in with ``credentials``, or reuse the cookies already in the jar.

        Both context pages are refreshed in order; the first failure stops
        the sequence.
        """
        if credentials is not None:
            logger.info("Signing in")
            form = self._get_login_form(credentials)
            self._post_login_form(form)

        for page_path in self.context_pages:
            self.refresh_context(page_path)

        logger.info("Session ready (api root %s)", self._state.api_root)
        return self._state

    @property
    def context_pages(self) -> tuple[str, ...]:
        return (self._settings.manage_profiles_path, self._settings.your_account_path)

    def refresh_context(self, page_path: str) -> None:
        logger.info("Refreshing session context from %s", page_path)
        response = self._http_client.get_page(page_path, allow_redirects=True)
        context = evaluate_page_context(
            response.text,
            namespace=self._settings.context_namespace,
            timeout_seconds=self._settings.script_timeout_seconds,
        )

        server_defs = require_path(context, "serverDefs", "data")
        shakti_api_root = require_path(server_defs, "SHAKTI_API_ROOT")
        build_identifier = require_path(server_defs, "BUILD_IDENTIFIER")
        api_root = f"{shakti_api_root}/{build_identifier}"
        auth_url = require_path(context, "userInfo", "data", "authURL")

        self._state.context = context
        self._state.api_root = api_root
        self._state.auth_urls[page_path] = str(auth_url)

    def _get_login_form(self, credentials: Credentials) -> dict[str, str]:
        response = self._http_client.get_page(self._settings.login_path)
        form = extract_login_form(response.text, self._settings.login_email_selector)
        form["email"] = credentials.email
        form["password"] = credentials.password
        return form

    def _post_login_form(self, form: dict[str, str]) -> None:
        response = self._http_client.post_form(self._settings.login_path, form)
        if response.status_code != 302:
            message = extract_login_error(response.text, self._settings.login_error_selector)
            logger.warning("Login rejected (HTTP %s)", response.status_code)
            raise AuthenticationError(message)
