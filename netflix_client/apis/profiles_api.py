from __future__ import annotations

import logging
from typing import Any

from netflix_client.config import AppSettings
from netflix_client.http import HttpClient, UnexpectedResponseError
from netflix_client.models import SessionState
from netflix_client.pages import require_path


logger = logging.getLogger(__name__)


class ProfilesApi:
    def __init__(self, settings: AppSettings, http_client: HttpClient):
        self._settings = settings
        self._http_client = http_client

    @staticmethod
    def get_profiles(state: SessionState) -> list[dict[str, Any]]:
        context = state.require_context()
        return require_path(context, "profilesModel", "data", "profiles")

    def switch_profile(self, state: SessionState, guid: str) -> None:
        result = self._http_client.api_request(
            state,
            self._settings.switch_profile_path,
            params={"switchProfileGuid": guid},
        )
        payload = result.payload
        if not isinstance(payload, dict) or payload.get("status") != "success":
            raise UnexpectedResponseError("Profile switch was not acknowledged")

        state.active_profile = guid
        logger.info("Switched to profile %s", guid)

    def get_active_profile(self, state: SessionState) -> Any:
        result = self._http_client.api_request(state, self._settings.profiles_path)
        if not isinstance(result.payload, dict):
            raise UnexpectedResponseError("Profiles endpoint returned no object")
        return result.payload.get("active")

    def set_avatar(self, state: SessionState, avatar_name: str) -> Any:
        active_profile = state.require_active_profile()
        body = {
            "callPath": ["profiles", active_profile, "edit"],
            "params": [None, None, None, avatar_name, None],
            "authURL": state.require_auth_url(self._settings.manage_profiles_path),
        }
        result = self._http_client.api_request(
            state,
            self._settings.path_evaluator_path,
            params={"method": "call"},
            json_body=body,
            method="POST",
        )
        return result.payload

    def get_avatar_url(self, avatar_name: str, size: int | None = None) -> str:
        _, separator, avatar_id = avatar_name.partition("icon")
        if not separator or not avatar_id:
            raise ValueError(f"Not an avatar icon name: {avatar_name!r}")
        return self._settings.avatar_url_template.format(size=size or 320, avatar_id=avatar_id)
