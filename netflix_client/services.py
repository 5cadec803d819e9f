from __future__ import annotations

from typing import Any

from netflix_client.apis import ProfilesApi, RatingsApi
from netflix_client.auth import AuthManager
from netflix_client.models import Credentials, SessionState


class NetflixService:
    def __init__(
        self,
        auth_manager: AuthManager,
        profiles_api: ProfilesApi,
        ratings_api: RatingsApi,
    ):
        self._auth_manager = auth_manager
        self._profiles_api = profiles_api
        self._ratings_api = ratings_api

    @property
    def state(self) -> SessionState:
        return self._auth_manager.state

    def login(self, credentials: Credentials | None = None) -> SessionState:
        return self._auth_manager.login(credentials)

    def get_profiles(self) -> list[dict[str, Any]]:
        return self._profiles_api.get_profiles(self.state)

    def switch_profile(self, guid: str) -> None:
        self._profiles_api.switch_profile(self.state, guid)

    def get_active_profile(self) -> Any:
        return self._profiles_api.get_active_profile(self.state)

    def get_rating_history(self) -> list[dict[str, Any]]:
        return self._ratings_api.get_rating_history(self.state)

    def set_video_rating(self, title_id: Any, rating: Any) -> None:
        self._ratings_api.set_video_rating(self.state, title_id, rating)

    def set_avatar(self, avatar_name: str) -> Any:
        return self._profiles_api.set_avatar(self.state, avatar_name)

    def get_avatar_url(self, avatar_name: str, size: int | None = None) -> str:
        return self._profiles_api.get_avatar_url(avatar_name, size)
