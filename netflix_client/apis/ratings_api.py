from __future__ import annotations

import logging
from typing import Any

from netflix_client.config import AppSettings
from netflix_client.http import HttpClient, UnexpectedResponseError
from netflix_client.models import RatingPage, SessionState


logger = logging.getLogger(__name__)


class RatingsApi:
    def __init__(self, settings: AppSettings, http_client: HttpClient):
        self._settings = settings
        self._http_client = http_client

    def get_rating_history(self, state: SessionState) -> list[dict[str, Any]]:
        """Fetch every page of the rating history.

        A failing page aborts the whole walk; nothing collected so far is
        returned.
        """
        rating_items: list[dict[str, Any]] = []
        page = 0
        pages = 1
        while True:
            rating_page = self.get_rating_page(state, page)
            rating_items.extend(rating_page.items)
            page = rating_page.next_page
            pages = rating_page.total_pages
            if page >= pages:
                break

        logger.info("Fetched %d ratings over %d pages", len(rating_items), pages)
        return rating_items

    def get_rating_page(self, state: SessionState, page: int) -> RatingPage:
        logger.debug("Fetching rating history page %d", page)
        result = self._http_client.api_request(
            state,
            self._settings.rating_history_path,
            params={"pg": page},
        )
        try:
            return RatingPage.from_payload(result.payload)
        except (KeyError, TypeError, ValueError) as exc:
            raise UnexpectedResponseError(f"Malformed rating history page {page}") from exc

    def set_video_rating(self, state: SessionState, title_id: Any, rating: Any) -> None:
        params = {
            "titleid": title_id,
            "rating": rating,
            "authURL": state.require_auth_url(self._settings.your_account_path),
        }
        result = self._http_client.api_request(state, self._settings.set_rating_path, params=params)
        payload = result.payload
        if not isinstance(payload, dict) or payload.get("newRating") != rating:
            raise UnexpectedResponseError("Server did not confirm the new rating")
