from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import requests


class SessionStateError(RuntimeError):
    pass


@dataclass(frozen=True)
class Credentials:
    email: str
    password: str = field(repr=False)


@dataclass(frozen=True)
class ApiResponse:
    response: requests.Response
    payload: Any


@dataclass
class SessionState:
    """Long-lived state of one authenticated session.

    ``context`` is the configuration object extracted from the most recently
    refreshed page and is always replaced as a whole. ``auth_urls`` maps the
    path of each refreshed page to the authorization token found on it.
    """

    context: dict[str, Any] | None = None
    api_root: str | None = None
    auth_urls: dict[str, str] = field(default_factory=dict)
    active_profile: str | None = None

    @property
    def is_ready(self) -> bool:
        return self.context is not None and bool(self.api_root)

    def require_context(self) -> dict[str, Any]:
        if self.context is None or not self.api_root:
            raise SessionStateError("No session context loaded; call login() first")
        return self.context

    def require_auth_url(self, page_path: str) -> str:
        self.require_context()
        token = self.auth_urls.get(page_path)
        if not token:
            raise SessionStateError(f"No authorization token extracted from {page_path}")
        return token

    def require_active_profile(self) -> str:
        if not self.active_profile:
            raise SessionStateError("No active profile selected; call switch_profile() first")
        return self.active_profile


@dataclass(frozen=True)
class RatingPage:
    page: int
    size: int
    total_ratings: int
    items: list[dict[str, Any]]

    @staticmethod
    def from_payload(payload: dict[str, Any]) -> "RatingPage":
        size = int(payload["size"])
        if size <= 0:
            raise ValueError(f"Invalid rating page size: {size}")
        return RatingPage(
            page=int(payload["page"]),
            size=size,
            total_ratings=int(payload["totalRatings"]),
            items=list(payload.get("ratingItems") or []),
        )

    @property
    def next_page(self) -> int:
        return self.page + 1

    @property
    def total_pages(self) -> int:
        # Overshoots by one page when total_ratings is an exact multiple of size.
        return self.total_ratings // self.size + 1
