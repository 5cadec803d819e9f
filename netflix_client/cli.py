from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, Sequence

import requests

from netflix_client.apis import ProfilesApi, RatingsApi
from netflix_client.auth import AuthenticationError, AuthManager
from netflix_client.config import AppSettings, ConfigurationError
from netflix_client.http import ApiHttpError, ApplicationError, HttpClient, UnexpectedResponseError
from netflix_client.logging_utils import configure_logging
from netflix_client.models import SessionStateError
from netflix_client.pages import PageStructureError
from netflix_client.services import NetflixService


logger = logging.getLogger(__name__)


def build_service(settings: AppSettings) -> NetflixService:
    http_client = HttpClient(settings)
    return NetflixService(
        auth_manager=AuthManager(settings, http_client),
        profiles_api=ProfilesApi(settings, http_client),
        ratings_api=RatingsApi(settings, http_client),
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="netflix-client",
        description="Query and update a Netflix account from the command line.",
    )
    parser.add_argument("--log-level", default=None, help="Overrides NETFLIX_LOG_LEVEL")
    parser.add_argument(
        "--profile",
        default=None,
        help="Profile guid to switch to before running the command",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("profiles", help="List the account's profiles")
    commands.add_parser("active-profile", help="Show the active profile guid")

    switch = commands.add_parser("switch-profile", help="Switch to another profile")
    switch.add_argument("guid")

    commands.add_parser("ratings", help="Dump the full rating history")

    rate = commands.add_parser("rate", help="Rate a title")
    rate.add_argument("title_id")
    rate.add_argument("rating", type=int)

    avatar = commands.add_parser("avatar", help="Change the avatar of the selected profile")
    avatar.add_argument("name")

    avatar_url = commands.add_parser("avatar-url", help="Print the image URL of an avatar")
    avatar_url.add_argument("name")
    avatar_url.add_argument("--size", type=int, default=None)

    return parser


def run_command(service: NetflixService, args: argparse.Namespace) -> Any:
    if args.command == "avatar-url":
        return service.get_avatar_url(args.name, args.size)
    if args.command == "profiles":
        return service.get_profiles()
    if args.command == "active-profile":
        return service.get_active_profile()
    if args.command == "switch-profile":
        service.switch_profile(args.guid)
        return {"active": args.guid}
    if args.command == "ratings":
        return service.get_rating_history()
    if args.command == "rate":
        service.set_video_rating(args.title_id, args.rating)
        return {"titleId": args.title_id, "rating": args.rating}
    if args.command == "avatar":
        return service.set_avatar(args.name)
    raise ValueError(f"Unknown command: {args.command}")


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    try:
        settings = AppSettings.from_env()
    except ConfigurationError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2

    service = build_service(settings)
    try:
        if args.command != "avatar-url":
            credentials = settings.credentials()
            if credentials is not None:
                logger.info("Signing in as %s", _mask_email(credentials.email))
            service.login(credentials)
            if args.profile:
                service.switch_profile(args.profile)
        result = run_command(service, args)
    except AuthenticationError as exc:
        print(f"Login failed: {exc}", file=sys.stderr)
        return 1
    except (ApiHttpError, ApplicationError, UnexpectedResponseError) as exc:
        print(f"Request failed: {exc}", file=sys.stderr)
        return 1
    except (PageStructureError, SessionStateError) as exc:
        print(f"Unexpected page or session state: {exc}", file=sys.stderr)
        return 1
    except requests.RequestException as exc:
        print(f"Network error: {exc}", file=sys.stderr)
        return 1
    except ValueError as exc:
        print(f"Invalid argument: {exc}", file=sys.stderr)
        return 2

    json.dump(result, sys.stdout, indent=2, ensure_ascii=False)
    sys.stdout.write("\n")
    return 0


def _mask_email(email: str) -> str:
    value = email.strip()
    if "@" not in value:
        return value

    local, domain = value.split("@", 1)
    if not domain:
        return value

    mask_count = min(6, len(domain))
    masked_domain = ("*" * mask_count) + domain[mask_count:]
    return f"{local}@{masked_domain}"
