from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path

from netflix_client import __version__
from netflix_client.models import Credentials


DEFAULT_AVATAR_URL_TEMPLATE = (
    "https://secure.netflix.com/ffe/profiles/avatars_v2/{size}x{size}/PICON_{avatar_id}.png"
)


class ConfigurationError(ValueError):
    pass


@dataclass(frozen=True)
class AppSettings:
    base_url: str = "https://www.netflix.com"
    login_path: str = "/login"
    manage_profiles_path: str = "/ManageProfiles"
    your_account_path: str = "/YourAccount"
    switch_profile_path: str = "/profiles/switch"
    profiles_path: str = "/profiles"
    rating_history_path: str = "/ratinghistory"
    set_rating_path: str = "/setVideoRating"
    path_evaluator_path: str = "/pathEvaluator"
    avatar_url_template: str = DEFAULT_AVATAR_URL_TEMPLATE
    login_email_selector: str = ".login-input-email"
    login_error_selector: str = ".ui-message-contents"
    context_namespace: str = "netflix"
    timeout_seconds: int = 30
    script_timeout_seconds: int = 10
    user_agent: str = f"netflix-client/{__version__}"
    email: str = ""
    password: str = ""

    @staticmethod
    def from_env() -> "AppSettings":
        _load_dotenv_if_present()

        defaults = AppSettings()
        settings = AppSettings(
            base_url=os.getenv("NETFLIX_BASE_URL", defaults.base_url).strip().rstrip("/"),
            login_path=os.getenv("NETFLIX_LOGIN_PATH", defaults.login_path).strip(),
            manage_profiles_path=os.getenv(
                "NETFLIX_MANAGE_PROFILES_PATH", defaults.manage_profiles_path
            ).strip(),
            your_account_path=os.getenv("NETFLIX_YOUR_ACCOUNT_PATH", defaults.your_account_path).strip(),
            switch_profile_path=os.getenv(
                "NETFLIX_SWITCH_PROFILE_PATH", defaults.switch_profile_path
            ).strip(),
            profiles_path=os.getenv("NETFLIX_PROFILES_PATH", defaults.profiles_path).strip(),
            rating_history_path=os.getenv(
                "NETFLIX_RATING_HISTORY_PATH", defaults.rating_history_path
            ).strip(),
            set_rating_path=os.getenv("NETFLIX_SET_RATING_PATH", defaults.set_rating_path).strip(),
            path_evaluator_path=os.getenv(
                "NETFLIX_PATH_EVALUATOR_PATH", defaults.path_evaluator_path
            ).strip(),
            avatar_url_template=os.getenv(
                "NETFLIX_AVATAR_URL_TEMPLATE", defaults.avatar_url_template
            ).strip(),
            timeout_seconds=_int_from_env("NETFLIX_TIMEOUT_SECONDS", defaults.timeout_seconds),
            script_timeout_seconds=_int_from_env(
                "NETFLIX_SCRIPT_TIMEOUT_SECONDS", defaults.script_timeout_seconds
            ),
            user_agent=os.getenv("NETFLIX_USER_AGENT", defaults.user_agent).strip(),
            email=os.getenv("NETFLIX_EMAIL", "").strip(),
            password=os.getenv("NETFLIX_PASSWORD", ""),
        )
        settings.validate()
        return settings

    def validate(self) -> None:
        if not self.base_url.startswith(("http://", "https://")):
            raise ConfigurationError("NETFLIX_BASE_URL must be an http(s) URL")

        path_fields = {
            "NETFLIX_LOGIN_PATH": self.login_path,
            "NETFLIX_MANAGE_PROFILES_PATH": self.manage_profiles_path,
            "NETFLIX_YOUR_ACCOUNT_PATH": self.your_account_path,
            "NETFLIX_SWITCH_PROFILE_PATH": self.switch_profile_path,
            "NETFLIX_PROFILES_PATH": self.profiles_path,
            "NETFLIX_RATING_HISTORY_PATH": self.rating_history_path,
            "NETFLIX_SET_RATING_PATH": self.set_rating_path,
            "NETFLIX_PATH_EVALUATOR_PATH": self.path_evaluator_path,
        }
        invalid_paths = [name for name, value in path_fields.items() if not value.startswith("/")]
        if invalid_paths:
            raise ConfigurationError(
                "Endpoint paths must start with '/': " + ", ".join(invalid_paths)
            )

        if self.timeout_seconds <= 0:
            raise ConfigurationError("NETFLIX_TIMEOUT_SECONDS must be greater than 0")

        if self.script_timeout_seconds <= 0:
            raise ConfigurationError("NETFLIX_SCRIPT_TIMEOUT_SECONDS must be greater than 0")

        if "{avatar_id}" not in self.avatar_url_template:
            raise ConfigurationError("NETFLIX_AVATAR_URL_TEMPLATE must contain '{avatar_id}'")

    def url_for(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def credentials(self) -> Credentials | None:
        if not self.email or not self.password:
            return None
        return Credentials(email=self.email, password=self.password)


def _int_from_env(name: str, default: int) -> int:
    raw_value = os.getenv(name, "").strip()
    if not raw_value:
        return default
    try:
        return int(raw_value)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got {raw_value!r}") from exc


def _load_dotenv_if_present(file_name: str = ".env") -> None:
    for candidate in _candidate_env_files(file_name):
        _load_env_file(candidate)


def _candidate_env_files(file_name: str) -> list[Path]:
    candidates: list[Path] = []

    explicit = os.getenv("NETFLIX_ENV_FILE", "").strip()
    if explicit:
        candidates.append(Path(explicit).expanduser())

    candidates.append(Path.cwd() / file_name)

    candidates.append(Path(__file__).resolve().parent.parent / file_name)

    unique_candidates: list[Path] = []
    seen: set[str] = set()
    for path in candidates:
        normalized = str(path.resolve()) if path.exists() else str(path)
        if normalized in seen:
            continue
        seen.add(normalized)
        unique_candidates.append(path)
    return unique_candidates


def _load_env_file(path: Path) -> None:
    if not path.exists():
        return

    try:
        with path.open("r", encoding="utf-8") as env_file:
            for raw_line in env_file:
                line = raw_line.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue

                key, value = line.split("=", 1)
                key = key.strip()
                value = value.strip().strip('"').strip("'")

                if key and key not in os.environ:
                    os.environ[key] = value
    except OSError:
        return
