from __future__ import annotations

from typing import Any

from bs4 import BeautifulSoup, Tag


DEFAULT_LOGIN_ERROR = "Login failed"

_NON_SUBMITTABLE_INPUT_TYPES = {"submit", "button", "reset", "file", "image"}


class PageStructureError(RuntimeError):
    """The page no longer has the structure this client expects."""


def extract_login_form(html: str, email_selector: str = ".login-input-email") -> dict[str, str]:
    """Return the current field values of the form containing the email input."""
    soup = BeautifulSoup(html, "lxml")
    email_input = soup.select_one(email_selector)
    if email_input is None:
        raise PageStructureError(f"Login page has no element matching {email_selector!r}")

    form = email_input.find_parent("form")
    if form is None:
        raise PageStructureError("Email field on login page is not inside a form")

    return serialize_form(form)


def serialize_form(form: Tag) -> dict[str, str]:
    """Collect successful controls the way a browser would submit them.

    Later fields with the same name overwrite earlier ones.
    """
    fields: dict[str, str] = {}
    for control in form.find_all(["input", "select", "textarea"]):
        name = control.get("name")
        if not name or control.has_attr("disabled"):
            continue

        if control.name == "input":
            input_type = str(control.get("type", "text")).lower()
            if input_type in _NON_SUBMITTABLE_INPUT_TYPES:
                continue
            if input_type in ("checkbox", "radio"):
                if not control.has_attr("checked"):
                    continue
                fields[name] = str(control.get("value", "on"))
                continue
            fields[name] = str(control.get("value", ""))
        elif control.name == "select":
            for value in _selected_option_values(control):
                fields[name] = value
        else:
            fields[name] = control.get_text()

    return fields


def _selected_option_values(select: Tag) -> list[str]:
    options = select.find_all("option")
    selected = [option for option in options if option.has_attr("selected")]
    if not selected and options and not select.has_attr("multiple"):
        selected = options[:1]
    return [str(option.get("value", option.get_text(strip=True))) for option in selected]


def extract_login_error(
    html: str,
    selector: str = ".ui-message-contents",
    default: str = DEFAULT_LOGIN_ERROR,
) -> str:
    soup = BeautifulSoup(html or "", "lxml")
    parts = [element.get_text(" ", strip=True) for element in soup.select(selector)]
    message = " ".join(part for part in parts if part)
    return message or default


def require_path(data: Any, *keys: str) -> Any:
    """Walk nested mappings, failing with the dotted path that was missing."""
    current = data
    walked: list[str] = []
    for key in keys:
        walked.append(key)
        if not isinstance(current, dict) or key not in current:
            raise PageStructureError(f"Session context is missing {'.'.join(walked)}")
        current = current[key]
    return current
