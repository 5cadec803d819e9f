"""Tests for the login pipeline and session context refreshes."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
import requests

from netflix_client.auth import AuthenticationError, AuthManager
from netflix_client.http import ApiHttpError, HttpClient
from netflix_client.models import Credentials, SessionState
from netflix_client.pages import DEFAULT_LOGIN_ERROR, PageStructureError

CREDENTIALS = Credentials(email="user@example.com", password="hunter2")


def _http_client(pages: dict[str, object], post_response=None) -> MagicMock:
    """Fake transport serving ``pages`` by path; values may be exceptions."""
    http_client = MagicMock(spec=HttpClient)

    def get_page(path, allow_redirects=True):
        page = pages[path]
        if isinstance(page, Exception):
            raise page
        return page

    http_client.get_page.side_effect = get_page
    http_client.post_form.return_value = post_response
    return http_client


@pytest.fixture
def site(load_fixture, make_response):
    return {
        "/login": make_response(200, text=load_fixture("login_page.html")),
        "/ManageProfiles": make_response(200, text=load_fixture("manage_profiles.html")),
        "/YourAccount": make_response(200, text=load_fixture("your_account.html")),
    }


def test_login_with_credentials(settings, site, make_response):
    http_client = _http_client(site, post_response=make_response(302))
    manager = AuthManager(settings, http_client)

    state = manager.login(CREDENTIALS)

    assert state is manager.state
    assert state.api_root == "https://api.example.com/v123"
    assert state.auth_urls == {"/ManageProfiles": "token-profiles", "/YourAccount": "token-account"}
    assert state.context["userInfo"]["data"]["authURL"] == "token-account"


def test_login_posts_form_with_credentials(settings, site, make_response):
    http_client = _http_client(site, post_response=make_response(302))

    AuthManager(settings, http_client).login(CREDENTIALS)

    path, form = http_client.post_form.call_args[0]
    assert path == "/login"
    assert form["email"] == "user@example.com"
    assert form["password"] == "hunter2"
    assert form["authURL"] == "1500000000000.abcdef="
    assert form["flow"] == "websiteSignUp"
    assert form["rememberMe"] == "true"


def test_login_refreshes_pages_in_order(settings, site, make_response):
    http_client = _http_client(site, post_response=make_response(302))

    AuthManager(settings, http_client).login(CREDENTIALS)

    requested = [call.args[0] for call in http_client.get_page.call_args_list]
    assert requested == ["/login", "/ManageProfiles", "/YourAccount"]


def test_login_without_credentials_only_refreshes(settings, site):
    http_client = _http_client(site)

    state = AuthManager(settings, http_client).login()

    http_client.post_form.assert_not_called()
    requested = [call.args[0] for call in http_client.get_page.call_args_list]
    assert requested == ["/ManageProfiles", "/YourAccount"]
    assert state.is_ready


def test_rejected_login_uses_page_message(settings, site, load_fixture, make_response):
    failed = make_response(200, text=load_fixture("login_failed.html"))
    http_client = _http_client(site, post_response=failed)

    with pytest.raises(AuthenticationError) as excinfo:
        AuthManager(settings, http_client).login(CREDENTIALS)

    assert str(excinfo.value) == "Wrong password"
    assert [call.args[0] for call in http_client.get_page.call_args_list] == ["/login"]


def test_rejected_login_default_message(settings, site, make_response):
    http_client = _http_client(site, post_response=make_response(200, text="<html></html>"))

    with pytest.raises(AuthenticationError) as excinfo:
        AuthManager(settings, http_client).login(CREDENTIALS)

    assert str(excinfo.value) == DEFAULT_LOGIN_ERROR


def test_login_page_without_form_raises(settings, site, make_response):
    site["/login"] = make_response(200, text="<html><body>Down for maintenance</body></html>")
    http_client = _http_client(site)

    with pytest.raises(PageStructureError):
        AuthManager(settings, http_client).login(CREDENTIALS)

    http_client.post_form.assert_not_called()


def test_first_refresh_failure_stops_sequence(settings, site):
    site["/ManageProfiles"] = ApiHttpError(500, "HTTP 500: Internal Server Error")
    http_client = _http_client(site)
    manager = AuthManager(settings, http_client)

    with pytest.raises(ApiHttpError):
        manager.login()

    assert [call.args[0] for call in http_client.get_page.call_args_list] == ["/ManageProfiles"]
    assert not manager.state.is_ready


def test_transport_error_propagates(settings, site):
    site["/ManageProfiles"] = requests.ConnectionError("unreachable")
    http_client = _http_client(site)

    with pytest.raises(requests.ConnectionError):
        AuthManager(settings, http_client).login()


def test_refresh_context_derives_api_root(settings, make_response):
    html = """
    <html><body><script>
      netflix.reactContext = {models: {
        serverDefs: {data: {SHAKTI_API_ROOT: "https://api.example.com", BUILD_IDENTIFIER: "v123"}},
        userInfo: {data: {authURL: "abc"}}
      }};
    </script></body></html>
    """
    http_client = _http_client({"/YourAccount": make_response(200, text=html)})
    manager = AuthManager(settings, http_client)

    manager.refresh_context("/YourAccount")

    assert manager.state.api_root == "https://api.example.com/v123"
    assert manager.state.auth_urls == {"/YourAccount": "abc"}
    http_client.get_page.assert_called_once_with("/YourAccount", allow_redirects=True)


def test_refresh_replaces_context_wholesale(settings, site, make_response):
    http_client = _http_client(site)
    manager = AuthManager(settings, http_client)

    manager.refresh_context("/ManageProfiles")
    assert len(manager.state.context["profilesModel"]["data"]["profiles"]) == 2

    manager.refresh_context("/YourAccount")
    assert len(manager.state.context["profilesModel"]["data"]["profiles"]) == 1
    assert manager.state.auth_urls["/ManageProfiles"] == "token-profiles"


def test_incomplete_context_leaves_state_untouched(settings, make_response):
    html = "<script>netflix.reactContext = {models: {userInfo: {data: {authURL: 'abc'}}}};</script>"
    state = SessionState(context={"old": True}, api_root="https://old.example.com/v1")
    http_client = _http_client({"/YourAccount": make_response(200, text=html)})
    manager = AuthManager(settings, http_client, state=state)

    with pytest.raises(PageStructureError):
        manager.refresh_context("/YourAccount")

    assert state.context == {"old": True}
    assert state.api_root == "https://old.example.com/v1"
    assert state.auth_urls == {}
