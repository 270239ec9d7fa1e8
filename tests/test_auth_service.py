"""测试佳明 SSO 登录流程"""

import requests

from digswim.clients.garmin_client import GarminApiError
from digswim.infrastructure.credentials import StaticCredentialsProvider
from digswim.infrastructure.session_state import SessionState
from digswim.services.auth_service import GarminAuthService

from conftest import FakeGarminClient


def _auth(client, email="swimmer@example.com", password="secret"):
    session = SessionState()
    return GarminAuthService(client, session, StaticCredentialsProvider(email, password)), session


def test_session_state_basics():
    session = SessionState()
    assert not session.has_session()
    session.set_token("abc")
    assert session.has_session()
    assert session.get_token() == "abc"
    session.set_token("")
    assert not session.has_session()


def test_full_login_flow():
    client = FakeGarminClient()
    auth, session = _auth(client)

    assert auth.login() is True
    assert session.get_token() == "connect-token-9"
    assert [call[0] for call in client.calls] == ["sso", "login", "ticket", "dashboard"]
    assert ("login", "swimmer@example.com", "sso-csrf-1") in client.calls
    assert ("ticket", "ST-0123-abc") in client.calls


def test_ticket_from_redirect_url_takes_priority():
    client = FakeGarminClient()
    client.login_url = "https://connect.garmin.cn/modern?ticket=ST-9999-url"
    auth, _ = _auth(client)

    assert auth.login() is True
    assert ("ticket", "ST-9999-url") in client.calls


def test_no_ticket_still_fetches_dashboard():
    client = FakeGarminClient()
    client.login_body = "<html>ok</html>"
    auth, session = _auth(client)

    assert auth.login() is True
    assert client.count("ticket") == 0
    assert session.has_session()


def test_missing_credentials_short_circuits():
    client = FakeGarminClient()
    auth, session = _auth(client, email="", password="")

    assert auth.login() is False
    assert client.calls == []
    assert not session.has_session()


def test_missing_sso_csrf_aborts():
    client = FakeGarminClient()
    client.sso_html = "<html>no form</html>"
    auth, session = _auth(client)

    assert auth.login() is False
    assert [call[0] for call in client.calls] == ["sso"]
    assert not session.has_session()


def test_dashboard_token_html_fallback():
    client = FakeGarminClient()
    client.dashboard_html = '<meta name="csrf-token" content="meta-connect">'
    auth, session = _auth(client)

    assert auth.login() is True
    assert session.get_token() == "meta-connect"


def test_missing_dashboard_token_fails_and_keeps_old_token():
    client = FakeGarminClient()
    client.dashboard_html = "<html></html>"
    auth, session = _auth(client)
    session.set_token("old-token")

    assert auth.login() is False
    assert session.get_token() == "old-token"


def test_transport_errors_are_absorbed():
    client = FakeGarminClient()

    def boom(*args, **kwargs):
        raise requests.ConnectionError("network down")

    client.get_sso_page = boom
    auth, session = _auth(client)
    assert auth.login() is False
    assert not session.has_session()


def test_credential_rejection_is_absorbed():
    client = FakeGarminClient()

    def reject(email, password, csrf_token):
        raise GarminApiError(401, "bad credentials")

    client.submit_credentials = reject
    auth, _ = _auth(client)
    assert auth.login() is False
    assert client.count("dashboard") == 0


def test_ensure_session_skips_login_when_token_present():
    client = FakeGarminClient()
    auth, session = _auth(client)
    session.set_token("existing")

    assert auth.ensure_session() is True
    assert client.calls == []


def test_login_always_runs_flow_even_with_token():
    client = FakeGarminClient()
    auth, session = _auth(client)
    session.set_token("rejected-token")

    assert auth.login() is True
    assert client.count("sso") == 1
    assert session.get_token() == "connect-token-9"
