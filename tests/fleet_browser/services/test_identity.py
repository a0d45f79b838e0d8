import pytest
import requests
from firebase_admin import auth

from fleet_browser.core.exceptions import AuthenticationError, NetworkError
from fleet_browser.services import identity
from fleet_browser.services.identity import Capability, IdentityProvider, Session, TokenVerifier


class _FakeResponse:
    def __init__(self, status_code, payload):
        self.status_code = status_code
        self._payload = payload

    def json(self):
        return self._payload


def _ok_response():
    return _FakeResponse(
        200,
        {"localId": "uid-1", "email": "a@b.co", "idToken": "tok", "refreshToken": "ref"},
    )


def test_sign_in_success_notifies_listeners(monkeypatch):
    calls = []

    def fake_post(url, params=None, json=None, timeout=None):
        calls.append((url, params, json))
        return _ok_response()

    monkeypatch.setattr(identity.requests, "post", fake_post)

    provider = IdentityProvider(api_key="key")
    seen = []
    provider.subscribe(seen.append)

    session = provider.sign_in("a@b.co", "secret")

    assert session == Session(uid="uid-1", email="a@b.co", id_token="tok", refresh_token="ref")
    assert provider.user_present
    assert provider.capability == Capability(can_edit=True)
    assert seen == [False, True]
    assert calls[0][1] == {"key": "key"}
    assert calls[0][2]["returnSecureToken"] is True


def test_sign_in_rejected(monkeypatch):
    monkeypatch.setattr(
        identity.requests,
        "post",
        lambda *a, **kw: _FakeResponse(400, {"error": {"message": "INVALID_PASSWORD : bad"}}),
    )
    provider = IdentityProvider(api_key="key")

    with pytest.raises(AuthenticationError, match="INVALID_PASSWORD"):
        provider.sign_in("a@b.co", "wrong")
    assert not provider.user_present


def test_sign_in_network_failure(monkeypatch):
    def fake_post(*args, **kwargs):
        raise requests.exceptions.ConnectionError("offline")

    monkeypatch.setattr(identity.requests, "post", fake_post)

    with pytest.raises(NetworkError):
        IdentityProvider(api_key="key").sign_in("a@b.co", "secret")


def test_sign_in_needs_api_key_and_credentials():
    with pytest.raises(AuthenticationError):
        IdentityProvider(api_key=None).sign_in("a@b.co", "secret")
    with pytest.raises(AuthenticationError):
        IdentityProvider(api_key="key").sign_in("", "secret")


def test_sign_out_is_idempotent_and_unsubscribe_stops_events():
    provider = IdentityProvider(api_key="key", session=Session(uid="u", email="e", id_token="t"))
    seen = []
    unsubscribe = provider.subscribe(seen.append)

    provider.sign_out()
    provider.sign_out()
    unsubscribe()
    provider._set_session(Session(uid="u", email="e", id_token="t"))

    assert seen == [True, False]
    assert provider.capability == Capability(can_edit=True)


def test_session_dict_roundtrip():
    session = Session(uid="u", email="e", id_token="t", refresh_token="r")

    assert Session.from_dict(session.to_dict()) == session
    assert Session.from_dict(None) is None
    assert Session.from_dict({"email": "e"}) is None


def test_token_verifier_without_token_or_backend_is_read_only():
    assert TokenVerifier(api_key="key").verify(None) is None
    assert TokenVerifier(api_key="key").verify("") is None
    assert TokenVerifier().verify("tok") is None


def test_token_verifier_uses_admin_sdk_when_available(monkeypatch):
    def fake_verify(id_token, app=None):
        if id_token != "good":
            raise auth.InvalidIdTokenError("bad token")
        return {"uid": "uid-1"}

    monkeypatch.setattr(identity.auth, "verify_id_token", fake_verify)
    verifier = TokenVerifier(firebase_app=object())

    assert verifier.verify("good") == "uid-1"
    assert verifier.verify("forged") is None


def test_token_verifier_falls_back_to_lookup_and_caches(monkeypatch):
    calls = []

    def fake_post(url, params=None, json=None, timeout=None):
        calls.append((url, json))
        if json["idToken"] == "good":
            return _FakeResponse(200, {"users": [{"localId": "uid-1"}]})
        return _FakeResponse(400, {"error": {"message": "INVALID_ID_TOKEN"}})

    monkeypatch.setattr(identity.requests, "post", fake_post)
    verifier = TokenVerifier(api_key="key")

    assert verifier.verify("good") == "uid-1"
    assert verifier.verify("good") == "uid-1"
    assert verifier.verify("forged") is None
    assert calls[0][0] == identity.LOOKUP_URL
    assert len(calls) == 2


def test_token_verifier_unreachable_service_is_read_only(monkeypatch):
    def fake_post(*args, **kwargs):
        raise requests.exceptions.Timeout("slow")

    monkeypatch.setattr(identity.requests, "post", fake_post)
    assert TokenVerifier(api_key="key").verify("good") is None
