"""
Email/password identity through the Firebase Authentication REST API.

The core never sees sessions; it only receives a read-only Capability.
A session coming back from the browser is trusted only after its ID token
has been checked with Firebase (TokenVerifier).
"""

from __future__ import annotations

import logging
import time
from dataclasses import asdict, dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

import firebase_admin
import requests
from firebase_admin import auth
from firebase_admin import exceptions as firebase_exceptions

from fleet_browser.core.exceptions import AuthenticationError, NetworkError

logger = logging.getLogger(__name__)

SIGN_IN_URL = "https://identitytoolkit.googleapis.com/v1/accounts:signInWithPassword"
LOOKUP_URL = "https://identitytoolkit.googleapis.com/v1/accounts:lookup"
REQUEST_TIMEOUT = 15

Listener = Callable[[bool], None]


@dataclass(frozen=True)
class Session:
    uid: str
    email: str
    id_token: str
    refresh_token: str = ""

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional[Session]:
        if not data or not data.get("uid"):
            return None
        return cls(
            uid=str(data["uid"]),
            email=str(data.get("email", "")),
            id_token=str(data.get("id_token", "")),
            refresh_token=str(data.get("refresh_token", "")),
        )


@dataclass(frozen=True)
class Capability:
    """What the current user may do. Editing requires a signed-in user."""
    can_edit: bool = False

    @classmethod
    def from_session(cls, session: Optional[Session]) -> Capability:
        return cls(can_edit=session is not None)


READ_ONLY = Capability(can_edit=False)


class TokenVerifier:
    """
    Resolves a Firebase ID token to the uid it was issued for.

    Uses the Admin SDK when an app is available (signature and expiry
    checked locally), otherwise the Identity Toolkit accounts:lookup endpoint
    with the web API key. Anything that cannot be checked resolves to None.
    Positive results are cached for `cache_seconds`.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        firebase_app: Optional[firebase_admin.App] = None,
        cache_seconds: float = 300,
    ):
        self.api_key = api_key
        self.firebase_app = firebase_app
        self.cache_seconds = cache_seconds
        self._cache: Dict[str, Tuple[str, float]] = {}

    def verify(self, id_token: Optional[str]) -> Optional[str]:
        if not id_token:
            return None

        cached = self._cache.get(id_token)
        if cached is not None and time.monotonic() - cached[1] < self.cache_seconds:
            return cached[0]

        if self.firebase_app is not None:
            uid = self._verify_with_admin(id_token)
        elif self.api_key:
            uid = self._verify_with_lookup(id_token)
        else:
            logger.warning("No way to verify ID tokens; sessions stay read-only")
            uid = None

        if uid:
            self._cache[id_token] = (uid, time.monotonic())
        else:
            self._cache.pop(id_token, None)
        return uid

    def _verify_with_admin(self, id_token: str) -> Optional[str]:
        try:
            claims = auth.verify_id_token(id_token, app=self.firebase_app)
        except (ValueError, firebase_exceptions.FirebaseError) as e:
            logger.warning("ID token rejected", extra={"error": str(e)})
            return None
        return claims.get("uid")

    def _verify_with_lookup(self, id_token: str) -> Optional[str]:
        try:
            response = requests.post(
                LOOKUP_URL,
                params={"key": self.api_key},
                json={"idToken": id_token},
                timeout=REQUEST_TIMEOUT,
            )
        except requests.exceptions.RequestException as e:
            logger.warning("Identity service unreachable during token check", extra={"error": str(e)})
            return None

        if response.status_code != 200:
            logger.warning("ID token rejected", extra={"code": _error_code(response)})
            return None
        try:
            users = response.json().get("users") or []
        except ValueError:
            return None
        return users[0].get("localId") if users else None


def _error_code(response: requests.Response) -> str:
    """'INVALID_PASSWORD' out of {"error": {"message": "INVALID_PASSWORD : ..."}}."""
    try:
        message = response.json().get("error", {}).get("message", "")
    except ValueError:
        message = ""
    return message.split(" : ")[0].strip() or f"HTTP {response.status_code}"


class IdentityProvider:
    """
    Holds one client's session and notifies listeners when a user signs in
    or out.

    Listeners get the current `user_present` value when they subscribe and
    then once per transition.
    """

    def __init__(self, api_key: Optional[str], session: Optional[Session] = None):
        self.api_key = api_key
        self._session = session
        self._listeners: List[Listener] = []

    @property
    def session(self) -> Optional[Session]:
        return self._session

    @property
    def user_present(self) -> bool:
        return self._session is not None

    @property
    def capability(self) -> Capability:
        return Capability.from_session(self._session)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)
        listener(self.user_present)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set_session(self, session: Optional[Session]) -> None:
        was_present = self.user_present
        self._session = session
        if self.user_present != was_present:
            for listener in list(self._listeners):
                listener(self.user_present)

    def sign_in(self, email: str, password: str) -> Session:
        """
        :raises AuthenticationError: bad credentials, disabled user, or sign-in not configured
        :raises NetworkError: identity service unreachable
        """
        if not self.api_key:
            raise AuthenticationError("Sign-in is not configured (missing API key)")
        if not email or not password:
            raise AuthenticationError("Email and password are required")

        try:
            response = requests.post(
                SIGN_IN_URL,
                params={"key": self.api_key},
                json={"email": email, "password": password, "returnSecureToken": True},
                timeout=REQUEST_TIMEOUT,
            )
        except requests.exceptions.RequestException as e:
            logger.error("Identity service unreachable", extra={"error": str(e)})
            raise NetworkError(f"Identity service unreachable: {e}") from e

        if response.status_code != 200:
            code = _error_code(response)
            logger.warning("Sign-in rejected", extra={"email": email, "code": code})
            raise AuthenticationError(f"Sign-in failed: {code}")

        payload = response.json()
        session = Session(
            uid=payload.get("localId", ""),
            email=payload.get("email", email),
            id_token=payload.get("idToken", ""),
            refresh_token=payload.get("refreshToken", ""),
        )
        self._set_session(session)
        logger.info("User signed in", extra={"uid": session.uid})
        return session

    def sign_out(self) -> None:
        """Idempotent: signing out with no session does nothing."""
        if self._session is None:
            return
        uid = self._session.uid
        self._set_session(None)
        logger.info("User signed out", extra={"uid": uid})
