"""
Signed-in state for the admin side of the client.

One SessionProvider is owned by the top level of an app. Views read
`current_user` and subscribe to be told about sign-in and sign-out;
the callable returned by `subscribe` removes the listener.
"""
import logging
from typing import Callable, List, Optional

import requests

from thisorthat.core.auth import AuthUser
from thisorthat.core.config import settings
from thisorthat.core.exceptions import AuthRequired, BackendError

logger = logging.getLogger(__name__)

Listener = Callable[[Optional[AuthUser]], None]


class SessionProvider:

    def __init__(self, base_url: Optional[str] = None, anon_key: Optional[str] = None,
                 http=None, timeout: float = 10.0):
        self.base_url = (base_url if base_url is not None else settings.SUPABASE_URL).rstrip("/")
        self.anon_key = anon_key if anon_key is not None else settings.SUPABASE_ANON_KEY
        self.http = http or requests.Session()
        self.timeout = timeout
        self._user: Optional[AuthUser] = None
        self._access_token: Optional[str] = None
        self._listeners: List[Listener] = []

    @property
    def current_user(self) -> Optional[AuthUser]:
        return self._user

    @property
    def access_token(self) -> Optional[str]:
        return self._access_token

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self._user)

    def set_session(self, access_token: Optional[str], user: Optional[AuthUser]) -> None:
        self._access_token = access_token
        self._user = user
        logger.info(f"Auth state changed: {'signed in as ' + user.id if user else 'signed out'}")
        self._notify()

    def sign_in(self, email: str, password: str) -> AuthUser:
        """Password sign-in against the hosted auth provider."""
        try:
            response = self.http.post(
                f"{self.base_url}/auth/v1/token?grant_type=password",
                json={"email": email, "password": password},
                headers={"apikey": self.anon_key},
                timeout=self.timeout
            )
        except requests.RequestException as e:
            logger.error(f"Sign-in request failed: {e}")
            raise BackendError("Auth provider unavailable") from e

        data = response.json() if response.content else {}
        if response.status_code in (400, 401, 403):
            message = data.get("error_description") or data.get("msg") or "Invalid login credentials"
            raise AuthRequired(message)
        if response.status_code != 200:
            raise BackendError(f"Sign-in failed with status {response.status_code}")

        user_data = data.get("user") or {}
        if not data.get("access_token") or not user_data.get("id"):
            raise BackendError("Sign-in response did not include a session")
        user = AuthUser(id=str(user_data["id"]), email=user_data.get("email"))
        self.set_session(data["access_token"], user)
        return user

    def sign_out(self) -> None:
        token = self._access_token
        if token:
            try:
                self.http.post(
                    f"{self.base_url}/auth/v1/logout",
                    headers={"apikey": self.anon_key, "Authorization": f"Bearer {token}"},
                    timeout=self.timeout
                )
            except requests.RequestException as e:
                # The local session is dropped either way
                logger.warning(f"Remote sign-out failed: {e}")
        self.set_session(None, None)

    def close(self) -> None:
        """Drop all listeners; call when the owning view goes away."""
        self._listeners.clear()
