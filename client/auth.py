import httpx
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional
from client.store import error_detail
from schemas import UserResponse

logger = logging.getLogger(__name__)

UNEXPECTED_ERROR = "An unexpected error occurred"

INITIAL_SESSION = "INITIAL_SESSION"
SIGNED_IN = "SIGNED_IN"
SIGNED_OUT = "SIGNED_OUT"


@dataclass
class AuthSession:
    access_token: str
    user: UserResponse


AuthListener = Callable[[str, Optional[AuthSession]], None]


class AuthGate:
    """
    Holds the current session and gates everything behind it

    Submits are one-shot: no retry, and a submit while another one is
    in flight is ignored. Failures leave a single message in `error`.
    """

    def __init__(self, http: httpx.Client):
        self._http = http
        self._listeners: List[AuthListener] = []
        self.session: Optional[AuthSession] = None
        self.loading = True
        self.error = ""

    @property
    def user(self) -> Optional[UserResponse]:
        return self.session.user if self.session else None

    def on_auth_state_change(self, callback: AuthListener) -> Callable[[], None]:
        """Subscribe to identity changes; returns the unsubscribe function"""
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def _emit(self, event: str) -> None:
        for listener in list(self._listeners):
            listener(event, self.session)

    def initialize(self, access_token: Optional[str] = None) -> None:
        """Resolve a stored token (if any) into the initial session"""
        self.session = None
        if access_token:
            try:
                response = self._http.get(
                    "/api/auth/user",
                    headers={"Authorization": f"Bearer {access_token}"}
                )
            except httpx.HTTPError:
                logger.exception("Could not restore session")
            else:
                if response.is_success:
                    user = UserResponse.model_validate(response.json()["data"])
                    self.session = AuthSession(access_token=access_token, user=user)
                else:
                    logger.info("Stored session rejected: %s", error_detail(response))
        self.loading = False
        self._emit(INITIAL_SESSION)

    def _submit(self, path: str, email: str, password: str) -> bool:
        if self.loading:
            return False

        self.loading = True
        self.error = ""
        try:
            response = self._http.post(path, json={"email": email, "password": password})
            if not response.is_success:
                self.error = error_detail(response)
                return False
            data = response.json()["data"]
            self.session = AuthSession(
                access_token=data["access_token"],
                user=UserResponse.model_validate(data["user"]),
            )
        except (httpx.HTTPError, ValueError, KeyError):
            logger.exception("Authentication request failed")
            self.error = UNEXPECTED_ERROR
            return False
        finally:
            self.loading = False

        self._emit(SIGNED_IN)
        return True

    def sign_in(self, email: str, password: str) -> bool:
        return self._submit("/api/auth/signin", email, password)

    def sign_up(self, email: str, password: str) -> bool:
        return self._submit("/api/auth/signup", email, password)

    def sign_out(self) -> None:
        """Revoke the token server side and drop the local session"""
        if not self.session:
            return
        try:
            response = self._http.post(
                "/api/auth/signout",
                headers={"Authorization": f"Bearer {self.session.access_token}"}
            )
            if not response.is_success:
                logger.warning("Sign-out rejected: %s", error_detail(response))
        except httpx.HTTPError:
            logger.exception("Sign-out request failed")
        self.session = None
        self._emit(SIGNED_OUT)
