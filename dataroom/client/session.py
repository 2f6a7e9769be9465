"""
Session state for the investor portal and the admin console.

Gating is an explicit state machine:

    ANONYMOUS --token verified, NDA pending--> PENDING_NDA
    ANONYMOUS --token verified, NDA accepted-> ACTIVE
    PENDING_NDA --NDA accepted--> ACTIVE
    any --logged out / 401--> ANONYMOUS

Sessions are plain objects handed to flows and screens; nothing here is global.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from dataroom.client.admin_api_client import AdminAPIClient
from dataroom.client.api_client import APIClient
from dataroom.client.errors import APIClientError
from dataroom.core.logging_config import logger

LOGIN_ROUTE = "/login"
NDA_ROUTE = "/nda"
DASHBOARD_ROUTE = "/dashboard"
ADMIN_LOGIN_ROUTE = "/admin/login"
ADMIN_HOME_ROUTE = "/admin"


class AuthState(str, Enum):
    ANONYMOUS = "anonymous"
    PENDING_NDA = "pending_nda"
    ACTIVE = "active"


class AuthEvent(str, Enum):
    TOKEN_VERIFIED_NDA_PENDING = "token_verified_nda_pending"
    TOKEN_VERIFIED_NDA_ACCEPTED = "token_verified_nda_accepted"
    NDA_ACCEPTED = "nda_accepted"
    LOGGED_OUT = "logged_out"
    UNAUTHORIZED = "unauthorized"


def transition(state: AuthState, event: AuthEvent) -> AuthState:
    if event == AuthEvent.TOKEN_VERIFIED_NDA_PENDING:
        return AuthState.PENDING_NDA
    if event == AuthEvent.TOKEN_VERIFIED_NDA_ACCEPTED:
        return AuthState.ACTIVE
    if event == AuthEvent.NDA_ACCEPTED:
        # Accepting the NDA needs a signed-in user
        return AuthState.ANONYMOUS if state == AuthState.ANONYMOUS else AuthState.ACTIVE
    if event in (AuthEvent.LOGGED_OUT, AuthEvent.UNAUTHORIZED):
        return AuthState.ANONYMOUS
    raise ValueError(f"Unhandled auth event: {event}")


@dataclass(frozen=True)
class Redirect:
    path: str


class AuthSession:
    """Investor session: current user, NDA status, loading and last error"""

    def __init__(self, client: APIClient):
        self.client = client
        self.state = AuthState.ANONYMOUS
        self.user: Optional[Dict[str, Any]] = None
        self.nda_status: Optional[Dict[str, Any]] = None
        self.loading = False
        self.error: Optional[str] = None

    def _apply(self, event: AuthEvent) -> AuthState:
        previous = self.state
        self.state = transition(self.state, event)
        if previous != self.state:
            logger.debug(f"Auth state {previous.value} -> {self.state.value} ({event.value})")
        return self.state

    def _reset(self, event: AuthEvent) -> None:
        self.client.clear_token()
        self.user = None
        self.nda_status = None
        self._apply(event)

    @property
    def nda_accepted(self) -> bool:
        return bool(self.nda_status and self.nda_status.get("accepted"))

    @property
    def home_route(self) -> str:
        if self.state == AuthState.ACTIVE:
            return DASHBOARD_ROUTE
        if self.state == AuthState.PENDING_NDA:
            return NDA_ROUTE
        return LOGIN_ROUTE

    async def load(self) -> AuthState:
        """Resolve the stored token into a user and NDA status"""
        if not self.client.is_authenticated:
            self.user = None
            self.nda_status = None
            self.state = AuthState.ANONYMOUS
            return self.state

        self.loading = True
        self.error = None
        try:
            self.user = await self.client.get_current_user()
            self.nda_status = await self.client.check_nda_status()
        except APIClientError as e:
            if e.is_unauthorized:
                self._reset(AuthEvent.UNAUTHORIZED)
            else:
                self.error = e.message
            return self.state
        finally:
            self.loading = False

        if self.nda_accepted:
            return self._apply(AuthEvent.TOKEN_VERIFIED_NDA_ACCEPTED)
        return self._apply(AuthEvent.TOKEN_VERIFIED_NDA_PENDING)

    async def login(self, token: str) -> AuthState:
        self.client.set_token(token)
        return await self.load()

    def logout(self) -> None:
        self._reset(AuthEvent.LOGGED_OUT)

    async def refresh_user(self) -> Optional[Dict[str, Any]]:
        try:
            self.user = await self.client.get_current_user()
        except APIClientError as e:
            if e.is_unauthorized:
                self._reset(AuthEvent.UNAUTHORIZED)
            else:
                self.error = e.message
        return self.user

    async def refresh_nda_status(self) -> Optional[Dict[str, Any]]:
        try:
            self.nda_status = await self.client.check_nda_status()
        except APIClientError as e:
            if e.is_unauthorized:
                self._reset(AuthEvent.UNAUTHORIZED)
            else:
                self.error = e.message
            return self.nda_status

        if self.nda_accepted:
            self._apply(AuthEvent.NDA_ACCEPTED)
        return self.nda_status

    def require_auth(self) -> Optional[Redirect]:
        if self.state == AuthState.ANONYMOUS:
            return Redirect(LOGIN_ROUTE)
        return None

    def require_nda(self) -> Optional[Redirect]:
        redirect = self.require_auth()
        if redirect:
            return redirect
        if self.state == AuthState.PENDING_NDA:
            return Redirect(NDA_ROUTE)
        return None


class AdminSession:
    """Admin console session, independent of the investor one"""

    def __init__(self, client: AdminAPIClient):
        self.client = client
        self.admin: Optional[Dict[str, Any]] = None
        self.loading = False
        self.error: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return self.admin is not None

    @property
    def is_super_admin(self) -> bool:
        return bool(self.admin and self.admin.get("role") == "super_admin")

    async def load(self) -> Optional[Dict[str, Any]]:
        if not self.client.is_authenticated:
            self.admin = None
            return None

        self.loading = True
        self.error = None
        try:
            self.admin = await self.client.get_current_admin()
        except APIClientError as e:
            if e.is_unauthorized:
                self.client.clear_token()
                self.admin = None
            else:
                self.error = e.message
        finally:
            self.loading = False
        return self.admin

    async def login(self, email: str, password: str) -> Dict[str, Any]:
        data = await self.client.login(email, password)
        self.admin = data.get("user") or await self.client.get_current_admin()
        return self.admin

    def logout(self) -> None:
        self.client.clear_token()
        self.admin = None

    def require_admin(self) -> Optional[Redirect]:
        if not self.is_authenticated:
            return Redirect(ADMIN_LOGIN_ROUTE)
        return None
