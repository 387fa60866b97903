# clinic_portal/client/auth_session.py
"""Signed-in identity of one client session, remote or demo."""

import logging
from typing import Any, Dict, Optional

from pydantic import BaseModel

from clinic_portal.client.api_client import ClinicApiClient
from clinic_portal.client.demo_mode import DemoModeController
from clinic_portal.client.errors import DataAccessError
from clinic_portal.models.records import DemoUser, UserProfile

logger = logging.getLogger(__name__)


class AuthResult(BaseModel):
    success: bool
    user: Optional[UserProfile] = None
    error: Optional[str] = None
    demo: bool = False


def _profile_from_demo(user: DemoUser) -> UserProfile:
    return UserProfile.model_validate(user.to_record())


class AuthSession:
    """
    Holds the bearer token and profile of the current user.

    ``bootstrap`` and ``enter_offline_mode`` are the only places that switch
    the session into demo mode without an explicit demo login. Leaving demo
    mode takes a logout followed by a successful remote login.
    """

    def __init__(self, api: ClinicApiClient, demo: DemoModeController, token: Optional[str] = None):
        self.api = api
        self.demo = demo
        self.token = token
        self.user: Optional[UserProfile] = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def _use_demo_user(self, user: DemoUser) -> UserProfile:
        self.token = None
        self.user = _profile_from_demo(user)
        return self.user

    async def bootstrap(self) -> Optional[UserProfile]:
        """
        Restore the session on start-up.

        A stored demo identity wins. Otherwise the token, when present, is
        resolved to a profile; if that fails for any reason the session
        falls back to demo mode and keeps whatever demo identity exists.
        """
        if self.demo.is_demo():
            demo_user = self.demo.get_user()
            if demo_user:
                return self._use_demo_user(demo_user)

        if not self.token:
            return None

        try:
            profile = await self.api.get_profile(self.token)
            self.user = UserProfile.model_validate(profile)
        except (DataAccessError, ValueError) as exc:
            logger.warning("Could not load profile (%s); switching to demo mode", exc)
            self.enter_offline_mode()
            self.token = None
            demo_user = self.demo.get_user()
            self.user = _profile_from_demo(demo_user) if demo_user else None
        return self.user

    def enter_offline_mode(self) -> None:
        self.demo.enable()

    async def login(self, email: str, password: str) -> AuthResult:
        """
        Remote login; demo credentials (or an unreachable API) fall back to a demo login.

        In demo mode only demo accounts are tried, so leaving demo mode takes
        ``logout`` first.
        """
        if self.demo.is_demo():
            return self._demo_login(email, password)

        try:
            result = await self.api.login(email, password)
        except DataAccessError as exc:
            logger.info("Remote login failed (%s); trying demo accounts", exc.message)
            demo_result = self._demo_login(email, password)
            if demo_result.success:
                return demo_result
            message = demo_result.error if exc.is_network else exc.message
            return AuthResult(success=False, error=message or "Login failed")

        # Drop a stale demo identity; the demo datasets are kept
        if self.demo.get_user() is not None:
            self.demo.disable(clear_data=False)
        self.token = result["accessToken"]
        user = result.get("user") or await self.api.get_profile(self.token)
        self.user = UserProfile.model_validate(user)
        return AuthResult(success=True, user=self.user)

    def _demo_login(self, email: str, password: str) -> AuthResult:
        result = self.demo.demo_login(email, password)
        if not result.success:
            return AuthResult(success=False, error=result.error)
        return AuthResult(success=True, user=self._use_demo_user(result.user), demo=True)

    async def signup(self, signup_data: Dict[str, Any]) -> AuthResult:
        """Register remotely and log in; an unreachable API creates a demo account instead."""
        try:
            await self.api.signup(signup_data)
        except DataAccessError as exc:
            if not exc.is_network:
                return AuthResult(success=False, error=exc.message)
            logger.warning("Signup service unreachable (%s); creating a demo account", exc.message)
            result = self.demo.demo_signup(signup_data)
            return AuthResult(success=True, user=self._use_demo_user(result.user), demo=True)
        return await self.login(signup_data["email"], signup_data["password"])

    def logout(self) -> None:
        if self.demo.is_demo():
            # Demo datasets stay so demo-signup accounts can log in again
            self.demo.disable(clear_data=False)
        self.token = None
        self.user = None
