"""
Sessions and route guarding.

A Session is created at login and ended at logout or expiry. Components
that need the current user get the session passed in; there is no
process-wide "current user".
"""

import asyncio
from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import Iterable, Optional
from pydantic import ValidationError as PydanticValidationError

from models import Profile, Role, LoginCredentials, Registration, LOGIN_ROUTE
from .errors import CollaboratorError, from_pydantic


class Session:
    """
    One user's signed-in period.

    `loading` is true while the auth backend is still resolving the user.
    """

    def __init__(
        self,
        user: Optional[Profile] = None,
        ttl: Optional[timedelta] = None,
        loading: bool = False,
        now: Optional[datetime] = None,
    ):
        self.user = user
        self.loading = loading
        self.started_at = now or datetime.now()
        self.expires_at = self.started_at + ttl if ttl else None
        self.ended_at: Optional[datetime] = None

    @classmethod
    def anonymous(cls) -> "Session":
        return cls(user=None)

    @property
    def role(self) -> Optional[Role]:
        return self.user.role if self.user else None

    def is_active(self, now: Optional[datetime] = None) -> bool:
        """Signed in, not ended, not expired."""
        if self.user is None or self.ended_at is not None:
            return False
        if self.expires_at is not None and (now or datetime.now()) >= self.expires_at:
            return False
        return True

    def end(self, now: Optional[datetime] = None) -> None:
        """Close the session. Safe to call twice."""
        if self.ended_at is None:
            self.ended_at = now or datetime.now()

    def __repr__(self) -> str:
        who = self.user.email if self.user else "anonymous"
        return f"Session({who}, role={self.role.value if self.role else None})"


class AccessDecision:
    """Result of guarding a route: allow, wait for auth, or redirect."""

    def __init__(self, allowed: bool, redirect: Optional[str] = None, loading: bool = False):
        self.allowed = allowed
        self.redirect = redirect
        self.loading = loading

    def __eq__(self, other) -> bool:
        if not isinstance(other, AccessDecision):
            return NotImplemented
        return (self.allowed, self.redirect, self.loading) == (other.allowed, other.redirect, other.loading)

    def __repr__(self) -> str:
        return f"AccessDecision(allowed={self.allowed}, redirect={self.redirect!r}, loading={self.loading})"


ALLOW = AccessDecision(allowed=True)
WAIT = AccessDecision(allowed=False, loading=True)


def resolve_access(
    session: Session,
    allowed_roles: Optional[Iterable[Role]] = None,
    now: Optional[datetime] = None,
) -> AccessDecision:
    """
    Decide what happens when this session opens a role-gated screen.

    Unauthenticated goes to login, the wrong role goes to its own home.
    """
    if session.loading:
        return WAIT
    if not session.is_active(now):
        return AccessDecision(allowed=False, redirect=LOGIN_ROUTE)

    if allowed_roles is not None and session.role not in set(allowed_roles):
        return AccessDecision(allowed=False, redirect=session.user.home)
    return ALLOW


class AuthProvider(ABC):
    """Hosted authentication backend."""

    @abstractmethod
    async def sign_in(self, credentials: LoginCredentials) -> Profile:
        """Verify credentials and return the user's profile (role included)."""
        pass

    @abstractmethod
    async def sign_up(self, registration: Registration) -> Profile:
        """Create the account and its profile with the chosen role."""
        pass

    @abstractmethod
    async def sign_out(self, profile: Profile) -> None:
        """Invalidate the backend session."""
        pass


class SessionManager:
    """Creates and ends sessions against an AuthProvider."""

    def __init__(self, auth: AuthProvider, ttl: Optional[timedelta] = None):
        self._auth = auth
        self.ttl = ttl

    async def login(self, email: str, password: str) -> Session:
        """
        Validate the login form and open a session.

        Raises:
            ValidationError: malformed email or short password
            CollaboratorError: the auth backend rejected or failed
        """
        try:
            credentials = LoginCredentials(email=email, password=password)
        except PydanticValidationError as e:
            raise from_pydantic(e) from e

        try:
            profile = await self._auth.sign_in(credentials)
        except CollaboratorError:
            raise
        except Exception as e:
            raise CollaboratorError(f"Sign in failed: {e}") from e

        print(f"[AUTH] Signed in {profile.email} as {profile.role.value}")
        return Session(user=profile, ttl=self.ttl)

    async def logout(self, session: Session) -> None:
        """End the session locally even if the backend call fails."""
        user = session.user
        session.end()
        if user is None:
            return
        try:
            await self._auth.sign_out(user)
        except Exception as e:
            raise CollaboratorError(f"Sign out failed: {e}") from e
        print(f"[AUTH] Signed out {user.email}")

    async def register(
        self,
        email: str,
        password: str,
        confirm_password: str,
        full_name: str,
        role: Role = Role.EMPLOYEE,
    ) -> Session:
        """
        Validate the registration form, create the account and sign it in.

        Raises:
            ValidationError: bad email, short password or name, passwords differ
            CollaboratorError: the auth backend refused or failed
        """
        try:
            registration = Registration(
                email=email,
                password=password,
                confirm_password=confirm_password,
                full_name=full_name,
                role=role,
            )
        except PydanticValidationError as e:
            raise from_pydantic(e) from e

        try:
            profile = await self._auth.sign_up(registration)
        except CollaboratorError:
            raise
        except Exception as e:
            raise CollaboratorError(f"Sign up failed: {e}") from e

        print(f"[AUTH] Registered {profile.email} as {profile.role.value}")
        return Session(user=profile, ttl=self.ttl)


class RepositoryAuthProvider(AuthProvider):
    """
    Local mode: accounts are the stored profiles.

    Passwords are checked for shape by the forms but not stored, so any
    well-formed password signs in a known email.
    """

    def __init__(self, profiles):
        self._profiles = profiles

    async def sign_in(self, credentials: LoginCredentials) -> Profile:
        profile = await asyncio.to_thread(self._profiles.get_by_email, credentials.email)
        if profile is None:
            raise CollaboratorError("Invalid login credentials")
        return profile

    async def sign_up(self, registration: Registration) -> Profile:
        return await asyncio.to_thread(self._create, registration)

    def _create(self, registration: Registration) -> Profile:
        if self._profiles.get_by_email(registration.email) is not None:
            raise CollaboratorError(f"User already registered: {registration.email}")
        profile = Profile(
            full_name=registration.full_name,
            email=registration.email,
            role=registration.role,
        )
        return self._profiles.save(profile)

    async def sign_out(self, profile: Profile) -> None:
        pass
