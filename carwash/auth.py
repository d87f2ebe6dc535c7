"""
Authentication context and route guards.

Every request gets an `AuthContext` bound to the browser's web session. It
keeps the backend auth cookies between requests and exposes the account
operations the pages need. `require_auth` and `require_admin` guard pages.
"""
import logging
from typing import Awaitable, Callable, List, Optional, TypeVar
from urllib.parse import quote

import httpx
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from carwash.client import BackendClient, BackendError, Upload
from carwash.config import get_settings
from carwash.database import get_db
from carwash.models import WebSession
from carwash.schemas import ProfileUpdate, Session, User
from carwash.toasts import Toast, error, pop_toasts, push_toast, success
from carwash.web_sessions import load_web_session, utcnow

logger = logging.getLogger(__name__)

T = TypeVar("T")


class AuthError(Exception):
    """An account operation failed; the message is shown to the user."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AuthenticationRequired(Exception):
    """Raised by guards when nobody is signed in."""

    def __init__(self, next_path: str):
        super().__init__(next_path)
        self.next_path = next_path

    @property
    def login_url(self) -> str:
        return f"/auth/login?redirect={quote(self.next_path, safe='')}"


class AdminRequired(Exception):
    """Raised by guards when a non-admin opens an admin page."""


def safe_redirect(target: Optional[str], default: str = "/dashboard") -> str:
    """Accept only local paths as post-login redirect targets."""
    if target and target.startswith("/") and not target.startswith("//"):
        return target
    return default


class AuthContext:
    """Signed-in user state and account operations for one request."""

    def __init__(self, db: AsyncSession, web_session: WebSession, backend: BackendClient):
        self.db = db
        self.web_session = web_session
        self.backend = backend
        self.user: Optional[User] = None
        self.sessions: List[Session] = []

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def is_admin(self) -> bool:
        return self.user is not None and self.user.is_admin

    def toast(self, toast: Toast) -> None:
        push_toast(self.web_session, toast)

    def pop_toasts(self) -> List[Toast]:
        return pop_toasts(self.web_session)

    async def fetch_list(self, fetch: Callable[[], Awaitable[List[T]]], fallback: str) -> List[T]:
        """Run one list fetch; on failure toast and fall back to an empty list."""
        try:
            return await fetch()
        except BackendError as exc:
            self.toast(error(exc.describe(fallback)))
            return []

    async def check_auth(self) -> Optional[User]:
        """Load the current user from the backend; None when signed out."""
        if not self.backend.cookies:
            self.user = None
            return None
        try:
            self.user = await self.backend.me()
        except BackendError as exc:
            logger.debug("Session check failed: %s", exc)
            self.user = None
        return self.user

    async def login(self, username: str, password: str) -> User:
        try:
            await self.backend.login(username, password)
        except BackendError as exc:
            raise AuthError(exc.describe("Login failed")) from exc
        logger.info("User %s signed in", username)
        return await self._require_user("Login failed")

    async def register(self, username: str, password: str) -> User:
        try:
            await self.backend.register(username, password)
        except BackendError as exc:
            raise AuthError(exc.describe("Registration failed")) from exc
        logger.info("User %s registered", username)
        return await self._require_user("Registration failed")

    async def google_login(self, credential: str) -> User:
        try:
            await self.backend.google_login(credential)
        except BackendError as exc:
            raise AuthError(exc.describe("Google login failed")) from exc
        user = await self._require_user("Google login failed")
        logger.info("User %s signed in with Google", user.username)
        return user

    async def _require_user(self, fallback: str) -> User:
        user = await self.check_auth()
        if user is None:
            raise AuthError(fallback)
        return user

    async def logout(self) -> None:
        try:
            await self.backend.logout()
        except BackendError as exc:
            logger.warning("Logout error: %s", exc)
        self._forget()

    def _forget(self) -> None:
        if self.user:
            logger.info("User %s signed out", self.user.username)
        self.user = None
        self.sessions = []
        self.backend.clear_cookies()

    async def update_profile(self, username: str, email: Optional[str], full_name: Optional[str],
                             profile_image: Optional[Upload] = None) -> User:
        fields = ProfileUpdate(username=username, email=email, full_name=full_name).model_dump(by_alias=True)
        try:
            self.user = await self.backend.edit_profile(fields, profile_image)
        except BackendError as exc:
            raise AuthError(exc.describe("Profile update failed")) from exc
        return self.user

    async def fetch_sessions(self) -> List[Session]:
        try:
            self.sessions = await self.backend.list_sessions()
        except BackendError as exc:
            self.sessions = []
            self.toast(error(exc.describe("Failed to fetch sessions")))
        return self.sessions

    async def logout_session(self, session_id: str) -> None:
        try:
            await self.backend.revoke_session(session_id)
        except BackendError as exc:
            self.toast(error(exc.describe("Failed to logout session")))
        else:
            logger.info("Session %s revoked", session_id)
            self.toast(success("Session logged out successfully"))
        await self.fetch_sessions()

    async def logout_all_sessions(self) -> bool:
        """Revoke every session of the user, this one included."""
        try:
            await self.backend.revoke_all_sessions()
        except BackendError as exc:
            self.toast(error(exc.describe("Failed to logout all sessions")))
            return False
        self._forget()
        self.toast(success("All sessions logged out successfully"))
        return True

    async def save(self) -> None:
        """Persist the backend cookies and pending toasts."""
        self.web_session.backend_cookies = self.backend.cookie_state()
        self.web_session.last_seen_at = utcnow()
        await self.db.commit()


def get_http_transport() -> Optional[httpx.AsyncBaseTransport]:
    """Transport for outgoing HTTP calls; overridden in tests."""
    return None


async def get_auth(
    request: Request,
    db: AsyncSession = Depends(get_db),
    transport: Optional[httpx.AsyncBaseTransport] = Depends(get_http_transport),
):
    """Build the request's auth context.

    Declared with function scope by its dependents so the web session is
    committed before the response goes out.
    """
    settings = get_settings()
    web_session = await load_web_session(db, request.cookies.get(settings.session_cookie_name), settings)
    request.state.session_token = web_session.token

    backend = BackendClient(
        settings.api_url,
        cookies=web_session.backend_cookies,
        timeout=settings.api_timeout_seconds,
        transport=transport,
    )
    auth = AuthContext(db, web_session, backend)
    try:
        yield auth
    finally:
        await auth.save()
        await backend.aclose()


async def get_optional_user(auth: AuthContext = Depends(get_auth, scope="function")) -> AuthContext:
    """Resolve the user without requiring one."""
    await auth.check_auth()
    return auth


async def require_auth(request: Request, auth: AuthContext = Depends(get_optional_user)) -> AuthContext:
    """Guard for pages that need a signed-in user."""
    if auth.user is None:
        next_path = request.url.path
        if request.url.query:
            next_path = f"{next_path}?{request.url.query}"
        raise AuthenticationRequired(next_path)
    return auth


async def require_admin(auth: AuthContext = Depends(require_auth)) -> AuthContext:
    """Guard for admin-only pages."""
    if not auth.is_admin:
        raise AdminRequired()
    return auth
