"""
Landing page, sign-in, registration and Google OAuth routes.
"""
import secrets
from typing import Optional

import httpx
from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import RedirectResponse

from carwash.auth import AuthContext, AuthError, get_auth, get_http_transport, get_optional_user, safe_redirect
from carwash.config import get_settings
from carwash.google_auth import GoogleAuthError, GoogleOAuth
from carwash.templating import render
from carwash.toasts import error

router = APIRouter(tags=["auth"])

MIN_PASSWORD_LENGTH = 6


def password_strength(password: str) -> str:
    """Rough strength label shown under the password field."""
    if len(password) >= MIN_PASSWORD_LENGTH:
        return "strong"
    if len(password) >= 3:
        return "medium"
    return "weak"


def validate_registration(password: str, confirm_password: str) -> Optional[str]:
    """Error message for an invalid registration form, or None."""
    if password != confirm_password:
        return "Passwords do not match"
    if len(password) < MIN_PASSWORD_LENGTH:
        return f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
    return None


def get_google_oauth(
    transport: Optional[httpx.AsyncBaseTransport] = Depends(get_http_transport),
) -> GoogleOAuth:
    settings = get_settings()
    return GoogleOAuth(
        settings.google_client_id,
        settings.google_client_secret,
        settings.google_redirect_uri,
        timeout=settings.api_timeout_seconds,
        transport=transport,
    )


def _see_other(url: str) -> RedirectResponse:
    return RedirectResponse(url, status_code=303)


@router.get("/")
async def home(request: Request, auth: AuthContext = Depends(get_optional_user)):
    """
    Landing page.
    """
    return render(request, "home.html", auth)


@router.get("/auth/login")
async def login_page(
    request: Request,
    redirect: Optional[str] = None,
    auth: AuthContext = Depends(get_optional_user),
):
    """
    Show the sign-in form.
    """
    if auth.user:
        return _see_other(safe_redirect(redirect))
    return render(request, "login.html", auth, {"redirect": redirect or "", "username": "", "error": None})


@router.post("/auth/login")
async def login(
    request: Request,
    username: str = Form(...),
    password: str = Form(...),
    redirect: str = Form(""),
    auth: AuthContext = Depends(get_auth, scope="function"),
):
    """
    Sign in with username and password.
    """
    try:
        await auth.login(username, password)
    except AuthError as exc:
        context = {"redirect": redirect, "username": username, "error": exc.message}
        return render(request, "login.html", auth, context, status_code=400)
    return _see_other(safe_redirect(redirect))


@router.get("/auth/register")
async def register_page(request: Request, auth: AuthContext = Depends(get_optional_user)):
    """
    Show the registration form.
    """
    if auth.user:
        return _see_other("/dashboard")
    return render(request, "register.html", auth, {"username": "", "error": None, "strength": None})


@router.post("/auth/register")
async def register(
    request: Request,
    username: str = Form(...),
    password: str = Form(...),
    confirm_password: str = Form(..., alias="confirmPassword"),
    auth: AuthContext = Depends(get_auth, scope="function"),
):
    """
    Create an account and sign in.
    """
    message = validate_registration(password, confirm_password)
    if message is None:
        try:
            await auth.register(username, password)
        except AuthError as exc:
            message = exc.message
        else:
            return _see_other("/dashboard")

    context = {"username": username, "error": message, "strength": password_strength(password)}
    return render(request, "register.html", auth, context, status_code=400)


@router.post("/auth/logout")
async def logout(auth: AuthContext = Depends(get_auth, scope="function")):
    """
    Sign out and return to the landing page.
    """
    await auth.logout()
    return _see_other("/")


@router.get("/auth/google")
async def google_start(
    auth: AuthContext = Depends(get_auth, scope="function"),
    google: GoogleOAuth = Depends(get_google_oauth),
):
    """
    Send the browser to Google's consent screen.
    """
    state = secrets.token_urlsafe(16)
    try:
        url = google.authorization_url(state)
    except GoogleAuthError as exc:
        auth.toast(error(exc.message))
        return _see_other("/auth/login")
    auth.web_session.oauth_state = state
    return _see_other(url)


@router.get("/auth/google/callback")
async def google_callback(
    code: Optional[str] = None,
    state: Optional[str] = None,
    auth: AuthContext = Depends(get_auth, scope="function"),
    google: GoogleOAuth = Depends(get_google_oauth),
):
    """
    Finish Google sign-in after the consent screen.
    """
    expected = auth.web_session.oauth_state
    auth.web_session.oauth_state = None
    if not code or not state or not expected or not secrets.compare_digest(state, expected):
        auth.toast(error("Google login failed"))
        return _see_other("/auth/login")

    try:
        access_token = await google.exchange_code(code)
        await auth.google_login(access_token)
    except (GoogleAuthError, AuthError) as exc:
        auth.toast(error(exc.message))
        return _see_other("/auth/login")
    return _see_other("/dashboard")


@router.post("/auth/google")
async def google_credential(
    credential: str = Form(...),
    auth: AuthContext = Depends(get_auth, scope="function"),
    google: GoogleOAuth = Depends(get_google_oauth),
):
    """
    Sign in with an ID token from a Google Identity Services button.
    """
    try:
        await google.verify_id_token(credential)
        await auth.google_login(credential)
    except (GoogleAuthError, AuthError) as exc:
        auth.toast(error(exc.message))
        return _see_other("/auth/login")
    return _see_other("/dashboard")
