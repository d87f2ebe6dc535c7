"""
Active session management routes.
"""
from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse

from carwash.auth import AuthContext, require_auth
from carwash.templating import render

router = APIRouter(prefix="/dashboard/sessions", tags=["sessions"])

PAGE = "/dashboard/sessions"


@router.get("")
async def get_sessions(request: Request, auth: AuthContext = Depends(require_auth)):
    """
    List the user's active sessions across devices.
    """
    sessions = await auth.fetch_sessions()
    return render(request, "sessions.html", auth, {"sessions": sessions})


@router.post("/logout-all")
async def logout_all_sessions(auth: AuthContext = Depends(require_auth)):
    """
    End every session, including this one.
    """
    if await auth.logout_all_sessions():
        return RedirectResponse("/", status_code=303)
    return RedirectResponse(PAGE, status_code=303)


@router.post("/{session_id}/logout")
async def logout_session(session_id: str, auth: AuthContext = Depends(require_auth)):
    """
    End a single session.
    """
    await auth.logout_session(session_id)
    return RedirectResponse(PAGE, status_code=303)
