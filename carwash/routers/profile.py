"""
Profile routes.
"""
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from fastapi.responses import RedirectResponse

from carwash.auth import AuthContext, AuthError, require_auth
from carwash.forms import read_upload
from carwash.templating import render
from carwash.toasts import error, success

router = APIRouter(prefix="/dashboard/profile", tags=["profile"])


@router.get("")
async def get_profile(request: Request, auth: AuthContext = Depends(require_auth)):
    """
    Show the profile form prefilled from the signed-in user.
    """
    return render(request, "profile.html", auth)


@router.post("")
async def update_profile(
    username: str = Form(...),
    email: str = Form(""),
    full_name: str = Form("", alias="fullName"),
    profile: Optional[UploadFile] = File(None),
    auth: AuthContext = Depends(require_auth)
):
    """
    Save profile changes and an optional new profile image.
    """
    try:
        await auth.update_profile(username, email, full_name, await read_upload(profile))
        auth.toast(success("Profile updated successfully"))
    except AuthError as exc:
        auth.toast(error(exc.message))

    return RedirectResponse("/dashboard/profile", status_code=303)
