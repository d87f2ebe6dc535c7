"""
Admin user management routes.
"""
from fastapi import APIRouter, Depends, Request

from carwash.auth import AuthContext, require_admin
from carwash.client import BackendError
from carwash.templating import render
from carwash.toasts import error

router = APIRouter(prefix="/dashboard/admin/users", tags=["admin"])


@router.get("")
async def get_users(request: Request, auth: AuthContext = Depends(require_admin)):
    """
    List every registered user.
    """
    try:
        users = await auth.backend.list_users()
    except BackendError as exc:
        users = []
        auth.toast(error(exc.describe("Failed to fetch users")))

    return render(request, "admin_users.html", auth, {"users": users})


@router.get("/{user_id}")
async def get_user_details(user_id: str, request: Request, auth: AuthContext = Depends(require_admin)):
    """
    Everything recorded for one user: cars, packages, services, payments and sessions.
    """
    try:
        details = await auth.backend.user_details(user_id)
    except BackendError as exc:
        details = None
        auth.toast(error(exc.describe("Failed to fetch user details")))

    return render(request, "admin_user_detail.html", auth, {"details": details})
