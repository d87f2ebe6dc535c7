"""
Activity feed route.
"""
from fastapi import APIRouter, Depends, Query, Request

from carwash.auth import AuthContext, require_auth
from carwash.client import BackendError
from carwash.config import get_settings
from carwash.pagination import paginate
from carwash.templating import render
from carwash.toasts import error

router = APIRouter(prefix="/dashboard/activity", tags=["activity"])


@router.get("")
async def get_activity(
    request: Request,
    page: int = Query(1),
    auth: AuthContext = Depends(require_auth)
):
    """
    Paginated activity feed, newest first.
    """
    try:
        activities = await auth.backend.list_activities()
    except BackendError as exc:
        activities = []
        auth.toast(error(exc.describe("Failed to fetch activities")))

    activities.sort(key=lambda item: item.created_at, reverse=True)
    current = paginate(activities, page, get_settings().activities_per_page)
    return render(request, "activity.html", auth, {"page": current})
