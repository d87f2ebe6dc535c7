"""
Dashboard overview route.
"""
import logging

from fastapi import APIRouter, Depends, Request

from carwash.auth import AuthContext, require_auth
from carwash.client import BackendError
from carwash.reports import dashboard_stats
from carwash.templating import render

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("")
async def get_dashboard(request: Request, auth: AuthContext = Depends(require_auth)):
    """
    Totals for cars, packages, payments and users plus the latest activity.
    """
    stats = None
    try:
        cars = await auth.backend.list_cars()
        packages = await auth.backend.list_packages()
        payments = await auth.backend.list_payments()
        activities = await auth.backend.list_activities()
        users = await auth.backend.list_users() if auth.is_admin else None
        stats = dashboard_stats(cars, packages, payments, activities, users)
    except BackendError as exc:
        logger.error("Failed to fetch dashboard stats: %s", exc)

    return render(request, "dashboard.html", auth, {"stats": stats})
