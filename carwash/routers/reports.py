"""
Daily report routes.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request

from carwash.auth import AuthContext, require_auth
from carwash.client import BackendError
from carwash.reports import REPORT_PERIODS, build_daily_reports, normalize_period, summarize
from carwash.templating import render
from carwash.toasts import error

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/dashboard/reports", tags=["reports"])


@router.get("")
async def get_reports(
    request: Request,
    period: Optional[str] = None,
    auth: AuthContext = Depends(require_auth)
):
    """
    Revenue and service figures per day for the selected period.
    """
    days = normalize_period(period)
    reports = []
    try:
        payments = await auth.backend.list_payments()
        services = await auth.backend.list_services()
        cars = await auth.backend.list_cars()
        reports = build_daily_reports(payments, services, cars, days)
    except BackendError as exc:
        logger.error("Failed to fetch reports: %s", exc)
        auth.toast(error(exc.describe("Failed to fetch reports")))

    context = {
        "reports": reports,
        "summary": summarize(reports),
        "period": days,
        "periods": REPORT_PERIODS,
    }
    return render(request, "reports.html", auth, context)
