"""
Daily business reports and dashboard figures derived from backend records.
"""
from collections import Counter
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Iterable, List, Optional, Sequence

from carwash.schemas import Activity, Car, Payment, Service, User

REPORT_PERIODS = (7, 14, 30)
NO_PACKAGE = "—"


@dataclass
class DailyReport:
    day: date
    total_revenue: float = 0.0
    total_services: int = 0
    total_cars: int = 0
    new_customers: int = 0
    popular_package: str = NO_PACKAGE
    revenue_change: float = 0.0
    services_change: float = 0.0


@dataclass
class ReportSummary:
    total_revenue: float
    total_services: int
    new_customers: int
    avg_revenue_change: float


@dataclass
class DashboardStats:
    total_cars: int
    total_packages: int
    total_payments: int
    total_users: Optional[int] = None
    recent_activities: List[Activity] = field(default_factory=list)


def percent_change(current: float, previous: float) -> float:
    """Change from previous to current in percent."""
    if previous == 0:
        return 0.0 if current == 0 else 100.0
    return (current - previous) / previous * 100.0


def _day_figures(day: date, payments: Sequence[Payment], services: Sequence[Service],
                 cars: Sequence[Car]) -> DailyReport:
    revenue = sum(
        p.amount_paid for p in payments
        if p.day == day and p.status != "failed"
    )
    todays = [s for s in services if s.day == day]
    serviced = {s.car.id or s.car.plate_number for s in todays if s.car}
    created = [c for c in cars if c.created_at and c.created_at.date() == day]

    names = Counter(s.package.package_name for s in todays if s.package and s.package.package_name)
    popular = names.most_common(1)[0][0] if names else NO_PACKAGE

    return DailyReport(
        day=day,
        total_revenue=float(revenue),
        total_services=len(todays),
        total_cars=len(serviced),
        new_customers=len(created),
        popular_package=popular,
    )


def build_daily_reports(payments: Sequence[Payment], services: Sequence[Service],
                        cars: Sequence[Car], days: int, today: Optional[date] = None) -> List[DailyReport]:
    """One report per day for the last `days` days, newest first."""
    today = today or date.today()
    reports = []
    # One extra day so the oldest report has a baseline
    previous = _day_figures(today - timedelta(days=days), payments, services, cars)
    for offset in range(days - 1, -1, -1):
        report = _day_figures(today - timedelta(days=offset), payments, services, cars)
        report.revenue_change = percent_change(report.total_revenue, previous.total_revenue)
        report.services_change = percent_change(report.total_services, previous.total_services)
        reports.append(report)
        previous = report
    reports.reverse()
    return reports


def summarize(reports: Sequence[DailyReport]) -> ReportSummary:
    if not reports:
        return ReportSummary(0.0, 0, 0, 0.0)
    return ReportSummary(
        total_revenue=sum(r.total_revenue for r in reports),
        total_services=sum(r.total_services for r in reports),
        new_customers=sum(r.new_customers for r in reports),
        avg_revenue_change=sum(r.revenue_change for r in reports) / len(reports),
    )


def dashboard_stats(cars: Sequence[Car], packages: Sequence, payments: Sequence[Payment],
                    activities: Iterable[Activity], users: Optional[Sequence[User]] = None) -> DashboardStats:
    return DashboardStats(
        total_cars=len(cars),
        total_packages=len(packages),
        total_payments=len(payments),
        total_users=len(users) if users is not None else None,
        recent_activities=list(activities)[:5],
    )


def normalize_period(value: Optional[str]) -> int:
    """Report period in days; anything unexpected falls back to 7."""
    try:
        period = int(value) if value is not None else REPORT_PERIODS[0]
    except ValueError:
        return REPORT_PERIODS[0]
    return period if period in REPORT_PERIODS else REPORT_PERIODS[0]


__all__ = [
    "DailyReport", "ReportSummary", "DashboardStats", "REPORT_PERIODS",
    "build_daily_reports", "summarize", "dashboard_stats", "normalize_period",
    "percent_change",
]
