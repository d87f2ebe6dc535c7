"""
One-shot notifications shown on the next rendered page.
"""
from dataclasses import asdict, dataclass
from typing import List

from carwash.models import WebSession

DEFAULT = "default"
DESTRUCTIVE = "destructive"


@dataclass
class Toast:
    title: str
    description: str
    variant: str = DEFAULT


def push_toast(web_session: WebSession, toast: Toast) -> None:
    # JSON columns only notice reassignment
    web_session.toasts = [*(web_session.toasts or []), asdict(toast)]


def pop_toasts(web_session: WebSession) -> List[Toast]:
    pending = [Toast(**item) for item in web_session.toasts or []]
    if pending:
        web_session.toasts = []
    return pending


def success(description: str) -> Toast:
    return Toast("Success", description)


def error(description: str) -> Toast:
    return Toast("Error", description, DESTRUCTIVE)
