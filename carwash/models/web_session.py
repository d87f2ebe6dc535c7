"""
Web session model for database.
"""
from sqlalchemy import Column, Integer, String, DateTime, JSON
from sqlalchemy.sql import func
from carwash.database import Base


class WebSession(Base):
    """Browser session holding the backend auth cookies and pending toasts."""

    __tablename__ = "web_sessions"

    id = Column(Integer, primary_key=True, index=True)
    token = Column(String, unique=True, nullable=False, index=True)
    backend_cookies = Column(JSON, nullable=False, default=list)
    toasts = Column(JSON, nullable=False, default=list)
    oauth_state = Column(String, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    last_seen_at = Column(DateTime, nullable=True)
    expires_at = Column(DateTime, nullable=False)
