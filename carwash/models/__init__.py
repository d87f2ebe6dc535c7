"""
SQLAlchemy database models.
"""
from carwash.models.web_session import WebSession

__all__ = ["WebSession"]
