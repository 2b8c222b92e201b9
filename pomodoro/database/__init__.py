"""Database package."""

from .db import get_session, init_db
from .models import SettingEntry

__all__ = ["get_session", "init_db", "SettingEntry"]
