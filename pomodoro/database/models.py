"""SQLAlchemy ORM models for Pomodoro."""

from sqlalchemy import Column, String, Text, DateTime, func
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


class SettingEntry(Base):
    """One key of the flat settings record.  Values are JSON-encoded."""

    __tablename__ = "settings"

    key = Column(String(64), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(
        DateTime, nullable=False, server_default=func.now(), onupdate=func.now(),
    )

    def __repr__(self) -> str:
        return f"<SettingEntry {self.key}={self.value}>"
