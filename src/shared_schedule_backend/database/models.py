from typing import Optional

from sqlalchemy import JSON, Boolean, Date, DateTime, Index, PrimaryKeyConstraint, String, Text, TypeDecorator, UniqueConstraint, Uuid, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
import datetime
import uuid


class Base(DeclarativeBase):
    pass


class UTCDateTime(TypeDecorator):
    """
    Stores aware datetimes as UTC and always hands back aware UTC values,
    including on backends (SQLite) that drop the offset.
    """
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            raise ValueError("Naive datetimes cannot be stored; use timezone-aware UTC values.")
        return value.astimezone(datetime.timezone.utc)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=datetime.timezone.utc)
        return value.astimezone(datetime.timezone.utc)


class Users(Base):
    __tablename__ = 'users'
    __table_args__ = (
        PrimaryKeyConstraint('id', name='users_pkey'),
        UniqueConstraint('email', name='users_email_key'),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    email: Mapped[str] = mapped_column(String(255))
    password: Mapped[str] = mapped_column(String(255))
    display_name: Mapped[str] = mapped_column(Text)
    timezone: Mapped[str] = mapped_column(Text, default='UTC')
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[Optional[datetime.datetime]] = mapped_column(UTCDateTime, server_default=func.now())


class Activities(Base):
    __tablename__ = 'activities'
    __table_args__ = (
        PrimaryKeyConstraint('id', name='activities_pkey'),
        Index('idx_activities_owner', 'owner_id'),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    owner_id: Mapped[uuid.UUID] = mapped_column(Uuid)
    name: Mapped[str] = mapped_column(Text)
    color: Mapped[str] = mapped_column(String(32))
    created_at: Mapped[Optional[datetime.datetime]] = mapped_column(UTCDateTime, server_default=func.now())


class ScheduleEntries(Base):
    """
    A placed or recurring block of time.
    `activity_id` has no foreign key; entries keep their activity
    name/color snapshot after the activity is deleted.
    """
    __tablename__ = 'schedule_entries'
    __table_args__ = (
        PrimaryKeyConstraint('id', name='schedule_entries_pkey'),
        Index('idx_schedule_entries_owner', 'owner_id'),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    owner_id: Mapped[uuid.UUID] = mapped_column(Uuid)
    activity_id: Mapped[uuid.UUID] = mapped_column(Uuid)
    activity_name: Mapped[str] = mapped_column(Text)
    activity_color: Mapped[str] = mapped_column(String(32))
    start_utc: Mapped[datetime.datetime] = mapped_column(UTCDateTime)
    end_utc: Mapped[datetime.datetime] = mapped_column(UTCDateTime)
    anchor_date: Mapped[datetime.date] = mapped_column(Date)
    recurrence_type: Mapped[str] = mapped_column(String(16), default='none')
    recurrence_days: Mapped[list] = mapped_column(JSON, default=list)
    recurrence_start: Mapped[Optional[datetime.date]] = mapped_column(Date)
    recurrence_end: Mapped[Optional[datetime.date]] = mapped_column(Date)
    created_at: Mapped[Optional[datetime.datetime]] = mapped_column(UTCDateTime, server_default=func.now())
