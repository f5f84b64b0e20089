"""ORM models for devices, accounts, photos, quests and point progress.

Tables are created by the Alembic revisions in ``alembic/versions``. Python-side
defaults mirror the server defaults so freshly flushed objects never need a
reload inside an async session.
"""

from __future__ import annotations

import enum
from datetime import date, datetime, timezone

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from photoquest.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class QuestType(str, enum.Enum):
    """Closed set of quest kinds. Only weekly quests carry an active window."""

    DAILY = "daily"
    SPECIAL = "special"
    WEEKLY = "weekly"


# ---------------------------------------------------------------------------
# Identity
# ---------------------------------------------------------------------------


class Device(Base):
    """A browser identified by the opaque token stored in its device cookie."""

    __tablename__ = "devices"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    token: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    can_upload: Mapped[bool] = mapped_column(Boolean, default=False, server_default="false", nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, nullable=False)


class Account(Base):
    """A user account, created and deleted by admins only."""

    __tablename__ = "accounts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)
    is_admin: Mapped[bool] = mapped_column(Boolean, default=False, server_default="false", nullable=False)
    avatar_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, nullable=False)


class AccountDevice(Base):
    """Binding between an account and a device token it has logged in from."""

    __tablename__ = "account_devices"
    __table_args__ = (UniqueConstraint("account_id", "device_id", name="uq_account_devices_pair"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    account_id: Mapped[int] = mapped_column(Integer, ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False)
    device_id: Mapped[int] = mapped_column(Integer, ForeignKey("devices.id", ondelete="CASCADE"), nullable=False)
    bound_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, nullable=False)


# ---------------------------------------------------------------------------
# Photos
# ---------------------------------------------------------------------------


class GalleryPhoto(Base):
    """An approved, publicly visible photo."""

    __tablename__ = "photos"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    blob_id: Mapped[str] = mapped_column(String(255), nullable=False)
    url: Mapped[str] = mapped_column(Text, nullable=False)
    account_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("accounts.id", ondelete="CASCADE"), nullable=True
    )
    taken_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    uploaded_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, nullable=False)


class PendingPhoto(Base):
    """An uploaded photo waiting for an admin decision.

    ``quest_id`` is a plain integer, not a foreign key: the quest may be deleted
    while the upload waits, which only costs the upload its points.
    """

    __tablename__ = "pending_photos"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    blob_id: Mapped[str] = mapped_column(String(255), nullable=False)
    url: Mapped[str] = mapped_column(Text, nullable=False)
    account_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("accounts.id", ondelete="CASCADE"), nullable=True
    )
    device_token: Mapped[str] = mapped_column(String(64), nullable=False)
    quest_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    taken_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, nullable=False)


# ---------------------------------------------------------------------------
# Quests & rewards
# ---------------------------------------------------------------------------


class Quest(Base):
    """A point-bearing task."""

    __tablename__ = "quests"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(120), nullable=False)
    description: Mapped[str] = mapped_column(Text, default="", server_default="", nullable=False)
    type: Mapped[str] = mapped_column(String(16), nullable=False)
    points: Mapped[int] = mapped_column(Integer, default=0, server_default="0", nullable=False)
    start_at: Mapped[date | None] = mapped_column(Date, nullable=True)
    end_at: Mapped[date | None] = mapped_column(Date, nullable=True)
    active: Mapped[bool] = mapped_column(Boolean, default=True, server_default="true", nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, nullable=False)


class RewardTier(Base):
    """A point threshold with its visual reward."""

    __tablename__ = "reward_tiers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    points_required: Mapped[int] = mapped_column(Integer, nullable=False)
    description: Mapped[str] = mapped_column(String(255), default="", server_default="", nullable=False)
    icon_url: Mapped[str | None] = mapped_column(Text, nullable=True)


class GlobalProgress(Base):
    """The single shared point total. Row id 1 is the source of truth."""

    __tablename__ = "global_progress"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    total_points: Mapped[int] = mapped_column(Integer, default=0, server_default="0", nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow, nullable=False)
