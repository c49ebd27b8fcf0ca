"""SQLAlchemy models for users and their submitted records."""
from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import List, Optional

from sqlalchemy import Boolean, DateTime, Enum as SqlEnum, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .database import Base


class RoleEnum(str, Enum):
    ADMIN = "ADMIN"
    INCHARGE = "INCHARGE"
    MEMBER = "MEMBER"


class LiveModeEnum(str, Enum):
    AUDIO = "audio"
    VIDEO = "video"


def _enum_values(enum_cls: type[Enum]) -> List[str]:
    return [member.value for member in enum_cls]


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    username: Mapped[str] = mapped_column(String(50), unique=True, index=True)
    password: Mapped[str] = mapped_column(String(255))
    contact_number: Mapped[str] = mapped_column(String(50))
    live_mode: Mapped[LiveModeEnum] = mapped_column(SqlEnum(LiveModeEnum, values_callable=_enum_values), default=LiveModeEnum.AUDIO)
    role: Mapped[RoleEnum] = mapped_column(SqlEnum(RoleEnum, values_callable=_enum_values), default=RoleEnum.MEMBER, index=True)
    watch_live_enabled: Mapped[bool] = mapped_column(Boolean, default=True)
    submit_feedback_enabled: Mapped[bool] = mapped_column(Boolean, default=True)
    submit_accountability_enabled: Mapped[bool] = mapped_column(Boolean, default=True)
    incharge_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    incharge: Mapped[Optional["User"]] = relationship(remote_side="User.id", back_populates="members")
    members: Mapped[List["User"]] = relationship(back_populates="incharge")
    accountability: Mapped[List["Accountability"]] = relationship(
        back_populates="user", cascade="all, delete-orphan"
    )
    feedback: Mapped[List["Feedback"]] = relationship(
        back_populates="user", cascade="all, delete-orphan"
    )


class Accountability(Base):
    __tablename__ = "accountability"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    content: Mapped[str] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, index=True)

    user: Mapped[User] = relationship(back_populates="accountability")


class Feedback(Base):
    __tablename__ = "feedback"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    content: Mapped[str] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, index=True)

    user: Mapped[User] = relationship(back_populates="feedback")
