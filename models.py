from sqlalchemy import CheckConstraint
from sqlmodel import SQLModel, Field
from datetime import datetime, timezone
from typing import Optional
import uuid


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid.uuid4())


class User(SQLModel, table=True):
    """Account that owns tasks"""
    __tablename__ = "users"

    id: str = Field(default_factory=new_id, primary_key=True)
    email: str = Field(index=True, unique=True, max_length=320)
    password_hash: str
    created_at: datetime = Field(default_factory=utcnow)


class Task(SQLModel, table=True):
    """To-do item; only ever visible to its owner"""
    __tablename__ = "tasks"
    __table_args__ = (
        CheckConstraint("text <> ''", name="text_not_empty"),
        CheckConstraint("priority >= 0", name="priority_non_negative"),
    )

    id: str = Field(default_factory=new_id, primary_key=True)
    text: str = Field(max_length=500)
    notes: str = Field(default="")
    priority: int = Field(default=0, index=True)
    user_id: str = Field(foreign_key="users.id", index=True)
    created_at: datetime = Field(default_factory=utcnow, index=True)


class RevokedToken(SQLModel, table=True):
    """Access tokens invalidated by sign-out"""
    __tablename__ = "revoked_tokens"

    jti: str = Field(primary_key=True)
    user_id: str = Field(index=True)
    expires_at: Optional[datetime] = None
