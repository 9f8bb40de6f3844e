"""
User Model.

Account owning notes. Email is stored lowercased.
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from notes_app.backend.models.base import Base, IntegerIdMixin, TimestampMixin


class User(IntegerIdMixin, TimestampMixin, Base):
    """User database model."""

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
    )
    password_hash: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email!r})>"
