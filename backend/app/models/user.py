"""User model."""
from sqlalchemy import Column, DateTime, Integer, String, func

from app.database import Base


class User(Base):
    """User account with a point balance."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), unique=True, nullable=False)
    username = Column(String(100), unique=True, nullable=False)
    password_hash = Column("password", String(255), nullable=False)
    points = Column(Integer, nullable=False, default=0, server_default="0")
    created_at = Column(DateTime, server_default=func.current_timestamp())
