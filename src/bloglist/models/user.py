from datetime import datetime

from sqlalchemy import Column, DateTime, String
from sqlalchemy.orm import relationship

from ..database import Base, new_object_id


class User(Base):
    """SQLAlchemy model for registered blog authors."""

    __tablename__ = "users"

    id = Column(String(24), primary_key=True, default=new_object_id)
    username = Column(String, unique=True, index=True, nullable=False)
    name = Column(String, default="", nullable=False)
    password_hash = Column(String, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    blogs = relationship(
        "Blog",
        back_populates="user",
        order_by="Blog.created_at",
        cascade="all, delete-orphan",
    )
