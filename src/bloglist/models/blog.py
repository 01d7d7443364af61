from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from ..database import Base, new_object_id


class Blog(Base):
    """SQLAlchemy model for a blog post owned by a user."""

    __tablename__ = "blogs"

    id = Column(String(24), primary_key=True, default=new_object_id)
    title = Column(String, nullable=False)
    author = Column(String, default="", nullable=False)
    url = Column(String, nullable=False)
    likes = Column(Integer, default=0, nullable=False)
    user_id = Column(String(24), ForeignKey("users.id"), index=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    user = relationship("User", back_populates="blogs")
