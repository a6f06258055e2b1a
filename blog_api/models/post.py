"""Post model"""

from sqlalchemy import Column, Integer, String, DateTime, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from datetime import datetime
from blog_api.core.database import Base


class Post(Base):
    __tablename__ = "posts"

    id = Column(Integer, primary_key=True, index=True)
    author_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    title = Column(String, nullable=False)
    published = Column(Boolean, default=False, nullable=False, index=True)

    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    author = relationship("User", back_populates="posts")
    # ordre de lecture = ordre des positions
    blocks = relationship(
        "ContentBlock",
        back_populates="post",
        order_by="ContentBlock.position",
        cascade="all, delete-orphan",
    )
    bookmarks = relationship("Bookmark", back_populates="post", cascade="all, delete-orphan")
