from sqlalchemy import Column, Integer, String, ForeignKey, CheckConstraint, UniqueConstraint
from sqlalchemy.orm import relationship
from blog_api.core.database import Base

TEXT = "text"
IMAGE = "image"


class ContentBlock(Base):
    __tablename__ = "content_blocks"
    __table_args__ = (
        UniqueConstraint("post_id", "position", name="uq_content_block_position"),
        CheckConstraint(
            "(type = 'text' AND text_content IS NOT NULL AND image_url IS NULL)"
            " OR (type = 'image' AND image_url IS NOT NULL AND text_content IS NULL)",
            name="ck_content_block_payload",
        ),
        CheckConstraint("position >= 1", name="ck_content_block_position"),
        # les ids supprimés ne sont jamais réattribués (SQLite)
        {"sqlite_autoincrement": True},
    )

    id = Column(Integer, primary_key=True, index=True)
    post_id = Column(Integer, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(String, nullable=False)  # "text" ou "image"
    text_content = Column(String, nullable=True)
    image_url = Column(String, nullable=True)
    position = Column(Integer, nullable=False)  # 1..N, sans trou

    post = relationship("Post", back_populates="blocks")
