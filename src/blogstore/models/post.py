from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String, Text, func

from ..database import Base, utcnow


class Post(Base):
    """SQLAlchemy model for a post owned by a single user."""

    __tablename__ = "posts"
    __table_args__ = (
        Index("idx_posts_created_at", "created_at"),
        Index("idx_posts_author_id", "author_id"),
        {"sqlite_autoincrement": True},
    )

    id = Column(Integer, primary_key=True)
    title = Column(String, nullable=True)
    content = Column(Text, nullable=True)
    author_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE", name="fk_posts_author"),
        nullable=False,
    )
    created_at = Column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )
    updated_at = Column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )

    def __repr__(self) -> str:
        return f"<Post(id={self.id}, author_id={self.author_id}, title='{self.title}')>"
