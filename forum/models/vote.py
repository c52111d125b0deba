from sqlalchemy import (Column, Integer, String, ForeignKey, DateTime,
                        CheckConstraint, func)
from sqlalchemy.orm import relationship
from forum.db.session import Base


class PostVote(Base):
    """One user's up or down vote on one post.

    The composite primary key allows a single vote per user per post, so a
    user can never be an upvoter and a downvoter at the same time.
    """

    __tablename__ = "post_votes"
    __table_args__ = (
        CheckConstraint("direction IN ('up', 'down')",
                        name="ck_post_votes_direction"),
    )

    post_id = Column(Integer, ForeignKey("posts.id", ondelete="CASCADE"),
                     primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"),
                     primary_key=True, index=True)
    direction = Column(String(4), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    post = relationship("Post", back_populates="votes")


class PostLike(Base):
    __tablename__ = "post_likes"

    post_id = Column(Integer, ForeignKey("posts.id", ondelete="CASCADE"),
                     primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"),
                     primary_key=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    post = relationship("Post", back_populates="likes")
