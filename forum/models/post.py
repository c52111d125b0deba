from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Text, func
from sqlalchemy.orm import relationship
from forum.db.session import Base


class Post(Base):
    __tablename__ = "posts"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(100), index=True, nullable=False)
    content = Column(Text, nullable=False)
    category_id = Column(Integer, ForeignKey("categories.id"),
                         nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"),
                     nullable=False, index=True)
    created_at = Column(DateTime(timezone=True),
                        server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    author = relationship("User", back_populates="posts")
    category = relationship("Category", back_populates="posts")
    votes = relationship("PostVote", back_populates="post",
                         cascade="all, delete-orphan", passive_deletes=True)
    likes = relationship("PostLike", back_populates="post",
                         cascade="all, delete-orphan", passive_deletes=True)
    # Newest comment first; id breaks ties between same-instant inserts
    comments = relationship(
        "Comment", back_populates="post", cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="[Comment.created_at.desc(), Comment.id.desc()]")

    def voters_for(self, direction: str) -> list[int]:
        return sorted(v.user_id for v in self.votes if v.direction == direction)

    @property
    def upvoters(self) -> list[int]:
        return self.voters_for("up")

    @property
    def downvoters(self) -> list[int]:
        return self.voters_for("down")

    @property
    def likers(self) -> list[int]:
        return sorted(like.user_id for like in self.likes)

    @property
    def score(self) -> int:
        # Derived from the vote rows on every read, never stored
        return len(self.upvoters) - len(self.downvoters)
