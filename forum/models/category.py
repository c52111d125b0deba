import re
from sqlalchemy import Column, Integer, String, Text, DateTime, func
from sqlalchemy.orm import relationship, validates
from forum.db.session import Base


def slugify(name: str) -> str:
    """Lowercase ``name`` and replace every non-alphanumeric character with a hyphen."""
    return re.sub(r"[^a-zA-Z0-9]", "-", name.strip().lower())


class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)
    slug = Column(String, unique=True, nullable=False, index=True)
    description = Column(Text, nullable=True)
    icon = Column(String, default="folder")
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    posts = relationship("Post", back_populates="category")

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        if not self.slug and self.name:
            self.slug = slugify(self.name)

    @validates("name")
    def _strip_name(self, key, value):
        return value.strip() if value else value
