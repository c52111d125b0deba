import logging
from sqlalchemy.orm import Session
from forum.core.exceptions import InvalidArgument, NotFound
from forum.models.category import Category, slugify
from forum.models.post import Post
from forum.schemas.category_schema import CategoryCreate, CategoryUpdate

DEFAULT_CATEGORIES = [
    {
        "name": "Technology",
        "slug": "technology",
        "description": "Discussions about technology, programming, and software development",
        "icon": "💻",
    },
    {
        "name": "Gaming",
        "slug": "gaming",
        "description": "Video games, gaming news, and gaming culture",
        "icon": "🎮",
    },
    {
        "name": "Movies",
        "slug": "movies",
        "description": "Film discussions, reviews, and news",
        "icon": "🎬",
    },
    {
        "name": "Music",
        "slug": "music",
        "description": "Music discussions, recommendations, and news",
        "icon": "🎧",
    },
    {
        "name": "Sports",
        "slug": "sports",
        "description": "Sports news, discussions, and events",
        "icon": "⚽",
    },
]


def seed_categories(db: Session) -> int:
    """Insert the default categories when the table is empty. Returns how many were added."""
    existing = db.query(Category).count()
    if existing:
        logging.info(f"Found {existing} existing categories. Skipping default category creation.")
        return 0

    db.add_all([Category(**data) for data in DEFAULT_CATEGORIES])
    db.commit()
    logging.info(f"Created {len(DEFAULT_CATEGORIES)} default categories")
    return len(DEFAULT_CATEGORIES)


def get_category(db: Session, category_id: int | None = None, slug: str | None = None) -> Category:
    if category_id is not None:
        category = db.get(Category, category_id)
    else:
        category = db.query(Category).filter(Category.slug == slug).first()
    if not category:
        raise NotFound("Category not found")
    return category


def _ensure_unique(db: Session, name: str | None, slug: str | None, exclude_id: int | None = None):
    query = db.query(Category)
    if exclude_id is not None:
        query = query.filter(Category.id != exclude_id)
    if name and query.filter(Category.name == name).first():
        raise InvalidArgument("Category name already exists")
    if slug and query.filter(Category.slug == slug).first():
        raise InvalidArgument("Category slug already exists")


def create_category(db: Session, data: CategoryCreate) -> Category:
    name = data.name.strip()
    slug = data.slug or slugify(name)
    _ensure_unique(db, name, slug)

    values = data.model_dump(exclude_unset=True, exclude_none=True)
    values.update(name=name, slug=slug)
    category = Category(**values)
    db.add(category)
    db.commit()
    db.refresh(category)
    logging.info(f"Created category {category.id} ({category.slug})")
    return category


def update_category(db: Session, category_id: int, data: CategoryUpdate) -> Category:
    category = get_category(db, category_id=category_id)
    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    _ensure_unique(db, changes.get("name"), changes.get("slug"), exclude_id=category.id)

    for key, value in changes.items():
        setattr(category, key, value)
    db.commit()
    db.refresh(category)
    return category


def delete_category(db: Session, category_id: int):
    category = get_category(db, category_id=category_id)
    if db.query(Post).filter(Post.category_id == category.id).first():
        raise InvalidArgument("Category still has posts")
    db.delete(category)
    db.commit()
    logging.info(f"Deleted category {category_id}")
