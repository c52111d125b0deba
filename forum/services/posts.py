import logging
from datetime import datetime, timedelta, timezone
from sqlalchemy import or_
from sqlalchemy.orm import Session, selectinload
from forum.config import settings
from forum.core.exceptions import Forbidden, InvalidArgument, NotFound
from forum.models.category import Category
from forum.models.comment import Comment
from forum.models.post import Post
from forum.schemas.category_schema import CategorySummary
from forum.schemas.post_schema import (PostCreate, PostUpdate, ResponseComment,
                                       ResponsePost, ResponseUserComment)
from forum.schemas.user_schema import user_ref


def _with_relations(query):
    return query.options(
        selectinload(Post.author),
        selectinload(Post.category),
        selectinload(Post.votes),
        selectinload(Post.likes),
        selectinload(Post.comments).selectinload(Comment.author),
    )


def get_post_or_404(db: Session, post_id: int) -> Post:
    post = _with_relations(db.query(Post)).filter(Post.id == post_id).first()
    if not post:
        raise NotFound("Post not found")
    return post


def get_category_or_404(db: Session, category_id: int) -> Category:
    category = db.get(Category, category_id)
    if not category:
        raise NotFound("Category not found")
    return category


def serialize_comment(comment: Comment, resolve_author: bool = True) -> ResponseComment:
    return ResponseComment(
        id=comment.id,
        post_id=comment.post_id,
        author=user_ref(comment.user_id, comment.author if resolve_author else None),
        content=comment.content,
        created_at=comment.created_at,
    )


def serialize_post(post: Post, resolve_comment_authors: bool = True) -> ResponsePost:
    """Build the API view of a post.

    The author and category are always expanded. Comment authors are only
    expanded when ``resolve_comment_authors`` is set; listings leave them as
    bare ids.
    """
    return ResponsePost(
        id=post.id,
        title=post.title,
        content=post.content,
        author=user_ref(post.user_id, post.author),
        category=CategorySummary.model_validate(post.category) if post.category else None,
        upvoters=post.upvoters,
        downvoters=post.downvoters,
        likers=post.likers,
        score=post.score,
        comments=[serialize_comment(c, resolve_comment_authors) for c in post.comments],
        created_at=post.created_at,
        updated_at=post.updated_at,
    )


def _created_at_key(post: Post):
    created = post.created_at or datetime.min
    # SQLite hands back naive datetimes, other backends aware ones
    return created.replace(tzinfo=None)


def list_posts(db: Session, category_id: int | None = None, search: str | None = None,
               sort: str = "newest") -> list[Post]:
    query = _with_relations(db.query(Post))

    if category_id is not None:
        get_category_or_404(db, category_id)
        query = query.filter(Post.category_id == category_id)

    if search:
        # Match the text literally, not as a LIKE pattern
        escaped = search.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        pattern = f"%{escaped}%"
        query = query.filter(or_(Post.title.ilike(pattern, escape="\\"),
                                 Post.content.ilike(pattern, escape="\\")))

    if sort == "trending":
        since = datetime.now(timezone.utc) - timedelta(days=settings.TRENDING_WINDOW_DAYS)
        posts = query.filter(Post.created_at >= since).all()
        # Score is derived from the vote rows, so the ordering happens here
        return sorted(
            posts,
            key=lambda p: (p.score, len(p.likers), _created_at_key(p), p.id),
            reverse=True,
        )
    if sort != "newest":
        raise InvalidArgument("Invalid sort option")

    return query.order_by(Post.created_at.desc(), Post.id.desc()).all()


def list_user_posts(db: Session, user_id: int) -> list[Post]:
    return (_with_relations(db.query(Post))
            .filter(Post.user_id == user_id)
            .order_by(Post.created_at.desc(), Post.id.desc())
            .all())


def list_user_comments(db: Session, user_id: int) -> list[ResponseUserComment]:
    comments = (db.query(Comment)
                .options(selectinload(Comment.author), selectinload(Comment.post))
                .filter(Comment.user_id == user_id)
                .order_by(Comment.created_at.desc(), Comment.id.desc())
                .all())
    return [
        ResponseUserComment(**serialize_comment(c).model_dump(), post_title=c.post.title)
        for c in comments
    ]


def _clean(value: str | None, field: str) -> str:
    value = (value or "").strip()
    if not value:
        raise InvalidArgument(f"Please provide a {field}")
    return value


def create_post(db: Session, data: PostCreate, user_id: int) -> Post:
    title = _clean(data.title, "title")
    content = _clean(data.content, "content")
    get_category_or_404(db, data.category_id)

    post = Post(title=title, content=content,
                category_id=data.category_id, user_id=user_id)
    db.add(post)
    db.commit()
    logging.info(f"Created post {post.id} in category {post.category_id} by user {user_id}")
    return get_post_or_404(db, post.id)


def _ensure_owner(post: Post, user_id: int, action: str):
    if post.user_id != user_id:
        logging.debug(f"User {user_id} tried to {action} post {post.id} owned by {post.user_id}")
        raise Forbidden(f"Not authorized to {action} this post")


def update_post(db: Session, post: Post, data: PostUpdate, user_id: int) -> Post:
    _ensure_owner(post, user_id, "update")
    changes = data.model_dump(exclude_unset=True)
    if "title" in changes:
        changes["title"] = _clean(changes["title"], "title")
    if "content" in changes:
        changes["content"] = _clean(changes["content"], "content")
    if changes.get("category_id") is not None:
        get_category_or_404(db, changes["category_id"])
    else:
        changes.pop("category_id", None)

    for key, value in changes.items():
        setattr(post, key, value)
    db.commit()
    db.refresh(post)
    return post


def delete_post(db: Session, post: Post, user_id: int):
    _ensure_owner(post, user_id, "delete")
    post_id = post.id
    db.delete(post)
    db.commit()
    logging.info(f"Deleted post {post_id} by user {user_id}")
