"""
Vote ledger: vote, like and comment mutations on a post.

Every operation follows the same read-modify-persist pattern on the post
aggregate. Votes and likes are stored as one row per ``(post, user)``, so a
user holds at most one vote per post and the score is always derived from
the rows currently attached to the post.

Vote transitions for one user on one post::

    current   up      down
    none      up      down
    up        none    down
    down      up      none
"""
import logging
from datetime import datetime, timezone
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError
from forum.core.exceptions import DatabaseError, Forbidden, InvalidArgument, NotFound
from forum.models.comment import Comment
from forum.models.post import Post
from forum.models.vote import PostLike, PostVote

VOTE_DIRECTIONS = ("up", "down")


def _persist(post: Post, db: Session) -> Post:
    post_id = post.id
    post.updated_at = datetime.now(timezone.utc)
    try:
        db.commit()
    except StaleDataError:
        db.rollback()
        raise NotFound("Post not found")
    except IntegrityError:
        db.rollback()
        # A missing post shows up as a foreign-key failure on the new row
        if db.get(Post, post_id) is None:
            raise NotFound("Post not found")
        logging.exception(f"Conflicting write on post {post_id}")
        raise DatabaseError()
    except SQLAlchemyError:
        db.rollback()
        logging.exception(f"Failed to persist post {post_id}")
        raise DatabaseError()
    db.refresh(post)
    return post


def current_vote(post: Post, user_id: int) -> PostVote | None:
    for vote in post.votes:
        if vote.user_id == user_id:
            return vote
    return None


def apply_vote(post: Post, user_id: int, direction: str, db: Session) -> Post:
    """Toggle ``user_id``'s vote on ``post`` in ``direction`` ("up" or "down").

    Voting the same direction twice clears the vote; voting the opposite
    direction switches it. Likes and comments are left alone.
    """
    if direction not in VOTE_DIRECTIONS:
        raise InvalidArgument("Invalid vote type")

    existing = current_vote(post, user_id)
    already_same = existing is not None and existing.direction == direction

    if existing is not None:
        post.votes.remove(existing)
        db.flush()
    if not already_same:
        post.votes.append(PostVote(user_id=user_id, direction=direction))

    post = _persist(post, db)
    logging.debug(
        f"Vote {direction} by user {user_id} on post {post.id}: score={post.score}")
    return post


def toggle_like(post: Post, user_id: int, db: Session) -> Post:
    existing = next((like for like in post.likes if like.user_id == user_id), None)
    if existing is not None:
        post.likes.remove(existing)
    else:
        post.likes.append(PostLike(user_id=user_id))
    post = _persist(post, db)
    logging.debug(f"Like toggled by user {user_id} on post {post.id}")
    return post


def add_comment(post: Post, user_id: int, content: str, db: Session) -> tuple[Post, Comment]:
    content = (content or "").strip()
    if not content:
        raise InvalidArgument("Comment content is required")

    comment = Comment(user_id=user_id, content=content)
    post.comments.insert(0, comment)
    post = _persist(post, db)
    logging.debug(f"Comment {comment.id} added to post {post.id} by user {user_id}")
    return post, comment


def delete_comment(post: Post, user_id: int, comment_id: int, db: Session) -> Post:
    comment = next((c for c in post.comments if c.id == comment_id), None)
    if comment is None:
        raise NotFound("Comment not found")
    if comment.user_id != user_id:
        logging.debug(
            f"User {user_id} tried to delete comment {comment_id} owned by {comment.user_id}")
        raise Forbidden("Not authorized to delete this comment")

    post.comments.remove(comment)
    return _persist(post, db)
