from forum.models.user import User
from forum.models.category import Category
from forum.models.post import Post
from forum.models.comment import Comment
from forum.models.vote import PostVote, PostLike

__all__ = ["User", "Category", "Post", "Comment", "PostVote", "PostLike"]
