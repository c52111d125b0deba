from fastapi import APIRouter, BackgroundTasks, Depends, Query, Request, status
from sqlalchemy.orm import Session
from typing import Optional
from forum.core.limiter import api_limit, create_post_limit
from forum.db.session import get_db
from forum.models.user import User
from forum.schemas.post_schema import (CommentCreate, PostCreate, PostUpdate,
                                       ResponsePost, VoteRequest)
from forum.services import ledger
from forum.services.auth import get_current_user
from forum.services.broadcast import ConnectionRegistry, get_registry
from forum.services.posts import (create_post as create_post_record, delete_post as delete_post_record,
                                  get_post_or_404, list_posts, list_user_posts, serialize_comment,
                                  serialize_post, update_post as update_post_record)

router = APIRouter(prefix="/posts", tags=["posts"])

# Events are queued as background tasks so they go out after the response

# Get all posts

@router.get("/")
@api_limit
async def get_all_posts(
    request: Request,
    category: Optional[int] = Query(None, description="Category id to filter on"),
    search: Optional[str] = Query(None, description="Case-insensitive text in title or content"),
    sort: str = Query("newest", description="newest or trending"),
    db: Session = Depends(get_db),
):
    posts = list_posts(db, category_id=category, search=search, sort=sort)
    return {"success": True, "data": [serialize_post(p, resolve_comment_authors=False) for p in posts]}

# Get a user's posts

@router.get("/user/{user_id}", response_model=list[ResponsePost])
@api_limit
async def get_user_posts(request: Request, user_id: int, db: Session = Depends(get_db)):
    return [serialize_post(p) for p in list_user_posts(db, user_id)]

# Get a post by id

@router.get("/{post_id}")
@api_limit
async def get_post(request: Request, post_id: int, db: Session = Depends(get_db)):
    return {"success": True, "data": serialize_post(get_post_or_404(db, post_id))}

# Create a new post

@router.post("/", status_code=status.HTTP_201_CREATED)
@api_limit
@create_post_limit
async def create_post(request: Request, post: PostCreate, background_tasks: BackgroundTasks,
                      db: Session = Depends(get_db),
                      current_user: User = Depends(get_current_user),
                      registry: ConnectionRegistry = Depends(get_registry)):
    data = serialize_post(create_post_record(db, post, current_user.id))
    background_tasks.add_task(registry.broadcast, "postCreated", {"post": data.model_dump(mode="json")})
    return {"success": True, "data": data}

# Update

@router.put("/{post_id}", response_model=ResponsePost)
@api_limit
async def update_post(request: Request, post_id: int, post_data: PostUpdate,
                      db: Session = Depends(get_db),
                      current_user: User = Depends(get_current_user)):
    post = get_post_or_404(db, post_id)
    return serialize_post(update_post_record(db, post, post_data, current_user.id))

# Delete

@router.delete("/{post_id}")
@api_limit
async def delete_post(request: Request, post_id: int, db: Session = Depends(get_db),
                      current_user: User = Depends(get_current_user)):
    post = get_post_or_404(db, post_id)
    delete_post_record(db, post, current_user.id)
    return {"success": True, "message": "Post deleted successfully"}

# Vote (toggle). No event goes out for votes, only for likes and comments.

@router.put("/{post_id}/vote", response_model=ResponsePost)
@api_limit
async def vote_post(request: Request, post_id: int, vote: VoteRequest,
                    db: Session = Depends(get_db),
                    current_user: User = Depends(get_current_user)):
    post = get_post_or_404(db, post_id)
    post = ledger.apply_vote(post, current_user.id, vote.vote_type, db)
    return serialize_post(post)

# Like (toggle)

@router.put("/{post_id}/like")
@api_limit
async def like_post(request: Request, post_id: int, background_tasks: BackgroundTasks,
                    db: Session = Depends(get_db),
                    current_user: User = Depends(get_current_user),
                    registry: ConnectionRegistry = Depends(get_registry)):
    post = get_post_or_404(db, post_id)
    post = ledger.toggle_like(post, current_user.id, db)
    background_tasks.add_task(registry.broadcast, "postLiked",
                              {"postId": post.id, "userId": current_user.id}, post_id=post.id)
    return {"success": True, "data": serialize_post(post)}

# Comments

@router.post("/{post_id}/comments", response_model=ResponsePost)
@api_limit
async def add_comment(request: Request, post_id: int, comment: CommentCreate,
                      background_tasks: BackgroundTasks, db: Session = Depends(get_db),
                      current_user: User = Depends(get_current_user),
                      registry: ConnectionRegistry = Depends(get_registry)):
    post = get_post_or_404(db, post_id)
    post, new_comment = ledger.add_comment(post, current_user.id, comment.content, db)
    background_tasks.add_task(
        registry.broadcast,
        "commentAdded",
        {"postId": post.id, "comment": serialize_comment(new_comment).model_dump(mode="json")},
        post_id=post.id,
    )
    return serialize_post(post)


@router.delete("/{post_id}/comments/{comment_id}")
@api_limit
async def delete_comment(request: Request, post_id: int, comment_id: int,
                         db: Session = Depends(get_db),
                         current_user: User = Depends(get_current_user)):
    post = get_post_or_404(db, post_id)
    post = ledger.delete_comment(post, current_user.id, comment_id, db)
    return {"success": True, "data": serialize_post(post)}
