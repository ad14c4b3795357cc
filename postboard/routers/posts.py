"""Post endpoints."""

from fastapi import APIRouter, Depends, Query, Response

from postboard.auth import get_current_user
from postboard.models.post import PostCreate, PostOut, PostPage, PostUpdate
from postboard.services import posts as post_ops
from postboard.services.database import User
from postboard.services.post_store import PostStore, get_post_store

router = APIRouter(prefix="/posts", tags=["posts"])


@router.get("", response_model=PostPage)
def list_posts(
    page: int = Query(default=1, ge=1, description="Page number, starting at 1"),
    store: PostStore = Depends(get_post_store),
):
    """List published posts, most recently published first."""
    return post_ops.list_posts(store, page=page)


@router.post("", response_model=PostOut, status_code=201)
def create_post(
    data: PostCreate,
    user: User = Depends(get_current_user),
    store: PostStore = Depends(get_post_store),
):
    """Create a post owned by the authenticated user."""
    return post_ops.create_post(store, user, data)


@router.get("/{post_id}", response_model=PostOut)
def get_post(
    post_id: int,
    store: PostStore = Depends(get_post_store),
):
    """Get a single published post."""
    return post_ops.get_post(store, post_id)


@router.put("/{post_id}", response_model=PostOut)
def update_post(
    post_id: int,
    data: PostUpdate,
    user: User = Depends(get_current_user),
    store: PostStore = Depends(get_post_store),
):
    """Update the given fields of a post owned by the authenticated user."""
    return post_ops.update_post(store, user, post_id, data)


@router.delete("/{post_id}", status_code=204, response_class=Response)
def delete_post(
    post_id: int,
    user: User = Depends(get_current_user),
    store: PostStore = Depends(get_post_store),
):
    """Delete a post owned by the authenticated user."""
    post_ops.delete_post(store, user, post_id)
    return Response(status_code=204)
