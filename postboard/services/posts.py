"""Post operations: the visibility and ownership rules applied to the store."""

import logging
import math
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

from postboard.config import get_settings
from postboard.errors import Forbidden, NotFound, Unauthenticated
from postboard.models.post import PostCreate, PostOut, PostPage, PostUpdate
from postboard.services.policy import can_delete, can_modify, is_visible
from postboard.services.post_store import PostStore

logger = logging.getLogger(__name__)


def _now(now: datetime | None) -> datetime:
    return now if now is not None else datetime.now(timezone.utc)


def list_posts(
    store: PostStore,
    page: int = 1,
    now: datetime | None = None,
    per_page: int | None = None,
) -> PostPage:
    """Return one page of publicly visible posts, most recently published first.

    *per_page* defaults to the ``posts_per_page`` setting.
    """
    page = max(page, 1)
    if per_page is None:
        per_page = get_settings().posts_per_page
    items, total = store.list_visible(
        _now(now), offset=(page - 1) * per_page, limit=per_page
    )
    return PostPage(
        items=[PostOut.model_validate(p) for p in items],
        page=page,
        per_page=per_page,
        total=total,
        last_page=max(math.ceil(total / per_page), 1),
    )


def create_post(store: PostStore, user: Any | None, data: PostCreate) -> Any:
    """Persist a new post owned by *user*."""
    if user is None:
        raise Unauthenticated()
    post = store.create(user, data.model_dump())
    logger.info("User %d created post %d", user.id, post.id)
    return post


def get_post(store: PostStore, post_id: int, now: datetime | None = None) -> Any:
    """Fetch a post for public display.

    Hidden posts are reported exactly like missing ones.
    """
    post = store.get(post_id)
    if post is None or not is_visible(post, _now(now)):
        raise NotFound()
    return post


def _owned_post(
    store: PostStore,
    user: Any | None,
    post_id: int,
    check: Callable[[Any, Any], bool],
) -> Any:
    if user is None:
        raise Unauthenticated()
    # Unfiltered: owners act on their drafts and scheduled posts too
    post = store.get(post_id)
    if post is None:
        raise NotFound()
    if not check(user, post):
        logger.warning(
            "User %d denied on post %d owned by user %d",
            user.id,
            post.id,
            post.owner.id,
        )
        raise Forbidden()
    return post


def update_post(
    store: PostStore, user: Any | None, post_id: int, data: PostUpdate
) -> Any:
    """Apply the fields present in *data* to a post the caller owns."""
    post = _owned_post(store, user, post_id, can_modify)
    changes = data.changes()
    if changes:
        post = store.update(post, changes)
    logger.info("User %d updated post %d (%s)", user.id, post_id, ", ".join(changes))
    return post


def delete_post(store: PostStore, user: Any | None, post_id: int) -> None:
    """Permanently remove a post the caller owns."""
    post = _owned_post(store, user, post_id, can_delete)
    store.delete(post)
    logger.info("User %d deleted post %d", user.id, post_id)
