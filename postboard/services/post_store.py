"""Persistence for posts.

``PostStore`` is the capability interface the post operations depend on;
``SqlPostStore`` implements it on a SQLAlchemy session.
"""

import logging
from datetime import datetime
from typing import Any, Protocol

from fastapi import Depends
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from postboard.services.database import Post, User, get_session
from postboard.services.policy import to_storage, visible_criteria

logger = logging.getLogger(__name__)

# Largest value a signed 64-bit INTEGER column or OFFSET can hold
MAX_SQL_INT = 2**63 - 1


class PostStore(Protocol):
    """Create/read/update/delete plus the public listing query."""

    def create(self, owner: Any, fields: dict[str, Any]) -> Any: ...

    def get(self, post_id: int) -> Any | None: ...

    def list_visible(
        self, now: datetime, offset: int, limit: int
    ) -> tuple[list[Any], int]: ...

    def update(self, post: Any, fields: dict[str, Any]) -> Any: ...

    def delete(self, post: Any) -> None: ...


def _normalize(fields: dict[str, Any]) -> dict[str, Any]:
    out = dict(fields)
    if out.get("published_at") is not None:
        out["published_at"] = to_storage(out["published_at"])
    return out


class SqlPostStore:
    """``PostStore`` backed by the ``posts`` table. Commits on every write."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def create(self, owner: User, fields: dict[str, Any]) -> Post:
        post = Post(owner=owner, **_normalize(fields))
        self._session.add(post)
        self._session.commit()
        return post

    def get(self, post_id: int) -> Post | None:
        if not 0 < post_id <= MAX_SQL_INT:
            return None
        return self._session.get(Post, post_id)

    def list_visible(
        self, now: datetime, offset: int, limit: int
    ) -> tuple[list[Post], int]:
        """Return one page of visible posts, newest publication first,
        and the total number of visible posts.
        """
        criteria = visible_criteria(now)
        total = self._session.scalar(
            select(func.count()).select_from(Post).where(criteria)
        )
        if offset > MAX_SQL_INT:
            return [], total or 0
        stmt = (
            select(Post)
            .where(criteria)
            .order_by(Post.published_at.desc(), Post.id.desc())
            .offset(offset)
            .limit(limit)
        )
        return list(self._session.scalars(stmt)), total or 0

    def update(self, post: Post, fields: dict[str, Any]) -> Post:
        for name, value in _normalize(fields).items():
            setattr(post, name, value)
        self._session.commit()
        return post

    def delete(self, post: Post) -> None:
        self._session.delete(post)
        self._session.commit()


def get_post_store(session: Session = Depends(get_session)) -> PostStore:
    """FastAPI dependency returning the request's post store."""
    return SqlPostStore(session)
