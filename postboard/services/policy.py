"""Post visibility and ownership rules.

The visibility rule exists in two forms that must agree: a predicate over a
loaded post and a SQL criterion for filtering queries. Both live here.
"""

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import and_
from sqlalchemy.sql.elements import ColumnElement

from postboard.services.database import Post


def as_utc(dt: datetime) -> datetime:
    """Return *dt* as an aware UTC datetime. Naive values are taken as UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_storage(dt: datetime) -> datetime:
    """Return *dt* as naive UTC, the form the posts table stores."""
    return as_utc(dt).replace(tzinfo=None)


def is_visible(post: Any, now: datetime) -> bool:
    """Whether *post* may be shown to anyone at *now*.

    Hidden if it is a draft, has never been scheduled, or is scheduled for
    a later time.
    """
    if post.is_draft:
        return False
    if post.published_at is None:
        return False
    return as_utc(post.published_at) <= as_utc(now)


def visible_criteria(now: datetime) -> ColumnElement[bool]:
    """SQL form of :func:`is_visible` for filtering ``Post`` queries."""
    return and_(
        Post.is_draft.is_(False),
        Post.published_at.is_not(None),
        Post.published_at <= to_storage(now),
    )


def is_owner(user: Any | None, post: Any) -> bool:
    if user is None:
        return False
    return user.id == post.owner.id


def can_modify(user: Any | None, post: Any) -> bool:
    return is_owner(user, post)


def can_delete(user: Any | None, post: Any) -> bool:
    return is_owner(user, post)
