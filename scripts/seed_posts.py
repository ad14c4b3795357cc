"""Seed a demo author and a handful of posts.

Usage:
    python -m scripts.seed_posts

Creates one published post per entry in SEED_POSTS plus one draft and one
post scheduled a week ahead, so the public listing shows only the published
ones.
"""

import logging
from datetime import datetime, timedelta, timezone

from postboard.auth import create_user
from postboard.services.database import get_session_factory, init_db
from postboard.services.post_store import SqlPostStore

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

SEED_POSTS = [
    {
        "title": "Hello, world",
        "content": "The first post on this board.",
        "days_ago": 3,
    },
    {
        "title": "Scheduling posts",
        "content": "Set published_at in the future and the post stays hidden until then.",
        "days_ago": 2,
    },
    {
        "title": "Drafts",
        "content": "Drafts are never listed, whatever their publish date says.",
        "days_ago": 1,
    },
]


def main() -> None:
    init_db()
    now = datetime.now(timezone.utc)
    with get_session_factory()() as session:
        user, token = create_user(
            session, "Demo Author", f"demo+{int(now.timestamp())}@example.com"
        )
        store = SqlPostStore(session)

        for seed in SEED_POSTS:
            store.create(
                user,
                {
                    "title": seed["title"],
                    "content": seed["content"],
                    "is_draft": False,
                    "published_at": now - timedelta(days=seed["days_ago"]),
                },
            )
        store.create(
            user,
            {
                "title": "Unfinished thoughts",
                "content": "Not ready yet.",
                "is_draft": True,
                "published_at": None,
            },
        )
        store.create(
            user,
            {
                "title": "Coming next week",
                "content": "Scheduled ahead of time.",
                "is_draft": False,
                "published_at": now + timedelta(days=7),
            },
        )

    print(f"Seeded {len(SEED_POSTS) + 2} posts for user #{user.id}.")
    print(f"API token: {token}")


if __name__ == "__main__":
    main()
