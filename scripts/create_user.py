"""Create a post author and print their API token.

Usage:
    python -m scripts.create_user --name "Ada Lovelace" --email ada@example.com

The token is printed once; only its hash is stored.
"""

import argparse
import logging
import sys

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from postboard.auth import create_user
from postboard.services.database import User, get_session_factory, init_db

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--name", required=True)
    parser.add_argument("--email", required=True)
    args = parser.parse_args(argv)

    init_db()
    with get_session_factory()() as session:
        if session.scalar(select(User).where(User.email == args.email)):
            print(f"A user with email {args.email} already exists.", file=sys.stderr)
            return 1
        try:
            user, token = create_user(session, args.name, args.email)
        except IntegrityError:
            print(f"Could not create user {args.email}.", file=sys.stderr)
            return 1

    print(f"Created user #{user.id} ({user.name} <{user.email}>)")
    print(f"API token: {token}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
