"""Clear and repopulate the user and blog tables with fixture data."""

import logging
from typing import Dict

from sqlalchemy import delete
from sqlalchemy.orm import Session

from .auth import hash_password
from .config import Settings
from .database import init_db, make_engine, make_session_factory
from .models import Blog, User


logger = logging.getLogger(__name__)

SEED_USERS = [
    {"username": "johndoe", "name": "John Doe", "password": "password123"},
    {"username": "janedoe", "name": "Jane Doe", "password": "password456"},
    {"username": "admin", "name": "Administrator", "password": "admin123"},
]

SEED_BLOGS = [
    {
        "title": "First Blog",
        "author": "John Doe",
        "url": "https://example.com/first-blog",
        "likes": 10,
        "owner": "johndoe",
    },
    {
        "title": "Second Blog",
        "author": "Jane Doe",
        "url": "https://example.com/second-blog",
        "likes": 15,
        "owner": "janedoe",
    },
    {
        "title": "Another Blog by John",
        "author": "John Doe",
        "url": "https://example.com/another-blog",
        "likes": 8,
        "owner": "johndoe",
    },
]


def seed_database(session: Session, hash_rounds: int = 10) -> Dict[str, int]:
    """Delete every blog and user, then insert the fixture records."""
    session.execute(delete(Blog))
    session.execute(delete(User))
    logger.info("cleared existing data")

    users = {}
    for record in SEED_USERS:
        user = User(
            username=record["username"],
            name=record["name"],
            password_hash=hash_password(record["password"], hash_rounds),
        )
        session.add(user)
        users[record["username"]] = user
    session.flush()

    for record in SEED_BLOGS:
        session.add(
            Blog(
                title=record["title"],
                author=record["author"],
                url=record["url"],
                likes=record["likes"],
                user_id=users[record["owner"]].id,
            )
        )
    session.commit()

    counts = {"users": len(SEED_USERS), "blogs": len(SEED_BLOGS)}
    logger.info("inserted %s users and %s blogs", counts["users"], counts["blogs"])
    return counts


def main() -> None:
    settings = Settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("starting database seeding using %s", settings.database_url)

    engine = make_engine(settings.database_url)
    try:
        init_db(engine)
        session = make_session_factory(engine)()
        try:
            seed_database(session, settings.bcrypt_rounds)
        except Exception:
            session.rollback()
            logger.exception("seeding failed")
            raise
        finally:
            session.close()
    finally:
        engine.dispose()
    logger.info("database seeded and connection closed")


if __name__ == "__main__":
    main()
