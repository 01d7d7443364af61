"""Store layer for users and blogs."""

import logging
from functools import lru_cache
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from .auth import hash_password, verify_password
from .config import Settings
from .database import is_object_id
from .errors import Conflict, NotFound, Unauthorized, ValidationError
from .metrics import (
    BLOG_CREATED_COUNTER,
    BLOG_DELETED_COUNTER,
    USER_REGISTERED_COUNTER,
)
from .models import Blog, User


logger = logging.getLogger(__name__)

BLOG_UPDATABLE_FIELDS = ("title", "author", "url", "likes")

# Largest value a 64-bit INTEGER column holds.
MAX_LIKES = 2**63 - 1


@lru_cache(maxsize=None)
def _dummy_hash(rounds: int) -> str:
    # Compared against when the username is unknown so both login failures cost a hash check.
    return hash_password("not-a-real-password", rounds)


def _commit(session: Session) -> None:
    """Commit, rolling back and logging before re-raising on store errors."""
    try:
        session.commit()
    except SQLAlchemyError:
        session.rollback()
        logger.exception("store commit failed")
        raise


def _require_object_id(value: str, kind: str) -> None:
    if not is_object_id(value):
        raise ValidationError(f"malformatted {kind} id")


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


def create_user(
    session: Session,
    username: Optional[str],
    name: Optional[str],
    password: Optional[str],
    settings: Settings,
) -> User:
    """Validate and persist a new user.

    Uniqueness is left to the ``users.username`` unique index so that two
    concurrent registrations cannot both succeed.
    """
    if not username or not password:
        raise ValidationError("username and password are required")
    if len(username) < settings.min_username_length:
        raise ValidationError(
            f"username must be at least {settings.min_username_length} characters long"
        )
    if len(password) < settings.min_password_length:
        raise ValidationError(
            f"password must be at least {settings.min_password_length} characters long"
        )
    if len(password.encode("utf-8")) > settings.max_password_bytes:
        raise ValidationError(
            f"password must be at most {settings.max_password_bytes} bytes long"
        )

    user = User(
        username=username,
        name=name or "",
        password_hash=hash_password(password, settings.bcrypt_rounds),
    )
    session.add(user)
    try:
        session.commit()
    except IntegrityError as exc:
        session.rollback()
        logger.info("registration rejected, username=%s already taken", username)
        raise Conflict("expected `username` to be unique") from exc
    except SQLAlchemyError:
        session.rollback()
        logger.exception("registration failed username=%s", username)
        raise
    session.refresh(user)
    USER_REGISTERED_COUNTER.inc()
    logger.info("registered user id=%s username=%s", user.id, username)
    return user


def find_user_by_username(session: Session, username: str) -> Optional[User]:
    return session.execute(
        select(User).where(User.username == username)
    ).scalar_one_or_none()


def list_users(session: Session) -> List[User]:
    stmt = (
        select(User)
        .options(selectinload(User.blogs))
        .order_by(User.created_at, User.id)
    )
    return list(session.execute(stmt).scalars())


def get_user(session: Session, user_id: str) -> User:
    _require_object_id(user_id, "user")
    user = session.get(User, user_id, options=[selectinload(User.blogs)])
    if user is None:
        raise NotFound("user not found")
    return user


def authenticate(
    session: Session,
    username: Optional[str],
    password: Optional[str],
    settings: Settings,
) -> User:
    """Return the user for valid credentials.

    Unknown usernames and wrong passwords fail with the same error.
    """
    user = find_user_by_username(session, username) if username else None
    hashed = user.password_hash if user is not None else _dummy_hash(settings.bcrypt_rounds)
    password_ok = verify_password(password or "", hashed)
    if user is None or not password_ok:
        raise Unauthorized("invalid username or password")
    return user


# ---------------------------------------------------------------------------
# Blogs
# ---------------------------------------------------------------------------


def _validate_blog_fields(fields: Dict[str, Any]) -> None:
    for key in ("title", "url"):
        if key in fields and not fields[key]:
            raise ValidationError(f"{key} is required")
    if "likes" in fields:
        likes = fields["likes"]
        if likes is None or not 0 <= likes <= MAX_LIKES:
            raise ValidationError(f"likes must be an integer between 0 and {MAX_LIKES}")


def create_blog(
    session: Session,
    owner: User,
    title: Optional[str],
    url: Optional[str],
    author: Optional[str] = None,
    likes: Optional[int] = None,
) -> Blog:
    if not title or not url:
        raise ValidationError("title and url are required")
    if likes is not None:
        _validate_blog_fields({"likes": likes})

    blog = Blog(
        title=title,
        author=author or "",
        url=url,
        likes=likes or 0,
        user_id=owner.id,
    )
    session.add(blog)
    _commit(session)
    session.refresh(blog)
    BLOG_CREATED_COUNTER.inc()
    logger.info("created blog id=%s owner=%s", blog.id, owner.id)
    return blog


def list_blogs(session: Session) -> List[Blog]:
    stmt = (
        select(Blog)
        .options(selectinload(Blog.user))
        .order_by(Blog.created_at, Blog.id)
    )
    return list(session.execute(stmt).scalars())


def get_blog(session: Session, blog_id: str) -> Blog:
    _require_object_id(blog_id, "blog")
    blog = session.get(Blog, blog_id, options=[selectinload(Blog.user)])
    if blog is None:
        raise NotFound("blog not found")
    return blog


def update_blog(session: Session, blog_id: str, fields: Dict[str, Any]) -> Blog:
    """Apply a partial update. Ownership is not part of the updatable set.

    Omitted fields stay unchanged; an explicit null clears ``author`` and is
    rejected for ``title``, ``url`` and ``likes``.
    """
    blog = get_blog(session, blog_id)
    changes = {k: v for k, v in fields.items() if k in BLOG_UPDATABLE_FIELDS}
    if "author" in changes and changes["author"] is None:
        changes["author"] = ""
    _validate_blog_fields(changes)
    for key, value in changes.items():
        setattr(blog, key, value)
    _commit(session)
    session.refresh(blog)
    logger.info("updated blog id=%s fields=%s", blog_id, sorted(changes))
    return blog


def delete_blog(session: Session, blog_id: str, requesting_user_id: Optional[str]) -> None:
    if not requesting_user_id:
        raise Unauthorized("token missing")
    blog = get_blog(session, blog_id)
    if blog.user_id != requesting_user_id:
        logger.info(
            "delete of blog id=%s refused for user=%s", blog_id, requesting_user_id
        )
        raise Unauthorized("only the creator can delete a blog")
    session.delete(blog)
    _commit(session)
    BLOG_DELETED_COUNTER.inc()
    logger.info("deleted blog id=%s", blog_id)
