"""FastAPI application exposing user, login and blog endpoints."""

from contextlib import asynccontextmanager
from typing import Dict, List, Optional

import logging
from fastapi import APIRouter, Depends, FastAPI, Request, Response, status
from pydantic import BaseModel, ConfigDict, Field

from sqlalchemy.orm import Session

from . import services
from .auth import create_access_token, get_current_user, get_settings
from .config import Settings
from .database import get_db, init_db, make_engine, make_session_factory
from .errors import Unauthorized, register_exception_handlers
from .metrics import LOGIN_COUNTER, REQUEST_COUNTER
from .models.user import User


logger = logging.getLogger(__name__)

router = APIRouter()


class UserCreate(BaseModel):
    """Request body for registering a new user."""

    username: Optional[str] = None
    name: Optional[str] = None
    password: Optional[str] = None


class UserLogin(BaseModel):
    """Request body for user login."""

    username: Optional[str] = None
    password: Optional[str] = None


class LoginResponse(BaseModel):
    """Bearer token together with the identity it was issued for."""

    token: str
    username: str
    name: str


class BlogOwner(BaseModel):
    """Owner of a blog as embedded in blog responses."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    username: str
    name: str


class BlogSummary(BaseModel):
    """Blog as embedded in user responses."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    author: str
    url: str
    likes: int


class BlogResponse(BlogSummary):
    """Serialized blog with its owner expanded."""

    user: BlogOwner


class UserResponse(BaseModel):
    """Serialized user; the password hash is never part of it."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    username: str
    name: str
    blogs: List[BlogSummary] = Field(default_factory=list)


class BlogCreate(BaseModel):
    """Request body for creating a blog."""

    title: Optional[str] = None
    author: Optional[str] = None
    url: Optional[str] = None
    likes: Optional[int] = None


class BlogUpdate(BaseModel):
    """Partial update of a blog; omitted fields are left untouched."""

    title: Optional[str] = None
    author: Optional[str] = None
    url: Optional[str] = None
    likes: Optional[int] = None


@router.get("/ping")
def ping() -> Dict[str, str]:
    """Health check that touches no dependencies."""
    return {"message": "pong"}


@router.post("/users", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register(
    payload: UserCreate,
    response: Response,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    user = services.create_user(
        db,
        username=payload.username,
        name=payload.name,
        password=payload.password,
        settings=settings,
    )
    response.headers["Location"] = f"{settings.api_prefix}/users/{user.id}"
    return user


@router.get("/users", response_model=List[UserResponse])
def list_users(db: Session = Depends(get_db)):
    return services.list_users(db)


@router.get("/users/{user_id}", response_model=UserResponse)
def get_user(user_id: str, db: Session = Depends(get_db)):
    return services.get_user(db, user_id)


@router.post("/login", response_model=LoginResponse)
def login(
    payload: UserLogin,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    try:
        user = services.authenticate(db, payload.username, payload.password, settings)
    except Unauthorized:
        LOGIN_COUNTER.labels(outcome="failure").inc()
        logger.info("failed login attempt username=%s", payload.username)
        raise
    LOGIN_COUNTER.labels(outcome="success").inc()
    token = create_access_token(user.id, user.username, settings)
    return LoginResponse(token=token, username=user.username, name=user.name)


@router.get("/blogs", response_model=List[BlogResponse])
def list_blogs(db: Session = Depends(get_db)):
    return services.list_blogs(db)


@router.get("/blogs/{blog_id}", response_model=BlogResponse)
def get_blog(blog_id: str, db: Session = Depends(get_db)):
    return services.get_blog(db, blog_id)


@router.post("/blogs", response_model=BlogResponse, status_code=status.HTTP_201_CREATED)
def create_blog(
    payload: BlogCreate,
    response: Response,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Create a blog owned by the authenticated user."""
    blog = services.create_blog(
        db,
        owner=current_user,
        title=payload.title,
        url=payload.url,
        author=payload.author,
        likes=payload.likes,
    )
    response.headers["Location"] = f"{settings.api_prefix}/blogs/{blog.id}"
    return blog


@router.put("/blogs/{blog_id}", response_model=BlogResponse)
def update_blog(blog_id: str, payload: BlogUpdate, db: Session = Depends(get_db)):
    """Update blog fields; open to anonymous callers, ownership is immutable."""
    return services.update_blog(db, blog_id, payload.model_dump(exclude_unset=True))


@router.delete("/blogs/{blog_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_blog(
    blog_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Delete a blog; only its owner may do so."""
    services.delete_blog(db, blog_id, current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


async def log_requests(request: Request, call_next):
    """Log incoming requests and their outcomes while updating metrics."""
    logger.info("request %s %s", request.method, request.url.path)
    try:
        response = await call_next(request)
    except Exception:
        REQUEST_COUNTER.labels(
            method=request.method,
            endpoint=_endpoint_label(request),
            status="500",
        ).inc()
        logger.exception(
            "error handling %s %s", request.method, request.url.path
        )
        raise
    REQUEST_COUNTER.labels(
        method=request.method,
        endpoint=_endpoint_label(request),
        status=str(response.status_code),
    ).inc()
    logger.info(
        "response %s %s status %s",
        request.method,
        request.url.path,
        response.status_code,
    )
    return response


def _endpoint_label(request: Request) -> str:
    # Use the route template so blog ids do not explode label cardinality.
    route = request.scope.get("route")
    return getattr(route, "path", request.url.path)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    app.state.engine.dispose()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application around an explicit configuration.

    The engine, session factory and settings live on ``app.state`` and are
    handed to the routes through dependencies.
    """
    settings = settings or Settings()
    logging.getLogger("bloglist").setLevel(settings.log_level.upper())

    engine = make_engine(settings.database_url)
    init_db(engine)

    app = FastAPI(title=settings.api_title, lifespan=lifespan)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = make_session_factory(engine)

    register_exception_handlers(app)
    app.middleware("http")(log_requests)
    app.include_router(router, prefix=settings.api_prefix)
    return app
