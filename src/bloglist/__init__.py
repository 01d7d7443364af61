"""Blog list service: users, bearer-token login and owned blog posts."""

from .api import create_app

__all__ = ["create_app"]
