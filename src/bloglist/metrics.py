"""Prometheus collectors shared by the API and the store layer."""

from prometheus_client import Counter

# Prometheus counter to track API requests by method, endpoint and status code
REQUEST_COUNTER = Counter(
    "api_requests_total",
    "Total API requests",
    ["method", "endpoint", "status"],
)

USER_REGISTERED_COUNTER = Counter(
    "users_registered_total", "Total users registered"
)
LOGIN_COUNTER = Counter(
    "logins_total", "Login attempts by outcome", ["outcome"]
)
BLOG_CREATED_COUNTER = Counter(
    "blogs_created_total", "Total blogs created"
)
BLOG_DELETED_COUNTER = Counter(
    "blogs_deleted_total", "Total blogs deleted"
)
