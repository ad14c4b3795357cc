"""Error taxonomy for post operations.

Each error maps to a terminal HTTP status; handlers in ``postboard.main``
turn them into JSON responses.
"""


class PostboardError(Exception):
    """Base class for user-facing errors."""

    status_code = 500
    default_detail = "Internal error"

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class Unauthenticated(PostboardError):
    """No valid identity on a request that requires one."""

    status_code = 401
    default_detail = "Unauthenticated"


class Forbidden(PostboardError):
    """Identity present but not allowed to act on the resource."""

    status_code = 403
    default_detail = "This action is unauthorized"


class NotFound(PostboardError):
    """No such record, or one the caller may not know exists."""

    status_code = 404
    default_detail = "Post not found"
