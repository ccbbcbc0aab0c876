"""
Domain errors raised by the pool service layer.

The odds and settlement core never raises; these errors come from the
validation and lookup work the service does around it. Routes translate them
into HTTP responses.
"""


class PoolError(Exception):
    """Base class for betting pool errors."""

    status_code = 500
    message = "Internal server error"

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.message
        super().__init__(self.detail)


class InvalidPayloadError(PoolError):
    """Request data failed validation (unknown slot, bad stake, missing date...)."""

    status_code = 400
    message = "Invalid payload"


class NotFoundError(PoolError):
    """Referenced wager or outcome does not exist."""

    status_code = 404
    message = "Not found"
