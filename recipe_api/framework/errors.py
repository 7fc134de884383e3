class ServiceError(Exception):
    """
    Base class for failures that are turned into an HTTP response.
    `detail` is the plain-text body sent to the client, so it must never
    carry internal information.
    """

    status_code = 500
    detail = "Internal Server Error"

    def __init__(self, message: str | None = None, **context):
        super().__init__(message or self.detail)
        self.context = context


class InvalidPayload(ServiceError):
    """The request body is not a well-formed payload for the route."""

    status_code = 400
    detail = "Invalid JSON"


class BodyReadError(ServiceError):
    """The request body stream could not be read."""

    status_code = 400
    detail = "Failed to read body"


class NotFound(ServiceError):
    status_code = 404
    detail = "Not Found"


class RecipeNotFound(NotFound):
    detail = "Recipe not found"


class MethodNotAllowed(ServiceError):
    status_code = 405
    detail = "Method Not Allowed"


class StoreUnavailable(ServiceError):
    """The key-value bucket could not be opened or an operation on it failed."""


class DecodeError(ServiceError):
    """
    A record written by this service can no longer be decoded.
    Signals data corruption or a schema migration gap.
    """
