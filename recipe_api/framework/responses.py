import logging
from dataclasses import dataclass, field
from typing import Any, Dict

from recipe_api.framework.errors import ServiceError
from recipe_api.framework.logging import log_event, logger
from recipe_api.shared.lib.codec import encode

JSON_CONTENT_TYPE = "application/json"


@dataclass
class HttpResponse:
    """
    Outbound response handed back to the transport.
    """

    status: int
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""

    @property
    def is_json(self) -> bool:
        return self.headers.get("content-type") == JSON_CONTENT_TYPE


def json_response(status: int, payload: Any) -> HttpResponse:
    return HttpResponse(
        status=status,
        headers={"content-type": JSON_CONTENT_TYPE},
        body=encode(payload),
    )


def text_response(status: int, text: str) -> HttpResponse:
    # plain-text bodies go out without a content-type header
    return HttpResponse(status=status, body=text.encode("utf-8"))


def error_response(exc: Exception, operation: str, **context) -> HttpResponse:
    """
    Maps a failure to its response. Client errors answer with their own
    detail; anything else is logged and answered with a generic 500.
    """
    if isinstance(exc, ServiceError) and exc.status_code < 500:
        if exc.status_code == 400:
            log_event(
                "bad_request",
                level=logging.WARNING,
                operation=operation,
                error=str(exc),
                **context,
            )
        return text_response(exc.status_code, exc.detail)

    if isinstance(exc, ServiceError):
        log_event(
            f"{operation}_failed",
            level=logging.ERROR,
            operation=operation,
            error=str(exc),
            **{**exc.context, **context},
        )
    else:
        logger.exception("unhandled error in %s %s", operation, context)

    return text_response(ServiceError.status_code, ServiceError.detail)
