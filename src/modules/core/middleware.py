import re
import uuid
from contextvars import ContextVar
from typing import Callable

import structlog
from django.http import HttpRequest, HttpResponse

correlation_id_var: ContextVar[str] = ContextVar("correlation_id", default="")

logger = structlog.get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

# Store-scoped routes carry the store id (or slug, for public placement).
STORE_PATH = re.compile(r"^/api/v1/stores/(?P<store>[^/]+)/")


class CorrelationIdMiddleware:
    """Tag every request with a correlation id.

    Reuses the inbound ``X-Request-ID`` header or generates a UUID4 and
    binds it into the structlog context, together with the store the
    request targets, so every log line of the request carries both.
    The id is echoed back on the response.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        cid = request.META.get("HTTP_X_REQUEST_ID") or str(uuid.uuid4())
        correlation_id_var.set(cid)

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(correlation_id=cid)
        match = STORE_PATH.match(request.path)
        if match:
            structlog.contextvars.bind_contextvars(store=match.group("store"))

        started = logger.bind(method=request.method, path=request.path)
        started.info("request_started")

        response = self.get_response(request)

        started.info("request_finished", status_code=response.status_code)

        response[REQUEST_ID_HEADER] = cid
        return response
