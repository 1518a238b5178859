"""Request ID injection and access logging middleware."""

import time
import uuid

from starlette.types import ASGIApp, Message, Receive, Scope, Send

from taskflow.core.logging import bind_request_context, get_logger

REQUEST_ID_HEADER = b"x-request-id"


class RequestIDMiddleware:
    """Give every HTTP request an ID and log its start and completion.

    An incoming X-Request-ID header is reused, otherwise a UUID4 is generated.
    The ID is bound into the structlog context for the whole request and
    echoed back in the response headers.
    """

    def __init__(self, app: ASGIApp):
        self.app = app
        self.logger = get_logger(__name__)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = self._incoming_request_id(scope) or str(uuid.uuid4())
        bind_request_context(request_id, method=scope["method"], path=scope["path"])
        started = time.perf_counter()

        self.logger.info("request.start")

        async def send_with_request_id(message: Message) -> None:
            if message["type"] == "http.response.start":
                message["headers"] = [
                    *message.get("headers", []),
                    (REQUEST_ID_HEADER, request_id.encode()),
                ]
                self.logger.info(
                    "request.complete",
                    status_code=message["status"],
                    duration_ms=round((time.perf_counter() - started) * 1000, 1),
                )
            await send(message)

        await self.app(scope, receive, send_with_request_id)

    @staticmethod
    def _incoming_request_id(scope: Scope) -> str | None:
        for name, value in scope.get("headers", []):
            if name == REQUEST_ID_HEADER and value:
                return value.decode("latin-1")
        return None
