"""ASGI access-log middleware."""

import time
import uuid

from starlette.types import ASGIApp, Message, Receive, Scope, Send
from structlog.contextvars import bind_contextvars, unbind_contextvars

from jwksgate.core.logging import get_logger

REQUEST_ID_HEADER = b"x-request-id"
USER_AGENT_MAX = 200


class HTTPLogMiddleware:
    """Logs start and end of every HTTP request with a request id.

    Request headers other than the user agent and request id are never logged.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app
        self._logger = get_logger("http")

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        headers = {k.lower(): v for k, v in scope.get("headers", [])}
        request_id = (
            headers.get(REQUEST_ID_HEADER, b"").decode("latin-1")
            or uuid.uuid4().hex
        )
        client = scope.get("client")
        bind_contextvars(request_id=request_id)

        status = {"code": 500}

        async def send_wrapper(message: Message) -> None:
            if message["type"] == "http.response.start":
                status["code"] = message["status"]
                response_headers = list(message.get("headers", []))
                if not any(k.lower() == REQUEST_ID_HEADER for k, _ in response_headers):
                    response_headers.append((REQUEST_ID_HEADER, request_id.encode()))
                message["headers"] = response_headers
            await send(message)

        self._logger.info(
            "http_request_start",
            method=scope.get("method"),
            path=scope.get("path"),
            client_ip=client[0] if client else None,
            ua=headers.get(b"user-agent", b"").decode("latin-1")[:USER_AGENT_MAX],
        )
        start = time.perf_counter()
        try:
            await self.app(scope, receive, send_wrapper)
        except Exception:
            self._logger.exception(
                "http_request_fail",
                status=status["code"],
                duration_ms=int((time.perf_counter() - start) * 1000),
            )
            raise
        else:
            self._logger.info(
                "http_request_end",
                status=status["code"],
                duration_ms=int((time.perf_counter() - start) * 1000),
            )
        finally:
            unbind_contextvars("request_id")
