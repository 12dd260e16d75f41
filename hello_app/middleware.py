"""ASGI middleware bounding how long a single request may run."""

import logging

import anyio
from fastapi.responses import PlainTextResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = logging.getLogger(__name__)


class RequestTimeoutMiddleware:
    """Cancel requests that run longer than ``timeout`` seconds.

    If the response has not started yet the client gets a 504; otherwise the
    response is cut short and the server closes the connection.
    """

    def __init__(self, app: ASGIApp, timeout: float) -> None:
        self.app = app
        self.timeout = timeout

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        response_started = False

        async def send_wrapper(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        with anyio.move_on_after(self.timeout) as cancel_scope:
            await self.app(scope, receive, send_wrapper)

        if not cancel_scope.cancelled_caught:
            return

        logger.warning(
            f"Request {scope['method']} {scope['path']} exceeded {self.timeout}s timeout"
        )
        if not response_started:
            response = PlainTextResponse("Request timed out", status_code=504)
            await response(scope, receive, send)
