"""Upload Size Limit: stops oversized multipart bodies while they stream in.

Invariants:
    - Only POST requests whose path ends with the upload suffix are inspected
    - A declared Content-Length above the budget is answered 413 before any body is read
    - Undeclared (chunked) bodies are counted chunk by chunk; reading stops past the budget
    - The budget is max_bytes plus a fixed multipart overhead; the adapter still checks
      the exact file size after parsing
"""

import logging

from starlette.datastructures import Headers
from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from gateway.core.errors import PayloadTooLargeError

logger = logging.getLogger(__name__)


class UploadSizeLimit:
    """Pure ASGI middleware guarding the multipart upload routes."""

    def __init__(
        self,
        app: ASGIApp,
        max_bytes: int,
        overhead: int = 16 * 1024,
        path_suffix: str = "/upload",
    ):
        self.app = app
        self.max_bytes = max_bytes
        self.budget = max_bytes + overhead
        self.path_suffix = path_suffix

    def _guards(self, scope: Scope) -> bool:
        return (
            scope["type"] == "http"
            and scope["method"] == "POST"
            and scope["path"].endswith(self.path_suffix)
        )

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if not self._guards(scope):
            await self.app(scope, receive, send)
            return

        declared = Headers(scope=scope).get("content-length")
        if declared is not None and declared.isdigit() and int(declared) > self.budget:
            await self._reject(scope, receive, send, int(declared))
            return

        received = 0
        exceeded = False
        started = False

        async def limited_receive() -> Message:
            nonlocal received, exceeded
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > self.budget:
                    exceeded = True
                    raise PayloadTooLargeError(received, self.max_bytes)
            return message

        async def guarded_send(message: Message) -> None:
            nonlocal started
            # Once the budget is blown the app's own answer (a parse error) is dropped
            if exceeded:
                return
            started = True
            await send(message)

        try:
            await self.app(scope, limited_receive, guarded_send)
        except PayloadTooLargeError:
            if not exceeded or started:
                raise
        if exceeded and not started:
            await self._reject(scope, receive, send, received)

    async def _reject(
        self, scope: Scope, receive: Receive, send: Send, size: int,
    ) -> None:
        error = PayloadTooLargeError(size, self.max_bytes)
        # Picked up by the request diagnostics middleware
        scope.setdefault("state", {})["error"] = error
        logger.debug(f"Upload to {scope['path']} stopped after {size} bytes")
        response = JSONResponse(error.to_response(), status_code=error.http_status)
        await response(scope, receive, send)
