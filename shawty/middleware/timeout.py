"""Read and write deadlines for HTTP exchanges.

uvicorn bounds idle keep-alive connections but not how long a client may
take to deliver a request body or to accept a response. This middleware
wraps the ASGI channels to enforce both.
"""

import asyncio

from fastapi import HTTPException, status
from loguru import logger
from starlette.types import ASGIApp, Message, Receive, Scope, Send


class TimeoutMiddleware:
    """
    Pure ASGI middleware enforcing server read and write timeouts.

    The read deadline covers the whole request body and is measured from
    the moment the request reaches the application. A read that misses it
    fails with 408. Each response message must be sent within the write
    timeout; once the response has started a late client is dropped.
    """

    def __init__(self, app: ASGIApp, read_timeout: float, write_timeout: float):
        self.app = app
        self.read_timeout = read_timeout
        self.write_timeout = write_timeout

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.read_timeout
        body_complete = False
        response_started = False

        async def receive_with_deadline() -> Message:
            nonlocal body_complete
            if body_complete:
                # Only disconnect notifications remain
                return await receive()

            try:
                message = await asyncio.wait_for(receive(), max(deadline - loop.time(), 0))
            except asyncio.TimeoutError:
                logger.warning(
                    "Request body for {} {} not received within {}s",
                    scope.get("method"), scope.get("path"), self.read_timeout,
                )
                # HTTPException passes through body parsing untouched
                raise HTTPException(
                    status_code=status.HTTP_408_REQUEST_TIMEOUT,
                    detail="Request read timed out"
                )

            if message["type"] != "http.request" or not message.get("more_body", False):
                body_complete = True
            return message

        async def send_with_deadline(message: Message) -> None:
            nonlocal response_started
            try:
                await asyncio.wait_for(send(message), self.write_timeout)
            except asyncio.TimeoutError:
                if not response_started:
                    raise
                logger.warning(
                    "Response for {} {} not written within {}s, dropping client",
                    scope.get("method"), scope.get("path"), self.write_timeout,
                )
                return

            if message["type"] == "http.response.start":
                response_started = True

        await self.app(scope, receive_with_deadline, send_with_deadline)
