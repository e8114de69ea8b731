"""Abandon requests whose client has gone away.

uvicorn reports a dropped connection as an ``http.disconnect`` message but
leaves the handler running. This middleware listens for that message and
cancels the request while no response has been started, so in-flight store
operations stop with it.
"""

import asyncio
from contextlib import suppress

from loguru import logger
from starlette.types import ASGIApp, Message, Receive, Scope, Send


class ClientDisconnectMiddleware:
    """
    Pure ASGI middleware cancelling a request once its client disconnects.

    A background reader owns the server's receive channel and hands the
    messages to the application through a queue. A disconnect that arrives
    before the response has started cancels the application task and
    nothing is sent. Must run outermost, above any BaseHTTPMiddleware.
    """

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        messages: asyncio.Queue = asyncio.Queue()
        response_started = False
        abandoned = False

        async def receive_from_reader() -> Message:
            message = await messages.get()
            if isinstance(message, Exception):
                raise message
            return message

        async def send_tracking_start(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        app_task = asyncio.ensure_future(self.app(scope, receive_from_reader, send_tracking_start))

        async def read_client() -> None:
            nonlocal abandoned
            while True:
                try:
                    message = await receive()
                except Exception as exc:
                    # Surfaces on the application's next receive()
                    messages.put_nowait(exc)
                    return
                messages.put_nowait(message)
                if message["type"] == "http.disconnect":
                    break

            if not response_started:
                abandoned = True
                app_task.cancel()

        reader = asyncio.ensure_future(read_client())
        try:
            await app_task
        except asyncio.CancelledError:
            if not abandoned or asyncio.current_task().cancelling():
                raise
            logger.debug(
                "Client disconnected from {} {} before a response was started, request abandoned",
                scope.get("method"), scope.get("path"),
            )
        finally:
            reader.cancel()
            with suppress(asyncio.CancelledError):
                await reader
