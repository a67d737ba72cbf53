"""
Transports for the MCP server: newline-delimited JSON over stdio, and HTTP
with a Server-Sent Events stream for server-initiated messages
"""

import asyncio
import json
import logging
import sys
import time
import uuid
from abc import ABC, abstractmethod
from collections.abc import Callable, Coroutine
from typing import Any

from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse
from sse_starlette.sse import EventSourceResponse

from .protocol import INVALID_REQUEST, PARSE_ERROR, format_error

logger = logging.getLogger(__name__)

MessageHandler = Callable[[dict[str, Any]], Coroutine[Any, Any, dict[str, Any] | None]]


class Transport(ABC):
    """Abstract base class for MCP transport implementations"""

    @abstractmethod
    async def connect(self) -> None:
        """Establish connection"""

    @abstractmethod
    async def send(self, message: dict[str, Any]) -> None:
        """Send a message"""

    async def receive(self) -> dict[str, Any] | None:
        """Receive the next message, or None once the transport is closed"""
        raise NotImplementedError

    @abstractmethod
    async def close(self) -> None:
        """Close the connection"""

    def set_message_handler(self, handler: MessageHandler) -> None:
        """Set the handler for transports that push messages to the server"""


class StdioTransport(Transport):
    """One JSON-RPC message per line on stdin/stdout"""

    def __init__(self):
        self.closed = False
        self._receive_queue: asyncio.Queue[dict[str, Any] | None] = asyncio.Queue()
        self._stdin_reader: asyncio.StreamReader | None = None
        self._stdin_task: asyncio.Task | None = None
        logger.info("StdioTransport initialized")

    async def connect(self) -> None:
        if self._stdin_task and not self._stdin_task.done():
            logger.warning("StdioTransport: Already connected")
            return

        loop = asyncio.get_running_loop()
        self._stdin_reader = asyncio.StreamReader()
        protocol = asyncio.StreamReaderProtocol(self._stdin_reader)
        try:
            await loop.connect_read_pipe(lambda: protocol, sys.stdin)
        except (OSError, ValueError) as e:
            logger.error(f"StdioTransport: Failed to connect to stdin: {e}")
            self.closed = True
            await self._receive_queue.put(None)
            return

        self._stdin_task = asyncio.create_task(self._read_stdin(), name="StdioReader")
        logger.info("StdioTransport: Connected to stdin")

    async def _read_stdin(self) -> None:
        assert self._stdin_reader is not None
        try:
            while not self.closed:
                line_bytes = await self._stdin_reader.readline()
                if not line_bytes:
                    logger.info("StdioTransport: EOF received, closing")
                    break
                await self._process_line(line_bytes.decode("utf-8").strip())
        except asyncio.CancelledError:
            logger.info("StdioTransport: Reader task cancelled")
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"StdioTransport: Unexpected error in reader: {e}", exc_info=True)
        finally:
            self.closed = True
            await self._receive_queue.put(None)

    async def _process_line(self, line: str) -> None:
        if not line:
            return

        try:
            message = json.loads(line)
        except json.JSONDecodeError as e:
            logger.warning(f"StdioTransport: Invalid JSON: {e}")
            await self.send(format_error(None, PARSE_ERROR, f"Parse error: {e}"))
            return

        await self._receive_queue.put(message)

    async def send(self, message: dict[str, Any]) -> None:
        if self.closed:
            logger.warning("StdioTransport: Attempted send on closed transport")
            return

        message.setdefault("jsonrpc", "2.0")
        print(json.dumps(message), flush=True)
        logger.debug(f"StdioTransport: Sent {_message_type(message)} (ID: {message.get('id', 'N/A')})")

    async def receive(self) -> dict[str, Any] | None:
        if self.closed and self._receive_queue.empty():
            return None

        message = await self._receive_queue.get()
        self._receive_queue.task_done()
        if message is None:
            self.closed = True
        return message

    async def close(self) -> None:
        if self.closed and self._stdin_task is None:
            return

        logger.info("StdioTransport: Closing")
        self.closed = True

        if self._stdin_task and not self._stdin_task.done():
            self._stdin_task.cancel()
            try:
                await asyncio.wait_for(self._stdin_task, timeout=1.0)
            except (asyncio.CancelledError, asyncio.TimeoutError):
                pass
        self._stdin_task = None

        self._receive_queue.put_nowait(None)
        logger.info("StdioTransport: Closed")


class SSETransport(Transport):
    """
    HTTP transport on a FastAPI app.

    Requests POSTed to "/" or "/mcp" are answered in the HTTP response body.
    Messages the server sends on its own (notifications) are broadcast to
    clients subscribed to GET /sse.
    """

    def __init__(self, host: str = "localhost", port: int = 8000, app: FastAPI | None = None):
        self.host = host
        self.port = port
        self.app = app
        self.clients: list[asyncio.Queue] = []
        self.closed = False
        self._message_handler: MessageHandler | None = None
        logger.info(f"SSETransport initialized for {host}:{port}")

    def set_message_handler(self, handler: MessageHandler) -> None:
        self._message_handler = handler
        logger.info("SSETransport: Message handler set")

    async def connect(self) -> None:
        """Register the MCP routes on the FastAPI app"""
        if self.app is None:
            raise RuntimeError("SSETransport requires an assigned FastAPI app instance")

        self.app.post("/")(self.handle_post)
        self.app.post("/mcp")(self.handle_post)
        self.app.get("/sse")(self.handle_sse)
        self.app.get("/ping")(self.handle_ping)

        logger.info(f"SSETransport: Routes ready for http://{self.host}:{self.port}")

    async def handle_ping(self) -> JSONResponse:
        return JSONResponse(
            {"status": "ok", "timestamp": time.time(), "connected_clients": len(self.clients)}
        )

    async def handle_post(self, request: Request) -> Response:
        """Answer one JSON-RPC message"""
        try:
            message = json.loads(await request.body())
        except json.JSONDecodeError as e:
            return JSONResponse(status_code=400, content=format_error(None, PARSE_ERROR, f"Parse error: {e}"))

        if not isinstance(message, dict):
            return JSONResponse(
                status_code=400,
                content=format_error(None, INVALID_REQUEST, "Invalid Request", "Batch requests are not supported"),
            )

        if self._message_handler is None:
            return JSONResponse(status_code=503, content={"error": "No message handler configured"})

        logger.info(f"HTTP POST received: {message.get('method')} (ID: {message.get('id')})")
        response = await self._message_handler(message)

        if response is None:
            # Notification
            return Response(status_code=202)
        return JSONResponse(content=response)

    async def handle_sse(self, request: Request) -> EventSourceResponse:
        """Stream server-initiated messages to one client"""
        client_info = f"{request.client.host}:{request.client.port}" if request.client else "unknown"
        client_queue: asyncio.Queue = asyncio.Queue(maxsize=100)
        self.clients.append(client_queue)
        logger.info(f"SSE client {client_info} connected. Total clients: {len(self.clients)}")

        async def event_generator():
            try:
                yield {
                    "event": "system",
                    "data": json.dumps({"type": "connected", "message": "SSE connection established"}),
                    "id": f"conn_{uuid.uuid4().hex[:8]}",
                }
                while not self.closed:
                    event = await client_queue.get()
                    if event is None:
                        break
                    yield event
            finally:
                if client_queue in self.clients:
                    self.clients.remove(client_queue)
                logger.info(f"SSE client {client_info} disconnected. Remaining: {len(self.clients)}")

        return EventSourceResponse(event_generator(), ping=15)

    async def send(self, message: dict[str, Any]) -> None:
        """Broadcast a message to all connected SSE clients"""
        if self.closed:
            return

        message.setdefault("jsonrpc", "2.0")
        method = message.get("method") or ""
        event_type = "system" if method.startswith("notifications/") else "message"
        event = {
            "event": event_type,
            "data": json.dumps(message),
            "id": f"sse_{message.get('id', uuid.uuid4().hex[:8])}",
        }

        for client_queue in list(self.clients):
            try:
                client_queue.put_nowait(event)
            except asyncio.QueueFull:
                logger.warning(f"SSE client queue full, dropping {event['id']}")

    async def receive(self) -> dict[str, Any] | None:
        """Requests arrive through HTTP handlers, not a receive loop"""
        return None

    async def close(self) -> None:
        if self.closed:
            return

        logger.info("SSETransport: Closing")
        self.closed = True
        for client_queue in list(self.clients):
            try:
                client_queue.put_nowait(None)
            except asyncio.QueueFull:
                pass
        self.clients.clear()
        logger.info("SSETransport: Closed")


def _message_type(message: dict[str, Any]) -> str:
    if "result" in message:
        return "response"
    elif "error" in message:
        return "error"
    elif "method" in message:
        return "notification"
    return "unknown"
