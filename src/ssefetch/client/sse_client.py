"""SSE connection orchestrator.

Issues the HTTP request through httpx, validates the response, and runs the
decode pipeline:

    response chunks ──→ FIFO queue ──→ LineSplitter ──→ RecordAssembler ──→ classify ──→ listeners

Reading and decoding run as two tasks joined by the queue, so a slow listener
never stalls the socket and chunks are always decoded in arrival order.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import httpx
import structlog

from ssefetch.config import ClientConfig
from ssefetch.errors import (
    ContentTypeError,
    ReadFailure,
    RequestFailure,
    SSEClientError,
    StatusError,
)
from ssefetch.stream.line_splitter import LineSplitter
from ssefetch.stream.record_assembler import RecordAssembler, SSERecord

from .dispatcher import EventDispatcher, Listener
from .events import ErrorEvent, classify
from .state_machine import ConnectionState, InvalidTransition, transition

log = structlog.get_logger()

EVENT_STREAM = "text/event-stream"


@dataclass
class SSEOptions:
    """Per-connection request options."""

    headers: Mapping[str, str] = field(default_factory=dict)
    body: bytes | str | None = None
    method: str | None = None


def _describe(exc: Exception) -> str:
    return str(exc) or type(exc).__name__


def _current_task() -> asyncio.Task[Any] | None:
    try:
        return asyncio.current_task()
    except RuntimeError:
        return None


class SSEClient:
    """Consumes a Server-Sent Events stream and publishes typed events.

    Usage::

        client = SSEClient(url, SSEOptions(method="POST", body=payload))
        client.add_event_listener("message", on_message)
        client.add_event_listener("error", on_error)
        client.start()
        ...
        client.close()

    or ``async with SSEClient(url) as client: ...``, which starts on entry and
    closes on exit.
    """

    def __init__(
        self,
        url: str,
        options: SSEOptions | None = None,
        *,
        config: ClientConfig | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.url = url
        self.options = options or SSEOptions()
        self.config = config or ClientConfig()
        self._http_client = http_client
        self._owns_http_client = http_client is None
        self._state = ConnectionState.CONNECTING
        self._dispatcher = EventDispatcher()
        # Cancellation token: set once, by close() or a terminal error.
        self._cancelled = False
        self._task: asyncio.Task[None] | None = None

    @property
    def ready_state(self) -> ConnectionState:
        return self._state

    @property
    def closed(self) -> bool:
        return self._state is ConnectionState.CLOSED

    def add_event_listener(self, event_type: str, listener: Listener) -> None:
        """Register ``listener`` for ``"message"``, ``"error"``, ``"empty"`` or a custom event name."""
        self._dispatcher.add(event_type, listener)

    def remove_event_listener(self, event_type: str, listener: Listener | None = None) -> None:
        """Remove one listener, or every listener of ``event_type`` when none is given."""
        self._dispatcher.remove(event_type, listener)

    # -- lifecycle ---------------------------------------------------------

    def start(self) -> asyncio.Task[None]:
        """Schedule the connection on the running loop and return its task."""
        if self._task is not None:
            return self._task
        if self._state is ConnectionState.CLOSED:
            raise InvalidTransition(self._state, ConnectionState.CONNECTING)
        self._task = asyncio.get_running_loop().create_task(
            self._run(), name=f"sse-client {self.url}"
        )
        return self._task

    async def wait_closed(self) -> None:
        """Wait until the connection task has finished."""
        if self._task is not None:
            await asyncio.wait({self._task})

    def close(self) -> None:
        """Abort any request or read in flight and move to CLOSED. Idempotent."""
        self._shutdown("close")

    async def __aenter__(self) -> SSEClient:
        self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.close()
        await self.wait_closed()

    def _shutdown(self, trigger: str) -> None:
        if self._state is ConnectionState.CLOSED:
            return
        self._cancelled = True
        self._state = transition(self._state, ConnectionState.CLOSED, self.url, trigger)
        task = self._task
        if task is not None and not task.done() and task is not _current_task():
            task.cancel()

    # -- connection --------------------------------------------------------

    async def _run(self) -> None:
        if self._http_client is not None:
            client = self._http_client
        else:
            client = httpx.AsyncClient(
                timeout=self.config.timeout(),
                follow_redirects=self.config.follow_redirects,
            )
        try:
            await self._connect(client)
        except asyncio.CancelledError:
            if not self._cancelled:
                raise
            log.debug("sse_cancelled", url=self.url)
        finally:
            if self._owns_http_client:
                await client.aclose()

    def _request_headers(self) -> httpx.Headers:
        headers = httpx.Headers(self.options.headers)
        if "accept" not in headers:
            headers["Accept"] = EVENT_STREAM
        return headers

    async def _connect(self, client: httpx.AsyncClient) -> None:
        method = self.options.method or self.config.default_method
        log.info("sse_connecting", url=self.url, method=method)

        # Malformed URLs and unencodable headers fail while the request is built.
        try:
            request = client.build_request(
                method,
                self.url,
                headers=self._request_headers(),
                content=self.options.body,
            )
            response = await client.send(request, stream=True)
        except (httpx.HTTPError, httpx.InvalidURL, ValueError, TypeError) as exc:
            if self._cancelled:
                return
            self._fail(RequestFailure(_describe(exc)), exc, None)
            return

        try:
            if self._validate(response):
                await self._consume(response)
        finally:
            await response.aclose()

    def _validate(self, response: httpx.Response) -> bool:
        if not response.is_success:
            self._fail(StatusError(response.status_code), None, response)
            return False

        content_type = response.headers.get("content-type")
        if content_type is None or not content_type.lower().startswith(EVENT_STREAM):
            self._fail(ContentTypeError(content_type), None, response)
            return False

        if self._cancelled:
            return False
        self._state = transition(
            self._state, ConnectionState.OPEN, self.url, trigger="response_validated"
        )
        log.info("sse_open", url=self.url, status=response.status_code)
        return True

    async def _consume(self, response: httpx.Response) -> None:
        assembler = RecordAssembler(self._on_record)
        splitter = LineSplitter(
            lambda line: assembler.handle_line(line.decode("utf-8", errors="replace"))
        )
        queue: asyncio.Queue[bytes | None] = asyncio.Queue()
        decoder = asyncio.create_task(self._decode(queue, splitter))

        read_error: httpx.HTTPError | None = None
        try:
            try:
                async for chunk in response.aiter_bytes():
                    if chunk:
                        queue.put_nowait(chunk)
            except httpx.HTTPError as exc:
                read_error = exc
            # End marker: lets the decoder finish what was already queued.
            queue.put_nowait(None)
            await decoder
        finally:
            decoder.cancel()

        if self._cancelled:
            return
        if read_error is not None:
            self._fail(ReadFailure(_describe(read_error)), read_error, response)
            return
        log.info("sse_stream_ended", url=self.url, pending_bytes=len(splitter.pending))
        self._shutdown("end_of_stream")

    async def _decode(self, queue: asyncio.Queue[bytes | None], splitter: LineSplitter) -> None:
        while True:
            chunk = await queue.get()
            if chunk is None or self._cancelled:
                return
            splitter.append(chunk)

    # -- publishing --------------------------------------------------------

    def _on_record(self, record: SSERecord) -> None:
        if self._cancelled:
            return
        event = classify(record)
        log.debug(
            "sse_record_dispatched",
            url=self.url,
            event_type=event.type,
            record_id=record.id,
            data_len=len(record.data),
        )
        self._dispatcher.dispatch(event)

    def _fail(
        self,
        error: SSEClientError,
        cause: Exception | None,
        response: httpx.Response | None,
    ) -> None:
        error.__cause__ = cause
        log.warning(
            "sse_error",
            url=self.url,
            error_type=type(error).__name__,
            error=str(error),
            status=response.status_code if response is not None else None,
        )
        if not self._cancelled:
            self._dispatcher.dispatch(ErrorEvent(error=error, response=response))
        self._shutdown("error")
