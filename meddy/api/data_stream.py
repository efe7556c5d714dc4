"""
Server-sent event channel between a chat turn and the browser.

The model loop and the tool callbacks both write into one `DataStream`;
the HTTP response drains it as ``data: {json}\\n\\n`` frames. Parts are
forwarded as soon as they are written, with no buffering policy beyond
the queue itself.
"""

import asyncio
import json
from typing import Any, AsyncIterator, Awaitable, Callable

from fastapi.encoders import jsonable_encoder
from fastapi.responses import StreamingResponse

from meddy.utils.logger import get_logger

logger = get_logger("data_stream")

_CLOSED = object()

_running_turns: set[asyncio.Task] = set()


def encode_part(part: dict) -> str:
    """Frame one stream part as an SSE event."""
    return f"data: {json.dumps(jsonable_encoder(part))}\n\n"


class DataStream:
    """Queue-backed writer shared by the model loop and the tools of one turn."""

    def __init__(self):
        self._queue: asyncio.Queue = asyncio.Queue()
        self.closed = False

    async def write_part(self, part: dict) -> None:
        if self.closed:
            logger.debug(f"Dropping part written after close: {part.get('type')}")
            return
        await self._queue.put(part)

    async def write_data(self, value: Any) -> None:
        """Custom data part, e.g. ``{"type": "text-delta", "content": "..."}``."""
        await self.write_part({"type": "data", "data": value})

    async def write_message_annotation(self, value: Any) -> None:
        await self.write_part({"type": "message-annotation", "annotation": value})

    async def close(self) -> None:
        if not self.closed:
            self.closed = True
            await self._queue.put(_CLOSED)

    async def __aiter__(self) -> AsyncIterator[str]:
        while True:
            part = await self._queue.get()
            if part is _CLOSED:
                return
            yield encode_part(part)


def create_data_stream_response(
    execute: Callable[[DataStream], Awaitable[None]],
) -> StreamingResponse:
    """
    Run ``execute(stream)`` in the background and stream everything it writes.

    An exception raised by ``execute`` is logged and surfaced to the client as a
    single ``error`` part; the stream is always closed afterwards.
    """
    stream = DataStream()

    async def run() -> None:
        try:
            await execute(stream)
        except Exception:
            logger.exception("Chat stream failed")
            await stream.write_part({"type": "error", "error": "An error occurred."})
        finally:
            await stream.close()

    async def body() -> AsyncIterator[str]:
        # the turn keeps running if the client goes away so its messages still get saved
        task = asyncio.create_task(run())
        _running_turns.add(task)
        task.add_done_callback(_running_turns.discard)
        async for frame in stream:
            yield frame

    return StreamingResponse(body(), media_type="text/event-stream")
