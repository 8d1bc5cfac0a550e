"""/ws/construct -- WebSocket handler for live slider updates.

Connection lifecycle:
1. Client opens ws://host:8000/ws/construct
2. Client sends Configuration JSON on each slider change
3. Server recomputes for the newest configuration (last-write-wins)
4. Server sends a ConstructionResult JSON frame, or an error frame
5. On disconnect, pending configurations are dropped

Concurrency model:
- A task group runs two concurrent tasks: a reader and a worker.
- The reader receives messages, validates them, and posts configurations
  to a memory channel.
- The worker drains the channel to the newest configuration and computes
  it inline (the engine is O(1), no thread pool).
- A lock protects ws.send_text to prevent interleaved frames.

Geometry failures are ordinary result frames (``error`` set); error frames
are reserved for messages that could not be parsed into a Configuration.
"""

from __future__ import annotations

import json
import logging

import anyio
from anyio.streams.memory import MemoryObjectReceiveStream
from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from butterfly.geometry.engine import compute
from butterfly.models import Configuration, ConstructionResult

logger = logging.getLogger("butterfly.ws")

router = APIRouter()

# Maximum accepted WebSocket message size (bytes).  Messages larger than
# this are rejected with an error frame to prevent memory exhaustion.
MAX_MESSAGE_SIZE = 64 * 1024  # 64 KB


def _build_error_frame(error: str, detail: str = "", field: str = "") -> str:
    """Build a JSON error frame."""
    payload: dict[str, str] = {"type": "error", "error": error}
    if detail:
        payload["detail"] = detail
    if field:
        payload["field"] = field
    return json.dumps(payload)


def _build_result_frame(result: ConstructionResult) -> str:
    """Serialize a ConstructionResult with camelCase keys."""
    payload = {"type": "result", **result.model_dump(by_alias=True)}
    return json.dumps(payload)


def _parse_configuration(text: str) -> Configuration | str:
    """Parse a client message.

    Returns:
        The Configuration, or a ready-to-send error frame.
    """
    if len(text) > MAX_MESSAGE_SIZE:
        return _build_error_frame(
            error="Message too large",
            detail=f"Maximum message size is {MAX_MESSAGE_SIZE} bytes",
        )

    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        logger.warning("Malformed JSON from WebSocket client: %s", exc)
        return _build_error_frame(error="Invalid JSON", detail=str(exc))

    if not isinstance(data, dict):
        return _build_error_frame(
            error="Validation error",
            detail="Expected a JSON object",
        )

    try:
        return Configuration(**data)
    except ValidationError as exc:
        logger.warning("Pydantic validation error: %s", exc)
        detail_parts = []
        for err in exc.errors()[:5]:  # limit to 5 errors
            loc = ".".join(str(part) for part in err["loc"])
            detail_parts.append(f"{loc}: {err['msg']}")
        first_loc = exc.errors()[0]["loc"] if exc.errors() else ()
        return _build_error_frame(
            error="Validation error",
            detail="; ".join(detail_parts),
            field=str(first_loc[0]) if first_loc else "",
        )


def _drain_latest(
    recv_ch: MemoryObjectReceiveStream[Configuration],
    first: Configuration,
) -> Configuration:
    """Skip queued configurations and return the newest (last-write-wins)."""
    latest = first
    while True:
        try:
            latest = recv_ch.receive_nowait()
        except (anyio.WouldBlock, anyio.EndOfStream):
            return latest


@router.websocket("/ws/construct")
async def construct_websocket(ws: WebSocket) -> None:
    """Handle a single WebSocket connection for live construction updates.

    Uses a task group with two concurrent tasks:
    - **reader**: receives WebSocket messages, validates them, and sends
      parsed Configuration objects into a memory channel.
    - **worker**: consumes configurations from the channel, skipping to the
      newest one, and sends the computed result back.

    A shared lock protects all ws.send_text calls so the two tasks never
    interleave frames.
    """
    await ws.accept()
    logger.info("WebSocket client connected")

    send_ch, recv_ch = anyio.create_memory_object_stream[Configuration](max_buffer_size=16)
    ws_lock = anyio.Lock()

    async def _send_frame(frame: str) -> None:
        """Send a text frame to the WebSocket, protected by lock."""
        async with ws_lock:
            await ws.send_text(frame)

    async def reader_task() -> None:
        """Read messages from the WebSocket and post validated configurations."""
        try:
            while True:
                try:
                    raw = await ws.receive()
                except WebSocketDisconnect:
                    return

                if raw.get("type") == "websocket.disconnect":
                    return

                # Handle both text and binary frames
                if raw.get("text") is not None:
                    text = raw["text"]
                elif raw.get("bytes") is not None:
                    raw_bytes = raw["bytes"]
                    if len(raw_bytes) > MAX_MESSAGE_SIZE:
                        await _send_frame(_build_error_frame(
                            error="Message too large",
                            detail=f"Maximum message size is {MAX_MESSAGE_SIZE} bytes",
                        ))
                        continue
                    try:
                        text = raw_bytes.decode("utf-8")
                    except UnicodeDecodeError:
                        logger.warning("Received non-UTF-8 binary frame, ignoring")
                        await _send_frame(_build_error_frame(
                            error="Invalid message format",
                            detail="Expected UTF-8 encoded JSON text",
                        ))
                        continue
                else:
                    continue

                parsed = _parse_configuration(text)
                if isinstance(parsed, str):
                    await _send_frame(parsed)
                    continue

                # Post configuration to channel (non-blocking send)
                try:
                    send_ch.send_nowait(parsed)
                except anyio.WouldBlock:
                    # Channel full -- drain old entries and send newest
                    while True:
                        try:
                            recv_ch.receive_nowait()
                        except anyio.WouldBlock:
                            break
                    send_ch.send_nowait(parsed)
        finally:
            send_ch.close()

    async def worker_task() -> None:
        """Consume configurations from the channel and send results."""
        async for config in recv_ch:
            result = compute(_drain_latest(recv_ch, config))
            try:
                await _send_frame(_build_result_frame(result))
            except (WebSocketDisconnect, RuntimeError):
                return

    try:
        async with anyio.create_task_group() as tg:
            tg.start_soon(reader_task)
            tg.start_soon(worker_task)
    except WebSocketDisconnect:
        pass
    except Exception:
        logger.exception("WebSocket error")
    logger.info("WebSocket client disconnected")
