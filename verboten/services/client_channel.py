"""The player's side of a live game: one browser WebSocket."""

from __future__ import annotations

import asyncio
import logging

from fastapi import WebSocket, WebSocketDisconnect
from starlette.websockets import WebSocketState

from verboten.errors import ClientDisconnected
from verboten.models.game import GameNotice

logger = logging.getLogger(__name__)


class ClientChannel:
    """Receives realtime input frames and sends relayed or derived frames.

    Reads belong to one loop. Writes come from two loops (relayed guesser
    events and server notices) and are serialized.
    """

    def __init__(self, websocket: WebSocket) -> None:
        self._ws = websocket
        self._send_lock = asyncio.Lock()

    async def receive_frame(self) -> str:
        try:
            message = await self._ws.receive()
        except RuntimeError as e:
            # Starlette refuses to read after the disconnect message.
            raise ClientDisconnected() from e
        if message["type"] == "websocket.disconnect":
            raise ClientDisconnected(message.get("code"))
        if message.get("text") is not None:
            return message["text"]
        data = message.get("bytes") or b""
        return data.decode("utf-8", errors="replace")

    async def send_event(self, text: str) -> None:
        async with self._send_lock:
            try:
                await self._ws.send_text(text)
            except (WebSocketDisconnect, RuntimeError) as e:
                raise ClientDisconnected(getattr(e, "code", None)) from e

    async def send_notice(self, notice: GameNotice) -> None:
        await self.send_event(notice.to_wire())

    async def close(self, code: int = 1000, reason: str | None = None) -> None:
        if self._ws.application_state == WebSocketState.DISCONNECTED:
            return
        if self._ws.client_state == WebSocketState.DISCONNECTED:
            return
        try:
            await self._ws.close(code=code, reason=reason)
        except RuntimeError as e:
            logger.debug("Client connection already closed: %s", e)
