"""Live AI sessions over WebSocket, the ears and voice of the guesser and the judge.

A ``LiveSession`` wraps one open connection to the live backend: it sends
realtime input envelopes and yields server events until the backend goes
away. ``LiveConnector`` knows the endpoint and credentials and opens
sessions for a given setup.

Protocol:
    send   {"setup": {...}}                 once, right after connecting
    recv   {"setupComplete": {}}            acknowledgement
    send   {"realtimeInput": <frame>}       for every player frame
    recv   {"serverContent": {...}}, ...    audio, transcripts, turn markers
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from typing import Any

import websockets
from pydantic import ValidationError

from verboten.config import Settings
from verboten.errors import SessionClosed, SessionConnectError
from verboten.locales import Language
from verboten.models.live import ActivityDetection, LiveSetup, RealtimeInputFrame, ServerEvent

logger = logging.getLogger(__name__)

_JUDGE_PROMPT = """\
You're a judge listening to a human player of Proscribed Words, who is not allowed to
say any of the words from the proscribed list. If the human player says any of them,
or a very close word with the same radical, or one of the words translated in another
language, then pronounce only the phrase from the human that violated the rule.

Only inflections, misspellings and translations of a proscribed word violate the rule.
Synonyms and related words do not. When no rule is violated, say nothing.

The proscribed words are: {words}"""


class LiveSession:
    """One open live session. Writes are serialized; reads belong to one loop."""

    def __init__(self, ws: Any, role: str) -> None:
        self._ws = ws
        self.role = role
        self._send_lock = asyncio.Lock()

    async def handshake(self, setup: LiveSetup, timeout: float) -> None:
        await self._send(setup.to_wire())
        try:
            message = await asyncio.wait_for(self._ws.recv(), timeout)
        except websockets.exceptions.ConnectionClosed as e:
            raise SessionConnectError(self.role, _close_reason(e)) from e
        except asyncio.TimeoutError as e:
            raise SessionConnectError(self.role, f"no setup acknowledgement after {timeout}s") from e
        try:
            event = ServerEvent.from_wire(message)
        except (ValueError, ValidationError) as e:
            raise SessionConnectError(self.role, f"undecodable setup acknowledgement: {e}") from e
        if event.setup_complete is None:
            raise SessionConnectError(self.role, "backend did not acknowledge the setup")
        logger.debug("%s session ready", self.role)

    async def send_realtime_input(self, frame: RealtimeInputFrame) -> None:
        await self._send({"realtimeInput": frame.to_wire()})

    async def receive(self) -> ServerEvent:
        """Wait for the next server event; raises ``SessionClosed`` at the end."""
        try:
            message = await self._ws.recv()
        except websockets.exceptions.ConnectionClosed as e:
            raise SessionClosed(self.role, _close_reason(e)) from e
        try:
            event = ServerEvent.from_wire(message)
        except (ValueError, ValidationError) as e:
            raise SessionClosed(self.role, f"undecodable event: {e}") from e
        if event.go_away is not None:
            logger.info("%s session will be closed by the backend: %s", self.role, event.go_away)
        return event

    async def events(self) -> AsyncIterator[ServerEvent]:
        """Lazily yield server events until the session closes."""
        while True:
            try:
                yield await self.receive()
            except SessionClosed:
                return

    async def close(self) -> None:
        await self._ws.close()

    async def _send(self, payload: dict[str, Any]) -> None:
        data = json.dumps(payload)
        async with self._send_lock:
            try:
                await self._ws.send(data)
            except websockets.exceptions.ConnectionClosed as e:
                raise SessionClosed(self.role, _close_reason(e)) from e


class LiveConnector:
    def __init__(
        self,
        url: str,
        model: str,
        *,
        headers: dict[str, str] | None = None,
        voice_name: str = "Puck",
        open_timeout: float = 10.0,
    ) -> None:
        self._url = url
        self.model = model
        self._headers = headers or {}
        self.voice_name = voice_name
        self.open_timeout = open_timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> LiveConnector:
        return cls(
            settings.live_url,
            settings.live_model_name,
            headers=settings.live_headers,
            voice_name=settings.live_voice_name,
            open_timeout=settings.request_timeout,
        )

    def guesser_setup(self, language: Language) -> LiveSetup:
        return LiveSetup(
            model=self.model,
            system_instruction=language.live_guesser_prompt,
            voice_name=self.voice_name,
            input_transcription=True,
            output_transcription=True,
            activity_detection=ActivityDetection(),
        )

    def judge_setup(self, forbidden_words: Sequence[str]) -> LiveSetup:
        return LiveSetup(
            model=self.model,
            system_instruction=_JUDGE_PROMPT.format(words=", ".join(forbidden_words)),
            output_transcription=True,
        )

    @asynccontextmanager
    async def session(self, setup: LiveSetup, role: str) -> AsyncIterator[LiveSession]:
        """Open a session, yield it, and close it on every exit path."""
        try:
            ws = await websockets.connect(
                self._url,
                additional_headers=self._headers,
                open_timeout=self.open_timeout,
                max_size=None,
            )
        except (OSError, asyncio.TimeoutError, websockets.exceptions.WebSocketException) as e:
            raise SessionConnectError(role, str(e)) from e

        session = LiveSession(ws, role)
        try:
            await session.handshake(setup, self.open_timeout)
            yield session
        finally:
            await session.close()


def _close_reason(exc: websockets.exceptions.ConnectionClosed) -> str:
    rcvd = exc.rcvd
    if rcvd is None:
        return "connection lost"
    return f"code={rcvd.code} reason={rcvd.reason!r}" if rcvd.reason else f"code={rcvd.code}"
