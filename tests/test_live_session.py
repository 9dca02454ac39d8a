from __future__ import annotations

import asyncio
import json
from unittest.mock import AsyncMock

import pytest
import websockets
from websockets.frames import Close

from verboten.errors import SessionClosed, SessionConnectError
from verboten.locales import get_language
from verboten.models.live import LiveSetup, RealtimeInputFrame
from verboten.services.live_session import LiveConnector, LiveSession


class ScriptedSocket:
    """Minimal client connection: replays scripted messages, records sends."""

    def __init__(self, *incoming):
        self.incoming = list(incoming)
        self.sent: list[dict] = []
        self.closed = False

    async def send(self, data):
        self.sent.append(json.loads(data))

    async def recv(self):
        if not self.incoming:
            raise websockets.exceptions.ConnectionClosed(Close(1000, "bye"), None)
        item = self.incoming.pop(0)
        if isinstance(item, BaseException):
            raise item
        return item

    async def close(self):
        self.closed = True


SETUP = LiveSetup(model="models/test", system_instruction="guess")


@pytest.fixture
def connector():
    return LiveConnector("wss://live.example/ws?key=k", "models/test", headers={"X-Test": "1"}, open_timeout=1.0)


class TestLiveSession:
    @pytest.mark.asyncio
    async def test_handshake_sends_setup_first(self):
        ws = ScriptedSocket(b'{"setupComplete": {}}')
        await LiveSession(ws, "guesser").handshake(SETUP, timeout=1.0)
        assert ws.sent == [SETUP.to_wire()]

    @pytest.mark.asyncio
    async def test_handshake_rejected(self):
        ws = ScriptedSocket(websockets.exceptions.ConnectionClosed(Close(1007, "API key not valid"), None))
        with pytest.raises(SessionConnectError, match="API key not valid"):
            await LiveSession(ws, "judge").handshake(SETUP, timeout=1.0)

    @pytest.mark.asyncio
    async def test_handshake_without_acknowledgement(self):
        ws = ScriptedSocket('{"serverContent": {}}')
        with pytest.raises(SessionConnectError, match="did not acknowledge"):
            await LiveSession(ws, "judge").handshake(SETUP, timeout=1.0)

    @pytest.mark.asyncio
    async def test_handshake_timeout(self):
        ws = ScriptedSocket()

        async def never():
            await asyncio.Event().wait()

        ws.recv = never
        with pytest.raises(SessionConnectError, match="no setup acknowledgement"):
            await LiveSession(ws, "guesser").handshake(SETUP, timeout=0.01)

    @pytest.mark.asyncio
    async def test_send_wraps_frame_in_envelope(self):
        ws = ScriptedSocket()
        frame = RealtimeInputFrame.parse('{"text": "hi"}')
        await LiveSession(ws, "guesser").send_realtime_input(frame)
        assert ws.sent == [{"realtimeInput": {"text": "hi"}}]

    @pytest.mark.asyncio
    async def test_events_until_close(self):
        ws = ScriptedSocket(
            '{"serverContent": {"outputTranscription": {"text": "a"}}}',
            b'{"serverContent": {"turnComplete": true}}',
        )
        session = LiveSession(ws, "judge")

        events = [e async for e in session.events()]

        assert [e.output_text for e in events] == ["a", ""]
        assert events[1].turn_complete

    @pytest.mark.asyncio
    async def test_receive_after_close(self):
        session = LiveSession(ScriptedSocket(), "guesser")
        with pytest.raises(SessionClosed) as exc:
            await session.receive()
        assert exc.value.role == "guesser"
        assert "1000" in exc.value.reason

    @pytest.mark.asyncio
    async def test_undecodable_event_closes_the_session(self):
        session = LiveSession(ScriptedSocket("not json"), "judge")
        with pytest.raises(SessionClosed, match="undecodable"):
            await session.receive()


class TestLiveConnector:
    def test_guesser_setup(self, connector):
        setup = connector.guesser_setup(get_language("fr"))
        assert setup.voice_name == "Puck"
        assert setup.input_transcription and setup.output_transcription
        assert setup.activity_detection is not None
        assert "mot à deviner" in setup.system_instruction

    def test_judge_setup_lists_words(self, connector):
        setup = connector.judge_setup(["Rope", "Cord"])
        assert setup.system_instruction.endswith("The proscribed words are: Rope, Cord")
        assert setup.output_transcription
        assert not setup.input_transcription
        assert setup.response_modalities == ["AUDIO"]

    @pytest.mark.asyncio
    async def test_session_opens_and_closes(self, connector, monkeypatch):
        ws = ScriptedSocket('{"setupComplete": {}}')
        connect = AsyncMock(return_value=ws)
        monkeypatch.setattr(websockets, "connect", connect)

        async with connector.session(SETUP, "guesser") as session:
            assert session.role == "guesser"
            assert not ws.closed

        assert ws.closed
        assert connect.await_args.args == ("wss://live.example/ws?key=k",)
        assert connect.await_args.kwargs["additional_headers"] == {"X-Test": "1"}

    @pytest.mark.asyncio
    async def test_unreachable_backend(self, connector, monkeypatch):
        monkeypatch.setattr(websockets, "connect", AsyncMock(side_effect=OSError("unreachable")))

        with pytest.raises(SessionConnectError, match="unreachable"):
            async with connector.session(SETUP, "judge"):
                pass

    @pytest.mark.asyncio
    async def test_failed_handshake_closes_socket(self, connector, monkeypatch):
        ws = ScriptedSocket('{"goAway": {}}')
        monkeypatch.setattr(websockets, "connect", AsyncMock(return_value=ws))

        with pytest.raises(SessionConnectError):
            async with connector.session(SETUP, "judge"):
                pass
        assert ws.closed
