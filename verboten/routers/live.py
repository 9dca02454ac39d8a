"""Live game endpoint, one WebSocket per game."""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query, WebSocket
from fastapi.responses import PlainTextResponse

from verboten.errors import ClientDisconnected, SessionConnectError
from verboten.locales import get_language
from verboten.models.game import EndReason, GameNotice, GameSession
from verboten.services.client_channel import ClientChannel
from verboten.services.game_relay import GameRelay
from verboten.services.live_session import LiveConnector
from verboten.services.verdict_judge import VerdictJudge

logger = logging.getLogger(__name__)

router = APIRouter(tags=["live"])

CLOSE_INVALID_DATA = 1007
CLOSE_INTERNAL_ERROR = 1011


def get_connector(websocket: WebSocket) -> LiveConnector:
    return websocket.app.state.connector


def get_confirmer(websocket: WebSocket) -> VerdictJudge | None:
    return websocket.app.state.verdict_judge


Connector = Annotated[LiveConnector, Depends(get_connector)]
Confirmer = Annotated[VerdictJudge | None, Depends(get_confirmer)]


@router.websocket("/live/{lang}")
async def live_game(
    websocket: WebSocket,
    lang: str,
    connector: Connector,
    confirmer: Confirmer,
    forbidden: Annotated[list[str] | None, Query()] = None,
):
    """Play one game: relay the player's voice to the guesser and the judge."""
    language = get_language(lang)
    if language is None:
        logger.info("Rejected live game for unsupported language %r", lang)
        await websocket.send_denial_response(PlainTextResponse("Not Found", status_code=404))
        return

    await websocket.accept()
    game = GameSession(lang=language.code, forbidden_words=forbidden or [])
    logger.info("Game %s started (lang=%s, forbidden=%s)", game.id, game.lang, game.forbidden_words)

    channel = ClientChannel(websocket)
    close_code = 1000
    try:
        async with (
            connector.session(connector.guesser_setup(language), "guesser") as guesser,
            connector.session(connector.judge_setup(game.forbidden_words), "judge") as judge,
        ):
            relay = GameRelay(game, channel, guesser, judge, language=language, confirmer=confirmer)
            outcome = await relay.run()
        if outcome.reason is EndReason.MALFORMED_INPUT:
            close_code = CLOSE_INVALID_DATA
    except SessionConnectError as e:
        logger.warning("Game %s aborted: %s", game.id, e)
        close_code = CLOSE_INTERNAL_ERROR
        try:
            await channel.send_notice(
                GameNotice(type="error", reason=EndReason.SESSION_UNAVAILABLE, message=str(e))
            )
        except ClientDisconnected:
            logger.debug("Game %s client gone before error notice", game.id)
    finally:
        await channel.close(close_code)
