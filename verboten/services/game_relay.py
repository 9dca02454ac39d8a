"""Game relay: runs one live game between a player and two AI sessions.

Three loops share the game:

* guesser → player: every guesser event is forwarded verbatim;
* player → guesser, judge: every frame is validated, then sent to the
  guesser and to the judge, in the order the player sent them;
* judge → relay: the judge's spoken transcript is collected and, when its
  turn completes, treated as a loss (optionally confirmed by the verdict
  judge first).

The first loop to finish decides the outcome; the others are cancelled.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Protocol

from verboten.errors import BackendRequestError, ClientDisconnected, MalformedFrameError, SessionClosed
from verboten.locales import Language
from verboten.models.game import EndReason, GameNotice, GameOutcome, GameSession, Verdict
from verboten.models.live import RealtimeInputFrame, ServerEvent
from verboten.services.verdict_judge import VerdictJudge

logger = logging.getLogger(__name__)


class EventSource(Protocol):
    role: str

    async def receive(self) -> ServerEvent: ...

    async def send_realtime_input(self, frame: RealtimeInputFrame) -> None: ...


class PlayerChannel(Protocol):
    async def receive_frame(self) -> str: ...

    async def send_event(self, text: str) -> None: ...

    async def send_notice(self, notice: GameNotice) -> None: ...


class GameRelay:
    def __init__(
        self,
        game: GameSession,
        channel: PlayerChannel,
        guesser: EventSource,
        judge: EventSource,
        *,
        language: Language,
        confirmer: VerdictJudge | None = None,
    ) -> None:
        self.game = game
        self._channel = channel
        self._guesser = guesser
        self._judge = judge
        self._language = language
        self._confirmer = confirmer

    async def run(self) -> GameOutcome:
        """Run the game until a terminal condition; always cancels every loop."""
        judge_task = asyncio.create_task(self._watch_judge(), name=f"{self.game.id}-judge")
        client_task = asyncio.create_task(self._fan_out_client(), name=f"{self.game.id}-client")
        guesser_task = asyncio.create_task(self._relay_guesser(), name=f"{self.game.id}-guesser")
        tasks = [judge_task, client_task, guesser_task]
        try:
            done, _ = await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)

        # A judge loss outranks a disconnect observed in the same instant.
        finished = next(task for task in tasks if task in done)
        outcome = finished.result()
        logger.info("Game %s ended: %s %s", self.game.id, outcome.reason.value, outcome.detail)
        return outcome

    async def _relay_guesser(self) -> GameOutcome:
        try:
            while True:
                event = await self._guesser.receive()
                await self._channel.send_event(event.raw)
        except SessionClosed as e:
            logger.info("Game %s guesser disconnected: %s", self.game.id, e.reason)
            return GameOutcome(reason=EndReason.GUESSER_DISCONNECTED, detail=e.reason)
        except ClientDisconnected:
            return GameOutcome(reason=EndReason.CLIENT_DISCONNECTED)

    async def _fan_out_client(self) -> GameOutcome:
        try:
            while True:
                raw = await self._channel.receive_frame()
                try:
                    frame = RealtimeInputFrame.parse(raw)
                except MalformedFrameError as e:
                    logger.warning("Game %s received %s: %r", self.game.id, e, e.raw)
                    await self._notify(
                        GameNotice(type="error", reason=EndReason.MALFORMED_INPUT, message=str(e))
                    )
                    return GameOutcome(reason=EndReason.MALFORMED_INPUT, detail=e.detail)
                await self._guesser.send_realtime_input(frame)
                await self._judge.send_realtime_input(frame)
        except ClientDisconnected as e:
            logger.info("Game %s client disconnected (code=%s)", self.game.id, e.code)
            return GameOutcome(reason=EndReason.CLIENT_DISCONNECTED)
        except SessionClosed as e:
            reason = EndReason.JUDGE_DISCONNECTED if e.role == "judge" else EndReason.GUESSER_DISCONNECTED
            logger.info("Game %s %s session refused input: %s", self.game.id, e.role, e.reason)
            return GameOutcome(reason=reason, detail=e.reason)

    async def _watch_judge(self) -> GameOutcome:
        spoken: list[str] = []
        try:
            while True:
                event = await self._judge.receive()
                if event.output_text:
                    spoken.append(event.output_text)
                if not event.turn_complete:
                    continue

                phrase = "".join(spoken).strip()
                spoken.clear()
                if not phrase:
                    continue
                logger.info("Game %s judge says %r", self.game.id, phrase)

                verdict = await self._confirm(phrase)
                if verdict is None:
                    continue
                await self._notify(
                    GameNotice(
                        type="game_over",
                        reason=EndReason.FORBIDDEN_WORD,
                        message=f"You said {verdict.fragment!r}, which is proscribed. You lose!",
                        fragment=verdict.fragment,
                        matched_word=verdict.matched_word,
                    )
                )
                return GameOutcome(reason=EndReason.FORBIDDEN_WORD, detail=verdict.fragment)
        except SessionClosed as e:
            logger.info("Game %s judge disconnected: %s", self.game.id, e.reason)
            return GameOutcome(reason=EndReason.JUDGE_DISCONNECTED, detail=e.reason)

    async def _confirm(self, phrase: str) -> Verdict | None:
        """Return the loss verdict for *phrase*, or None when it is a false alarm."""
        unconfirmed = Verdict(lost=True, fragment=phrase)
        if self._confirmer is None:
            return unconfirmed
        try:
            verdict = await self._confirmer.evaluate(phrase, self.game.forbidden_words, self._language.name)
        except BackendRequestError as e:
            logger.warning("Game %s could not confirm the judge, verdict stands: %s", self.game.id, e)
            return unconfirmed
        if not verdict.lost:
            logger.info("Game %s judge verdict %r not confirmed", self.game.id, phrase)
            return None
        return verdict

    async def _notify(self, notice: GameNotice) -> None:
        try:
            await self._channel.send_notice(notice)
        except ClientDisconnected:
            logger.debug("Game %s client gone before %s notice", self.game.id, notice.type)
