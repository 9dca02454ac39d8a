"""Turn-based game: the player types descriptions, the AI guesses in text.

Each turn runs the verdict judge and the guesser concurrently. A confirmed
loss wins over a guess that lands on the same turn.
"""

from __future__ import annotations

import asyncio
import logging

from verboten.locales import Language
from verboten.models.game import GameSession, TurnResult
from verboten.models.words import ForbiddenWord
from verboten.services.mistral_client import MistralService
from verboten.services.verdict_judge import VerdictJudge

logger = logging.getLogger(__name__)

MAX_GUESSES = 3


class GuesserChat:
    """Multi-turn chat with the guesser; history survives between turns."""

    def __init__(self, llm: MistralService, instructions: str, *, model: str | None = None) -> None:
        self._llm = llm
        self._model = model
        self.history: list[dict[str, str]] = [{"role": "system", "content": instructions}]

    async def send(self, description: str) -> str:
        messages = [*self.history, {"role": "user", "content": description}]
        guess = await self._llm.chat_completion(messages, model=self._model, temperature=0.7, max_tokens=64)
        self.history = [*messages, {"role": "assistant", "content": guess}]
        return guess.strip()


class TurnBasedGame:
    def __init__(
        self,
        word: ForbiddenWord,
        language: Language,
        judge: VerdictJudge,
        guesser: GuesserChat,
        *,
        max_guesses: int = MAX_GUESSES,
    ) -> None:
        self.word = word
        self.language = language
        self.session = GameSession(lang=language.code, forbidden_words=list(word.forbidden), secret_word=word.word)
        self._judge = judge
        self._guesser = guesser
        self.guesses_left = max_guesses
        self.finished = False

    @classmethod
    def create(cls, llm: MistralService, word: ForbiddenWord, language: Language) -> TurnBasedGame:
        return cls(word, language, VerdictJudge(llm), GuesserChat(llm, language.chat_guesser_prompt))

    async def play_turn(self, description: str) -> TurnResult:
        """Judge and answer one description.

        Raises ``BackendRequestError`` when either side fails; the turn then
        does not count and the player may describe again.
        """
        if self.finished:
            raise RuntimeError(f"game {self.session.id} is over")

        history = list(self._guesser.history)
        verdict, guess = await asyncio.gather(
            self._judge.evaluate(description, self.word.proscribed, self.language.name),
            self._guesser.send(description),
            return_exceptions=True,
        )
        for result in (verdict, guess):
            if isinstance(result, BaseException):
                logger.warning("Game %s turn failed: %s", self.session.id, result)
                # The guesser must not remember a turn that did not count.
                self._guesser.history = history
                raise result

        if verdict.lost:
            self.finished = True
            logger.info("Game %s lost on %r (matched %r)", self.session.id, verdict.fragment, verdict.matched_word)
            return TurnResult(verdict=verdict, guess=guess)

        won = self.word.is_guessed_by(guess)
        self.guesses_left -= 1
        if won or self.guesses_left <= 0:
            self.finished = True
        logger.info("Game %s guess %r (won=%s, left=%d)", self.session.id, guess, won, self.guesses_left)
        return TurnResult(verdict=verdict, guess=guess, won=won)
