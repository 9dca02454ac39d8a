"""Verdict judge: decides whether a description used a proscribed word.

The broad structured judgment is narrowed by two yes/no confirmations that
run concurrently: the suspicious fragment must share a root with the matched
word or be a translation of it. Semantic closeness alone never loses a game.
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Sequence

from pydantic import ValidationError

from verboten.errors import JudgmentParseError
from verboten.models.game import Judgment, Verdict
from verboten.services.mistral_client import MistralService

logger = logging.getLogger(__name__)

_SYSTEM = """\
You are the judge in the Proscribed Words game.
The human player will say a description.

If the prompt contains any of the proscribed words, or an inflection of a forbidden
word, or a proscribed word translated in another language, then the game is lost.

The proscribed words are:
{words}

In the field "forbiddenWord", provide exactly one of the original proscribed words.

In the field "fragment", provide the part of the prompt that violated the rule.

The description must be rejected as using a proscribed word only if it actually contains
an inflection, or misspelling, or translation of a proscribed word.

Synonyms of proscribed words must not trigger a lost game.

E.g. "ficelle" does not match the proscribed word "Corde", because the two words have
a similar meaning but the word "ficelle" is not an inflection of the word "corde" and
the game is not lost.

E.g. "orange" does not match the proscribed word "Agrume", because the two words have
a similar meaning but the word "orange" is not an inflection of the word "Agrume" and
the game is not lost.

E.g. "tronc" does not match the proscribed word "Arbre", because the two words have
related meaning but the word "tronc" is not an inflection of the word "Arbre" and
the game is not lost.

E.g. "poussent" matches the proscribed word "Pousser", because "poussent" is a
conjugation of the verb "Pousser", thus it is an inflection of "Pousser" and the game
is lost.
"""

_JUDGMENT_FORMAT = {
    "type": "json_schema",
    "json_schema": {
        "name": "judgment",
        "schema": {
            "type": "object",
            "properties": {
                "lost": {"type": "boolean", "description": "Indicates if the user has lost the game."},
                "forbiddenWord": {"type": "string", "description": "The word that triggered the loss condition."},
                "fragment": {"type": "string", "description": "The text fragment analyzed."},
            },
            "required": ["lost"],
        },
    },
}

_SAME_ROOT = """\
Can we say that the words '{}' and '{}' share the same root?
Answer just Yes or No, and nothing else."""

_TRANSLATION = """\
Can we say that the word '{}' is a translation of the {} word '{}' in another language?
Answer just Yes or No, and nothing else."""


def is_yes(answer: str) -> bool:
    """Strict yes/no reading: only a bare "yes" counts, punctuation aside."""
    return answer.strip().strip(".!").strip().lower() == "yes"


class VerdictJudge:
    def __init__(self, llm: MistralService, *, model: str | None = None) -> None:
        self._llm = llm
        self._model = model

    async def judge(self, utterance: str, words: Sequence[str]) -> Judgment:
        """Single structured judgment of *utterance*, without confirmation."""
        raw = await self._llm.chat_completion(
            messages=[
                {"role": "system", "content": _SYSTEM.format(words=", ".join(words))},
                {"role": "user", "content": utterance},
            ],
            model=self._model,
            response_format=_JUDGMENT_FORMAT,
            temperature=0.0,
        )
        try:
            return Judgment.model_validate(json.loads(raw))
        except (json.JSONDecodeError, TypeError, ValidationError) as e:
            raise JudgmentParseError(raw, e) from e

    async def have_same_root(self, word1: str, word2: str) -> bool:
        answer = await self._llm.chat_completion(
            messages=[{"role": "user", "content": _SAME_ROOT.format(word1, word2)}],
            model=self._model,
            temperature=0.0,
            max_tokens=8,
        )
        return is_yes(answer)

    async def is_translation(self, word1: str, word2: str, word2_language: str) -> bool:
        answer = await self._llm.chat_completion(
            messages=[{"role": "user", "content": _TRANSLATION.format(word1, word2_language, word2)}],
            model=self._model,
            temperature=0.0,
            max_tokens=8,
        )
        return is_yes(answer)

    async def evaluate(self, utterance: str, words: Sequence[str], language_name: str) -> Verdict:
        """Judge *utterance* and confirm any loss before reporting it."""
        judgment = await self.judge(utterance, words)
        if not judgment.lost:
            return Verdict.clean()

        fragment, matched = judgment.fragment, judgment.forbidden_word
        if not fragment or not matched:
            logger.warning("Judge reported a loss without fragment or word: %r", judgment)
            return Verdict.clean()

        # Both answers are collected even when one request fails.
        same_root, translation = await asyncio.gather(
            self.have_same_root(fragment, matched),
            self.is_translation(fragment, matched, language_name),
            return_exceptions=True,
        )
        if same_root is True or translation is True:
            for result in (same_root, translation):
                if isinstance(result, BaseException):
                    logger.warning("Confirmation check failed, other check confirmed: %s", result)
            if same_root is True:
                logger.info("Judge says: the words %r and %r have the same root", fragment, matched)
            if translation is True:
                logger.info("Judge says: %r is a translation of the proscribed word %r", fragment, matched)
            return Verdict(
                lost=True,
                fragment=fragment,
                matched_word=matched,
                same_root=same_root is True,
                translation=translation is True,
            )

        for result in (same_root, translation):
            if isinstance(result, BaseException):
                raise result

        logger.info(
            "Judge says: the words %r and %r looked suspiciously similar, but not for sure",
            fragment,
            matched,
        )
        return Verdict.clean()
