"""Game models — sessions, verdicts, turn results and end-of-game notices."""

from __future__ import annotations

import random
import string
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

_GAME_ID_ALPHABET = string.ascii_letters + string.digits


def new_game_id(length: int = 4) -> str:
    return "".join(random.choices(_GAME_ID_ALPHABET, k=length))


class GameSession(BaseModel):
    """One ephemeral game, owned by the connection that created it."""

    id: str = Field(default_factory=new_game_id)
    lang: str
    forbidden_words: list[str] = Field(default_factory=list)
    secret_word: str | None = None  # turn-based variant only


class Judgment(BaseModel):
    """Raw structured answer of the judge, before confirmation."""

    model_config = ConfigDict(populate_by_name=True)

    lost: bool
    forbidden_word: str = Field(default="", alias="forbiddenWord")
    fragment: str = ""


class Verdict(BaseModel):
    """Confirmed outcome of judging one utterance."""

    lost: bool
    fragment: str = ""
    matched_word: str = ""
    same_root: bool = False
    translation: bool = False

    @classmethod
    def clean(cls) -> Verdict:
        return cls(lost=False)


class TurnResult(BaseModel):
    """What happened during one turn of the turn-based game."""

    verdict: Verdict
    guess: str = ""
    won: bool = False

    @property
    def lost(self) -> bool:
        return self.verdict.lost


class EndReason(str, Enum):
    CLIENT_DISCONNECTED = "client_disconnected"
    GUESSER_DISCONNECTED = "guesser_disconnected"
    JUDGE_DISCONNECTED = "judge_disconnected"
    FORBIDDEN_WORD = "forbidden_word"
    MALFORMED_INPUT = "malformed_input"
    SESSION_UNAVAILABLE = "session_unavailable"


class GameOutcome(BaseModel):
    reason: EndReason
    detail: str = ""


class GameNotice(BaseModel):
    """Message the server itself sends to the player.

    Serialised under a top-level ``verboten`` key so the browser can tell it
    apart from relayed guesser events, which never carry that key.
    """

    type: str  # "game_over" | "error"
    reason: EndReason | None = None
    message: str = ""
    fragment: str = ""
    matched_word: str = ""

    def to_wire(self) -> str:
        return '{"verboten":' + self.model_dump_json(exclude_defaults=True) + "}"
