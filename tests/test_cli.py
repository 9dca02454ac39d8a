from __future__ import annotations

import io
import json
from functools import partial

import pytest
from rich.console import Console

from tests.fakes import route_replies
from verboten.cli import main, play
from verboten.config import Settings
from verboten.errors import BackendRequestError
from verboten.locales import get_language
from verboten.models.words import ForbiddenWord
from verboten.services.turn_game import TurnBasedGame

ROPE = ForbiddenWord(word="Rope", forbidden=("Cord", "String"), language="en")


def scripted(*lines: str):
    remaining = list(lines)

    async def ask(prompt: str) -> str:
        return remaining.pop(0)

    return ask


@pytest.fixture
def console():
    return Console(file=io.StringIO(), width=200)


def output(console: Console) -> str:
    return console.file.getvalue()


@pytest.mark.asyncio
async def test_player_wins(llm, console):
    llm.chat_completion.side_effect = route_replies(guess="rope")
    game = TurnBasedGame.create(llm, ROPE, get_language("en"))

    won = await play(game, console, scripted("you tie boats with it"))

    assert won
    text = output(console)
    assert "The word to describe is: Rope" in text
    assert "The proscribed words are: Cord, String" in text
    assert "AI: rope" in text
    assert "You win!" in text


@pytest.mark.asyncio
async def test_exact_forbidden_word(llm, console):
    llm.chat_completion.side_effect = route_replies(
        judge=json.dumps({"lost": True, "forbiddenWord": "Cord", "fragment": "CORD"}), same_root="Yes"
    )
    game = TurnBasedGame.create(llm, ROPE, get_language("en"))

    won = await play(game, console, scripted("a thick cord"))

    assert not won
    assert "You used the proscribed word 'Cord'" in output(console)


@pytest.mark.asyncio
async def test_inflection_of_forbidden_word(llm, console):
    llm.chat_completion.side_effect = route_replies(
        judge=json.dumps({"lost": True, "forbiddenWord": "Pousser", "fragment": "poussent"}), same_root="Yes"
    )
    game = TurnBasedGame.create(llm, ForbiddenWord(word="Pousser", forbidden=("Tirer",)), get_language("fr"))

    await play(game, console, scripted("les plantes poussent"))

    assert "Vous avez dit 'poussent' qui est trop proche du mot prohibé 'Pousser'" in output(console)


@pytest.mark.asyncio
async def test_failed_turn_is_retried_and_three_misses_lose(llm, console):
    answers = iter([BackendRequestError("down"), "Chain", "Cable", "Wire"])

    def guess():
        return next(answers)

    llm.chat_completion.side_effect = route_replies(guess=guess)
    game = TurnBasedGame.create(llm, ROPE, get_language("en"))

    won = await play(game, console, scripted("one", "", "two", "three", "four"))

    assert not won
    text = output(console)
    assert "could not rule on that description (down)" in text
    assert "The word was Rope. You lose!" in text


def test_missing_key_is_fatal(monkeypatch):
    monkeypatch.setenv("MISTRAL_API_KEY", "")
    monkeypatch.setattr("verboten.cli.Settings", partial(Settings, _env_file=None))

    with pytest.raises(SystemExit) as exc:
        main([])
    assert exc.value.code == 1
