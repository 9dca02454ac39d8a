"""Turn-based Verboten in the terminal: type descriptions, the AI guesses."""

from __future__ import annotations

import argparse
import asyncio
import logging
import random
import sys
from collections.abc import Awaitable, Callable
from pathlib import Path

from rich.console import Console
from rich.prompt import Prompt

from verboten.config import Settings
from verboten.errors import BackendRequestError, ConfigurationError, WordCatalogError
from verboten.locales import LANGUAGES, get_language
from verboten.services.mistral_client import MistralService
from verboten.services.turn_game import TurnBasedGame
from verboten.services.word_catalog import load_catalog
from verboten.text import normalize

logger = logging.getLogger(__name__)

Ask = Callable[[str], Awaitable[str]]


async def play(game: TurnBasedGame, console: Console, ask: Ask) -> bool:
    """Run the game to its end and return whether the player won."""
    phrases = game.language.phrases
    console.print(phrases.word_to_describe.format(game.word.word), style="bold", markup=False)
    console.print(phrases.forbidden_words_are.format(", ".join(game.word.forbidden)), markup=False)

    while not game.finished:
        description = (await ask(phrases.describe_the_word)).strip()
        if not description:
            continue
        try:
            result = await game.play_turn(description)
        except BackendRequestError as e:
            console.print(phrases.turn_failed.format(e), style="yellow", markup=False)
            continue

        if result.lost:
            verdict = result.verdict
            if normalize(verdict.fragment) == normalize(verdict.matched_word):
                message = phrases.used_forbidden_word.format(verdict.matched_word)
            else:
                message = phrases.used_forbidden_inflection.format(verdict.fragment, verdict.matched_word)
            console.print(message, style="red", markup=False)
            return False

        console.print(phrases.ai_guess.format(result.guess), style="cyan", markup=False)
        if result.won:
            console.print(phrases.ai_guessed_the_word, style="green", markup=False)
            return True

    console.print(phrases.word_was.format(game.word.word), style="red", markup=False)
    return False


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Play Proscribed Words against an AI guesser.")
    parser.add_argument("--seed", type=int, default=None, help="Seed for a reproducible word draw")
    parser.add_argument("--words", type=Path, default=None, help="Path to the word catalog JSON file")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s — %(message)s", stream=sys.stderr)

    settings = Settings()
    console = Console()
    try:
        llm = MistralService.from_settings(settings)
        catalog = load_catalog(args.words or settings.words_path)
    except (ConfigurationError, WordCatalogError) as e:
        console.print(f"Error: {e}", style="bold red", markup=False)
        sys.exit(1)

    lang = Prompt.ask(LANGUAGES["en"].phrases.choose_language, choices=list(LANGUAGES), show_choices=False)
    language = get_language(lang)
    try:
        word = catalog.pick(language.code, random.Random(args.seed))
    except WordCatalogError as e:
        console.print(f"Error: {e}", style="bold red", markup=False)
        sys.exit(1)
    game = TurnBasedGame.create(llm, word, language)
    logger.info("Game %s started (lang=%s, word=%r)", game.session.id, language.code, word.word)

    async def ask(prompt: str) -> str:
        return await asyncio.to_thread(console.input, prompt)

    async def run() -> bool:
        try:
            return await play(game, console, ask)
        finally:
            await llm.close()

    try:
        asyncio.run(run())
    except (KeyboardInterrupt, EOFError):
        console.print()


if __name__ == "__main__":
    main()
