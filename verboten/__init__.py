"""Verboten — the Proscribed Words voice party game.

A FastAPI server relays the player's microphone to two live AI sessions,
a guesser and a judge, and a turn-based CLI plays the same game over text.
"""

__version__ = "0.1.0"
