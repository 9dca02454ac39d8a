"""Error types shared by the live relay, the verdict pipeline and the CLI.

Everything below ``VerbotenError`` is recoverable at the scope of one game
or one turn. Only ``ConfigurationError`` and ``WordCatalogError`` raised
during startup are allowed to stop the process.
"""

from __future__ import annotations


class VerbotenError(Exception):
    """Base class for all game errors."""


class ConfigurationError(VerbotenError):
    """Credentials or settings needed to start are missing or invalid."""


class WordCatalogError(VerbotenError):
    """The word catalog file cannot be read or does not match its schema."""


# =============================================================================
# TRANSPORT
# =============================================================================


class TransportError(VerbotenError):
    """A connection to the player or to an AI session failed."""


class ClientDisconnected(TransportError):
    """The player's browser connection is gone."""

    def __init__(self, code: int | None = None) -> None:
        super().__init__(f"client disconnected (code={code})")
        self.code = code


class SessionClosed(TransportError):
    """A live AI session stopped producing events or refused a write."""

    def __init__(self, role: str, reason: str = "") -> None:
        super().__init__(f"{role} session closed: {reason}" if reason else f"{role} session closed")
        self.role = role
        self.reason = reason


class SessionConnectError(TransportError):
    """A live AI session could not be established."""

    def __init__(self, role: str, reason: str) -> None:
        super().__init__(f"cannot open {role} session: {reason}")
        self.role = role
        self.reason = reason


class MalformedFrameError(VerbotenError):
    """A frame received from the player is not a realtime input envelope."""

    def __init__(self, detail: str, raw: str = "") -> None:
        super().__init__(f"malformed realtime input: {detail}")
        self.detail = detail
        self.raw = raw


# =============================================================================
# AI BACKEND
# =============================================================================


class BackendRequestError(VerbotenError):
    """A request to the AI backend failed or returned nothing usable."""


class JudgmentParseError(BackendRequestError):
    """The structured judgment could not be parsed into a verdict."""

    def __init__(self, raw: str, cause: Exception) -> None:
        super().__init__(f"failed to parse AI judgment {raw[:200]!r}: {cause}")
        self.raw = raw
