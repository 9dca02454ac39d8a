"""Centralised configuration loaded from environment / .env file."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_PROJECT_ROOT = Path(__file__).resolve().parent.parent

GEMINI_LIVE_URL = (
    "wss://generativelanguage.googleapis.com/ws/"
    "google.ai.generativelanguage.v1beta.GenerativeService.BidiGenerateContent"
)
VERTEX_LIVE_URL = (
    "wss://{location}-aiplatform.googleapis.com/ws/"
    "google.cloud.aiplatform.v1beta1.LlmBidiService/BidiGenerateContent"
)


class Settings(BaseSettings):
    """Application settings — values are sourced from env vars or ``.env``."""

    model_config = SettingsConfigDict(
        env_file=str(_PROJECT_ROOT / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Mistral API (turn-based judge and guesser) ───────────────────────
    mistral_api_key: str = Field(default="", description="Mistral La Plateforme API key")
    mistral_small_model: str = "mistral-small-latest"
    request_timeout: float = Field(default=30.0, description="Seconds before a backend request is abandoned")

    # ── Live sessions (guesser and judge voices) ─────────────────────────
    google_api_key: str = Field(default="", description="Gemini API key for live sessions")
    google_genai_use_vertexai: bool = False
    google_cloud_project: str = ""
    google_cloud_location: str = "us-central1"
    google_access_token: str = Field(default="", description="OAuth bearer token, Vertex AI mode only")
    live_model: str = "gemini-2.5-flash-native-audio-preview-09-2025"
    live_vertex_model: str = "gemini-live-2.5-flash-preview-native-audio-09-2025"
    live_voice_name: str = "Puck"
    live_confirm_judge: bool = Field(
        default=True,
        description="Double-check live judge verdicts with the turn-based pipeline before ending a game",
    )

    # ── Assets ───────────────────────────────────────────────────────────
    assets_dir: Path = _PROJECT_ROOT / "assets"
    words_path: Path = _PROJECT_ROOT / "assets" / "words.json"

    # ── Server ───────────────────────────────────────────────────────────
    host: str = "0.0.0.0"
    port: int = 8080
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])
    debug: bool = False

    @property
    def live_url(self) -> str:
        """WebSocket endpoint of the live backend for the selected platform."""
        if self.google_genai_use_vertexai:
            return VERTEX_LIVE_URL.format(location=self.google_cloud_location)
        return f"{GEMINI_LIVE_URL}?key={self.google_api_key}"

    @property
    def live_model_name(self) -> str:
        """Fully qualified model resource name sent in the session setup."""
        if self.google_genai_use_vertexai:
            return (
                f"projects/{self.google_cloud_project}/locations/{self.google_cloud_location}"
                f"/publishers/google/models/{self.live_vertex_model}"
            )
        return f"models/{self.live_model}"

    @property
    def live_headers(self) -> dict[str, str]:
        if self.google_genai_use_vertexai:
            return {"Authorization": f"Bearer {self.google_access_token}"}
        return {}


settings = Settings()
