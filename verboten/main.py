"""FastAPI application — Verboten live game server.

Start with::

    uvicorn verboten.main:app --port 8080

Or::

    python -m verboten.main
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from verboten import __version__
from verboten.config import Settings, settings as default_settings
from verboten.models.words import WordCatalog
from verboten.routers import live, pages
from verboten.services.live_session import LiveConnector
from verboten.services.mistral_client import MistralService
from verboten.services.verdict_judge import VerdictJudge
from verboten.services.word_catalog import load_catalog

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    *,
    catalog: WordCatalog | None = None,
    connector: LiveConnector | None = None,
    verdict_judge: VerdictJudge | None = None,
) -> FastAPI:
    """Build the app. Collaborators not passed in are built from *settings* at startup."""
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        state = app.state
        # An unreadable catalog is fatal: WordCatalogError aborts startup.
        state.catalog = catalog if catalog is not None else load_catalog(settings.words_path)
        state.connector = connector or LiveConnector.from_settings(settings)

        llm: MistralService | None = None
        if verdict_judge is not None:
            state.verdict_judge = verdict_judge
        elif settings.live_confirm_judge and settings.mistral_api_key:
            llm = MistralService.from_settings(settings)
            state.verdict_judge = VerdictJudge(llm)
        else:
            state.verdict_judge = None
            logger.info("Live judge verdicts are not double-checked (confirmation off or MISTRAL_API_KEY unset)")

        if not settings.google_genai_use_vertexai and not settings.google_api_key:
            logger.warning("GOOGLE_API_KEY is not set, live games will fail to connect")

        logger.info("Verboten server ready")
        try:
            yield
        finally:
            if llm is not None:
                await llm.close()

    app = FastAPI(
        title="Verboten",
        description="Describe the secret word to an AI guesser without saying any proscribed word.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(pages.router)
    app.include_router(live.router)
    app.mount("/forbiddenwords", StaticFiles(directory=settings.assets_dir), name="forbiddenwords")

    @app.get("/api/health")
    async def health(request: Request):
        """Simple health-check endpoint."""
        return {
            "status": "ok",
            "live_configured": bool(settings.google_api_key or settings.google_genai_use_vertexai),
            "judge_confirmation": request.app.state.verdict_judge is not None,
        }

    return app


logging.basicConfig(
    level=logging.DEBUG if default_settings.debug else logging.INFO,
    format="%(asctime)s %(levelname)-8s %(name)s — %(message)s",
)

app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "verboten.main:app",
        host=default_settings.host,
        port=default_settings.port,
        reload=default_settings.debug,
    )
