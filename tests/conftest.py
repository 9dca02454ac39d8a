from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from tests.fakes import route_replies
from verboten.config import Settings
from verboten.models.words import WordCatalog
from verboten.services.mistral_client import MistralService


@pytest.fixture
def llm() -> AsyncMock:
    service = AsyncMock(spec=MistralService)
    service.chat_completion.side_effect = route_replies()
    return service


@pytest.fixture
def catalog() -> WordCatalog:
    return WordCatalog.from_mapping(
        {
            "en": [{"word": "Rope", "forbidden": ["Cord", "String"]}],
            "fr": [{"word": "Pousser", "forbidden": ["Tirer", "Porte"]}],
        }
    )


@pytest.fixture
def test_settings() -> Settings:
    return Settings(_env_file=None, mistral_api_key="", google_api_key="test-key", live_confirm_judge=False)
