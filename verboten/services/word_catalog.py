"""Loading of the static word catalog."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import ValidationError

from verboten.errors import WordCatalogError
from verboten.models.words import WordCatalog

logger = logging.getLogger(__name__)


def load_catalog(path: Path) -> WordCatalog:
    """Read and validate the ``{lang: [{word, forbidden}]}`` JSON file."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise WordCatalogError(f"failed to read words file {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise WordCatalogError(f"failed to parse words file {path}: {e}") from e

    if not isinstance(data, dict):
        raise WordCatalogError(f"words file {path} must contain a JSON object keyed by language")
    try:
        catalog = WordCatalog.from_mapping(data)
    except (ValidationError, TypeError) as e:
        raise WordCatalogError(f"invalid words file {path}: {e}") from e

    logger.info(
        "Loaded word catalog from %s (%s)",
        path,
        ", ".join(f"{lang}={len(entries)}" for lang, entries in catalog.languages.items()),
    )
    return catalog
