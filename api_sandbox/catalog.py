# api_sandbox/catalog.py
"""
Read-only API catalog.

Loads descriptor records (camelCase JSON, as shipped in data/catalog.json)
into a mapping from id to ApiDescriptor. The mapping is built once and never
written to afterwards.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional, Union

from pydantic import ValidationError

from api_sandbox.sandbox_types import ApiDescriptor, CatalogError, UnknownApiError

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_PATH = Path(__file__).parent / "data" / "catalog.json"


class Catalog(Mapping):
    """Immutable id → ApiDescriptor mapping, in catalog order."""

    def __init__(self, descriptors: Iterable[ApiDescriptor]):
        items: Dict[str, ApiDescriptor] = {}
        for d in descriptors:
            if d.id in items:
                raise CatalogError(f"Duplicate API id '{d.id}' in catalog")
            items[d.id] = d
        self._items = items

    def __getitem__(self, api_id: str) -> ApiDescriptor:
        try:
            return self._items[api_id]
        except KeyError:
            raise UnknownApiError(api_id, list(self._items)) from None

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def categories(self) -> Dict[str, List[ApiDescriptor]]:
        """Descriptors grouped by category, preserving catalog order."""
        grouped: Dict[str, List[ApiDescriptor]] = {}
        for d in self._items.values():
            grouped.setdefault(d.category or "Uncategorized", []).append(d)
        return grouped

    def requiring_auth(self) -> List[ApiDescriptor]:
        return [d for d in self._items.values() if d.auth_required]

    def __repr__(self) -> str:
        return f"Catalog({len(self._items)} APIs)"


def parse_catalog(records: Iterable[Dict[str, Any]]) -> Catalog:
    """Validate raw records into a Catalog.

    Raises:
        CatalogError: on a malformed record, a gated API without a mock
            response, or a duplicate id
    """
    descriptors = []
    for idx, record in enumerate(records):
        if not isinstance(record, dict):
            raise CatalogError(f"Catalog record #{idx} is not an object")
        try:
            descriptors.append(ApiDescriptor.model_validate(record))
        except ValidationError as e:
            label = record.get("id") or f"#{idx}"
            raise CatalogError(f"Invalid catalog record {label}: {e}") from e
    return Catalog(descriptors)


def load_catalog(path: Optional[Union[str, Path]] = None) -> Catalog:
    """Load a catalog from a JSON file (a list of records, or {"apis": [...]})"""
    p = Path(path) if path else DEFAULT_CATALOG_PATH

    try:
        with p.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise CatalogError(f"Cannot read catalog {p}: {e}") from e
    except ValueError as e:
        raise CatalogError(f"Catalog {p} is not valid JSON: {e}") from e

    if isinstance(data, dict):
        data = data.get("apis")
    if not isinstance(data, list):
        raise CatalogError(f"Catalog {p} must contain a list of API records")

    catalog = parse_catalog(data)
    logger.debug("Loaded %d APIs from %s", len(catalog), p)
    return catalog


@lru_cache(maxsize=1)
def default_catalog() -> Catalog:
    """The packaged catalog, loaded once per process."""
    return load_catalog(DEFAULT_CATALOG_PATH)
