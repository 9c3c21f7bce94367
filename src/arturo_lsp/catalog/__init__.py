"""
Builtin Catalog

Loads and caches the static Arturo catalog (builtin words, function
signatures, attribute names, type names, units and colors) from
catalog.yaml shipped next to this module.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, FrozenSet, List, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

from arturo_lsp.errors import CatalogError

logger = logging.getLogger(__name__)

CATALOG_FILE = Path(__file__).parent / "catalog.yaml"


class ParamInfo(BaseModel):
    name: str
    type: str = ":any"


class FunctionInfo(BaseModel):
    """Signature record for one builtin function."""
    name: str
    signature: str
    description: str = ""
    params: List[ParamInfo] = Field(default_factory=list)
    returns: str = ":any"


class Catalog(BaseModel):
    """Read-only view over catalog.yaml."""
    types: Dict[str, str]
    builtin_names: FrozenSet[str]
    attributes: FrozenSet[str]
    colors: FrozenSet[str]
    units: FrozenSet[str]
    functions: Dict[str, FunctionInfo]

    model_config = {"frozen": True}

    def is_builtin(self, word: str) -> bool:
        return word in self.builtin_names or word in self.functions

    def function(self, name: str) -> Optional[FunctionInfo]:
        return self.functions.get(name)


# Cached catalog
_catalog_cache: Optional[Catalog] = None


def load_catalog(catalog_path: Path | str | None = None) -> Catalog:
    """
    Load the builtin catalog from YAML.

    Args:
        catalog_path: Optional path to a catalog file. Defaults to catalog.yaml.

    Returns:
        Parsed Catalog.

    Raises:
        CatalogError: If the file is missing, unreadable or malformed.
    """
    path = Path(catalog_path) if catalog_path else CATALOG_FILE

    if not path.exists():
        raise CatalogError(f"Catalog file not found: {path}")

    try:
        with path.open("r", encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise CatalogError(f"Invalid catalog YAML in {path}: {e}") from e

    if not isinstance(raw, dict):
        raise CatalogError(f"Catalog must be a YAML mapping, got {type(raw)}")

    functions: Dict[str, Any] = {}
    for name, entry in (raw.get("functions") or {}).items():
        functions[name] = {"name": name, **(entry or {})}

    try:
        catalog = Catalog(
            types=raw.get("types") or {},
            builtin_names=raw.get("builtin_names") or [],
            attributes=raw.get("attributes") or [],
            colors=raw.get("colors") or [],
            units=raw.get("units") or [],
            functions=functions,
        )
    except ValidationError as e:
        raise CatalogError(f"Malformed catalog {path}: {e}") from e

    logger.debug(
        "Loaded catalog: %d builtins, %d signatures, %d types",
        len(catalog.builtin_names), len(catalog.functions), len(catalog.types),
    )
    return catalog


def get_catalog() -> Catalog:
    """Get the cached catalog, loading it if needed."""
    global _catalog_cache

    if _catalog_cache is None:
        _catalog_cache = load_catalog()

    return _catalog_cache
