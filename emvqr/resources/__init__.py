from __future__ import annotations

import json
import re
from functools import lru_cache
from importlib import resources
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, Optional

from emvqr.config import get_settings
from emvqr.errors import CurrencyTableError

_ALPHA_CODE = re.compile(r"^[A-Z]{3}$")
_NUMERIC_CODE = re.compile(r"^\d{3}$")


def _read_packaged_table() -> Any:
    resource = resources.files("emvqr.resources").joinpath("currency_codes.json")
    with resource.open("r", encoding="utf-8") as f:
        return json.load(f)


def _read_override_table(path: str) -> Any:
    try:
        with open(Path(path).expanduser(), "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, json.JSONDecodeError) as exc:
        raise CurrencyTableError(f"Failed to load currency table '{path}': {exc}") from exc


def _validate_table(data: Any, source: str) -> dict[str, str]:
    if not isinstance(data, dict):
        raise CurrencyTableError(f"Currency table '{source}' must be a JSON object")
    for alpha, numeric in data.items():
        if not _ALPHA_CODE.match(alpha) or not isinstance(numeric, str) or not _NUMERIC_CODE.match(numeric):
            raise CurrencyTableError(
                f"Currency table '{source}' has an invalid entry: {alpha!r} -> {numeric!r}"
            )
    return dict(data)


@lru_cache
def load_currency_table(path: Optional[str] = None) -> Mapping[str, str]:
    """
    Load the alphabetic -> numeric ISO 4217 currency table.

    Args:
        path: Optional JSON file replacing the packaged table. Defaults to
            the ``EMVQR_CURRENCY_TABLE`` setting, then the packaged data.

    Returns:
        A read-only mapping such as ``{"USD": "840", "EUR": "978"}``.
    """
    path = path or get_settings().currency_table_path
    if path:
        table = _validate_table(_read_override_table(path), path)
    else:
        table = _validate_table(_read_packaged_table(), "currency_codes.json")
    return MappingProxyType(table)


@lru_cache
def load_numeric_currency_table(path: Optional[str] = None) -> Mapping[str, str]:
    return MappingProxyType({numeric: alpha for alpha, numeric in load_currency_table(path).items()})


def reload_tables() -> None:
    """Drop cached tables and settings so the next lookup re-reads them."""
    get_settings.cache_clear()
    load_currency_table.cache_clear()
    load_numeric_currency_table.cache_clear()


__all__ = ["load_currency_table", "load_numeric_currency_table", "reload_tables"]
