"""
Field naming tables for EMV merchant-presented QR payloads.

Maps the 2-digit field ids used on the wire to snake_case names, and ISO 4217
currency codes between their alphabetic and numeric forms. The tables are
built once and exposed read-only.
"""
from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Optional

from emvqr.resources import load_currency_table, load_numeric_currency_table

CURRENCY_TAG = "53"

# snake_case name -> field id.
FIELD_TO_TAG: Mapping[str, str] = MappingProxyType({
    "payload_format_indicator": "00",
    "initiation_method": "01",
    "merchant_category_code": "52",
    "currency": CURRENCY_TAG,
    "amount": "54",
    "tip_or_convenience_indicator": "55",
    "value_of_convenience_fee_fixed": "56",
    "value_of_convenience_fee_percentage": "57",
    "country_code": "58",
    "merchant_name": "59",
    "merchant_city": "60",
    "postal_code": "61",
    "additional_data": "62",
    "merchant_information": "64",
    "merchant_code": "80",
    "merchant_profile_picture": "81",
    "merchant_phone_number": "82",
})

# Reverse mapping: field id -> name.
TAG_TO_FIELD: Mapping[str, str] = MappingProxyType({v: k for k, v in FIELD_TO_TAG.items()})


def field_id_to_name(field_id: str) -> str:
    """Return the snake_case name for ``field_id``, or the id itself when unknown."""
    return TAG_TO_FIELD.get(field_id, field_id)


def field_name_to_id(name: str) -> Optional[str]:
    return FIELD_TO_TAG.get(name)


def currency_codes() -> Mapping[str, str]:
    """Alphabetic -> numeric currency codes, e.g. ``"EUR" -> "978"``."""
    return load_currency_table()


def numeric_currency_codes() -> Mapping[str, str]:
    """Numeric -> alphabetic currency codes, e.g. ``"978" -> "EUR"``."""
    return load_numeric_currency_table()


def currency_to_numeric(code: str) -> Optional[str]:
    return currency_codes().get(code.upper())


def currency_to_alpha(numeric: str) -> Optional[str]:
    return numeric_currency_codes().get(numeric)


def map_tags_to_fields(raw: Mapping[str, str], keep_unknown: bool = False) -> dict[str, str]:
    """
    Translate a raw id-keyed field map to snake_case names.

    The currency field is converted from its numeric to its alphabetic code
    when the code is known; unknown codes are kept unchanged.

    Args:
        raw: Mapping of field ids to values, as returned by the parser.
        keep_unknown: Keep ids with no known name under their bare id.
            When false, such ids (including the checksum) are dropped.

    Returns:
        A dict keyed by field names, in the order of ``raw``.
    """
    named: dict[str, str] = {}
    for tag, value in raw.items():
        if tag not in TAG_TO_FIELD and not keep_unknown:
            continue
        if tag == CURRENCY_TAG:
            value = currency_to_alpha(value) or value
        named[field_id_to_name(tag)] = value
    return named


__all__ = [
    "CURRENCY_TAG",
    "FIELD_TO_TAG",
    "TAG_TO_FIELD",
    "currency_codes",
    "currency_to_alpha",
    "currency_to_numeric",
    "field_id_to_name",
    "field_name_to_id",
    "map_tags_to_fields",
    "numeric_currency_codes",
]
