"""
TLV encoder for EMV merchant-presented QR payloads.

Records are written in a fixed canonical order that does not depend on the
order of the input mapping, and the payload is closed with a ``63`` record
carrying the CRC-16 of everything before it (``6304`` included).
"""
from __future__ import annotations

import logging
import re
from typing import Iterable, Mapping

from emvqr.core.checksum import CRC_PREFIX, CRC_TAG, calculate_crc
from emvqr.errors import UnsupportedCurrencyError
from emvqr.fields import FIELD_TO_TAG, currency_to_numeric
from emvqr.logging import get_logger, log_event

FORMAT_INDICATOR_TAG = "00"
FORMAT_INDICATOR = "01"
INITIATION_METHOD_TAG = "01"

# Point of initiation method values.
INITIATION_METHODS: dict[str, str] = {
    "dynamic": "11",
    "static": "12",
}

# Merchant account information range, written in ascending order.
ACCOUNT_IDS: list[str] = [f"{i:02d}" for i in range(2, 52)]
REQUIRED_IDS: list[str] = ["52", "53", "58", "59", "60"]
OPTIONAL_IDS: list[str] = ["54", "55", "56", "57", "61", "62", "64"]

# Canonical emission order after the format indicator.
EMISSION_ORDER: list[str] = [INITIATION_METHOD_TAG] + ACCOUNT_IDS + REQUIRED_IDS + OPTIONAL_IDS

# Keys whose presence marks an input mapping as keyed by field names.
FRIENDLY_FIELD_KEYS: frozenset[str] = frozenset({
    "initiation_method",
    "merchant_name",
    "merchant_city",
    "country_code",
    "currency",
    "amount",
    "merchant_category_code",
})

_ALPHABETIC = re.compile(r"[A-Za-z]+")


def to_tlv(tag: str, value: str) -> str:
    """
    Format one record as ``tag + length + value``.

    The length is the value's character count padded to 2 digits; values
    over 99 characters get a 3-digit length the format cannot carry.
    """
    return f"{tag}{len(value):02d}{value}"


def is_friendly_field_map(keys: Iterable[str]) -> bool:
    """True if any key is a field name rather than a raw field id."""
    return any(key in FRIENDLY_FIELD_KEYS for key in keys)


def map_fields_to_tags(fields: Mapping[str, str]) -> dict[str, str]:
    """
    Translate a name-keyed field mapping to raw field ids.

    ``initiation_method`` accepts only ``"dynamic"`` and ``"static"`` (any
    case); other values are dropped. An alphabetic ``currency`` is replaced
    by its numeric code, a numeric one is kept. Unknown names are dropped.

    Raises:
        UnsupportedCurrencyError: If an alphabetic currency is not known.
    """
    tags: dict[str, str] = {FORMAT_INDICATOR_TAG: FORMAT_INDICATOR}

    for name, value in fields.items():
        if name == "initiation_method":
            method = INITIATION_METHODS.get(value.lower())
            if method is not None:
                tags[INITIATION_METHOD_TAG] = method
            continue

        if name == "currency" and _ALPHABETIC.fullmatch(value):
            code = value.upper()
            numeric = currency_to_numeric(code)
            if numeric is None:
                raise UnsupportedCurrencyError(code)
            value = numeric

        tag = FIELD_TO_TAG.get(name)
        if tag is not None:
            tags[tag] = value

    return tags


def encode_emv_qr_raw(data: Mapping[str, str]) -> str:
    """
    Encode a mapping of raw field ids into a payload.

    The format indicator ``000201`` is always written first, whatever the
    input holds under ``"00"``. Ids outside the canonical order are not
    written.
    """
    encoded = [to_tlv(FORMAT_INDICATOR_TAG, FORMAT_INDICATOR)]
    encoded += [to_tlv(tag, data[tag]) for tag in EMISSION_ORDER if tag in data]

    body = "".join(encoded)
    crc = calculate_crc(body + CRC_PREFIX)
    return body + to_tlv(CRC_TAG, crc)


def encode_emv_qr(data: Mapping[str, str]) -> str:
    """
    Encode a field mapping into a payload string.

    Args:
        data: Either raw field ids (``{"59": "RIEI"}``) or field names
            (``{"merchant_name": "RIEI"}``). The mapping is treated as
            name-keyed when any key is a recognised field name.

    Returns:
        The payload, ending in its ``63`` checksum record.

    Raises:
        UnsupportedCurrencyError: If an alphabetic currency is not known.
    """
    friendly = is_friendly_field_map(data.keys())
    tags = map_fields_to_tags(data) if friendly else dict(data)
    payload = encode_emv_qr_raw(tags)

    log_event(get_logger(), logging.DEBUG, "payload_encoded", {
        "friendly": friendly,
        "tags": sorted(tags),
        "length": len(payload),
    })
    return payload
