"""
TLV decoder for EMV merchant-presented QR payloads.

A payload is a run of ``id(2) + length(2) + value`` records closed by the
``63`` checksum record. Decoding is best-effort: malformed length fields do
not raise, each has a fixed recovery (see ``LengthKind``). Only a checksum
mismatch aborts decoding.
"""
from __future__ import annotations

import logging
import re
from enum import Enum
from typing import Optional

from emvqr.core.checksum import validate_crc
from emvqr.errors import InvalidCRCError
from emvqr.fields import map_tags_to_fields
from emvqr.logging import get_logger, log_event

ID_WIDTH = 2
LENGTH_WIDTH = 2

# Leading ASCII integer of a length field; trailing characters are ignored.
_LEADING_INT = re.compile(r"\s*([+-]?[0-9]+)")


class LengthKind(str, Enum):
    """Outcome of reading a 2-character length field."""
    INVALID = "invalid"      # no integer: keep the raw length text as value
    NEGATIVE = "negative"    # keep the raw length text as value
    ZERO = "zero"            # empty value
    OVERFLOW = "overflow"    # longer than what is left: take the rest
    EXACT = "exact"


def parse_length(length_str: str) -> Optional[int]:
    """Parse the leading integer of ``length_str``, or ``None`` if there is none."""
    match = _LEADING_INT.match(length_str)
    if match is None:
        return None
    return int(match.group(1))


def classify_length(length_str: str, index: int, payload_len: int) -> tuple[LengthKind, int]:
    """
    Classify a length field read at ``index`` (the position right after it).

    Returns:
        The ``LengthKind`` and the parsed length (``0`` when invalid).
    """
    length = parse_length(length_str)
    if length is None:
        return LengthKind.INVALID, 0
    if length < 0:
        return LengthKind.NEGATIVE, length
    if length == 0:
        return LengthKind.ZERO, 0
    if index + length > payload_len:
        return LengthKind.OVERFLOW, length
    return LengthKind.EXACT, length


def _decode_records(payload: str) -> dict[str, str]:
    parsed: dict[str, str] = {}
    payload_len = len(payload)
    index = 0

    while index < payload_len - 4:
        tag = payload[index:index + ID_WIDTH]
        index += ID_WIDTH

        if index + LENGTH_WIDTH > payload_len:
            break

        length_str = payload[index:index + LENGTH_WIDTH]
        index += LENGTH_WIDTH

        kind, length = classify_length(length_str, index, payload_len)
        if kind in (LengthKind.INVALID, LengthKind.NEGATIVE):
            parsed[tag] = length_str
        elif kind is LengthKind.ZERO:
            parsed[tag] = ""
        elif kind is LengthKind.OVERFLOW:
            parsed[tag] = payload[index:]
            index = payload_len
        else:
            parsed[tag] = payload[index:index + length]
            index += length

    return parsed


def decode_emv_qr_raw(payload: str) -> dict[str, str]:
    """
    Decode a payload into a mapping of field id -> value.

    The checksum is verified before anything is decoded. Later records with
    the same id replace earlier ones; the checksum record is returned under
    ``"63"`` like any other record.

    Args:
        payload: The full payload string, including its checksum record.

    Returns:
        A dict of 2-character field ids to values, in payload order.

    Raises:
        InvalidCRCError: If the checksum record is missing or does not match.
    """
    logger = get_logger()
    log_event(logger, logging.DEBUG, "payload_decoding", {"payload": payload, "length": len(payload)})

    if not validate_crc(payload):
        log_event(logger, logging.WARNING, "crc_invalid", {"length": len(payload)})
        raise InvalidCRCError()

    parsed = _decode_records(payload)
    log_event(logger, logging.DEBUG, "payload_decoded", {"fields": parsed})
    return parsed


def decode_emv_qr_friendly(payload: str) -> dict[str, str]:
    """
    Decode a payload into a mapping keyed by field names.

    Ids without a known name are kept under their bare id, so nothing
    decoded is lost. The currency is returned in its alphabetic form when
    the numeric code is known.
    """
    return map_tags_to_fields(decode_emv_qr_raw(payload), keep_unknown=True)


def decode_emv_qr(payload: str) -> dict[str, str]:
    """
    Decode a payload into named fields only.

    Unlike ``decode_emv_qr_friendly`` this drops every id without a known
    name, including the checksum record.
    """
    return map_tags_to_fields(decode_emv_qr_raw(payload))
