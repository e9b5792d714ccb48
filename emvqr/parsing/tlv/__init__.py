"""
TLV (Tag-Length-Value) codec for EMV merchant-presented QR payloads.

Each record is a 2-digit id, a 2-digit decimal length and the value text.
The payload always opens with the ``000201`` format indicator and closes with
the ``63`` CRC-16 checksum record.
"""
from emvqr.parsing.tlv.decode import (
    classify_length,
    decode_emv_qr,
    decode_emv_qr_friendly,
    decode_emv_qr_raw,
    LengthKind,
    parse_length,
)
from emvqr.parsing.tlv.encode import (
    encode_emv_qr,
    encode_emv_qr_raw,
    is_friendly_field_map,
    map_fields_to_tags,
    to_tlv,
    EMISSION_ORDER,
    FRIENDLY_FIELD_KEYS,
    OPTIONAL_IDS,
    REQUIRED_IDS,
)

__all__ = [
    "classify_length",
    "decode_emv_qr",
    "decode_emv_qr_friendly",
    "decode_emv_qr_raw",
    "encode_emv_qr",
    "encode_emv_qr_raw",
    "is_friendly_field_map",
    "map_fields_to_tags",
    "parse_length",
    "to_tlv",
    "EMISSION_ORDER",
    "FRIENDLY_FIELD_KEYS",
    "LengthKind",
    "OPTIONAL_IDS",
    "REQUIRED_IDS",
]
