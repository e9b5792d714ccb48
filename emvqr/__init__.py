from emvqr.core.checksum import calculate_crc, validate_crc
from emvqr.errors import CurrencyTableError, EmvQrError, InvalidCRCError, UnsupportedCurrencyError
from emvqr.fields import FIELD_TO_TAG, TAG_TO_FIELD, currency_codes, field_id_to_name, numeric_currency_codes
from emvqr.parsing.tlv import (
    decode_emv_qr,
    decode_emv_qr_friendly,
    decode_emv_qr_raw,
    encode_emv_qr,
    to_tlv,
)
from importlib.metadata import PackageNotFoundError, version

__all__ = [
    "calculate_crc",
    "validate_crc",
    "decode_emv_qr",
    "decode_emv_qr_friendly",
    "decode_emv_qr_raw",
    "encode_emv_qr",
    "to_tlv",
    "field_id_to_name",
    "currency_codes",
    "numeric_currency_codes",
    "FIELD_TO_TAG",
    "TAG_TO_FIELD",
    "CurrencyTableError",
    "EmvQrError",
    "InvalidCRCError",
    "UnsupportedCurrencyError",
]

try:
    __version__ = version("emvqr")
except PackageNotFoundError:
    __version__ = "0.0.0"
