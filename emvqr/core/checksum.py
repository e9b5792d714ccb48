from __future__ import annotations


CRC16_POLY = 0x1021
CRC16_INIT = 0xFFFF

CRC_TAG = "63"
CRC_PREFIX = "6304"


def calculate_crc(payload: str) -> str:
    """CRC-16/CCITT-FALSE over the UTF-8 bytes of ``payload``, as 4 uppercase hex digits."""
    crc = CRC16_INIT
    for byte in payload.encode("utf-8"):
        crc ^= byte << 8
        for _ in range(8):
            if crc & 0x8000:
                crc = (crc << 1) ^ CRC16_POLY
            else:
                crc <<= 1
            crc &= 0xFFFF
    return f"{crc:04X}"


def validate_crc(payload_with_crc: str) -> bool:
    """
    Check the trailing checksum record of a payload.

    The checksum record is located by the last occurrence of ``"6304"``;
    everything after it is the expected checksum and everything up to and
    including it is what the checksum covers.
    """
    crc_index = payload_with_crc.rfind(CRC_PREFIX)
    if crc_index == -1:
        return False

    split = crc_index + len(CRC_PREFIX)
    expected = payload_with_crc[split:]
    computed = calculate_crc(payload_with_crc[:split])
    return expected.upper() == computed
