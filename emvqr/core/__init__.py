from emvqr.core.checksum import calculate_crc, validate_crc

__all__ = ["calculate_crc", "validate_crc"]
