class EmvQrError(ValueError):
    pass


class InvalidCRCError(EmvQrError):
    def __init__(self, message: str = "Invalid CRC"):
        super().__init__(message)


class UnsupportedCurrencyError(EmvQrError):
    def __init__(self, code: str):
        self.code = code
        super().__init__(f"Unsupported currency code: {code}")


class CurrencyTableError(EmvQrError):
    pass


__all__ = [
    "CurrencyTableError",
    "EmvQrError",
    "InvalidCRCError",
    "UnsupportedCurrencyError",
]
