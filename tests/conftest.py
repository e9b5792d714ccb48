import pytest

from emvqr.resources import reload_tables


@pytest.fixture(autouse=True)
def fresh_tables():
    reload_tables()
    yield
    reload_tables()


@pytest.fixture
def skip_crc(monkeypatch):
    """Decode payloads without a valid checksum record."""
    monkeypatch.setattr("emvqr.parsing.tlv.decode.validate_crc", lambda payload: True)
