"""Tests for codec settings and ring-buffer logging."""
import logging

import pytest
from pydantic import ValidationError

from emvqr.config import CodecSettings, get_settings
from emvqr.core.checksum import calculate_crc
from emvqr.errors import InvalidCRCError
from emvqr.logging import CodecEventBuffer, attach_event_buffer, event_buffer, get_logger, redact
from emvqr.parsing.tlv import decode_emv_qr_raw, encode_emv_qr


def test_settings_defaults(monkeypatch):
    for name in ("EMVQR_LOG_LEVEL", "EMVQR_LOG_RING_SIZE", "EMVQR_CURRENCY_TABLE"):
        monkeypatch.delenv(name, raising=False)
    settings = CodecSettings()
    assert settings.log_level == "WARNING"
    assert settings.log_ring_size == 200
    assert settings.currency_table_path is None


def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("EMVQR_LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("EMVQR_LOG_RING_SIZE", "5")
    get_settings.cache_clear()
    settings = get_settings()
    assert settings.log_level == "DEBUG"
    assert settings.log_ring_size == 5


def test_settings_by_name():
    settings = CodecSettings(log_ring_size=10)
    assert settings.log_ring_size == 10


def test_settings_log_level_normalised():
    assert CodecSettings(log_level=" debug").log_level == "DEBUG"


@pytest.mark.parametrize("level", ["loud", "", "TRACE"])
def test_settings_rejects_unknown_log_level(level):
    with pytest.raises(ValidationError):
        CodecSettings(log_level=level)


def test_settings_rejects_bad_ring_size():
    with pytest.raises(ValidationError):
        CodecSettings(log_ring_size=0)


def test_event_buffer_bounded():
    logger = attach_event_buffer("emvqr.test.bounded", capacity=3)
    for i in range(5):
        logger.info(f"event_{i}", extra={"details": {"i": i}})
    buffer = event_buffer(logger)
    assert buffer.capacity == 3
    events = buffer.events()
    assert [e["event"] for e in events] == ["event_2", "event_3", "event_4"]
    assert events[-1]["details"] == {"i": 4}
    assert events[-1]["level"] == "INFO"
    assert events[-1]["logger"] == "emvqr.test.bounded"


def test_event_buffer_filters_by_name():
    logger = attach_event_buffer("emvqr.test.filter", capacity=10)
    logger.info("payload_encoded")
    logger.info("payload_decoded", extra={"details": {"payload": "000201"}})
    buffer = event_buffer(logger)
    assert [e["event"] for e in buffer.events("payload_decoded")] == ["payload_decoded"]
    assert buffer.events("payload_decoded")[0]["details"] == {"payload": "***"}
    assert buffer.events("crc_invalid") == []


def test_attach_event_buffer_idempotent():
    first = attach_event_buffer("emvqr.test.idempotent", capacity=10)
    second = attach_event_buffer("emvqr.test.idempotent", capacity=50)
    assert first is second
    assert len(first.handlers) == 1
    assert isinstance(first.handlers[0], CodecEventBuffer)
    assert first.handlers[0].capacity == 10
    assert first.propagate is False


def test_redact():
    details = {"payload": "0002...", "length": 12, "fields": {"59": "RIEI", "82": "698049742"}}
    assert redact(details) == {"payload": "***", "length": 12, "fields": {"59": "RIEI", "82": "***"}}
    assert redact(None) == {}
    assert redact({}) == {}


def test_codec_logs_events():
    logger = get_logger()
    handler = event_buffer(logger)
    previous = logger.level
    logger.setLevel(logging.DEBUG)
    handler.clear()
    try:
        payload = encode_emv_qr({"merchant_name": "RIEI", "merchant_phone_number": "698049742"})
        decode_emv_qr_raw(payload)
    finally:
        logger.setLevel(previous)

    events = handler.events()
    names = [e["event"] for e in events]
    assert names == ["payload_encoded", "payload_decoding", "payload_decoded"]
    assert events[1]["details"]["payload"] == "***"
    assert events[2]["details"]["fields"]["59"] == "RIEI"


def test_codec_logs_crc_failure():
    logger = get_logger()
    handler = event_buffer(logger)
    previous = logger.level
    logger.setLevel(logging.WARNING)
    handler.clear()
    body = "0002016304"
    bad = body + ("0000" if calculate_crc(body) != "0000" else "1111")
    try:
        with pytest.raises(InvalidCRCError):
            decode_emv_qr_raw(bad)
    finally:
        logger.setLevel(previous)
    assert [e["event"] for e in handler.events()] == ["crc_invalid"]
