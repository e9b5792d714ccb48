import argparse
import json
import logging
import sys
from typing import Optional, Sequence

from pydantic import ValidationError

from emvqr.core.checksum import CRC_TAG, calculate_crc, validate_crc
from emvqr.errors import EmvQrError
from emvqr.fields import map_tags_to_fields
from emvqr.logging import CodecEventBuffer, event_buffer, get_logger
from emvqr.models import DecodeReport, FieldMap
from emvqr.parsing.tlv import decode_emv_qr_raw, encode_emv_qr


def _read_field_map(source: str) -> FieldMap:
    if source == "-":
        text = sys.stdin.read()
    else:
        with open(source, "r", encoding="utf-8") as f:
            text = f.read()
    return FieldMap.model_validate_json(text)


def _cmd_encode(args: argparse.Namespace) -> int:
    fields = _read_field_map(args.source)
    print(encode_emv_qr(fields.root))
    return 0


def _cmd_decode(args: argparse.Namespace) -> int:
    raw = decode_emv_qr_raw(args.payload)
    fields = raw if args.raw else map_tags_to_fields(raw, keep_unknown=True)
    report = DecodeReport(payload=args.payload, checksum=raw.get(CRC_TAG, ""), fields=fields)
    print(report.model_dump_json(indent=2))
    return 0


def _cmd_crc(args: argparse.Namespace) -> int:
    if args.verify:
        valid = validate_crc(args.text)
        print("valid" if valid else "invalid")
        return 0 if valid else 1
    print(calculate_crc(args.text))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="emvqr", description="Encode and decode EMV QR payment payloads.")
    parser.add_argument("--verbose", action="store_true", help="Print codec debug events to stderr.")
    sub = parser.add_subparsers(dest="command", required=True)

    encode = sub.add_parser("encode", help="Encode a JSON field map into a payload.")
    encode.add_argument("source", help="Path to a JSON object of field values, or '-' for stdin.")
    encode.set_defaults(func=_cmd_encode)

    decode = sub.add_parser("decode", help="Decode a payload into a JSON report.")
    decode.add_argument("payload", help="The payload string, including its checksum.")
    decode.add_argument("--raw", action="store_true", help="Key fields by raw id instead of field name.")
    decode.set_defaults(func=_cmd_decode)

    crc = sub.add_parser("crc", help="Compute or verify a payload checksum.")
    crc.add_argument("text", help="Text to checksum, or a full payload with --verify.")
    crc.add_argument("--verify", action="store_true", help="Verify the trailing 6304 checksum record.")
    crc.set_defaults(func=_cmd_crc)

    return parser


def _dump_events(buffer: Optional[CodecEventBuffer]) -> None:
    if buffer is None:
        return
    for event in buffer.events():
        print(f"{event['level']} {event['event']} {json.dumps(event['details'])}", file=sys.stderr)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        logger = get_logger()
    except ValidationError as exc:
        print(f"[!] Error: invalid settings: {exc}", file=sys.stderr)
        return 1

    previous_level = logger.level
    buffer = event_buffer(logger)
    if args.verbose:
        logger.setLevel(logging.DEBUG)
        if buffer is not None:
            buffer.clear()

    try:
        return args.func(args)
    except (EmvQrError, ValidationError, OSError) as exc:
        print(f"[!] Error: {exc}", file=sys.stderr)
        return 1
    finally:
        if args.verbose:
            _dump_events(buffer)
            logger.setLevel(previous_level)


if __name__ == "__main__":
    sys.exit(main())
