"""Encoding resolution for uploaded platform exports.

Exports arrive either as UTF-8 or as Shift-JIS (most Japanese booking
platforms still default to it). The bytes are decoded optimistically as
UTF-8; if that produces replacement characters the same bytes are decoded
again with each fallback codec in turn.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from spaceops.common.errors import SourceReadError
from spaceops.common.logging import log_event

REPLACEMENT_CHAR = "\ufffd"
DEFAULT_FALLBACK_ENCODINGS = ("shift_jis", "cp932")

logger = logging.getLogger("spaceops.ingest")


@dataclass(frozen=True)
class DecodedText:
    text: str
    encoding: str
    fallback_used: bool


def read_source_bytes(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except OSError as exc:
        raise SourceReadError(f"Cannot read source file {path}: {exc.strerror or exc}") from exc


def resolve_text(raw: bytes, fallback_encodings: tuple[str, ...] = DEFAULT_FALLBACK_ENCODINGS) -> DecodedText:
    text = raw.decode("utf-8-sig", errors="replace")
    if REPLACEMENT_CHAR not in text:
        return DecodedText(text=text, encoding="utf-8", fallback_used=False)

    for encoding in fallback_encodings:
        try:
            candidate = raw.decode(encoding)
        except UnicodeDecodeError:
            continue
        if REPLACEMENT_CHAR not in candidate:
            return DecodedText(text=candidate, encoding=encoding, fallback_used=True)

    return DecodedText(text=text, encoding="utf-8", fallback_used=False)


def read_text(path: Path, fallback_encodings: tuple[str, ...] = DEFAULT_FALLBACK_ENCODINGS) -> DecodedText:
    decoded = resolve_text(read_source_bytes(path), fallback_encodings)
    if decoded.fallback_used:
        log_event(
            logger,
            f"decoded {path.name} as {decoded.encoding}",
            stage="decode",
            source=path.name,
            event="ENCODING_FALLBACK",
            status="ok",
        )
    return decoded
