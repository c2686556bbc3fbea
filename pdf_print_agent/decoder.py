"""
Document Decoder
================

Normalizes an inbound document payload into the byte buffer that gets
written to disk and printed.

Accepted payload shapes, in order of precedence:
    1. "37,80,68,70"                  - comma-joined decimal byte values
    2. "JVBERi0xLjQK..."              - base64 text
    3. [37, 80, 68, 70]               - array of byte values
    4. {"type": "Buffer", "data": []} - serialized Node.js Buffer

Browser callers are fixed, so these shapes and their precedence must not
change.
"""

import base64
import enum
import math
import re
import string
from typing import Any, Iterable

from .errors import UnsupportedFormat, EmptyDocument

CSV_DIGITS_RE = re.compile(r'^[0-9]+(,[0-9]+)*$')

_BASE64_ALPHABET = frozenset(string.ascii_letters + string.digits + '+/')
_URLSAFE_MAP = str.maketrans('-_', '+/')


class PayloadShape(enum.Enum):
    """Recognized document payload shapes."""

    CSV_DIGITS = 'csv_digits'
    BASE64 = 'base64'
    BYTE_ARRAY = 'byte_array'
    BUFFER_OBJECT = 'buffer_object'
    UNSUPPORTED = 'unsupported'


def classify_payload(payload: Any) -> PayloadShape:
    """Work out which shape a payload has, honoring the precedence order."""
    if isinstance(payload, str):
        if CSV_DIGITS_RE.match(payload.strip()):
            return PayloadShape.CSV_DIGITS
        return PayloadShape.BASE64
    if isinstance(payload, (list, tuple)):
        return PayloadShape.BYTE_ARRAY
    if (
        isinstance(payload, dict)
        and payload.get('type') == 'Buffer'
        and isinstance(payload.get('data'), (list, tuple))
    ):
        return PayloadShape.BUFFER_OBJECT
    return PayloadShape.UNSUPPORTED


def coerce_byte(value: Any) -> int:
    """
    Coerce one value to a byte the way a JavaScript byte buffer would.

    Numeric strings are parsed, fractions truncated, anything non-numeric
    becomes 0 and the result wraps modulo 256.
    """
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0
        try:
            value = float(text)
        except ValueError:
            return 0
    if isinstance(value, int):
        return value & 0xFF
    if isinstance(value, float):
        if not math.isfinite(value):
            return 0
        return int(value) & 0xFF
    return 0


def bytes_from_values(values: Iterable[Any]) -> bytes:
    """Assemble a buffer from a sequence of loosely typed byte values."""
    return bytes(coerce_byte(v) for v in values)


def decode_base64_lenient(text: str) -> bytes:
    """
    Decode base64 without ever failing.

    Characters outside the alphabet are skipped, the URL-safe alphabet is
    accepted, decoding stops at the first padding character and missing
    padding is tolerated.
    """
    text = text.split('=', 1)[0].translate(_URLSAFE_MAP)
    cleaned = ''.join(c for c in text if c in _BASE64_ALPHABET)

    # A single dangling character carries no complete byte
    if len(cleaned) % 4 == 1:
        cleaned = cleaned[:-1]
    cleaned += '=' * (-len(cleaned) % 4)

    return base64.b64decode(cleaned)


def decode_document(payload: Any) -> bytes:
    """
    Decode a document payload into its byte buffer.

    Args:
        payload: One of the accepted payload shapes (see module docstring)

    Returns:
        Non-empty document bytes

    Raises:
        UnsupportedFormat: payload has none of the accepted shapes
        EmptyDocument: payload decoded to zero bytes
    """
    shape = classify_payload(payload)

    if shape is PayloadShape.CSV_DIGITS:
        buffer = bytes_from_values(payload.strip().split(','))
    elif shape is PayloadShape.BASE64:
        buffer = decode_base64_lenient(payload.strip())
    elif shape is PayloadShape.BYTE_ARRAY:
        buffer = bytes_from_values(payload)
    elif shape is PayloadShape.BUFFER_OBJECT:
        buffer = bytes_from_values(payload['data'])
    else:
        raise UnsupportedFormat(
            'Unsupported pdfBase64 format',
            detail=f'Unsupported payload type: {type(payload).__name__}',
        )

    if not buffer:
        raise EmptyDocument(
            'PDF buffer is empty or malformed',
            detail=f'Payload ({shape.value}) decoded to 0 bytes',
        )

    return buffer
