"""Canonical fingerprints of registry descriptors.

A descriptor is hashed over a canonical JSON form: keys sorted at every
level, no insignificant whitespace, UTF-8.  HTML-sensitive characters are
escaped, and every number is written as a float64 in its shortest form:
plain decimal between 1e-6 and 1e21, exponent form outside that range.
"""

from __future__ import annotations

import base64
import hashlib
import json
import math
from decimal import Decimal
from typing import Any

# Characters that are escaped even though plain JSON does not require it.
_EXTRA_ESCAPES = {
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}

_MIN_PLAIN_FLOAT = 1e-6
_MAX_PLAIN_FLOAT = 1e21


def _format_number(value: int | float) -> str:
    """Write *value* the way a float64 JSON encoder does.

    Integers are rounded through ``float`` as well, so anything beyond
    2**53 loses precision.  A two-digit negative exponent drops its leading
    zero (``1e-7``, not ``1e-07``).
    """
    number = float(value)
    if not math.isfinite(number):
        msg = f"Cannot encode non-finite number {value!r}"
        raise ValueError(msg)

    magnitude = abs(number)
    if magnitude != 0 and not _MIN_PLAIN_FLOAT <= magnitude < _MAX_PLAIN_FLOAT:
        text = repr(number)
        if len(text) >= 4 and text[-4:-1] == "e-0":
            text = text[:-2] + text[-1]
        return text

    text = format(Decimal(repr(number)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def _encode(value: Any) -> str:
    if value is None:
        return "null"
    if value is True:
        return "true"
    if value is False:
        return "false"
    if isinstance(value, (int, float)):
        return _format_number(value)
    if isinstance(value, str):
        text = json.dumps(value, ensure_ascii=False)
        for char, escaped in _EXTRA_ESCAPES.items():
            text = text.replace(char, escaped)
        return text
    if isinstance(value, dict):
        members = [f"{_encode(str(k))}:{_encode(value[k])}" for k in sorted(value)]
        return "{" + ",".join(members) + "}"
    if isinstance(value, (list, tuple)):
        return "[" + ",".join(_encode(item) for item in value) + "]"
    msg = f"Cannot encode {type(value).__name__} in a descriptor"
    raise TypeError(msg)


def canonical_bytes(descriptor: dict[str, Any]) -> bytes:
    """Serialise *descriptor* to its canonical byte form."""
    return _encode(descriptor).encode("utf-8")


def fingerprint(descriptor: dict[str, Any]) -> str:
    """Return the base64-encoded SHA-256 of the canonical form."""
    digest = hashlib.sha256(canonical_bytes(descriptor)).digest()
    return base64.b64encode(digest).decode("ascii")


def is_stale(descriptor: dict[str, Any], local_digest: str) -> bool:
    """True when *local_digest* no longer matches the remote descriptor."""
    return fingerprint(descriptor) != local_digest
