# tokens.py
"""Pattern strings, raw bytes and version-4 UUIDs."""
from __future__ import annotations

import string
import uuid
from typing import Optional

from .locking import LockedSource

UPPER = string.ascii_uppercase
LOWER = string.ascii_lowercase
DIGITS = string.digits
ALNUM = UPPER + LOWER + DIGITS
SYMBOLS = "!@#$%^&*()_+-=[]{}|;:,.<>?"

PATTERN_CHARSETS = {
    "X": UPPER,
    "x": LOWER,
    "9": DIGITS,
    "A": ALNUM,
    "!": SYMBOLS,
}
ESCAPE = "\\"


def pattern_format(rng: LockedSource, pattern: Optional[str], capacity: Optional[int] = None) -> Optional[str]:
    """Expand a token pattern such as ``"XXXX-9999"``.

    ``X`` uppercase letter, ``x`` lowercase letter, ``9`` digit, ``A``
    letter or digit, ``!`` symbol. A backslash makes the next character
    literal; anything else is copied. Output stops at ``capacity - 1``
    characters, the room a NUL-terminated buffer of ``capacity`` has.
    ``capacity`` defaults to what the whole pattern needs.
    """
    if pattern is None:
        return None
    if capacity is None:
        capacity = len(pattern) + 1
    capacity = int(capacity)
    if capacity <= 0 or capacity > rng.limits.max_pattern:
        return None
    room = capacity - 1
    out = []
    n = len(pattern)
    with rng.hold() as src:
        i = 0
        while i < n and len(out) < room:
            c = pattern[i]
            charset = PATTERN_CHARSETS.get(c)
            if charset is not None:
                out.append(charset[src.bounded(len(charset))])
            elif c == ESCAPE and i + 1 < n:
                i += 1
                out.append(pattern[i])
            else:
                out.append(c)
            i += 1
    return "".join(out)


def _require_secure(rng: LockedSource) -> None:
    if not rng.cryptographic:
        raise ValueError(f"{rng.name} is not a cryptographic source; pass the secure handle")


def random_bytes(rng: LockedSource, length: int) -> Optional[bytes]:
    """Raw bytes from the secure engine; ``None`` for a bad length."""
    _require_secure(rng)
    length = int(length)
    if length <= 0 or length > rng.limits.max_bytes:
        return None
    with rng.hold() as src:
        return src.next_bytes(length)


def uuid_v4(rng: LockedSource) -> str:
    """RFC 4122 version-4 UUID string, ``xxxxxxxx-xxxx-4xxx-[89ab]xxx-xxxxxxxxxxxx``."""
    _require_secure(rng)
    with rng.hold() as src:
        raw = src.next_bytes(16)
    # version=4 overwrites the version nibble and the variant bits
    return str(uuid.UUID(bytes=raw, version=4))
