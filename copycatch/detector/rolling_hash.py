"""Polynomial rolling hash (Rabin-Karp fingerprints) for CopyCatch."""
from __future__ import annotations

import logging
from typing import List, Sequence, Union

logger = logging.getLogger(__name__)

Text = Union[str, bytes, bytearray, memoryview]

DEFAULT_PRIME = 101
DEFAULT_BASE = 256


class InvalidWindowLength(ValueError):
    """Raised when a window length is zero or negative."""

    def __init__(self, window: int) -> None:
        super().__init__(f"Window length must be a positive integer, got {window!r}")
        self.window = window


def validate_window(window: int) -> int:
    """Return *window* unchanged or raise :class:`InvalidWindowLength`."""
    if isinstance(window, bool) or not isinstance(window, int) or window < 1:
        raise InvalidWindowLength(window)
    return window


def code_units(text: Text) -> Sequence[int]:
    """Return *text* as an indexable sequence of integer code units.

    Bytes-like input is used as-is (each byte is one unit); ``str`` maps every
    character through :func:`ord`.
    """
    if isinstance(text, (bytes, bytearray)):
        return text
    if isinstance(text, memoryview):
        return text.tobytes()
    return [ord(ch) for ch in text]


class RollingHasher:
    """Rabin-Karp hasher with an immutable ``(prime, base)`` configuration.

    Every method is a pure function of its arguments and the configuration, so
    one instance can be shared freely between threads.
    """

    __slots__ = ("_prime", "_base")

    def __init__(self, prime: int = DEFAULT_PRIME, base: int = DEFAULT_BASE) -> None:
        if prime < 2:
            raise ValueError(f"prime must be >= 2, got {prime}")
        if base < 1:
            raise ValueError(f"base must be >= 1, got {base}")
        self._prime = prime
        self._base = base

    @property
    def prime(self) -> int:
        return self._prime

    @property
    def base(self) -> int:
        return self._base

    def __repr__(self) -> str:
        return f"RollingHasher(prime={self._prime}, base={self._base})"

    # --------------------------------------------------
    # Hashing
    # --------------------------------------------------

    def compute_hash(self, s: Text) -> int:
        """Hash *s* with Horner's rule. The empty string hashes to ``0``."""
        p, b = self._prime, self._base
        value = 0
        for unit in code_units(s):
            value = (value * b + unit) % p
        return value

    def precompute_hashes(self, text: Text, window: int) -> List[int]:
        """Return the fingerprint of every *window*-length substring of *text*.

        Entry ``i`` is the hash of ``text[i:i + window]``. The result holds
        ``len(text) - window + 1`` entries, or none when the window is longer
        than the text. Runs in ``O(len(text))``.
        """
        validate_window(window)
        units = code_units(text)
        n = len(units)
        if window > n:
            logger.debug("window %d exceeds text length %d; no windows", window, n)
            return []

        p, b = self._prime, self._base
        # Weight of the leading unit, b^(window-1) mod p, reused for every roll.
        lead_power = pow(b, window - 1, p)

        value = 0
        for k in range(window):
            value = (value * b + units[k]) % p
        hashes = [value]

        for i in range(n - window):
            value = (value - units[i] * lead_power % p + p) % p
            value = (value * b + units[i + window]) % p
            hashes.append(value)
        return hashes

    # --------------------------------------------------
    # Verification
    # --------------------------------------------------

    def detect_collision(self, text: Text, start: int, length: int, expected_hash: int) -> bool:
        """Recompute the hash of ``text[start:start + length]`` and compare it to *expected_hash*.

        A span that does not fit inside *text* never matches. Note that equal
        hashes do not imply equal content; callers that need equality must
        compare the substrings themselves.
        """
        validate_window(length)
        if start < 0 or start + length > len(text):
            return False
        return self.compute_hash(text[start:start + length]) == expected_hash
