"""Property-based rolling-hash and matching tests (Hypothesis)."""
from __future__ import annotations

import pytest

hyp = pytest.importorskip("hypothesis")

import hypothesis.strategies as st  # type: ignore
from hypothesis import assume, given, settings  # type: ignore

from copycatch.detector.match import detect_plagiarism
from copycatch.detector.passages import merge_passages
from copycatch.detector.rolling_hash import RollingHasher

_PRIMES = st.sampled_from([2, 3, 13, 101, 65_537, 1_000_000_007])
_BASES = st.integers(min_value=1, max_value=1 << 16)

# Small alphabets make repeats and collisions likely.
_texts = st.text(alphabet="abc", max_size=60)

# ---------------------------------------------------------------------------
# Rolling hash
# ---------------------------------------------------------------------------


@given(text=st.text(max_size=80), window=st.integers(1, 20), prime=_PRIMES, base=_BASES)
def test_window_hash_equals_direct_hash(text: str, window: int, prime: int, base: int) -> None:
    rk = RollingHasher(prime=prime, base=base)
    hashes = rk.precompute_hashes(text, window)
    assert len(hashes) == max(0, len(text) - window + 1)
    for i, h in enumerate(hashes):
        assert 0 <= h < prime
        assert h == rk.compute_hash(text[i:i + window])


@given(data=st.binary(max_size=80), window=st.integers(1, 20), prime=_PRIMES)
def test_window_hash_equals_direct_hash_bytes(data: bytes, window: int, prime: int) -> None:
    rk = RollingHasher(prime=prime)
    assert rk.precompute_hashes(data, window) == [
        rk.compute_hash(data[i:i + window]) for i in range(len(data) - window + 1)
    ]


@given(text=st.text(max_size=40), window=st.integers(1, 10))
def test_hashing_is_deterministic(text: str, window: int) -> None:
    assert RollingHasher().precompute_hashes(text, window) == RollingHasher().precompute_hashes(text, window)
    assert RollingHasher().compute_hash(text) == RollingHasher().compute_hash(text)


@given(text=st.text(max_size=20), extra=st.integers(1, 5))
def test_window_exceeding_text_is_empty(text: str, extra: int) -> None:
    assert RollingHasher().precompute_hashes(text, len(text) + extra) == []


# ---------------------------------------------------------------------------
# Matching
# ---------------------------------------------------------------------------


@settings(max_examples=200)
@given(a=_texts, b=_texts, window=st.integers(1, 6), prime=_PRIMES)
def test_matches_are_exactly_the_equal_windows(a: str, b: str, window: int, prime: int) -> None:
    got = [tuple(m) for m in detect_plagiarism(a, b, window, hasher=RollingHasher(prime=prime))]
    expected = [
        (i, j)
        for j in range(len(b) - window + 1)
        for i in range(len(a) - window + 1)
        if a[i:i + window] == b[j:j + window]
    ]
    assert got == expected


@given(a=_texts, b=_texts, window=st.integers(1, 6))
def test_passages_are_true_copies(a: str, b: str, window: int) -> None:
    matches = detect_plagiarism(a, b, window)
    assume(matches)
    passages = merge_passages(matches, window)
    assert len(passages) <= len(matches)
    for p in passages:
        assert p.length >= window
        assert a[p.offset1:p.offset1 + p.length] == b[p.offset2:p.offset2 + p.length]
