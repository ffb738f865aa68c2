"""Basic sanity tests for the CopyCatch rolling hash."""
from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import pytest

from copycatch.detector.fingerprint_index import FingerprintIndex
from copycatch.detector.rolling_hash import InvalidWindowLength, RollingHasher


def test_compute_hash_known_values() -> None:
    rk = RollingHasher()
    assert rk.compute_hash("abc") == 90
    assert rk.compute_hash("abcd") == 11


def test_empty_string_hashes_to_zero() -> None:
    assert RollingHasher().compute_hash("") == 0
    assert RollingHasher().compute_hash(b"") == 0


def test_bytes_and_str_hash_alike() -> None:
    rk = RollingHasher()
    assert rk.compute_hash(b"abcd") == rk.compute_hash("abcd")
    assert rk.precompute_hashes(b"abcdabcd", 4) == rk.precompute_hashes("abcdabcd", 4)


def test_precompute_hashes_known_values() -> None:
    hashes = RollingHasher().precompute_hashes("abcdabcd", 4)
    assert len(hashes) == 5
    assert hashes[4] == 11  # "abcd" at offset 4
    assert hashes[1] == 54  # "bcda" at offset 1
    assert hashes[0] == hashes[4]


def test_precompute_matches_direct_hash_every_window() -> None:
    rk = RollingHasher()
    text = "the quick brown fox jumps over the lazy dog"
    for window in (1, 2, 7, len(text)):
        hashes = rk.precompute_hashes(text, window)
        assert hashes == [rk.compute_hash(text[i:i + window]) for i in range(len(text) - window + 1)]


def test_precompute_with_large_prime() -> None:
    rk = RollingHasher(prime=1_000_000_007, base=257)
    text = "mississippi" * 20
    hashes = rk.precompute_hashes(text, 11)
    assert all(0 <= h < rk.prime for h in hashes)
    assert hashes[0] == hashes[11] == rk.compute_hash("mississippi")


def test_window_exceeds_document_is_empty() -> None:
    rk = RollingHasher()
    assert rk.precompute_hashes("abc", 4) == []
    assert rk.precompute_hashes("", 1) == []


@pytest.mark.parametrize("window", [0, -1, -100])
def test_invalid_window_length(window: int) -> None:
    with pytest.raises(InvalidWindowLength) as excinfo:
        RollingHasher().precompute_hashes("abcdef", window)
    assert excinfo.value.window == window
    assert isinstance(excinfo.value, ValueError)


@pytest.mark.parametrize("prime, base", [(1, 256), (0, 256), (101, 0)])
def test_invalid_hasher_configuration(prime: int, base: int) -> None:
    with pytest.raises(ValueError):
        RollingHasher(prime=prime, base=base)


def test_configuration_is_read_only() -> None:
    rk = RollingHasher(prime=103)
    assert (rk.prime, rk.base) == (103, 256)
    with pytest.raises(AttributeError):
        rk.prime = 7  # type: ignore[misc]


def test_detect_collision_recomputes_hash() -> None:
    rk = RollingHasher()
    text = "abcdabcd"
    assert rk.detect_collision(text, 0, 4, 11)
    assert rk.detect_collision(text, 1, 4, 54)
    # A wrong expected hash is never trusted
    assert not rk.detect_collision(text, 0, 4, 50)
    assert not rk.detect_collision(text, 1, 4, 23)
    # Span past the end of the text
    assert not rk.detect_collision(text, 6, 4, rk.compute_hash("cd"))


def test_distinct_strings_distinct_hashes() -> None:
    rk = RollingHasher()
    assert rk.compute_hash("abcd") != rk.compute_hash("efgh")


def test_thread_safety() -> None:
    rk = RollingHasher()
    texts = [f"document number {i} " * 50 for i in range(16)]
    expected = [rk.precompute_hashes(t, 12) for t in texts]
    with ThreadPoolExecutor(max_workers=8) as pool:
        got = list(pool.map(lambda t: rk.precompute_hashes(t, 12), texts))
        hashes = list(pool.map(rk.compute_hash, ["abc", "def"] * 100))
    assert got == expected
    assert hashes == [90, rk.compute_hash("def")] * 100


def test_precompute_returns_fresh_list() -> None:
    rk = RollingHasher()
    first = rk.precompute_hashes("abcdabcd", 4)
    first.clear()
    second = rk.precompute_hashes("abcdabcd", 4)
    assert second is not first
    assert second == [rk.compute_hash(w) for w in ("abcd", "bcda", "cdab", "dabc", "abcd")]


def test_fingerprint_index_keeps_every_offset() -> None:
    index = FingerprintIndex.from_hashes([5, 7, 5, 5, 9])
    assert index.candidates(5) == (0, 2, 3)
    assert index.candidates(7) == (1,)
    assert index.candidates(42) == ()
    assert 42 not in index
    assert len(index) == 3
    assert index.num_offsets == 5


def test_fingerprint_index_results_are_snapshots() -> None:
    index = FingerprintIndex.from_hashes([5, 7, 5])
    before = index.candidates(5)
    index.add(5, 3)
    assert before == (0, 2)
    assert index.candidates(5) == (0, 2, 3)
    for _, offsets in index.items():
        assert isinstance(offsets, tuple)
    assert dict(index.items()) == {5: (0, 2, 3), 7: (1,)}
    assert index.num_offsets == 4
