"""Fingerprint -> offsets index over the windows of one document."""
from __future__ import annotations

from collections import defaultdict
from typing import Dict, Iterable, Iterator, List, Tuple


class FingerprintIndex:
    """Multi-offset bucket index: every offset sharing a fingerprint is kept."""

    def __init__(self) -> None:
        self._buckets: Dict[int, List[int]] = defaultdict(list)
        self._num_offsets = 0

    @classmethod
    def from_hashes(cls, hashes: Iterable[int]) -> "FingerprintIndex":
        """Index a hash sequence, using each entry's position as its offset."""
        index = cls()
        for offset, fingerprint in enumerate(hashes):
            index.add(fingerprint, offset)
        return index

    # --------------------------------------------------
    # Mutation
    # --------------------------------------------------

    def add(self, fingerprint: int, offset: int) -> None:
        """Append *offset* to the bucket for *fingerprint*."""
        self._buckets[fingerprint].append(offset)
        self._num_offsets += 1

    # --------------------------------------------------
    # Queries
    # --------------------------------------------------

    def candidates(self, fingerprint: int) -> Tuple[int, ...]:
        """Return the offsets stored under *fingerprint* (empty if unseen).

        The result is a snapshot; changing the index later does not alter it.
        """
        # .get() so that misses do not create empty buckets
        return tuple(self._buckets.get(fingerprint, ()))

    def __contains__(self, fingerprint: object) -> bool:
        return fingerprint in self._buckets

    def __len__(self) -> int:
        return len(self._buckets)

    @property
    def num_offsets(self) -> int:
        return self._num_offsets

    def items(self) -> Iterator[Tuple[int, Tuple[int, ...]]]:  # noqa: D401 – simple method
        """Iterate *(fingerprint, offsets)* pairs in insertion order."""
        for fingerprint, offsets in self._buckets.items():
            yield fingerprint, tuple(offsets)
