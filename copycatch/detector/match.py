"""Exact-match detection between two documents.

Window fingerprints from :class:`RollingHasher` act as a pre-filter only:
the first document's windows go into a :class:`FingerprintIndex`, each window
of the second document is probed against it, and every candidate pair is
confirmed by comparing the two windows directly. Hash collisions therefore
never reach the output.
"""
from __future__ import annotations

import logging
from typing import Iterator, List, NamedTuple, Optional, Sequence

from .fingerprint_index import FingerprintIndex
from .rolling_hash import RollingHasher, Text, validate_window

logger = logging.getLogger(__name__)


class Match(NamedTuple):
    """A confirmed pair of identical windows."""

    offset1: int
    offset2: int


def _expected_windows(text: Text, window: int) -> int:
    return max(0, len(text) - window + 1)


class MatchDetector:
    """Find every pair of identical *window*-length substrings of two texts."""

    def __init__(self, hasher: Optional[RollingHasher] = None) -> None:
        self.hasher = hasher or RollingHasher()

    # --------------------------------------------------
    # Phases
    # --------------------------------------------------

    def build_index(self, hashes1: Sequence[int]) -> FingerprintIndex:
        index = FingerprintIndex.from_hashes(hashes1)
        logger.debug(
            "indexed %d windows under %d distinct fingerprints",
            index.num_offsets,
            len(index),
        )
        return index

    def probe(
        self,
        index: FingerprintIndex,
        text1: Text,
        text2: Text,
        offset2: int,
        fingerprint: int,
        window: int,
    ) -> Iterator[Match]:
        """Yield confirmed matches for the document-2 window at *offset2*.

        Candidates come out in ascending document-1 offset.
        """
        return self._confirm(index.candidates(fingerprint), text1, text2, offset2, window)

    @staticmethod
    def _confirm(
        candidates: Sequence[int],
        text1: Text,
        text2: Text,
        offset2: int,
        window: int,
    ) -> Iterator[Match]:
        if not candidates:
            return
        probe_window = text2[offset2:offset2 + window]
        for offset1 in candidates:
            if text1[offset1:offset1 + window] == probe_window:
                yield Match(offset1, offset2)

    # --------------------------------------------------
    # Full passes
    # --------------------------------------------------

    def find(
        self,
        text1: Text,
        hashes1: Sequence[int],
        text2: Text,
        hashes2: Sequence[int],
        window: int,
    ) -> Iterator[Match]:
        """Yield all confirmed matches ordered by ``(offset2, offset1)``.

        *hashes1* and *hashes2* must be the window hash sequences of *text1*
        and *text2* for this *window*, as produced by
        :meth:`RollingHasher.precompute_hashes`.
        """
        validate_window(window)
        for name, text, hashes in (("hashes1", text1, hashes1), ("hashes2", text2, hashes2)):
            expected = _expected_windows(text, window)
            if len(hashes) != expected:
                raise ValueError(
                    f"{name} has {len(hashes)} entries; expected {expected} for window {window}"
                )
        return self._find(text1, hashes1, text2, hashes2, window)

    def _find(
        self,
        text1: Text,
        hashes1: Sequence[int],
        text2: Text,
        hashes2: Sequence[int],
        window: int,
    ) -> Iterator[Match]:
        index = self.build_index(hashes1)
        confirmed = collisions = 0
        for offset2, fingerprint in enumerate(hashes2):
            candidates = index.candidates(fingerprint)
            if not candidates:
                continue
            hits = 0
            for match in self._confirm(candidates, text1, text2, offset2, window):
                hits += 1
                yield match
            confirmed += hits
            collisions += len(candidates) - hits
        logger.debug("%d matches confirmed, %d hash collisions rejected", confirmed, collisions)

    def detect(self, text1: Text, text2: Text, window: int) -> Iterator[Match]:
        """Hash both texts and yield their confirmed matches."""
        validate_window(window)
        hashes1 = self.hasher.precompute_hashes(text1, window)
        hashes2 = self.hasher.precompute_hashes(text2, window)
        return self._find(text1, hashes1, text2, hashes2, window)


def detect_plagiarism(
    paper1: Text,
    paper2: Text,
    window: int,
    hasher: Optional[RollingHasher] = None,
) -> List[Match]:
    """Return every confirmed match between *paper1* and *paper2*."""
    return list(MatchDetector(hasher).detect(paper1, paper2, window))
