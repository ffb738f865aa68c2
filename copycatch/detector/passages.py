"""Passage merging, coverage and per-comparison reports."""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from itertools import islice
from typing import Any, Dict, Iterable, List, NamedTuple, Optional

import numpy as np

from .match import Match, MatchDetector
from .rolling_hash import RollingHasher, Text, validate_window

logger = logging.getLogger(__name__)


class Passage(NamedTuple):
    """A maximal copied run: ``doc1[offset1:offset1+length] == doc2[offset2:offset2+length]``."""

    offset1: int
    offset2: int
    length: int


def merge_passages(matches: Iterable[Match], window: int) -> List[Passage]:
    """Coalesce overlapping window matches into maximal passages.

    Matches ``(i, j), (i+1, j+1), ...`` lie on one diagonal and describe a
    single copied run of ``run_length + window - 1`` code units. *matches*
    must be ordered by document-2 offset, as :meth:`MatchDetector.find`
    yields them.
    """
    validate_window(window)
    # diagonal (offset1 - offset2) -> [start1, start2, last2]
    open_runs: Dict[int, List[int]] = {}
    passages: List[Passage] = []

    for offset1, offset2 in matches:
        diagonal = offset1 - offset2
        run = open_runs.get(diagonal)
        if run is not None and run[2] == offset2 - 1:
            run[2] = offset2
            continue
        if run is not None:
            passages.append(Passage(run[0], run[1], run[2] - run[1] + window))
        open_runs[diagonal] = [offset1, offset2, offset2]

    for start1, start2, last2 in open_runs.values():
        passages.append(Passage(start1, start2, last2 - start2 + window))

    passages.sort(key=lambda p: (p.offset2, p.offset1))
    return passages


def coverage(passages: Iterable[Passage], doc_length: int, side: int = 2) -> float:
    """Fraction of one document's code units covered by at least one passage.

    *side* selects document 1 or 2.
    """
    if side not in (1, 2):
        raise ValueError(f"side must be 1 or 2, got {side}")
    if doc_length <= 0:
        return 0.0
    covered = np.zeros(doc_length, dtype=bool)
    for passage in passages:
        start = passage.offset1 if side == 1 else passage.offset2
        covered[start:start + passage.length] = True
    return float(covered.mean())


@dataclass
class DetectionReport:
    """Outcome of comparing two documents."""

    window: int
    doc1_length: int
    doc2_length: int
    matches: List[Match] = field(default_factory=list)
    passages: List[Passage] = field(default_factory=list)
    coverage1: float = 0.0
    coverage2: float = 0.0
    truncated: bool = False
    elapsed: float = 0.0

    @property
    def has_matches(self) -> bool:
        return bool(self.matches)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "window": self.window,
            "doc1_length": self.doc1_length,
            "doc2_length": self.doc2_length,
            "num_matches": len(self.matches),
            "num_passages": len(self.passages),
            "coverage1": round(self.coverage1, 4),
            "coverage2": round(self.coverage2, 4),
            "truncated": self.truncated,
            "elapsed_seconds": round(self.elapsed, 4),
        }


def validate_limit(limit: Optional[int], name: str = "limit") -> Optional[int]:
    """Return *limit* unchanged if it is None or a positive integer, else raise ``ValueError``."""
    if limit is None:
        return None
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
        raise ValueError(f"{name} must be a positive integer, got {limit!r}")
    return limit


def build_report(
    doc1_length: int,
    doc2_length: int,
    window: int,
    matches: List[Match],
    truncated: bool = False,
    elapsed: float = 0.0,
) -> DetectionReport:
    """Merge *matches* into passages and wrap everything in a :class:`DetectionReport`."""
    passages = merge_passages(matches, window)
    report = DetectionReport(
        window=window,
        doc1_length=doc1_length,
        doc2_length=doc2_length,
        matches=matches,
        passages=passages,
        coverage1=coverage(passages, doc1_length, side=1),
        coverage2=coverage(passages, doc2_length, side=2),
        truncated=truncated,
        elapsed=elapsed,
    )
    logger.info(
        "compared %d x %d units (window %d): %d matches, %d passages%s",
        doc1_length,
        doc2_length,
        window,
        len(matches),
        len(passages),
        " (truncated)" if truncated else "",
    )
    return report


def compare_documents(
    doc1: Text,
    doc2: Text,
    window: int,
    hasher: Optional[RollingHasher] = None,
    max_matches: Optional[int] = None,
) -> DetectionReport:
    """Detect matches between two documents and summarise them.

    With *max_matches* set, at most that many matches are kept and the
    passages and coverage figures describe only the kept matches.
    """
    validate_window(window)
    validate_limit(max_matches, "max_matches")
    t0 = time.time()
    stream = MatchDetector(hasher).detect(doc1, doc2, window)

    if max_matches is None:
        matches = list(stream)
        truncated = False
    else:
        matches = list(islice(stream, max_matches + 1))
        truncated = len(matches) > max_matches
        del matches[max_matches:]

    return build_report(len(doc1), len(doc2), window, matches, truncated, time.time() - t0)
