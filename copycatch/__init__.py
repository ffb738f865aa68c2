"""CopyCatch - copied-passage detection with Rabin-Karp fingerprints.

Every fixed-length window of two documents is fingerprinted with a rolling
hash; windows sharing a fingerprint are then compared directly, so only true
copies are reported.

Quick Start:
    # CLI usage
    copycatch compare paper1.txt paper2.txt --window 15

    # Python API
    from copycatch import detect_plagiarism
    matches = detect_plagiarism(paper1, paper2, window=15)
"""

from .detector import __version__

# Re-export main API
from .detector import (
    RollingHasher,
    InvalidWindowLength,
    FingerprintIndex,
    Match,
    MatchDetector,
    detect_plagiarism,
    Passage,
    DetectionReport,
    merge_passages,
    compare_documents,
    read_document,
    create_writer,
)

__all__ = [
    "__version__",
    "RollingHasher",
    "InvalidWindowLength",
    "FingerprintIndex",
    "Match",
    "MatchDetector",
    "detect_plagiarism",
    "Passage",
    "DetectionReport",
    "merge_passages",
    "compare_documents",
    "read_document",
    "create_writer",
]
