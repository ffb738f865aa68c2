"""CopyCatch detector package.

Core public API lives here so external users can::

    import copycatch as cc
    cc.detect_plagiarism(paper1, paper2, window=15)
    cc.__version__

Building blocks:
    from copycatch.detector.rolling_hash import RollingHasher
    from copycatch.detector.match import MatchDetector
    from copycatch.detector.passages import compare_documents
"""

from importlib.metadata import PackageNotFoundError, version as _pkg_version


# Semantic version of the installed package
try:
    __version__: str = _pkg_version("copycatch")
except PackageNotFoundError:  # pragma: no cover – local dev path
    __version__ = "1.0.0"


from .rolling_hash import RollingHasher, InvalidWindowLength, DEFAULT_PRIME, DEFAULT_BASE
from .fingerprint_index import FingerprintIndex
from .match import Match, MatchDetector, detect_plagiarism
from .passages import Passage, DetectionReport, merge_passages, coverage, compare_documents
from .file_ingest import read_document, detect_encoding
from .output import create_writer, format_match_line, format_passage_line

__all__ = [
    "__version__",
    "DEFAULT_PRIME",
    "DEFAULT_BASE",
    "RollingHasher",
    "InvalidWindowLength",
    "FingerprintIndex",
    "Match",
    "MatchDetector",
    "detect_plagiarism",
    "Passage",
    "DetectionReport",
    "merge_passages",
    "coverage",
    "compare_documents",
    "read_document",
    "detect_encoding",
    "create_writer",
    "format_match_line",
    "format_passage_line",
]
