"""Output module for CopyCatch.

Writes detection results as:
- .txt (one human-readable line per record)
- .jsonl (JSON Lines), optionally gzip-compressed
"""
from __future__ import annotations

import gzip
import json
from pathlib import Path
from typing import Any, Dict, Optional, TextIO, Union

from .match import Match
from .passages import Passage


def format_match_line(match: Match) -> str:
    """Human-readable report line for one confirmed match."""
    return f"Plagiarized content detected between Paper 1 and Paper 2 at position {match.offset2}"


def format_passage_line(passage: Passage) -> str:
    """Human-readable report line for one merged passage."""
    return (
        f"Copied passage of {passage.length} characters: "
        f"Paper 1 position {passage.offset1}, Paper 2 position {passage.offset2}"
    )


class MatchWriter:
    """Base class for match writers."""

    format_name = "base"

    def __init__(self, output_path: Path, compress: bool = False):
        self.output_path = Path(output_path)
        self.compress = compress
        self.total_written = 0
        self.current_file: Optional[TextIO] = None

    def _open(self) -> TextIO:
        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        if self.compress:
            return gzip.open(self.output_path, "wt", encoding="utf-8")
        return open(self.output_path, "w", encoding="utf-8")

    def _emit(self, line: str) -> None:
        if self.current_file is None:
            self.current_file = self._open()
        self.current_file.write(line)
        self.current_file.write("\n")
        self.total_written += 1

    def write_match(self, match: Match) -> None:
        raise NotImplementedError

    def write_passage(self, passage: Passage) -> None:
        raise NotImplementedError

    def finalize(self) -> Dict[str, Any]:
        """Close the file and return stats."""
        if self.current_file is None:
            # Still create the file so "no matches" leaves an empty report.
            self.current_file = self._open()
        self.current_file.close()
        return {
            "format": self.format_name,
            "path": str(self.output_path),
            "total_records": self.total_written,
            "compressed": self.compress,
        }

    def __enter__(self) -> "MatchWriter":
        return self

    def __exit__(self, *exc_info) -> None:
        if self.current_file is None or not self.current_file.closed:
            self.finalize()


class TextWriter(MatchWriter):
    """Writer for plain text reports."""

    format_name = "txt"

    def write_match(self, match: Match) -> None:
        self._emit(format_match_line(match))

    def write_passage(self, passage: Passage) -> None:
        self._emit(format_passage_line(passage))


class JSONLWriter(MatchWriter):
    """Writer for JSONL format."""

    format_name = "jsonl"

    def write_match(self, match: Match) -> None:
        self._emit(json.dumps({"type": "match", **match._asdict()}))

    def write_passage(self, passage: Passage) -> None:
        self._emit(json.dumps({"type": "passage", **passage._asdict()}))


def create_writer(output_path: Union[str, Path], format: str = "auto") -> MatchWriter:
    """
    Create appropriate writer based on format.

    A trailing ``.gz`` compresses the output; the suffix before it picks the
    format (a bare ``.gz`` means JSONL).

    Args:
        output_path: Output file path
        format: Output format ('txt', 'jsonl', 'auto')
    """
    output_path = Path(output_path)
    suffixes = [s.lower() for s in output_path.suffixes]
    compress = bool(suffixes) and suffixes[-1] == ".gz"
    if compress:
        suffixes.pop()

    if format == "auto":
        suffix = suffixes[-1] if suffixes else ""
        if suffix in (".jsonl", ".json") or (compress and not suffix):
            format = "jsonl"
        elif suffix == ".txt":
            format = "txt"
        else:
            raise ValueError(f"Cannot auto-detect format from suffix '{suffix}'")

    if format == "jsonl":
        return JSONLWriter(output_path, compress=compress)
    elif format == "txt":
        return TextWriter(output_path, compress=compress)
    else:
        raise ValueError(f"Unsupported format: {format}")
