"""Document loading for CopyCatch.

Reads a whole document into memory as either decoded text or raw bytes:
- plain files, with encoding detection via chardet
- .gz compressed files
"""
from __future__ import annotations

import gzip
import logging
from pathlib import Path
from typing import Optional, Union

import chardet

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def _read_bytes(file_path: Path) -> bytes:
    if file_path.suffix.lower() == ".gz":
        with gzip.open(file_path, "rb") as f:
            return f.read()
    return file_path.read_bytes()


def detect_encoding(raw: bytes, sample_size: int = 8192) -> str:
    """Detect the encoding of *raw* using chardet, defaulting to utf-8."""
    result = chardet.detect(raw[:sample_size])
    return result.get("encoding") or "utf-8"


def read_document(
    path: PathLike,
    encoding: Optional[str] = None,
    binary: bool = False,
) -> Union[str, bytes]:
    """Load the document at *path*.

    Args:
        path: File to read; a ``.gz`` suffix means gzip-compressed content
        encoding: Text encoding (detected when None)
        binary: Return raw bytes instead of decoded text

    Raises:
        FileNotFoundError: if *path* does not exist
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise FileNotFoundError(f"No such document: {file_path}")

    raw = _read_bytes(file_path)
    if binary:
        logger.debug("read %d bytes from %s", len(raw), file_path)
        return raw

    if encoding is None:
        encoding = detect_encoding(raw)
    text = raw.decode(encoding, errors="replace")
    logger.debug("read %d characters from %s (%s)", len(text), file_path, encoding)
    return text
