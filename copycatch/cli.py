"""CopyCatch unified command-line interface.

Usage
-----
$ copycatch compare paper1.txt paper2.txt --window 15
$ copycatch compare paper1.txt paper2.txt --window 50 --passages -o report.jsonl
$ copycatch hash paper1.txt --window 15
$ copycatch run config.yml

The *compare* command reports every position where a window of the second
document is an exact copy of a window of the first.

The *hash* command prints the rolling-hash fingerprint of every window of a
single document.

The *run* command executes *compare* with its settings taken from a YAML
configuration file.
"""
from __future__ import annotations

import argparse
import contextlib
import logging
import time
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml  # type: ignore
from tqdm import tqdm

from .detector import __version__
from .detector.file_ingest import read_document
from .detector.match import Match, MatchDetector
from .detector.output import create_writer, format_match_line, format_passage_line
from .detector.passages import DetectionReport, build_report, validate_limit
from .detector.rolling_hash import DEFAULT_BASE, DEFAULT_PRIME, RollingHasher, Text, validate_window

logger = logging.getLogger(__name__)

# -----------------------------------------------------------
# Helpers
# -----------------------------------------------------------


def _scan(
    detector: MatchDetector,
    doc1: Text,
    doc2: Text,
    window: int,
    limit: Optional[int],
    show_progress: bool,
) -> Tuple[List[Match], bool]:
    """Collect matches, probing document 2 window by window under a progress bar."""
    hashes1 = detector.hasher.precompute_hashes(doc1, window)
    hashes2 = detector.hasher.precompute_hashes(doc2, window)
    index = detector.build_index(hashes1)

    matches: List[Match] = []
    offsets = enumerate(hashes2)
    if show_progress:
        offsets = tqdm(offsets, total=len(hashes2), desc="Probing windows", unit="win")

    for offset2, fingerprint in offsets:
        for match in detector.probe(index, doc1, doc2, offset2, fingerprint, window):
            if limit is not None and len(matches) >= limit:
                return matches, True
            matches.append(match)
    return matches, False


def _compare(
    doc1_path: Path,
    doc2_path: Path,
    window: int,
    prime: int = DEFAULT_PRIME,
    base: int = DEFAULT_BASE,
    binary: bool = False,
    passages: bool = False,
    limit: Optional[int] = None,
    output: Optional[Path] = None,
    output_format: str = "auto",
    quiet: bool = False,
) -> DetectionReport:
    validate_window(window)
    validate_limit(limit)
    hasher = RollingHasher(prime=prime, base=base)
    doc1 = read_document(doc1_path, binary=binary)
    doc2 = read_document(doc2_path, binary=binary)
    logger.info("loaded %s (%d units) and %s (%d units)", doc1_path, len(doc1), doc2_path, len(doc2))

    if not quiet:
        print(f"🔎 CopyCatch {__version__} - comparing {doc1_path} and {doc2_path}")
        print(f"   - Window: {window} | {hasher!r}")

    t0 = time.time()
    # Passages need every match on a diagonal, so --limit applies to passages instead.
    matches, truncated = _scan(
        MatchDetector(hasher), doc1, doc2, window,
        limit=None if passages else limit,
        show_progress=not quiet,
    )
    report = build_report(len(doc1), len(doc2), window, matches, truncated, time.time() - t0)

    records = report.passages if passages else report.matches
    if passages and limit is not None and len(records) > limit:
        records = records[:limit]
        report.truncated = True

    with contextlib.ExitStack() as stack:
        writer = stack.enter_context(create_writer(output, format=output_format)) if output else None
        for rec in records:
            if passages:
                line = format_passage_line(rec)
                if writer:
                    writer.write_passage(rec)
            else:
                line = format_match_line(rec)
                if writer:
                    writer.write_match(rec)
            if not quiet or writer is None:
                print(line)

        if writer:
            out_stats = writer.finalize()
            if not quiet:
                print(f"💾 {out_stats['total_records']} records written to {out_stats['path']}")

    if not report.has_matches:
        print("No matches found")
    elif not quiet:
        print("\n======= CopyCatch summary =======")
        print(f"Matches          : {len(report.matches):,}{' (truncated)' if report.truncated else ''}")
        print(f"Passages         : {len(report.passages):,}")
        print(f"Paper 1 coverage : {report.coverage1:.2%}")
        print(f"Paper 2 coverage : {report.coverage2:.2%}")
        print(f"Elapsed          : {report.elapsed:.2f}s")
    return report


def _load_config(cfg_path: Path) -> Dict[str, Any]:
    with cfg_path.open() as f:
        cfg = yaml.safe_load(f) or {}
    if not isinstance(cfg, dict):
        raise ValueError(f"{cfg_path}: expected a mapping at the top level")
    missing = [key for key in ("doc1", "doc2", "window") if key not in cfg]
    if missing:
        raise ValueError(f"{cfg_path}: missing required keys: {', '.join(missing)}")
    return cfg


# -----------------------------------------------------------
# Commands
# -----------------------------------------------------------


def _cmd_compare(args: argparse.Namespace) -> None:
    _compare(
        args.doc1,
        args.doc2,
        window=args.window,
        prime=args.prime,
        base=args.base,
        binary=args.binary,
        passages=args.passages,
        limit=args.limit,
        output=args.output,
        output_format=args.format,
        quiet=args.quiet,
    )


def _cmd_hash(args: argparse.Namespace) -> None:
    """Print the fingerprint of every window."""
    validate_window(args.window)
    hasher = RollingHasher(prime=args.prime, base=args.base)
    text = read_document(args.file, binary=args.binary)
    hashes = hasher.precompute_hashes(text, args.window)
    if not hashes:
        print(f"No windows: window {args.window} exceeds document length {len(text)}")
        return
    for offset, fingerprint in enumerate(hashes):
        print(f"{offset}\t{fingerprint}")


def _cmd_run(args: argparse.Namespace) -> None:
    """Compare two documents using a YAML configuration file."""
    cfg_path: Path = args.config.resolve()
    cfg = _load_config(cfg_path)

    # Relative document paths resolve against the config file's directory
    root = cfg_path.parent
    output = cfg.get("output")
    limit = cfg.get("limit")

    _compare(
        root / Path(cfg["doc1"]).expanduser(),
        root / Path(cfg["doc2"]).expanduser(),
        window=cfg["window"],
        prime=int(cfg.get("prime", DEFAULT_PRIME)),
        base=int(cfg.get("base", DEFAULT_BASE)),
        binary=bool(cfg.get("binary", False)),
        passages=bool(cfg.get("passages", False)),
        limit=limit,
        output=root / Path(output).expanduser() if output else None,
        output_format=str(cfg.get("format", "auto")),
        quiet=args.quiet or bool(cfg.get("quiet", False)),
    )


# -----------------------------------------------------------
# Entrypoint
# -----------------------------------------------------------


def _add_hasher_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("-w", "--window", type=int, required=True,
                   help="Window length in characters (bytes with --binary)")
    p.add_argument("--prime", type=int, default=DEFAULT_PRIME,
                   help=f"Hash modulus (default: {DEFAULT_PRIME})")
    p.add_argument("--base", type=int, default=DEFAULT_BASE,
                   help=f"Hash base (default: {DEFAULT_BASE})")
    p.add_argument("--binary", action="store_true",
                   help="Compare raw bytes instead of decoded text")


def main(argv: List[str] | None = None) -> None:  # noqa: D401 – simple
    parser = argparse.ArgumentParser(
        prog="copycatch",
        description="CopyCatch - find copied passages between two documents",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="Log progress (-v) or debug details (-vv) to stderr")
    sub = parser.add_subparsers(required=True, dest="cmd")

    # compare
    p_compare = sub.add_parser("compare", help="Report windows of DOC2 copied from DOC1")
    p_compare.add_argument("doc1", type=Path, help="Reference document")
    p_compare.add_argument("doc2", type=Path, help="Suspect document")
    _add_hasher_args(p_compare)
    p_compare.add_argument("--passages", action="store_true",
                           help="Merge overlapping matches into copied passages")
    p_compare.add_argument("--limit", type=int,
                           help="Stop after this many reported records")
    p_compare.add_argument("-o", "--output", type=Path,
                           help="Also write records to this file (.txt, .jsonl, add .gz to compress)")
    p_compare.add_argument("--format", default="auto", choices=["auto", "txt", "jsonl"],
                           help="Output format (default: auto-detect from extension)")
    p_compare.add_argument("-q", "--quiet", action="store_true",
                           help="Suppress progress output")
    p_compare.set_defaults(func=_cmd_compare)

    # hash
    p_hash = sub.add_parser("hash", help="Print the fingerprint of every window of FILE")
    p_hash.add_argument("file", type=Path, help="Document to fingerprint")
    _add_hasher_args(p_hash)
    p_hash.set_defaults(func=_cmd_hash)

    # run
    p_run = sub.add_parser("run", help="Run a comparison described by a YAML configuration file")
    p_run.add_argument("config", type=Path, help="Path to YAML configuration file")
    p_run.add_argument("-q", "--quiet", action="store_true",
                       help="Suppress progress output")
    p_run.set_defaults(func=_cmd_run)

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG if args.verbose > 1 else logging.INFO,
            format="%(asctime)s %(name)s %(levelname)s: %(message)s",
        )

    try:
        args.func(args)
    except (ValueError, FileNotFoundError, yaml.YAMLError) as e:
        parser.exit(2, f"{parser.prog}: error: {e}\n")


if __name__ == "__main__":  # pragma: no cover
    main()
