#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
CopyScan - Command Line Interface

Discovers files, runs a scan (or loads a saved one), prints the most
similar pairs and writes ranking reports.
"""

import argparse
import json
import sys
import time
from array import array
from typing import List, Optional

from . import __version__
from .config import (
    Comparator,
    MossConfig,
    NormalizerMode,
    ScanConfig,
    default_threads,
    load_config,
    parse_comparators,
)
from .console import (
    Colors,
    ConsoleProgress,
    draw_box,
    format_time,
    log_error,
    log_info,
    log_step,
    log_warn,
    print_banner,
    setup_logging,
)
from .driver import run_scan
from .errors import ConfigError, ScanCancelled, ScanFault, ScanFormatError
from .pairs import ScanEntry, ScanEntryType, ScanInputs
from .report import format_score, rank_pairs, write_ranking, write_ranking_json
from .scores import ScoreTable, load_scores, save_scores

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_CANCELLED = 130

DEFAULT_LIMIT = 10

EPILOG = """
Examples:
  # Compare every main.c below a submissions folder
  copyscan ./submissions -n main.c

  # Regex on file names, previous semester as extra reference
  copyscan ./fall -r '.*\\.java' --old ./spring

  # All five metrics, 8 threads, full report
  copyscan ./hw3 -n hw3.c -a byte,token,moss,tree,ahu -j 8 -o report.txt

  # Save the scores, then re-rank later without rescanning
  copyscan ./hw3 -n hw3.c --save hw3.scan
  copyscan ./hw3 -n hw3.c --load hw3.scan --rank-by token

Comparators:
  byte   - Edit distance between normalized texts
  token  - Edit distance between token sequences
  moss   - Edit distance between winnowed fingerprints [default]
  tree   - Zhang-Shasha parse tree edit distance
  ahu    - Parse tree isomorphism (0 = same shape)
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="copyscan",
        description="CopyScan - Source Similarity Scanner",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=EPILOG,
    )
    parser.add_argument(
        "dirs", nargs="*", metavar="DIR", help="Directories to scan recursively"
    )
    pattern = parser.add_mutually_exclusive_group()
    pattern.add_argument("-n", "--name", help="File name (shell pattern) to match")
    pattern.add_argument("-r", "--regex", help="Regex matched against file names")
    parser.add_argument(
        "--old",
        nargs="+",
        default=[],
        metavar="DIR",
        help="Old semester directories (not compared among themselves)",
    )
    parser.add_argument(
        "--single",
        nargs="+",
        default=[],
        metavar="FILE",
        help="Individual files compared against everything",
    )
    parser.add_argument(
        "-j",
        "--threads",
        type=int,
        default=None,
        help="Number of worker threads (0 = one per CPU, default)",
    )
    parser.add_argument(
        "-a",
        "--algorithms",
        metavar="LIST",
        help="Comma separated comparators: byte,token,moss,tree,ahu "
        "(default: moss,token)",
    )
    parser.add_argument(
        "--normalizer",
        choices=[m.value for m in NormalizerMode],
        help="Text normalization for byte and moss (default: variables)",
    )
    parser.add_argument("-k", type=int, help="Moss k-gram size (default: 15)")
    parser.add_argument("-w", type=int, help="Moss window size (default: 8)")
    parser.add_argument("--config", metavar="JSON", help="Load options from a file")
    parser.add_argument("-o", "--output", metavar="FILE", help="Write text ranking")
    parser.add_argument("--json", metavar="FILE", help="Write JSON ranking")
    parser.add_argument(
        "--rank-by",
        metavar="NAME",
        help="Comparator to rank by (default: first of moss,token,ahu,byte,tree)",
    )
    persist = parser.add_mutually_exclusive_group()
    persist.add_argument("--save", metavar="FILE", help="Save scores after the scan")
    persist.add_argument(
        "--load", metavar="FILE", help="Load scores instead of scanning"
    )
    parser.add_argument(
        "--limit",
        type=int,
        default=DEFAULT_LIMIT,
        help=f"Pairs shown on the console and in reports, 0 = all "
        f"(default: {DEFAULT_LIMIT})",
    )
    parser.add_argument("-q", "--quiet", action="store_true", help="Minimal output")
    parser.add_argument("--debug", action="store_true", help="Verbose engine logging")
    parser.add_argument(
        "--no-color", action="store_true", help="Disable colored output"
    )
    parser.add_argument(
        "-v", "--version", action="version", version=f"%(prog)s {__version__}"
    )
    return parser


def build_config(args) -> ScanConfig:
    """Start from --config (or defaults) and apply command line overrides"""
    config = load_config(args.config) if args.config else ScanConfig()
    if args.threads is not None:
        config.threads = default_threads() if args.threads == 0 else args.threads
    if args.algorithms:
        config.enabled = parse_comparators(args.algorithms)
    if args.normalizer:
        config.normalizer = NormalizerMode.parse(args.normalizer)
    if args.k is not None or args.w is not None:
        config.moss = MossConfig(
            k=args.k if args.k is not None else config.moss.k,
            w=args.w if args.w is not None else config.moss.w,
        )
    return config.validate()


def build_entries(args) -> List[ScanEntry]:
    pattern = args.regex if args.regex is not None else args.name
    if (args.dirs or args.old) and pattern is None:
        raise ConfigError("A file name (-n) or regex (-r) is required with DIR")

    is_regex = args.regex is not None
    entries = [ScanEntry(d, pattern, ScanEntryType.NORMAL, is_regex) for d in args.dirs]
    entries += [
        ScanEntry(d, pattern, ScanEntryType.OLD_SEMESTER, is_regex) for d in args.old
    ]
    entries += [ScanEntry(f, kind=ScanEntryType.SINGLE_FILE) for f in args.single]
    if not entries:
        raise ConfigError("Nothing to scan: give at least one DIR or --single FILE")
    return entries


def build_manifest(
    inputs: ScanInputs, config: ScanConfig, table: Optional[ScoreTable] = None
) -> bytes:
    """Blob stored after the scores: enough to check a later --load"""
    manifest = {
        "version": __version__,
        "files": inputs.files,
        "pairs": [list(p) for p in inputs.pairs],
        "config": config.to_dict(),
    }
    # AST distances have no section in the score stream
    if table is not None and Comparator.TREE_EDIT in table:
        manifest["tree_scores"] = list(table[Comparator.TREE_EDIT])
    return json.dumps(manifest).encode("utf-8")


def load_saved_scan(path: str, inputs: ScanInputs) -> ScoreTable:
    """Load a saved table and check it belongs to the same pair list"""
    try:
        with open(path, "rb") as f:
            table, blob = load_scores(f, inputs.pair_count)
    except (IOError, OSError) as e:
        raise ScanFormatError(f"Cannot read {path}: {e}") from e

    try:
        manifest = json.loads(blob.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ScanFormatError(f"{path} has no valid scan manifest") from e
    if not isinstance(manifest, dict):
        raise ScanFormatError(f"{path} has no valid scan manifest")

    pairs = [tuple(p) for p in manifest.get("pairs", [])]
    if manifest.get("files") != inputs.files or pairs != inputs.pairs:
        raise ScanFormatError(f"{path} was saved for a different set of files")

    tree_scores = manifest.get("tree_scores")
    if tree_scores is not None:
        if (
            not isinstance(tree_scores, list)
            or len(tree_scores) != inputs.pair_count
            or not all(isinstance(s, int) for s in tree_scores)
        ):
            raise ScanFormatError(f"{path} has invalid AST distance scores")
        table.enable(Comparator.TREE_EDIT)[:] = array("i", tree_scores)
    return table


def print_top_pairs(inputs: ScanInputs, table: ScoreTable, ranking: List[int]):
    print()
    print("=" * 60)
    print(f"{Colors.BOLD}Most similar pairs{Colors.NC}")
    print("=" * 60)
    for rank, pid in enumerate(ranking, 1):
        first, second = inputs.pair_paths(pid)
        scores = ", ".join(
            f"{c.title}: {format_score(table.score(c, pid))}"
            for c in table.comparators
        )
        print(f"{Colors.CYAN}{rank:>3}.{Colors.NC} {first}")
        print(f"     {second}")
        print(f"     {Colors.DIM}{scores}{Colors.NC}")


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    # Disable colors if requested or not TTY
    if args.no_color or not sys.stdout.isatty():
        Colors.disable()

    setup_logging(verbose=args.debug, quiet=args.quiet)
    if not args.quiet:
        print_banner()

    try:
        config = build_config(args)
        entries = build_entries(args)
        rank_by = Comparator.parse(args.rank_by) if args.rank_by else None
    except ConfigError as e:
        log_error(str(e))
        return EXIT_ERROR

    if args.limit < 0:
        log_error("--limit must be >= 0")
        return EXIT_ERROR
    limit = args.limit or None

    if not args.quiet:
        log_step("Discovering files...")
    try:
        inputs = ScanInputs.from_entries(entries)
    except ConfigError as e:
        log_error(str(e))
        return EXIT_ERROR

    if inputs.pair_count == 0:
        log_error("No file pairs found")
        return EXIT_ERROR

    if not args.quiet:
        log_info(f"Files: {inputs.file_count}, pairs: {inputs.pair_count}")
        names = ", ".join(c.title for c in config.ordered_comparators())
        log_info(f"Comparators: {names}")
        log_info(f"Threads: {config.threads}")

    start = time.time()
    if args.load:
        try:
            table = load_saved_scan(args.load, inputs)
        except ScanFormatError as e:
            log_error(str(e))
            return EXIT_ERROR
        if not args.quiet:
            log_info(f"Loaded scores from {args.load}")
    else:
        observer = None if args.quiet else ConsoleProgress()
        try:
            table = run_scan(inputs.files, inputs.pairs, config, observer=observer)
        except ScanCancelled as e:
            print()
            log_warn(str(e))
            return EXIT_CANCELLED
        except (ScanFault, ConfigError) as e:
            print()
            log_error(str(e))
            return EXIT_ERROR

        if not args.quiet:
            print()
            elapsed = format_time(time.time() - start)
            print(draw_box("Scan complete", f"Total time: {elapsed}"))

        if args.save:
            with open(args.save, "wb") as f:
                save_scores(f, table, build_manifest(inputs, config, table))
            if not args.quiet:
                log_info(f"Scores saved to {args.save}")

    try:
        ranking = rank_pairs(table, rank_by)
    except ConfigError as e:
        log_error(str(e))
        return EXIT_ERROR

    if not args.quiet:
        shown = ranking[:limit] if limit else ranking
        print_top_pairs(inputs, table, shown)

    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            write_ranking(f, inputs, table, ranking, limit)
        if not args.quiet:
            log_info(f"Report written to {args.output}")
    if args.json:
        with open(args.json, "w", encoding="utf-8") as f:
            write_ranking_json(f, inputs, table, ranking, limit)
        if not args.quiet:
            log_info(f"JSON report written to {args.json}")

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
