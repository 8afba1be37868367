# ==================================================
# nsrl_filter/cli.py
# ==================================================
from __future__ import annotations

import argparse
import json
import logging
import sys

from .artifacts import load_artifacts
from .builder import FilterBuilder
from .config import FilterConfig
from .engine import QueryEngine, built_label
from .errors import NsrlError
from .hashkind import HashKind
from .result import MARKDOWN_HEADER

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False):
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(asctime)s - %(levelname)s - %(message)s"))
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(logging.DEBUG if verbose else logging.INFO)


# ── subcommands ─────────────────────────────────────────────
def cmd_build(cfg: FilterConfig, args) -> int:
    report = FilterBuilder(cfg).build()
    print(f"built {cfg.bloom_path}: {report.rows_inserted} rows, "
          f"{report.bits} bits, k={report.hash_functions} ({report.elapsed:.2f}s)")
    return 0

def cmd_lookup(cfg: FilterConfig, args) -> int:
    engine = QueryEngine.load(cfg)
    if args.hashes:
        results = engine.check(args.hashes)
    else:
        results = engine.stream(getattr(sys.stdin, "buffer", sys.stdin))

    if args.table:
        print(MARKDOWN_HEADER)
    for res in results:
        print(res.to_markdown_row() if args.table else res.to_json(), flush=True)
    return 0

def cmd_status(cfg: FilterConfig, args) -> int:
    count, bloom = load_artifacts(cfg)
    print(json.dumps({
        "db":                str(cfg.db),
        "hash_type":         built_label(bloom),
        "query_hash_type":   cfg.hash_kind.label,
        "record_count":      count,
        "bits":              bloom.m,
        "hash_functions":    bloom.k,
        "error_rate":        bloom.fp_rate,
        "inserted":          bloom.count,
        "fill_ratio":        round(bloom.fill_ratio, 6),
        "estimated_fp_rate": bloom.estimated_fp_rate(),
        "bloom_bytes":       cfg.bloom_path.stat().st_size,
    }, indent=2))
    return 0


# ── parser ──────────────────────────────────────────────────
def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="nsrl-filter", description="NSRL lookup")
    p.add_argument("-V", "--verbose", action="store_true", help="verbose output")
    p.add_argument("--db", help="db path (env NSRL_DB, default: db)")
    p.add_argument("--hash-type", metavar="KIND",
                   help="column to build/query: " + "|".join(HashKind.names())
                        + " (env NSRL_HASH_TYPE, default: sha1)")
    p.add_argument("--error-rate", type=float,
                   help="target false-positive rate (env NSRL_ERROR_RATE, default: 0.001)")

    sub = p.add_subparsers(dest="command", required=True)

    b = sub.add_parser("build", aliases=["b"], help="Build bloomfilter from NSRL database")
    b.set_defaults(func=cmd_build)

    lk = sub.add_parser("lookup", aliases=["l"], help="Query NSRL for hash")
    lk.add_argument("hashes", nargs="*", metavar="HASH",
                    help="hashes to query; reads '<HASH> <FILENAME>' lines from stdin if none")
    lk.add_argument("-t", "--table", action="store_true", help="output as Markdown table")
    lk.set_defaults(func=cmd_lookup)

    st = sub.add_parser("status", aliases=["s"], help="Show artifact and filter summary")
    st.set_defaults(func=cmd_status)
    return p


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)
    try:
        cfg = FilterConfig.from_env(hash_kind=args.hash_type,
                                    error_rate=args.error_rate,
                                    db=args.db)
        return args.func(cfg, args)
    except (NsrlError, OSError) as e:
        logger.error("%s", e)
        return 1
