"""Command-line entry point.

Usage:
    cutlist-intake parse lines.txt --material MAT-OAK-18 --thickness 18
    cutlist-intake evaluate parsed.yaml truth.yaml
    cutlist-intake report samples.json
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

from . import __version__
from .config import Capabilities, ShorthandConfig
from .evaluation.ground_truth import load_parts_file, load_samples_file
from .evaluation.metrics import evaluate_parts, print_accuracy_table
from .extractors.confidence import estimate_field_confidence, fields_needing_review, overall_confidence
from .extractors.shorthand import parse_shorthand_lines
from .learning.aggregator import aggregate, print_aggregate_table


def _cmd_parse(args: argparse.Namespace) -> int:
    config = ShorthandConfig(
        material_id=args.material,
        thickness_mm=args.thickness,
        edgeband_id=args.edgeband,
        capabilities=Capabilities.none_enabled() if args.no_ops else Capabilities.all_enabled(),
    )
    with open(args.file, "r", encoding="utf-8") as f:
        text = f.read()

    batch = parse_shorthand_lines(text, config)

    parts = []
    for part in batch.parts:
        conf = estimate_field_confidence(part, part.audit.source_text)
        entry = part.to_dict()
        entry["confidence"] = {name.value: c.to_dict() for name, c in conf.items()}
        entry["overallConfidence"] = round(overall_confidence(conf), 4)
        entry["needsReview"] = [name.value for name in fields_needing_review(conf)]
        parts.append(entry)

    output = {
        "parts": parts,
        "failed": [{"line": n, "text": t} for n, t in batch.failed],
        "parsedCount": batch.parsed_count,
        "failedCount": batch.failed_count,
    }
    print(json.dumps(output, indent=2))
    return 0 if batch.failed_count == 0 else 1


def _cmd_evaluate(args: argparse.Namespace) -> int:
    candidate = load_parts_file(args.candidate)
    truth = load_parts_file(args.truth)
    result, metrics = evaluate_parts(candidate, truth)

    if args.json:
        print(json.dumps({"metrics": metrics.to_dict(), "match": result.to_dict()}, indent=2))
    else:
        print_accuracy_table(metrics, result)
    return 0


def _cmd_report(args: argparse.Namespace) -> int:
    samples = load_samples_file(args.samples)
    if args.limit:
        samples = sorted(samples, key=lambda s: s.created_at)[-args.limit:]
    report = aggregate(samples)

    if args.json:
        print(json.dumps(report.to_dict(), indent=2))
    else:
        print_aggregate_table(report)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cutlist-intake",
        description="Cutlist shorthand parsing and accuracy tooling",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("parse", help="Parse shorthand lines from a text file")
    p.add_argument("file", help="Text file, one part per line")
    p.add_argument("--material", default="MAT-WHITE-18", help="Material id for every part")
    p.add_argument("--thickness", type=float, default=18.0, help="Board thickness in mm")
    p.add_argument("--edgeband", default="EB-WHITE-0.8", help="Edgeband id for edging ops")
    p.add_argument("--no-ops", action="store_true", help="Do not attach any machining operations")
    p.set_defaults(func=_cmd_parse)

    e = sub.add_parser("evaluate", help="Score a parsed part file against ground truth")
    e.add_argument("candidate", help="Parsed parts (YAML or JSON)")
    e.add_argument("truth", help="Ground-truth parts (YAML or JSON)")
    e.add_argument("--json", action="store_true", help="Print JSON instead of a table")
    e.set_defaults(func=_cmd_evaluate)

    r = sub.add_parser("report", help="Aggregate a window of accuracy samples")
    r.add_argument("samples", help="Accuracy samples (YAML or JSON)")
    r.add_argument("--limit", type=int, default=100, help="Most recent samples to include (0 = all)")
    r.add_argument("--json", action="store_true", help="Print JSON instead of a table")
    r.set_defaults(func=_cmd_report)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        return args.func(args)
    except (OSError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
