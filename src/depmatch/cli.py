"""Command line interface for running dependency patterns.

Usage:
    depmatch -p "{arg1} <nsubj< {rel} >dobj> {arg2}" --text "Obama gave a speech."
    depmatch --patterns-file patterns.yaml --conllu corpus.conllu --workers 4
    depmatch -p "{rel} >nsubj> {arg1}" --conllu corpus.conllu --reflect
"""

import argparse
import logging
import sys
from typing import List, Optional

import yaml

from .config import DEFAULT_WORKERS, SPACY_MODEL
from .exceptions import PatternSyntaxError
from .preprocessing import FormatConverter, TextProcessor
from .rule_matcher import RuleMatcher


def non_negative_int(value: str) -> int:
    """argparse type for counts that may be zero but not negative."""
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be non-negative, got {number}")
    return number


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Search dependency graphs for structural patterns."
    )
    parser.add_argument(
        "-p", "--pattern",
        action="append",
        default=[],
        help="Pattern text (repeatable)",
    )
    parser.add_argument(
        "--patterns-file",
        type=str,
        default=None,
        help="YAML file with a 'patterns' list of {id, pattern, description}",
    )

    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--text", type=str, help="Raw text, parsed with spaCy")
    source.add_argument("--conllu", type=str, help="CoNLL-U file with parsed sentences")

    parser.add_argument("--model", type=str, default=SPACY_MODEL, help="spaCy model for --text")
    parser.add_argument(
        "--max-matches",
        type=non_negative_int,
        default=None,
        help="Cap on matches per pattern and sentence",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=DEFAULT_WORKERS,
        help="Threads used to match sentences",
    )
    parser.add_argument(
        "--reflect",
        action="store_true",
        help="Also run the reflection of every pattern",
    )
    parser.add_argument(
        "--export-conllu",
        type=str,
        default=None,
        help="Write the parsed sentences to this CoNLL-U file",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser.parse_args(argv)


def build_matcher(args: argparse.Namespace) -> RuleMatcher:
    """Register command line and YAML patterns, plus reflections if requested."""
    matcher = RuleMatcher(max_matches=args.max_matches, model_name=args.model)

    for i, text in enumerate(args.pattern):
        matcher.add_pattern(f"pattern_{i + 1}", text)
    if args.patterns_file:
        matcher.load_patterns(args.patterns_file)

    if args.reflect:
        for pattern_id in list(matcher.pattern_ids):
            matcher.add_pattern(
                f"{pattern_id}_reflection",
                matcher.get_pattern(pattern_id).reflection(),
            )
    return matcher


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the depmatch command."""
    args = parse_arguments(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        matcher = build_matcher(args)
    except PatternSyntaxError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    except (FileNotFoundError, yaml.YAMLError) as e:
        print(f"Error: cannot read patterns file: {e}", file=sys.stderr)
        return 1

    if len(matcher) == 0:
        print("Error: no patterns given (use --pattern or --patterns-file)", file=sys.stderr)
        return 2

    print("=" * 80)
    print("Patterns:")
    for pattern_id in matcher.pattern_ids:
        print(f"  {pattern_id:<25} {matcher.get_pattern(pattern_id)}")
    print("=" * 80)

    converter = FormatConverter()
    if args.conllu:
        try:
            graphs = converter.load_conllu(args.conllu)
        except FileNotFoundError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
    else:
        processor = TextProcessor(model_name=args.model)
        graphs = processor.process(args.text)

    if args.export_conllu:
        converter.to_conllu(graphs, args.export_conllu)

    results = matcher.match_many(graphs, n_workers=args.workers, show_progress=len(graphs) > 1)

    total = 0
    for i, (graph, matches) in enumerate(zip(graphs, results)):
        sentence = " ".join(t.string for t in sorted(graph.vertices, key=lambda t: t.index))
        print(f"\nSentence {i + 1}: {sentence}")
        if not matches:
            print("  (no matches)")
        for rule_match in matches:
            print("-" * 80)
            print(matcher.explain_match(rule_match))
        total += len(matches)

    print(f"\n{'=' * 80}")
    print(f"{total} match(es) in {len(graphs)} sentence(s)")
    print("=" * 80)
    return 0


if __name__ == "__main__":
    sys.exit(main())
