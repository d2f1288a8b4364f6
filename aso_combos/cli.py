#!/usr/bin/env python3
"""App Store title/subtitle keyword combo auditor.

Generates the keyword combos an app's title and subtitle can rank for,
scores their ASO impact (0-100), flags low-value noise and reports prefix /
suffix families that waste character budget.

Usage:
    aso-combos "Learn Spanish Fast" "Speak the language with daily lessons"
    aso-combos "Learn Spanish Fast" "Speak Spanish" --detailed
    aso-combos -f apps.txt -r ruleset.json
    aso-combos "Learn Spanish Fast" --json
"""

import argparse
import json
import logging
import sys
from dataclasses import asdict

from tabulate import tabulate

from .analysis import analyze_metadata
from .dedupe import dedupe
from .generator import Combo
from .ruleset import RuleSet, load_ruleset

DEFAULT_TOP = 25
APP_SEPARATOR = "|"


# ── Display ────────────────────────────────────────────────────────────────


def impact_label(score: int) -> str:
    if score <= 20:
        return "Very Low"
    elif score <= 40:
        return "Low"
    elif score <= 60:
        return "Moderate"
    elif score <= 80:
        return "High"
    else:
        return "Very High"


def format_breakdown(breakdown: dict) -> str:
    """Format the non-zero score contributions as a compact string."""
    parts = []
    for rule, value in breakdown.items():
        if value:
            parts.append(f"{rule.replace('_', ' ')} {value:+d}")
    return " / ".join(parts) if parts else "base only"


def print_summary_table(result: dict, top: int = DEFAULT_TOP):
    """Print the top valuable combos sorted by impact score."""
    meta = {c.text: c for c in result["combos"]}
    stats = result["stats"]

    print()
    print(f"  Combo Audit: \"{result['title']}\"", end="")
    print(f" / \"{result['subtitle']}\"" if result["subtitle"] else "")
    print("  " + "=" * 80)
    print()

    rows = []
    for s in result["scored_combos"][:top]:
        combo = meta.get(s["combo"])
        rows.append([
            s["combo"],
            s["score"],
            impact_label(s["score"]),
            s["length_class"],
            combo.type if combo else "",
            combo.source if combo else "",
            f"{combo.relevance_score:.2f}" if combo else "",
        ])

    headers = ["Combo", "Impact", "Level", "Length", "Type", "Source", "Relevance"]
    print(tabulate(rows, headers=headers, tablefmt="simple", numalign="right", stralign="left"))

    print()
    print(f"  {stats['total_combos']} valuable combos "
          f"({stats['title_combo_count']} title, {stats['subtitle_new_combo_count']} added by subtitle), "
          f"{stats['low_value_count']} low-value")
    print(f"  Avg impact: {stats['avg_impact']}/100 | Redundancy: {stats['redundancy_score']}/100")
    coverage = result["coverage"]["stats"]
    print(f"  Coverage: {coverage['coverage']}% ({coverage['existing']} of {coverage['total_possible']} possible combos present)")
    print()


def print_detailed(result: dict):
    """Print score breakdowns, redundancy groups and low-value combos."""
    print(f"  {'=' * 50}")
    print(f"  SCORE BREAKDOWN")
    print(f"  {'=' * 50}")
    for s in result["scored_combos"]:
        print(f"  \"{s['combo']}\": {s['score']}/100")
        print(f"  |   {format_breakdown(s['breakdown'])}")
    print()

    redundancy = result["redundancy"]
    print(f"  REDUNDANCY: {redundancy['redundancy_score']}/100")
    if redundancy["redundant_groups"]:
        for group in redundancy["redundant_groups"]:
            print(f"  +-- {group['type']} \"{group['pattern']}\": "
                  f"{len(group['combos'])} combos, {group['wasted_tokens']} wasted tokens")
            for combo in group["combos"]:
                print(f"  |   - \"{combo}\"")
    else:
        print(f"  +-- No redundant families")
    print()

    if result["low_value_combos"]:
        print(f"  LOW-VALUE COMBOS:")
        for combo in result["low_value_combos"]:
            print(f"  - \"{combo.text}\"")
        print()

    recommended = result["coverage"]["recommended_to_add"]
    if recommended:
        print(f"  RECOMMENDED TO ADD:")
        for combo in recommended:
            print(f"  - \"{combo['text']}\" ({combo['strategic_value']}/100)")
        print()


def to_json(result: dict) -> dict:
    """Make an analysis result JSON serializable."""
    def convert(value):
        if isinstance(value, Combo):
            return asdict(value)
        if isinstance(value, dict):
            return {k: convert(v) for k, v in value.items()}
        if isinstance(value, list):
            return [convert(v) for v in value]
        return value

    return convert(result)


# ── Input ──────────────────────────────────────────────────────────────────


def parse_app_line(line: str) -> tuple[str, str]:
    """Split a "Title | Subtitle" line; the subtitle part is optional."""
    title, _, subtitle = line.partition(APP_SEPARATOR)
    return title.strip(), subtitle.strip()


def read_apps_file(path: str) -> list[tuple[str, str]]:
    with open(path) as f:
        return [
            parse_app_line(line)
            for line in f
            if line.strip() and not line.startswith("#")
        ]


# ── CLI ────────────────────────────────────────────────────────────────────


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="aso-combos",
        description="App Store title/subtitle keyword combo auditor",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  aso-combos "Learn Spanish Fast" "Speak the language with daily lessons"
  aso-combos "Learn Spanish Fast" "Speak Spanish" --detailed
  aso-combos -f apps.txt -r ruleset.json
  aso-combos "Learn Spanish Fast" --json
        """,
    )
    parser.add_argument("title", nargs="?", help="App title")
    parser.add_argument("subtitle", nargs="?", default="", help="App subtitle")
    parser.add_argument("-f", "--file", help="File with one 'Title | Subtitle' per line")
    parser.add_argument("-r", "--ruleset", help="JSON rule set (keywords, stopwords, overrides)")
    parser.add_argument("--min-length", type=int, default=2, help="Min words per combo (default: 2)")
    parser.add_argument("--max-length", type=int, default=4, help="Max words per combo (default: 4)")
    parser.add_argument("--top", type=int, default=DEFAULT_TOP,
                        help=f"Rows in the summary table (default: {DEFAULT_TOP})")
    parser.add_argument("-d", "--detailed", action="store_true",
                        help="Show score breakdown, redundancy and low-value combos")
    parser.add_argument("--json", action="store_true", help="Output as JSON")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging to stderr")
    return parser


def main(argv: list[str] | None = None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s: %(message)s", stream=sys.stderr)

    # Collect apps
    apps = []
    if args.title:
        apps.append((args.title, args.subtitle))
    if args.file:
        try:
            apps.extend(read_apps_file(args.file))
        except FileNotFoundError:
            print(f"  Error: File not found: {args.file}", file=sys.stderr)
            sys.exit(1)

    # Deduplicate by title while preserving order; the first subtitle wins
    first_app = {}
    for title, subtitle in apps:
        first_app.setdefault(title, (title, subtitle))
    apps = [first_app[title] for title in dedupe([title for title, _ in apps])]

    if not apps:
        parser.error("Provide a title (and optional subtitle) or an -f/--file")
    if args.min_length < 1 or args.max_length < args.min_length:
        parser.error("--max-length must be >= --min-length >= 1")

    ruleset = RuleSet()
    if args.ruleset:
        try:
            ruleset = load_ruleset(args.ruleset)
        except FileNotFoundError:
            print(f"  Error: File not found: {args.ruleset}", file=sys.stderr)
            sys.exit(1)
        except ValueError as e:
            # json.JSONDecodeError is a ValueError
            print(f"  Error: Invalid rule set {args.ruleset}: {e}", file=sys.stderr)
            sys.exit(1)

    # Send progress to stderr so --json output stays clean on stdout
    log = sys.stderr if args.json else sys.stdout

    print(file=log)
    print(f"  Auditing {len(apps)} app(s)...", file=log)

    results = []
    for i, (title, subtitle) in enumerate(apps, 1):
        print(f"  [{i}/{len(apps)}] {title}...", end="", flush=True, file=log)
        result = analyze_metadata(title, subtitle, ruleset,
                                  min_length=args.min_length, max_length=args.max_length)
        stats = result["stats"]
        print(f" C:{stats['total_combos']} I:{stats['avg_impact']} R:{stats['redundancy_score']} Cov:{stats['coverage']}%", file=log)
        results.append(result)

    if args.json:
        print(json.dumps([to_json(r) for r in results], indent=2))
    else:
        for r in results:
            print_summary_table(r, top=args.top)
            if args.detailed:
                print_detailed(r)


if __name__ == "__main__":
    main()
