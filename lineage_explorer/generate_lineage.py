#!/usr/bin/env python3
"""
Lineage Explorer Generator

Computes the upstream/downstream lineage of one component and writes it as a
self-contained HTML diagram, an Excel workbook, and/or a JSON graph.

Usage:
    # Lineage of one component, both directions, 2 levels
    python generate_lineage.py --data sample_data/lineage_sample.json \\
        --root view_customer_metrics --output ./output

    # Upstream only, 3 levels, all formats
    python generate_lineage.py --data platform.xlsx --root pbi_revenue_card \\
        --direction upstream --depth 3 --format html --format xlsx --format json

    # No root: list components matching a search
    python generate_lineage.py --data platform.xlsx --search billing --failed-only
"""

import argparse
import logging
import re
import sys
from pathlib import Path

from lineage_explorer.config import DEFAULT_DEPTH, DEFAULT_DIRECTION, DEFAULT_LAYOUT, DEPTH_CHOICES, LayoutConfig
from lineage_explorer.contracts import ValidationError
from lineage_explorer.loader import DatasetLoader
from lineage_explorer.models import ComponentType, Direction, Environment, LineageQuery
from lineage_explorer.output import ExcelWriter, HtmlWriter, write_json
from lineage_explorer.processor import (
    GraphIndex,
    SearchFilters,
    build_lineage_view,
    search_components,
    split_by_failure,
    suggest_depth,
)

VERSION = "1.0.0"

logger = logging.getLogger("lineage_explorer")


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Generate an upstream/downstream lineage diagram for a component",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )

    # Input
    parser.add_argument("--data", required=True, type=Path,
                        help="Dataset: JSON file, Excel workbook, or directory with components.csv/edges.csv")
    parser.add_argument("--components-sheet", help="Pattern to match the components sheet name")
    parser.add_argument("--edges-sheet", help="Pattern to match the edges sheet name")

    # Query
    parser.add_argument("--root", help="Component id to center the view on")
    parser.add_argument("--direction", default=DEFAULT_DIRECTION.value,
                        choices=[d.value for d in Direction],
                        help=f"Traversal direction (default: {DEFAULT_DIRECTION.value})")
    parser.add_argument("--depth", type=int, default=None,
                        help=f"Traversal depth, usually one of {list(DEPTH_CHOICES)}; values below 1 are treated as 1 "
                             f"(default: {DEFAULT_DEPTH}, 3 for Power BI visuals)")

    # Search (used when no root is given)
    parser.add_argument("--search", default="", help="Search term for listing components")
    parser.add_argument("--type", action="append", dest="types", default=[],
                        choices=[t.value for t in ComponentType], help="Filter by component type")
    parser.add_argument("--environment", action="append", dest="environments", default=[],
                        choices=[e.value for e in Environment], help="Filter by environment")
    parser.add_argument("--failed-only", action="store_true", help="Only components with failures")

    # Output
    parser.add_argument("--output", type=Path, default=Path("output"),
                        help="Output directory (default: output/)")
    parser.add_argument("--format", action="append", dest="formats",
                        choices=["html", "xlsx", "json"],
                        help="Output format, repeatable (default: html)")

    # Layout
    parser.add_argument("--horizontal-spacing", type=float, default=DEFAULT_LAYOUT.horizontal_spacing,
                        help=f"Distance between levels (default: {DEFAULT_LAYOUT.horizontal_spacing:g})")
    parser.add_argument("--vertical-spacing", type=float, default=DEFAULT_LAYOUT.vertical_spacing,
                        help=f"Distance between nodes in a level (default: {DEFAULT_LAYOUT.vertical_spacing:g})")
    parser.add_argument("--min-gap", type=float, default=DEFAULT_LAYOUT.min_vertical_gap,
                        help=f"Minimum vertical gap (default: {DEFAULT_LAYOUT.min_vertical_gap:g})")

    # Logging
    log_group = parser.add_mutually_exclusive_group()
    log_group.add_argument("--verbose", "-v", action="store_true", help="Verbose output")
    log_group.add_argument("--debug", action="store_true", help="Debug output")

    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")

    return parser.parse_args(argv)


def setup_logging(level: str, output_dir: Path) -> None:
    """Configure logging."""
    log_levels = {
        'normal': logging.WARNING,
        'verbose': logging.INFO,
        'debug': logging.DEBUG,
    }

    # Ensure output dir exists
    output_dir.mkdir(parents=True, exist_ok=True)

    # File handler
    file_handler = logging.FileHandler(
        output_dir / 'lineage_explorer.log',
        mode='w',
        encoding='utf-8'
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(
        '%(asctime)s [%(levelname)s] %(name)s:%(lineno)d - %(message)s'
    ))

    # Console handler
    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_levels.get(level, logging.WARNING))
    console_handler.setFormatter(logging.Formatter('[%(levelname)s] %(message)s'))

    # Configure root logger
    logging.basicConfig(
        level=logging.DEBUG,
        handlers=[file_handler, console_handler],
        force=True,
    )


def list_components(index: GraphIndex, args) -> int:
    """Print components matching the search term and filters."""
    filters = SearchFilters(
        component_types=[ComponentType(t) for t in args.types],
        environments=[Environment(e) for e in args.environments],
        show_failed_only=args.failed_only,
    )
    matches = search_components(index.components, args.search, filters)

    if not matches:
        print("No components found")
        print("Try adjusting your search terms or filters")
        return 0

    failed, healthy = split_by_failure(matches)
    print(f"{len(matches)} component(s)")

    for title, group in (("Failed", failed), ("Healthy", healthy)):
        if not group:
            continue
        print(f"\n{title} ({len(group)})")
        for component in group:
            location = f"  [{component.database}]" if component.database else ""
            print(f"  {component.id:<32} {component.type.value:<18} {component.name}{location}")

    return 0


def main(argv=None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    log_level = 'normal'
    if args.debug:
        log_level = 'debug'
    elif args.verbose:
        log_level = 'verbose'

    setup_logging(log_level, args.output)
    logger.info(f"Lineage Explorer v{VERSION}")

    # Load dataset
    loader = DatasetLoader()
    try:
        components, edges = loader.load(args.data, args.components_sheet, args.edges_sheet)
    except (ValidationError, OSError, ValueError) as e:
        logger.error(f"Cannot load dataset {args.data}: {e}")
        print(f"Error loading dataset: {e}")
        return 1

    index = GraphIndex(components, edges)
    print(f"Loaded {len(index)} components and {len(index.edges)} edges from {args.data}")

    if not args.root:
        return list_components(index, args)

    try:
        config = LayoutConfig(
            horizontal_spacing=args.horizontal_spacing,
            vertical_spacing=args.vertical_spacing,
            min_vertical_gap=args.min_gap,
        )
    except ValueError as e:
        print(f"Invalid layout settings: {e}")
        return 1

    depth = args.depth
    if depth is None:
        root = index.component_by_id(args.root)
        depth = suggest_depth(root, DEFAULT_DEPTH) if root else DEFAULT_DEPTH

    query = LineageQuery(root_id=args.root, direction=args.direction, depth=depth)
    view = build_lineage_view(index, query, config)

    for warning in view.result.warnings:
        print(f"  Warning: {warning}")

    if view.is_empty:
        print(f"No data to display: component {args.root!r} not found")
        return 1

    summary = view.summary()
    print(f"\nLineage of {args.root} ({summary['direction']}, {summary['depth']} "
          f"level{'s' if summary['depth'] > 1 else ''})")
    print(f"  Components: {summary['components']} "
          f"({summary['upstream']} upstream, {summary['downstream']} downstream)")
    print(f"  Edges: {summary['edges']}")

    # Write output
    print(f"\nWriting output to: {args.output}")
    outputs = []
    for fmt in dict.fromkeys(args.formats or ["html"]):
        if fmt == "html":
            outputs.append(HtmlWriter(args.output).write(view, index))
        elif fmt == "xlsx":
            outputs.append(ExcelWriter(args.output).write(view, index))
        elif fmt == "json":
            json_name = re.sub(r"[^A-Za-z0-9_.-]+", "_", args.root)
            outputs.append(write_json(view, index, args.output / f"{json_name}_lineage.json"))

    for path in outputs:
        print(f"    - {path.name}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
