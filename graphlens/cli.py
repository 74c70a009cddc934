#!/usr/bin/env python3
"""
graphlens CLI - layout and degree-of-interest for node-link datasets

Usage:
    graphlens stats <dataset>                 Show graph statistics
    graphlens layout <dataset> -o pos.json    Run the force layout, write positions
    graphlens score <dataset> --focus ID      Score nodes by degree of interest
    graphlens render <dataset> -o view.svg    Render a snapshot (SVG or PNG)
    graphlens export <dataset> -o g.graphml   Export positions and scores
"""

import argparse
import json
import logging
import sys
from pathlib import Path

logger = logging.getLogger(__name__)


def _add_common(p: argparse.ArgumentParser) -> None:
    p.add_argument("dataset", help="Path to the dataset JSON (vertices/edges)")
    p.add_argument("--config", "-c", type=Path, help="YAML settings file")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")


def _add_filters(p: argparse.ArgumentParser) -> None:
    p.add_argument("--iterations", "-n", type=int, help="Layout iterations (default from config)")
    p.add_argument("--search", "-q", default="", help="Search query")
    p.add_argument("--archetype", "-a", type=int, action="append", help="Selected archetype (repeatable)")
    p.add_argument("--focus", "-f", help="Focus node id")
    p.add_argument("--seed", type=int, help="Random seed for initial positions")


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="graphlens: force-directed layout and degree-of-interest scoring",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    graphlens stats data/graph.json
    graphlens layout data/graph.json -n 100 -o positions.json
    graphlens score data/graph.json --search bach --focus 42
    graphlens render data/graph.json --focus 42 -o view.png
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    stats_parser = subparsers.add_parser("stats", help="Show graph statistics")
    _add_common(stats_parser)

    layout_parser = subparsers.add_parser("layout", help="Run the force layout")
    _add_common(layout_parser)
    _add_filters(layout_parser)
    layout_parser.add_argument("--output", "-o", help="Output JSON path (stdout if omitted)")

    score_parser = subparsers.add_parser("score", help="Score nodes by degree of interest")
    _add_common(score_parser)
    _add_filters(score_parser)
    score_parser.add_argument("--top", "-t", type=int, default=20, help="How many nodes to list")
    score_parser.add_argument("--json", "-j", action="store_true", help="Output as JSON")

    render_parser = subparsers.add_parser("render", help="Render a snapshot image")
    _add_common(render_parser)
    _add_filters(render_parser)
    render_parser.add_argument("--output", "-o", default="graphlens.svg", help="Output .svg or .png path")
    render_parser.add_argument("--no-labels", action="store_true", help="Hide node initials")

    export_parser = subparsers.add_parser("export", help="Export positions and scores")
    _add_common(export_parser)
    _add_filters(export_parser)
    export_parser.add_argument("--output", "-o", required=True, help="Output .graphml or .json path")

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    # Import here to avoid slow startup for --help
    from .config import load_config
    from .core.dataset import DatasetError, load_dataset
    from .session import Explorer

    settings = load_config(args.config)
    if getattr(args, "seed", None) is not None:
        settings.layout.seed = args.seed

    try:
        dataset = load_dataset(args.dataset, settings.dataset)
    except DatasetError as e:
        logger.error("%s", e)
        return 1

    explorer = Explorer.from_dataset(dataset, settings)

    if args.command == "stats":
        return cmd_stats(explorer, args)

    explorer.run(args.iterations)
    if args.archetype or args.search:
        explorer.set_filters(search_query=args.search, selected_archetypes=args.archetype)
    if args.focus:
        explorer.hover(args.focus)

    if args.command == "layout":
        return cmd_layout(explorer, args)
    elif args.command == "score":
        return cmd_score(explorer, args)
    elif args.command == "render":
        return cmd_render(explorer, args)
    elif args.command == "export":
        return cmd_export(explorer, args)

    return 0


def cmd_stats(explorer, args):
    """Handle stats command."""
    stats = explorer.index.stats()

    print("# graphlens Statistics")
    print("")
    print(f"- **Nodes:** {stats['nodes']}")
    print(f"- **Links:** {stats['links']}")
    print(f"- **Dropped Links:** {stats['dropped_links']}")
    print(f"- **Roots:** {stats['roots']}")
    print(f"- **Isolated Nodes:** {stats['isolated']}")
    print(f"- **Max Degree:** {stats['max_degree']}")

    return 0


def cmd_layout(explorer, args):
    """Handle layout command."""
    payload = json.dumps(explorer.snapshot(), indent=2)
    if args.output:
        Path(args.output).write_text(payload, encoding="utf-8")
        print(f"Positions saved to: {args.output}")
    else:
        print(payload)
    return 0


def cmd_score(explorer, args):
    """Handle score command."""
    ranked = sorted(explorer.nodes, key=lambda n: (-n.doi, n.id))[: max(0, args.top)]

    if args.json:
        print(json.dumps([{"id": n.id, "name": n.name, "doi": n.doi, "degree": n.degree} for n in ranked], indent=2))
        return 0

    print(f"# Degree of Interest (top {len(ranked)})")
    print("")
    for node in ranked:
        print(f"- `{node.id}` {node.name} (doi {node.doi:.3f}, degree {node.degree})")

    return 0


def cmd_render(explorer, args):
    """Handle render command."""
    output = Path(args.output)
    svg = explorer.render_svg(show_labels=not args.no_labels)

    if output.suffix.lower() == ".png":
        from .views.svg import save_png

        save_png(svg, output)
    else:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(svg, encoding="utf-8")

    print(f"Snapshot saved to: {output}")
    return 0


def cmd_export(explorer, args):
    """Handle export command."""
    import networkx as nx

    output = Path(args.output)
    G = explorer.index.to_networkx()
    if output.suffix.lower() == ".graphml":
        nx.write_graphml(G, output)
    else:
        output.write_text(json.dumps(nx.node_link_data(G), indent=2), encoding="utf-8")

    print(f"Graph exported to: {output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
