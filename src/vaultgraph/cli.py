"""Command-line entry point: link validation, related notes, base queries."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from vaultgraph.bases.parser import load_base_file
from vaultgraph.bases.table import view_table
from vaultgraph.config import CONFIG_FILENAME, load_config
from vaultgraph.errors import VaultGraphError
from vaultgraph.index import VaultIndex
from vaultgraph.validate import find_broken_links, format_report


def _build_index(args: argparse.Namespace) -> VaultIndex:
    config_path = args.config or args.vault / CONFIG_FILENAME
    config = load_config(config_path)
    logging.basicConfig(level=config.log_level, format="%(levelname)s %(name)s: %(message)s")
    index = VaultIndex(args.vault, config)
    index.build()
    return index


def _cmd_links(args: argparse.Namespace) -> int:
    index = _build_index(args)
    broken = find_broken_links(index)
    print(format_report(broken, len(index.notes)))
    return 1 if broken else 0


def _cmd_related(args: argparse.Namespace) -> int:
    index = _build_index(args)
    if args.slug not in index.notes:
        print(f"Error: no note with slug {args.slug!r}", file=sys.stderr)
        return 1
    for item in index.related(args.slug, args.limit):
        print(f"{item.score:8.2f}  {item.slug}  ({', '.join(item.reasons)})")
    return 0


def _cmd_query(args: argparse.Namespace) -> int:
    index = _build_index(args)
    config = load_base_file(args.base_file)
    view = config.view(args.view)
    table = view_table(config, view, index.notes.values(), links=index.graph.outgoing)
    print(f"{view.name} ({view.type}): {table.height} note(s)")
    print(table)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vaultgraph",
        description="Link graph, related notes and Bases views for a markdown vault.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s links vault/
  %(prog)s related vault/ guides/getting-started --limit 5
  %(prog)s query vault/ vault/reading.base --view Reading
        """,
    )
    parser.add_argument("--config", type=Path, help=f"Config file (default: VAULT/{CONFIG_FILENAME})")
    sub = parser.add_subparsers(dest="command", required=True)

    links = sub.add_parser("links", help="Report wikilinks that point to missing notes")
    links.add_argument("vault", type=Path, help="Vault directory")
    links.set_defaults(func=_cmd_links)

    related = sub.add_parser("related", help="List notes related to a note")
    related.add_argument("vault", type=Path, help="Vault directory")
    related.add_argument("slug", help="Slug of the note")
    related.add_argument("--limit", "-n", type=int, default=None, help="Maximum number of results")
    related.set_defaults(func=_cmd_related)

    query = sub.add_parser("query", help="Run a view of a .base file")
    query.add_argument("vault", type=Path, help="Vault directory")
    query.add_argument("base_file", type=Path, help="Path to the .base file")
    query.add_argument("--view", help="View name (default: first view)")
    query.set_defaults(func=_cmd_query)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    if not args.vault.is_dir():
        print(f"Error: vault directory not found: {args.vault}", file=sys.stderr)
        return 1
    try:
        return args.func(args)
    except (VaultGraphError, KeyError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
