"""Command-line interface for the ownership client."""
from __future__ import annotations

import argparse
import asyncio
import json
import sys
from dataclasses import asdict, is_dataclass
from typing import Any

from .client import create_client
from .config import load_config
from .logging_setup import configure_logging
from .models import Chain


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse CLI parser."""
    parser = argparse.ArgumentParser(
        prog="chain-ownership",
        description="Point-in-time ownership checks against L1/L2 subgraphs",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to config.yaml (default: config.yaml in project root)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )

    sub = parser.add_subparsers(dest="command")

    names_parser = sub.add_parser("names", help="Check name ownership at a timestamp")
    names_parser.add_argument("owner")
    names_parser.add_argument("names", nargs="+")
    names_parser.add_argument("--timestamp", type=int, required=True, help="Milliseconds")

    items_parser = sub.add_parser("items", help="Check item ownership at a timestamp")
    items_parser.add_argument("owner")
    items_parser.add_argument("urns", nargs="+")
    items_parser.add_argument("--timestamp", type=int, required=True, help="Milliseconds")

    owners_parser = sub.add_parser("owners", help="Current owners of names")
    owners_parser.add_argument("names", nargs="+")

    sub.add_parser("collections", help="List collections on all chains")
    sub.add_parser("third-parties", help="List approved third-party integrations")

    blocks_parser = sub.add_parser("blocks", help="Block candidates for a timestamp")
    blocks_parser.add_argument("chain", choices=[c.value for c in Chain])
    blocks_parser.add_argument("--timestamp", type=int, required=True, help="Milliseconds")

    return parser


def _to_jsonable(value: Any) -> Any:
    if is_dataclass(value):
        return _to_jsonable(asdict(value))
    if isinstance(value, Chain):
        return value.value
    if isinstance(value, dict):
        return {k: _to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_jsonable(v) for v in value]
    return value


async def _run(args: argparse.Namespace) -> Any:
    """Execute the selected command and return its result."""
    configure_logging(args.log_level)
    config = load_config(args.config)
    client = create_client(config)

    if args.command == "names":
        return await client.owns_names_at_timestamp(args.owner, args.names, args.timestamp)
    if args.command == "items":
        return await client.owns_items_at_timestamp(args.owner, args.urns, args.timestamp)
    if args.command == "owners":
        return await client.find_owners_by_name(args.names)
    if args.command == "collections":
        return await client.get_all_collections()
    if args.command == "third-parties":
        return await client.get_third_party_integrations()
    if args.command == "blocks":
        primary, fallback = await client.find_blocks_for_timestamp(
            Chain(args.chain), args.timestamp
        )
        return {"primary": primary, "fallback": fallback}

    build_parser().print_help()
    sys.exit(1)


def main() -> None:
    """Entry point."""
    parser = build_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    result = asyncio.run(_run(args))
    print(json.dumps(_to_jsonable(result), indent=2))
