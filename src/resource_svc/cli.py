"""Run a one-shot resource query against the configured store.

Usage:
    resource-query
    resource-query --resource-type STORAGE
    resource-query --name slurm-cluster --config config.yaml
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys

from . import _bootstrap as bs
from .catalog.filters import ResourceQuery
from .config import ResolutionPolicy
from .errors import ResourceCatalogError

logger = logging.getLogger(__name__)


async def run_query(query: ResourceQuery, config_path: str | None = None, lenient: bool = False) -> list[dict]:
    """Build the stack from config, run a single query, and render the result."""
    config, resolved_path = bs.load_config(config_path)
    if lenient:
        config.query.resolution_policy = ResolutionPolicy.LENIENT

    store = bs.build_store(config, resolved_path)
    try:
        service = bs.build_service(config, store)
        resources = await service.query(query)
    finally:
        await store.close()
    return [resource.to_dict() for resource in resources]


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Query the resource catalog and print the result as JSON",
    )
    parser.add_argument("--id", help="Match resources with this id")
    parser.add_argument("--name", help="Match resources with this name")
    parser.add_argument(
        "--resource-type",
        help="Match resources of this category (e.g. STORAGE, COMPUTE)",
    )
    parser.add_argument(
        "--config",
        help="Config file (default: $RESOURCE_SVC_CONFIG or config.yaml)",
    )
    parser.add_argument(
        "--lenient",
        action="store_true",
        help="Skip malformed resources instead of failing the query",
    )
    parser.add_argument("--indent", type=int, default=2, help="JSON indent (default: 2)")
    parser.add_argument("--log-level", default="WARNING", help="Log level (default: WARNING)")

    args = parser.parse_args(argv)
    bs.configure_logging(args.log_level)

    query = ResourceQuery(id=args.id, name=args.name, resource_type=args.resource_type)
    try:
        result = asyncio.run(run_query(query, config_path=args.config, lenient=args.lenient))
    except ResourceCatalogError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(json.dumps(result, indent=args.indent))
    return 0


if __name__ == "__main__":
    sys.exit(main())
