"""
Project Cmxdump - Inventory Report

Command-line entry point: fetches SSIDs and/or access points of a
Meraki network and prints them as JSON lines.
"""

import json
import logging
import sys
from typing import List, Optional

from core.models import MerakiConfig, FetchResult
from core.utils import setup_logging, load_meraki_config, ConfigurationError
from dashboard.api_client import DashboardClient

logger = logging.getLogger(__name__)


def _emit(kind: str, result: FetchResult, out) -> bool:
    """Print each record of a result; False if the fetch failed."""
    if not result.ok:
        logger.error(f"Fetching {kind} failed: {result.status.value} ({result.reason})")
        return False
    for item in result.items:
        out.write(json.dumps({"kind": kind, **item.to_dict()}) + "\n")
    return True


def run(config: MerakiConfig, resource: str, out=None) -> int:
    """
    Fetch the requested resources and print them.

    Args:
        config: Connection settings
        resource: "essids", "aps" or "all"
        out: Output stream (stdout if None)

    Returns:
        Process exit code
    """
    out = out or sys.stdout

    if not config.network_id:
        logger.error("No network id given (meraki.network_id or --network-id)")
        return 1

    ok = True
    with DashboardClient.from_config(config) as client:
        if resource in ("essids", "all"):
            ok &= _emit("essid", client.list_essids(config.network_id), out)
        if resource in ("aps", "all"):
            ok &= _emit("access_point", client.list_access_points(config.network_id), out)

    return 0 if ok else 1


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    import argparse

    parser = argparse.ArgumentParser(description="Meraki network inventory report")
    parser.add_argument("resource", choices=["essids", "aps", "all"], help="What to fetch")
    parser.add_argument("--config", default="config/config.yaml", help="Config file path")
    parser.add_argument("--network-id", help="Override meraki.network_id")
    parser.add_argument("--api-key", help="Override meraki.api_key")
    parser.add_argument("--log-level", default="INFO", help="Logging level")
    parser.add_argument("--log-dir", help="Also write logs to this directory")

    args = parser.parse_args(argv)

    try:
        setup_logging(args.log_dir, args.log_level)
        config = load_meraki_config(
            args.config,
            overrides={"network_id": args.network_id, "api_key": args.api_key},
        )
    except (FileNotFoundError, ConfigurationError) as e:
        logger.error(f"Configuration error: {e}")
        return 1

    return run(config, args.resource)


if __name__ == "__main__":
    sys.exit(main())
