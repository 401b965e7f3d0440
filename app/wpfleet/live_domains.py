"""List the domains hosted on the live server with their MainWP status."""
import argparse
import logging

import requests
from rich.console import Console

from .config import mainwp_settings, request_timeout, require, virtualmin_settings
from .clients import virtualmin
from .clients.mainwp import MainWPClient
from .log import configure_logging
from .services.report import live_domain_report

log = logging.getLogger("wpfleet.live_domains")


def _parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Report MainWP security, health and pending updates for each live domain.",
    )
    parser.add_argument(
        "--list-only",
        action="store_true",
        help="Only print the domain names found on the server.",
    )
    return parser.parse_args(argv)


def main(argv=None, console: Console | None = None) -> int:
    configure_logging()
    args = _parse_args(argv)
    console = console or Console(highlight=False)

    panel_cfg = require(virtualmin_settings(), "server", "username", "password")

    console.print("Fetching domains from Virtualmin...")
    try:
        payload = virtualmin.fetch_domains(panel_cfg)
    except (requests.RequestException, ValueError) as exc:
        log.critical("Error fetching domains: %s", exc)
        return 1
    domains = virtualmin.parse_domains(payload)
    console.print(f"\n{len(domains)} domains found on server.")

    if args.list_only:
        for name in domains:
            console.print(name)
        return 0

    mainwp_cfg = require(mainwp_settings(), "base_url", "consumer_key", "consumer_secret")
    mainwp = MainWPClient.from_settings(mainwp_cfg, timeout=request_timeout())

    console.print("\nFetching site details from MainWP...")
    for line in live_domain_report(mainwp, domains):
        console.print(line)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
