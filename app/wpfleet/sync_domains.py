"""Sync every Virtualmin domain, with its MainWP status, into Notion."""
import argparse
import logging

from .config import mainwp_settings, notion_settings, request_timeout, require, virtualmin_settings
from .clients.mainwp import MainWPClient
from .clients.notion import NotionClient
from .log import configure_logging
from .services.domain_sync import run_domain_sync

log = logging.getLogger("wpfleet.sync_domains")


def _parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Mirror live Virtualmin domains and their MainWP status into Notion.",
    )
    parser.add_argument(
        "--database-env",
        default="NOTION_DATABASE_ID",
        help="Environment variable holding the Notion database id.",
    )
    return parser.parse_args(argv)


def main(argv=None) -> int:
    configure_logging()
    args = _parse_args(argv)

    notion_cfg = require(notion_settings(args.database_env), "api_key", "database_id")
    mainwp_cfg = require(mainwp_settings(), "base_url", "consumer_key", "consumer_secret")
    panel_cfg = require(virtualmin_settings(), "server", "username", "password")

    counts = run_domain_sync(
        MainWPClient.from_settings(mainwp_cfg, timeout=request_timeout()),
        NotionClient.from_settings(notion_cfg),
        panel_cfg,
    )
    log.info(
        "Sync completed! created=%s updated=%s failed=%s",
        counts["created"],
        counts["updated"],
        counts["failed"],
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
