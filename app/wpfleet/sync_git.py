"""Sync owned GitLab repositories into the Notion repository tracker."""
import argparse
import logging

from .config import gitlab_settings, notion_settings, require
from .clients.gitlab import GitLabClient
from .clients.notion import NotionClient
from .log import configure_logging
from .services.repo_sync import run_repo_sync

log = logging.getLogger("wpfleet.sync_git")


def _parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Mirror GitLab repositories and their last commit into Notion.",
    )
    parser.add_argument(
        "--database-env",
        default="NOTION_DATABASE_GIT_ID",
        help="Environment variable holding the Notion database id.",
    )
    return parser.parse_args(argv)


def main(argv=None) -> int:
    configure_logging()
    args = _parse_args(argv)

    notion_cfg = require(notion_settings(args.database_env), "api_key", "database_id")
    gitlab_cfg = require(gitlab_settings(), "token")

    counts = run_repo_sync(
        GitLabClient.from_settings(gitlab_cfg),
        NotionClient.from_settings(notion_cfg),
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
