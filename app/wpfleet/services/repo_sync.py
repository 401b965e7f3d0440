"""Mirror owned GitLab projects and their latest commit into Notion."""
import logging
from typing import Dict, List

import httpx

from ..clients import notion as props
from ..clients.gitlab import GitLabClient
from ..clients.notion import NotionClient
from ..models.repo import RepoSummary
from .notion_sync import CREATED, UPDATED, ensure_schema, upsert_page

log = logging.getLogger("wpfleet.repo_sync")

TITLE_PROPERTY = "Name"

REPO_SCHEMA = {
    "Name": {"title": {}},
    "URL": {"url": {}},
    "Last Commit": {"date": {}},
    "Developer": {"rich_text": {}},
    "Comment": {"rich_text": {}},
}


def collect_repos(gitlab: GitLabClient) -> List[RepoSummary]:
    try:
        projects = gitlab.owned_projects()
    except httpx.HTTPError as exc:
        log.critical("Error fetching repositories from GitLab: %s", exc)
        raise SystemExit(1)

    log.info("Found %s owned repositories", len(projects))
    repos: List[RepoSummary] = []
    for project in projects:
        commit = gitlab.last_commit(project["id"])
        repos.append(RepoSummary.from_gitlab(project, commit))
    return repos


def repo_properties(repo: RepoSummary) -> dict:
    return {
        "Name": props.title(repo.name),
        "URL": props.url(repo.url),
        "Last Commit": props.date(repo.last_commit),
        "Developer": props.rich_text(repo.last_committer),
        "Comment": props.rich_text(repo.last_commit_message),
    }


def sync_repos(notion: NotionClient, repos: List[RepoSummary]) -> Dict[str, int]:
    counts = {CREATED: 0, UPDATED: 0, "failed": 0}
    for repo in repos:
        result = upsert_page(notion, TITLE_PROPERTY, repo.name, repo_properties(repo))
        counts[result or "failed"] += 1
    return counts


def run_repo_sync(gitlab: GitLabClient, notion: NotionClient) -> Dict[str, int]:
    log.info("Ensuring necessary properties exist in Notion database...")
    ensure_schema(notion, REPO_SCHEMA)

    log.info("Fetching repositories from GitLab...")
    repos = collect_repos(gitlab)

    log.info("Syncing repositories to Notion database...")
    return sync_repos(notion, repos)
