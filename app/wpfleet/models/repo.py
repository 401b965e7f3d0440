from dataclasses import dataclass
from typing import Optional


@dataclass
class RepoSummary:
    name: str
    url: str
    last_commit: Optional[str] = None
    last_committer: str = "Unknown"
    last_commit_message: str = "No message"

    @staticmethod
    def from_gitlab(project: dict, commit: Optional[dict]) -> "RepoSummary":
        commit = commit or {}
        return RepoSummary(
            name=project.get("name") or "",
            url=project.get("web_url") or "",
            last_commit=commit.get("created_at") or None,
            last_committer=commit.get("committer_name") or "Unknown",
            last_commit_message=commit.get("message") or "No message",
        )
