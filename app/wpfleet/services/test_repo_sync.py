import httpx
import pytest

from wpfleet.models.repo import RepoSummary
from wpfleet.services.repo_sync import collect_repos, repo_properties, run_repo_sync


class StubGitLab:
    def __init__(self, projects, commits, error=None):
        self.projects = projects
        self.commits = commits
        self.error = error

    def owned_projects(self):
        if self.error:
            raise self.error
        return self.projects

    def last_commit(self, project_id):
        return self.commits.get(project_id)


class StubNotion:
    def __init__(self):
        self.created = []

    def retrieve_database(self):
        return {"properties": {"Name": {}, "URL": {}, "Last Commit": {}, "Developer": {}, "Comment": {}}}

    def update_database_schema(self, properties):
        raise AssertionError("schema is already complete")

    def query_by_title(self, property_name, value):
        return []

    def create_page(self, properties):
        self.created.append(properties)
        return {"id": "new"}


PROJECTS = [
    {"id": 1, "name": "theme", "web_url": "https://gitlab.com/acme/theme"},
    {"id": 2, "name": "empty", "web_url": "https://gitlab.com/acme/empty"},
]
COMMITS = {
    1: {"created_at": "2024-04-02T09:00:00.000+01:00", "committer_name": "Sam", "message": "Bump"},
}


def test_collect_repos_pairs_projects_with_last_commit():
    repos = collect_repos(StubGitLab(PROJECTS, COMMITS))

    assert repos[0].last_committer == "Sam"
    assert repos[1].last_commit is None


def test_collect_repos_exits_on_gitlab_failure():
    request = httpx.Request("GET", "https://gitlab.com/api/v4/projects")
    error = httpx.HTTPStatusError("401", request=request, response=httpx.Response(401, request=request))
    with pytest.raises(SystemExit):
        collect_repos(StubGitLab([], {}, error=error))


def test_repo_properties_null_date_without_commits():
    props = repo_properties(RepoSummary(name="empty", url="https://gitlab.com/acme/empty"))

    assert props["Last Commit"] == {"date": None}
    assert props["Developer"]["rich_text"][0]["text"]["content"] == "Unknown"


def test_run_repo_sync_creates_pages():
    notion = StubNotion()

    counts = run_repo_sync(StubGitLab(PROJECTS, COMMITS), notion)

    assert counts == {"created": 2, "updated": 0, "failed": 0}
    assert notion.created[0]["Comment"]["rich_text"][0]["text"]["content"] == "Bump"
