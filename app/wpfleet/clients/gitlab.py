import logging
from typing import List, Optional

import httpx

log = logging.getLogger("wpfleet.gitlab")

DEFAULT_BASE_URL = "https://gitlab.com"
DEFAULT_PER_PAGE = 100


class GitLabClient:
    def __init__(
        self,
        token: str,
        base_url: str = DEFAULT_BASE_URL,
        per_page: int = DEFAULT_PER_PAGE,
        client: Optional[httpx.Client] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.per_page = per_page
        self.client = client or httpx.Client(
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": "application/json",
            },
            timeout=30.0,
        )

    @classmethod
    def from_settings(cls, settings: dict, **kwargs) -> "GitLabClient":
        return cls(
            settings["token"],
            base_url=settings.get("base_url") or DEFAULT_BASE_URL,
            per_page=settings.get("per_page") or DEFAULT_PER_PAGE,
            **kwargs,
        )

    def _api(self, path: str) -> str:
        return f"{self.base_url}/api/v4{path}"

    def owned_projects(self) -> List[dict]:
        """All projects owned by the token's user, following X-Total-Pages.

        Raises httpx.HTTPStatusError on any non-2xx page.
        """
        projects: List[dict] = []
        page = 1
        while True:
            r = self.client.get(
                self._api("/projects"),
                params={
                    "owned": "true",
                    "simple": "true",
                    "per_page": self.per_page,
                    "page": page,
                },
            )
            r.raise_for_status()
            batch = r.json()
            projects.extend(batch)
            log.debug("Fetched page %s (%s projects)", page, len(batch))

            total_pages = r.headers.get("x-total-pages")
            page += 1
            if not batch or not total_pages:
                break
            try:
                if page > int(total_pages):
                    break
            except ValueError:
                break
        return projects

    def last_commit(self, project_id) -> Optional[dict]:
        try:
            r = self.client.get(
                self._api(f"/projects/{project_id}/repository/commits"),
                params={"per_page": 1},
            )
            r.raise_for_status()
            commits = r.json()
        except (httpx.HTTPError, ValueError) as exc:
            log.error("Error fetching last commit for repo %s: %s", project_id, exc)
            return None
        return commits[0] if commits else None
