"""MainWP dashboard REST client (wp-json/mainwp/v1)."""
import logging
from typing import Any, Optional

import requests

log = logging.getLogger("wpfleet.mainwp")

DEFAULT_TIMEOUT = 30
API_PREFIX = "/wp-json/mainwp/v1"


class MainWPClient:
    def __init__(
        self,
        base_url: str,
        consumer_key: str,
        consumer_secret: str,
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.base_url = base_url.rstrip("/")
        self.consumer_key = consumer_key
        self.consumer_secret = consumer_secret
        self.session = session or requests.Session()
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: dict, **kwargs) -> "MainWPClient":
        return cls(
            settings["base_url"],
            settings["consumer_key"],
            settings["consumer_secret"],
            **kwargs,
        )

    def _endpoint(self, path: str) -> str:
        return f"{self.base_url}{API_PREFIX}/{path}"

    def _request(self, method: str, path: str, what: str, **params) -> Optional[Any]:
        query = {
            "consumer_key": self.consumer_key,
            "consumer_secret": self.consumer_secret,
        }
        query.update({k: v for k, v in params.items() if v is not None})
        try:
            resp = self.session.request(
                method,
                self._endpoint(path),
                params=query,
                timeout=self.timeout,
            )
            resp.raise_for_status()
            return resp.json()
        except requests.HTTPError as exc:
            response = exc.response
            log.error(
                "Error %s: HTTP %s %s",
                what,
                getattr(response, "status_code", "?"),
                getattr(response, "text", ""),
            )
        except (requests.RequestException, ValueError) as exc:
            log.error("Error %s: %s", what, exc)
        return None

    def available_updates_count(self) -> Optional[dict]:
        return self._request(
            "GET",
            "sites/sites-available-updates-count",
            "fetching sites with updates",
        )

    def sites_by_url(self, urls: Optional[str] = None, with_tags: Optional[int] = None):
        return self._request(
            "GET",
            "sites/get-sites-by-url",
            f"fetching sites for {urls}" if urls else "fetching WP Manage sites",
            urls=urls,
            with_tags=with_tags,
        )

    def find_site(self, url: str) -> Optional[dict]:
        """First dashboard site matching ``url``, or None."""
        sites = self.sites_by_url(urls=url)
        if isinstance(sites, dict) and sites:
            site_id = next(iter(sites))
            return sites[site_id]
        if isinstance(sites, list) and sites:
            return sites[0]
        log.info("%s not found in WP manage", url)
        return None

    def site(self, site_id) -> Optional[dict]:
        return self._request(
            "GET",
            "site/site",
            f"fetching details for site {site_id}",
            site_id=site_id,
        )

    def update_wordpress(self, site_id) -> Optional[Any]:
        return self._request(
            "PUT",
            "site/site-update-wordpress",
            f"updating WordPress for site {site_id}",
            site_id=site_id,
        )

    def update_plugins(self, site_id) -> Optional[Any]:
        result = self._request(
            "PUT",
            "site/site-update-plugins",
            f"updating plugins for site {site_id}",
            site_id=site_id,
        )
        if result is not None:
            log.info("Plugins update initiated for site %s", site_id)
        return result
