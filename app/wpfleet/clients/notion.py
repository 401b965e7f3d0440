"""Notion database client plus property value builders."""
import logging
import re
from typing import Any, Iterable, Optional

import requests

log = logging.getLogger("wpfleet.notion")

NOTION_API_BASE = "https://api.notion.com/v1"
NOTION_VERSION = "2022-06-28"
DEFAULT_TIMEOUT = 30
RICH_TEXT_LIMIT = 2000

_UNDASHED_ID = re.compile(r"^([0-9a-fA-F]{8})([0-9a-fA-F]{4})([0-9a-fA-F]{4})([0-9a-fA-F]{4})([0-9a-fA-F]{12})$")


def format_database_id(raw: str) -> str:
    """Turn a 32-char id copied from a Notion URL into the dashed UUID form."""
    raw = (raw or "").strip()
    match = _UNDASHED_ID.match(raw)
    if not match:
        return raw
    return "-".join(match.groups())


# Property values (page payloads)

def title(text: str) -> dict:
    return {"title": [{"text": {"content": text}}]}


def url(value: Optional[str]) -> dict:
    return {"url": value or None}


def number(value) -> dict:
    return {"number": value}


def rich_text(text: str) -> dict:
    return {"rich_text": [{"text": {"content": str(text)[:RICH_TEXT_LIMIT]}}]}


def multi_select(options: Iterable[str]) -> dict:
    return {"multi_select": [{"name": option} for option in options]}


def date(start: Optional[str]) -> dict:
    return {"date": {"start": start} if start else None}


# Property types (database schema)

def select_options(*names: str) -> dict:
    return {"multi_select": {"options": [{"name": name} for name in names]}}


class NotionClient:
    def __init__(
        self,
        api_key: str,
        database_id: str,
        session: Optional[requests.Session] = None,
        version: str = NOTION_VERSION,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.api_key = api_key
        self.database_id = format_database_id(database_id)
        self.session = session or requests.Session()
        self.version = version
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: dict, **kwargs) -> "NotionClient":
        return cls(settings["api_key"], settings["database_id"], **kwargs)

    def headers(self) -> dict:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "Notion-Version": self.version,
        }

    def _send(self, method: str, path: str, payload: Optional[dict] = None) -> dict:
        resp = self.session.request(
            method,
            f"{NOTION_API_BASE}{path}",
            headers=self.headers(),
            json=payload,
            timeout=self.timeout,
        )
        resp.raise_for_status()
        return resp.json()

    @staticmethod
    def _error_detail(exc: Exception) -> Any:
        response = getattr(exc, "response", None)
        if response is None:
            return str(exc)
        try:
            return response.json()
        except ValueError:
            return response.text

    def retrieve_database(self) -> dict:
        """Raises on failure; callers decide whether that is fatal."""
        return self._send("GET", f"/databases/{self.database_id}")

    def update_database_schema(self, properties: dict) -> Optional[dict]:
        try:
            data = self._send(
                "PATCH",
                f"/databases/{self.database_id}",
                {"properties": properties},
            )
        except requests.RequestException as exc:
            log.error("Error updating database schema: %s", self._error_detail(exc))
            return None
        log.info("Database schema updated successfully")
        return data.get("properties")

    def query_by_title(self, property_name: str, value: str) -> Optional[list]:
        payload = {
            "filter": {
                "property": property_name,
                "title": {"equals": value},
            }
        }
        try:
            data = self._send("POST", f"/databases/{self.database_id}/query", payload)
        except requests.RequestException as exc:
            log.error(
                "Error querying Notion database for %s: %s",
                value,
                self._error_detail(exc),
            )
            return None
        return data.get("results", [])

    def create_page(self, properties: dict) -> Optional[dict]:
        payload = {
            "parent": {"database_id": self.database_id},
            "properties": properties,
        }
        try:
            return self._send("POST", "/pages", payload)
        except requests.RequestException as exc:
            log.error("Error creating Notion page: %s", self._error_detail(exc))
            return None

    def update_page(self, page_id: str, properties: dict) -> Optional[dict]:
        try:
            return self._send("PATCH", f"/pages/{page_id}", {"properties": properties})
        except requests.RequestException as exc:
            log.error(
                "Error updating Notion page %s: %s",
                page_id,
                self._error_detail(exc),
            )
            log.debug("Attempted to update with properties: %s", properties)
            return None
