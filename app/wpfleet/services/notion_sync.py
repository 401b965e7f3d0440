"""Schema reconciliation and title-keyed upserts against a Notion database."""
import logging
from typing import Dict, List, Optional

import requests

from ..clients.notion import NotionClient

log = logging.getLogger("wpfleet.notion_sync")

UPDATED = "updated"
CREATED = "created"


def force_schema(client: NotionClient, required: Dict[str, dict]) -> Optional[dict]:
    """PATCH every required property, whether it exists or not."""
    log.info("Forcibly updating database schema...")
    return client.update_database_schema(required)


def ensure_schema(client: NotionClient, required: Dict[str, dict]) -> List[str]:
    """Add only the required properties the database lacks.

    Exits the process when the database cannot be read or patched.
    """
    try:
        database = client.retrieve_database()
    except requests.RequestException as exc:
        log.critical("Error ensuring properties exist in Notion database: %s", exc)
        raise SystemExit(1)

    existing = database.get("properties") or {}
    missing = {name: kind for name, kind in required.items() if name not in existing}
    if not missing:
        log.info("Notion database already has all %s properties", len(required))
        return []

    log.info("Adding missing properties: %s", ", ".join(missing))
    if client.update_database_schema(missing) is None:
        log.critical("Could not add missing properties to the Notion database")
        raise SystemExit(1)
    return list(missing)


def upsert_page(
    client: NotionClient,
    title_property: str,
    title: str,
    properties: dict,
    defaults: Optional[dict] = None,
) -> Optional[str]:
    """Update the first page titled ``title`` or create a new one.

    ``defaults`` only apply to created pages.
    """
    existing = client.query_by_title(title_property, title)

    if existing:
        log.info("Updating existing entry for %s", title)
        if client.update_page(existing[0]["id"], properties) is None:
            return None
        log.info("Successfully updated page for %s", title)
        return UPDATED

    log.info("Creating new entry for %s", title)
    payload = dict(defaults or {})
    payload.update(properties)
    if client.create_page(payload) is None:
        return None
    log.info("Successfully created page for %s", title)
    return CREATED
