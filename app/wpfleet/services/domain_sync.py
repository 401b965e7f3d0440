"""Mirror every live Virtualmin domain into the Notion site tracker."""
import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional

import requests

from ..clients import notion as props
from ..clients import virtualmin
from ..clients.mainwp import MainWPClient
from ..clients.notion import NotionClient
from ..models.site import SiteDetails
from .notion_sync import CREATED, UPDATED, force_schema, upsert_page

log = logging.getLogger("wpfleet.domain_sync")

TITLE_PROPERTY = "Domain"

DOMAIN_SCHEMA = {
    "Domain": {"title": {}},
    "Site URL": {"url": {}},
    "Number of Plugin Updates": {"number": {}},
    "Number of Security Issues": {"number": {}},
    "Site Health Score": {"number": {}},
    "Core Update Available": props.select_options("Yes", "No"),
    "PHP Version": {"rich_text": {}},
    "Last Checked": {"date": {}},
    "Maintenance": props.select_options("Yes", "No"),
}

CREATE_DEFAULTS = {
    "Site URL": props.url(None),
    "Number of Plugin Updates": props.number(0),
    "Number of Security Issues": props.number(0),
    "Site Health Score": props.number(0),
    "Core Update Available": props.multi_select(["No"]),
    "PHP Version": props.rich_text("Unknown"),
    "Maintenance": props.multi_select(["No"]),
}

NUMBER_FIELDS = (
    "Number of Plugin Updates",
    "Number of Security Issues",
    "Site Health Score",
)
SELECT_FIELDS = ("Core Update Available", "Maintenance")


def tracking_fields(details: Optional[SiteDetails]) -> dict:
    """Tracker columns for one site; ``None`` means not under MainWP."""
    if details is None:
        return {
            "Domain": "",
            "Site URL": "",
            "Number of Security Issues": 0,
            "Site Health Score": 0,
            "Core Update Available": ["No"],
            "Number of Plugin Updates": 0,
            "PHP Version": "Unknown",
            "Maintenance": ["No"],
        }
    return {
        "Domain": details.name,
        "Site URL": details.url,
        "Number of Security Issues": details.security_issues,
        "Site Health Score": details.health_value,
        "Core Update Available": ["Yes" if details.has_core_update else "No"],
        "Number of Plugin Updates": details.plugin_update_count,
        "PHP Version": details.php_version,
        "Maintenance": ["Yes"],
    }


def domain_properties(domain: str, fields: dict, checked_at: Optional[str] = None) -> dict:
    checked_at = checked_at or datetime.now(timezone.utc).isoformat()
    properties = {
        "Domain": props.title(domain),
        "Last Checked": props.date(checked_at),
    }
    if fields.get("Site URL"):
        properties["Site URL"] = props.url(fields["Site URL"])
    for key in NUMBER_FIELDS:
        if fields.get(key) is not None:
            properties[key] = props.number(fields[key])
    for key in SELECT_FIELDS:
        if fields.get(key):
            properties[key] = props.multi_select(fields[key])
    if fields.get("PHP Version"):
        properties["PHP Version"] = props.rich_text(fields["PHP Version"])
    return properties


def lookup_site(mainwp: MainWPClient, url: str) -> Optional[SiteDetails]:
    log.info("Fetching details for %s from MainWP...", url)
    site = mainwp.find_site(url)
    if site is None:
        return None
    try:
        return SiteDetails.from_mainwp(site)
    except ValueError as exc:
        log.error("Error processing MainWP data for %s: %s", url, exc)
        return None


def sync_domain(
    mainwp: MainWPClient,
    notion: NotionClient,
    domain: str,
    checked_at: Optional[str] = None,
) -> Optional[str]:
    details = lookup_site(mainwp, f"https://{domain}")
    fields = tracking_fields(details)
    log.debug("Site details for %s: %s", domain, fields)
    return upsert_page(
        notion,
        TITLE_PROPERTY,
        domain,
        domain_properties(domain, fields, checked_at),
        defaults=CREATE_DEFAULTS,
    )


def run_domain_sync(
    mainwp: MainWPClient,
    notion: NotionClient,
    virtualmin_settings: dict,
    session=None,
) -> Dict[str, int]:
    force_schema(notion, DOMAIN_SCHEMA)

    log.info("Fetching domains from Virtualmin...")
    try:
        payload = virtualmin.fetch_domains(virtualmin_settings, session=session)
    except (requests.RequestException, ValueError) as exc:
        log.critical("Error fetching domains: %s", exc)
        raise SystemExit(1)
    domains: List[str] = virtualmin.parse_domains(payload)
    log.info("%s domains found on server.", len(domains))

    counts = {CREATED: 0, UPDATED: 0, "failed": 0}
    for domain in domains:
        result = sync_domain(mainwp, notion, domain)
        counts[result or "failed"] += 1
    return counts
