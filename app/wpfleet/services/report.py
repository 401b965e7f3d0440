"""One-line-per-domain console report of live sites against MainWP."""
import logging
from typing import Iterable, Iterator, Optional

from ..clients.mainwp import MainWPClient
from ..models.site import SiteDetails
from .health import (
    GREEN,
    RED,
    YELLOW,
    paint,
    report_health_style,
    report_security_style,
)

log = logging.getLogger("wpfleet.report")


def format_site_line(details: SiteDetails) -> str:
    core = paint(RED, "Available") if details.has_core_update else paint(GREEN, "Up to date")
    plugin_style = YELLOW if details.plugin_update_count > 0 else GREEN
    return " | ".join(
        [
            f"Name: {details.name}",
            f"URL: {details.url}",
            "Security issues: "
            + paint(report_security_style(details.security_issues), details.security_issues),
            "Site health: "
            + paint(report_health_style(details.health_value), f"{details.health_value}%"),
            f"Core Update: {core}",
            "Plugin Updates: " + paint(plugin_style, details.plugin_update_count),
        ]
    )


def format_missing_line(domain: str) -> str:
    return paint(RED, f"{domain} - Not found on WPmanage")


def site_for_domain(mainwp: MainWPClient, domain: str) -> Optional[SiteDetails]:
    site = mainwp.find_site(domain)
    if site is None:
        return None
    try:
        return SiteDetails.from_mainwp(site)
    except ValueError as exc:
        log.error("Error processing MainWP data for %s: %s", domain, exc)
        return None


def live_domain_report(mainwp: MainWPClient, domains: Iterable[str]) -> Iterator[str]:
    for domain in domains:
        details = site_for_domain(mainwp, domain)
        if details is None:
            yield format_missing_line(domain)
        else:
            yield format_site_line(details)
