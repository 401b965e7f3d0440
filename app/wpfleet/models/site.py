import json
import logging
from dataclasses import dataclass, asdict
from typing import Any

log = logging.getLogger("wpfleet.models.site")


def decode_json_field(value: Any, default):
    """MainWP ships some columns as JSON text and others pre-decoded."""
    if value in (None, ""):
        return default
    if isinstance(value, (dict, list)):
        return value
    if isinstance(value, str):
        return json.loads(value)
    return default


def _to_int(value) -> int:
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return 0


@dataclass
class SiteDetails:
    name: str
    url: str
    security_issues: int
    health_value: int
    has_core_update: bool
    plugin_update_count: int
    wp_version: str = "Unknown"
    php_version: str = "Unknown"
    child_version: str = "Unknown"
    http_response_code: str = ""

    @property
    def last_check_status(self) -> str:
        state = "OK" if self.http_response_code == "200" else "Error"
        return f"{self.http_response_code} - {state}"

    @staticmethod
    def from_mainwp(site: dict) -> "SiteDetails":
        plugin_upgrades = decode_json_field(site.get("plugin_upgrades"), {})
        wp_upgrades = decode_json_field(site.get("wp_upgrades"), [])
        # Scalars like "1" or "true" decode fine but carry no upgrade list.
        if not isinstance(plugin_upgrades, (dict, list)):
            plugin_upgrades = {}
        if not isinstance(wp_upgrades, (dict, list)):
            wp_upgrades = []

        try:
            site_info = decode_json_field(site.get("site_info"), {})
        except ValueError as exc:
            log.error("Error parsing site_info for %s: %s", site.get("name"), exc)
            site_info = {}
        if not isinstance(site_info, dict):
            site_info = {}

        return SiteDetails(
            name=site.get("name") or "",
            url=site.get("url") or "",
            security_issues=_to_int(site.get("securityIssues")),
            health_value=_to_int(site.get("health_value")),
            has_core_update=len(wp_upgrades or []) > 0,
            plugin_update_count=len(plugin_upgrades or {}),
            wp_version=site_info.get("wpversion") or site.get("wp_version") or "Unknown",
            php_version=site_info.get("phpversion") or site.get("phpversion") or "Unknown",
            child_version=site_info.get("child_version") or "Unknown",
            http_response_code=str(site.get("http_response_code") or ""),
        )

    def to_json(self) -> dict:
        data = asdict(self)
        data["last_check_status"] = self.last_check_status
        return data
