"""Trigger MainWP updates for one site and poll until they land."""
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional

from ..clients.mainwp import MainWPClient
from ..models.site import decode_json_field

log = logging.getLogger("wpfleet.updates")

UPDATE_WORDPRESS = "wordpress"
UPDATE_PLUGINS = "plugins"
UPDATE_TYPES = (UPDATE_WORDPRESS, UPDATE_PLUGINS)


@dataclass
class UpdateOutcome:
    core_result: Any = None
    plugin_result: Any = None
    plugins_requested: bool = False

    def requested_types(self) -> list:
        types = [UPDATE_WORDPRESS]
        if self.plugins_requested:
            types.append(UPDATE_PLUGINS)
        return types


def pending_plugin_upgrades(details: dict) -> dict:
    try:
        upgrades = decode_json_field((details or {}).get("plugin_upgrades"), {})
    except ValueError:
        log.warning("Unreadable plugin_upgrades in site details; assuming none")
        return {}
    return upgrades if isinstance(upgrades, dict) else {}


def perform_updates(client: MainWPClient, site_id, details: dict) -> UpdateOutcome:
    """Core update is always requested; plugins only when some are pending."""
    outcome = UpdateOutcome()
    outcome.core_result = client.update_wordpress(site_id)

    if pending_plugin_upgrades(details):
        outcome.plugins_requested = True
        outcome.plugin_result = client.update_plugins(site_id)
    return outcome


def update_progress(details: dict, update_type: str) -> int:
    """0 while something of ``update_type`` is still pending, else 100."""
    if update_type == UPDATE_WORDPRESS:
        if "wp_core_update" in details:
            return 0 if details["wp_core_update"] else 100
        try:
            wp_upgrades = decode_json_field(details.get("wp_upgrades"), [])
        except ValueError:
            wp_upgrades = []
        if not isinstance(wp_upgrades, (dict, list)):
            wp_upgrades = []
        return 0 if wp_upgrades else 100
    if update_type == UPDATE_PLUGINS:
        return 0 if pending_plugin_upgrades(details) else 100
    raise ValueError(f"Unknown update type: {update_type}")


def wait_for_update_completion(
    client: MainWPClient,
    site_id,
    update_type: str,
    interval: float = 5,
    max_polls: Optional[int] = None,
    on_progress: Optional[Callable[[int], None]] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> bool:
    """Re-read the site every ``interval`` seconds until the update is done.

    Returns False when a poll fails or ``max_polls`` runs out.
    """
    if update_type not in UPDATE_TYPES:
        raise ValueError(f"Unknown update type: {update_type}")

    polls = 0
    while True:
        details = client.site(site_id)
        polls += 1
        if not details:
            log.error("Failed to fetch site details for site %s", site_id)
            return False

        progress = update_progress(details, update_type)
        if on_progress:
            on_progress(progress)
        if progress == 100:
            return True

        if max_polls is not None and polls >= max_polls:
            log.warning(
                "Gave up waiting for %s update on site %s after %s polls",
                update_type,
                site_id,
                polls,
            )
            return False
        sleep(interval)
