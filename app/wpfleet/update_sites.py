"""Interactive MainWP updater.

Shows the dashboard's pending-update totals, lets the operator pick a site,
and pushes core and plugin updates to it. Loops until Exit is chosen.
"""
import argparse
import json
import logging
from typing import List, Optional, Tuple

from rich.console import Console
from rich.progress import Progress
from rich.prompt import Confirm, Prompt

from .config import mainwp_settings, poll_interval, request_timeout, require
from .clients.mainwp import MainWPClient
from .log import configure_logging
from .models.site import decode_json_field
from .services.health import dashboard_health_style, dashboard_security_style, paint
from .services.updates import (
    UPDATE_PLUGINS,
    UPDATE_WORDPRESS,
    pending_plugin_upgrades,
    perform_updates,
    wait_for_update_completion,
)

log = logging.getLogger("wpfleet.update_sites")

EXIT_CHOICE = "x"
UPDATE_COUNT_FIELDS = (
    ("WordPress", "wordpress"),
    ("Plugins", "plugins"),
    ("Themes", "themes"),
    ("Total", "total"),
)


def _int(value) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def print_update_counts(console: Console, counts: dict) -> None:
    console.print("\nSites with available updates:")
    for label, key in UPDATE_COUNT_FIELDS:
        console.print(f"{label}: {counts.get(key) or 0}")
    console.print("-----------------------------------")


def site_choice_label(site: dict) -> str:
    issues = _int(site.get("securityIssues"))
    health = _int(site.get("health_value"))
    return (
        f"{site.get('name')} - "
        + paint(dashboard_security_style(issues), f"Security issues: {site.get('securityIssues')}")
        + " - "
        + paint(dashboard_health_style(health), f"Health: {site.get('health_value')}%")
    )


def site_entries(sites) -> List[Tuple[str, dict]]:
    """(site_id, site) pairs in dashboard order, id folded into the record.

    PHP encodes an empty fleet as ``[]``, and list answers carry the id on
    each site rather than as a key.
    """
    if isinstance(sites, list):
        pairs = [
            (site.get("id", index), site)
            for index, site in enumerate(sites)
            if isinstance(site, dict)
        ]
    else:
        pairs = list(sites.items())
    return [(str(site_id), dict(site, id=site_id)) for site_id, site in pairs]


def select_site(console: Console, entries: List[Tuple[str, dict]]) -> Optional[dict]:
    for index, (_, site) in enumerate(entries, start=1):
        console.print(f"{index:>3}. {site_choice_label(site)}")
    console.print(f"  {EXIT_CHOICE}. Exit")

    choices = [str(i) for i in range(1, len(entries) + 1)] + [EXIT_CHOICE]
    answer = Prompt.ask(
        "Select a site to update or exit",
        choices=choices,
        show_choices=False,
        console=console,
    )
    if answer == EXIT_CHOICE:
        return None
    return entries[int(answer) - 1][1]


def show_site_details(console: Console, site: dict, details: dict, show_plugins: bool = False) -> None:
    issues = _int(site.get("securityIssues"))
    health = _int(site.get("health_value"))
    console.print("\nSite Details:")
    console.print(f"Name: {site.get('name')}")
    console.print(f"URL: {site.get('url')}")
    console.print("Security issues: " + paint(dashboard_security_style(issues), site.get("securityIssues")))
    console.print("Site health: " + paint(dashboard_health_style(health), site.get("health_value")))
    console.print(f"WordPress version: {details.get('wp_version')}")
    console.print(f"Site health status: {details.get('health_status') or 'N/A'}")

    if show_plugins:
        upgrades = pending_plugin_upgrades(details)
        if upgrades:
            console.print("\nPlugins needing updates:")
            for plugin, info in upgrades.items():
                new_version = ((info or {}).get("update") or {}).get("new_version", "?")
                console.print(f"- {plugin}: {new_version}")


def _wait_with_progress(console: Console, client: MainWPClient, site_id, update_type: str, interval: float) -> bool:
    with Progress(console=console, transient=False) as progress:
        task = progress.add_task(f"Waiting for {update_type} update", total=100)
        return wait_for_update_completion(
            client,
            site_id,
            update_type,
            interval=interval,
            on_progress=lambda value: progress.update(task, completed=value),
        )


def print_current_state(console: Console, client: MainWPClient, site_id) -> None:
    console.print("Fetching latest site details...")
    updated = client.site(site_id)
    if not updated:
        return
    try:
        site_info = decode_json_field(updated.get("site_info"), {})
    except ValueError:
        site_info = {}
    console.print(f"Current WordPress version: {(site_info or {}).get('wpversion') or 'Unknown'}")
    console.print(f"Current plugin updates available: {len(pending_plugin_upgrades(updated))}")


def update_site(
    console: Console,
    client: MainWPClient,
    site: dict,
    details: dict,
    wait: bool = False,
    interval: float = 5,
) -> None:
    site_id = site["id"]
    console.print("\nChecking and potentially updating WordPress core...")
    outcome = perform_updates(client, site_id, details)

    if outcome.core_result:
        console.print(f"WordPress core update response: {outcome.core_result}")
    else:
        console.print("No WordPress core update was necessary or the update failed.")

    if outcome.plugins_requested:
        console.print("\nInitiating plugins update...")
        if outcome.plugin_result:
            console.print(f"Plugin update response: {outcome.plugin_result}")
        else:
            console.print("Plugin update failed or no updates were necessary.")
    else:
        console.print("\nNo plugin updates available according to MainWP data.")

    if wait:
        for update_type in outcome.requested_types():
            if update_type == UPDATE_WORDPRESS and not outcome.core_result:
                continue
            if update_type == UPDATE_PLUGINS and not outcome.plugin_result:
                continue
            _wait_with_progress(console, client, site_id, update_type, interval)

    console.print("\nUpdate requests sent. Please check the MainWP dashboard for detailed update status.")
    print_current_state(console, client, site_id)


def run_once(console: Console, client: MainWPClient, args: argparse.Namespace) -> bool:
    """One pass of the menu; False once the operator chose Exit."""
    counts = client.available_updates_count()
    if counts:
        print_update_counts(console, counts)

    sites = client.sites_by_url(with_tags=2)
    if sites is None:
        return Confirm.ask("Could not list sites. Retry?", default=True, console=console)
    if not isinstance(sites, (dict, list)):
        console.print("Unexpected response format. Raw data:")
        console.print(json.dumps(sites, indent=2), markup=False)
        return Confirm.ask("Retry?", default=True, console=console)

    selected = select_site(console, site_entries(sites))
    if selected is None:
        console.print("Exiting...")
        return False

    console.print(f"\nFetching detailed information for {selected.get('name')}")
    details = client.site(selected["id"])
    if not details:
        return True

    show_site_details(console, selected, details, show_plugins=args.show_plugins)
    if Confirm.ask("Do you want to perform updates on this site?", default=False, console=console):
        update_site(
            console,
            client,
            selected,
            details,
            wait=args.wait,
            interval=args.interval,
        )
    return True


def _parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Pick a MainWP site and push WordPress core and plugin updates to it.",
    )
    parser.add_argument(
        "--wait",
        action="store_true",
        help="Poll the dashboard until each requested update has completed.",
    )
    parser.add_argument(
        "--interval",
        type=float,
        default=None,
        help="Seconds between completion polls (default from config, 5).",
    )
    parser.add_argument(
        "--show-plugins",
        action="store_true",
        help="List pending plugin updates for the selected site.",
    )
    return parser.parse_args(argv)


def main(argv=None, console: Optional[Console] = None) -> int:
    configure_logging(interactive=True)
    args = _parse_args(argv)
    if args.interval is None:
        args.interval = poll_interval()
    console = console or Console(highlight=False)

    settings = require(mainwp_settings(), "base_url", "consumer_key", "consumer_secret")
    client = MainWPClient.from_settings(settings, timeout=request_timeout())

    try:
        while run_once(console, client, args):
            pass
    except KeyboardInterrupt:
        console.print("\nInterrupted.")
        return 130
    console.print("Script completed successfully.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
