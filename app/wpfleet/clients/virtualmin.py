"""Virtualmin remote API: list the virtual servers on the live box."""
import logging
import re
import warnings
from typing import List, Optional

import requests
from urllib3.exceptions import InsecureRequestWarning

log = logging.getLogger("wpfleet.virtualmin")

DEFAULT_TIMEOUT = 60
HEADER_TOKEN = "Domain"
RULE_MARKER = "----"

_WS = re.compile(r"\s+")


def remote_url(server: str, port: int) -> str:
    return f"https://{server}:{port}/virtual-server/remote.cgi"


def fetch_domains(
    settings: dict,
    session: Optional[requests.Session] = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> dict:
    """Run ``list-domains`` on the panel and return its JSON answer.

    The panel uses a self-signed certificate, so verification is off for
    this call only.
    """
    session = session or requests.Session()
    url = remote_url(settings["server"], settings["port"])
    log.info("Fetching domains from %s", url)
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", InsecureRequestWarning)
        resp = session.get(
            url,
            params={"program": "list-domains", "json": 1},
            auth=(settings["username"], settings["password"]),
            verify=False,
            timeout=timeout,
        )
    resp.raise_for_status()
    return resp.json()


def parse_domains(payload: dict) -> List[str]:
    """Domain names from the panel's tabular ``list-domains`` output.

    Each row arrives as one ``name`` string holding the whole text line; the
    domain is its first column. The header row and the dashed rule under it
    are dropped.
    """
    domains: List[str] = []
    for item in (payload or {}).get("data") or []:
        name = (item or {}).get("name")
        if not name or not name.strip():
            continue
        if RULE_MARKER in name:
            continue
        first = _WS.split(name.strip())[0]
        if first == HEADER_TOKEN:
            continue
        domains.append(first)
    return domains
