# Colour thresholds for security issue counts and site health scores.
# The interactive updater and the live-domain report grade differently.

GREEN = "green"
YELLOW = "yellow"
RED = "red"


def dashboard_security_style(issues: int) -> str:
    if issues == 0:
        return GREEN
    if issues < 5:
        return YELLOW
    return RED


def dashboard_health_style(health: int) -> str:
    if health <= 0:
        return RED
    if health <= 50:
        return YELLOW
    return GREEN


def report_security_style(issues: int) -> str:
    return RED if issues > 0 else GREEN


def report_health_style(health: int) -> str:
    if health >= 80:
        return GREEN
    if health >= 50:
        return YELLOW
    return RED


def paint(style: str, text) -> str:
    """Wrap ``text`` in rich console markup."""
    return f"[{style}]{text}[/{style}]"
