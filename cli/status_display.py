"""Status display functionality for CLI"""

from datetime import datetime, timezone
from typing import Any, Dict

from rich.table import Table

from api.client import ApiClient


def show_session(session: ApiClient, console):
    """
    Display the account a login produced

    Args:
        session: Authenticated session
        console: Rich console for output
    """
    expires = datetime.fromtimestamp(session.expires_at, timezone.utc).isoformat()

    table = Table(title="Logged In")
    table.add_column("Property", style="cyan")
    table.add_column("Value")

    table.add_row("Account GUID", session.guid)
    table.add_row("Access Token Expires", expires)
    table.add_row("API Gateway Key", "Configured" if session.gateway_key else "[yellow]Not configured[/yellow]")

    console.print(table)


def show_token_status(status: Dict[str, Any], location: str, console):
    """
    Display stored token status

    Args:
        status: Output of TokenStorage.get_status()
        location: Where the tokens are stored
        console: Rich console for output
    """
    table = Table(title="Token Status Details")
    table.add_column("Property", style="cyan")
    table.add_column("Value")

    table.add_row("Has Tokens", "Yes" if status["has_tokens"] else "No")
    if status.get("error"):
        table.add_row("Error", f"[red]{status['error']}[/red]")

    if status["has_tokens"]:
        table.add_row("Account GUID", status.get("subject") or "unknown")
        for label, key in (("Access Token", "access_token"), ("Refresh Token", "refresh_token")):
            token = status[key]
            state = "[red]Expired[/red]" if token["is_expired"] else "[green]Valid[/green]"
            table.add_row(label, f"{state} ({token['time_until_expiry']})")
            if token["expires_at"]:
                table.add_row(f"{label} Expires At", token["expires_at"])

    table.add_row("Stored In", location)

    console.print(table)
