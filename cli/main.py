"""CLI entry point and argument parsing"""

import argparse
import asyncio
import sys
from typing import Optional

import httpx
from rich.console import Console

import settings
from api.client import ApiClient
from cli.prompts import ConsolePrompter
from cli.status_display import show_session, show_token_status
from forgerock import CredentialManager, ForgeRockError
from utils.debug_console import configure_logging, create_debug_console
from utils.storage import KeyringSecretStore, TokenStorage


async def run(args: argparse.Namespace, storage: TokenStorage, console: Console) -> Optional[ApiClient]:
    """Carry out the requested action

    Returns:
        The authenticated session when logging in, otherwise None
    """
    prompter = ConsolePrompter(console)

    async with httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT) as client:
        manager = CredentialManager(
            client,
            prompter.ask,
            secret_prompter=prompter.ask_secret,
            storage=storage,
            gateway_key=settings.API_GATEWAY_KEY,
            locale=settings.DEVICE_LOCALE,
        )

        if args.logout:
            manager.logout()
            console.print("[green]✓ Stored credentials removed[/green]")
            return None

        if args.status:
            show_token_status(manager.get_status(), storage.location, console)
            return None

        return await manager.login()


def build_storage() -> TokenStorage:
    """Token storage in the configured keyring service and entry"""
    return TokenStorage(KeyringSecretStore(settings.KEYRING_SERVICE), entry_name=settings.CREDENTIALS_ENTRY)


def main(argv=None):
    """Entry point for the CLI"""
    parser = argparse.ArgumentParser(description="Log in to a Toyota account and cache its OAuth2 tokens")
    parser.add_argument("--debug", "-d", action="store_true", help="Enable debug logging")
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--status", action="store_true", help="Show stored token status and exit")
    group.add_argument("--logout", action="store_true", help="Remove stored tokens and exit")

    args = parser.parse_args(argv)

    debug_logger = configure_logging(settings.LOG_LEVEL, debug=args.debug, log_file=settings.DEBUG_LOG_FILE)
    console = create_debug_console(debug_enabled=args.debug, debug_logger=debug_logger)

    if args.debug:
        console.print(f"[yellow]Debug mode enabled - verbose logging will be written to {settings.DEBUG_LOG_FILE}[/yellow]")

    try:
        session = asyncio.run(run(args, build_storage(), console))
        if session is not None:
            console.print("[green]✓ Authenticated[/green]")
            show_session(session, console)

    except KeyboardInterrupt:
        console.print("\n[yellow]Login cancelled by user[/yellow]")
        sys.exit(130)
    except ForgeRockError as e:
        console.print(f"\n[red]Login failed ({type(e).__name__}):[/red] {e}")
        if args.debug:
            console.print_exception()
        sys.exit(1)


if __name__ == "__main__":
    main()
