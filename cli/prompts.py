"""Interactive terminal prompts for login"""

from rich.console import Console
from rich.prompt import Prompt


class ConsolePrompter:
    """Asks the user for account details on the terminal"""

    def __init__(self, console: Console):
        self.console = console

    def ask(self, label: str) -> str:
        """Ask for a visible value, e.g. the username or a one-time passcode"""
        return Prompt.ask(f"Please enter {label} for your Toyota account", console=self.console)

    def ask_secret(self, label: str) -> str:
        """Ask for a value without echoing it"""
        return Prompt.ask(
            f"Please enter {label} for your Toyota account",
            console=self.console,
            password=True,
        )
