"""CLI commands"""

from src.notihub.cli.commands.send import schedule, send

__all__ = ["send", "schedule"]
