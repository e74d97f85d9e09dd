"""Placename relay package exports."""

from placename.client import (
    BASE_URL,
    PlacenameClient,
    PlacenameError,
    PlacenameQuery,
    create_session,
)
from placename.commands import COMMAND_NAMES, PlacenameCommands, create_commands

__all__ = [
    "BASE_URL",
    "PlacenameClient",
    "PlacenameError",
    "PlacenameQuery",
    "create_session",
    "COMMAND_NAMES",
    "PlacenameCommands",
    "create_commands",
]
