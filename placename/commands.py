"""Async command layer the GUI host calls into.

Each command runs the blocking relay in a worker thread, so several calls
can be in flight at once without holding up the host's event loop.
``invoke`` dispatches a host call by name and turns the outcome into an
envelope: ``{"ok": True, "data": ...}`` or ``{"ok": False, "error": "..."}``.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Mapping

from placename.client import (
    BASE_URL,
    PlacenameClient,
    PlacenameError,
    PlacenameQuery,
    create_session,
)

logger = logging.getLogger(__name__)

# command name -> name of the argument the front-end passes
COMMAND_ARGS = {
    "search_placenames": "query",
    "get_placename": "sysId",
}
COMMAND_NAMES = tuple(COMMAND_ARGS)


class PlacenameCommands:
    """The two relay commands, bound to one shared client."""

    def __init__(self, client: PlacenameClient):
        self.client = client

    async def search_placenames(self, query: PlacenameQuery | Mapping[str, Any]) -> Any:
        return await asyncio.to_thread(self.client.search_placenames, query)

    async def get_placename(self, sys_id: str) -> Any:
        return await asyncio.to_thread(self.client.get_placename, sys_id)

    async def invoke(self, name: str, args: Mapping[str, Any] | None = None) -> dict:
        """Run a command by name and wrap the result (or error text) in an envelope."""
        args = args or {}
        arg_name = COMMAND_ARGS.get(name)
        if arg_name is None:
            return _failure(f"Unknown command: {name}")
        if args.get(arg_name) is None:
            return _failure(f"Missing argument: {arg_name}")

        value = args[arg_name]
        try:
            if name == "search_placenames":
                if not isinstance(value, (PlacenameQuery, Mapping)):
                    raise PlacenameError("Invalid query: expected an object")
                data = await self.search_placenames(value)
            else:
                if not isinstance(value, str):
                    raise PlacenameError("Invalid argument: sysId must be a string")
                data = await self.get_placename(value)
        except PlacenameError as err:
            return _failure(str(err))
        return {"ok": True, "data": data}


def _failure(message: str) -> dict:
    logger.info("Command failed: %s", message)
    return {"ok": False, "error": message}


def create_commands(base_url: str = BASE_URL) -> PlacenameCommands:
    """Build the shared session and wire it into the command set.

    Called once at process start. A session that cannot be built means the
    process environment is broken, so this exits instead of returning.
    """
    try:
        session = create_session()
    except Exception as err:
        logger.critical("Failed to build HTTP client: %s", err)
        raise SystemExit(1) from err
    return PlacenameCommands(PlacenameClient(session, base_url=base_url))
