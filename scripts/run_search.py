"""Minimal end-to-end run: one search, then one detail fetch for the first hit."""

import asyncio
import json
import logging

from placename.commands import create_commands


async def run(name: str, limit: int) -> None:
    """Search by name and fetch the detail record of the first result."""
    commands = create_commands()

    # first page of results, API pages are 1-based
    envelope = await commands.invoke(
        "search_placenames", {"query": {"name": name, "limit": limit, "page": 1}})
    if not envelope["ok"]:
        print(f"Search failed: {envelope['error']}")
        return

    data = envelope["data"]
    print(json.dumps(data, ensure_ascii=False, indent=2))

    # gateway envelope: {resp_code, resp_msg, datas: {total, pages, records}}
    records = []
    if isinstance(data, dict):
        records = (data.get("datas") or {}).get("records") or []
    sys_ids = [r.get("sysId") for r in records if isinstance(r, dict) and r.get("sysId")]
    if not sys_ids:
        print("No sysId in search results")
        return

    detail = await commands.invoke("get_placename", {"sysId": sys_ids[0]})
    if not detail["ok"]:
        print(f"Detail fetch failed: {detail['error']}")
        return
    print(json.dumps(detail["data"], ensure_ascii=False, indent=2))


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )
    # quiet the connection pool logger
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    # small fixed query for a quick manual check against the live gateway
    asyncio.run(run("长安", limit=5))


if __name__ == "__main__":
    main()
