"""
Smoke script for the Oura MCP server (real upstream, real credential).

It performs:
 1) Spawns `python -m oura_mcp.server` over stdio
 2) Lists tools
 3) Calls every tool for a small date range and prints the text result

Requires OURA_API_KEY in the environment (or in .env at the repo root).
"""

from __future__ import annotations

import asyncio
import datetime as _dt
import os
import sys
from pathlib import Path
from typing import Any

_REPO_ROOT = Path(__file__).resolve().parents[1]


def _unwrap_tool_result(res: Any) -> str:
    content = getattr(res, "content", None) or []
    return "\n".join(getattr(c, "text", str(c)) for c in content)


async def smoke() -> bool:
    from mcp import ClientSession
    from mcp.client.stdio import StdioServerParameters, stdio_client
    from mcp.shared.exceptions import McpError

    python_cmd = os.getenv("MCP_PYTHON") or sys.executable
    end = _dt.date.today()
    start = end - _dt.timedelta(days=int(os.getenv("OURA_SMOKE_DAYS", "3")))
    args = {"start_date": start.isoformat(), "end_date": end.isoformat()}

    print(f"[smoke] Repo root: {_REPO_ROOT}")
    print(f"[smoke] Python: {python_cmd}")
    print(f"[smoke] range={args['start_date']}..{args['end_date']}")

    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(p for p in (str(_REPO_ROOT / "src"), env.get("PYTHONPATH", "")) if p)
    server = StdioServerParameters(command=python_cmd, args=["-m", "oura_mcp.server"], env=env)

    ok = True
    async with stdio_client(server) as (read, write):
        async with ClientSession(read, write) as session:
            await session.initialize()

            tools = await session.list_tools()
            names = [t.name for t in tools.tools]
            print("\n[smoke] TOOLS:")
            for n in names:
                print(f" - {n}")

            for name in names:
                print(f"\n[smoke] CALL {name}:")
                try:
                    res = await session.call_tool(name, args)
                except McpError as e:
                    print(f"[smoke] WARN: {name} failed (code={e.error.code}): {e.error.message}")
                    ok = False
                    continue
                print(_unwrap_tool_result(res))

    return ok


async def main() -> int:
    ok = await smoke()
    print("\n[smoke] OK" if ok else "\n[smoke] Completed with warnings")
    return 0 if ok else 1


if __name__ == "__main__":
    raise SystemExit(asyncio.run(main()))
