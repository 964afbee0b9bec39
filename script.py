import asyncio
import sys
from pathlib import Path

import httpx

from config import get_settings

SERVER_URL = get_settings().server_url


async def send(client: httpx.AsyncClient, path: Path, finish_reason: str):
    body = {"text": path.read_text(encoding="utf-8"), "finish_reason": finish_reason}
    try:
        res = await client.post(f"{SERVER_URL}/extract/parse", json=body, timeout=60)
        payload = res.json()
        status = (payload.get("data") or {}).get("status")
        print(f"[{path.name[:30]}] {res.status_code} {status} {payload.get('message')}")
    except httpx.ReadTimeout:
        print(f"[{path.name[:30]}] TIMEOUT")
    except httpx.HTTPError as e:
        print(f"[{path.name[:30]}] ERROR: {e}")


async def main(paths: list[str], finish_reason: str = "stop"):
    async with httpx.AsyncClient() as client:
        await asyncio.gather(*(send(client, Path(path), finish_reason) for path in paths))


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("usage: python script.py [--length] FILE [FILE ...]")
        sys.exit(1)
    args = sys.argv[1:]
    reason = "stop"
    if args[0] == "--length":
        reason = "length"
        args = args[1:]
    asyncio.run(main(args, reason))
