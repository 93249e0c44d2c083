#!/usr/bin/env python3
"""Quick Start Example for httpscript.

Scripts three responses and shows how an httpx client with a read timeout
experiences each of them.
Just run: python quickstart.py
"""

import sys
import time
from pathlib import Path

import httpx

# Add src to path (not needed if httpscript is installed via pip)
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from httpscript import Instruction, ScriptedServer

SCRIPT = [
    # Fast and healthy.
    Instruction(status_code=200, headers={"Content-Type": "text/plain"}, body=b"hello"),
    # Headers take 2s: longer than the client's 1s read timeout.
    Instruction(status_code=200, header_delay=2.0, body=b"too late"),
    # Headers right away, then 20 bytes trickled over 3s.
    Instruction(status_code=200, body=b"a slow trickle of by", body_service_time=3.0),
]


def main() -> int:
    """Run the three requests and print what the client saw."""
    print("📜 httpscript Quick Start")
    print("=" * 50)

    timeout = httpx.Timeout(5.0, read=1.0)
    with ScriptedServer(SCRIPT) as server, httpx.Client(timeout=timeout) as client:
        for i in range(len(SCRIPT) + 1):
            start = time.monotonic()
            try:
                resp = client.get(server.url)
                outcome = f"{resp.status_code} {resp.text!r}"
            except httpx.TimeoutException as e:
                outcome = f"timeout ({type(e).__name__})"
            print(f"Request {i}: {outcome} after {time.monotonic() - start:.2f}s")

    print("=" * 50)
    return 0


if __name__ == "__main__":
    sys.exit(main())
