#!/usr/bin/env python3
"""
Live smoke test — validates recording, listing and rendering on a real page.

Steps:
1. Launch browser with the ledger attached
2. Navigate to the target URL
3. List recorded exchanges (JSONL)
4. Render the body of every listed exchange that has a response
5. Print a summary by render kind

Usage:
    python scripts/smoke_network.py
    python scripts/smoke_network.py --url https://httpbin.org/json
    python scripts/smoke_network.py --url https://example.com --all-types
"""

import argparse
import asyncio
import json
import os
import sys
from collections import Counter

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from netledger.browser.manager import BrowserManager
from netledger.config import Config
from netledger.log import setup_logging
from netledger.network.models import FilterCriteria
from netledger.network.projector import list_requests
from netledger.network.renderer import ResponseRenderer

log = setup_logging("smoke_network", log_file="smoke_network.log")

DEFAULT_URL = "https://httpbin.org/json"


async def main(url: str, all_types: bool, wait: float):
    browser = BrowserManager()

    try:
        print("\n" + "=" * 60)
        print("  Network Ledger Smoke Test")
        print("=" * 60)

        print("\n  [1/5] Launching browser...")
        await browser.start()

        print(f"  [2/5] Navigating to {url}...")
        await browser.navigate(url)
        await asyncio.sleep(wait)

        print("  [3/5] Listing exchanges...")
        types = [] if all_types else Config.DEFAULT_RESOURCE_TYPES
        lines = await list_requests(browser.ledger, FilterCriteria(resource_types=set(types)))
        print(f"  {len(lines)} listed / {len(browser.ledger)} recorded")
        for line in lines[:20]:
            print(f"    {line[:150]}")

        print("  [4/5] Rendering bodies...")
        renderer = ResponseRenderer(browser.ledger)
        kinds = Counter()
        for line in lines:
            record = json.loads(line)
            result = await renderer.render(record["id"])
            kinds[result.kind] += 1
            log.info(f"{record['id']} {record['url'][:100]} -> {result.kind}")

        print("\n" + "-" * 60)
        print("  [5/5] RESULTS")
        print("-" * 60)
        for kind, count in sorted(kinds.items()):
            print(f"    {kind:<12} {count}")

        if not lines:
            print("\n  ❌ No exchanges recorded")
        elif kinds.get("error"):
            print(f"\n  ⚠️  {kinds['error']} render errors (see logs)")
        else:
            print("\n  ✅ Smoke test passed")

    except Exception as e:
        log.error(f"Smoke test failed: {e}", exc_info=True)
        print(f"\n  ❌ Error: {e}")
    finally:
        await browser.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Network ledger smoke test")
    parser.add_argument("--url", default=DEFAULT_URL, help="Page to inspect")
    parser.add_argument("--all-types", action="store_true", help="List every resource type")
    parser.add_argument("--wait", type=float, default=2.0, help="Seconds to wait after load")
    args = parser.parse_args()
    asyncio.run(main(args.url, args.all_types, args.wait))
