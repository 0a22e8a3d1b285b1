"""Replay a recorded agent event through the handler.

Useful for checking a tool end to end without deploying it.

Usage:
    python scripts/run_local.py parseDeals
    python scripts/run_local.py fetchPage
    python scripts/run_local.py --event path/to/event.json
"""

import argparse
import asyncio
import json
import os
import sys
from pathlib import Path

# Add backend to path so we can import dealscout without installing it
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "backend"))

from dealscout.handler import handle_event

EVENTS_DIR = Path(__file__).parent / "events"


def _available_events() -> list[str]:
    return sorted(p.stem for p in EVENTS_DIR.glob("*.json"))


async def run(event_path: Path) -> int:
    """Run one event file and print the envelope plus the tool output."""
    event = json.loads(event_path.read_text(encoding="utf-8"))

    print(f"\n{'='*70}")
    print(f"  Running tool: {event.get('function')}")
    print(f"{'='*70}\n")

    response = await handle_event(event)

    print("Raw agent response:")
    print(json.dumps(response, indent=2, ensure_ascii=False))

    body = response["functionResponse"]["responseBody"]["TEXT"]["body"]
    print("\nTool output (parsed):")
    try:
        parsed = json.loads(body)
    except json.JSONDecodeError:
        print(body)
        return 1

    print(json.dumps(parsed, indent=2, ensure_ascii=False))
    return 0 if parsed.get("success") else 1


def main() -> int:
    parser = argparse.ArgumentParser(description="Replay an agent event locally")
    parser.add_argument("name", nargs="?", default="parseDeals", help="Event name under scripts/events/")
    parser.add_argument("--event", type=Path, help="Explicit path to an event JSON file")
    args = parser.parse_args()

    event_path = args.event or EVENTS_DIR / f"{args.name}.json"
    if not event_path.exists():
        print(f"No test event found for '{args.name}'.")
        print(f"Available: {', '.join(_available_events())}")
        return 1

    return asyncio.run(run(event_path))


if __name__ == "__main__":
    sys.exit(main())
