import argparse
import asyncio
import os
import sys

# Ensure src is in pythonpath
sys.path.append(os.path.join(os.path.dirname(__file__), "..", "src"))

from dotenv import load_dotenv
load_dotenv()

from wsslots.wiki.api_client import MediaWikiClient, MediaWikiClientError


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Edit a slot on a remote wiki.")
    parser.add_argument("title")
    parser.add_argument("--slot", default="main")
    parser.add_argument("--text", help="Text to write; read from stdin when omitted")
    parser.add_argument("--append", action="store_true")
    parser.add_argument("--summary", default="")
    parser.add_argument("--nochange", action="store_true", help="Suppress watchlist notifications")
    return parser.parse_args()


async def main():
    args = parse_args()
    text = args.text if args.text is not None else sys.stdin.read()

    async with MediaWikiClient() as client:
        print("Logging in...")
        await client.login()

        print(f"Editing slot '{args.slot}' of {args.title}...")
        result = await client.edit_slot(
            title=args.title,
            text=text,
            slot=args.slot,
            append=args.append,
            summary=args.summary,
            watchlist="nochange" if args.nochange else "",
        )
        print(f"Done: {result}")

        current = await client.get_slot_content(args.title, args.slot)
        if current is None:
            print(f"Slot '{args.slot}' is not present on {args.title}.")
        else:
            print(f"Slot '{args.slot}' now holds {len(current)} characters.")


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except MediaWikiClientError as exc:
        print(f"Error: {exc}")
        sys.exit(1)
