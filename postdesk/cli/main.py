"""Main entry point for the Postdesk CLI."""
from __future__ import annotations

import asyncio
import logging
import sys

import httpx

from postdesk import __version__
from postdesk.cli.repl import Repl
from postdesk.config import settings
from postdesk.kernel.capabilities import StaticSession
from postdesk.services.http_store import HttpPostStore
from postdesk.services.mock_api import create_app

MOCK_API_URL = "http://mock-posts"


def print_help():
    """Print help message."""
    print(f"""
Postdesk CLI v{__version__}

Usage:
  postdesk [options]

Options:
  --api-url URL     Override API endpoint (default: {settings.API_URL})
  --user-id ID      Author id for new posts (default: POSTDESK_USER_ID)
  --mock            Run against an in-process mock posts API
  -h, --help        Show this help
  -v, --version     Show version

Environment:
  POSTDESK_API_URL                  API endpoint (same as --api-url)
  POSTDESK_API_TOKEN                Bearer token sent with every request
  POSTDESK_USER_ID                  Author id (same as --user-id)
  POSTDESK_REFETCH_AFTER_MUTATION   Re-fetch the list after each change
  POSTDESK_LOG_LEVEL                Logging level (default: WARNING)
""")


def parse_args(args: list[str]) -> dict:
    """
    Parse command line arguments.

    Returns dict with:
        api_url: str | None
        user_id: int | None
        mock: bool
        show_help: bool
        show_version: bool
    """
    result = {
        "api_url": None,
        "user_id": None,
        "mock": False,
        "show_help": False,
        "show_version": False,
    }

    i = 0
    while i < len(args):
        arg = args[i]

        if arg == "--api-url":
            if i + 1 < len(args):
                result["api_url"] = args[i + 1]
                i += 1
            else:
                print("Error: --api-url requires a URL")
                sys.exit(1)
        elif arg == "--user-id":
            if i + 1 < len(args):
                try:
                    result["user_id"] = int(args[i + 1])
                except ValueError:
                    print("Error: --user-id must be an integer")
                    sys.exit(1)
                i += 1
            else:
                print("Error: --user-id requires an ID")
                sys.exit(1)
        elif arg == "--mock":
            result["mock"] = True
        elif arg in ("--help", "-h"):
            result["show_help"] = True
        elif arg in ("--version", "-v"):
            result["show_version"] = True
        else:
            print(f"Unknown option: {arg}")
            print("Run 'postdesk --help' for usage.")
            sys.exit(1)

        i += 1

    return result


def build_store(args: dict) -> HttpPostStore:
    """HTTP store for the configured API, or for an in-process mock with --mock."""
    if args["mock"]:
        return HttpPostStore(MOCK_API_URL, transport=httpx.ASGITransport(app=create_app()))
    return HttpPostStore(
        args["api_url"] or settings.API_URL,
        token=settings.API_TOKEN or None,
        timeout=settings.TIMEOUT_SECONDS,
    )


async def run(args: dict):
    user_id = args["user_id"] if args["user_id"] is not None else settings.USER_ID
    if user_id is None:
        print("Warning: no user id set (--user-id or POSTDESK_USER_ID). Creating posts will fail.")

    async with build_store(args) as store:
        repl = Repl(
            store,
            StaticSession(user_id),
            refetch_after_mutation=settings.REFETCH_AFTER_MUTATION,
        )
        await repl.start()


def main():
    """Main entry point."""
    args = parse_args(sys.argv[1:])

    if args["show_help"]:
        print_help()
        return

    if args["show_version"]:
        print(f"postdesk {__version__}")
        return

    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    asyncio.run(run(args))


if __name__ == "__main__":
    main()
