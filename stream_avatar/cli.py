#!/usr/bin/env python3
"""
Stream Avatar command line.

Runs the create flow without a browser or the HTTP service.

Usage:
    stream-avatar token
    stream-avatar visuals --gender FEMALE --page 2
    stream-avatar voices
    stream-avatar create --alias "My Assistant" --visual-id <id> [--voice-id <id>] [--org-id <id>]
    stream-avatar serve --port 8030

Credentials come from --email/--secret-key or UNITH_EMAIL/UNITH_SECRET_KEY.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from typing import List, Optional

from . import workflow
from .config import settings
from .errors import PlatformError, WorkflowError
from .sessions import CreatorSession

EXIT_OK = 0
EXIT_FAILED = 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="stream-avatar",
        description="Create streaming-ready Digital Humans on the Unith platform",
    )
    parser.add_argument("--email", default=os.getenv("UNITH_EMAIL", ""), help="Account email")
    parser.add_argument(
        "--secret-key",
        default=os.getenv("UNITH_SECRET_KEY", ""),
        help="Account secret key (prefer UNITH_SECRET_KEY)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("token", help="Print a bearer token (valid 7 days)")

    visuals = sub.add_parser("visuals", help="List head visuals, one page at a time")
    visuals.add_argument("--gender", default="", help="MALE, FEMALE or empty for all")
    visuals.add_argument("--page", type=int, default=1)

    sub.add_parser("voices", help=f"List {settings.VOICE_PROVIDER} voices")

    create = sub.add_parser("create", help="Create a streaming avatar")
    create.add_argument("--alias", required=True, help="Alias and name of the head")
    create.add_argument("--visual-id", required=True, help="Head visual id")
    create.add_argument("--voice-id", default="", help="Voice id (default: first listed voice)")
    create.add_argument("--org-id", default="", help="Org for multi-org accounts")

    serve = sub.add_parser("serve", help="Run the HTTP service")
    serve.add_argument("--host", default="0.0.0.0")
    serve.add_argument("--port", type=int, default=8030)

    return parser


async def _login(args: argparse.Namespace) -> CreatorSession:
    session = CreatorSession(session_id="cli")
    await workflow.authenticate(session, args.email, args.secret_key)
    return session


async def cmd_token(args: argparse.Namespace) -> int:
    session = await _login(args)
    print(session.token)
    return EXIT_OK


async def cmd_visuals(args: argparse.Namespace) -> int:
    session = await _login(args)
    if args.gender:
        await workflow.load_visuals(session, args.gender)
    elif session.gallery_error:
        print(f"Error: {session.gallery_error}", file=sys.stderr)
        return EXIT_FAILED
    page = workflow.visuals_page(session, args.page)

    for v in page.items:
        print(f"{v.id:40s} {v.name:30s} {v.gender:8s} {v.thumbnail}")
    print(f"Page {page.page} of {page.page_count} · {page.total} total")
    return EXIT_OK


async def cmd_voices(args: argparse.Namespace) -> int:
    session = await _login(args)
    if not session.voices:
        print(session.error or "No voices available.", file=sys.stderr)
        return EXIT_FAILED
    for v in session.voices:
        print(f"{v.voice_id:32s} {v.label}")
    return EXIT_OK


async def cmd_create(args: argparse.Namespace) -> int:
    session = await _login(args)
    await workflow.create_streaming_avatar(
        session,
        alias=args.alias,
        visual_id=args.visual_id,
        voice_id=args.voice_id or None,
        org_id=args.org_id or None,
    )

    print(f"Head ID: {session.head_id}")
    if session.stream_url:
        print(f"Stream URL: {session.stream_url}")
        print("Keep this URL safe; it includes your org API key.")
    else:
        print("Head created, but the platform did not report a usable public URL.")
    return EXIT_OK


def cmd_serve(args: argparse.Namespace) -> int:
    import uvicorn

    uvicorn.run("stream_avatar.main:app", host=args.host, port=args.port)
    return EXIT_OK


COMMANDS = {
    "token": cmd_token,
    "visuals": cmd_visuals,
    "voices": cmd_voices,
    "create": cmd_create,
}


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.LOG_LEVEL.upper(),
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "serve":
        return cmd_serve(args)

    try:
        return asyncio.run(COMMANDS[args.command](args))
    except (WorkflowError, PlatformError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FAILED


if __name__ == "__main__":
    raise SystemExit(main())
