# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2025 Eul Bite

"""
Log Analytics SDK CLI - send records and debug Shared Key signatures.

Usage:
    python -m loganalytics_client send --log-type MyLog '[{"msg": "hi"}]'
    python -m loganalytics_client send --log-type MyLog --file records.json
    python -m loganalytics_client sign --date "Fri, 20 Jul 2018 16:28:59 GMT" --length 2

Credentials come from LOG_ANALYTICS_WORKSPACE_ID / LOG_ANALYTICS_WORKSPACE_KEY
unless --workspace-id / --workspace-key are given.
"""

import argparse
import asyncio
import logging
import sys

import aiofiles

from .client import ClientConfig, LogAnalyticsClient
from .errors import ArgumentError, SendFailure
from .signing import (
    build_authorization,
    build_string_to_sign,
    compute_signature,
    content_length,
    format_x_ms_date,
    verify_signature,
)

logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="loganalytics-sdk",
        description="Log Analytics SDK - Shared Key signed log ingestion",
    )
    parser.add_argument(
        "--workspace-id",
        help="Workspace ID (default: $LOG_ANALYTICS_WORKSPACE_ID)",
    )
    parser.add_argument(
        "--workspace-key",
        help="Base64 shared key (default: $LOG_ANALYTICS_WORKSPACE_KEY)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # send command
    send_parser = subparsers.add_parser("send", help="Send log records")
    send_parser.add_argument(
        "--log-type",
        required=True,
        help="Custom log (table) name",
    )
    send_parser.add_argument(
        "--time-field",
        help="Body field the receiver should use as TimeGenerated",
    )
    source = send_parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "body",
        nargs="?",
        help="Body JSON, or '-' to read from stdin",
    )
    source.add_argument(
        "--file",
        help="Read body from file",
    )

    # sign command
    sign_parser = subparsers.add_parser("sign", help="Print string-to-sign and Authorization")
    sign_parser.add_argument(
        "--date",
        help="x-ms-date value (default: now)",
    )
    length = sign_parser.add_mutually_exclusive_group(required=True)
    length.add_argument(
        "--length",
        type=int,
        help="Body length in bytes",
    )
    length.add_argument(
        "--body",
        help="Body text (its UTF-8 length is used)",
    )
    sign_parser.add_argument(
        "--check",
        metavar="SIGNATURE",
        help="Verify SIGNATURE instead of printing a new one",
    )

    return parser


def load_config(args: argparse.Namespace) -> ClientConfig:
    """Environment config with command-line overrides."""
    config = ClientConfig.from_env()
    if args.workspace_id:
        config.workspace_id = args.workspace_id
    if args.workspace_key:
        config.workspace_key = args.workspace_key
    return config


async def read_body(args: argparse.Namespace) -> str:
    """Body from --file, stdin ('-'), or the positional argument."""
    if args.file:
        async with aiofiles.open(args.file, encoding="utf-8") as f:
            return await f.read()
    if args.body == "-":
        return await asyncio.to_thread(sys.stdin.read)
    return args.body


async def cmd_send(args: argparse.Namespace) -> int:
    """Send one request."""
    try:
        body = await read_body(args)
    except OSError as e:
        print(f"Cannot read body: {e}", file=sys.stderr)
        return 2

    try:
        config = load_config(args)
        logger.debug(f"Sending to workspace {config.workspace_id or '<unset>'}")
        client = LogAnalyticsClient.from_config(config)
    except ArgumentError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 2

    async with client:
        try:
            await client.send(body, args.log_type, args.time_field)
        except SendFailure as e:
            print(str(e), file=sys.stderr)
            return 1

    print(f"Sent {content_length(body)} bytes to {args.log_type}")
    return 0


async def cmd_sign(args: argparse.Namespace) -> int:
    """Print or verify a signature for debugging 403 responses."""
    config = load_config(args)
    if not config.workspace_key:
        print("Workspace key required (--workspace-key or env)", file=sys.stderr)
        return 2

    x_ms_date = args.date or format_x_ms_date()
    length = args.length if args.body is None else content_length(args.body)
    string_to_sign = build_string_to_sign(length, x_ms_date)

    try:
        if args.check:
            valid = verify_signature(config.workspace_key, string_to_sign, args.check)
            print(f"Signature: {'VALID' if valid else 'INVALID'}")
            return 0 if valid else 1

        signature = compute_signature(config.workspace_key, string_to_sign)
    except ArgumentError as e:
        print(str(e), file=sys.stderr)
        return 2

    print(f"x-ms-date:      {x_ms_date}")
    print(f"String-to-sign: {string_to_sign.encode('unicode_escape').decode('ascii')}")
    print(f"Signature:      {signature}")
    if config.workspace_id:
        print(f"Authorization:  {build_authorization(config.workspace_id, signature)}")

    return 0


async def main_async(args: argparse.Namespace) -> int:
    """Async main entry point."""
    if args.command == "send":
        return await cmd_send(args)
    elif args.command == "sign":
        return await cmd_sign(args)
    else:
        parser = create_parser()
        parser.print_help()
        return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    return asyncio.run(main_async(args))


if __name__ == "__main__":
    sys.exit(main())
