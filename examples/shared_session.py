#!/usr/bin/env python3
# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2025 Eul Bite

"""
Sharing one aiohttp session between the SDK and the rest of an application.

Demonstrates:
- Passing a caller-owned transport (the client does not close it)
- Typed errors from post() instead of SendFailure
- Sovereign cloud endpoints via url_suffix

Run:
    python shared_session.py <workspace id> <workspace key>
"""

import asyncio
import sys

import aiohttp

from loganalytics_client import (
    AiohttpTransport,
    LogAnalyticsClient,
    RejectedResponseError,
)


async def main(workspace_id: str, workspace_key: str) -> int:
    async with aiohttp.ClientSession() as session:
        transport = AiohttpTransport(session=session)
        client = LogAnalyticsClient(
            workspace_id,
            workspace_key,
            transport,
            url_suffix="ods.opinsights.azure.com",  # e.g. ods.opinsights.azure.us
        )

        try:
            await client.post('[{"source": "shared_session"}]', "DemoAppEvents")
        except RejectedResponseError as e:
            print(f"Rejected: {e.status_code} {e.reason} {e.body}", file=sys.stderr)
            return 1
        finally:
            # Does not close the session: it belongs to this function
            await client.close()

        print(f"Session still open: {not session.closed}")
    return 0


if __name__ == "__main__":
    if len(sys.argv) != 3:
        print(__doc__)
        sys.exit(2)
    sys.exit(asyncio.run(main(sys.argv[1], sys.argv[2])))
