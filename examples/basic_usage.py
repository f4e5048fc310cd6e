#!/usr/bin/env python3
# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2025 Eul Bite

"""
Basic Log Analytics SDK Usage Example

Demonstrates:
- Sending a JSON body with a custom log type
- Letting the receiver use a body field as TimeGenerated
- Telling rejected requests apart from network failures

Run:
    export LOG_ANALYTICS_WORKSPACE_ID=<workspace id>
    export LOG_ANALYTICS_WORKSPACE_KEY=<primary key>
    python basic_usage.py
"""

import asyncio
import logging
from datetime import datetime, timezone

from loganalytics_client import (
    LogAnalyticsClient,
    RejectedResponseError,
    SendFailure,
    TransportError,
)

# Configure logging
logging.basicConfig(
    level=logging.DEBUG,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)


async def main():
    async with LogAnalyticsClient.from_env() as client:
        logger.info(f"Sending to {client.url}")

        # Simple send - body is any JSON text
        await client.send('[{"event": "app.start", "version": "1.4.2"}]', "DemoAppEvents")

        # Structured records; "ts" becomes TimeGenerated on the receiver side
        records = [
            {
                "event": "user.login",
                "user": "alice",
                "ts": datetime.now(timezone.utc).isoformat(),
            },
        ]
        await client.send_json(records, "DemoAppEvents", time_generated_field="ts")

        # send() raises SendFailure; inspect the cause to decide what to do
        try:
            await client.send('{"event": "app.stop"}', "DemoAppEvents")
        except SendFailure as e:
            if isinstance(e.cause, RejectedResponseError) and e.cause.status_code == 403:
                logger.error("Check the workspace key and the machine clock (x-ms-date skew)")
            elif isinstance(e.cause, TransportError):
                logger.error(f"Network problem, safe to retry: {e.cause}")
            else:
                raise


if __name__ == "__main__":
    asyncio.run(main())
