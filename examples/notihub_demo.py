#!/usr/bin/env python
"""Notification Hub Demo - demonstrates request signing and dispatch.

This script shows how to:
1. Build notifications for different platform formats
2. Inspect the signed requests a hub would send (dry run, no network)
3. Send or schedule a notification against a real hub

Usage:
    python examples/notihub_demo.py              # Dry run with a printing transport
    python examples/notihub_demo.py --live       # Send via NOTIHUB_CONNECTION_STRING / NOTIHUB_HUB_PATH

Note:
    - Live mode requires NOTIHUB_CONNECTION_STRING and NOTIHUB_HUB_PATH (or a .env file)
"""

import json
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from src.notihub import NotificationFormat, NotificationHub, new_notification
from src.notihub.config import HubConfig
from src.notihub.request_builder import HubRequest
from src.notihub.transport.base import HubTransport

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

DEMO_CONNECTION_STRING = (
    "Endpoint=sb://demo-ns.servicebus.windows.net/;"
    "SharedAccessKeyName=DefaultFullSharedAccessSignature;"
    "SharedAccessKey=ZGVtby1rZXk="
)


class PrintingTransport(HubTransport):
    """Transport that logs the request instead of sending it."""

    @property
    def name(self) -> str:
        return "printing"

    def execute(self, request: HubRequest, timeout: Optional[float] = None) -> bytes:
        logger.info(f"{request.method} {request.url}")
        for key, value in request.headers.items():
            # 只显示令牌前缀
            if key == "Authorization":
                value = value[:60] + "..."
            logger.info(f"  {key}: {value}")
        logger.info(f"  body: {request.body.decode('utf-8', errors='replace')}")
        return b""


def demo_dry_run():
    """Show the requests produced for each platform."""
    logger.info("=" * 60)
    logger.info("Dry Run Demo")
    logger.info("=" * 60)

    hub = NotificationHub.from_connection_string(
        DEMO_CONNECTION_STRING, "demohub", transport=PrintingTransport()
    )

    samples = [
        (NotificationFormat.TEMPLATE, {"message": "Hello from template"}),
        (NotificationFormat.ANDROID, {"data": {"message": "Hello Android"}}),
        (NotificationFormat.APPLE, {"aps": {"alert": "Hello iOS"}}),
        (NotificationFormat.APPLE, {"aps": {"content-available": 1}}),
    ]

    for fmt, body in samples:
        notification = new_notification(fmt, json.dumps(body))
        hub.send(notification, ["demo", "beta"])

    toast = '<toast><visual><binding template="ToastText01"><text id="1">Hello</text></binding></visual></toast>'
    hub.send(new_notification(NotificationFormat.WINDOWS, toast))

    tomorrow = datetime.now(timezone.utc) + timedelta(days=1)
    hub.schedule(new_notification(NotificationFormat.TEMPLATE, "{}"), tomorrow, ["later"])


def demo_live():
    """Send a template notification to the configured hub."""
    logger.info("=" * 60)
    logger.info("Live Demo")
    logger.info("=" * 60)

    config = HubConfig.from_env()
    if not config.is_configured:
        logger.error("NOTIHUB_CONNECTION_STRING / NOTIHUB_HUB_PATH not set")
        return

    hub = NotificationHub.from_config(config)
    result = hub.send(new_notification(NotificationFormat.TEMPLATE, '{"message": "notihub demo"}'))
    logger.info(f"Response: {result!r}")


def main():
    """Run demos based on command line arguments."""
    import argparse

    parser = argparse.ArgumentParser(description="Notification Hub Demo")
    parser.add_argument(
        "--live", action="store_true",
        help="Send to the hub configured via environment variables"
    )
    args = parser.parse_args()

    try:
        if args.live:
            demo_live()
        else:
            demo_dry_run()

        logger.info("Demo completed!")

    except KeyboardInterrupt:
        logger.info("\nDemo interrupted by user.")
    except Exception as e:
        logger.error(f"Demo failed: {e}")
        raise


if __name__ == "__main__":
    main()
