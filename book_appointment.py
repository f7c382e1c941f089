#!/usr/bin/env python3
"""
Submit a booking request and wait for the outcome
Usage: python book_appointment.py dentist --time-window morning --api http://localhost:3001
"""

import argparse
import asyncio
import json
import logging
import sys

import httpx

from callbook.client import BookingClient, BookingClientError, PollingTimeout

logging.basicConfig(level=logging.INFO, format="%(message)s")
logger = logging.getLogger(__name__)


async def book(args) -> int:
    async with httpx.AsyncClient(base_url=args.api, timeout=30.0) as http:
        client = BookingClient(http)
        try:
            created = await client.create_appointment(
                args.service_type,
                preferred_date_from=args.date_from,
                preferred_date_to=args.date_to,
                preferred_time_window=args.time_window,
                location=args.location,
                urgency=args.urgency,
            )
            logger.info(f"📥 Appointment {created['id']}: {created['status']} - {created['message']}")

            result = await client.wait_for_result(
                created["id"], interval=args.interval, timeout=args.timeout
            )
        except (BookingClientError, PollingTimeout) as e:
            logger.error(f"❌ {e}")
            return 1

    print(json.dumps(result, indent=2))
    return 0 if result["status"] == "CONFIRMED" else 2


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Book an appointment through the API")
    parser.add_argument("service_type")
    parser.add_argument("--date-from")
    parser.add_argument("--date-to")
    parser.add_argument("--time-window")
    parser.add_argument("--location")
    parser.add_argument("--urgency", choices=["ASAP", "flexible"])
    parser.add_argument("--api", default="http://localhost:3001")
    parser.add_argument("--interval", type=float, default=3.0)
    parser.add_argument("--timeout", type=float, default=300.0)
    return asyncio.run(book(parser.parse_args(argv)))


if __name__ == "__main__":
    sys.exit(main())
