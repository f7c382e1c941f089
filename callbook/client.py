"""
HTTP client for the booking API
Submits a request, polls status until a terminal state, then fetches the result once.
"""

import asyncio
import logging
from typing import Any, Optional

import httpx

logger = logging.getLogger(__name__)

TERMINAL_STATUSES = frozenset({"CONFIRMED", "FAILED"})
POLL_INTERVAL_SECONDS = 3.0


class BookingClientError(Exception):
    def __init__(self, status_code: int, message: str):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


class PollingTimeout(Exception):
    pass


class BookingClient:
    def __init__(self, client: httpx.AsyncClient):
        self._client = client

    async def _request(self, method: str, path: str, **kwargs) -> dict:
        resp = await self._client.request(method, path, **kwargs)
        if resp.status_code >= 400:
            try:
                message = resp.json().get("error", resp.text)
            except ValueError:
                message = resp.text
            raise BookingClientError(resp.status_code, message)
        return resp.json()

    async def create_appointment(
        self,
        service_type: str,
        preferred_date_from: Optional[str] = None,
        preferred_date_to: Optional[str] = None,
        preferred_time_window: Optional[str] = None,
        location: Optional[str] = None,
        urgency: Optional[str] = None,
    ) -> dict:
        body: dict[str, Any] = {"serviceType": service_type}
        optional = {
            "preferredDateFrom": preferred_date_from,
            "preferredDateTo": preferred_date_to,
            "preferredTimeWindow": preferred_time_window,
            "location": location,
            "urgency": urgency,
        }
        body.update({k: v for k, v in optional.items() if v})
        return await self._request("POST", "/appointments", json=body)

    async def get_status(self, appointment_id: int) -> dict:
        return await self._request("GET", f"/appointments/{appointment_id}/status")

    async def get_result(self, appointment_id: int) -> dict:
        return await self._request("GET", f"/appointments/{appointment_id}/result")

    async def wait_for_result(
        self,
        appointment_id: int,
        interval: float = POLL_INTERVAL_SECONDS,
        timeout: Optional[float] = None,
    ) -> dict:
        """Poll status every interval until terminal, then fetch the result.

        The server enforces no deadline on an appointment stuck in CALLING,
        so callers that cannot wait forever should pass a timeout.
        """
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout if timeout is not None else None

        while True:
            status = await self.get_status(appointment_id)
            logger.debug(f"Appointment {appointment_id} status: {status['status']}")
            if status["status"] in TERMINAL_STATUSES:
                return await self.get_result(appointment_id)

            if deadline is not None and loop.time() + interval > deadline:
                raise PollingTimeout(
                    f"Appointment {appointment_id} still {status['status']} after {timeout}s"
                )
            await asyncio.sleep(interval)
