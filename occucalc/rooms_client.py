# occucalc/rooms_client.py
"""
Client for the external `rooms` REST resource (list + create).
Calculation never depends on it; failures surface as RoomsAPIError.
"""

import logging
from typing import Any, Dict, List

import httpx

from occucalc.derivation import load_for

logger = logging.getLogger(__name__)


class RoomsAPIError(Exception):
    """The rooms backend was unreachable or answered with an error."""


def room_payload(row, factors: Dict[str, float]) -> Dict[str, Any]:
    return {
        "roomNumber": row.number,
        "roomName": row.name,
        "area": row.area,
        "occupancyType": row.type,
        "occupantLoad": load_for(row, factors),
    }


class RoomsClient:

    def __init__(self, base_url: str, timeout: float = 10.0, transport: httpx.BaseTransport = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    def _client(self) -> httpx.Client:
        return httpx.Client(base_url=self.base_url, timeout=self.timeout, transport=self.transport)

    def list_rooms(self) -> List[Dict[str, Any]]:
        try:
            with self._client() as client:
                resp = client.get("/api/rooms")
                resp.raise_for_status()
                data = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Listing rooms failed: {e}")
            raise RoomsAPIError(f"Could not list rooms: {e}") from e
        # Accept both a bare list and {"rooms": [...]}
        if isinstance(data, dict):
            data = data.get("rooms", [])
        return data if isinstance(data, list) else []

    def create_room(self, row, factors: Dict[str, float]) -> Dict[str, Any]:
        try:
            with self._client() as client:
                resp = client.post("/api/rooms", json=room_payload(row, factors))
                resp.raise_for_status()
                return resp.json() if resp.content else {}
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Creating room '{row.name}' failed: {e}")
            raise RoomsAPIError(f"Could not create room '{row.name}': {e}") from e

    def push_rows(self, rows, factors: Dict[str, float]) -> int:
        """POST every row in order; stops at the first failure."""
        created = 0
        for row in rows:
            self.create_room(row, factors)
            created += 1
        logger.info(f"Pushed {created} rooms to {self.base_url}")
        return created
