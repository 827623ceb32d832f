"""Best-effort current position for biasing map grounding."""
from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional

import httpx

from src.core.config import ApiSettings
from src.core.schemas import Coordinates

logger = logging.getLogger(__name__)

Locator = Callable[[], Awaitable[Optional[Coordinates]]]


async def locate_by_ip(
    url: str,
    *,
    user_agent: str = "EscapadeLocale/1.0",
    timeout: float = 10.0,
) -> Optional[Coordinates]:
    """Return the approximate position of this host or ``None``."""

    try:
        async with httpx.AsyncClient(timeout=timeout, headers={"User-Agent": user_agent}) as client:
            response = await client.get(url)
            response.raise_for_status()
            data = response.json()
    except Exception as exc:
        logger.warning(f"Position lookup failed: {str(exc)}")
        return None

    if not isinstance(data, dict) or data.get("status") == "fail":
        return None

    lat = data.get("lat", data.get("latitude"))
    lon = data.get("lon", data.get("longitude"))
    try:
        return Coordinates(latitude=float(lat), longitude=float(lon))
    except (TypeError, ValueError):
        logger.warning("Position lookup returned unusable coordinates: %s, %s", lat, lon)
        return None


class CoordinateProvider:
    """Holds the searcher's current position, when one is known.

    The locator is queried once, eagerly, by :meth:`start` and never again.
    A position pushed by the client through :meth:`update`, including a
    cleared one, takes precedence over a locator result that arrives later.
    Failures leave the position unknown; they are never raised.
    """

    def __init__(self, locator: Optional[Locator] = None) -> None:
        self._locator = locator
        self._coordinates: Optional[Coordinates] = None
        self._pushed = False
        self._task: Optional[asyncio.Task] = None

    @property
    def current(self) -> Optional[Coordinates]:
        return self._coordinates

    def update(self, coordinates: Optional[Coordinates]) -> None:
        logger.info("Current position set to %s", coordinates)
        self._pushed = True
        self._coordinates = coordinates

    def start(self) -> None:
        """Schedule the one-shot position lookup on the running event loop."""

        if self._locator is None or self._task is not None:
            return
        self._task = asyncio.create_task(self._resolve())

    async def _resolve(self) -> None:
        try:
            coordinates = await self._locator()
        except Exception as exc:
            logger.warning(f"Position unavailable: {str(exc)}")
            return
        if coordinates is None:
            logger.info("Position unavailable; searches run without a location bias")
            return
        if self._pushed:
            logger.info("Ignoring looked-up position %s; the client set its own", coordinates)
            return
        logger.info("Position resolved to %s", coordinates)
        self._coordinates = coordinates

    async def _wait(self) -> Optional[Coordinates]:
        """Wait for the pending lookup, if any, and return the position."""

        if self._task is not None:
            await self._task
        return self._coordinates

    async def close(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass


def create_coordinate_provider(settings: ApiSettings) -> CoordinateProvider:
    if not settings.geolocation_enabled:
        return CoordinateProvider()

    async def _locate() -> Optional[Coordinates]:
        return await locate_by_ip(settings.geolocation_url, timeout=settings.geolocation_timeout_s)

    return CoordinateProvider(_locate)
