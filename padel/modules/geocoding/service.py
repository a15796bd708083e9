"""
Nominatim (OpenStreetMap) geocoding client.

Turns a venue address into (lat, lng) so outdoor bookings can show a weather
forecast. Falls back to the UK postcode inside the address when the full
address does not resolve. Returns None on any failure so booking creation is
never blocked.
"""

import logging
import re
from typing import Optional, Tuple

import httpx

from padel.config import settings

logger = logging.getLogger(__name__)

UK_POSTCODE_REGEX = re.compile(r"[A-Z]{1,2}\d[A-Z\d]?\s*\d[A-Z]{2}", re.IGNORECASE)


def extract_postcode(address: str) -> Optional[str]:
    match = UK_POSTCODE_REGEX.search(address)
    return match.group(0) if match else None


async def _search(client: httpx.AsyncClient, query: str) -> Optional[Tuple[float, float]]:
    resp = await client.get(
        settings.geocoding_api_url,
        params={
            "q": query,
            "format": "json",
            "limit": 1,
            "countrycodes": settings.geocoding_country_codes,
        },
        headers={"User-Agent": settings.geocoding_user_agent},
    )
    if resp.status_code != 200:
        logger.info(f"Geocoding returned HTTP {resp.status_code} for: {query}")
        return None
    data = resp.json()
    if not data:
        return None
    return float(data[0]["lat"]), float(data[0]["lon"])


async def geocode_address(
    address: str,
    client: Optional[httpx.AsyncClient] = None,
) -> Optional[Tuple[float, float]]:
    """
    Geocode an address to (latitude, longitude).

    Args:
        address: Free-form venue address, e.g. "Padel Club, 1 High St, London SW1A 1AA"
        client: Optional httpx client (tests pass one with a mock transport)

    Returns:
        (lat, lng) or None if nothing matched or the request failed.
    """
    if not address or not address.strip():
        return None

    owns_client = client is None
    if owns_client:
        client = httpx.AsyncClient(timeout=settings.http_timeout_sec)
    try:
        result = await _search(client, address)
        if result:
            return result
        postcode = extract_postcode(address)
        if postcode:
            return await _search(client, postcode)
        logger.info(f"Geocoding found no match for: {address}")
        return None
    except Exception:
        logger.warning(f"Geocoding failed for address: {address}", exc_info=True)
        return None
    finally:
        if owns_client:
            await client.aclose()
