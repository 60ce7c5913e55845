from __future__ import annotations

import logging
from typing import Optional

from partnerhub import settings
from partnerhub.registry_lookup import get_json
from schemas.lookup import GeocodeResult

logger = logging.getLogger(__name__)


async def geocode(query: str) -> Optional[GeocodeResult]:
    """First Nominatim match for a free-text place, or None."""
    query = (query or "").strip()
    if not query:
        return None
    data = await get_json(settings.NOMINATIM_URL, params={"format": "json", "q": query, "limit": 1})
    if not isinstance(data, list) or not data:
        logger.info("geocode miss query=%s", query)
        return None
    first = data[0]
    try:
        return GeocodeResult(lat=float(first["lat"]), lng=float(first["lon"]), display_name=first.get("display_name"))
    except (KeyError, TypeError, ValueError) as exc:
        logger.warning("geocode returned an unusable match for query=%s: %s", query, exc)
        return None
