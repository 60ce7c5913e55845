# ---------- partnerhub/oracle_client.py ----------
from __future__ import annotations

import logging
from typing import Any, List, Optional

from google import genai
from google.genai import types

from partnerhub import settings
from partnerhub.errors import SearchFailed
from partnerhub.prospecting import Citation, GeoPoint, Grounding, OracleResult

logger = logging.getLogger(__name__)


def _grounding_tool(grounding: Grounding) -> types.Tool:
    if grounding == Grounding.MAPS:
        return types.Tool(google_maps=types.GoogleMaps())
    return types.Tool(google_search=types.GoogleSearch())


def _build_config(grounding: Grounding, geo: Optional[GeoPoint]) -> types.GenerateContentConfig:
    tool_config = None
    if geo is not None:
        tool_config = types.ToolConfig(
            retrieval_config=types.RetrievalConfig(
                lat_lng=types.LatLng(latitude=geo.latitude, longitude=geo.longitude)
            )
        )
    return types.GenerateContentConfig(tools=[_grounding_tool(grounding)], tool_config=tool_config)


def _citations(response: Any) -> List[Citation]:
    """Grounding chunks of the first candidate, maps results before web results as returned."""
    out: List[Citation] = []
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return out
    metadata = getattr(candidates[0], "grounding_metadata", None)
    for chunk in getattr(metadata, "grounding_chunks", None) or []:
        maps = getattr(chunk, "maps", None)
        web = getattr(chunk, "web", None)
        if maps is not None and getattr(maps, "uri", None):
            out.append(Citation(kind=Grounding.MAPS, title=maps.title or "", uri=maps.uri))
        elif web is not None and getattr(web, "uri", None):
            out.append(Citation(kind=Grounding.WEB, title=web.title or "", uri=web.uri))
    return out


class OracleClient:
    """Grounded text generation against the Gemini API.

    No retry and no client-side timeout: a call waits until the transport
    resolves or errors. Every failure surfaces as ``SearchFailed``.
    """

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None, client: Any = None):
        self.model = model or settings.ORACLE_MODEL
        self._api_key = api_key or settings.GEMINI_API_KEY
        self._client = client

    def _get_client(self) -> Any:
        if self._client is None:
            self._client = genai.Client(api_key=self._api_key)
        return self._client

    async def generate(self, prompt: str, grounding: Grounding, geo: Optional[GeoPoint] = None) -> OracleResult:
        config = _build_config(grounding, geo)
        try:
            response = await self._get_client().aio.models.generate_content(
                model=self.model,
                contents=prompt,
                config=config,
            )
        except Exception as exc:
            logger.error("oracle call failed grounding=%s: %s", grounding.value, exc)
            raise SearchFailed(
                "Erro ao realizar busca online com a IA. Verifique sua conexão ou tente novamente mais tarde."
            ) from exc
        text = getattr(response, "text", None) or ""
        citations = _citations(response)
        logger.info("oracle call ok grounding=%s chars=%d citations=%d", grounding.value, len(text), len(citations))
        return OracleResult(raw_text=text, citations=tuple(citations))
