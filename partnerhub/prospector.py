"""Prospecting session: dispatch a search, call the oracle, extract leads."""
from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from partnerhub.lead_import import to_draft
from partnerhub.lead_parser import ParsedLead, extract_leads
from partnerhub.oracle_client import OracleClient
from partnerhub.outreach import whatsapp_link
from partnerhub.prospecting import (
    OracleResult,
    SearchKind,
    SearchRequest,
    build_prompt,
    geo_bias_for,
    grounding_for,
)
from partnerhub.storage import RecentSearches
from partnerhub.audit_log import log_json
from schemas.company import CompanyDraft

logger = logging.getLogger(__name__)

# Only searches whose text names a place or a company are worth offering again
_RECORDED_KINDS = (SearchKind.REGION, SearchKind.COMPANY_NAME)


@dataclass
class SearchOutcome:
    request: SearchRequest
    result: OracleResult
    leads: List[ParsedLead] = field(default_factory=list)


class ProspectingSession:
    """Holds the one live search result of an operator session.

    A newer search supersedes any search still in flight: when an older call
    resolves after a newer one started, its result is dropped and the caller
    gets ``None``.
    """

    def __init__(self, oracle: OracleClient, recent: Optional[RecentSearches] = None):
        self.oracle = oracle
        self.recent = recent
        self.current: Optional[SearchOutcome] = None
        self._tokens = itertools.count(1)
        self._latest = 0

    async def search(self, request: SearchRequest) -> Optional[SearchOutcome]:
        prompt = build_prompt(request)  # raises InvalidSearchRequest before any call
        token = next(self._tokens)
        self._latest = token
        self.current = None

        if self.recent is not None and request.kind in _RECORDED_KINDS and request.query_text.strip():
            self.recent.record(request.query_text)

        grounding = grounding_for(request.kind)
        log_json("prospecting", "info", "search_started", {"kind": request.kind.value, "grounding": grounding.value})
        try:
            result = await self.oracle.generate(prompt, grounding, geo_bias_for(request))
        except Exception:
            if token != self._latest:
                logger.info("discarding stale search failure token=%d latest=%d", token, self._latest)
                return None
            log_json("prospecting", "error", "search_failed", {"kind": request.kind.value})
            raise

        if token != self._latest:
            logger.info("discarding stale search result token=%d latest=%d", token, self._latest)
            return None
        outcome = SearchOutcome(request=request, result=result, leads=extract_leads(result.raw_text))
        self.current = outcome

        log_json(
            "prospecting",
            "info",
            "search_completed",
            {"kind": request.kind.value, "leads": len(outcome.leads), "citations": len(result.citations)},
        )
        return outcome

    def _lead(self, index: int) -> ParsedLead:
        if self.current is None:
            raise LookupError("no search result in this session")
        return self.current.leads[index]

    def import_lead(self, index: int) -> CompanyDraft:
        return to_draft(self._lead(index), self.current.request.kind)

    def contact_link(self, index: int) -> str:
        return whatsapp_link(self._lead(index), self.current.request.kind)
