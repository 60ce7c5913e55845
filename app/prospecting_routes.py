import logging

from fastapi import APIRouter, Depends, HTTPException

from app.deps import get_recent, get_session
from partnerhub.prospecting import GeoPoint, Grounding, SearchRequest, citations_by_kind
from partnerhub.prospector import ProspectingSession, SearchOutcome
from partnerhub.storage import RecentSearches
from schemas.company import CompanyDraft
from schemas.prospecting import (
    CitationOut,
    ContactLinkOut,
    LeadOut,
    RecentSearchesOut,
    SearchIn,
    SearchOut,
)

router = APIRouter(prefix="/prospecting", tags=["prospecting"])
logger = logging.getLogger(__name__)


def _to_out(outcome: SearchOutcome) -> SearchOut:
    result = outcome.result
    return SearchOut(
        kind=outcome.request.kind,
        raw_text=result.raw_text,
        leads=[
            LeadOut(
                index=i,
                name=lead.name,
                address=lead.address,
                phone=lead.phone,
                registry_number=lead.registry_number,
                registry_type=lead.registry_type,
                website=lead.website,
            )
            for i, lead in enumerate(outcome.leads)
        ],
        map_citations=[CitationOut(kind=c.kind, title=c.title, uri=c.uri) for c in citations_by_kind(result, Grounding.MAPS)],
        web_citations=[CitationOut(kind=c.kind, title=c.title, uri=c.uri) for c in citations_by_kind(result, Grounding.WEB)],
    )


@router.post("/search", response_model=SearchOut)
async def search(body: SearchIn, session: ProspectingSession = Depends(get_session)):
    geo = GeoPoint(latitude=body.geo.latitude, longitude=body.geo.longitude) if body.geo else None
    outcome = await session.search(SearchRequest(kind=body.kind, query_text=body.query, geo=geo))
    if outcome is None:
        raise HTTPException(status_code=409, detail="Busca substituída por uma consulta mais recente.")
    return _to_out(outcome)


@router.get("/result", response_model=SearchOut)
async def current_result(session: ProspectingSession = Depends(get_session)):
    if session.current is None:
        raise HTTPException(status_code=404, detail="Nenhuma busca realizada nesta sessão.")
    return _to_out(session.current)


def _check_index(session: ProspectingSession, index: int) -> None:
    if session.current is None or not 0 <= index < len(session.current.leads):
        raise HTTPException(status_code=404, detail="Resultado não encontrado.")


@router.post("/leads/{index}/import", response_model=CompanyDraft)
async def import_lead(index: int, session: ProspectingSession = Depends(get_session)):
    """Draft for the partner form; nothing is saved until the operator submits it."""
    _check_index(session, index)
    return session.import_lead(index)


@router.get("/leads/{index}/contact-link", response_model=ContactLinkOut)
async def contact_link(index: int, session: ProspectingSession = Depends(get_session)):
    _check_index(session, index)
    return ContactLinkOut(url=session.contact_link(index))


@router.get("/recent", response_model=RecentSearchesOut)
async def recent_searches(recent: RecentSearches = Depends(get_recent)):
    return RecentSearchesOut(queries=recent.list())
