from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, Query, Response
from pydantic import BaseModel

from app.deps import get_book
from partnerhub.companies import PartnerBook
from partnerhub.masks import contact_urgency
from schemas.company import (
    BrokerCountDelta,
    BrokerIn,
    Company,
    CompanyFields,
    ContactIn,
    DashboardStats,
    Status,
)

router = APIRouter(prefix="/companies", tags=["companies"])
public_router = APIRouter(tags=["public"])


class UpcomingContact(BaseModel):
    company: Company
    urgency: str


@router.get("", response_model=List[Company])
async def list_companies(
    name: str = "",
    document: str = "",
    status: Optional[Status] = None,
    hiring_manager: Optional[str] = Query(default=None),
    book: PartnerBook = Depends(get_book),
):
    return book.filter(name=name, document=document, status=status, hiring_manager=hiring_manager)


@router.post("", response_model=Company, status_code=201)
async def create_company(body: CompanyFields, book: PartnerBook = Depends(get_book)):
    return book.create(body)


@router.get("/stats", response_model=DashboardStats)
async def dashboard_stats(book: PartnerBook = Depends(get_book)):
    return book.stats()


@router.get("/upcoming", response_model=List[UpcomingContact])
async def upcoming_contacts(book: PartnerBook = Depends(get_book)):
    return [
        UpcomingContact(company=c, urgency=contact_urgency(c.next_contact_date))
        for c in book.upcoming_contacts()
    ]


@router.get("/hiring-managers", response_model=List[str])
async def hiring_managers(book: PartnerBook = Depends(get_book)):
    return book.hiring_managers()


@router.get("/{company_id}", response_model=Company)
async def get_company(company_id: str, book: PartnerBook = Depends(get_book)):
    return book.get(company_id)


@router.patch("/{company_id}", response_model=Company)
async def update_company(
    company_id: str,
    changes: Dict[str, Any] = Body(...),
    book: PartnerBook = Depends(get_book),
):
    return book.update(company_id, changes)


@router.delete("/{company_id}", status_code=204)
async def delete_company(company_id: str, book: PartnerBook = Depends(get_book)):
    book.delete(company_id)
    return Response(status_code=204)


@router.post("/{company_id}/broker-count", response_model=Company)
async def adjust_broker_count(company_id: str, body: BrokerCountDelta, book: PartnerBook = Depends(get_book)):
    return book.adjust_broker_count(company_id, body.delta)


@router.post("/{company_id}/brokers", response_model=Company)
async def add_broker(company_id: str, body: BrokerIn, book: PartnerBook = Depends(get_book)):
    return book.add_broker(company_id, body)


@router.delete("/{company_id}/brokers/{broker_id}", response_model=Company)
async def remove_broker(company_id: str, broker_id: str, book: PartnerBook = Depends(get_book)):
    return book.remove_broker(company_id, broker_id)


@router.post("/{company_id}/contacts", response_model=Company)
async def log_contact(company_id: str, body: ContactIn, book: PartnerBook = Depends(get_book)):
    return book.log_contact(company_id, body)


@public_router.post("/register", response_model=Company, status_code=201)
async def public_registration(body: CompanyFields, book: PartnerBook = Depends(get_book)):
    """External onboarding form; the hiring manager is always the public-registration queue."""
    return book.register_public(body)
