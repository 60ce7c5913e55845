import time

from fastapi import APIRouter, Depends, Query, Request, Response
from pydantic import BaseModel

from app.deps import get_book
from partnerhub import exports, reports
from partnerhub.companies import PartnerBook
from partnerhub.openai_client import generate_insights
from schemas.company import Status

router = APIRouter(tags=["reports"])


class RestoreOut(BaseModel):
    restored: int


class InsightsOut(BaseModel):
    text: str


def _attachment(content, media_type: str, filename: str) -> Response:
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


def _stamp() -> int:
    return int(time.time() * 1000)


@router.get("/exports/csv")
async def export_csv(
    name: str = "",
    document: str = "",
    status: Status | None = None,
    hiring_manager: str | None = None,
    book: PartnerBook = Depends(get_book),
):
    """CSV of the filtered view, exactly what the operator sees in the list."""
    rows = book.filter(name=name, document=document, status=status, hiring_manager=hiring_manager)
    return _attachment(exports.export_csv(rows).encode("utf-8"), "text/csv; charset=utf-8", f"parceiros-{_stamp()}.csv")


@router.get("/exports/txt")
async def export_txt(book: PartnerBook = Depends(get_book)):
    content = exports.export_txt(book.list())
    return _attachment(content.encode("utf-8"), "text/plain; charset=utf-8", f"parceiros-hub-{_stamp()}.txt")


@router.get("/exports/json")
async def export_json(book: PartnerBook = Depends(get_book)):
    return _attachment(exports.export_json(book.list()), "application/json", f"partnerhub-backup-{_stamp()}.json")


@router.post("/restore", response_model=RestoreOut)
async def restore(
    request: Request,
    confirm: bool = Query(default=False),
    book: PartnerBook = Depends(get_book),
):
    """Replace the whole book with a JSON backup sent as the raw request body."""
    companies = exports.restore_from_json(book, await request.body(), confirmed=confirm)
    return RestoreOut(restored=len(companies))


@router.get("/reports/summary.pdf")
async def summary_pdf(book: PartnerBook = Depends(get_book)):
    return _attachment(reports.summary_pdf(book.list()), "application/pdf", f"relatorio-geral-parceiros-{_stamp()}.pdf")


@router.get("/reports/geographic.pdf")
async def geographic_pdf(book: PartnerBook = Depends(get_book)):
    return _attachment(
        reports.geographic_pdf(book.list()), "application/pdf", f"relatorio-geografico-parceiros-{_stamp()}.pdf"
    )


@router.get("/reports/companies/{company_id}.pdf")
async def company_pdf(company_id: str, book: PartnerBook = Depends(get_book)):
    company = book.get(company_id)
    return _attachment(reports.company_dossier_pdf(company), "application/pdf", reports.dossier_filename(company))


@router.post("/insights", response_model=InsightsOut)
async def insights(book: PartnerBook = Depends(get_book)):
    return InsightsOut(text=await generate_insights(book.list()))
