import io
import re
import unicodedata
from datetime import datetime
from typing import List, Optional, Sequence
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from partnerhub.errors import ExportError
from schemas.company import Company, Status

BRAND_BLUE = colors.Color(37 / 255, 99 / 255, 235 / 255)
SLATE_DARK = colors.Color(30 / 255, 41 / 255, 59 / 255)
SLATE_MUTED = colors.Color(100 / 255, 116 / 255, 139 / 255)
ACTIVE_GREEN = colors.Color(22 / 255, 163 / 255, 74 / 255)


def _styles():
    base = getSampleStyleSheet()
    return {
        "brand": ParagraphStyle("brand", parent=base["Title"], alignment=0, fontSize=20, textColor=BRAND_BLUE),
        "title": ParagraphStyle("title", parent=base["Heading2"], textColor=SLATE_DARK),
        "muted": ParagraphStyle("muted", parent=base["Normal"], fontSize=9, textColor=SLATE_MUTED),
        "body": ParagraphStyle("body", parent=base["Normal"], fontSize=10, textColor=SLATE_DARK),
        "section": ParagraphStyle("section", parent=base["Heading4"], textColor=BRAND_BLUE),
        "cell": ParagraphStyle("cell", parent=base["Normal"], fontSize=8, leading=10),
    }


def _stamp(now: Optional[datetime]) -> str:
    return (now or datetime.now()).strftime("%d/%m/%Y, %H:%M:%S")


def _build(pagesize, story) -> bytes:
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=pagesize,
        leftMargin=14 * mm,
        rightMargin=14 * mm,
        topMargin=14 * mm,
        bottomMargin=14 * mm,
        title="PartnerHub",
    )
    doc.build(story)
    return buffer.getvalue()


def _grid(head: List[str], rows: List[List[str]], cell_style, col_widths=None, striped: bool = True) -> Table:
    data = [head] + [[Paragraph(escape(str(v)), cell_style) for v in row] for row in rows]
    table = Table(data, colWidths=col_widths, repeatRows=1)
    style = [
        ("BACKGROUND", (0, 0), (-1, 0), BRAND_BLUE),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, 0), 9),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ("TOPPADDING", (0, 0), (-1, -1), 3),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 3),
    ]
    if striped:
        style.append(("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, colors.whitesmoke]))
    else:
        style.append(("GRID", (0, 0), (-1, -1), 0.25, colors.lightgrey))
    table.setStyle(TableStyle(style))
    return table


def summary_pdf(companies: Sequence[Company], now: Optional[datetime] = None) -> bytes:
    """Landscape table of every partner with the headline counts."""
    s = _styles()
    active = sum(1 for c in companies if c.status == Status.ACTIVE)
    rows = [
        [
            c.name,
            c.hiring_manager,
            c.partnership_manager or c.responsible,
            c.phone,
            c.status.value,
            f"{c.commission_rate:g}%",
            str(c.broker_count),
        ]
        for c in companies
    ]
    story = [
        Paragraph("PartnerHub", s["brand"]),
        Paragraph("Relatório Consolidado de Parceiros", s["title"]),
        Paragraph(f"Emitido em: {_stamp(now)}", s["muted"]),
        Spacer(1, 6 * mm),
        Paragraph(f"Total de Parceiros: {len(companies)} ({active} Ativos)", s["body"]),
        Spacer(1, 4 * mm),
        _grid(
            ["Imobiliária", "Resp. Interno", "Gestor da Parceria", "Telefone", "Status", "Comissão", "Equipe"],
            rows,
            s["cell"],
        ),
    ]
    return _build(landscape(A4), story)


def _locality(address: str) -> str:
    tail = (address or "").split(" - ")[-1].strip()
    return tail or "N/A"


def geographic_pdf(companies: Sequence[Company], now: Optional[datetime] = None) -> bytes:
    """Presence report: where each partner sits, with coordinates in place of the map capture."""
    if not companies:
        raise ExportError("Não há dados para gerar o relatório geográfico.")
    s = _styles()
    rows = [
        [
            c.name,
            c.document.number,
            _locality(c.address),
            f"{c.location.lat:.4f}, {c.location.lng:.4f}",
            c.status.value,
            f"{c.commission_rate:g}%",
        ]
        for c in companies
    ]
    story = [
        Paragraph("PartnerHub", s["brand"]),
        Paragraph("Relatório de Presença Geográfica", s["title"]),
        Paragraph(f"Emitido em: {_stamp(now)}", s["muted"]),
        Spacer(1, 6 * mm),
        _grid(
            ["Imobiliária", "Documento", "Localização", "Coordenadas", "Status", "Comissão"],
            rows,
            s["cell"],
            striped=False,
        ),
    ]
    return _build(A4, story)


def _pairs(rows: List[List[str]], cell_style) -> Table:
    """Label/value pairs, two per row; labels sit in the even columns."""
    bold = ParagraphStyle("pair_label", parent=cell_style, fontName="Helvetica-Bold")
    data = [
        [Paragraph(escape(str(v or "")), bold if i % 2 == 0 else cell_style) for i, v in enumerate(row)]
        for row in rows
    ]
    table = Table(data, colWidths=[40 * mm, 50 * mm, 40 * mm, 52 * mm])
    table.setStyle(TableStyle([("VALIGN", (0, 0), (-1, -1), "TOP")]))
    return table


def company_dossier_pdf(company: Company) -> bytes:
    s = _styles()
    status_color = ACTIVE_GREEN if company.status == Status.ACTIVE else SLATE_MUTED
    status_style = ParagraphStyle("status", parent=s["body"], textColor=status_color)

    header = Table(
        [
            [Paragraph(escape(company.name.upper()), s["title"])],
            [Paragraph(f"STATUS ATUAL: {company.status.value.upper()}", status_style)],
        ],
        colWidths=[182 * mm],
    )
    header.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, -1), colors.Color(248 / 255, 250 / 255, 252 / 255)),
                ("BOX", (0, 0), (-1, -1), 0.5, colors.lightgrey),
                ("LEFTPADDING", (0, 0), (-1, -1), 6 * mm),
            ]
        )
    )

    management = [
        ["Resp. Operacional:", company.responsible, "Gestor da Parceria:", company.partnership_manager or "Não informado"],
        ["Gestor Hub:", company.hiring_manager, "Email:", company.email],
        ["Telefone:", company.phone, "Início Parceria:", company.registration_date.strftime("%d/%m/%Y")],
    ]
    agreement = [
        ["Taxa Comissão:", f"{company.commission_rate:g}%", "Equipe:", f"{company.broker_count} corretores"],
        ["CEP:", company.cep, "Endereço:", company.address],
    ]
    story = [
        Paragraph("PartnerHub", s["brand"]),
        Paragraph("PRONTUÁRIO TÉCNICO E COMERCIAL INDIVIDUAL", s["muted"]),
        Spacer(1, 5 * mm),
        header,
        Spacer(1, 8 * mm),
        Paragraph("01. GESTÃO E RESPONSÁVEIS", s["section"]),
        _pairs(management, s["cell"]),
        Spacer(1, 6 * mm),
        Paragraph("02. ACORDO E LOCALIZAÇÃO", s["section"]),
        _pairs(agreement, s["cell"]),
    ]
    if company.contact_history:
        story += [Spacer(1, 6 * mm), Paragraph("03. HISTÓRICO DE CONTATOS", s["section"])]
        rows = [[e.date.strftime("%d/%m/%Y"), e.type.value, e.summary] for e in company.contact_history]
        story.append(_grid(["Data", "Tipo", "Resumo"], rows, s["cell"], col_widths=[28 * mm, 30 * mm, 124 * mm]))
    if company.brokers:
        story += [Spacer(1, 6 * mm), Paragraph("04. CORRETORES VINCULADOS", s["section"])]
        rows = [[b.name, f"{b.creci} / {b.creci_uf}", b.email] for b in company.brokers]
        story.append(_grid(["Nome", "CRECI", "E-mail"], rows, s["cell"]))
    return _build(A4, story)


def dossier_filename(company: Company) -> str:
    ascii_name = unicodedata.normalize("NFKD", company.name).encode("ascii", "ignore").decode("ascii")
    slug = re.sub(r"[^a-z0-9]+", "-", ascii_name.lower()).strip("-")
    return f"prontuario-{slug or company.id}.pdf"
