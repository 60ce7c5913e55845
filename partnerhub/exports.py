"""Text exports of the partner book: CSV sheet, TXT ledger and the JSON backup."""
from __future__ import annotations

import csv
import datetime as dt
import json
import logging
from io import StringIO
from typing import Any, List, Optional, Sequence

from pydantic import TypeAdapter, ValidationError

from partnerhub.errors import ExportError, RestoreError
from partnerhub.audit_log import log_json
from schemas.company import Company

logger = logging.getLogger(__name__)

CSV_HEADER = [
    "Nome da Empresa",
    "CNPJ/CPF",
    "Telefone",
    "Status",
    "Gestor da Parceria",
    "CRECI",
    "UF CRECI",
    "Último Contato",
    "Data Registro",
    "Equipe",
]
BOM = "\ufeff"

TXT_TITLE = "LISTA DE PARCEIROS - PORTAL PARTNERHUB"
TXT_SEPARATOR = "-" * 100
# (title, width); the last column is left unpadded
TXT_COLUMNS = (
    ("NOME DA EMPRESA", 30),
    ("CNPJ", 20),
    ("TELEFONE", 15),
    ("STATUS", 10),
    ("GESTOR DA PARCERIA", 0),
)
TXT_GAP = "  "

_companies_adapter = TypeAdapter(List[Company])


def _iso(value: Optional[dt.date]) -> str:
    return value.isoformat() if value else ""


def _csv_row(c: Company) -> List[Any]:
    doc = c.document
    return [
        c.name,
        doc.number,
        c.phone,
        c.status.value,
        c.partnership_manager or "",
        doc.creci or "",
        doc.creci_uf or "",
        _iso(c.last_contact_date),
        _iso(c.registration_date),
        int(c.broker_count or 0),
    ]


def export_csv(companies: Sequence[Company]) -> str:
    """BOM-prefixed CSV; text cells are quoted, the team size stays a bare number."""
    buf = StringIO()
    buf.write(BOM)
    buf.write(",".join(CSV_HEADER) + "\n")
    writer = csv.writer(buf, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n")
    for c in companies:
        writer.writerow(_csv_row(c))
    return buf.getvalue()


def _fixed(values: Sequence[str]) -> str:
    cells = []
    for (_, width), value in zip(TXT_COLUMNS, values):
        cells.append(value.ljust(width) if width else value)
    return TXT_GAP.join(cells)


def export_txt(companies: Sequence[Company], now: Optional[dt.datetime] = None) -> str:
    if not companies:
        raise ExportError("Não há dados para exportar.")
    now = now or dt.datetime.now()
    lines = [
        TXT_TITLE,
        f"Exportado em: {now.strftime('%d/%m/%Y, %H:%M:%S')}",
        TXT_SEPARATOR,
        _fixed([title for title, _ in TXT_COLUMNS]),
        TXT_SEPARATOR,
    ]
    for c in companies:
        lines.append(
            _fixed([c.name, c.document.number, c.phone, c.status.value, c.partnership_manager or "N/A"])
        )
    return "\n".join(lines)


def export_json(companies: Sequence[Company]) -> str:
    return json.dumps([c.model_dump(mode="json") for c in companies], indent=2, ensure_ascii=False)


def parse_backup(content: str | bytes) -> List[Company]:
    """Validate a JSON backup in full; nothing is returned unless every record is valid."""
    try:
        raw = json.loads(content)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise RestoreError("Arquivo de backup inválido: JSON malformado.") from exc
    if not isinstance(raw, list):
        raise RestoreError("Arquivo de backup inválido: era esperada uma lista de empresas.")
    try:
        companies = _companies_adapter.validate_python(raw)
    except ValidationError as exc:
        first = exc.errors()[0] if exc.errors() else {}
        where = ".".join(str(p) for p in first.get("loc", ()))
        raise RestoreError(f"Arquivo de backup inválido: registro com campo ausente ou inválido ({where}).") from exc
    log_json("backup", "info", "backup_parsed", {"companies": len(companies)})
    return companies


def restore_from_json(book, content: str | bytes, confirmed: bool) -> List[Company]:
    """Replace the book with a backup. Without confirmation the book is left untouched."""
    companies = parse_backup(content)
    if not confirmed:
        raise RestoreError("A restauração substitui todos os dados atuais e precisa ser confirmada.")
    book.restore(companies)
    log_json("backup", "info", "backup_restored", {"companies": len(companies)})
    return companies
