"""The partner book: the in-memory company collection and every mutation on it.

Every mutating call writes the whole collection back through the repository,
so the stored blob always mirrors what the operator sees.
"""
from __future__ import annotations

import datetime as dt
import logging
import math
import uuid
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from partnerhub import settings
from partnerhub.errors import BrokerValidationError, CompanyNotFound, CompanyValidationError
from partnerhub.masks import digits
from partnerhub.storage import CompanyRepository
from schemas.company import (
    FLAT_DOCUMENT_KEYS,
    Broker,
    BrokerIn,
    CnpjDocument,
    Company,
    CompanyFields,
    ContactHistoryEntry,
    ContactIn,
    ContactType,
    DashboardStats,
    Location,
    Status,
    flatten_document,
    lift_flat_document,
)

logger = logging.getLogger(__name__)

UPCOMING_WINDOW_DAYS = 7


def new_id() -> str:
    return uuid.uuid4().hex[:9]


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def demo_companies() -> List[Company]:
    return [
        Company(
            id="1",
            name="Horizonte Imobiliária",
            document=CnpjDocument(cnpj="12.345.678/0001-99"),
            cep="01310-100",
            address="Av. Paulista, 1000 - Bela Vista - SP",
            location=Location(lat=-23.5614, lng=-46.6559),
            responsible="Maria Silva",
            partnership_manager="Ana Paula Santos",
            hiring_manager="Ricardo Mendes",
            email="contato@horizonte.com",
            phone="(11) 98888-7777",
            registration_date=dt.date(2023, 10, 15),
            broker_count=5,
            commission_rate=5,
            status=Status.ACTIVE,
            last_contact_type=ContactType.MEETING.value,
            contact_history=[
                ContactHistoryEntry(
                    id="h1",
                    date=dt.date(2024, 3, 20),
                    type=ContactType.MEETING,
                    summary="Definição de novas metas de captação.",
                    details="Reunião estratégica inicial para o Q2.",
                )
            ],
            brokers=[
                Broker(id="b1", name="Juliana Castro", creci="998877", creci_uf="SP", email="juliana@horizonte.com")
            ],
        )
    ]


def _with_last_contact(data: Dict[str, Any]) -> Dict[str, Any]:
    """Mirror the newest history entry into the last-contact summary fields."""
    history = data.get("contact_history") or []
    latest = history[0] if history else None
    if isinstance(latest, ContactHistoryEntry):
        latest = latest.model_dump()
    data["last_contact_date"] = latest.get("date") if latest else None
    data["last_contact_type"] = _type_value(latest.get("type")) if latest else None
    data["contact_summary"] = latest.get("summary") if latest else None
    data["next_contact_date"] = latest.get("next_contact_date") if latest else None
    return data


def _type_value(value: Any) -> Any:
    return value.value if isinstance(value, ContactType) else value


_FLAT_ALIASES = {"docType": "doc_type", "creciUF": "creci_uf"}


def _lift_document_changes(current: Company, changes: Dict[str, Any]) -> Dict[str, Any]:
    """Fold flat ``docType``/``cnpj``/``creci`` edits into the current document variant."""
    if "document" in changes or not FLAT_DOCUMENT_KEYS & set(changes):
        return changes
    flat = {_FLAT_ALIASES.get(k, k): v for k, v in changes.items() if k in FLAT_DOCUMENT_KEYS}
    rest = {k: v for k, v in changes.items() if k not in FLAT_DOCUMENT_KEYS}
    rest["document"] = lift_flat_document({**flatten_document(current.document), **flat})["document"]
    return rest


class PartnerBook:
    def __init__(self, repository: CompanyRepository, companies: Optional[List[Company]] = None):
        self.repository = repository
        self.companies: List[Company] = list(companies or [])

    @classmethod
    def bootstrap(cls, repository: CompanyRepository, seed_demo: Optional[bool] = None) -> "PartnerBook":
        """Load the stored book; a never-saved store gets the demo partner when seeding is on."""
        seed_demo = settings.SEED_DEMO_DATA if seed_demo is None else seed_demo
        stored = repository.load()
        if stored is not None:
            logger.info("partner book loaded companies=%d", len(stored))
            return cls(repository, stored)
        book = cls(repository, demo_companies() if seed_demo else [])
        if seed_demo:
            book._persist()
            logger.info("partner book seeded with demo data")
        return book

    def _persist(self) -> None:
        self.repository.save_all(self.companies)

    def _index(self, company_id: str) -> int:
        for i, c in enumerate(self.companies):
            if c.id == company_id:
                return i
        raise CompanyNotFound(f"Empresa {company_id} não encontrada.")

    def _replace(self, idx: int, company: Company) -> Company:
        self.companies[idx] = company
        self._persist()
        return company

    # --- reads ---------------------------------------------------------------

    def list(self) -> List[Company]:
        return list(self.companies)

    def get(self, company_id: str) -> Company:
        return self.companies[self._index(company_id)]

    def filter(
        self,
        name: str = "",
        document: str = "",
        status: Optional[Status] = None,
        hiring_manager: Optional[str] = None,
    ) -> List[Company]:
        name_q = (name or "").lower()
        doc_q = digits(document)
        out = []
        for c in self.companies:
            if name_q not in c.name.lower():
                continue
            if doc_q not in digits(c.document.number):
                continue
            if status is not None and c.status != status:
                continue
            if hiring_manager and c.hiring_manager != hiring_manager:
                continue
            out.append(c)
        return out

    def stats(self) -> DashboardStats:
        total = len(self.companies)
        brokers = sum(c.broker_count or 0 for c in self.companies)
        active = sum(1 for c in self.companies if c.status == Status.ACTIVE)
        return DashboardStats(
            total_companies=total,
            total_brokers=brokers,
            avg_brokers=_round_half_up(brokers / total) if total else 0,
            active_percentage=_round_half_up(active / total * 100) if total else 0,
        )

    def upcoming_contacts(self, today: Optional[dt.date] = None) -> List[Company]:
        today = today or dt.date.today()
        horizon = today + dt.timedelta(days=UPCOMING_WINDOW_DAYS)
        due = [c for c in self.companies if c.next_contact_date and today <= c.next_contact_date <= horizon]
        return sorted(due, key=lambda c: c.next_contact_date)

    def hiring_managers(self) -> List[str]:
        return sorted({c.hiring_manager for c in self.companies if c.hiring_manager})

    # --- mutations -----------------------------------------------------------

    def create(self, fields: CompanyFields) -> Company:
        data = _with_last_contact(fields.model_dump())
        company = Company.model_validate({**data, "id": new_id(), "registration_date": dt.date.today()})
        self.companies.insert(0, company)
        self._persist()
        logger.info("company created id=%s name=%s", company.id, company.name)
        return company

    def register_public(self, fields: CompanyFields) -> Company:
        """Self-service onboarding: the record lands with the public-registration manager."""
        return self.create(fields.model_copy(update={"hiring_manager": settings.PUBLIC_REGISTRATION_MANAGER}))

    def update(self, company_id: str, changes: Dict[str, Any]) -> Company:
        idx = self._index(company_id)
        current = self.companies[idx]
        merged = {**current.model_dump(), **_lift_document_changes(current, changes)}
        try:
            if "contact_history" in changes or "contactHistory" in changes:
                merged = _with_last_contact(Company.model_validate(merged).model_dump())
            merged["id"] = company_id
            updated = Company.model_validate(merged)
        except ValidationError as exc:
            first = exc.errors()[0] if exc.errors() else {}
            where = ".".join(str(p) for p in first.get("loc", ()))
            logger.info("company update rejected id=%s field=%s", company_id, where)
            raise CompanyValidationError(f"Campo inválido na atualização do parceiro: {where}.") from exc
        return self._replace(idx, updated)

    def delete(self, company_id: str) -> None:
        idx = self._index(company_id)
        removed = self.companies.pop(idx)
        self._persist()
        logger.info("company deleted id=%s name=%s", removed.id, removed.name)

    def adjust_broker_count(self, company_id: str, delta: int) -> Company:
        idx = self._index(company_id)
        current = self.companies[idx]
        count = max(0, (current.broker_count or 0) + delta)
        return self._replace(idx, current.model_copy(update={"broker_count": count}))

    def add_broker(self, company_id: str, broker: BrokerIn) -> Company:
        if not broker.name.strip() or not broker.creci.strip() or not broker.creci_uf.strip():
            raise BrokerValidationError("Para vincular um corretor, preencha Nome, CRECI e a respectiva UF.")
        idx = self._index(company_id)
        current = self.companies[idx]
        roster = current.brokers + [Broker(id=new_id(), **broker.model_dump())]
        return self._replace(idx, current.model_copy(update={"brokers": roster, "broker_count": len(roster)}))

    def remove_broker(self, company_id: str, broker_id: str) -> Company:
        idx = self._index(company_id)
        current = self.companies[idx]
        roster = [b for b in current.brokers if b.id != broker_id]
        return self._replace(idx, current.model_copy(update={"brokers": roster, "broker_count": len(roster)}))

    def log_contact(self, company_id: str, contact: ContactIn) -> Company:
        idx = self._index(company_id)
        current = self.companies[idx]
        entry = ContactHistoryEntry(id=new_id(), **contact.model_dump())
        data = current.model_dump()
        data["contact_history"] = [entry.model_dump()] + data["contact_history"]
        return self._replace(idx, Company.model_validate(_with_last_contact(data)))

    def restore(self, companies: List[Company]) -> None:
        """Replace the whole collection with an already validated backup."""
        self.companies = list(companies)
        self._persist()
        logger.info("partner book restored companies=%d", len(self.companies))
