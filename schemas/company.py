from __future__ import annotations

import datetime as dt
from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field, model_validator


class Status(str, Enum):
    ACTIVE = "Ativo"
    INACTIVE = "Inativo"


class ContactType(str, Enum):
    PHONE = "Telefone"
    WHATSAPP = "WhatsApp"
    EMAIL = "E-mail"
    MEETING = "Reunião"
    VIDEO = "Vídeo"
    VISIT = "Visita"
    EVENT = "Evento"
    OTHER = "Outros"


class Location(BaseModel):
    lat: float
    lng: float


class Broker(BaseModel):
    id: str
    name: str
    creci: str
    creci_uf: str
    email: str = ""


class ContactHistoryEntry(BaseModel):
    id: str
    date: dt.date
    type: ContactType
    summary: str
    details: Optional[str] = None
    next_contact_date: Optional[dt.date] = None


# --- Document variants ---------------------------------------------------------
# Which identifier is meaningful depends on doc_type; each variant only carries
# the fields valid for its kind.


class CnpjDocument(BaseModel):
    """Legal entity identified by CNPJ, optionally holding a corporate CRECI."""

    doc_type: Literal["CNPJ"] = "CNPJ"
    cnpj: str = ""
    creci: Optional[str] = None
    creci_uf: Optional[str] = None

    @property
    def number(self) -> str:
        return self.cnpj


class CpfDocument(BaseModel):
    """Legacy personal record identified by CPF."""

    doc_type: Literal["CPF"] = "CPF"
    cpf: str = ""
    creci: Optional[str] = None
    creci_uf: Optional[str] = None

    @property
    def number(self) -> str:
        return self.cpf


class CreciDocument(BaseModel):
    """Individual broker identified by the CRECI licence.

    ``legacy_number`` mirrors the single "document" column older exports
    expect; for broker imports it holds the CRECI number itself.
    """

    doc_type: Literal["CRECI"] = "CRECI"
    creci: str = ""
    creci_uf: Optional[str] = None
    legacy_number: str = ""

    @property
    def number(self) -> str:
        return self.legacy_number


Document = Annotated[
    Union[CnpjDocument, CpfDocument, CreciDocument],
    Field(discriminator="doc_type"),
]


FLAT_DOCUMENT_KEYS = {"doc_type", "docType", "cnpj", "creci", "creci_uf", "creciUF"}


def flatten_document(document: Union[CnpjDocument, CpfDocument, CreciDocument]) -> Dict[str, Any]:
    """Inverse of ``lift_flat_document`` for a single document variant."""
    return {
        "doc_type": document.doc_type,
        "cnpj": document.number,
        "creci": document.creci,
        "creci_uf": document.creci_uf,
    }


def lift_flat_document(data: Dict[str, Any]) -> Dict[str, Any]:
    """Map a flat ``docType``/``cnpj``/``creci``/``creciUF`` payload into ``document``."""
    if "document" in data:
        return data
    doc_type = data.get("doc_type") or data.get("docType") or "CNPJ"
    number = data.get("cnpj") or ""
    creci = data.get("creci") or None
    creci_uf = data.get("creci_uf") or data.get("creciUF") or None
    if doc_type == "CPF":
        document: Dict[str, Any] = {"doc_type": "CPF", "cpf": number, "creci": creci, "creci_uf": creci_uf}
    elif doc_type == "CRECI":
        document = {"doc_type": "CRECI", "creci": creci or "", "creci_uf": creci_uf, "legacy_number": number}
    else:
        document = {"doc_type": "CNPJ", "cnpj": number, "creci": creci, "creci_uf": creci_uf}
    out = {k: v for k, v in data.items() if k not in FLAT_DOCUMENT_KEYS}
    out["document"] = document
    return out


# Camel-cased keys written by the browser build; accepted on input only.
_CAMEL_KEYS = {
    "razaoSocial": "razao_social",
    "partnershipManager": "partnership_manager",
    "hiringManager": "hiring_manager",
    "registrationDate": "registration_date",
    "brokerCount": "broker_count",
    "commissionRate": "commission_rate",
    "lastContactDate": "last_contact_date",
    "lastContactType": "last_contact_type",
    "contactSummary": "contact_summary",
    "nextContactDate": "next_contact_date",
    "contactHistory": "contact_history",
}


def _rename(item: Any, mapping: Dict[str, str]) -> Any:
    if not isinstance(item, dict):
        return item
    return {mapping.get(k, k): v for k, v in item.items()}


class CompanyFields(BaseModel):
    """Editable partner fields shared by drafts, form payloads and stored companies."""

    name: str
    razao_social: Optional[str] = None
    document: Document = Field(default_factory=CnpjDocument)
    cep: str = ""
    address: str = ""
    location: Location = Field(default_factory=lambda: Location(lat=-23.5505, lng=-46.6333))
    responsible: str = ""
    partnership_manager: str = ""
    hiring_manager: str = ""
    website: Optional[str] = None
    email: str = ""
    phone: str = ""
    broker_count: int = 0
    commission_rate: float = 5
    status: Status = Status.ACTIVE
    last_contact_date: Optional[dt.date] = None
    last_contact_type: Optional[str] = None
    contact_summary: Optional[str] = None
    next_contact_date: Optional[dt.date] = None
    notes: Optional[str] = None
    contact_history: List[ContactHistoryEntry] = Field(default_factory=list)
    brokers: List[Broker] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _accept_legacy_shape(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = {_CAMEL_KEYS.get(k, k): v for k, v in data.items()}
        if isinstance(data.get("contact_history"), list):
            data["contact_history"] = [
                _rename(e, {"nextContactDate": "next_contact_date"}) for e in data["contact_history"]
            ]
        if isinstance(data.get("brokers"), list):
            data["brokers"] = [_rename(b, {"creciUF": "creci_uf"}) for b in data["brokers"]]
        return lift_flat_document(data)


class Company(CompanyFields):
    id: str
    registration_date: dt.date


class CompanyDraft(CompanyFields):
    """A partner record not yet committed to the book (no id, no registration date)."""


class BrokerIn(BaseModel):
    name: str
    creci: str
    creci_uf: str
    email: str = ""


class ContactIn(BaseModel):
    date: dt.date
    type: ContactType
    summary: str
    details: Optional[str] = None
    next_contact_date: Optional[dt.date] = None


class BrokerCountDelta(BaseModel):
    delta: int


class DashboardStats(BaseModel):
    total_companies: int
    total_brokers: int
    avg_brokers: int
    active_percentage: int
