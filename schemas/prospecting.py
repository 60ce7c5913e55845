from typing import List, Optional

from pydantic import BaseModel, Field

from partnerhub.lead_parser import RegistryType
from partnerhub.prospecting import Grounding, SearchKind


class GeoIn(BaseModel):
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)


class SearchIn(BaseModel):
    kind: SearchKind
    query: str = ""
    geo: Optional[GeoIn] = None


class CitationOut(BaseModel):
    kind: Grounding
    title: str
    uri: str


class LeadOut(BaseModel):
    index: int
    name: str
    address: str
    phone: str
    registry_number: str
    registry_type: RegistryType
    website: Optional[str] = None


class SearchOut(BaseModel):
    kind: SearchKind
    raw_text: str
    leads: List[LeadOut]
    map_citations: List[CitationOut]
    web_citations: List[CitationOut]
    # False when a newer search started before this one resolved
    current: bool = True


class ContactLinkOut(BaseModel):
    url: str


class RecentSearchesOut(BaseModel):
    queries: List[str]
