"""Prospecting search requests and the prompt templates sent to the oracle.

Every search kind has one fixed template. The lead parser is tuned against the
line layouts these templates ask for, so the wording of the format lines must
stay stable.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from partnerhub.errors import InvalidSearchRequest


class SearchKind(str, Enum):
    REGION = "region"
    COMPANY_NAME = "name"
    BROKER = "broker"
    PHONE = "phone"
    EMAIL = "email"
    WEBSITE = "website"


class Grounding(str, Enum):
    MAPS = "maps"
    WEB = "web"


@dataclass(frozen=True)
class GeoPoint:
    latitude: float
    longitude: float


@dataclass(frozen=True)
class SearchRequest:
    kind: SearchKind
    query_text: str = ""
    geo: Optional[GeoPoint] = None


@dataclass(frozen=True)
class Citation:
    kind: Grounding
    title: str
    uri: str


@dataclass(frozen=True)
class OracleResult:
    raw_text: str
    citations: Tuple[Citation, ...] = field(default_factory=tuple)


GEO_PLACEHOLDER = "esta região geográfica"

COMPANY_LINE_FORMAT = "NOME | LOGRADOURO, NUMERO - BAIRRO - CIDADE/UF | Telefone: (00) 00000-0000 | Website: url"
BROKER_LINE_FORMAT = "NOME | ENDEREÇO | Telefone: (00) 00000-0000 | CRECI: 00000"

_COMPANY_TEMPLATE = """Realize uma busca exaustiva por empresas imobiliárias. O termo de busca fornecido é: "{query}".
Este termo pode ser uma região geográfica ou o nome de uma imobiliária específica.

Para cada empresa encontrada, você DEVE retornar obrigatoriamente:
1. Nome da Imobiliária (Sem prefixos como 'Imobiliária X')
2. Endereço Completo (FORMATO OBRIGATÓRIO: Logradouro, Número - Bairro - Cidade/UF)
3. Telefone de Contato
4. Website (se houver)

Formate cada empresa em uma única linha seguindo o padrão: "{line_format}".
{focus}"""

_REGION_FOCUS = "Priorize imobiliárias com atuação física na região informada."
_NAME_FOCUS = "Se o termo for um nome de empresa, retorne todas as unidades ou informações detalhadas dessa empresa específica."

_BROKER_TEMPLATE = """Localize corretores de imóveis autônomos na região de {query}.
Para cada profissional encontrado, você DEVE retornar:
1. Nome Completo
2. Endereço ou Área de Atuação (FORMATO: Rua, Número ou 'Atendimento Local' - Bairro - Cidade/UF)
3. Telefone de Contato
4. Número do CRECI (Se houver)

Formate cada resultado em uma única linha: "{line_format}"."""

_PHONE_TEMPLATE = """IDENTIFICAÇÃO REVERSA: Quem é o proprietário do telefone {query}?
Foque exclusivamente no mercado imobiliário.

Retorne no formato: "NOME | ENDEREÇO (Logradouro, Número - Bairro - Cidade/UF) | Telefone: {query}\""""

_EMAIL_TEMPLATE = """Identifique a empresa imobiliária associada ao e-mail: {query}.
Retorne no formato: "NOME | ENDEREÇO (Logradouro, Número - Bairro - Cidade/UF) | Telefone: (00) 00000-0000\""""

_WEBSITE_TEMPLATE = """Extraia informações comerciais da imobiliária dona do website: {query}.
Ignore se for um portal de anúncios (como VivaReal). Foque em sites de imobiliárias próprias.

Retorne no formato: "NOME | ENDEREÇO (Logradouro, Número - Bairro - Cidade/UF) | Telefone: (00) 00000-0000 | Website: {query}\""""


def validate_request(request: SearchRequest) -> str:
    """Return the effective query text or raise before anything is dispatched."""
    text = (request.query_text or "").strip()
    if text:
        return text
    if request.kind == SearchKind.REGION and request.geo is not None:
        return GEO_PLACEHOLDER
    raise InvalidSearchRequest("Informe um termo de busca ou permita o uso da localização.")


def build_prompt(request: SearchRequest) -> str:
    query = validate_request(request)
    kind = request.kind
    if kind == SearchKind.REGION:
        return _COMPANY_TEMPLATE.format(query=query, line_format=COMPANY_LINE_FORMAT, focus=_REGION_FOCUS)
    if kind == SearchKind.COMPANY_NAME:
        return _COMPANY_TEMPLATE.format(query=query, line_format=COMPANY_LINE_FORMAT, focus=_NAME_FOCUS)
    if kind == SearchKind.BROKER:
        return _BROKER_TEMPLATE.format(query=query, line_format=BROKER_LINE_FORMAT)
    if kind == SearchKind.PHONE:
        return _PHONE_TEMPLATE.format(query=query)
    if kind == SearchKind.EMAIL:
        return _EMAIL_TEMPLATE.format(query=query)
    return _WEBSITE_TEMPLATE.format(query=query)


def grounding_for(kind: SearchKind) -> Grounding:
    if kind in (SearchKind.REGION, SearchKind.COMPANY_NAME):
        return Grounding.MAPS
    return Grounding.WEB


def geo_bias_for(request: SearchRequest) -> Optional[GeoPoint]:
    # Only map-grounded searches take a location bias
    if grounding_for(request.kind) == Grounding.MAPS:
        return request.geo
    return None


def citations_by_kind(result: OracleResult, kind: Grounding) -> List[Citation]:
    return [c for c in result.citations if c.kind == kind]
