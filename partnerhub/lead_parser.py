"""Turn free text returned by the oracle into structured leads.

The oracle is a generative model, so its output only loosely follows the
requested layout. Two shapes show up in practice:

- pipe layout:   ``Nome | Endereço | Telefone: (11) 98888-7777 | Website: x.com``
- legacy layout: ``Nome - CRECI: 123 - Bairro - Telefone: (41) 99999-0000``

``parse_line`` accepts any string and never raises; anything it cannot place
falls back to the placeholder strings so the operator can still act on a
partial lead.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from partnerhub.prospecting import SearchKind

logger = logging.getLogger(__name__)

NAME_PLACEHOLDER = "Nome não identificado"
ADDRESS_PLACEHOLDER = "Endereço não identificado"

MIN_LINE_LENGTH = 15
LINE_DELIMITERS = ("-", ":", "|")

_LIST_MARKER_RE = re.compile(r"^(?:\s*(?:\d+\.|\*+|-)\s*)+")
_PHONE_RE = re.compile(
    r"\b(?:telefone|contato|fone|whatsapp)\b\s*:?\s*(\(?\d{2}\)?\s?\d{4,5}-?\d{4})",
    re.IGNORECASE,
)
_WEBSITE_RE = re.compile(
    r"\b(?:website|site|url)\b\s*:?\s*"
    r"(n/[ad]\b|(?:https?://)?(?:www\.)?[\w.-]+\.[a-z]{2,}(?:/[\w./?=&%-]*)?)",
    re.IGNORECASE,
)
_CRECI_RE = re.compile(r"\bcreci(?:\s?pf)?\s*:?\s*(\d+)", re.IGNORECASE)
_NAME_LABEL_RE = re.compile(r"^(?:nome|raz[ãa]o social|empresa)\s*:\s*", re.IGNORECASE)
_ADDRESS_LABEL_RE = re.compile(
    r"^(?:(?:endere[çc]o|local|localiza[çc][ãa]o)\s*:|situa-se em\s*:?)\s*",
    re.IGNORECASE,
)
_LEGACY_SPLIT_RE = re.compile(r"\s+-\s+|\s{3,}")
_EMPTY_WEBSITE = {"n/a", "n/d"}

# Characters left dangling once labelled fields are cut out of a line
_SEPARATOR_CHARS = " \t-:|"


class RegistryType(str, Enum):
    COMPANY = "company"
    INDIVIDUAL = "individual"


@dataclass(frozen=True)
class ParsedLead:
    name: str = NAME_PLACEHOLDER
    address: str = ADDRESS_PLACEHOLDER
    phone: str = ""
    registry_number: str = ""
    registry_type: RegistryType = RegistryType.COMPANY
    website: Optional[str] = None

    @property
    def has_address(self) -> bool:
        return bool(self.address) and self.address != ADDRESS_PLACEHOLDER


def is_candidate_line(line: str) -> bool:
    return len(line) > MIN_LINE_LENGTH and any(d in line for d in LINE_DELIMITERS)


def candidate_lines(raw_text: str) -> List[str]:
    return [ln for ln in (raw_text or "").splitlines() if is_candidate_line(ln)]


def _cut(pattern: re.Pattern, text: str) -> tuple[str, str]:
    """Return (captured value, text with the first match removed)."""
    m = pattern.search(text)
    if not m:
        return "", text
    return m.group(1).strip(), text[: m.start()] + text[m.end():]


def _clean_part(part: str) -> str:
    return part.strip(_SEPARATOR_CHARS)


def _split_name_address(remaining: str) -> tuple[str, str]:
    if "|" in remaining:
        parts = [p for p in (_clean_part(x) for x in remaining.split("|")) if p]
        if not parts:
            return "", ""
        return parts[0], " - ".join(parts[1:])

    parts = [p for p in (_clean_part(x) for x in _LEGACY_SPLIT_RE.split(remaining)) if p]
    if len(parts) >= 2:
        return parts[0], " - ".join(parts[1:])

    first_comma = remaining.find(",")
    if first_comma > 8:
        return remaining[:first_comma].strip(), remaining[first_comma + 1:].strip()
    return remaining.strip(), ""


def parse_line(line: str) -> ParsedLead:
    text = _LIST_MARKER_RE.sub("", (line or "").replace("**", ""), count=1).strip()

    phone, text = _cut(_PHONE_RE, text)
    website, text = _cut(_WEBSITE_RE, text)
    registry_number, text = _cut(_CRECI_RE, text)
    if website.lower() in _EMPTY_WEBSITE:
        website = ""

    name, address = _split_name_address(text.strip(_SEPARATOR_CHARS))
    name = _NAME_LABEL_RE.sub("", name).strip()
    address = _ADDRESS_LABEL_RE.sub("", address).strip()

    return ParsedLead(
        name=name or NAME_PLACEHOLDER,
        address=address or ADDRESS_PLACEHOLDER,
        phone=phone,
        registry_number=registry_number,
        registry_type=RegistryType.INDIVIDUAL if registry_number else RegistryType.COMPANY,
        website=website or None,
    )


def extract_leads(raw_text: str) -> List[ParsedLead]:
    leads = [parse_line(ln) for ln in candidate_lines(raw_text)]
    logger.debug("extract_leads lines=%d", len(leads))
    return leads


def classify(lead: ParsedLead, kind: SearchKind) -> RegistryType:
    """Best-effort company/individual tag; ambiguous leads stay companies."""
    if lead.registry_number or kind == SearchKind.BROKER or "corretor" in lead.name.lower():
        return RegistryType.INDIVIDUAL
    return RegistryType.COMPANY
