from __future__ import annotations

import re
from urllib.parse import quote

from partnerhub.errors import MissingPhoneError
from partnerhub.lead_parser import ParsedLead, RegistryType, classify
from partnerhub.prospecting import SearchKind

WHATSAPP_BASE = "https://wa.me"
BRAZIL_DIAL_CODE = "55"


def outreach_message(lead: ParsedLead, kind: SearchKind) -> str:
    if classify(lead, kind) == RegistryType.INDIVIDUAL:
        return f"Olá {lead.name}, vi seu perfil profissional e gostaria de entender melhor sobre parcerias."
    if lead.has_address:
        return (
            f"Olá {lead.name}, vi sua atuação em {lead.address} e gostaria de conversar sobre "
            "uma possível parceria estratégica com o PartnerHub."
        )
    return "Olá, gostaria de informações sobre parcerias."


def whatsapp_link(lead: ParsedLead, kind: SearchKind) -> str:
    """Click-to-chat URL for a lead; national numbers get the Brazil dial code."""
    digits = re.sub(r"\D", "", lead.phone or "")
    if not digits:
        raise MissingPhoneError("Telefone não identificado para este contato.")
    if len(digits) <= 11:
        digits = BRAZIL_DIAL_CODE + digits
    return f"{WHATSAPP_BASE}/{digits}?text={quote(outreach_message(lead, kind), safe='')}"
