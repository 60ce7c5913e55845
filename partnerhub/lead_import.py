"""Map an accepted prospecting lead onto a partner draft.

Imports are always additive: a draft is produced even when the book already
holds a partner with the same name, phone or CRECI. The operator completes the
draft (responsible, e-mail, ...) and commits it through the normal save path.
"""
from __future__ import annotations

import logging

from partnerhub import settings
from partnerhub.lead_parser import ParsedLead, RegistryType, classify
from partnerhub.prospecting import SearchKind
from partnerhub.audit_log import log_json
from schemas.company import CnpjDocument, CompanyDraft, CreciDocument, Status

logger = logging.getLogger(__name__)


def to_draft(lead: ParsedLead, kind: SearchKind) -> CompanyDraft:
    # The document follows the parsed registry type; the classifier only tags the audit entry
    registry_type = lead.registry_type
    tag = classify(lead, kind)
    if registry_type == RegistryType.INDIVIDUAL:
        # The CRECI also fills the legacy single-document column
        document = CreciDocument(creci=lead.registry_number, legacy_number=lead.registry_number)
    else:
        document = CnpjDocument(cnpj="")

    draft = CompanyDraft(
        name=lead.name,
        address=lead.address,
        phone=lead.phone,
        website=lead.website,
        document=document,
        status=Status.INACTIVE,
        broker_count=0,
        commission_rate=settings.DEFAULT_COMMISSION_RATE,
        hiring_manager=settings.AI_IMPORT_MANAGER,
        contact_history=[],
        brokers=[],
    )
    logger.info(
        "lead import draft name=%s type=%s tag=%s kind=%s", lead.name, registry_type.value, tag.value, kind.value
    )
    log_json(
        "prospecting",
        "info",
        "lead_import_draft",
        {"name": lead.name, "registry_type": registry_type.value, "tag": tag.value, "kind": kind.value},
    )
    return draft
