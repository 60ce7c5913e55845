"""Public Brazilian registries used to prefill the partner form.

Both lookups are advisory: a miss, a bad status or a network error returns
``None`` after logging, and the operator keeps typing by hand.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from partnerhub import settings
from partnerhub.masks import digits, mask_cep, mask_phone
from schemas.lookup import PostalAddress, RegistryRecord

logger = logging.getLogger(__name__)


def _headers() -> Dict[str, str]:
    return {"Accept": "application/json", "User-Agent": settings.LOOKUP_USER_AGENT}


async def get_json(url: str, params: Optional[Dict[str, Any]] = None) -> Optional[Any]:
    try:
        async with httpx.AsyncClient(timeout=settings.LOOKUP_TIMEOUT_S) as client:
            r = await client.get(url, params=params, headers=_headers())
        if r.status_code == 404:
            logger.info("lookup miss url=%s", url)
            return None
        r.raise_for_status()
        return r.json()
    except (httpx.HTTPError, ValueError) as exc:
        logger.warning("lookup failed url=%s: %s", url, exc)
        return None


def display_name(razao_social: str, nome_fantasia: str) -> str:
    """Trade name with the legal name in parentheses when the two differ."""
    razao_social = (razao_social or "").strip()
    nome_fantasia = (nome_fantasia or "").strip()
    if nome_fantasia and nome_fantasia != razao_social:
        return f"{nome_fantasia} ({razao_social})"
    return razao_social or nome_fantasia


def _text(data: Dict[str, Any], key: str) -> str:
    value = data.get(key)
    return str(value).strip() if value is not None else ""


async def lookup_cnpj(cnpj: str) -> Optional[RegistryRecord]:
    clean = digits(cnpj)
    if len(clean) != 14:
        return None
    data = await get_json(f"{settings.BRASILAPI_CNPJ_URL}/{clean}")
    if not isinstance(data, dict):
        return None
    razao = _text(data, "razao_social")
    fantasia = _text(data, "nome_fantasia")
    cep = _text(data, "cep")
    phone = _text(data, "ddd_telefone_1")
    return RegistryRecord(
        cnpj=clean,
        name=display_name(razao, fantasia),
        razao_social=razao,
        nome_fantasia=fantasia,
        cep=mask_cep(cep) if cep else "",
        email=_text(data, "email"),
        phone=mask_phone(phone) if phone else "",
        street=_text(data, "logradouro"),
        number=_text(data, "numero"),
        complement=_text(data, "complemento"),
        neighborhood=_text(data, "bairro"),
        city=_text(data, "municipio"),
        state=_text(data, "uf"),
    )


async def lookup_cep(cep: str) -> Optional[PostalAddress]:
    clean = digits(cep)
    if len(clean) != 8:
        return None
    data = await get_json(f"{settings.VIACEP_URL}/{clean}/json/")
    # ViaCEP answers 200 with {"erro": true} for unknown codes
    if not isinstance(data, dict) or data.get("erro"):
        logger.info("cep not found cep=%s", clean)
        return None
    return PostalAddress(
        cep=mask_cep(clean),
        street=_text(data, "logradouro"),
        neighborhood=_text(data, "bairro"),
        city=_text(data, "localidade"),
        state=_text(data, "uf"),
    )
