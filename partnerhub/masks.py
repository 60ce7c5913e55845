"""Input masks and address helpers used by the partner form."""
from __future__ import annotations

import datetime as dt
import re
from typing import Dict, Optional


def digits(value: Optional[str]) -> str:
    return re.sub(r"\D", "", value or "")


def mask_phone(value: str) -> str:
    """``(DD) DDDDD-DDDD`` for mobiles, ``(DD) DDDD-DDDD`` for landlines; partial input is masked as typed."""
    d = digits(value)[:11]
    if not d:
        return ""
    if len(d) <= 2:
        return f"({d}"
    if len(d) <= 6:
        return f"({d[:2]}) {d[2:]}"
    if len(d) <= 10:
        return f"({d[:2]}) {d[2:6]}-{d[6:]}"
    return f"({d[:2]}) {d[2:7]}-{d[7:]}"


def mask_cep(value: str) -> str:
    d = digits(value)[:8]
    if len(d) <= 5:
        return d
    return f"{d[:5]}-{d[5:]}"


def mask_cnpj(value: str) -> str:
    d = digits(value)[:14]
    out = d[:2]
    if len(d) > 2:
        out += "." + d[2:5]
    if len(d) > 5:
        out += "." + d[5:8]
    if len(d) > 8:
        out += "/" + d[8:12]
    if len(d) > 12:
        out += "-" + d[12:14]
    return out


def compose_address(
    street: str,
    number: str = "",
    complement: str = "",
    neighborhood: str = "",
    city: str = "",
    state: str = "",
) -> str:
    """``Logradouro, Número[ - Complemento] - Bairro - Cidade/UF``."""
    head = ", ".join(p for p in (street.strip(), number.strip()) if p)
    parts = [head] if head else []
    if complement.strip():
        parts.append(complement.strip())
    if neighborhood.strip():
        parts.append(neighborhood.strip())
    place = "/".join(p for p in (city.strip(), state.strip()) if p)
    if place:
        parts.append(place)
    return " - ".join(parts)


def split_address(address: str) -> Dict[str, str]:
    """Best-effort inverse of ``compose_address`` for editing a stored address."""
    out = {"street": "", "number": "", "complement": "", "neighborhood": "", "city": "", "state": ""}
    segments = [s.strip() for s in (address or "").split(" - ")]
    segments = [s for s in segments if s]
    if not segments:
        return out

    head = segments.pop(0)
    street, _, number = head.partition(",")
    out["street"] = street.strip()
    out["number"] = number.strip()

    if segments and "/" in segments[-1]:
        city, _, state = segments.pop().rpartition("/")
        out["city"] = city.strip()
        out["state"] = state.strip()
    elif len(segments) >= 2:
        out["city"] = segments.pop()
    if segments:
        out["neighborhood"] = segments.pop()
    if segments:
        out["complement"] = " - ".join(segments)
    return out


def contact_urgency(next_contact: dt.date, today: Optional[dt.date] = None) -> str:
    today = today or dt.date.today()
    if next_contact == today:
        return "Hoje"
    if next_contact == today + dt.timedelta(days=1):
        return "Amanhã"
    return next_contact.strftime("%d/%m")
