from urllib.parse import parse_qs, urlparse

import pytest

from partnerhub.errors import MissingPhoneError
from partnerhub.lead_parser import ParsedLead, parse_line
from partnerhub.outreach import outreach_message, whatsapp_link
from partnerhub.prospecting import SearchKind


def _text(url):
    return parse_qs(urlparse(url).query)["text"][0]


def test_national_number_gets_country_code():
    lead = parse_line("Alfa Imóveis | Rua A, 1 - Centro - Curitiba/PR | Telefone: (41) 99999-0000")
    url = whatsapp_link(lead, SearchKind.REGION)
    assert url.startswith("https://wa.me/5541999990000?text=")
    assert "Rua A, 1 - Centro - Curitiba/PR" in _text(url)


def test_international_number_is_kept():
    lead = ParsedLead(name="Alfa", phone="+55 (41) 99999-0000")
    assert whatsapp_link(lead, SearchKind.PHONE).startswith("https://wa.me/5541999990000?")


def test_broker_message():
    lead = parse_line("João Silva - CRECI: 12345 - Atua em Curitiba - Telefone: (41) 99999-0000")
    assert "perfil profissional" in outreach_message(lead, SearchKind.BROKER)


def test_generic_message_without_address():
    lead = ParsedLead(name="Alfa", phone="(41) 3333-0000")
    assert outreach_message(lead, SearchKind.WEBSITE) == "Olá, gostaria de informações sobre parcerias."


def test_missing_phone_raises():
    with pytest.raises(MissingPhoneError):
        whatsapp_link(ParsedLead(name="Alfa"), SearchKind.REGION)
