import pytest

from partnerhub.lead_parser import (
    ADDRESS_PLACEHOLDER,
    NAME_PLACEHOLDER,
    ParsedLead,
    RegistryType,
    candidate_lines,
    classify,
    extract_leads,
    parse_line,
)
from partnerhub.prospecting import SearchKind


def test_pipe_layout_company_line():
    lead = parse_line(
        "Horizonte Imóveis | Av. Paulista, 1000 - Bela Vista - SP | Telefone: (11) 98888-7777 | Website: horizonte.com"
    )
    assert lead.name == "Horizonte Imóveis"
    assert lead.address == "Av. Paulista, 1000 - Bela Vista - SP"
    assert lead.phone == "(11) 98888-7777"
    assert lead.website == "horizonte.com"
    assert lead.registry_type == RegistryType.COMPANY
    assert lead.registry_number == ""


def test_legacy_layout_broker_line():
    lead = parse_line("João Silva - CRECI: 12345 - Atua em Curitiba - Telefone: (41) 99999-0000")
    assert lead.registry_number == "12345"
    assert lead.registry_type == RegistryType.INDIVIDUAL
    assert lead.name == "João Silva"
    assert lead.address == "Atua em Curitiba"
    assert lead.phone == "(41) 99999-0000"


def test_short_line_without_delimiter_is_not_a_candidate():
    text = "Curto demais\nHorizonte Imóveis | Rua A, 1 - Centro - SP | Telefone: (11) 3333-4444"
    lines = candidate_lines(text)
    assert lines == ["Horizonte Imóveis | Rua A, 1 - Centro - SP | Telefone: (11) 3333-4444"]
    assert len(extract_leads(text)) == 1


def test_long_line_without_delimiter_is_not_a_candidate():
    assert candidate_lines("Aqui estão as imobiliárias encontradas na região") == []


@pytest.mark.parametrize("value", ["N/A", "n/a", "N/d", "n/D"])
def test_website_placeholder_is_dropped(value):
    lead = parse_line(f"Imob X | Rua A, 10 - Centro - Rio/RJ | Telefone: (21) 3333-4444 | Website: {value}")
    assert lead.website is None
    assert lead.address == "Rua A, 10 - Centro - Rio/RJ"


def test_list_markers_and_bold_are_removed():
    lead = parse_line("1. **Imob Y** - Rua B, 20 - Centro - Santos/SP - Telefone: (13) 3222-1111")
    assert lead.name == "Imob Y"
    assert lead.address == "Rua B, 20 - Centro - Santos/SP"
    assert lead.phone == "(13) 3222-1111"


def test_bullet_marker_is_removed():
    lead = parse_line("* Casa Nova Imóveis | Rua D, 3 - Centro - Campinas/SP")
    assert lead.name == "Casa Nova Imóveis"


def test_labels_are_stripped():
    lead = parse_line("Nome: Imob Z | Endereço: Rua C, 5 - Centro - Recife/PE | Telefone: (81) 3456-7890")
    assert lead.name == "Imob Z"
    assert lead.address == "Rua C, 5 - Centro - Recife/PE"


def test_comma_layout_splits_after_long_name():
    lead = parse_line("Imobiliária Central, Rua das Flores 100")
    assert lead.name == "Imobiliária Central"
    assert lead.address == "Rua das Flores 100"


def test_name_only_line_gets_address_placeholder():
    lead = parse_line("Imobiliária Sem Endereço")
    assert lead.name == "Imobiliária Sem Endereço"
    assert lead.address == ADDRESS_PLACEHOLDER
    assert not lead.has_address


@pytest.mark.parametrize(
    "line",
    ["", "   ", "|||", "- - -", "Telefone: (11) 98888-7777", "**", "1.", "CRECI 123", ":::::", "\t|\t", "🏠 | 🏢"],
)
def test_parse_line_is_total(line):
    lead = parse_line(line)
    assert isinstance(lead, ParsedLead)
    assert lead.name
    assert lead.address


def test_phone_only_line_falls_back_to_placeholders():
    lead = parse_line("Telefone: (11) 98888-7777")
    assert lead.name == NAME_PLACEHOLDER
    assert lead.address == ADDRESS_PLACEHOLDER
    assert lead.phone == "(11) 98888-7777"


def test_extract_leads_over_model_prose():
    raw = "\n".join(
        [
            "Encontrei as seguintes imobiliárias",
            "",
            "1. Alfa Imóveis | Rua A, 1 - Centro - Curitiba/PR | Telefone: (41) 3333-0001 | Website: alfa.com.br",
            "2. Beta Imóveis | Rua B, 2 - Batel - Curitiba/PR | Telefone: (41) 3333-0002 | Website: N/A",
            "Espero ter ajudado!",
        ]
    )
    leads = extract_leads(raw)
    assert [lead.name for lead in leads] == ["Alfa Imóveis", "Beta Imóveis"]
    assert leads[0].website == "alfa.com.br"
    assert leads[1].website is None


def test_classify_rules():
    company = parse_line("Alfa Imóveis | Rua A, 1 - Centro - Curitiba/PR")
    assert classify(company, SearchKind.REGION) == RegistryType.COMPANY
    assert classify(company, SearchKind.BROKER) == RegistryType.INDIVIDUAL

    named_broker = parse_line("Pedro Corretor Autônomo | Centro - Curitiba/PR")
    assert classify(named_broker, SearchKind.WEBSITE) == RegistryType.INDIVIDUAL

    with_creci = parse_line("Ana Souza | Centro - Curitiba/PR | CRECI: 555")
    assert classify(with_creci, SearchKind.PHONE) == RegistryType.INDIVIDUAL
