import pytest

from partnerhub.errors import InvalidSearchRequest
from partnerhub.prospecting import (
    BROKER_LINE_FORMAT,
    COMPANY_LINE_FORMAT,
    GEO_PLACEHOLDER,
    Citation,
    GeoPoint,
    Grounding,
    OracleResult,
    SearchKind,
    SearchRequest,
    build_prompt,
    citations_by_kind,
    geo_bias_for,
    grounding_for,
)

SP = GeoPoint(-23.55, -46.63)


def test_company_searches_share_the_company_line_format():
    region = build_prompt(SearchRequest(SearchKind.REGION, "Moema"))
    by_name = build_prompt(SearchRequest(SearchKind.COMPANY_NAME, "Lopes"))
    assert COMPANY_LINE_FORMAT in region and '"Moema"' in region
    assert COMPANY_LINE_FORMAT in by_name and '"Lopes"' in by_name
    assert region != by_name


def test_broker_prompt_asks_for_creci():
    prompt = build_prompt(SearchRequest(SearchKind.BROKER, "Curitiba"))
    assert BROKER_LINE_FORMAT in prompt
    assert "Curitiba" in prompt


def test_phone_prompt_echoes_the_number():
    prompt = build_prompt(SearchRequest(SearchKind.PHONE, "(11) 98888-7777"))
    assert prompt.count("(11) 98888-7777") == 2


@pytest.mark.parametrize("kind,needle", [(SearchKind.EMAIL, "e-mail"), (SearchKind.WEBSITE, "website")])
def test_reverse_lookup_prompts(kind, needle):
    prompt = build_prompt(SearchRequest(kind, "contato@alfa.com.br" if kind == SearchKind.EMAIL else "alfa.com.br"))
    assert needle in prompt


def test_region_without_text_uses_geo_placeholder():
    prompt = build_prompt(SearchRequest(SearchKind.REGION, "  ", geo=SP))
    assert f'"{GEO_PLACEHOLDER}"' in prompt


@pytest.mark.parametrize(
    "request_",
    [
        SearchRequest(SearchKind.REGION, ""),
        SearchRequest(SearchKind.COMPANY_NAME, "", geo=SP),
        SearchRequest(SearchKind.BROKER, "   ", geo=SP),
    ],
)
def test_empty_query_is_rejected(request_):
    with pytest.raises(InvalidSearchRequest):
        build_prompt(request_)


def test_grounding_per_kind():
    assert grounding_for(SearchKind.REGION) == Grounding.MAPS
    assert grounding_for(SearchKind.COMPANY_NAME) == Grounding.MAPS
    for kind in (SearchKind.BROKER, SearchKind.PHONE, SearchKind.EMAIL, SearchKind.WEBSITE):
        assert grounding_for(kind) == Grounding.WEB


def test_geo_bias_only_for_map_searches():
    assert geo_bias_for(SearchRequest(SearchKind.REGION, "x", geo=SP)) == SP
    assert geo_bias_for(SearchRequest(SearchKind.BROKER, "x", geo=SP)) is None


def test_citations_by_kind():
    result = OracleResult(
        raw_text="",
        citations=(
            Citation(Grounding.MAPS, "Alfa", "https://maps.google.com/?cid=1"),
            Citation(Grounding.WEB, "Alfa site", "https://alfa.com.br"),
        ),
    )
    assert [c.title for c in citations_by_kind(result, Grounding.MAPS)] == ["Alfa"]
    assert [c.title for c in citations_by_kind(result, Grounding.WEB)] == ["Alfa site"]
